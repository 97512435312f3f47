"""In-memory TypeScript source file backed by a tree-sitter syntax tree."""

from __future__ import annotations

from typing import Iterator, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())


def create_parser() -> Parser:
    """Return a fresh parser; parsers are not shared between source files."""
    return Parser(TYPESCRIPT)


class SourceFile:
    """Owns one source text and its syntax tree.

    Edits are byte-range replacements followed by a full reparse, so node
    references obtained before an edit must not be used after it.
    """

    def __init__(self, text: str, path: Optional[str] = None) -> None:
        self.path = path
        self._parser = create_parser()
        self._data = text.encode("utf-8")
        self._tree: Tree = self._parser.parse(self._data)

    @property
    def text(self) -> str:
        return self._data.decode("utf-8")

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def root(self) -> Node:
        return self._tree.root_node

    @property
    def has_error(self) -> bool:
        return self.root.has_error

    def node_text(self, node: Node) -> str:
        return self._data[node.start_byte : node.end_byte].decode("utf-8")

    def slice(self, start: int, end: int) -> str:
        return self._data[start:end].decode("utf-8")

    def set_text(self, text: str) -> None:
        self._data = text.encode("utf-8")
        self._tree = self._parser.parse(self._data)

    def replace(self, start: int, end: int, text: str) -> None:
        """Replace the byte range ``[start, end)`` with ``text`` and reparse."""
        self._data = self._data[:start] + text.encode("utf-8") + self._data[end:]
        self._tree = self._parser.parse(self._data)

    def insert(self, offset: int, text: str) -> None:
        self.replace(offset, offset, text)

    def remove_span(self, start: int, end: int) -> None:
        """Delete a statement span together with the line break that ends it."""
        while end < len(self._data) and self._data[end : end + 1] in (b" ", b"\t"):
            end += 1
        if self._data[end : end + 2] == b"\r\n":
            end += 2
        elif self._data[end : end + 1] == b"\n":
            end += 1
        self.replace(start, end, "")


def iter_leaves(node: Node) -> Iterator[Node]:
    """Yield the tokens under ``node`` in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.child_count == 0:
            yield current
            continue
        stack.extend(reversed(current.children))


def line_of(node: Node) -> int:
    """One-based line number of ``node``."""
    return node.start_point[0] + 1


__all__ = ["SourceFile", "create_parser", "iter_leaves", "line_of", "TYPESCRIPT"]
