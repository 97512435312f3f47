"""Fixed-style reformatting applied once a transform has finished."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

from tree_sitter import Node

from .source import SourceFile, iter_leaves


class QuoteKind(str, Enum):
    SINGLE = "'"
    DOUBLE = '"'


class NewLineKind(str, Enum):
    LF = "\n"
    CRLF = "\r\n"


@dataclass(frozen=True)
class FormatSettings:
    """Style applied to emitted code and to the final reformat."""

    indent_width: int = 2
    use_tabs: bool = False
    quote: QuoteKind = QuoteKind.SINGLE
    newline: NewLineKind = NewLineKind.LF
    trailing_commas: bool = False
    brace_padding: bool = True

    @property
    def indent_unit(self) -> str:
        return "\t" if self.use_tabs else " " * self.indent_width

    def quoted(self, value: str) -> str:
        mark = self.quote.value
        escaped = value.replace("\\", "\\\\").replace(mark, f"\\{mark}")
        return f"{mark}{escaped}{mark}"


# Nodes whose contents sit one level deeper than the row they start on.
_INDENTING = frozenset(
    {
        "arguments",
        "array",
        "array_pattern",
        "arrow_function",
        "assignment_expression",
        "augmented_assignment_expression",
        "binary_expression",
        "call_expression",
        "class_body",
        "enum_body",
        "export_clause",
        "formal_parameters",
        "interface_body",
        "member_expression",
        "named_imports",
        "new_expression",
        "object",
        "object_pattern",
        "object_type",
        "pair",
        "parenthesized_expression",
        "statement_block",
        "switch_body",
        "switch_case",
        "switch_default",
        "ternary_expression",
        "tuple_type",
        "type_alias_declaration",
        "type_arguments",
        "type_parameters",
        "union_type",
        "variable_declarator",
    }
)
_LOOPS = frozenset({"for_statement", "for_in_statement", "while_statement", "do_statement"})
_CLOSERS = frozenset({"}", ")", "]"})
_MULTILINE_LITERALS = frozenset({"string", "template_string"})


def format_source(source: SourceFile, settings: FormatSettings) -> None:
    """Reformat ``source`` in place."""
    normalized = source.text.replace("\r\n", "\n").replace("\r", "\n")
    if normalized != source.text:
        source.set_text(normalized)

    edits = _token_edits(source, settings)
    if edits:
        data = source.data
        for start, end, replacement in sorted(edits, reverse=True):
            data = data[:start] + replacement + data[end:]
        source.set_text(data.decode("utf-8"))

    lines = _reindent(source, settings)
    source.set_text(settings.newline.value.join(lines))


def format_text(text: str, settings: Optional[FormatSettings] = None) -> str:
    source = SourceFile(text)
    format_source(source, settings or FormatSettings())
    return source.text


def _walk(node: Node) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _token_edits(source: SourceFile, settings: FormatSettings) -> List[Tuple[int, int, bytes]]:
    data = source.data
    edits: Dict[Tuple[int, int], bytes] = {}

    for node in _walk(source.root):
        if node.type == "string":
            replacement = _requote(source.node_text(node), settings.quote.value)
            if replacement is not None:
                edits[(node.start_byte, node.end_byte)] = replacement.encode("utf-8")

    if settings.brace_padding:
        leaves = [leaf for leaf in iter_leaves(source.root) if leaf.end_byte > leaf.start_byte]
        position = {(leaf.start_byte, leaf.type): index for index, leaf in enumerate(leaves)}
        for index, leaf in enumerate(leaves):
            if leaf.type != "{" or leaf.parent is None:
                continue
            closing = leaf.parent.children[-1]
            if closing.type != "}" or closing.start_point[0] != leaf.start_point[0]:
                continue
            close_index = position.get((closing.start_byte, closing.type))
            if close_index is None or close_index == index + 1:
                continue
            for left, right in ((leaf, leaves[index + 1]), (leaves[close_index - 1], closing)):
                gap = data[left.end_byte : right.start_byte]
                if gap != b" " and not gap.strip():
                    edits[(left.end_byte, right.start_byte)] = b" "

    return [(start, end, replacement) for (start, end), replacement in edits.items()]


def _requote(text: str, mark: str) -> Optional[str]:
    if len(text) < 2 or text[0] == mark or text[0] not in "'\"":
        return None
    inner = text[1:-1]
    if "'" in inner or '"' in inner or "\\" in inner:
        return None
    return f"{mark}{inner}{mark}"


def _reindent(source: SourceFile, settings: FormatSettings) -> List[str]:
    verbatim: Set[int] = set()
    literal_starts: Set[int] = set()
    comment_rows: Dict[int, int] = {}
    for node in _walk(source.root):
        start_row, end_row = node.start_point[0], node.end_point[0]
        if end_row <= start_row:
            continue
        if node.type in _MULTILINE_LITERALS:
            literal_starts.add(start_row)
            verbatim.update(range(start_row + 1, end_row + 1))
        elif node.type == "comment":
            for row in range(start_row + 1, end_row + 1):
                comment_rows[row] = start_row

    first_token: Dict[int, Node] = {}
    for leaf in iter_leaves(source.root):
        if leaf.end_byte > leaf.start_byte:
            first_token.setdefault(leaf.start_point[0], leaf)

    unit = settings.indent_unit
    indents: Dict[int, str] = {}
    lines: List[str] = []
    for row, raw in enumerate(source.data.split(b"\n")):
        line = raw.decode("utf-8")
        if row in verbatim:
            lines.append(line)
            continue
        if row not in literal_starts:
            line = line.rstrip()
        stripped = line.lstrip()
        if not stripped:
            lines.append("")
            continue
        if row in comment_rows:
            base = indents.get(comment_rows[row], "")
            lines.append(f"{base} {stripped}" if stripped.startswith("*") else line)
            continue
        token = first_token.get(row)
        if token is None:
            lines.append(line)
            continue
        prefix = unit * _indent_level(token, row)
        indents[row] = prefix
        lines.append(prefix + stripped)
    return lines


def _indent_level(token: Node, row: int) -> int:
    excluded: Set[int] = set()
    if token.type in _CLOSERS and token.parent is not None:
        excluded.add(token.parent.start_point[0])

    rows: Set[int] = set()
    node = token
    while node.parent is not None:
        parent = node.parent
        parent_row = parent.start_point[0]
        if parent_row < row and (parent.type in _INDENTING or _is_unbraced_body(parent, node)):
            rows.add(parent_row)
        node = parent
    return len(rows - excluded)


def _is_unbraced_body(parent: Node, node: Node) -> bool:
    if node.type == "statement_block":
        return False
    if parent.type == "else_clause":
        return node.is_named
    if parent.type == "if_statement":
        return node == parent.child_by_field_name("consequence")
    if parent.type in _LOOPS:
        return node == parent.child_by_field_name("body")
    return False


__all__ = ["FormatSettings", "NewLineKind", "QuoteKind", "format_source", "format_text"]
