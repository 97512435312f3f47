"""Tests for the tree-backed source file."""

from __future__ import annotations

from declassify.source import SourceFile, iter_leaves, line_of


def test_replace_reparses_the_tree() -> None:
    source = SourceFile("const a = 1;\n")
    source.replace(6, 7, "renamed")

    assert source.text == "const renamed = 1;\n"
    declarator = source.root.named_children[0].named_children[0]
    assert source.node_text(declarator.child_by_field_name("name")) == "renamed"


def test_offsets_are_bytes_not_characters() -> None:
    source = SourceFile("const s = 'é'; const b = 2;\n")
    second = source.root.named_children[1]
    assert source.node_text(second) == "const b = 2;"


def test_remove_span_drops_trailing_line_break() -> None:
    source = SourceFile("import a from 'a';  \nimport b from 'b';\n")
    first = source.root.named_children[0]
    source.remove_span(first.start_byte, first.end_byte)
    assert source.text == "import b from 'b';\n"


def test_has_error_flags_unparseable_text() -> None:
    assert SourceFile("const = ;").has_error is True
    assert SourceFile("const a = 1;").has_error is False


def test_iter_leaves_and_line_of() -> None:
    source = SourceFile("let a\nlet b\n")
    tokens = [source.node_text(leaf) for leaf in iter_leaves(source.root) if leaf.end_byte > leaf.start_byte]
    assert tokens == ["let", "a", "let", "b"]
    assert [line_of(node) for node in source.root.named_children] == [1, 2]
