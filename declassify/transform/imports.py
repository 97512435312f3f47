"""Idempotent editing of a file's import statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from tree_sitter import Node

from ..config import ConventionConfig
from ..logging import get_logger
from ..models import ImportEdit
from ..source import SourceFile

logger = get_logger("imports")


@dataclass
class ImportDeclaration:
    """Parsed view of one `import ... from '<module>'` statement."""

    start_byte: int
    end_byte: int
    module: str
    module_text: str
    default: Optional[str] = None
    namespace: Optional[str] = None
    specifiers: List[str] = field(default_factory=list)
    named: List[str] = field(default_factory=list)
    type_only: bool = False
    semicolon: bool = True


def parse_imports(source: SourceFile) -> List[ImportDeclaration]:
    """Return the file's top-level import statements in source order."""
    declarations: List[ImportDeclaration] = []
    for node in source.root.named_children:
        if node.type != "import_statement":
            continue
        module_node = node.child_by_field_name("source")
        if module_node is None:
            continue
        module_text = source.node_text(module_node)
        declaration = ImportDeclaration(
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            module=module_text[1:-1],
            module_text=module_text,
            type_only=any(child.type == "type" for child in node.children),
            semicolon=node.children[-1].type == ";",
        )
        clause = next((child for child in node.named_children if child.type == "import_clause"), None)
        if clause is not None:
            _read_clause(source, clause, declaration)
        declarations.append(declaration)
    return declarations


def _read_clause(source: SourceFile, clause: Node, declaration: ImportDeclaration) -> None:
    for part in clause.named_children:
        if part.type == "identifier":
            declaration.default = source.node_text(part)
        elif part.type == "namespace_import":
            alias = next((child for child in part.named_children if child.type == "identifier"), None)
            declaration.namespace = source.node_text(alias) if alias is not None else "*"
        elif part.type == "named_imports":
            for specifier in part.named_children:
                if specifier.type != "import_specifier":
                    continue
                declaration.specifiers.append(source.node_text(specifier))
                name = specifier.child_by_field_name("name")
                declaration.named.append(source.node_text(name if name is not None else specifier))


def default_import_name(source: SourceFile, module: str) -> Optional[str]:
    """Local name of an existing value default import of ``module``, if any."""
    for declaration in parse_imports(source):
        if declaration.module == module and declaration.default and not declaration.type_only:
            return declaration.default
    return None


def ensure_import(
    source: SourceFile,
    module: str,
    *,
    default: Optional[str] = None,
    named: Iterable[str] = (),
    quote: str = "'",
) -> bool:
    """Make sure ``module`` is imported with the requested bindings.

    Existing bindings are never duplicated and unrelated imports are left
    alone. Returns True when the file changed.
    """
    declarations = [item for item in parse_imports(source) if item.module == module]
    has_default = any(item.default and not item.type_only for item in declarations)
    imported = {name for item in declarations for name in item.named}

    wanted_default = default if default and not has_default else None
    wanted_named: List[str] = []
    for name in named:
        if name not in imported and name not in wanted_named:
            wanted_named.append(name)
    if not wanted_default and not wanted_named:
        return False

    target = next(
        (item for item in declarations if not item.type_only and item.namespace is None),
        None,
    )
    if target is not None:
        statement = _render(
            wanted_default or target.default,
            target.specifiers + wanted_named,
            target.module_text,
            semicolon=target.semicolon,
        )
        source.replace(target.start_byte, target.end_byte, statement)
        logger.debug("Extended import of '%s' with %s", module, _describe(wanted_default, wanted_named))
    else:
        statement = _render(wanted_default, wanted_named, f"{quote}{module}{quote}", semicolon=True)
        _insert_statement(source, statement)
        logger.debug("Added import of '%s' with %s", module, _describe(wanted_default, wanted_named))
    return True


def apply_import_edit(source: SourceFile, edit: ImportEdit, quote: str = "'") -> bool:
    return ensure_import(
        source,
        edit.module,
        default=edit.default,
        named=sorted(edit.named),
        quote=quote,
    )


def collapse_decorator_imports(
    source: SourceFile, conventions: ConventionConfig, quote: str = "'"
) -> bool:
    """Drop imports of the decorator-convention modules in favour of one base default import."""
    modules = set(conventions.decorator_modules)
    targets = [item for item in parse_imports(source) if item.module in modules]
    if not targets:
        return False

    for declaration in reversed(targets):
        source.remove_span(declaration.start_byte, declaration.end_byte)
    logger.debug(
        "Removed %d decorator import(s) from %s",
        len(targets),
        ", ".join(sorted({item.module for item in targets})),
    )

    ensure_import(source, conventions.base_module, default=conventions.base_name, quote=quote)
    return True


def _render(
    default: Optional[str], specifiers: List[str], module_text: str, *, semicolon: bool
) -> str:
    parts: List[str] = []
    if default:
        parts.append(default)
    if specifiers:
        parts.append("{ " + ", ".join(specifiers) + " }")
    if not parts:
        statement = f"import {module_text}"
    else:
        statement = f"import {', '.join(parts)} from {module_text}"
    return statement + (";" if semicolon else "")


def _insert_statement(source: SourceFile, statement: str) -> None:
    imports = [node for node in source.root.named_children if node.type == "import_statement"]
    if imports:
        source.insert(imports[-1].end_byte, "\n" + statement)
        return

    header_end = _header_end(source)
    if header_end is not None:
        source.insert(header_end, "\n\n" + statement)
        return

    if not source.text.strip():
        source.set_text(statement + "\n")
        return
    separator = "\n" if source.text.startswith("\n") else "\n\n"
    source.insert(0, statement + separator)


def _header_end(source: SourceFile) -> Optional[int]:
    """End of a leading comment block separated from the code by a blank line."""
    children = source.root.children
    last_comment: Optional[Node] = None
    following: Optional[Node] = None
    for child in children:
        if child.type == "comment":
            last_comment = child
            continue
        following = child
        break
    if last_comment is None:
        return None
    if following is None or following.start_point[0] - last_comment.end_point[0] >= 2:
        return last_comment.end_byte
    return None


def _describe(default: Optional[str], named: List[str]) -> str:
    parts = []
    if default:
        parts.append(f"default {default}")
    if named:
        parts.append("{" + ", ".join(named) + "}")
    return " and ".join(parts)


__all__ = [
    "ImportDeclaration",
    "apply_import_edit",
    "collapse_decorator_imports",
    "default_import_name",
    "ensure_import",
    "parse_imports",
]
