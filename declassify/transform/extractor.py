"""Extracts the decorated component class into an intermediate representation."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from tree_sitter import Node

from ..config import ConventionConfig
from ..logging import get_logger, log_diagnostic
from ..models import (
    AccessorMember,
    ComponentIR,
    ConfigEntry,
    DeclaredType,
    Diagnostic,
    ExportKind,
    InputField,
    MalformedComponentError,
    Member,
    MethodMember,
    Severity,
    StateField,
)
from ..source import SourceFile, line_of

logger = get_logger("extractor")

# Methods that map onto top-level component options instead of `methods`.
VUE_HOOKS = frozenset(
    {
        "data",
        "render",
        "beforeCreate",
        "created",
        "beforeMount",
        "mounted",
        "beforeUpdate",
        "updated",
        "activated",
        "deactivated",
        "beforeDestroy",
        "destroyed",
        "errorCaptured",
        "serverPrefetch",
        "beforeRouteEnter",
        "beforeRouteUpdate",
        "beforeRouteLeave",
    }
)

_CLASS_ONLY_MODIFIERS = frozenset(
    {"decorator", "accessibility_modifier", "override_modifier", "static", "readonly", "comment"}
)
_TYPE_ONLY_MEMBERS = frozenset({"method_signature", "abstract_method_signature", "index_signature"})

class ClassExtractor:
    """Finds the first `@Component` class in a file and partitions its members."""

    def __init__(self, conventions: ConventionConfig | None = None) -> None:
        self.conventions = conventions or ConventionConfig()

    def extract(self, source: SourceFile) -> Optional[ComponentIR]:
        candidates: List[Tuple[Node, Node, Node]] = []
        for statement in source.root.named_children:
            declaration = _class_of(statement)
            if declaration is None:
                continue
            decorator = self._component_decorator(source, statement, declaration)
            if decorator is not None:
                candidates.append((statement, declaration, decorator))

        if not candidates:
            return None

        statement, declaration, decorator = candidates[0]
        component = self._build(source, statement, declaration, decorator)
        for _, extra, _ in candidates[1:]:
            name_node = extra.child_by_field_name("name")
            name = source.node_text(name_node) if name_node is not None else "<anonymous>"
            _report(
                component,
                "multiple-components",
                f"Only the first decorated class is converted; '{name}' was left untouched",
                extra,
            )
        return component

    def _component_decorator(
        self, source: SourceFile, statement: Node, declaration: Node
    ) -> Optional[Node]:
        decorators = _decorators_of(statement)
        if declaration != statement:
            decorators += _decorators_of(declaration)
        for decorator in decorators:
            name, _ = _decorator_parts(source, decorator)
            if name in self.conventions.component_decorators:
                return decorator
        return None

    def _build(
        self, source: SourceFile, statement: Node, declaration: Node, decorator: Node
    ) -> ComponentIR:
        name_node = declaration.child_by_field_name("name")
        name = source.node_text(name_node) if name_node is not None else _fallback_name(source)

        if statement.type == "export_statement":
            is_default = any(child.type == "default" for child in statement.children)
            export_kind = ExportKind.DEFAULT if is_default else ExportKind.NAMED
        else:
            export_kind = ExportKind.NONE

        start_byte = statement.start_byte
        docs = None
        leading = statement.prev_sibling
        if leading is not None and _is_jsdoc(source, leading):
            gap = source.slice(leading.end_byte, statement.start_byte)
            if not gap.strip() and gap.count("\n") <= 1:
                docs = source.node_text(leading)
                start_byte = leading.start_byte

        component = ComponentIR(
            name=name,
            start_byte=start_byte,
            end_byte=statement.end_byte,
            export_kind=export_kind,
            docs=docs,
            decorator_config=self._decorator_config(source, decorator),
        )
        if name_node is None:
            _report(
                component,
                "anonymous-component",
                f"Anonymous component class was named '{name}'",
                declaration,
            )

        body = declaration.child_by_field_name("body")
        if body is not None:
            self._collect_members(source, body, component)

        logger.debug(
            "Extracted component %s: %d prop(s), %d data field(s), %d method(s)",
            component.name,
            len(component.inputs),
            len(component.state),
            len(component.methods) + len(component.hooks),
        )
        return component

    def _decorator_config(self, source: SourceFile, decorator: Node) -> Optional[List[ConfigEntry]]:
        name, arguments = _decorator_parts(source, decorator)
        if arguments is None:
            return None
        if not arguments:
            return []
        if len(arguments) > 1 or arguments[0].type != "object":
            raise MalformedComponentError(
                Diagnostic(
                    code="malformed-component-config",
                    message=(
                        f"@{name} expects a single object literal argument, "
                        f"got '{source.node_text(arguments[0])}'"
                    ),
                    severity=Severity.ERROR,
                    line=line_of(decorator),
                )
            )
        return object_entries(source, arguments[0])

    def _collect_members(self, source: SourceFile, body: Node, component: ComponentIR) -> None:
        pending_comments: List[Node] = []
        pending_decorators: List[Node] = []
        accessors: Dict[str, AccessorMember] = {}
        previous: Optional[Member] = None
        previous_row = -1

        for member in body.named_children:
            if member.type == "comment":
                if member.start_point[0] != previous_row:
                    pending_comments.append(member)
                elif previous is not None:
                    previous.trailing_comments.append(source.node_text(member))
                else:
                    _drop_comments(source, component, [member])
                continue
            if member.type == "decorator":
                pending_decorators.append(member)
                continue

            decorators = pending_decorators + _decorators_of(member)
            docs, comments = _split_comments(source, pending_comments)
            leading, pending_comments, pending_decorators = pending_comments, [], []

            previous = None
            if member.type == "public_field_definition":
                previous = self._field(source, member, decorators, docs, component)
            elif member.type == "method_definition":
                previous = self._method(source, member, decorators, docs, component, accessors)
            elif member.type not in _TYPE_ONLY_MEMBERS:
                _report(
                    component,
                    "unsupported-member",
                    f"Class member '{source.node_text(member).splitlines()[0]}' has no object-style equivalent and was dropped",
                    member,
                )
            previous_row = member.end_point[0]

            if previous is not None:
                previous.comments.extend(comments)
            else:
                _drop_comments(source, component, leading)

        _drop_comments(source, component, pending_comments)
        component.accessors.extend(accessors.values())

    def _field(
        self,
        source: SourceFile,
        member: Node,
        decorators: List[Node],
        docs: Optional[str],
        component: ComponentIR,
    ) -> Optional[Member]:
        name = source.node_text(member.child_by_field_name("name"))
        if any(child.type in ("static", "declare") for child in member.children):
            _report(component, "unsupported-member", f"Static or declared field '{name}' was dropped", member)
            return None

        prop_decorator = None
        for decorator in decorators:
            decorator_name, _ = _decorator_parts(source, decorator)
            if decorator_name in self.conventions.prop_decorators and prop_decorator is None:
                prop_decorator = decorator
            else:
                _report(
                    component,
                    "unsupported-decorator",
                    f"@{decorator_name} on field '{name}' has no object-style equivalent and was removed",
                    decorator,
                )

        annotation = next((child for child in member.children if child.type == "type_annotation"), None)
        declared_type = _declared_type(source, annotation)
        value = member.child_by_field_name("value")

        if prop_decorator is not None:
            field = InputField(
                name=name,
                declared_type=declared_type,
                docs=docs,
                optional_marker=any(child.type == "?" for child in member.children),
            )
            self._prop_options(source, prop_decorator, field)
            component.inputs.append(field)
            return field
        if value is not None:
            state = StateField(
                name=name,
                initializer=source.node_text(value),
                initializer_kind=value.type,
                declared_type=declared_type,
                docs=docs,
            )
            component.state.append(state)
            return state
        logger.debug("Skipping field '%s' without prop decorator or initializer", name)
        return None

    def _prop_options(self, source: SourceFile, decorator: Node, field: InputField) -> None:
        name, arguments = _decorator_parts(source, decorator)
        if not arguments:
            return
        argument = arguments[0]
        if len(arguments) > 1 or argument.type not in ("object", "identifier", "array", "member_expression"):
            raise MalformedComponentError(
                Diagnostic(
                    code="malformed-prop-options",
                    message=f"@{name} on '{field.name}' expects an options object or a type constructor",
                    severity=Severity.ERROR,
                    line=line_of(decorator),
                )
            )
        if argument.type != "object":
            field.type_option = source.node_text(argument)
            return

        for entry in object_entries(source, argument):
            if entry.key == "default":
                field.default = entry
            elif entry.key == "required":
                field.required = entry
            elif entry.key == "type" and entry.value is not None:
                field.type_option = entry.value
            else:
                field.extra_options.append(entry)

    def _method(
        self,
        source: SourceFile,
        member: Node,
        decorators: List[Node],
        docs: Optional[str],
        component: ComponentIR,
        accessors: Dict[str, AccessorMember],
    ) -> Optional[Member]:
        name = source.node_text(member.child_by_field_name("name"))
        if name == "constructor" or any(child.type == "static" for child in member.children):
            _report(component, "unsupported-member", f"Method '{name}' has no object-style equivalent and was dropped", member)
            return None
        for decorator in decorators:
            decorator_name, _ = _decorator_parts(source, decorator)
            _report(
                component,
                "unsupported-decorator",
                f"@{decorator_name} on method '{name}' was removed; '{name}' is kept as a plain method",
                decorator,
            )

        accessor = next((child.type for child in member.children if child.type in ("get", "set")), None)
        if accessor is not None:
            parameters = member.child_by_field_name("parameters")
            signature = source.slice(parameters.start_byte, member.end_byte)
            entry = accessors.setdefault(name, AccessorMember(name=name))
            if accessor == "get":
                entry.getter = signature
            else:
                entry.setter = signature
            entry.docs = entry.docs or docs
            return entry

        start = next(
            child.start_byte for child in member.children if child.type not in _CLASS_ONLY_MODIFIERS
        )
        method = MethodMember(name=name, text=source.slice(start, member.end_byte), docs=docs)
        if name in VUE_HOOKS:
            component.hooks.append(method)
        else:
            component.methods.append(method)
        return method


def extract(source: SourceFile, conventions: ConventionConfig | None = None) -> Optional[ComponentIR]:
    """Return the IR for the first decorated component class, or None."""
    return ClassExtractor(conventions).extract(source)


def object_entries(source: SourceFile, node: Node) -> List[ConfigEntry]:
    """Capture the members of an object literal verbatim, keeping comments attached."""
    entries: List[ConfigEntry] = []
    comments: List[str] = []
    for child in node.named_children:
        if child.type == "comment":
            comments.append(source.node_text(child))
            continue
        key: Optional[str] = None
        value: Optional[str] = None
        if child.type == "pair":
            key = _property_key(source, child.child_by_field_name("key"))
            value_node = child.child_by_field_name("value")
            value = source.node_text(value_node) if value_node is not None else None
        elif child.type == "shorthand_property_identifier":
            key = source.node_text(child)
        elif child.type == "method_definition":
            key = _property_key(source, child.child_by_field_name("name"))
        entries.append(ConfigEntry(key=key, text=source.node_text(child), value=value, comments=comments))
        comments = []
    if comments:
        entries.append(ConfigEntry(key=None, text="", comments=comments))
    return entries


def doc_text(comment: str) -> str:
    """Strip the `/** */` frame and leading `*` gutters from a JSDoc comment."""
    lines: List[str] = []
    for raw in comment[3:-2].split("\n"):
        line = raw.lstrip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        lines.append(line.rstrip())
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def _class_of(statement: Node) -> Optional[Node]:
    if statement.type == "class_declaration":
        return statement
    if statement.type == "export_statement":
        for field_name in ("declaration", "value"):
            declaration = statement.child_by_field_name(field_name)
            if declaration is not None and declaration.type in ("class_declaration", "class"):
                return declaration
    return None


def _decorators_of(node: Node) -> List[Node]:
    return [child for child in node.children if child.type == "decorator"]


def _decorator_parts(source: SourceFile, decorator: Node) -> Tuple[str, Optional[List[Node]]]:
    """Return the decorator's name and its call arguments (None when not called)."""
    expression = decorator.named_children[0]
    if expression.type == "call_expression":
        function = expression.child_by_field_name("function")
        arguments = expression.child_by_field_name("arguments")
        values = [arg for arg in arguments.named_children if arg.type != "comment"] if arguments else []
        return _simple_name(source, function), values
    return _simple_name(source, expression), None


def _simple_name(source: SourceFile, node: Node) -> str:
    if node.type == "member_expression":
        property_node = node.child_by_field_name("property")
        if property_node is not None:
            return source.node_text(property_node)
    return source.node_text(node)


def _property_key(source: SourceFile, node: Optional[Node]) -> Optional[str]:
    if node is None or node.type == "computed_property_name":
        return None
    text = source.node_text(node)
    if node.type == "string":
        return text[1:-1]
    return text


def _declared_type(source: SourceFile, annotation: Optional[Node]) -> Optional[DeclaredType]:
    if annotation is None or not annotation.named_children:
        return None
    type_node = annotation.named_children[0]
    text = source.node_text(type_node)
    while type_node.type == "parenthesized_type" and type_node.named_children:
        type_node = type_node.named_children[0]
    return DeclaredType(text=text, kind=type_node.type)


def _is_jsdoc(source: SourceFile, node: Node) -> bool:
    return node.type == "comment" and source.node_text(node).startswith("/**")


def _split_comments(source: SourceFile, nodes: List[Node]) -> Tuple[Optional[str], List[str]]:
    """Split a member's leading comments into its JSDoc text and the rest, kept verbatim."""
    docs: Optional[str] = None
    comments: List[str] = []
    for node in nodes:
        text = source.node_text(node)
        if docs is None and _is_jsdoc(source, node):
            docs = doc_text(text)
        else:
            comments.append(text)
    return docs, comments


def _drop_comments(source: SourceFile, component: ComponentIR, nodes: List[Node]) -> None:
    for node in nodes:
        first_line = source.node_text(node).splitlines()[0]
        _report(
            component,
            "dropped-comment",
            f"Comment '{first_line}' has no converted member to attach to and was dropped",
            node,
            severity=Severity.INFO,
        )


def _fallback_name(source: SourceFile) -> str:
    if source.path:
        stem = Path(source.path).name.split(".")[0]
        if stem:
            return stem
    return "AnonymousComponent"


def _report(
    component: ComponentIR,
    code: str,
    message: str,
    node: Node,
    severity: Severity = Severity.WARNING,
) -> None:
    diagnostic = Diagnostic(code=code, message=message, severity=severity, line=line_of(node))
    component.diagnostics.append(diagnostic)
    log_diagnostic(logger, diagnostic)


__all__ = ["ClassExtractor", "VUE_HOOKS", "doc_text", "extract", "object_entries"]
