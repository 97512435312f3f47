"""Builds the `Vue.extend({...})` replacement for an extracted component."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from jinja2 import Environment, FileSystemLoader

from ..config import ConventionConfig
from ..formatting import FormatSettings
from ..logging import get_logger, log_diagnostic
from ..models import (
    CastTag,
    ComponentIR,
    DeclaredType,
    Diagnostic,
    ExportKind,
    ImportEdit,
    InputField,
    Member,
    PrimitiveKind,
    PrimitiveTag,
    SynthesisError,
    TypeTag,
)
from ..source import SourceFile
from .imports import apply_import_edit, default_import_name

logger = get_logger("synthesizer")

_PRIMITIVES = {kind.value.lower(): kind for kind in PrimitiveKind}

# Initializers that must be parenthesised before an `as` assertion is appended.
_LOW_PRECEDENCE = frozenset(
    {
        "arrow_function",
        "assignment_expression",
        "augmented_assignment_expression",
        "binary_expression",
        "sequence_expression",
        "ternary_expression",
        "yield_expression",
    }
)

Item = Dict[str, object]


def classify_type(declared: DeclaredType) -> TypeTag:
    """Map a declared field type onto the runtime type tag Vue checks props against."""
    bare = declared.text.strip("() ")
    if declared.kind == "predefined_type" and bare in _PRIMITIVES:
        return PrimitiveTag(_PRIMITIVES[bare])
    return CastTag(wrapper=_wrapper_for(declared), type_text=declared.text)


def _wrapper_for(declared: DeclaredType) -> str:
    if declared.kind == "function_type" or declared.text == "Function":
        return "Function"
    if declared.kind in ("array_type", "tuple_type", "readonly_type"):
        return "Array"
    if declared.kind == "generic_type" and declared.text.startswith(("Array<", "ReadonlyArray<")):
        return "Array"
    return "Object"


def doc_comment(docs: Optional[str]) -> List[str]:
    """Rebuild a JSDoc block line by line from its text."""
    if not docs:
        return []
    lines = ["/**"]
    lines.extend(f" * {line}" if line else " *" for line in docs.split("\n"))
    lines.append(" */")
    return ["\n".join(lines)]


class ObjectSynthesizer:
    """Replaces a decorated class with an equivalent configuration object."""

    def __init__(
        self,
        settings: FormatSettings | None = None,
        conventions: ConventionConfig | None = None,
    ) -> None:
        self.settings = settings or FormatSettings()
        self.conventions = conventions or ConventionConfig()
        self._env = self._create_env()

    def synthesize(self, source: SourceFile, component: ComponentIR) -> None:
        module = self.conventions.base_module
        base_name = default_import_name(source, module) or self.conventions.base_name
        edit = ImportEdit(module=module, default=base_name)

        statement = self.render(source, component, base_name, edit)
        if SourceFile(statement).has_error:
            raise SynthesisError(f"Generated code for component '{component.name}' does not parse")

        source.replace(component.start_byte, component.end_byte, statement)
        apply_import_edit(source, edit, quote=self.settings.quote.value)
        logger.debug("Replaced class %s with %s.extend()", component.name, base_name)

    def render(
        self, source: SourceFile, component: ComponentIR, base_name: str, edit: ImportEdit
    ) -> str:
        """Render the replacement statement text, recording the imports it needs in ``edit``."""
        self._check_collisions(component)

        items: List[Item] = [self._item(f"name: {self.settings.quoted(component.name)}")]
        for entry in component.decorator_config or []:
            items.append(self._item(entry.text, entry.comments))
        if component.inputs:
            props = [self._prop(field, edit) for field in component.inputs]
            items.append(self._item(f"props: {self._object(props)}"))
        if component.state:
            items.append(self._item(self._data(component)))
        if component.accessors:
            computed = []
            for accessor in component.accessors:
                if accessor.getter is not None and accessor.setter is None:
                    text = f"{accessor.name}{accessor.getter}"
                else:
                    parts = []
                    if accessor.getter is not None:
                        parts.append(self._item(f"get{accessor.getter}"))
                    if accessor.setter is not None:
                        parts.append(self._item(f"set{accessor.setter}"))
                    text = f"{accessor.name}: {self._object(parts)}"
                computed.append(self._member_item(text, accessor))
            items.append(self._item(f"computed: {self._object(computed)}"))
        for hook in component.hooks:
            items.append(self._member_item(hook.text, hook))
        if component.methods:
            methods = [self._member_item(method.text, method) for method in component.methods]
            items.append(self._item(f"methods: {self._object(methods)}"))

        template = self._env.get_template("component.j2")
        return template.render(
            docs=component.docs,
            prefix=self._prefix(source, component),
            factory=f"{base_name}.extend",
            body=self._object(items),
        )

    def _prop(self, field: InputField, edit: ImportEdit) -> Item:
        options: List[Item] = []
        if field.type_option is not None:
            options.append(self._item(f"type: {field.type_option}"))
        elif field.declared_type is not None:
            options.append(self._item(f"type: {self._type_expression(classify_type(field.declared_type), edit)}"))
        else:
            logger.debug("Prop '%s' has no declared type; emitting it without a type tag", field.name)

        # A default value already implies the prop is optional, so `required` is dropped.
        if field.default is not None:
            options.append(self._item(field.default.text, field.default.comments))
            if field.required is not None:
                logger.debug("Prop '%s' has both default and required; keeping default", field.name)
        elif field.required is not None:
            options.append(self._item(field.required.text, field.required.comments))
        else:
            options.append(self._item("required: false"))

        for entry in field.extra_options:
            options.append(self._item(entry.text, entry.comments))
        return self._member_item(f"{field.name}: {self._object(options)}", field)

    def _type_expression(self, tag: TypeTag, edit: ImportEdit) -> str:
        if isinstance(tag, PrimitiveTag):
            return tag.kind.value
        if isinstance(tag, CastTag):
            helper = self.conventions.prop_type_helper
            edit.named.add(helper)
            return f"{tag.wrapper} as {helper}<{tag.type_text}>"
        raise TypeError(f"Unknown type tag {tag!r}")

    def _data(self, component: ComponentIR) -> str:
        entries = []
        for field in component.state:
            value = field.initializer
            if field.declared_type is not None:
                if field.initializer_kind in _LOW_PRECEDENCE:
                    value = f"({value})"
                value = f"{value} as {field.declared_type.text}"
            entries.append(self._member_item(f"{field.name}: {value}", field))
        return f"data() {{\nreturn {self._object(entries)};\n}}"

    def _prefix(self, source: SourceFile, component: ComponentIR) -> str:
        if component.export_kind is ExportKind.DEFAULT:
            return "export default "
        if component.export_kind is ExportKind.NAMED:
            return f"export const {component.name} = "
        if _has_other_default_export(source, component):
            return f"const {component.name} = "
        return "export default "

    def _check_collisions(self, component: ComponentIR) -> None:
        keys: List[str] = ["name"]
        keys.extend(entry.key for entry in component.decorator_config or [] if entry.key)
        if component.inputs:
            keys.append("props")
        if component.state:
            keys.append("data")
        if component.accessors:
            keys.append("computed")
        keys.extend(hook.name for hook in component.hooks)
        if component.methods:
            keys.append("methods")

        for key, count in Counter(keys).items():
            if count < 2:
                continue
            diagnostic = Diagnostic(
                code="duplicate-key",
                message=f"Component '{component.name}' ends up with {count} '{key}' entries; both are kept",
            )
            component.diagnostics.append(diagnostic)
            log_diagnostic(logger, diagnostic)

    def _object(self, items: List[Item]) -> str:
        if not items:
            return "{}"
        code = [index for index, item in enumerate(items) if item["text"]]
        last = code[-1] if code else -1
        for index in code:
            items[index]["comma"] = index != last or self.settings.trailing_commas
        return self._env.get_template("object.j2").render(items=items)

    @staticmethod
    def _item(text: str, comments: Iterable[str] = (), trailing: Iterable[str] = ()) -> Item:
        suffix = "".join(f" {comment}" for comment in trailing)
        return {"text": text, "comments": list(comments), "comma": False, "suffix": suffix}

    def _member_item(self, text: str, member: Member) -> Item:
        """Item for a class member, carrying its docs and the comments that surrounded it."""
        return self._item(text, doc_comment(member.docs) + member.comments, member.trailing_comments)

    @staticmethod
    def _create_env() -> Environment:
        loader = FileSystemLoader(str(Path(__file__).with_name("templates")))
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def _has_other_default_export(source: SourceFile, component: ComponentIR) -> bool:
    for statement in source.root.named_children:
        if statement.start_byte >= component.start_byte and statement.end_byte <= component.end_byte:
            continue
        if statement.type == "export_statement" and any(
            child.type == "default" for child in statement.children
        ):
            return True
    return False


def synthesize(
    source: SourceFile,
    component: ComponentIR,
    settings: FormatSettings | None = None,
    conventions: ConventionConfig | None = None,
) -> None:
    """Swap the component's class declaration for its object-based equivalent."""
    ObjectSynthesizer(settings, conventions).synthesize(source, component)


__all__ = ["ObjectSynthesizer", "classify_type", "doc_comment", "synthesize"]
