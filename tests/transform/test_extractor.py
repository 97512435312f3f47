"""Tests for the class component extractor."""

from __future__ import annotations

import textwrap

import pytest

from declassify.config import ConventionConfig
from declassify.models import ExportKind, MalformedComponentError, Severity
from declassify.source import SourceFile
from declassify.transform.extractor import ClassExtractor, doc_text, extract


def _extract(text: str):
    return extract(SourceFile(textwrap.dedent(text).strip()))


def test_extract_returns_none_without_decorated_class() -> None:
    assert _extract("export default class Plain extends Vue {}") is None


def test_extract_bare_decorator_has_no_config() -> None:
    component = _extract(
        """
        @Component
        export default class Widget extends Vue {}
        """
    )
    assert component is not None
    assert component.name == "Widget"
    assert component.export_kind is ExportKind.DEFAULT
    assert component.decorator_config is None
    assert component.start_byte == 0


def test_extract_empty_call_yields_empty_config() -> None:
    component = _extract(
        """
        @Component()
        export class Widget extends Vue {}
        """
    )
    assert component.decorator_config == []
    assert component.export_kind is ExportKind.NAMED


def test_extract_keeps_config_entries_in_order() -> None:
    component = _extract(
        """
        @Component({
          // children
          components: { Other },
          mixins: [shared],
          watch: { value() {} },
        })
        class Widget extends Vue {}
        """
    )
    entries = component.decorator_config
    assert [entry.key for entry in entries] == ["components", "mixins", "watch"]
    assert entries[0].text == "components: { Other }"
    assert entries[0].comments == ["// children"]
    assert component.export_kind is ExportKind.NONE


def test_extract_rejects_non_object_component_config() -> None:
    with pytest.raises(MalformedComponentError) as excinfo:
        _extract(
            """
            @Component(options)
            export default class Widget extends Vue {}
            """
        )
    assert excinfo.value.diagnostic.code == "malformed-component-config"
    assert excinfo.value.diagnostic.line == 1


def test_extract_reads_prop_options() -> None:
    component = _extract(
        """
        @Component
        export default class Widget extends Vue {
          @Prop({ default: 'x', required: true, validator: isSize })
          size!: string

          @Prop(Number)
          count?: number

          @Prop()
          label?: string
        }
        """
    )
    size, count, label = component.inputs

    assert size.default.text == "default: 'x'"
    assert size.required.text == "required: true"
    assert [entry.text for entry in size.extra_options] == ["validator: isSize"]
    assert size.declared_type.text == "string"
    assert size.declared_type.kind == "predefined_type"
    assert count.type_option == "Number"
    assert count.optional_marker is True
    assert label.default is None and label.required is None


def test_extract_rejects_unsupported_prop_argument() -> None:
    with pytest.raises(MalformedComponentError) as excinfo:
        _extract(
            """
            @Component
            export default class Widget extends Vue {
              @Prop('oops')
              label!: string
            }
            """
        )
    assert excinfo.value.diagnostic.code == "malformed-prop-options"


def test_extract_partitions_state_fields() -> None:
    component = _extract(
        """
        @Component
        export default class Widget extends Vue {
          /** How many clicks. */
          count = 0
          label: string = 'x'
          pending!: boolean
        }
        """
    )
    assert [field.name for field in component.state] == ["count", "label"]
    count, label = component.state
    assert count.docs == "How many clicks."
    assert count.declared_type is None
    assert count.initializer_kind == "number"
    assert label.declared_type.text == "string"
    assert label.initializer == "'x'"


def test_extract_partitions_methods_hooks_and_accessors() -> None:
    component = _extract(
        """
        @Component
        export default class Widget extends Vue {
          get total(): number {
            return 1
          }

          set total(value: number) {}

          mounted() {}

          private async load(): Promise<void> {}
        }
        """
    )
    (accessor,) = component.accessors
    assert accessor.name == "total"
    assert accessor.getter.startswith("(): number {")
    assert accessor.setter == "(value: number) {}"
    assert [hook.name for hook in component.hooks] == ["mounted"]
    assert [method.text for method in component.methods] == ["async load(): Promise<void> {}"]


def test_extract_reports_unsupported_method_decorator() -> None:
    component = _extract(
        """
        @Component
        export default class Widget extends Vue {
          @Watch('value')
          onValue() {}
        }
        """
    )
    assert [method.name for method in component.methods] == ["onValue"]
    assert [diagnostic.code for diagnostic in component.diagnostics] == ["unsupported-decorator"]


def test_extract_converts_first_component_and_warns_about_rest() -> None:
    component = _extract(
        """
        @Component
        export default class First extends Vue {}

        @Component
        export class Second extends Vue {}
        """
    )
    assert component.name == "First"
    (diagnostic,) = component.diagnostics
    assert diagnostic.code == "multiple-components"
    assert "Second" in diagnostic.message


def test_extract_includes_class_docs_in_replaced_range() -> None:
    text = "import Vue from 'vue'\n\n/** The widget. */\n@Component\nexport default class Widget extends Vue {}"
    component = extract(SourceFile(text))
    assert component.docs == "/** The widget. */"
    assert component.start_byte == text.index("/**")
    assert component.end_byte == len(text)


def test_extract_honours_custom_decorator_names() -> None:
    conventions = ConventionConfig(component_decorators=("Options",))
    source = SourceFile("@Options\nexport default class Widget extends Vue {}")
    assert ClassExtractor(conventions).extract(source).name == "Widget"
    assert extract(source) is None


def test_doc_text_strips_comment_frame() -> None:
    assert doc_text("/**\n   * First line.\n   *\n   * Second.\n   */") == "First line.\n\nSecond."
    assert doc_text("/** Single. */") == "Single."


def test_extract_keeps_initialised_fields_with_other_decorators_as_state() -> None:
    component = _extract(
        """
        @Component
        export default class Themed extends Vue {
          @Provide() theme = 'dark'
          @Inject() injected!: Store
          count = 0
        }
        """
    )
    assert [field.name for field in component.state] == ["theme", "count"]
    assert component.state[0].initializer == "'dark'"
    assert [diagnostic.code for diagnostic in component.diagnostics] == [
        "unsupported-decorator",
        "unsupported-decorator",
    ]


def test_extract_names_anonymous_component_after_file() -> None:
    source = SourceFile("@Component\nexport default class extends Vue {}", path="src/FancyButton.ts")
    component = extract(source)

    assert component.name == "FancyButton"
    assert component.export_kind is ExportKind.DEFAULT
    assert [diagnostic.code for diagnostic in component.diagnostics] == ["anonymous-component"]

    in_memory = extract(SourceFile("@Component\nexport default class extends Vue {}"))
    assert in_memory.name == "AnonymousComponent"


def test_extract_attaches_class_body_comments_to_members() -> None:
    component = _extract(
        """
        @Component
        export default class Notes extends Vue {
          // Heading text.
          /** Title doc. */
          title = 'Notes' // inline
          skipped!: string
          // dangling
        }
        """
    )
    (title,) = component.state
    assert title.docs == "Title doc."
    assert title.comments == ["// Heading text."]
    assert title.trailing_comments == ["// inline"]

    (dropped,) = component.diagnostics
    assert dropped.code == "dropped-comment"
    assert dropped.severity is Severity.INFO
    assert dropped.line == 7


def test_extract_reports_comments_above_dropped_members() -> None:
    component = _extract(
        """
        @Component
        export default class Notes extends Vue {
          /* legacy */
          static version = 1
        }
        """
    )
    assert component.state == []
    assert [diagnostic.code for diagnostic in component.diagnostics] == [
        "unsupported-member",
        "dropped-comment",
    ]
