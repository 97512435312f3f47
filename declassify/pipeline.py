"""Runs the class-to-object transform over one source file."""

from __future__ import annotations

from .config import ConventionConfig
from .formatting import FormatSettings, format_source
from .logging import get_logger
from .models import TransformResult
from .source import SourceFile
from .transform import ClassExtractor, ObjectSynthesizer, collapse_decorator_imports

logger = get_logger("pipeline")


def declassify(
    source: SourceFile,
    settings: FormatSettings | None = None,
    conventions: ConventionConfig | None = None,
) -> TransformResult:
    """Convert the first decorated component in ``source`` in place.

    Files without a component only have their decorator-convention imports
    collapsed and are not reformatted. Raises ``MalformedComponentError``
    before touching the file when the decorator arguments are unsupported.
    """
    settings = settings or FormatSettings()
    conventions = conventions or ConventionConfig()
    quote = settings.quote.value

    component = ClassExtractor(conventions).extract(source)
    if component is None:
        changed = collapse_decorator_imports(source, conventions, quote=quote)
        if changed:
            logger.debug("No component found in %s; collapsed decorator imports", source.path or "<memory>")
        return TransformResult(changed=changed)

    ObjectSynthesizer(settings, conventions).synthesize(source, component)
    collapse_decorator_imports(source, conventions, quote=quote)
    format_source(source, settings)
    logger.debug("Converted component %s in %s", component.name, source.path or "<memory>")
    return TransformResult(changed=True, component=component.name, diagnostics=component.diagnostics)


def declassify_text(
    text: str,
    settings: FormatSettings | None = None,
    conventions: ConventionConfig | None = None,
) -> str:
    source = SourceFile(text)
    declassify(source, settings, conventions)
    return source.text


__all__ = ["declassify", "declassify_text"]
