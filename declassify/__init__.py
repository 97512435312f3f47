"""Convert decorator-based Vue class components into `Vue.extend()` objects."""

from .formatting import FormatSettings
from .models import DeclassifyError, MalformedComponentError, SynthesisError, TransformResult
from .pipeline import declassify, declassify_text
from .source import SourceFile

__all__ = [
    "DeclassifyError",
    "FormatSettings",
    "MalformedComponentError",
    "SourceFile",
    "SynthesisError",
    "TransformResult",
    "declassify",
    "declassify_text",
]
