"""Class-to-object transform stages: import ledger, extractor and synthesizer."""

from __future__ import annotations

from .extractor import ClassExtractor, extract
from .imports import (
    apply_import_edit,
    collapse_decorator_imports,
    default_import_name,
    ensure_import,
    parse_imports,
)
from .synthesizer import ObjectSynthesizer, classify_type, synthesize

__all__ = [
    "ClassExtractor",
    "ObjectSynthesizer",
    "apply_import_edit",
    "classify_type",
    "collapse_decorator_imports",
    "default_import_name",
    "ensure_import",
    "extract",
    "parse_imports",
    "synthesize",
]
