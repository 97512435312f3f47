from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from declassify.pipeline import declassify_text
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def convert() -> Callable[..., str]:
    """Run the full pipeline over a dedented, trimmed TypeScript snippet."""

    def _convert(source: str, **kwargs: object) -> str:
        return declassify_text(textwrap.dedent(source).strip(), **kwargs)  # type: ignore[arg-type]

    return _convert
