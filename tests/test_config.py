"""Tests for declassify.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from declassify.config import ConfigError, ConventionConfig, DeclassifyConfig, load_config
from declassify.formatting import FormatSettings, NewLineKind, QuoteKind


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, DeclassifyConfig)
    assert config.root == tmp_path.resolve()
    assert config.format == FormatSettings()
    assert config.conventions == ConventionConfig()
    assert config.include == ["*.ts"]
    assert config.exclude_paths == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".declassify.yml"
    config_file.write_text(
        """
format:
  indent_width: 4
  quote: double
  newline: crlf
  trailing_commas: true
  brace_padding: "no"
conventions:
  component_decorators: [Component, Options]
  base_module: "@vue/runtime"
  base_name: Base
include:
  - "*.ts"
  - "*.tsx"
exclude_paths:
  - "legacy/"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.format == FormatSettings(
        indent_width=4,
        quote=QuoteKind.DOUBLE,
        newline=NewLineKind.CRLF,
        trailing_commas=True,
        brace_padding=False,
    )
    assert config.conventions.component_decorators == ("Component", "Options")
    assert config.conventions.prop_decorators == ("Prop",)
    assert config.conventions.base_module == "@vue/runtime"
    assert config.conventions.base_name == "Base"
    assert config.include == ["*.ts", "*.tsx"]
    assert config.exclude_paths == ["legacy/"]


def test_load_config_accepts_directory_path(tmp_path: Path) -> None:
    (tmp_path / ".declassify.yml").write_text("format:\n  use_tabs: true\n", encoding="utf-8")
    assert load_config(tmp_path).format.use_tabs is True


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".declassify.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path).format == FormatSettings()


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "format:\n  quote: backtick\n",
        "format:\n  newline: cr\n",
        "format:\n  indent_width: 0\n",
        "format: [unclosed\n",
    ],
)
def test_load_config_rejects_invalid_content(tmp_path: Path, content: str) -> None:
    (tmp_path / ".declassify.yml").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)
