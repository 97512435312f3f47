"""Configuration loading for declassify (.declassify.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from .formatting import FormatSettings, NewLineKind, QuoteKind

CONFIG_FILENAME = ".declassify.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class ConventionConfig:
    """Names that identify the class-component conventions and their replacement."""

    component_decorators: Tuple[str, ...] = ("Component",)
    prop_decorators: Tuple[str, ...] = ("Prop",)
    decorator_modules: Tuple[str, ...] = ("vue-class-component", "vue-property-decorator")
    base_module: str = "vue"
    base_name: str = "Vue"
    prop_type_helper: str = "PropType"


@dataclass
class DeclassifyConfig:
    """Represents the settings defined in .declassify.yml."""

    root: Path
    format: FormatSettings = field(default_factory=FormatSettings)
    conventions: ConventionConfig = field(default_factory=ConventionConfig)
    include: List[str] = field(default_factory=lambda: ["*.ts"])
    exclude_paths: List[str] = field(default_factory=list)


_QUOTES = {"single": QuoteKind.SINGLE, "double": QuoteKind.DOUBLE}
_NEWLINES = {"lf": NewLineKind.LF, "crlf": NewLineKind.CRLF}


def load_config(config_path: Path) -> DeclassifyConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DeclassifyConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = DeclassifyConfig(root=root)

    format_data = _as_dict(data.get("format"))
    if format_data:
        config.format = _parse_format(format_data)

    convention_data = _as_dict(data.get("conventions"))
    if convention_data:
        config.conventions = _parse_conventions(convention_data)

    include = _as_str_list(data.get("include"))
    if include:
        config.include = include
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    return config


def _parse_format(data: Dict[str, Any]) -> FormatSettings:
    defaults = FormatSettings()

    indent_width = _as_int(data.get("indent_width"))
    if indent_width is not None and indent_width < 1:
        raise ConfigError("format.indent_width must be a positive integer")

    quote = defaults.quote
    quote_name = _as_str(data.get("quote"))
    if quote_name is not None:
        if quote_name.lower() not in _QUOTES:
            raise ConfigError(f"format.quote must be one of {', '.join(_QUOTES)}")
        quote = _QUOTES[quote_name.lower()]

    newline = defaults.newline
    newline_name = _as_str(data.get("newline"))
    if newline_name is not None:
        if newline_name.lower() not in _NEWLINES:
            raise ConfigError(f"format.newline must be one of {', '.join(_NEWLINES)}")
        newline = _NEWLINES[newline_name.lower()]

    return FormatSettings(
        indent_width=indent_width if indent_width is not None else defaults.indent_width,
        use_tabs=_as_bool(data.get("use_tabs"), defaults.use_tabs),
        quote=quote,
        newline=newline,
        trailing_commas=_as_bool(data.get("trailing_commas"), defaults.trailing_commas),
        brace_padding=_as_bool(data.get("brace_padding"), defaults.brace_padding),
    )


def _parse_conventions(data: Dict[str, Any]) -> ConventionConfig:
    defaults = ConventionConfig()
    return ConventionConfig(
        component_decorators=tuple(_as_str_list(data.get("component_decorators")))
        or defaults.component_decorators,
        prop_decorators=tuple(_as_str_list(data.get("prop_decorators")))
        or defaults.prop_decorators,
        decorator_modules=tuple(_as_str_list(data.get("decorator_modules")))
        or defaults.decorator_modules,
        base_module=_as_str(data.get("base_module")) or defaults.base_module,
        base_name=_as_str(data.get("base_name")) or defaults.base_name,
        prop_type_helper=_as_str(data.get("prop_type_helper")) or defaults.prop_type_helper,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "ConventionConfig", "DeclassifyConfig", "load_config"]
