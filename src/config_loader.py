"""Configuration loader that parses and validates user-provided TOML."""

from __future__ import annotations

import codecs
import tomllib
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict, List

from src.fixedfile_highlighter.palette import PaletteError, normalise_color

from .datatypes import AppConfig, LoggingConfig, OutputConfig, PaletteConfig


class ConfigError(ValueError):
    """Raised when the configuration file is malformed or fails validation."""


_SECTIONS = {
    "palette": PaletteConfig,
    "output": OutputConfig,
    "logging": LoggingConfig,
}


def _coerce_bool(value: Any, dotted_key: str) -> bool:
    """Return a bool, coercing simple 0/1 representations when necessary."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"0", "1"}:
            return normalized == "1"
        if normalized in {"true", "false"}:
            return normalized == "true"
    raise ConfigError(f"{dotted_key} must be a boolean (use true/false).")


def _coerce_enum(value: Any, dotted_key: str, enum_type: type[Enum]) -> Enum:
    """Return an enum member, coercing string values case-insensitively."""

    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "warn":
            normalized = "warning"
        for member in enum_type:
            if normalized == str(member.value).lower():
                return member
    raise ConfigError(
        f"{dotted_key} must be one of: {', '.join(str(member.value) for member in enum_type)}"
    )


def _sanitize_section(raw: Any, name: str, cls):
    """
    Coerce a raw TOML table into an instance of ``cls`` with cleaned values.

    Parameters:
        raw: Raw TOML section data.
        name (str): Section name used when reporting validation errors.
        cls: Dataclass type used to construct the section object.

    Returns:
        Any: Instantiated dataclass populated with values from ``raw``.

    Raises:
        ConfigError: If the section is not a table or contains invalid keys or values.
    """
    if not isinstance(raw, dict):
        raise ConfigError(f"[{name}] must be a table")
    cls_fields = {field.name: field for field in fields(cls)}
    cleaned: Dict[str, Any] = {}
    for key, value in raw.items():
        field = cls_fields.get(key)
        if field is None:
            raise ConfigError(f"Unknown key in [{name}]: {key}")
        if field.type in (bool, "bool"):
            cleaned[key] = _coerce_bool(value, f"{name}.{key}")
        elif isinstance(field.type, type) and issubclass(field.type, Enum):
            cleaned[key] = _coerce_enum(value, f"{name}.{key}", field.type)
        elif is_dataclass(field.type):
            cleaned[key] = _sanitize_section(value, f"{name}.{key}", field.type)
        else:
            cleaned[key] = value
    try:
        return cls(**cleaned)
    except TypeError as exc:
        raise ConfigError(f"Invalid keys in [{name}]: {exc}") from exc


def _require_str(value: Any, dotted_key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{dotted_key} must be a non-empty string")
    return value.strip()


def _validate_presets(presets: Any) -> Dict[str, List[str]]:
    if not isinstance(presets, dict):
        raise ConfigError("[palette.presets] must be a table")
    validated: Dict[str, List[str]] = {}
    for name, colors in presets.items():
        dotted_key = f"palette.presets.{name}"
        if not isinstance(colors, list) or not colors:
            raise ConfigError(f"{dotted_key} must be a non-empty array of hex colours")
        try:
            validated[name.strip().lower()] = [normalise_color(str(color)) for color in colors]
        except PaletteError as exc:
            raise ConfigError(f"{dotted_key}: {exc}") from exc
    return validated


def _validate_encoding(encoding: str, dotted_key: str) -> str:
    try:
        return codecs.lookup(encoding).name
    except LookupError as exc:
        raise ConfigError(f"{dotted_key} names an unknown encoding: {encoding}") from exc


def load_config(path: str) -> AppConfig:
    """
    Load and validate an application configuration from a TOML file.

    Reads the file at `path`, parses it as UTF-8 TOML (BOM is accepted), coerces and
    validates every section and returns a fully populated AppConfig.

    Raises:
        ConfigError: If the file is not UTF-8, TOML parsing fails, a section or key is
            unknown, or any validation rule is violated.
    """

    with open(path, "rb") as handle:
        raw_bytes = handle.read()
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        raw_bytes = raw_bytes[3:]
    try:
        raw = tomllib.loads(raw_bytes.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise ConfigError("Configuration file must be UTF-8 encoded") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse TOML: {exc}") from exc

    unknown = sorted(set(raw) - set(_SECTIONS))
    if unknown:
        raise ConfigError(f"Unknown configuration section(s): {', '.join(unknown)}")

    app = AppConfig(
        palette=_sanitize_section(raw.get("palette", {}), "palette", PaletteConfig),
        output=_sanitize_section(raw.get("output", {}), "output", OutputConfig),
        logging=_sanitize_section(raw.get("logging", {}), "logging", LoggingConfig),
    )

    app.palette.default = _require_str(app.palette.default, "palette.default")
    app.palette.presets = _validate_presets(app.palette.presets)

    app.output.encoding = _validate_encoding(
        _require_str(app.output.encoding, "output.encoding"), "output.encoding"
    )
    try:
        app.output.text_color = normalise_color(_require_str(app.output.text_color, "output.text_color"))
    except PaletteError as exc:
        raise ConfigError(f"output.text_color: {exc}") from exc
    if not isinstance(app.output.title_prefix, str):
        raise ConfigError("output.title_prefix must be a string")

    return app
