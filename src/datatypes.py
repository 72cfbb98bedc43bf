"""Configuration dataclasses for the fixed-width file highlighter."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class LogLevel(str, Enum):
    """Log verbosity accepted in ``[logging].level``."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class PaletteConfig:
    """Default palette selection and user-defined colour presets."""

    default: str = "greyscale"
    presets: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class OutputConfig:
    """Options controlling the emitted HTML document."""

    snippet: bool = False
    encoding: str = "utf-8"
    text_color: str = "020202"
    title_prefix: str = "Analysis of"


@dataclass
class LoggingConfig:
    """Diagnostic log verbosity."""

    level: LogLevel = LogLevel.WARNING


@dataclass
class AppConfig:
    """Top-level configuration aggregating all sections."""

    palette: PaletteConfig = field(default_factory=PaletteConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
