"""Runtime helpers shared between Click wiring and the runner."""

from __future__ import annotations

import logging
import os
from typing import Final, Mapping, Optional

from rich.console import Console
from rich.logging import RichHandler

from src.datatypes import LogLevel

CONFIG_ENV_VAR: Final[str] = "FIXEDFILE_HIGHLIGHTER_CONFIG"
LOG_ENV_VAR: Final[str] = "LOG"
LOGGER_NAME: Final[str] = "fixedfile_highlighter"
VERSION: Final[str] = "0.3.0"

_LEVELS: Final[Mapping[str, int]] = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL,
}


class CLIAppError(RuntimeError):
    """Raised when the CLI cannot complete its work."""

    def __init__(self, message: str, *, code: int = 1, rich_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code
        self.rich_message = rich_message or message


def resolve_log_level(
    *,
    verbose: bool = False,
    quiet: bool = False,
    env_value: Optional[str] = None,
    configured: LogLevel = LogLevel.WARNING,
) -> int:
    """Pick the effective level: flags, then the ``LOG`` variable, then config."""

    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    if env_value:
        level = _LEVELS.get(env_value.strip().lower())
        if level is not None:
            return level
    return _LEVELS[configured.value]


def configure_logging(level: int, *, console: Optional[Console] = None) -> logging.Logger:
    """Route ``fixedfile_highlighter`` log records to stderr through Rich."""

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_fixedfile_highlighter", False):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        show_time=False,
        markup=False,
    )
    handler._fixedfile_highlighter = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def env_log_level() -> Optional[str]:
    return os.environ.get(LOG_ENV_VAR)
