"""End-to-end highlighting run: load inputs, render every line, write the page."""

from __future__ import annotations

import codecs
import logging
import os
import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, TextIO

from rich.console import Console
from rich.markup import escape

from src.config_loader import ConfigError, load_config
from src.datatypes import AppConfig

from .cli_runtime import CONFIG_ENV_VAR, CLIAppError, configure_logging, env_log_level, resolve_log_level
from .diagnostics import log_diagnostics
from .palette import Palette, PaletteError, parse_palette
from .render import RenderedLine, highlight_lines
from .report import write_document
from .rules import ConditionError, RuleSet, SyntaxParseError, parse_rule_set

logger = logging.getLogger("fixedfile_highlighter.runner")

_DELIMITER_ALIASES: Dict[str, str] = {"\\t": "\t", "tab": "\t"}


@dataclass
class RunRequest:
    input_path: str
    syntax_path: str
    colors: str | None = None
    delimiter: str | None = None
    snippet: bool = False
    config_path: str | None = None
    encoding: str | None = None
    verbose: bool = False
    quiet: bool = False
    stdout: TextIO | None = None
    console: Console | None = None


@dataclass
class RunResult:
    input_path: Path
    syntax_path: Path
    config: AppConfig
    rule_set: RuleSet
    palette: Palette
    lines_rendered: int = 0
    diagnostic_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def diagnostics_total(self) -> int:
        return sum(self.diagnostic_counts.values())


def normalise_delimiter(raw: str | None) -> str | None:
    """Return the single delimiter character for ``raw`` (``None`` for column mode)."""

    if raw is None:
        return None
    value = _DELIMITER_ALIASES.get(raw.lower(), raw)
    if len(value) != 1:
        raise CLIAppError(
            f"Delimiter must be a single character, got {raw!r}",
            code=2,
            rich_message=f"[red]Error:[/red] Delimiter must be a single character, got {escape(repr(raw))}",
        )
    return value


def _fail(message: str, exc: BaseException | None = None, *, code: int = 1) -> CLIAppError:
    detail = f"{message} ({exc})" if exc is not None else message
    return CLIAppError(detail, code=code, rich_message=f"[red]Error:[/red] {escape(detail)}")


def _load_app_config(config_path: str | None) -> AppConfig:
    path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return AppConfig()
    try:
        return load_config(path)
    except OSError as exc:
        raise _fail(f"Failed to open config file {path}.", exc) from exc
    except ConfigError as exc:
        raise _fail(f"Invalid config file {path}.", exc) from exc


def _check_encoding(encoding: str) -> str:
    try:
        return codecs.lookup(encoding).name
    except LookupError as exc:
        raise _fail(f"Unknown encoding {encoding!r}.", code=2) from exc


def _read_lines(path: Path, encoding: str) -> Iterator[str]:
    try:
        with path.open("r", encoding=encoding, newline="\n") as handle:
            for raw in handle:
                if raw.endswith("\n"):
                    raw = raw[:-1]
                if raw.endswith("\r"):
                    raw = raw[:-1]
                yield raw
    except UnicodeDecodeError as exc:
        raise _fail("Failed to read line from input file.", exc) from exc


def _logged(lines: Iterator[RenderedLine], counts: Counter[str]) -> Iterator[RenderedLine]:
    for rendered in lines:
        log_diagnostics(rendered.diagnostics)
        counts.update(type(diagnostic).__name__ for diagnostic in rendered.diagnostics)
        yield rendered


def run(request: RunRequest) -> RunResult:
    """
    Highlight ``request.input_path`` according to ``request.syntax_path``.

    Everything that can fail fatally (config, palette, delimiter, syntax file, input
    file) is checked before the first byte of output is written.

    Raises:
        CLIAppError: On any fatal configuration, parse or I/O error.
    """

    cfg = _load_app_config(request.config_path)
    configure_logging(
        resolve_log_level(
            verbose=request.verbose,
            quiet=request.quiet,
            env_value=env_log_level(),
            configured=cfg.logging.level,
        ),
        console=request.console,
    )

    try:
        palette = parse_palette(
            request.colors,
            presets=cfg.palette.presets,
            default=cfg.palette.default,
        )
    except PaletteError as exc:
        raise _fail(str(exc), code=2) from exc
    delimiter = normalise_delimiter(request.delimiter)
    encoding = _check_encoding(request.encoding or cfg.output.encoding)
    snippet = request.snippet or cfg.output.snippet

    logger.info("Parsing syntax file")
    syntax_path = Path(request.syntax_path)
    try:
        syntax_bytes = syntax_path.read_bytes()
    except OSError as exc:
        raise _fail("Failed to open syntax file.", exc) from exc
    try:
        syntax_text = syntax_bytes.decode(encoding)
    except UnicodeDecodeError as exc:
        raise _fail("Failed to decode syntax file.", exc) from exc
    if syntax_text.startswith("\ufeff"):
        syntax_text = syntax_text[1:]
    try:
        rule_set = parse_rule_set(syntax_text, delimiter)
    except (SyntaxParseError, ConditionError) as exc:
        raise _fail("Failed to parse syntax record.", exc) from exc
    logger.info("Loaded %d %s rule(s)", len(rule_set), rule_set.mode.value)

    logger.info("Parsing input file")
    input_path = Path(request.input_path)
    try:
        input_path.open("rb").close()
    except OSError as exc:
        raise _fail("Failed to open input file.", exc) from exc

    result = RunResult(
        input_path=input_path,
        syntax_path=syntax_path,
        config=cfg,
        rule_set=rule_set,
        palette=palette,
    )
    counts: Counter[str] = Counter()
    logger.info("Creating regions and outputting")
    rendered_lines = _logged(
        highlight_lines(_read_lines(input_path, encoding), rule_set, palette),
        counts,
    )
    result.lines_rendered = write_document(
        request.stdout or sys.stdout,
        rendered_lines,
        syntax_bytes=syntax_bytes,
        title=f"{cfg.output.title_prefix} {input_path.name}".strip(),
        snippet=snippet,
        text_color=cfg.output.text_color,
    )
    result.diagnostic_counts = dict(counts)
    logger.info("Done!")
    return result
