"""Public shim exposing the fixedfile_highlighter CLI and library surface."""

from __future__ import annotations

from typing import Callable, TextIO, cast

import src.fixedfile_highlighter.cli_entry as _cli_entry
from src.fixedfile_highlighter import runner
from src.fixedfile_highlighter.cli_runtime import VERSION, CLIAppError
from src.fixedfile_highlighter.palette import PaletteError, parse_palette
from src.fixedfile_highlighter.regions import Region, resolve_regions
from src.fixedfile_highlighter.render import RenderedLine, highlight_lines, render_line
from src.fixedfile_highlighter.rules import (
    ColumnRule,
    ConditionError,
    DelimiterRule,
    RuleMode,
    RuleSet,
    SyntaxParseError,
    parse_rule_set,
)

RunRequest = runner.RunRequest
RunResult = runner.RunResult
__version__ = VERSION

__all__ = (
    "run_cli",
    "main",
    "RunRequest",
    "RunResult",
    "CLIAppError",
    "ColumnRule",
    "DelimiterRule",
    "RuleMode",
    "RuleSet",
    "SyntaxParseError",
    "ConditionError",
    "PaletteError",
    "Region",
    "RenderedLine",
    "parse_rule_set",
    "parse_palette",
    "resolve_regions",
    "render_line",
    "highlight_lines",
)


def run_cli(
    input_path: str,
    syntax_path: str,
    *,
    colors: str | None = None,
    delimiter: str | None = None,
    snippet: bool = False,
    config_path: str | None = None,
    encoding: str | None = None,
    verbose: bool = False,
    quiet: bool = False,
    stdout: TextIO | None = None,
) -> RunResult:
    """Delegate to the shared runner module."""
    request = RunRequest(
        input_path=input_path,
        syntax_path=syntax_path,
        colors=colors,
        delimiter=delimiter,
        snippet=snippet,
        config_path=config_path,
        encoding=encoding,
        verbose=verbose,
        quiet=quiet,
        stdout=stdout,
    )
    return runner.run(request)


main = _cli_entry.main


if __name__ == "__main__":
    _entry_point = cast(Callable[[], None], main)
    _entry_point()
