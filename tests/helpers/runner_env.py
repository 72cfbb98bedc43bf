"""Shared helpers for CLI-level tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from click.testing import CliRunner, Result

import src.fixedfile_highlighter.cli_entry as cli_entry_module
from src.fixedfile_highlighter.cli_runtime import LOGGER_NAME

COLUMN_HEADER = "start,length,name,condition"
DELIMITER_HEADER = "field,name,condition"


class _CliRunnerEnv:
    """Workspace with input, syntax and config files plus a Click runner."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path
        self.runner = CliRunner()
        self.input_path = tmp_path / "records.txt"
        self.syntax_path = tmp_path / "syntax.csv"
        self.config_path = tmp_path / "config.toml"

    def write_input(self, *lines: str) -> Path:
        self.input_path.write_bytes("".join(f"{line}\n" for line in lines).encode("utf-8"))
        return self.input_path

    def write_syntax(self, header: str, *rows: str) -> Path:
        self.syntax_path.write_bytes("\n".join((header, *rows, "")).encode("utf-8"))
        return self.syntax_path

    def write_config(self, text: str) -> Path:
        self.config_path.write_text(text, encoding="utf-8")
        return self.config_path

    def invoke(self, *extra_args: str, args: Sequence[str] | None = None) -> Result:
        argv = list(args) if args is not None else [str(self.input_path), str(self.syntax_path)]
        argv.extend(extra_args)
        return self.runner.invoke(cli_entry_module.main, argv, catch_exceptions=False)


def reset_package_logger() -> None:
    """Drop handlers installed by ``configure_logging`` so tests stay isolated."""

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
