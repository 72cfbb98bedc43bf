from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from src.fixedfile_highlighter.rules import RuleSet, parse_rule_set
from tests.helpers.runner_env import COLUMN_HEADER, _CliRunnerEnv, reset_package_logger


@pytest.fixture(autouse=True)
def _isolated_package_logger() -> Iterator[None]:
    yield
    reset_package_logger()


@pytest.fixture
def cli_env(tmp_path: Path) -> _CliRunnerEnv:
    """Provide a throwaway workspace for CLI invocations."""

    return _CliRunnerEnv(tmp_path)


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click runner configured for CLI smoke tests."""

    return CliRunner()


@pytest.fixture
def id_code_rules() -> RuleSet:
    """Column rules wrapping ``ABC`` and ``DE`` in ``ABC DE``."""

    return parse_rule_set(f'{COLUMN_HEADER}\n1,3,"ID",\n5,2,"Code",\n')
