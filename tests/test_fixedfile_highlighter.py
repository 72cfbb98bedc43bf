from __future__ import annotations

import io
from pathlib import Path

import pytest

import fixedfile_highlighter
from src.fixedfile_highlighter import runner as runner_module
from src.fixedfile_highlighter.cli_runtime import CONFIG_ENV_VAR, LOG_ENV_VAR
from src.fixedfile_highlighter.rules import RuleMode


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_ENV_VAR, raising=False)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def _write_pair(tmp_path: Path) -> tuple[str, str]:
    input_path = tmp_path / "feed.dat"
    syntax_path = tmp_path / "feed.csv"
    input_path.write_text("H|2024|x\nD|7|\n", encoding="utf-8")
    syntax_path.write_text('field,name,condition\n1,Kind,\n2,Value,"^D"\n3,Extra,\n', encoding="utf-8")
    return str(input_path), str(syntax_path)


def test_run_cli_delegates_to_runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[runner_module.RunRequest] = []
    sentinel = object()

    def _fake_run(request: runner_module.RunRequest) -> object:
        captured.append(request)
        return sentinel

    monkeypatch.setattr(runner_module, "run", _fake_run)

    result = fixedfile_highlighter.run_cli("in.txt", "rules.csv", colors="rainbow", snippet=True)

    assert result is sentinel
    assert captured[0].input_path == "in.txt"
    assert captured[0].syntax_path == "rules.csv"
    assert captured[0].colors == "rainbow"
    assert captured[0].snippet is True
    assert captured[0].delimiter is None


def test_run_cli_writes_to_supplied_stream(tmp_path: Path) -> None:
    input_path, syntax_path = _write_pair(tmp_path)
    out = io.StringIO()

    result = fixedfile_highlighter.run_cli(input_path, syntax_path, delimiter="|", snippet=True, stdout=out)

    html = out.getvalue()
    assert result.lines_rendered == 2
    assert result.rule_set.mode is RuleMode.DELIMITER
    assert result.rule_set.delimiter == "|"
    assert 'background: #fff; color: #020202;">H</abbr>|2024|<abbr title="Extra"' in html
    assert '">D</abbr>|<abbr title="Value" style="background: #ccc; color: #020202;">7</abbr>' in html
    # the empty trailing field on line 1 never opens
    assert result.diagnostic_counts == {"RegionNotApplied": 1}
    assert result.diagnostics_total == 1


def test_run_cli_surfaces_fatal_errors(tmp_path: Path) -> None:
    input_path, syntax_path = _write_pair(tmp_path)

    with pytest.raises(fixedfile_highlighter.CLIAppError) as excinfo:
        fixedfile_highlighter.run_cli(input_path, syntax_path, stdout=io.StringIO())

    assert excinfo.value.code == 1
    assert "unexpected header column 'field'" in str(excinfo.value)


def test_public_surface() -> None:
    assert fixedfile_highlighter.__version__ == "0.3.0"
    assert fixedfile_highlighter.main.name == "fixedfile-highlighter"
    for name in fixedfile_highlighter.__all__:
        assert hasattr(fixedfile_highlighter, name)
