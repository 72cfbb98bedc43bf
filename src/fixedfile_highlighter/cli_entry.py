"""Click CLI wiring and entry points for fixedfile_highlighter."""

from __future__ import annotations

import click
from rich.console import Console

from src.fixedfile_highlighter.cli_runtime import CONFIG_ENV_VAR, VERSION, CLIAppError
from src.fixedfile_highlighter.report import PROJECT_NAME
from src.fixedfile_highlighter.runner import RunRequest, RunResult, run


def _run_cli_entry(
    *,
    input_file: str,
    syntax_file: str,
    colors: str | None,
    delimiter: str | None,
    snippet: bool,
    config_path: str | None,
    encoding: str | None,
    verbose: bool,
    quiet: bool,
) -> RunResult:
    """Execute a highlighting run with the provided options."""

    if verbose and quiet:
        raise click.ClickException("Cannot use both --verbose and --quiet.")

    stderr = Console(stderr=True)
    request = RunRequest(
        input_path=input_file,
        syntax_path=syntax_file,
        colors=colors,
        delimiter=delimiter,
        snippet=snippet,
        config_path=config_path,
        encoding=encoding,
        verbose=verbose,
        quiet=quiet,
        console=stderr,
    )
    try:
        return run(request)
    except CLIAppError as exc:
        stderr.print(exc.rich_message, soft_wrap=True)
        raise click.exceptions.Exit(exc.code) from exc


@click.command(
    name=PROJECT_NAME,
    help=(
        "Highlight parts of INPUT_FILE given the CSV rules in SYNTAX_FILE.\n\n"
        "The syntax file header is `start,length,name,condition`, where `start` is the "
        "1-based column, `length` the number of columns, `name` a human readable label and "
        "`condition` an optional regex restricting the rule to matching lines. With "
        "--delimiter the header is `field,name,condition` instead. Rules apply top-to-bottom."
    ),
)
@click.argument("input_file", type=click.Path(dir_okay=False))
@click.argument("syntax_file", type=click.Path(dir_okay=False))
@click.option(
    "-c",
    "--colors",
    "colors",
    default=None,
    help="Palette preset (greyscale [default], rainbow, or a config preset) or a comma separated list of hex codes.",
)
@click.option(
    "-d",
    "--delimiter",
    "delimiter",
    default=None,
    help="Treat INPUT_FILE as delimited by this single character (use \\t or 'tab' for tabs).",
)
@click.option(
    "-s",
    "--snippet",
    "snippet",
    is_flag=True,
    help="Output an HTML snippet rather than a full document.",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    envvar=CONFIG_ENV_VAR,
    show_envvar=True,
    type=click.Path(dir_okay=False),
    help="Optional TOML configuration file.",
)
@click.option("--encoding", default=None, help="Text encoding of the input and syntax files [default: utf-8].")
@click.option("-v", "--verbose", is_flag=True, help="Show progress and debug logging on stderr.")
@click.option("-q", "--quiet", is_flag=True, help="Only log fatal errors; suppress highlighting warnings.")
@click.version_option(VERSION, prog_name=PROJECT_NAME)
def main(
    input_file: str,
    syntax_file: str,
    colors: str | None,
    delimiter: str | None,
    snippet: bool,
    config_path: str | None,
    encoding: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    _run_cli_entry(
        input_file=input_file,
        syntax_file=syntax_file,
        colors=colors,
        delimiter=delimiter,
        snippet=snippet,
        config_path=config_path,
        encoding=encoding,
        verbose=verbose,
        quiet=quiet,
    )
