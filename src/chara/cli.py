"""chara CLI - grep for coding agents, from the terminal."""

from __future__ import annotations

from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from chara.config import SearchConfig
from chara.logging_config import setup_logging
from chara.search import SearchFailure, SearchOptions, render_outcome, search

app = typer.Typer(
    help="chara: pattern search used by AI coding agents",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)
console = Console(stderr=True)

EXIT_MATCHES = 0
EXIT_NO_MATCHES = 1
EXIT_ERROR = 2


@app.command()
def version() -> None:
    """Show the current version of chara."""
    from chara import __version__  # noqa: PLC0415

    console.print(f"chara version: [bold]{__version__}[/bold]")


@app.command()
def grep(  # noqa: PLR0913
    pattern: str = typer.Argument(..., help="Pattern to search for (regular expression unless -F)"),
    paths: list[str] | None = typer.Argument(  # noqa: B008
        None,
        help="Files, directories or glob patterns. Defaults to the current directory.",
    ),
    ignore_case: bool = typer.Option(False, "--ignore-case", "-i", help="Case-insensitive matching"),
    fixed_strings: bool = typer.Option(False, "--fixed-strings", "-F", help="Treat pattern as literal text"),
    invert_match: bool = typer.Option(False, "--invert-match", "-v", help="Select non-matching lines"),
    line_number: bool = typer.Option(True, "--line-number/--no-line-number", help="Report line numbers"),
    before_context: int = typer.Option(0, "--before-context", "-B", min=0, help="Lines before each match"),
    after_context: int = typer.Option(0, "--after-context", "-A", min=0, help="Lines after each match"),
    context: int | None = typer.Option(None, "--context", "-C", min=0, help="Lines before and after each match"),
    max_count: int = typer.Option(0, "--max-count", "-m", min=0, help="Stop after N matches (0 = no limit)"),
    file_pattern: str | None = typer.Option(None, "--file-pattern", "-g", help="Glob filter on file names"),
    recursive: bool = typer.Option(True, "--recursive/--no-recursive", help="Descend into subdirectories"),
    use_ignore_rules: bool = typer.Option(True, "--ignore-rules/--no-ignore-rules", help="Skip gitignored files"),
    fallback: bool = typer.Option(False, "--fallback", help="Retry from the current directory when nothing matches"),
    config_path: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to a chara.yaml configuration file",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Set the logging level (DEBUG, INFO, WARNING, ERROR)",
        case_sensitive=False,
        envvar="LOG_LEVEL",
    ),
    log_dir: Path | None = typer.Option(  # noqa: B008
        None,
        "--log-dir",
        help="Also write logs to a timestamped file in this directory",
    ),
) -> None:
    """Search files for PATTERN and print matches as JSON."""
    setup_logging(level=log_level, log_dir=log_dir)

    try:
        config = SearchConfig.from_yaml(config_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] could not load configuration: {escape(str(e))}")
        raise typer.Exit(EXIT_ERROR) from None

    try:
        options = SearchOptions(
            pattern=pattern,
            paths=paths or ["."],
            ignore_case=ignore_case,
            fixed_strings=fixed_strings,
            invert_match=invert_match,
            line_number=line_number,
            before_context=before_context,
            after_context=after_context,
            context=context,
            max_count=max_count,
            file_pattern=file_pattern,
            recursive=recursive,
            use_ignore_rules=use_ignore_rules,
            fallback_to_current_dir=fallback,
        )
    except ValidationError as e:
        console.print(f"[red]Error:[/red] invalid options: {escape(str(e))}")
        raise typer.Exit(EXIT_ERROR) from None

    outcome = search(options, base_dir=Path.cwd(), config=config)
    typer.echo(render_outcome(outcome, display_limit=config.display_limit))

    if isinstance(outcome, SearchFailure):
        raise typer.Exit(EXIT_ERROR)
    if not outcome.result.records:
        raise typer.Exit(EXIT_NO_MATCHES)


def main() -> None:
    """Entry point for the ``chara`` console script."""
    app()
