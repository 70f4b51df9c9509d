"""Command line interface: beam-check."""

from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from beam_checker.errors import ConfigurationError
from beam_checker.extractors import MARKUP_EXTENSIONS, STYLESHEET_EXTENSIONS
from beam_checker.log import configure_logging
from beam_checker.main_checker import BeamChecker
from beam_checker.reporter import ReportGenerator, exit_code
from beam_checker.rules import RULES

from .config import get_host, get_log_level, get_port, load_checker_config
from .report_formatter import format_markdown_report

app = typer.Typer(
    name="beam-check",
    help="Check stylesheets and markup against the BEAM naming and variable-tier convention.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

console = Console()

_FORMATS = ("text", "json", "markdown")


def discover_sources(paths: List[Path]) -> List[Tuple[str, bytes]]:
    """Expand directories to the files the checker understands, in a stable order."""
    known = STYLESHEET_EXTENSIONS | MARKUP_EXTENSIONS
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in known))
        else:
            files.append(path)
    return [(p.as_posix(), p.read_bytes()) for p in files]


@app.command("check")
def check(
    paths: Annotated[
        List[Path],
        typer.Argument(help="Files or directories to check", exists=True, readable=True),
    ],
    strict: Annotated[
        Optional[bool],
        typer.Option("--strict/--no-strict", help="Treat warnings as errors"),
    ] = None,
    state_word: Annotated[
        Optional[List[str]],
        typer.Option("--state-word", "-s", help="State word for rule:state-in-class (repeatable)"),
    ] = None,
    theme_pattern: Annotated[
        Optional[str],
        typer.Option("--theme-pattern", "-t", help="Glob identifying the global theme file(s)"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (text, json, markdown)"),
    ] = "text",
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", help="Worker threads for the per-file phase"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log per-file progress"),
    ] = False,
) -> None:
    """Check files and exit with 0 (clean), 1 (failed, or warnings with --strict) or 2 (cancelled)."""
    configure_logging("DEBUG" if verbose else get_log_level())
    if output_format not in _FORMATS:
        console.print(f"[red]Invalid format '{output_format}'.[/red] Choose from: {', '.join(_FORMATS)}")
        raise typer.Exit(2)

    try:
        config = load_checker_config().with_overrides(
            strict=strict,
            state_words=state_word or None,
            theme_artifact_matcher=theme_pattern,
            max_workers=workers,
        )
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2) from e

    report = BeamChecker(config).check_sources(discover_sources(paths))

    if output_format == "json":
        typer.echo(ReportGenerator.generate_json_report(report))
    elif output_format == "markdown":
        typer.echo(format_markdown_report(report))
    else:
        typer.echo(ReportGenerator.generate_text_report(report))
    raise typer.Exit(exit_code(report, config.strict))


@app.command("rules")
def rules() -> None:
    """List every rule the checker can report."""
    table = Table(title="BEAM rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Severity")
    table.add_column("Description")
    for rule in RULES.values():
        color = "red" if rule.severity.value == "error" else "yellow"
        table.add_row(rule.rule_id, f"[{color}]{rule.severity.value}[/{color}]", rule.description)
    console.print(table)


@app.command("serve")
def serve(
    host: Annotated[Optional[str], typer.Option(help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option(help="Port")] = None,
) -> None:
    """Run the HTTP service."""
    import uvicorn

    uvicorn.run("beam_app.main:app", host=host or get_host(), port=port or get_port())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
