"""Command-line interface for RepoLens with structured JSON output."""

import asyncio
import time
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.table import Table

from .aggregator import StructureAnalyzer
from .config import load_config, merge_options, settings_from_options
from .exceptions import RepolensError
from .logging_config import setup_logging
from .models import ProjectStructure
from .parser import parse_file
from .sources import GitHubFileSource, LocalFileSource

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# ``content`` can be megabytes per file; it is only written on request.
_WITHOUT_CONTENT: Dict[str, Any] = {"files": {"__all__": {"content"}}}


def _emit(payload: str, output_file: Optional[Path]) -> None:
    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload, encoding="utf-8")
        typer.echo(f"✅ Report saved to: {output_file}", err=True)
    else:
        typer.echo(payload)


def _print_summary(structure: ProjectStructure) -> None:
    console = Console(stderr=True)

    languages = Table(title="Languages")
    languages.add_column("Language")
    languages.add_column("Lines", justify="right")
    for name, lines in sorted(structure.languages.items(), key=lambda item: -item[1]):
        languages.add_row(name, str(lines))
    console.print(languages)

    issues = Table(title=f"Issues ({len(structure.issues)})")
    issues.add_column("Severity")
    issues.add_column("Type")
    issues.add_column("Message")
    for issue in structure.issues:
        issues.add_row(issue.severity, issue.type, issue.message)
    console.print(issues)

    console.print(
        f"Files: {structure.total_files}  Lines: {structure.total_lines}  "
        f"Avg complexity: {structure.complexity.average:.2f}  "
        f"Test coverage: {structure.test_coverage}%  "
        f"Architecture: {structure.patterns.architecture}"
    )


# ---------------------------------------------------------------------------
# CLI application
# ---------------------------------------------------------------------------

def version_callback(value: bool):
    if value:
        typer.echo(f"RepoLens Version: {__version__}")
        raise typer.Exit()

app = typer.Typer(
    help="RepoLens: Summarise the structure of a repository as JSON.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)

# --- root callback to expose global --version flag ---

@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show the application's version and exit.",
        callback=version_callback,
        is_eager=True,
    )
):
    """RepoLens: Summarise the structure of a repository as JSON."""
    pass


@app.command()
def analyze(
    target: str = typer.Argument(..., help="Local directory, or owner/repo together with --github."),
    github: bool = typer.Option(False, "--github", help="Treat TARGET as a GitHub owner/repo."),
    ref: str = typer.Option("HEAD", "--ref", help="Git ref to analyse on GitHub."),
    token: Optional[str] = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub API token."),
    output_file: Optional[Path] = typer.Option(None, "-o", "--output", help="Save the JSON report here."),
    include_content: bool = typer.Option(False, "--include-content", help="Keep file contents in the report."),
    include_hidden: bool = typer.Option(False, "-i", "--include-hidden", help="Include hidden files (local only)."),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", min=1, help="Files fetched concurrently."),
    batch_delay: Optional[float] = typer.Option(None, "--batch-delay", min=0, help="Seconds to pause between batches."),
    summary: bool = typer.Option(False, "--summary", help="Print a summary table to stderr."),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging."),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also append logs to this file."),
):
    """Analyze TARGET and produce a JSON structure summary on stdout or *output_file*."""

    setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)

    cli_args = {"batch_size": batch_size, "batch_delay": batch_delay}
    if github:
        source = GitHubFileSource(token, ref=ref)
        options = merge_options({}, "analyze", cli_args)
    else:
        root = Path(target)
        if not root.is_dir():
            typer.echo(f"❌ ERROR: Not a directory: {target}", err=True)
            raise typer.Exit(code=1)
        options = merge_options(load_config(root), "analyze", cli_args)
        # Local reads are not rate limited.
        options.setdefault("batch_delay", 0.0)
        source = LocalFileSource(
            include_hidden=include_hidden,
            exclude_patterns=options.get("exclude_patterns"),
        )
        target = str(root.resolve())

    settings = settings_from_options(options)

    start = time.time()
    typer.echo(f"🔍 Analyzing repository at: {target}", err=True)
    try:
        structure = asyncio.run(StructureAnalyzer(source, settings).analyze_repository(target))
    except RepolensError as exc:
        typer.echo(f"❌ ERROR: {exc}", err=True)
        raise typer.Exit(code=1)

    payload = structure.model_dump_json(
        indent=2,
        by_alias=True,
        exclude=None if include_content else _WITHOUT_CONTENT,
    )
    _emit(payload, output_file)

    if summary:
        _print_summary(structure)
    typer.echo(f"⏱️  Finished in {round(time.time() - start, 2)}s.", err=True)


@app.command()
def parse(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to analyze."),
    output_file: Optional[Path] = typer.Option(None, "-o", "--output", help="Save the JSON result here."),
    include_content: bool = typer.Option(False, "--include-content", help="Keep the file content in the result."),
):
    """Analyze a single file and print its ParsedFile JSON."""

    try:
        content = path.read_text("utf-8", errors="replace")
    except OSError as exc:
        typer.echo(f"❌ ERROR: Cannot read {path}: {exc}", err=True)
        raise typer.Exit(code=1)

    parsed = parse_file(path.as_posix(), content)
    payload = parsed.model_dump_json(
        indent=2,
        by_alias=True,
        exclude=None if include_content else {"content"},
    )
    _emit(payload, output_file)


if __name__ == "__main__":  # pragma: no cover
    app()
