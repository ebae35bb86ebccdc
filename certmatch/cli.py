"""
Certificate Matching Tool - CLI Interface.

A command-line interface for pairing spreadsheet recipients with
pre-made certificate files, so each person receives their own certificate.

Usage Examples:
    # Match recipients to certificates
    python -m certmatch match recipients.xlsx ./certificates

    # Looser fuzzy matching, interactive review and CSV export
    python -m certmatch match recipients.csv ./certificates -t 85 --review -o assignments.csv

    # Audit log with verbose output
    python -m certmatch match recipients.csv ./certificates --log-file match.log --verbose

    # See how every file scores for one name
    python -m certmatch explain "José García" ./certificates

    # Show normalized tokens
    python -m certmatch normalize "Certificate_John_Doe.pdf" "José García"
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from certmatch.matching import (
    DEFAULT_FUZZY_THRESHOLD,
    FilenameDecomposer,
    MatchRanker,
    normalize,
)
from certmatch.models import MatchSummary
from certmatch.orchestration import MatchOrchestrator
from certmatch.scanning import CertificateScanner
from certmatch.ui import MatchTUI

__version__ = "0.1.0"

# Initialize Typer app
app = typer.Typer(
    name="certmatch",
    help="Certificate Matching Tool - Pair recipients with their certificate files.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for consistent output formatting
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"Certificate Matching Tool v{__version__}")
        raise typer.Exit()


def validate_threshold(value: float) -> float:
    """
    Validate fuzzy threshold is within valid range.

    Raises:
        typer.BadParameter: If value is out of range.
    """
    if not 0.0 <= value <= 100.0:
        raise typer.BadParameter("Fuzzy threshold must be between 0 and 100")
    return value


def validate_directory(path: Path) -> None:
    """
    Validate that a certificate directory exists.

    Raises:
        typer.Exit: If validation fails with descriptive error message.
    """
    if not path.exists():
        console.print(
            f"[red]Error:[/red] Certificate directory does not exist: {escape(str(path))}"
        )
        raise typer.Exit(1)

    if not path.is_dir():
        console.print(
            f"[red]Error:[/red] Certificate path is not a directory: {escape(str(path))}"
        )
        raise typer.Exit(1)


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Certificate Matching Tool - Pair recipients with their certificate files."""
    pass


@app.command()
def match(
    spreadsheet: Path = typer.Argument(
        ...,
        help="Recipient spreadsheet (.csv or .xlsx).",
    ),
    certificate_dir: Path = typer.Argument(
        ...,
        help="Directory containing the certificate files.",
    ),
    name_column: Optional[str] = typer.Option(
        None,
        "--name-column",
        "-n",
        help="Spreadsheet column holding recipient names (auto-detected if omitted).",
    ),
    fuzzy_threshold: float = typer.Option(
        float(DEFAULT_FUZZY_THRESHOLD),
        "--fuzzy-threshold",
        "-t",
        help="Minimum similarity (0-100) for typo-tolerant matches.",
        callback=validate_threshold,
    ),
    noise_words: Optional[List[str]] = typer.Option(
        None,
        "--noise-word",
        "-w",
        help="Extra filename word to ignore (repeatable), e.g. 'attestation'.",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        "-j",
        min=1,
        help="Number of worker threads used for matching.",
    ),
    review: bool = typer.Option(
        False,
        "--review",
        "-r",
        help="Interactively review low-confidence and unmatched recipients.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write recipient-to-file assignments to this CSV file.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for audit log output.",
    ),
    fail_on_unmatched: bool = typer.Option(
        False,
        "--fail-on-unmatched",
        help="Exit with code 2 if any recipient has no certificate.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Match every recipient in a spreadsheet with a certificate file.

    Runs the complete workflow:
    1. Scan: Read recipients and collect certificate files
    2. Match: Rank the best certificate for each recipient
    3. Review: Optionally confirm or override uncertain matches
    4. Summary: Display, export and log the results
    """
    configure_logging(verbose)
    validate_directory(certificate_dir)

    try:
        orchestrator = MatchOrchestrator(
            spreadsheet=spreadsheet,
            certificate_dir=certificate_dir,
            name_column=name_column,
            fuzzy_threshold=fuzzy_threshold,
            noise_words=noise_words or [],
            max_workers=workers,
            review=review,
            log_file_path=log_file,
            output_path=output,
            verbose=verbose,
            tui=MatchTUI(console=console),
        )

        summary = orchestrator.run()

        if not isinstance(summary, MatchSummary):
            console.print(
                "[red]Error:[/red] Matching workflow returned unexpected result type. "
                "Expected MatchSummary, got " + type(summary).__name__
            )
            raise typer.Exit(1)

        if output and not summary.interrupted:
            console.print(f"[dim]Assignments written to: {escape(str(output))}[/dim]")
        if log_file:
            console.print(f"[dim]Log written to: {escape(str(log_file))}[/dim]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Matching interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except PermissionError as e:
        console.print(f"[red]Error:[/red] Permission denied - {escape(str(e))}")
        raise typer.Exit(1)

    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if summary.interrupted:
        raise typer.Exit(130)
    if fail_on_unmatched and summary.unmatched:
        console.print(
            f"[yellow]{summary.unmatched} recipient(s) have no certificate.[/yellow]"
        )
        raise typer.Exit(2)


@app.command()
def explain(
    name: str = typer.Argument(..., help="Recipient name to match."),
    certificate_dir: Path = typer.Argument(
        ...,
        help="Directory containing the certificate files.",
    ),
    fuzzy_threshold: float = typer.Option(
        float(DEFAULT_FUZZY_THRESHOLD),
        "--fuzzy-threshold",
        "-t",
        help="Minimum similarity (0-100) for typo-tolerant matches.",
        callback=validate_threshold,
    ),
    noise_words: Optional[List[str]] = typer.Option(
        None,
        "--noise-word",
        "-w",
        help="Extra filename word to ignore (repeatable).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Show how every certificate file scores against one recipient name.
    """
    configure_logging(verbose)
    validate_directory(certificate_dir)

    decomposer = FilenameDecomposer().with_noise_words(noise_words or [])
    scanner = CertificateScanner(decomposer=decomposer)
    candidates = scanner.scan_directory(certificate_dir)
    ranker = MatchRanker(decomposer=decomposer, fuzzy_threshold=fuzzy_threshold)

    tui = MatchTUI(console=console)
    console.print(f"Name token: [bold]{normalize(name) or '(empty)'}[/bold]")
    tui.display_candidate_scores(name, ranker.score_candidates(name, candidates))

    result = ranker.rank_with_confidence(name, candidates)
    if result is None:
        console.print("[yellow]No certificate matched.[/yellow]")
        raise typer.Exit(1)

    console.print(
        f"[green]Best match:[/green] {escape(result.filename)} "
        f"({result.match_type.value}, score {result.score}, "
        f"confidence {result.confidence}%"
        + (", needs review" if result.needs_review else "")
        + ")"
    )


@app.command("normalize")
def normalize_command(
    values: List[str] = typer.Argument(..., help="Names or filenames to normalize."),
) -> None:
    """
    Print the normalized token and the filename token for each value.
    """
    decomposer = FilenameDecomposer()

    table = Table(show_header=True, header_style="bold")
    table.add_column("Input", style="white")
    table.add_column("Name token", style="cyan")
    table.add_column("Filename token", style="magenta")

    for value in values:
        table.add_row(
            escape(value),
            normalize(value) or "-",
            decomposer.extract_name_token(value) or "-",
        )

    console.print(table)


if __name__ == "__main__":
    app()
