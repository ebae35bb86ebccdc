"""Terminal User Interface for certmatch.

This module provides the MatchTUI class, a Rich-based interactive TUI for
showing matching results and reviewing uncertain matches.

Example:
    from certmatch.ui import MatchTUI

    tui = MatchTUI()
    tui.display_scan_summary(total_recipients=120, total_certificates=118, threshold=95)
    tui.display_results(matches)
    decisions = tui.review_matches(matches, candidates)
    tui.display_match_summary(summary)
"""

from typing import Callable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from certmatch.matching import confidence_label
from certmatch.models import (
    CandidateScore,
    CertificateCandidate,
    MatchSummary,
    RecipientMatch,
)

# (match being reviewed, decision, file picked when reassigned)
ReviewDecision = Tuple[RecipientMatch, str, Optional[CertificateCandidate]]

_BADGE_STYLES = {
    "High": "green",
    "Medium": "yellow",
    "Low": "red",
}


class MatchTUI:
    """Rich-based Terminal User Interface for certificate matching.

    Provides display and interaction methods for the matching workflow:
    - Scan summary and results tables with confidence badges
    - Interactive review of low-confidence and unmatched recipients
    - Progress tracking while matching
    - Final summary with shared certificates and warnings

    Args:
        console: Optional Rich Console instance for output. Pass a Console
            writing to a StringIO to capture output in tests.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def display_scan_summary(
        self, total_recipients: int, total_certificates: int, threshold: float
    ) -> None:
        """Display the inputs of a matching run in a header panel."""
        header_text = (
            f"Recipients: {total_recipients:,}\n"
            f"Certificates: {total_certificates:,}\n"
            f"Fuzzy threshold: {threshold:g}%"
        )
        self.console.print(Panel(header_text, title="Scan Results", border_style="blue"))

    def display_results(self, matches: Sequence[RecipientMatch]) -> None:
        """Display one table row per recipient with the chosen certificate."""
        if not matches:
            self.console.print("[yellow]No recipients to match.[/yellow]")
            return

        table = Table(title="Certificate Matches")
        table.add_column("Row", justify="right", style="cyan", no_wrap=True)
        table.add_column("Recipient", style="white")
        table.add_column("Certificate", style="white")
        table.add_column("Match Type", style="magenta")
        table.add_column("Confidence", justify="center")

        for match in matches:
            certificate = match.certificate
            if certificate is None:
                file_str = "[red]no match[/red]"
            else:
                file_str = escape(self._truncate_name(certificate.filename, max_length=50))

            if match.review_decision == "reassigned":
                match_type = "manual"
                confidence_str = "[green]reviewed[/green]"
            elif match.result is None or match.review_decision == "rejected":
                match_type = "-"
                confidence_str = "-"
            else:
                match_type = match.result.match_type.value
                confidence_str = self._format_confidence(
                    match.result.confidence, match.needs_review
                )
                if match.review_decision == "accepted":
                    confidence_str += " [green]reviewed[/green]"

            table.add_row(
                str(match.recipient.row_number),
                escape(self._truncate_name(match.recipient.name, max_length=40)),
                file_str,
                match_type,
                confidence_str,
            )

        self.console.print(table)

        flagged = sum(1 for m in matches if m.needs_review)
        if flagged:
            self.console.print(
                f"[yellow]{flagged} match(es) need review (low confidence).[/yellow]"
            )

    def display_candidate_scores(self, name: str, scores: Sequence[CandidateScore]) -> None:
        """Display the per-candidate breakdown produced by MatchRanker.score_candidates()."""
        table = Table(title=escape(f"Candidates for {name!r}"))
        table.add_column("#", justify="right", style="cyan", width=3)
        table.add_column("Filename", style="white")
        table.add_column("Token", style="dim")
        table.add_column("Match Type", style="magenta")
        table.add_column("Score", justify="right")
        table.add_column("Similarity", justify="right")

        for idx, scored in enumerate(scores, start=1):
            table.add_row(
                str(idx),
                escape(self._truncate_name(scored.candidate.filename, max_length=50)),
                scored.filename_token or "[red](empty)[/red]",
                scored.match_type.value if scored.match_type else "-",
                str(scored.score) if scored.match_type else "-",
                f"{scored.similarity}%" if scored.similarity is not None else "-",
            )

        self.console.print(table)

    def review_matches(
        self,
        matches: Sequence[RecipientMatch],
        candidates: Sequence[CertificateCandidate],
        on_decision: Optional[Callable[[RecipientMatch, str], None]] = None,
    ) -> List[ReviewDecision]:
        """Interactive review of flagged and unmatched recipients.

        For each recipient that needs review or has no match, prompts for
        (a)ccept, (c)hoose another file, (r)eject, (s)kip or (q)uit.
        Accept is only offered when there is a match to accept.

        Args:
            matches: Matching results in spreadsheet order.
            candidates: Candidate pool offered when choosing a file.
            on_decision: Optional callback invoked after each decision.

        Returns:
            Decisions in review order. Skipped recipients are omitted.
            KeyboardInterrupt is caught and treated as quit.
        """
        pending = [m for m in matches if m.needs_review or not m.matched]
        if not pending:
            return []

        decisions: List[ReviewDecision] = []
        total = len(pending)

        for idx, match in enumerate(pending, start=1):
            try:
                self._display_review_item(match, idx, total)
                action = self._prompt_action(has_match=match.result is not None)

                if action == "q":
                    break
                if action == "s":
                    continue

                if action == "a":
                    decision: ReviewDecision = (match, "accepted", None)
                elif action == "r":
                    decision = (match, "rejected", None)
                else:
                    chosen = self._choose_candidate(candidates)
                    if chosen is None:
                        continue
                    decision = (match, "reassigned", chosen)

                decisions.append(decision)
                if on_decision is not None:
                    on_decision(match, decision[1])

            except KeyboardInterrupt:
                self.console.print("\n[yellow]Review cancelled by user.[/yellow]")
                break

        return decisions

    def display_match_summary(self, summary: MatchSummary) -> None:
        """Display final statistics after matching (and review) complete."""
        self.console.print(Panel("Match Summary", border_style="green"))

        table = Table(show_header=True, header_style="bold")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        table.add_row("Recipients", f"{summary.total_recipients:,}")
        table.add_row("Certificates", f"{summary.total_certificates:,}")
        table.add_row("Matched", f"{summary.matched:,}")
        table.add_row("Unmatched", f"{summary.unmatched:,}")
        table.add_row("Needs review", f"{summary.needs_review:,}")
        table.add_row("Manually reviewed", f"{summary.manually_reviewed:,}")
        table.add_row("Duration", f"{summary.duration_seconds:.1f}s")

        self.console.print(table)

        if summary.shared_certificates:
            self.console.print(
                "\n[bold red]Certificates matched to more than one recipient:[/bold red]"
            )
            for shared in summary.shared_certificates:
                rows = ", ".join(
                    f"row {r.row_number} ({escape(r.name)})" for r in shared.recipients
                )
                self.console.print(f"  [red]-[/red] {escape(shared.filename)}: {rows}")

        if summary.errors:
            self._display_errors(summary.errors)

    def create_progress_callback(self, total: int) -> Tuple[Progress, Callable[[int], None]]:
        """Create a progress bar and callback for matching progress.

        The caller must use the returned Progress as a context manager.

        Example:
            progress, callback = tui.create_progress_callback(len(recipients))
            with progress:
                for i, recipient in enumerate(recipients):
                    match(recipient)
                    callback(i + 1)
        """
        progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
        )
        task_id = progress.add_task("Matching recipients...", total=total)

        def callback(completed: int) -> None:
            progress.update(task_id, completed=completed)

        return progress, callback

    def _display_review_item(self, match: RecipientMatch, idx: int, total: int) -> None:
        result = match.result
        if result is None:
            body = "[red]No certificate matched this recipient.[/red]"
        else:
            body = (
                f"Proposed: [bold]{escape(result.filename)}[/bold]\n"
                f"Match type: {result.match_type.value}  "
                f"Score: {result.score}  "
                f"Confidence: {self._format_confidence(result.confidence, result.needs_review)}"
            )
            if result.similarity is not None:
                body += f"\nSimilarity: {result.similarity}%"

        title = (
            f"Review {idx}/{total} - row {match.recipient.row_number}: "
            f"{escape(match.recipient.name)}"
        )
        self.console.print(Panel(body, title=title, border_style="yellow"))

    def _prompt_action(self, has_match: bool) -> str:
        if has_match:
            return Prompt.ask(
                "(a)ccept, (c)hoose file, (r)eject, (s)kip, (q)uit",
                choices=["a", "c", "r", "s", "q"],
                default="a",
                console=self.console,
            )
        return Prompt.ask(
            "(c)hoose file, (s)kip, (q)uit",
            choices=["c", "s", "q"],
            default="s",
            console=self.console,
        )

    def _choose_candidate(
        self, candidates: Sequence[CertificateCandidate]
    ) -> Optional[CertificateCandidate]:
        """Prompt for a file number; 0 cancels."""
        if not candidates:
            self.console.print("[yellow]No certificate files to choose from.[/yellow]")
            return None

        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right", style="cyan", width=4)
        table.add_column("Filename", style="white")
        for idx, candidate in enumerate(candidates, start=1):
            table.add_row(str(idx), escape(candidate.filename))
        self.console.print(table)

        while True:
            number = IntPrompt.ask(
                f"Select file (1-{len(candidates)}, 0 to cancel)",
                default=0,
                console=self.console,
            )
            if number == 0:
                return None
            if 1 <= number <= len(candidates):
                return candidates[number - 1]
            self.console.print(
                f"[red]Please enter a number between 0 and {len(candidates)}.[/red]"
            )

    def _display_errors(self, errors: List[str]) -> None:
        self.console.print(f"\n[bold yellow]Warnings ({len(errors)}):[/bold yellow]")
        for error in errors[:10]:
            self.console.print(f"  [yellow]-[/yellow] {escape(error)}")
        if len(errors) > 10:
            self.console.print(f"  [dim]... and {len(errors) - 10} more[/dim]")

    def _format_confidence(self, confidence: int, needs_review: bool = False) -> str:
        """Format confidence as a colored badge, e.g. "[green]High (100%)[/green]"."""
        label = confidence_label(confidence)
        style = _BADGE_STYLES[label]
        text = f"[{style}]{label} ({confidence}%)[/{style}]"
        if needs_review:
            text += " [red]![/red]"
        return text

    def _truncate_name(self, name: str, max_length: int = 50) -> str:
        if len(name) <= max_length:
            return name
        return name[: max_length - 3] + "..."
