"""MatchOrchestrator for coordinating batch certificate matching.

This module provides the MatchOrchestrator class that runs the complete
matching workflow: it reads the recipient spreadsheet, scans the
certificate directory, ranks a certificate for every recipient, optionally
lets a human review uncertain matches, then summarises, exports and logs
the outcome.

Example:
    from certmatch.orchestration import MatchOrchestrator
    from pathlib import Path

    orchestrator = MatchOrchestrator(
        spreadsheet=Path("recipients.xlsx"),
        certificate_dir=Path("certificates"),
        fuzzy_threshold=85,
    )
    summary = orchestrator.run()
    for match in orchestrator.matches:
        print(match.recipient.name, match.certificate)
"""

import csv
import dataclasses
import logging
import sys
import time
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from rich.markup import escape

from certmatch.matching import DEFAULT_FUZZY_THRESHOLD, FilenameDecomposer, MatchRanker
from certmatch.models import (
    CertificateCandidate,
    MatchSummary,
    Recipient,
    RecipientMatch,
    SharedCertificate,
)
from certmatch.orchestration.match_logger import MatchLogger
from certmatch.scanning import CertificateScanner, RecipientReader
from certmatch.ui import MatchTUI, ReviewDecision

logger = logging.getLogger(__name__)

ASSIGNMENT_COLUMNS = [
    "row",
    "recipient",
    "file",
    "match_type",
    "score",
    "confidence",
    "needs_review",
    "reviewed",
]


def match_recipients(
    ranker: MatchRanker,
    recipients: Sequence[Recipient],
    candidates: Sequence[CertificateCandidate],
    max_workers: int = 1,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> List[RecipientMatch]:
    """Rank a certificate for every recipient.

    Each recipient is matched independently against the same read-only
    pool, so work can be spread over a thread pool. Results always come
    back in recipient order.

    Args:
        ranker: Configured MatchRanker.
        recipients: Recipients in spreadsheet order.
        candidates: Candidate pool shared by every recipient.
        max_workers: Worker threads; 1 matches sequentially.
        progress_callback: Called with the number of recipients completed.

    Returns:
        One RecipientMatch per recipient.

    Raises:
        KeyboardInterrupt: Propagated after pending work is cancelled.
        Exception: Whatever the ranker raises, after pending work is
            cancelled.
    """
    pool = list(candidates)

    def match_one(recipient: Recipient) -> RecipientMatch:
        return RecipientMatch(
            recipient=recipient,
            result=ranker.rank_with_confidence(recipient.name, pool),
        )

    results: List[RecipientMatch] = []

    if max_workers <= 1:
        for recipient in recipients:
            results.append(match_one(recipient))
            if progress_callback is not None:
                progress_callback(len(results))
        return results

    executor = ThreadPoolExecutor(max_workers=max_workers)
    completed = False
    try:
        for match in executor.map(match_one, recipients):
            results.append(match)
            if progress_callback is not None:
                progress_callback(len(results))
        completed = True
    finally:
        # on any failure, queued recipients are dropped instead of waited for
        executor.shutdown(wait=completed, cancel_futures=not completed)
    return results


def apply_review_decisions(
    matches: Sequence[RecipientMatch], decisions: Iterable[ReviewDecision]
) -> List[RecipientMatch]:
    """Return a copy of matches with review decisions applied.

    The original RecipientMatch objects are left untouched so the engine's
    choices remain available for the audit log.
    """
    by_match = {}
    for match, decision, chosen in decisions:
        by_match[id(match)] = (decision, chosen)

    updated: List[RecipientMatch] = []
    for match in matches:
        if id(match) in by_match:
            decision, chosen = by_match[id(match)]
            match = dataclasses.replace(match, review_decision=decision, override=chosen)
        updated.append(match)
    return updated


def find_shared_certificates(matches: Iterable[RecipientMatch]) -> List[SharedCertificate]:
    """Find certificate files chosen for more than one recipient."""
    by_filename: "OrderedDict[str, List[Recipient]]" = OrderedDict()
    for match in matches:
        certificate = match.certificate
        if certificate is None:
            continue
        by_filename.setdefault(certificate.filename, []).append(match.recipient)

    return [
        SharedCertificate(filename=filename, recipients=recipients)
        for filename, recipients in by_filename.items()
        if len(recipients) > 1
    ]


def write_assignments_csv(path: Path, matches: Iterable[RecipientMatch]) -> None:
    """Write the recipient-to-file assignments as CSV.

    Unmatched recipients keep their row with empty match columns.

    Raises:
        OSError: If the file cannot be written.
    """
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(ASSIGNMENT_COLUMNS)
        for match in matches:
            certificate = match.certificate
            result = match.result if match.review_decision in (None, "accepted") else None
            writer.writerow([
                match.recipient.row_number,
                match.recipient.name,
                certificate.filename if certificate is not None else "",
                result.match_type.value if result is not None else "",
                result.score if result is not None else "",
                result.confidence if result is not None else "",
                "yes" if match.needs_review else "no",
                match.review_decision or "",
            ])


class MatchOrchestrator:
    """Orchestrates the batch certificate matching workflow.

    Coordinates RecipientReader, CertificateScanner, MatchRanker, MatchTUI
    and MatchLogger.

    Attributes:
        spreadsheet: Recipient spreadsheet (.csv or .xlsx).
        certificate_dir: Directory containing certificate files.
        fuzzy_threshold: Minimum similarity (0-100) for the fuzzy tier.
        max_workers: Worker threads used for matching.
        review: Whether to run the interactive review step.
        log_file_path: Optional audit log path (None disables the log).
        output_path: Optional CSV path for the assignments.
        verbose: Whether to print extra detail.
    """

    def __init__(
        self,
        spreadsheet: Path,
        certificate_dir: Path,
        name_column: Optional[str] = None,
        fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
        noise_words: Iterable[str] = (),
        max_workers: int = 1,
        review: bool = False,
        log_file_path: Optional[Path] = None,
        output_path: Optional[Path] = None,
        verbose: bool = False,
        tui: Optional[MatchTUI] = None,
    ) -> None:
        """Initialize the MatchOrchestrator.

        Raises:
            ValueError: If an input path is missing or of the wrong kind,
                fuzzy_threshold is outside 0-100, max_workers < 1, or the
                output directory is missing.
        """
        spreadsheet_path = spreadsheet.resolve()
        if not spreadsheet_path.exists():
            raise ValueError(f"Spreadsheet does not exist: {spreadsheet}")
        if not spreadsheet_path.is_file():
            raise ValueError(f"Spreadsheet is not a file: {spreadsheet}")

        cert_path = certificate_dir.resolve()
        if not cert_path.exists():
            raise ValueError(f"Certificate directory does not exist: {certificate_dir}")
        if not cert_path.is_dir():
            raise ValueError(f"Certificate path is not a directory: {certificate_dir}")

        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        if output_path is not None and not output_path.resolve().parent.is_dir():
            raise ValueError(f"Output directory does not exist: {output_path.parent}")

        self.spreadsheet = spreadsheet_path
        self.certificate_dir = cert_path
        self.max_workers = max_workers
        self.review = review
        self.log_file_path = log_file_path
        self.output_path = output_path
        self.verbose = verbose

        decomposer = FilenameDecomposer().with_noise_words(noise_words)
        self._ranker = MatchRanker(decomposer=decomposer, fuzzy_threshold=fuzzy_threshold)
        self.fuzzy_threshold = self._ranker.fuzzy_threshold
        self._reader = RecipientReader(name_column=name_column)
        self._scanner = CertificateScanner(decomposer=decomposer)
        self._tui = tui or MatchTUI()

        self._errors: List[str] = []
        self._candidates: List[CertificateCandidate] = []
        self._engine_matches: List[RecipientMatch] = []
        self._matches: List[RecipientMatch] = []
        self._decisions: List[ReviewDecision] = []

    @property
    def matches(self) -> List[RecipientMatch]:
        """Final per-recipient outcomes of the last run (after review)."""
        return list(self._matches)

    @property
    def candidates(self) -> List[CertificateCandidate]:
        """Candidate pool of the last run."""
        return list(self._candidates)

    @property
    def ranker(self) -> MatchRanker:
        return self._ranker

    def run(self) -> MatchSummary:
        """Execute the matching workflow.

        Phases:
        1. Scan - read recipients and collect certificate files
        2. Match - rank a certificate for every recipient
        3. Review - optional interactive accept/override of flagged rows
        4. Summary - aggregate, export, log and display results

        Returns:
            MatchSummary for the run.

        Raises:
            ValueError: If the spreadsheet cannot be interpreted.
            OSError: If the spreadsheet cannot be read or the export fails.
        """
        start_time = time.time()
        self._errors.clear()
        self._decisions = []
        interrupted = False

        # Phase 1: Scan
        recipients = self._execute_scan_phase()
        self._tui.display_scan_summary(
            total_recipients=len(recipients),
            total_certificates=len(self._candidates),
            threshold=self.fuzzy_threshold,
        )

        if not self._candidates:
            logger.warning("No certificate files found in %s", self.certificate_dir)

        # Phase 2: Match
        progress, callback = self._tui.create_progress_callback(total=len(recipients))
        try:
            with progress:
                self._engine_matches = match_recipients(
                    self._ranker,
                    recipients,
                    self._candidates,
                    max_workers=self.max_workers,
                    progress_callback=callback,
                )
        except KeyboardInterrupt:
            self._tui.console.print("\n[yellow]Matching cancelled by user.[/yellow]")
            self._engine_matches = []
            interrupted = True

        logger.info(
            "Matched %d of %d recipient(s)",
            sum(1 for m in self._engine_matches if m.matched),
            len(self._engine_matches),
        )
        self._matches = list(self._engine_matches)
        self._tui.display_results(self._matches)

        # Phase 3: Review
        if self.review and not interrupted and self._matches:
            self._decisions = self._tui.review_matches(self._matches, self._candidates)
            if self._decisions:
                self._matches = apply_review_decisions(self._matches, self._decisions)
                self._tui.display_results(self._matches)

        # Phase 4: Summary
        summary = self._aggregate_summary(
            self._matches,
            duration=time.time() - start_time,
            interrupted=interrupted,
        )

        try:
            if self.output_path is not None and not interrupted:
                write_assignments_csv(self.output_path, self._matches)
                if self.verbose:
                    self._tui.console.print(
                        f"[dim]Assignments written to: {escape(str(self.output_path))}[/dim]"
                    )
        finally:
            # review decisions reach the audit log even if the export fails
            self._write_log(len(recipients), summary)

        self._tui.display_match_summary(summary)
        return summary

    def _execute_scan_phase(self) -> List[Recipient]:
        self._reader.clear_warnings()
        self._scanner.clear_errors()

        recipients = self._reader.read(self.spreadsheet)
        self._candidates = self._scanner.scan_directory(self.certificate_dir)

        warnings = self._reader.get_warnings() + self._scanner.get_errors()
        for warning in warnings:
            logger.warning(warning)
        self._errors.extend(warnings)

        if self.verbose and warnings:
            self._tui.console.print(f"[dim]Scan produced {len(warnings)} warning(s)[/dim]")

        return recipients

    def _aggregate_summary(
        self,
        matches: Sequence[RecipientMatch],
        duration: float,
        interrupted: bool,
    ) -> MatchSummary:
        matched = sum(1 for m in matches if m.matched)
        shared = find_shared_certificates(matches)
        for item in shared:
            logger.warning(
                "Certificate %s matched to %d recipients", item.filename, len(item.recipients)
            )

        return MatchSummary(
            total_recipients=len(matches),
            total_certificates=len(self._candidates),
            matched=matched,
            unmatched=len(matches) - matched,
            needs_review=sum(1 for m in matches if m.needs_review),
            manually_reviewed=sum(1 for m in matches if m.manually_reviewed),
            shared_certificates=shared,
            errors=self._errors.copy(),
            duration_seconds=duration,
            interrupted=interrupted,
        )

    def _write_log(self, total_recipients: int, summary: MatchSummary) -> None:
        """Write the audit log; failures are reported but never fatal."""
        if self.log_file_path is None:
            return

        try:
            with MatchLogger(log_file_path=self.log_file_path) as audit:
                audit.log_header()
                audit.log_scan_phase(
                    certificate_dir=self.certificate_dir,
                    spreadsheet=self.spreadsheet,
                    fuzzy_threshold=self.fuzzy_threshold,
                    total_recipients=total_recipients,
                    total_certificates=len(self._candidates),
                )
                audit.log_match_phase(self._engine_matches)
                for reviewed in self._matches:
                    if reviewed.review_decision is not None:
                        audit.log_review_decision(reviewed, reviewed.review_decision)
                audit.log_summary(summary)

                if self.verbose:
                    self._tui.console.print(
                        f"[dim]Log file: {escape(str(audit.get_log_path()))}[/dim]"
                    )
        except OSError as e:
            print(f"Warning: Could not write log file: {e}", file=sys.stderr)
