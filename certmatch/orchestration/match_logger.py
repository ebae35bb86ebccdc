"""MatchLogger for writing certificate matching audit logs.

This module provides the MatchLogger class that records every matching
decision of a batch run in a structured text file, so that the choice of
attachment for each recipient can be audited after certificates are sent.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from certmatch.models import MatchSummary, RecipientMatch


class MatchLogger:
    """Logger for matching runs with structured output format.

    Generates log files with sections for header, scan phase, match phase,
    review phase and summary.

    Usage:
        with MatchLogger() as logger:
            logger.log_header()
            logger.log_scan_phase(cert_dir, spreadsheet, threshold, recipients, certificates)
            logger.log_match_phase(matches)
            logger.log_review_decision(match, "accepted")
            logger.log_summary(summary)

    Attributes:
        SEPARATOR: The 65-character separator line used between sections.
    """

    SEPARATOR = "=" * 65

    def __init__(self, log_file_path: Optional[Path] = None) -> None:
        """Initialize the MatchLogger.

        Args:
            log_file_path: Optional path for the log file. If not provided,
                generates a timestamped filename in the current directory.

        Raises:
            OSError: If the log file path is not writable.
        """
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None
        self._review_started = False

        if log_file_path is None:
            timestamp_str = self._start_timestamp.strftime("%Y-%m-%d_%H-%M-%S")
            self._log_file_path = Path.cwd() / f"match_log_{timestamp_str}.log"
        else:
            self._log_file_path = Path(log_file_path)

        self._validate_path()

    def _validate_path(self) -> None:
        """Validate that the log file path is writable.

        Raises:
            OSError: If the parent directory doesn't exist or is not writable.
        """
        parent = self._log_file_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")
        try:
            test_file = parent / f".certmatch_test_{id(self)}"
            test_file.touch()
            test_file.unlink()
        except PermissionError:
            raise OSError(f"Permission denied: cannot write to {parent}")

    def __enter__(self) -> "MatchLogger":
        try:
            self._file_handle = open(self._log_file_path, "w", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open log file for writing: {e}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing log file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def get_log_path(self) -> Path:
        """Get the path to the log file."""
        return self._log_file_path

    def log_header(self) -> None:
        """Write the title and timestamp."""
        self._write_separator()
        self._write_line("Certificate Matching Tool - Match Log")
        self._write_separator()
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        self._write_line("")

    def log_scan_phase(
        self,
        certificate_dir: Path,
        spreadsheet: Path,
        fuzzy_threshold: float,
        total_recipients: int,
        total_certificates: int,
    ) -> None:
        """Write the scan phase section.

        Args:
            certificate_dir: Directory the candidate pool was read from.
            spreadsheet: Recipient spreadsheet.
            fuzzy_threshold: Fuzzy similarity threshold (0-100).
            total_recipients: Number of recipients read.
            total_certificates: Number of certificate files found.
        """
        self._write_separator()
        self._write_line("SCAN PHASE")
        self._write_separator()
        self._write_line(f"Certificate directory: {certificate_dir}")
        self._write_line(f"Recipient spreadsheet: {spreadsheet}")
        self._write_line(f"Fuzzy threshold: {fuzzy_threshold:g}%")
        self._write_line(f"Recipients read: {total_recipients}")
        self._write_line(f"Certificates found: {total_certificates}")
        self._write_line("")

    def log_match_phase(self, matches: List[RecipientMatch]) -> None:
        """Write one line per recipient with the chosen file or NO MATCH."""
        self._write_separator()
        self._write_line("MATCH PHASE")
        self._write_separator()

        for match in matches:
            self._write_line(self._describe(match))
        self._write_line("")

    def log_review_decision(self, match: RecipientMatch, decision: str) -> None:
        """Record a manual review decision (accepted, reassigned, rejected)."""
        if not self._review_started:
            self._write_separator()
            self._write_line("REVIEW")
            self._write_separator()
            self._review_started = True

        now = self._format_timestamp(datetime.now())
        self._write_line(f"[{now}] {decision.upper()}: {self._describe(match)}")

    def log_summary(self, summary: MatchSummary) -> None:
        """Write the summary section."""
        if self._review_started:
            self._write_line("")

        self._write_separator()
        self._write_line("SUMMARY")
        self._write_separator()
        self._write_line(f"Recipients: {summary.total_recipients:,}")
        self._write_line(f"Certificates: {summary.total_certificates:,}")
        self._write_line(f"Matched: {summary.matched:,}")
        self._write_line(f"Unmatched: {summary.unmatched:,}")
        self._write_line(f"Needs review: {summary.needs_review:,}")
        self._write_line(f"Manually reviewed: {summary.manually_reviewed:,}")

        if summary.shared_certificates:
            self._write_line(f"Shared certificates: {len(summary.shared_certificates)}")
            for shared in summary.shared_certificates:
                rows = ", ".join(
                    f"row {r.row_number} ({r.name})" for r in shared.recipients
                )
                self._write_line(f"- {shared.filename}: {rows}", indent=2)

        if summary.errors:
            self._write_line(f"Total warnings: {len(summary.errors)}")
            self._write_line("Warnings:")
            for error in summary.errors:
                self._write_line(f"- {error}", indent=2)

        if summary.interrupted:
            self._write_line("Run interrupted by user")

        self._write_line(f"Duration: {self._format_duration(summary.duration_seconds)}")
        self._write_line("")
        self._write_line(f"Log file: {self._log_file_path}")
        self._write_separator()

    @staticmethod
    def _describe(match: RecipientMatch) -> str:
        prefix = f"Row {match.recipient.row_number}: {match.recipient.name} -> "
        result = match.result
        if result is None:
            return prefix + "NO MATCH"

        details = (
            f"{result.filename} ({result.match_type.value}, score {result.score}, "
            f"confidence {result.confidence}%"
        )
        if result.similarity is not None:
            details += f", similarity {result.similarity}%"
        details += ")"
        if match.manually_reviewed:
            details += " [reviewed]"
        elif result.needs_review:
            details += " [NEEDS REVIEW]"
        return prefix + details

    def _format_duration(self, seconds: float) -> str:
        """Format duration as "45s", "5m 23s" or "1h 5m 30s"."""
        total_seconds = int(seconds)

        if total_seconds < 60:
            return f"{total_seconds}s"

        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        secs = total_seconds % 60

        if hours > 0:
            return f"{hours}h {minutes}m {secs}s"
        return f"{minutes}m {secs}s"

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str, indent: int = 0) -> None:
        """Write a line to the log file with optional indentation."""
        if self._file_handle is None:
            print(
                f"Warning: Attempted to write to closed log file: {text}",
                file=sys.stderr,
            )
            return

        try:
            self._file_handle.write(" " * indent + text + "\n")
        except OSError as e:
            print(f"Warning: Error writing to log file: {e}", file=sys.stderr)
