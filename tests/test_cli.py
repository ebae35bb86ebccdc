"""End-to-end tests for the certmatch CLI.

This module tests the CLI interface using Typer's CliRunner against
temporary certificate directories and recipient spreadsheets.
"""

import csv
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from certmatch import __version__
from certmatch.cli import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CliRunner instance for testing."""
    return CliRunner()


class TestCliGeneral:
    """Tests for global options."""

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"v{__version__}" in result.output

    def test_no_args_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, [])

        assert "match" in result.output
        assert "explain" in result.output


class TestMatchCommand:
    """Tests for the match command."""

    def test_match_success(
        self, cli_runner: CliRunner, recipients_csv: Path, certificate_dir: Path
    ) -> None:
        result = cli_runner.invoke(app, ["match", str(recipients_csv), str(certificate_dir)])

        assert result.exit_code == 0, result.output
        assert "Match Summary" in result.output

    def test_match_writes_output_and_log(
        self,
        cli_runner: CliRunner,
        temp_dir: Path,
        recipients_csv: Path,
        certificate_dir: Path,
    ) -> None:
        output = temp_dir / "out.csv"
        log_file = temp_dir / "run.log"

        result = cli_runner.invoke(
            app,
            [
                "match",
                str(recipients_csv),
                str(certificate_dir),
                "--output", str(output),
                "--log-file", str(log_file),
                "--workers", "2",
            ],
        )

        assert result.exit_code == 0, result.output
        with open(output, encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0][:3] == ["row", "recipient", "file"]
        assert len(rows) == 5
        assert "MATCH PHASE" in log_file.read_text(encoding="utf-8")

    def test_fail_on_unmatched(
        self, cli_runner: CliRunner, recipients_csv: Path, certificate_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            app,
            ["match", str(recipients_csv), str(certificate_dir), "--fail-on-unmatched"],
        )

        assert result.exit_code == 2
        assert "have no certificate" in result.output

    def test_fail_on_unmatched_all_matched(
        self, cli_runner: CliRunner, recipients_xlsx: Path, certificate_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            app,
            ["match", str(recipients_xlsx), str(certificate_dir), "--fail-on-unmatched"],
        )

        assert result.exit_code == 0, result.output

    def test_name_column_option(
        self, cli_runner: CliRunner, temp_dir: Path, certificate_dir: Path
    ) -> None:
        spreadsheet = temp_dir / "custom.csv"
        spreadsheet.write_text("Attendee,Email\nJohn Doe,j@example.com\n", encoding="utf-8")

        result = cli_runner.invoke(
            app, ["match", str(spreadsheet), str(certificate_dir), "-n", "Attendee"]
        )

        assert result.exit_code == 0, result.output

    def test_unknown_name_column(
        self, cli_runner: CliRunner, recipients_csv: Path, certificate_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            app, ["match", str(recipients_csv), str(certificate_dir), "-n", "Nickname"]
        )

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_certificate_dir(
        self, cli_runner: CliRunner, temp_dir: Path, recipients_csv: Path
    ) -> None:
        result = cli_runner.invoke(
            app, ["match", str(recipients_csv), str(temp_dir / "missing")]
        )

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_missing_spreadsheet(
        self, cli_runner: CliRunner, temp_dir: Path, certificate_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            app, ["match", str(temp_dir / "missing.csv"), str(certificate_dir)]
        )

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_spreadsheet_that_is_not_a_workbook(
        self, cli_runner: CliRunner, temp_dir: Path, certificate_dir: Path
    ) -> None:
        spreadsheet = temp_dir / "renamed.xlsx"
        spreadsheet.write_text("Name\nJohn Doe\n", encoding="utf-8")

        result = cli_runner.invoke(app, ["match", str(spreadsheet), str(certificate_dir)])

        assert result.exit_code == 1
        assert "Error: Cannot read spreadsheet" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_output_into_missing_directory(
        self, cli_runner: CliRunner, temp_dir: Path, recipients_csv: Path, certificate_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            app,
            [
                "match",
                str(recipients_csv),
                str(certificate_dir),
                "--output", str(temp_dir / "missing" / "out.csv"),
            ],
        )

        assert result.exit_code == 1
        assert "Output directory does not exist" in result.output

    def test_bracketed_recipient_name(
        self, cli_runner: CliRunner, temp_dir: Path, certificate_dir: Path
    ) -> None:
        spreadsheet = temp_dir / "brackets.csv"
        spreadsheet.write_text("Name\nDoe [/b]\nJohn Doe\n", encoding="utf-8")

        result = cli_runner.invoke(app, ["match", str(spreadsheet), str(certificate_dir)])

        assert result.exit_code == 0, result.output
        assert "Doe [/b]" in result.output
        assert "Match Summary" in result.output

    @pytest.mark.parametrize("threshold", ["-5", "150"])
    def test_invalid_threshold(
        self, cli_runner: CliRunner, recipients_csv: Path, certificate_dir: Path, threshold: str
    ) -> None:
        result = cli_runner.invoke(
            app,
            ["match", str(recipients_csv), str(certificate_dir), "--fuzzy-threshold", threshold],
        )

        assert result.exit_code == 2

    def test_invalid_workers(
        self, cli_runner: CliRunner, recipients_csv: Path, certificate_dir: Path
    ) -> None:
        result = cli_runner.invoke(
            app, ["match", str(recipients_csv), str(certificate_dir), "--workers", "0"]
        )

        assert result.exit_code == 2

    def test_keyboard_interrupt(
        self, cli_runner: CliRunner, recipients_csv: Path, certificate_dir: Path
    ) -> None:
        with patch("certmatch.cli.MatchOrchestrator.run", side_effect=KeyboardInterrupt):
            result = cli_runner.invoke(
                app, ["match", str(recipients_csv), str(certificate_dir)]
            )

        assert result.exit_code == 130
        assert "interrupted" in result.output


class TestExplainCommand:
    """Tests for the explain command."""

    def test_explain_best_match(self, cli_runner: CliRunner, certificate_dir: Path) -> None:
        result = cli_runner.invoke(app, ["explain", "John Doe", str(certificate_dir)])

        assert result.exit_code == 0, result.output
        assert "Name token: johndoe" in result.output
        assert "Best match:" in result.output
        assert "Certificate_John_Doe.pdf" in result.output

    def test_explain_no_match(self, cli_runner: CliRunner, certificate_dir: Path) -> None:
        result = cli_runner.invoke(app, ["explain", "Unknown Person", str(certificate_dir)])

        assert result.exit_code == 1
        assert "No certificate matched." in result.output

    def test_explain_fuzzy_threshold(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        (temp_dir / "JonDoe.pdf").write_bytes(b"%PDF")

        strict = cli_runner.invoke(app, ["explain", "John Doe", str(temp_dir)])
        loose = cli_runner.invoke(app, ["explain", "John Doe", str(temp_dir), "-t", "85"])

        assert strict.exit_code == 1
        assert loose.exit_code == 0, loose.output
        assert "fuzzy" in loose.output

    def test_explain_noise_word(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        (temp_dir / "Attestation_Jane_Smith.pdf").write_bytes(b"%PDF")

        result = cli_runner.invoke(
            app, ["explain", "Jane Smith", str(temp_dir), "-w", "attestation"]
        )

        assert result.exit_code == 0, result.output
        assert "exact" in result.output


class TestNormalizeCommand:
    """Tests for the normalize command."""

    def test_normalize_values(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["normalize", "José García", "Cert_John_Doe.pdf"])

        assert result.exit_code == 0, result.output
        assert "josegarcia" in result.output
        assert "johndoe" in result.output
