"""Pytest fixtures for certmatch tests."""

import csv
import io
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest
from openpyxl import Workbook
from rich.console import Console

from certmatch.matching import MatchRanker
from certmatch.models import (
    CertificateCandidate,
    MatchResult,
    MatchType,
    Recipient,
    RecipientMatch,
)
from certmatch.ui import MatchTUI


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: tests that touch the filesystem end to end")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def certificate_dir(temp_dir: Path) -> Path:
    """Create a certificate directory with common naming conventions.

    Creates:
        certificates/
        ├── Certificate_John_Doe.pdf
        ├── Diploma-Jane-Smith.PDF
        ├── Award José García.pdf
        ├── Robert_Brown_Completion.pdf
        ├── Certificate.pdf          (no name, skipped)
        ├── .hidden.pdf              (hidden, skipped)
        ├── notes.txt                (wrong extension, skipped)
        └── archive/                 (directory, skipped)

    Returns:
        Path to the certificate directory.
    """
    base = temp_dir / "certificates"
    base.mkdir()

    for name in [
        "Certificate_John_Doe.pdf",
        "Diploma-Jane-Smith.PDF",
        "Award José García.pdf",
        "Robert_Brown_Completion.pdf",
        "Certificate.pdf",
        ".hidden.pdf",
        "notes.txt",
    ]:
        (base / name).write_bytes(b"%PDF-1.4\n")

    (base / "archive").mkdir()
    return base


@pytest.fixture
def recipients_csv(temp_dir: Path) -> Path:
    """Create a recipient CSV whose names match certificate_dir.

    Row 4 ("Unknown Person") has no certificate and row 5 has a blank name.
    """
    path = temp_dir / "recipients.csv"
    rows = [
        ["Name", "Email"],
        ["John Doe", "john@example.com"],
        ["Jane Smith", "jane@example.com"],
        ["Unknown Person", "unknown@example.com"],
        ["", "blank@example.com"],
        ["Jose Garcia", "jose@example.com"],
    ]
    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f).writerows(rows)
    return path


@pytest.fixture
def recipients_xlsx(temp_dir: Path) -> Path:
    """Create a recipient workbook with a non-default name column."""
    path = temp_dir / "recipients.xlsx"
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Student ID", "Full Name", "Email"])
    sheet.append([1001, "John Doe", "john@example.com"])
    sheet.append([1002, "Robert Brown", "robert@example.com"])
    sheet.append([None, None, None])
    sheet.append([1003, "Jane Smith", "jane@example.com"])
    workbook.save(path)
    return path


@pytest.fixture
def ranker_default() -> MatchRanker:
    """Return a MatchRanker with the default fuzzy threshold (95)."""
    return MatchRanker()


@pytest.fixture
def ranker_low_threshold() -> MatchRanker:
    """Return a MatchRanker with an 85% fuzzy threshold."""
    return MatchRanker(fuzzy_threshold=85)


@pytest.fixture
def sample_matches() -> List[RecipientMatch]:
    """Return one exact, one low-confidence and one unmatched recipient."""
    john = CertificateCandidate("Certificate_John_Doe.pdf", "h1")
    smith = CertificateCandidate("Smith.pdf", "h2")
    return [
        RecipientMatch(
            recipient=Recipient(row_number=2, name="John Doe"),
            result=MatchResult(john, MatchType.EXACT, 107, 100, False),
        ),
        RecipientMatch(
            recipient=Recipient(row_number=3, name="Anna Smith"),
            result=MatchResult(smith, MatchType.NAME_CONTAINS_FILE, 60, 65, True),
        ),
        RecipientMatch(
            recipient=Recipient(row_number=4, name="Nobody Here"),
            result=None,
        ),
    ]


@pytest.fixture
def tui_with_captured_output() -> Generator[tuple, None, None]:
    """Create a MatchTUI with captured output.

    Yields:
        Tuple of (MatchTUI instance, StringIO for reading output).
    """
    output = io.StringIO()
    console = Console(file=output, force_terminal=True, width=120)
    yield MatchTUI(console=console), output
