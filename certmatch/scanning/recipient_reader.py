"""Recipient spreadsheet reading for certmatch.

This module provides the RecipientReader class which loads recipient rows
from ``.csv`` or ``.xlsx`` spreadsheets. The first row is the header; one
column holds the recipient's display name.

Example:
    >>> from certmatch.scanning import RecipientReader
    >>> reader = RecipientReader(name_column="Full Name")
    >>> recipients = reader.read(Path("recipients.xlsx"))
    >>> print(recipients[0].row_number, recipients[0].name)
    2 José García
"""

import csv
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from certmatch.models import Recipient

logger = logging.getLogger(__name__)

# Headers tried, in order, when no name column is given
DEFAULT_NAME_COLUMNS = (
    "name",
    "full name",
    "fullname",
    "recipient",
    "recipient name",
    "student",
    "participant",
)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx")


def _header_key(header: str) -> str:
    return " ".join(header.replace("_", " ").split()).lower()


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


class RecipientReader:
    """Reads recipients from CSV and XLSX spreadsheets.

    Rows whose name cell is blank are skipped and recorded as warnings
    (see get_warnings()).

    Attributes:
        name_column: Header of the name column, or None to auto-detect.
    """

    def __init__(self, name_column: Optional[str] = None) -> None:
        self.name_column = name_column
        self._warnings: List[str] = []

    def read(self, path: Path) -> List[Recipient]:
        """Read recipients from a spreadsheet.

        Args:
            path: Path to a ``.csv`` or ``.xlsx`` file.

        Returns:
            Recipients in spreadsheet order. ``row_number`` is the 1-based
            row in the sheet, the header being row 1.

        Raises:
            ValueError: If the extension is unsupported, the workbook is
                corrupt, the sheet has no header, or the name column cannot
                be found.
            OSError: If the file cannot be read.
        """
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_EXTENSIONS:
            raise ValueError(
                f"Unsupported spreadsheet format '{path.suffix}': "
                f"expected one of {', '.join(SUPPORTED_EXTENSIONS)}"
            )

        if suffix == ".csv":
            rows = self._read_csv_rows(path)
        else:
            rows = self._read_xlsx_rows(path)

        if not rows or not any(_cell_text(cell) for cell in rows[0]):
            raise ValueError(f"Spreadsheet has no header row: {path}")

        headers = [_cell_text(cell) for cell in rows[0]]
        name_index = self._resolve_name_column(headers)

        recipients: List[Recipient] = []
        for offset, row in enumerate(rows[1:], start=2):
            cells = [_cell_text(cell) for cell in row]
            if not any(cells):
                continue

            name = cells[name_index] if name_index < len(cells) else ""
            if not name:
                self._warnings.append(f"Row {offset}: blank recipient name, skipped")
                continue

            fields: Dict[str, str] = {}
            for idx, header in enumerate(headers):
                if header:
                    fields[header] = cells[idx] if idx < len(cells) else ""

            recipients.append(Recipient(row_number=offset, name=name, fields=fields))

        logger.info("Read %d recipient(s) from %s", len(recipients), path)
        return recipients

    def _resolve_name_column(self, headers: Sequence[str]) -> int:
        """Find the index of the name column.

        Raises:
            ValueError: If no matching header exists.
        """
        keys = [_header_key(h) for h in headers]

        if self.name_column:
            wanted = _header_key(self.name_column)
            if wanted in keys:
                return keys.index(wanted)
            raise ValueError(
                f"Name column '{self.name_column}' not found. "
                f"Available columns: {', '.join(h for h in headers if h)}"
            )

        for candidate in DEFAULT_NAME_COLUMNS:
            if candidate in keys:
                return keys.index(candidate)

        raise ValueError(
            "Could not detect the recipient name column; use --name-column. "
            f"Available columns: {', '.join(h for h in headers if h)}"
        )

    @staticmethod
    def _read_csv_rows(path: Path) -> List[List[Any]]:
        # utf-8-sig strips the BOM that spreadsheet exports often add
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            return [row for row in csv.reader(f)]

    @staticmethod
    def _read_xlsx_rows(path: Path) -> List[List[Any]]:
        try:
            workbook = load_workbook(filename=str(path), read_only=True, data_only=True)
        except (BadZipFile, InvalidFileException, KeyError) as e:
            # not a workbook, e.g. CSV text saved with an .xlsx name
            raise ValueError(f"Cannot read spreadsheet {path}: {e}") from e
        try:
            sheet = workbook.worksheets[0]
            return [list(row) for row in sheet.iter_rows(values_only=True)]
        finally:
            workbook.close()

    def get_warnings(self) -> List[str]:
        """Get warnings collected while reading (skipped rows)."""
        return self._warnings.copy()

    def clear_warnings(self) -> None:
        """Clear accumulated warnings."""
        self._warnings.clear()
