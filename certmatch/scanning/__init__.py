"""Input scanning package for certmatch.

This package turns the two inputs of a matching run into engine data:

- CertificateScanner: Collects certificate files from a directory as a
  candidate pool.
- RecipientReader: Loads recipient names from CSV or XLSX spreadsheets.

Example:
    >>> from certmatch.scanning import CertificateScanner, RecipientReader
    >>> from pathlib import Path
    >>>
    >>> pool = CertificateScanner().scan_directory(Path("/data/certificates"))
    >>> recipients = RecipientReader().read(Path("/data/recipients.csv"))
"""

from .certificate_scanner import CertificateScanner
from .recipient_reader import DEFAULT_NAME_COLUMNS, RecipientReader

__all__ = ["CertificateScanner", "RecipientReader", "DEFAULT_NAME_COLUMNS"]
