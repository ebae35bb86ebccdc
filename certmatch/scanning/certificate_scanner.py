"""Certificate directory scanning for certmatch.

This module provides the CertificateScanner class which turns a directory of
certificate files into a candidate pool for the matching engine. File
contents are never opened; only names are used.

Example:
    >>> from certmatch.scanning import CertificateScanner
    >>> scanner = CertificateScanner()
    >>> pool = scanner.scan_directory(Path("/data/certificates"))
    >>> for candidate in pool:
    ...     print(candidate.filename, candidate.handle)
"""

from pathlib import Path
from typing import List, Optional

from certmatch.matching import FilenameDecomposer
from certmatch.models import CertificateCandidate


class CertificateScanner:
    """Collects certificate files from a directory as CertificateCandidate objects.

    Only immediate children are scanned. Hidden files and files whose
    extension the decomposer does not recognise are skipped. Errors are
    accumulated instead of raised, so a single unreadable entry does not
    abort a batch.

    Attributes:
        _decomposer: Decomposer whose extensions decide which files count.
        _errors: List of error messages encountered during scanning.
    """

    def __init__(self, decomposer: Optional[FilenameDecomposer] = None) -> None:
        """Initialize the CertificateScanner.

        Args:
            decomposer: Optional FilenameDecomposer. Defaults to one that
                accepts ``.pdf`` files.
        """
        self._decomposer = decomposer if decomposer is not None else FilenameDecomposer()
        self._errors: List[str] = []

    def scan_directory(self, directory: Path) -> List[CertificateCandidate]:
        """Scan a directory for certificate files.

        Args:
            directory: Directory containing certificate files.

        Returns:
            Candidates sorted by filename (stable pool order), each with its
            resolved Path as the handle. An empty list is returned if the
            directory cannot be read; the reason is recorded in the errors.
        """
        result: List[CertificateCandidate] = []

        try:
            resolved_path = directory.resolve()

            if not resolved_path.exists():
                self._errors.append(f"Certificate directory not found: {directory}")
                return result

            if not resolved_path.is_dir():
                self._errors.append(f"Not a directory: {directory}")
                return result

            for child in sorted(resolved_path.iterdir(), key=lambda p: p.name):
                if child.name.startswith("."):
                    continue

                try:
                    if not child.is_file():
                        continue
                except OSError as e:
                    self._errors.append(f"Error accessing {child}: {e}")
                    continue

                if not self._decomposer.has_extension(child.name):
                    continue

                if not self._decomposer.extract_name_token(child.name):
                    self._errors.append(
                        f"No recipient name in filename, skipped: {child.name}"
                    )
                    continue

                result.append(CertificateCandidate(filename=child.name, handle=child))

        except PermissionError:
            self._errors.append(f"Permission denied accessing directory: {directory}")
        except OSError as e:
            self._errors.append(f"Error scanning directory {directory}: {e}")

        return result

    def get_errors(self) -> List[str]:
        """Get list of errors encountered during scanning operations."""
        return self._errors.copy()

    def clear_errors(self) -> None:
        """Clear the list of accumulated errors."""
        self._errors.clear()

    @property
    def decomposer(self) -> FilenameDecomposer:
        """The FilenameDecomposer used by this scanner."""
        return self._decomposer
