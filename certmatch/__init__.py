"""certmatch - Certificate Matching Tool.

Pairs recipient names from a spreadsheet with pre-made certificate files
whose names follow inconsistent conventions, using tiered exact,
containment and fuzzy matching with confidence reporting.
"""

__version__ = "0.1.0"

from .models import (
    MatchType,
    CertificateCandidate,
    CandidateScore,
    RankedMatch,
    MatchResult,
    Recipient,
    RecipientMatch,
    SharedCertificate,
    MatchSummary,
)

__all__ = [
    "__version__",
    "MatchType",
    "CertificateCandidate",
    "CandidateScore",
    "RankedMatch",
    "MatchResult",
    "Recipient",
    "RecipientMatch",
    "SharedCertificate",
    "MatchSummary",
]


def main() -> None:
    """Entry point for the certmatch CLI application.

    This function is called when the `certmatch` command is invoked after
    package installation via pip.
    """
    from certmatch.cli import app
    app()
