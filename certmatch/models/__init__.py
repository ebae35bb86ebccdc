"""
Models package for the certificate matching tool.

This package provides convenient imports for all data models:
- MatchType: Enum for the four match tiers
- CertificateCandidate: A certificate file offered for matching
- CandidateScore: Per-candidate score breakdown
- RankedMatch: Best candidate chosen by the ranker
- MatchResult: Ranked match with confidence information
- Recipient: Spreadsheet recipient row
- RecipientMatch: Outcome of matching one recipient
- SharedCertificate: A file chosen for more than one recipient
- MatchSummary: Batch workflow summary
"""

from .match_type import MatchType
from .data_models import (
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
