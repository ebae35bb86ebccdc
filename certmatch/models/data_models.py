"""
Core data models for the certificate matching tool.

This module contains the following dataclasses:
- CertificateCandidate: A certificate file offered for matching
- CandidateScore: Per-candidate breakdown of a ranking query
- RankedMatch: The candidate chosen by the ranker
- MatchResult: A ranked match extended with confidence information
- Recipient: A recipient row read from a spreadsheet
- RecipientMatch: The outcome of matching one recipient
- SharedCertificate: A file chosen for more than one recipient
- MatchSummary: Summary of the batch matching workflow
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .match_type import MatchType


@dataclass(frozen=True)
class CertificateCandidate:
    """A certificate file offered to the ranker."""
    filename: str                     # Original filename, extension included
    handle: Any = None                # Opaque file reference, never opened by the engine


@dataclass(frozen=True)
class CandidateScore:
    """Score breakdown for a single candidate."""
    candidate: CertificateCandidate
    recipient_token: str
    filename_token: str
    match_type: Optional[MatchType]   # None when no tier applied
    score: int = 0
    similarity: Optional[int] = None  # Only computed when the fuzzy tier was reached

    @property
    def matched(self) -> bool:
        return self.match_type is not None


@dataclass(frozen=True)
class RankedMatch:
    """The best candidate selected by MatchRanker.rank()."""
    candidate: CertificateCandidate
    match_type: MatchType
    score: int
    similarity: Optional[int] = None  # Populated for fuzzy matches only


@dataclass(frozen=True)
class MatchResult:
    """A ranked match with confidence (0-100) and review flag."""
    candidate: CertificateCandidate
    match_type: MatchType
    score: int
    confidence: int
    needs_review: bool
    similarity: Optional[int] = None

    @property
    def handle(self) -> Any:
        return self.candidate.handle

    @property
    def filename(self) -> str:
        return self.candidate.filename


@dataclass
class Recipient:
    """A recipient read from a spreadsheet row."""
    row_number: int                   # 1-based spreadsheet row (header is row 1)
    name: str                         # Raw name cell
    fields: Dict[str, str] = field(default_factory=dict)  # Whole row keyed by header


@dataclass
class RecipientMatch:
    """Outcome of matching one recipient against the candidate pool.

    The engine's result is kept as-is; a human review decision is stored
    next to it so the audit log can show both.
    """
    recipient: Recipient
    result: Optional[MatchResult]     # None when nothing matched
    review_decision: Optional[str] = None  # "accepted", "reassigned" or "rejected"
    override: Optional[CertificateCandidate] = None  # File picked during review

    @property
    def certificate(self) -> Optional[CertificateCandidate]:
        """The file that will be attached for this recipient, if any."""
        if self.review_decision == "rejected":
            return None
        if self.review_decision == "reassigned":
            return self.override
        return self.result.candidate if self.result is not None else None

    @property
    def matched(self) -> bool:
        return self.certificate is not None

    @property
    def manually_reviewed(self) -> bool:
        return self.review_decision is not None

    @property
    def needs_review(self) -> bool:
        return (
            self.review_decision is None
            and self.result is not None
            and self.result.needs_review
        )


@dataclass
class SharedCertificate:
    """A certificate file that was chosen for several recipients."""
    filename: str
    recipients: List[Recipient] = field(default_factory=list)


@dataclass
class MatchSummary:
    """Summary of the batch matching workflow returned by MatchOrchestrator."""
    total_recipients: int = 0         # Recipients with a non-blank name
    total_certificates: int = 0       # Files in the candidate pool
    matched: int = 0                  # Recipients with a file to attach
    unmatched: int = 0                # Recipients without a file
    needs_review: int = 0             # Matches still below the review threshold
    manually_reviewed: int = 0        # Recipients with a review decision
    shared_certificates: List[SharedCertificate] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)  # Warnings from scanning/reading
    duration_seconds: float = 0.0     # Total workflow duration
    interrupted: bool = False         # Whether the user stopped the workflow
