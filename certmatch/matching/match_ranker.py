"""Recipient-to-certificate ranking for certmatch.

This module provides the MatchRanker class which picks the certificate
file that belongs to a recipient from a pool of candidate files.

Every candidate is evaluated under four tiers, in order of decreasing
evidence strength; the first tier that applies decides its score:
    1. Exact (base 100, plus position and filename-length bonuses)
    2. File contains name (base 80, plus position and length-ratio bonuses)
    3. Name contains file (base 60)
    4. Fuzzy (50 + similarity, capped at 99, above the fuzzy threshold)

The highest score wins. Ties go to the shorter filename.

Example:
    >>> from certmatch.matching import MatchRanker
    >>> ranker = MatchRanker()
    >>> best = ranker.rank("John Doe", ["Certificate_John_Doe.pdf", "Jane.pdf"])
    >>> best.candidate.filename, best.match_type.value
    ('Certificate_John_Doe.pdf', 'exact')
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from certmatch.models import (
    CandidateScore,
    CertificateCandidate,
    MatchResult,
    MatchType,
    RankedMatch,
)

from .confidence import with_confidence
from .filename_decomposer import FilenameDecomposer
from .normalizer import normalize
from .scoring_policy import DEFAULT_FUZZY_THRESHOLD, DEFAULT_POLICY, ScoringPolicy
from .similarity import similarity

logger = logging.getLogger(__name__)


def as_candidates(candidates: Iterable[Any]) -> List[CertificateCandidate]:
    """Coerce a pool into CertificateCandidate instances.

    Accepts CertificateCandidate objects, bare filename strings (the
    filename doubles as the handle) and ``(filename, handle)`` pairs given
    as any two-element sequence, such as a tuple or list.

    Raises:
        TypeError: If an element is none of the above.
    """
    pool: List[CertificateCandidate] = []
    for item in candidates or ():
        if isinstance(item, CertificateCandidate):
            pool.append(item)
        elif isinstance(item, str):
            pool.append(CertificateCandidate(filename=item, handle=item))
        elif isinstance(item, Sequence) and not isinstance(item, bytes) and len(item) == 2:
            pool.append(CertificateCandidate(filename=item[0], handle=item[1]))
        else:
            raise TypeError(
                f"Unsupported candidate {item!r}: expected CertificateCandidate, "
                "filename string or (filename, handle) pair"
            )
    return pool


def _validate_threshold(value: float) -> float:
    if not 0 <= value <= 100:
        raise ValueError(f"fuzzy_threshold must be between 0 and 100, got {value}")
    return value


class MatchRanker:
    """Ranks candidate certificate files for a recipient name.

    The ranker holds only read-only configuration (decomposer, policy and
    default threshold), so one instance can serve any number of threads.

    Attributes:
        decomposer: FilenameDecomposer used to extract filename tokens.
        policy: ScoringPolicy with base scores, bonuses and guards.
        fuzzy_threshold: Default minimum similarity (0-100) for the
            fuzzy tier.

    Example:
        >>> ranker = MatchRanker(fuzzy_threshold=85)
        >>> ranker.rank("John Doe", ["JonDoe.pdf"]).match_type.value
        'fuzzy'
    """

    def __init__(
        self,
        decomposer: Optional[FilenameDecomposer] = None,
        policy: Optional[ScoringPolicy] = None,
        fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
    ) -> None:
        """Initialize the MatchRanker.

        Args:
            decomposer: Filename decomposer. Defaults to the built-in
                noise-word vocabulary.
            policy: Scoring policy. Defaults to DEFAULT_POLICY.
            fuzzy_threshold: Default fuzzy threshold (0-100). Defaults to 95.

        Raises:
            ValueError: If fuzzy_threshold is not between 0 and 100.
        """
        self.decomposer = decomposer if decomposer is not None else FilenameDecomposer()
        self.policy = policy if policy is not None else DEFAULT_POLICY
        self.fuzzy_threshold = _validate_threshold(fuzzy_threshold)

    def rank(
        self,
        recipient_name: Any,
        candidates: Iterable[Any],
        fuzzy_threshold: Optional[float] = None,
    ) -> Optional[RankedMatch]:
        """Select the best certificate for a recipient.

        Args:
            recipient_name: Raw recipient name from the spreadsheet.
            candidates: Candidate pool (see as_candidates()).
            fuzzy_threshold: Overrides the ranker's default threshold.

        Returns:
            The best RankedMatch, or None when no candidate applies, the
            pool is empty or the name normalizes to fewer than 2 characters.
        """
        recipient_token = normalize(recipient_name)
        if len(recipient_token) < self.policy.min_name_length:
            logger.debug("Name %r too short to match (token %r)", recipient_name, recipient_token)
            return None

        threshold = self._resolve_threshold(fuzzy_threshold)

        best_key: Optional[Tuple[int, int]] = None
        best_score: Optional[CandidateScore] = None
        for candidate in as_candidates(candidates):
            scored = self._score_candidate(recipient_token, candidate, threshold)
            if scored is None or scored.match_type is None:
                continue

            # Higher score first, then shorter filename; earlier pool entry keeps the tie
            key = (scored.score, -len(candidate.filename))
            if best_key is None or key > best_key:
                best_key = key
                best_score = scored

        if best_score is None:
            logger.debug("No certificate matched %r", recipient_name)
            return None

        ranked = RankedMatch(
            candidate=best_score.candidate,
            match_type=best_score.match_type,
            score=best_score.score,
            similarity=best_score.similarity if best_score.match_type is MatchType.FUZZY else None,
        )
        logger.debug(
            "Matched %r -> %s (%s, score %d)",
            recipient_name,
            ranked.candidate.filename,
            ranked.match_type.value,
            ranked.score,
        )
        return ranked

    def rank_with_confidence(
        self,
        recipient_name: Any,
        candidates: Iterable[Any],
        fuzzy_threshold: Optional[float] = None,
    ) -> Optional[MatchResult]:
        """Rank candidates and attach confidence and review information."""
        ranked = self.rank(recipient_name, candidates, fuzzy_threshold)
        if ranked is None:
            return None
        return with_confidence(ranked, self.policy)

    def score_candidates(
        self,
        recipient_name: Any,
        candidates: Iterable[Any],
        fuzzy_threshold: Optional[float] = None,
    ) -> List[CandidateScore]:
        """Score every candidate, including those no tier accepted.

        Candidates whose filename yields an empty token are reported with
        ``match_type=None``. If the recipient name is too short, every
        candidate is reported unmatched.

        Returns:
            One CandidateScore per candidate, in pool order.
        """
        recipient_token = normalize(recipient_name)
        threshold = self._resolve_threshold(fuzzy_threshold)
        name_ok = len(recipient_token) >= self.policy.min_name_length

        results: List[CandidateScore] = []
        for candidate in as_candidates(candidates):
            scored = None
            if name_ok:
                scored = self._score_candidate(recipient_token, candidate, threshold)
            if scored is None:
                scored = CandidateScore(
                    candidate=candidate,
                    recipient_token=recipient_token,
                    filename_token=self.decomposer.extract_name_token(candidate.filename),
                    match_type=None,
                )
            results.append(scored)
        return results

    def _resolve_threshold(self, fuzzy_threshold: Optional[float]) -> float:
        if fuzzy_threshold is None:
            return self.fuzzy_threshold
        return _validate_threshold(fuzzy_threshold)

    def _score_candidate(
        self,
        recipient_token: str,
        candidate: CertificateCandidate,
        threshold: float,
    ) -> Optional[CandidateScore]:
        """Evaluate one candidate, stopping at the first tier that applies.

        Returns:
            CandidateScore (match_type None if no tier applied), or None if
            the filename yields an empty token.
        """
        filename = candidate.filename
        file_token = self.decomposer.extract_name_token(filename)
        if not file_token:
            return None

        policy = self.policy
        name_len = len(recipient_token)
        substring_ok = name_len >= policy.min_substring_length

        # Tier 1: Exact
        if recipient_token == file_token:
            score = policy.exact_base
            score += self._original_position_bonus(recipient_token, filename)
            if len(filename) < policy.short_filename_length:
                score += policy.short_filename_bonus
            elif len(filename) < policy.medium_filename_length:
                score += policy.medium_filename_bonus
            return CandidateScore(candidate, recipient_token, file_token, MatchType.EXACT, score)

        # Tier 2: File contains name
        if substring_ok and recipient_token in file_token:
            score = policy.file_contains_base
            if file_token.startswith(recipient_token):
                score += policy.token_starts_bonus
            elif file_token.endswith(recipient_token):
                score += policy.token_ends_bonus

            length_ratio = name_len / len(file_token)
            if length_ratio > policy.high_length_ratio:
                score += policy.high_length_ratio_bonus
            elif length_ratio > policy.medium_length_ratio:
                score += policy.medium_length_ratio_bonus

            score += self._original_position_bonus(recipient_token, filename)
            return CandidateScore(
                candidate, recipient_token, file_token, MatchType.FILE_CONTAINS_NAME, score
            )

        # Tier 3: Name contains file
        if substring_ok and file_token in recipient_token:
            return CandidateScore(
                candidate,
                recipient_token,
                file_token,
                MatchType.NAME_CONTAINS_FILE,
                policy.name_contains_base,
            )

        # Tier 4: Fuzzy
        if substring_ok and len(file_token) >= policy.min_substring_length:
            percent = similarity(recipient_token, file_token)
            if percent >= threshold:
                score = min(policy.fuzzy_score_cap, policy.fuzzy_base + percent)
                return CandidateScore(
                    candidate, recipient_token, file_token, MatchType.FUZZY, score, percent
                )
            return CandidateScore(
                candidate, recipient_token, file_token, None, 0, percent
            )

        return CandidateScore(candidate, recipient_token, file_token, None)

    def _original_position_bonus(self, recipient_token: str, filename: str) -> int:
        """Bonus for where the name sits in the filename before noise-word removal."""
        original_token = normalize(self.decomposer.strip_extension(filename).lower())
        if original_token.startswith(recipient_token):
            return self.policy.original_starts_bonus
        if original_token.endswith(recipient_token):
            return self.policy.original_ends_bonus
        return 0


_default_ranker = MatchRanker()


def rank(
    recipient_name: Any,
    candidates: Sequence[Any],
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> Optional[RankedMatch]:
    """Rank candidates with the default decomposer and policy."""
    return _default_ranker.rank(recipient_name, candidates, fuzzy_threshold)


def rank_with_confidence(
    recipient_name: Any,
    candidates: Sequence[Any],
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> Optional[MatchResult]:
    """Rank candidates and report confidence with the default configuration."""
    return _default_ranker.rank_with_confidence(recipient_name, candidates, fuzzy_threshold)
