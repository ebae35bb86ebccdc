"""Confidence reporting for ranked certificate matches.

Maps the ranker's tier and score to a 0-100 confidence and flags matches
that should be confirmed by a human before a certificate is sent.

Example:
    >>> from certmatch.matching import MatchRanker, with_confidence
    >>> ranked = MatchRanker().rank("John Smith", ["Smith.pdf"])
    >>> result = with_confidence(ranked)
    >>> result.confidence, result.needs_review
    (70, False)
"""

from typing import Optional

from certmatch.models import MatchResult, MatchType, RankedMatch

from .scoring_policy import DEFAULT_POLICY, ScoringPolicy


def confidence_for(ranked: RankedMatch, policy: Optional[ScoringPolicy] = None) -> int:
    """Compute the 0-100 confidence for a ranked match.

    Args:
        ranked: The ranker's chosen candidate.
        policy: Scoring policy; defaults to DEFAULT_POLICY.

    Returns:
        Integer confidence. Exact matches are always 100; fuzzy matches use
        the similarity retained from ranking, not the capped score.
    """
    policy = policy or DEFAULT_POLICY

    if ranked.match_type is MatchType.EXACT:
        return 100

    if ranked.match_type is MatchType.FILE_CONTAINS_NAME:
        return min(
            policy.file_contains_confidence_cap,
            policy.file_contains_confidence_base
            + ranked.score // policy.file_contains_confidence_divisor,
        )

    if ranked.match_type is MatchType.NAME_CONTAINS_FILE:
        return min(
            policy.name_contains_confidence_cap,
            policy.name_contains_confidence_base
            + ranked.score // policy.name_contains_confidence_divisor,
        )

    # Fuzzy
    similarity = ranked.similarity if ranked.similarity is not None else 0
    return min(policy.fuzzy_confidence_cap, similarity)


def with_confidence(ranked: RankedMatch, policy: Optional[ScoringPolicy] = None) -> MatchResult:
    """Extend a ranked match with confidence and review information.

    Pure function: no candidate scanning happens here.
    """
    policy = policy or DEFAULT_POLICY
    confidence = confidence_for(ranked, policy)

    return MatchResult(
        candidate=ranked.candidate,
        match_type=ranked.match_type,
        score=ranked.score,
        confidence=confidence,
        needs_review=confidence < policy.review_threshold,
        similarity=ranked.similarity if ranked.match_type is MatchType.FUZZY else None,
    )


def confidence_label(confidence: float) -> str:
    """Badge label for a confidence value: High (>=90), Medium (>=70) or Low."""
    if confidence >= 90:
        return "High"
    if confidence >= 70:
        return "Medium"
    return "Low"
