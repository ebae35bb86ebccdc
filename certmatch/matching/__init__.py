"""Certificate matching package for certmatch.

This package contains the matching engine that pairs recipient names with
certificate files: normalization, filename decomposition, edit-distance
similarity, tiered ranking and confidence reporting.

Example:
    >>> from certmatch.matching import MatchRanker
    >>> ranker = MatchRanker(fuzzy_threshold=85)
    >>> result = ranker.rank_with_confidence("John Doe", ["JonDoe.pdf"])
    >>> print(f"{result.filename}: {result.confidence}% ({result.match_type.value})")
    JonDoe.pdf: 85% (fuzzy)
"""

from .normalizer import normalize
from .filename_decomposer import (
    DEFAULT_EXTENSIONS,
    DEFAULT_NOISE_WORDS,
    FilenameDecomposer,
    extract_name_token,
)
from .similarity import levenshtein_distance, similarity
from .scoring_policy import DEFAULT_FUZZY_THRESHOLD, DEFAULT_POLICY, ScoringPolicy
from .confidence import confidence_for, confidence_label, with_confidence
from .match_ranker import MatchRanker, as_candidates, rank, rank_with_confidence

__all__ = [
    "normalize",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_NOISE_WORDS",
    "FilenameDecomposer",
    "extract_name_token",
    "levenshtein_distance",
    "similarity",
    "DEFAULT_FUZZY_THRESHOLD",
    "DEFAULT_POLICY",
    "ScoringPolicy",
    "confidence_for",
    "confidence_label",
    "with_confidence",
    "MatchRanker",
    "as_candidates",
    "rank",
    "rank_with_confidence",
]
