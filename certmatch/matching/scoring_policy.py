"""Scoring constants for the certificate matching tiers.

The numbers encode heuristic domain knowledge rather than algorithmic
necessity, so they live in one frozen dataclass that can be replaced per
ranker for tuning and testing.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringPolicy:
    """Named scoring and confidence constants used by MatchRanker.

    The fuzzy score cap must stay below ``exact_base`` so that an exact
    match always outranks a fuzzy one regardless of bonuses.
    """

    # Length guards
    min_name_length: int = 2              # Global floor for the recipient token
    min_substring_length: int = 3         # Floor for containment and fuzzy tiers

    # Tier base scores
    exact_base: int = 100
    file_contains_base: int = 80
    name_contains_base: int = 60
    fuzzy_base: int = 50
    fuzzy_score_cap: int = 99

    # Bonus: name position in the original (pre-decomposition) filename
    original_starts_bonus: int = 10
    original_ends_bonus: int = 5

    # Bonus: raw filename length (exact tier)
    short_filename_length: int = 15
    short_filename_bonus: int = 5
    medium_filename_length: int = 25
    medium_filename_bonus: int = 2

    # Bonus: name position in the decomposed filename token (fileContainsName tier)
    token_starts_bonus: int = 15
    token_ends_bonus: int = 10

    # Bonus: recipient/filename token length ratio (fileContainsName tier)
    high_length_ratio: float = 0.8
    high_length_ratio_bonus: int = 5
    medium_length_ratio: float = 0.5
    medium_length_ratio_bonus: int = 2

    # Confidence mapping
    file_contains_confidence_base: int = 70
    file_contains_confidence_divisor: int = 4
    file_contains_confidence_cap: int = 95
    name_contains_confidence_base: int = 50
    name_contains_confidence_divisor: int = 3
    name_contains_confidence_cap: int = 75
    fuzzy_confidence_cap: int = 85
    review_threshold: int = 70            # Matches below this confidence need review

    def __post_init__(self) -> None:
        if self.fuzzy_score_cap >= self.exact_base:
            raise ValueError(
                f"fuzzy_score_cap ({self.fuzzy_score_cap}) must be below "
                f"exact_base ({self.exact_base})"
            )
        if self.min_name_length < 1:
            raise ValueError("min_name_length must be at least 1")


DEFAULT_POLICY = ScoringPolicy()

# Canonical fuzzy threshold for every matching path
DEFAULT_FUZZY_THRESHOLD = 95
