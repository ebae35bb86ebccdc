"""
MatchType enum for the four-tier certificate matching algorithm.

The tiers are evaluated in order of decreasing evidence strength:
1. Exact - recipient token equals the filename token
2. File contains name - filename token contains the recipient token
3. Name contains file - recipient token contains the filename token
4. Fuzzy - Levenshtein similarity at or above the fuzzy threshold
"""

from enum import Enum


class MatchType(Enum):
    """Encodes which tier produced a recipient-to-certificate match."""
    EXACT = "exact"                            # Tier 1: tokens are identical
    FILE_CONTAINS_NAME = "fileContainsName"    # Tier 2: filename token contains the name
    NAME_CONTAINS_FILE = "nameContainsFile"    # Tier 3: name contains the filename token
    FUZZY = "fuzzy"                            # Tier 4: edit-distance similarity match
