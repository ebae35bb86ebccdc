"""Edit-distance similarity between normalized tokens."""

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions and substitutions."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> int:
    """Similarity percentage (0-100) of two tokens based on edit distance.

    Computed as ``(max_len - distance) / max_len * 100`` and rounded half up.
    Integer arithmetic keeps the rounding exact and the result symmetric.
    Two empty tokens are 100% similar.

    Example:
        >>> similarity("johndoe", "jondoe")
        86
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 100

    distance = levenshtein_distance(a, b)
    remaining = max(0, max_len - distance)
    # floor(100 * remaining / max_len + 0.5)
    return (200 * remaining + max_len) // (2 * max_len)
