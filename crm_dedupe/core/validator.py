"""String similarity scoring for duplicate detection."""

from typing import Any
from functools import lru_cache
import math

from crm_dedupe.core.preprocessor import normalize


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@lru_cache(maxsize=10000)
def _tiered_score(
    norm1: str,
    norm2: str,
    exact_score: int,
    containment_weight: int,
    overlap_weight: int
) -> int:
    """Calculate cached similarity between two normalized strings."""
    if norm1 and norm1 == norm2:
        return exact_score
    if not norm1 or not norm2:
        return 0

    shorter, longer = sorted((norm1, norm2), key=len)
    if shorter in longer:
        return _round_half_up(len(shorter) / len(longer) * containment_weight)

    # Count index positions holding the same character in both strings
    matches = sum(1 for c1, c2 in zip(norm1, norm2) if c1 == c2)
    return _round_half_up(matches / len(longer) * overlap_weight)


class StringValidator:
    """
    Scores how alike two strings are on a 0-100 scale.

    Three tiers, first applicable wins: exact match after normalization,
    substring containment, and positional character overlap. The overlap
    tier only compares characters at the same index, so it rewards shared
    prefixes rather than arbitrary edits. Rule weights elsewhere are
    calibrated against these exact numbers.
    """

    EXACT_SCORE = 100
    CONTAINMENT_WEIGHT = 90
    OVERLAP_WEIGHT = 80

    def calculate_similarity(self, s1: Any, s2: Any) -> int:
        """
        Calculate similarity between two raw values.

        Args:
            s1: First value
            s2: Second value

        Returns:
            int: Similarity score between 0 and 100
        """
        return _tiered_score(
            normalize(s1),
            normalize(s2),
            self.EXACT_SCORE,
            self.CONTAINMENT_WEIGHT,
            self.OVERLAP_WEIGHT
        )


_default_validator = StringValidator()

def similarity(s1: Any, s2: Any) -> int:
    """Similarity between two values using the shared validator."""
    return _default_validator.calculate_similarity(s1, s2)
