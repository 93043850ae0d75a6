"""Benchmark comparator: places a player value against a reference value."""

from typing import List, Optional, Tuple

from riftcoach.core.enums import LetterRating, Rating
from riftcoach.features.benchmarks.schemas import ComparisonMetric
from riftcoach.utils.statistics import safe_divide

NEUTRAL_PERCENTILE = 50.0

# (minimum value/reference ratio, percentile), best first
PERCENTILE_STEPS: List[Tuple[float, float]] = [
    (1.5, 95),
    (1.3, 85),
    (1.15, 75),
    (1.0, 60),
    (0.9, 45),
    (0.8, 35),
    (0.7, 25),
]
FLOOR_PERCENTILE = 15.0

RATING_CUTOFFS: List[Tuple[float, Rating]] = [
    (90, Rating.EXCELLENT),
    (75, Rating.GOOD),
    (60, Rating.AVERAGE),
    (45, Rating.BELOW_AVERAGE),
]

LETTER_CUTOFFS: List[Tuple[float, LetterRating]] = [
    (90, LetterRating.S),
    (75, LetterRating.A),
    (60, LetterRating.B),
    (45, LetterRating.C),
    (30, LetterRating.D),
]


def _has_reference(reference: Optional[float]) -> bool:
    return reference is not None and reference > 0


def get_percentile(value: float, reference: Optional[float]) -> float:
    """Approximate percentile from the value/reference ratio.

    A missing or non-positive reference gives the neutral 50th percentile.
    """
    if not _has_reference(reference):
        return NEUTRAL_PERCENTILE
    ratio = value / reference
    for threshold, percentile in PERCENTILE_STEPS:
        if ratio >= threshold:
            return float(percentile)
    return FLOOR_PERCENTILE


def get_rating(percentile: float) -> Rating:
    """Bucket a percentile into a qualitative rating."""
    for cutoff, rating in RATING_CUTOFFS:
        if percentile >= cutoff:
            return rating
    return Rating.POOR


def letter_rating(mean_percentile: float) -> LetterRating:
    """Letter rating for an averaged percentile."""
    for cutoff, letter in LETTER_CUTOFFS:
        if mean_percentile >= cutoff:
            return letter
    return LetterRating.F


def compare(value: float, reference: Optional[float]) -> ComparisonMetric:
    """
    Compare a player value to a reference value.

    Args:
        value: Player statistic
        reference: Population reference, None when unknown

    Returns:
        ComparisonMetric with relative difference (%), percentile and rating
    """
    percentile = get_percentile(value, reference)
    if _has_reference(reference):
        difference = safe_divide(value - reference, reference) * 100
        reference_value = float(reference)
    else:
        difference = 0.0
        reference_value = 0.0

    return ComparisonMetric(
        player_value=value,
        reference_value=reference_value,
        difference=difference,
        percentile=percentile,
        rating=get_rating(percentile),
    )
