import pytest

from riftcoach.core.enums import LetterRating, Rating
from riftcoach.features.benchmarks.comparator import (
    NEUTRAL_PERCENTILE,
    compare,
    get_percentile,
    get_rating,
    letter_rating,
)


class TestPercentile:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (15.0, 95.0),
            (13.0, 85.0),
            (11.5, 75.0),
            (10.0, 60.0),
            (9.0, 45.0),
            (8.0, 35.0),
            (7.0, 25.0),
            (6.9, 15.0),
            (0.0, 15.0),
        ],
    )
    def test_steps(self, value, expected):
        assert get_percentile(value, 10.0) == expected

    @pytest.mark.parametrize("reference", [None, 0, -3.0])
    def test_missing_reference_is_neutral(self, reference):
        assert get_percentile(42.0, reference) == NEUTRAL_PERCENTILE

    def test_monotonic(self):
        percentiles = [get_percentile(v / 4, 5.0) for v in range(0, 60)]
        assert percentiles == sorted(percentiles)


def test_rating_buckets():
    assert get_rating(95) == Rating.EXCELLENT
    assert get_rating(75) == Rating.GOOD
    assert get_rating(60) == Rating.AVERAGE
    assert get_rating(45) == Rating.BELOW_AVERAGE
    assert get_rating(44.9) == Rating.POOR


def test_letter_rating():
    assert letter_rating(90) == LetterRating.S
    assert letter_rating(80) == LetterRating.A
    assert letter_rating(60) == LetterRating.B
    assert letter_rating(50) == LetterRating.C
    assert letter_rating(30) == LetterRating.D
    assert letter_rating(15) == LetterRating.F


def test_compare_difference():
    metric = compare(12.0, 10.0)

    assert metric.difference == pytest.approx(20.0)
    assert metric.reference_value == 10.0
    assert metric.percentile == 75.0
    assert metric.rating == Rating.GOOD


def test_compare_without_reference():
    metric = compare(3.0, None)

    assert metric.difference == 0.0
    assert metric.reference_value == 0.0
    assert metric.percentile == NEUTRAL_PERCENTILE
    assert metric.rating == Rating.BELOW_AVERAGE


def test_compare_serializes_reference_alias():
    dumped = compare(5.0, 4.0).model_dump(by_alias=True)

    assert set(dumped) == {
        "playerValue",
        "highEloValue",
        "difference",
        "percentile",
        "rating",
    }
