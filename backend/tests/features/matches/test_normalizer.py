"""
Tests for match record normalization.
"""

import pytest

from riftcoach.core.enums import Role
from riftcoach.core.exceptions import ParticipantNotFound
from riftcoach.features.matches.normalizer import MatchRecordNormalizer, normalize_role

from tests.builders import PLAYER_PUUID, build_match


@pytest.fixture
def normalizer():
    return MatchRecordNormalizer()


@pytest.mark.parametrize(
    "position, expected",
    [
        ("TOP", Role.TOP),
        ("jungle", Role.JUNGLE),
        ("MID", Role.MIDDLE),
        ("ADC", Role.BOTTOM),
        ("DUO_CARRY", Role.BOTTOM),
        ("SUPPORT", Role.UTILITY),
        ("UTILITY", Role.UTILITY),
        ("", Role.MIDDLE),
        (None, Role.MIDDLE),
        ("Invalid", Role.MIDDLE),
    ],
)
def test_normalize_role(position, expected):
    assert normalize_role(position) == expected


def test_normalize_pins_player_team_and_opponent(normalizer):
    match = build_match("EUW1_1", role="BOTTOM", win=False)

    normalized = normalizer.normalize(match, PLAYER_PUUID)

    assert normalized.match_id == "EUW1_1"
    assert normalized.role == Role.BOTTOM
    assert normalized.win is False
    assert normalized.team is not None and normalized.team.team_id == 100
    assert normalized.opponent is not None
    assert normalized.opponent.team_id == 200
    assert normalized.opponent.team_position == "BOTTOM"
    assert len(normalized.teammates) == 5
    assert len(normalized.enemies) == 5


def test_individual_position_used_when_team_position_missing(normalizer):
    match = build_match(
        "EUW1_1", role="", individual_position="JUNGLE"
    )

    normalized = normalizer.normalize(match, PLAYER_PUUID)

    assert normalized.role == Role.JUNGLE


def test_team_total_sums_player_team_only(normalizer):
    normalized = normalizer.normalize(build_match(), PLAYER_PUUID)

    # player 5 kills + four allies with 3 kills each
    assert normalized.team_total("kills") == 17


def test_minutes_never_below_one(normalizer):
    normalized = normalizer.normalize(build_match(duration=20), PLAYER_PUUID)
    assert normalized.minutes == 1.0


def test_missing_participant_raises(normalizer):
    match = build_match("EUW1_404", include_player=False)

    with pytest.raises(ParticipantNotFound) as exc_info:
        normalizer.normalize(match, PLAYER_PUUID)

    assert exc_info.value.match_id == "EUW1_404"
    assert exc_info.value.puuid == PLAYER_PUUID


def test_normalize_many_drops_missing_participants(normalizer):
    matches = [
        build_match("EUW1_1"),
        build_match("EUW1_2", include_player=False),
        build_match("EUW1_3"),
    ]

    normalized = normalizer.normalize_many(matches, PLAYER_PUUID)

    assert [m.match_id for m in normalized] == ["EUW1_1", "EUW1_3"]
