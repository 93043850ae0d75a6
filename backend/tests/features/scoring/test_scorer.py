"""
Tests for the single-match scorer.
"""

import pytest

from riftcoach.core.enums import Grade
from riftcoach.features.matches.normalizer import MatchRecordNormalizer
from riftcoach.features.scoring.roles import get_role_profile
from riftcoach.features.scoring.schemas import MAX_SCORE_LINES
from riftcoach.features.scoring.scorer import (
    GRADE_CUTOFFS,
    SingleMatchScorer,
    compare_vs_benchmark,
    grade_for,
)

from tests.builders import build_benchmark, build_normalized

GRADE_ORDER = [Grade.D, Grade.C, Grade.B, Grade.A, Grade.S, Grade.S_PLUS]


@pytest.fixture
def scorer():
    return SingleMatchScorer()


def _penalty(scorer, match):
    profile = get_role_profile(match.role)
    return scorer._penalty(match, profile, scorer._derive_stats(match))


def _lines(scorer, match):
    profile = get_role_profile(match.role)
    return scorer._lines(match, profile, scorer._derive_stats(match), match.win)


class TestCompareVsBenchmark:
    def test_parity_scores_seventy(self):
        assert compare_vs_benchmark(5.0, 5.0, 1.0) == 70.0

    def test_fallback_used_without_benchmark(self):
        assert compare_vs_benchmark(8.0, None, 8.0) == 70.0

    def test_zero_target_scores_flat(self):
        assert compare_vs_benchmark(10.0, None, 0) == 35.0

    def test_saturates_at_hundred(self):
        assert compare_vs_benchmark(100.0, 1.0, 1.0) == 100.0

    def test_zero_value_scores_zero(self):
        assert compare_vs_benchmark(0.0, 5.0, 5.0) == 0.0

    def test_monotonic_in_value(self):
        scores = [compare_vs_benchmark(v / 10, 1.0, 1.0) for v in range(0, 40)]
        assert scores == sorted(scores)


class TestGrades:
    def test_cutoffs(self):
        assert grade_for(100) == Grade.S_PLUS
        assert grade_for(82) == Grade.S_PLUS
        assert grade_for(81) == Grade.S
        assert grade_for(58) == Grade.A
        assert grade_for(45) == Grade.B
        assert grade_for(32) == Grade.C
        assert grade_for(31) == Grade.D
        assert grade_for(0) == Grade.D

    def test_grade_monotonic_in_overall(self):
        ranks = [GRADE_ORDER.index(grade_for(overall)) for overall in range(0, 101)]
        assert ranks == sorted(ranks)

    def test_cutoffs_descending(self):
        cutoffs = [cutoff for cutoff, _ in GRADE_CUTOFFS]
        assert cutoffs == sorted(cutoffs, reverse=True)


class TestSingleMatchScorer:
    def test_zero_deaths_game_scores_without_error(self, scorer):
        match = build_normalized(kills=10, deaths=0, assists=10)

        score = scorer.score(match)

        assert 0 <= score.overall <= 100
        assert score.insights[0] == "20.0 KDA - hard carry performance"

    def test_overall_clamped_under_maximal_penalties(self, scorer):
        match = build_normalized(
            win=False,
            kills=0,
            deaths=25,
            assists=0,
            gold_earned=100,
            total_minions_killed=0,
            neutral_minions_killed=0,
            total_damage_dealt_to_champions=0,
            vision_score=0,
            wards_placed=0,
            wards_killed=0,
            vision_wards_bought_in_game=0,
        )

        score = scorer.score(match)

        assert score.overall == 0
        assert score.grade == Grade.D
        for sub_score in (score.combat, score.farming, score.vision, score.objectives):
            assert 0 <= sub_score <= 100

    def test_dominant_game_stays_within_bounds(self, scorer):
        match = build_normalized(
            kills=25,
            deaths=0,
            assists=15,
            gold_earned=25000,
            total_minions_killed=400,
            total_damage_dealt_to_champions=90000,
            vision_score=80,
            penta_kills=1,
            largest_multi_kill=5,
            first_blood_kill=True,
            first_tower_kill=True,
            turret_kills=4,
            objectives_stolen=2,
        )

        score = scorer.score(match)

        assert score.overall <= 100
        assert score.grade in (Grade.S_PLUS, Grade.S)
        assert "PENTAKILL!" in score.insights or len(score.insights) == MAX_SCORE_LINES

    def test_lines_truncated(self, scorer):
        match = build_normalized(
            win=False,
            kills=0,
            deaths=12,
            assists=1,
            total_minions_killed=60,
            vision_score=2,
            vision_wards_bought_in_game=0,
        )

        score = scorer.score(match)

        assert len(score.insights) <= MAX_SCORE_LINES
        assert len(score.improvements) <= MAX_SCORE_LINES
        assert score.improvements[0] == "12 deaths - got caught out or took bad fights"

    def test_win_flag_override(self, scorer):
        match = build_normalized(win=False)

        as_loss = scorer.score(match)
        as_win = scorer.score(match, win=True)

        assert as_win.overall >= as_loss.overall

    def test_under_sampled_benchmark_is_ignored(self, scorer):
        match = build_normalized()
        sparse = build_benchmark(games_analyzed=3, avg_cs_per_min=2000)

        assert scorer.score(match, benchmark=sparse) == scorer.score(match)

    def test_usable_benchmark_changes_targets(self, scorer):
        match = build_normalized()
        demanding = build_benchmark(avg_cs_per_min=2000, avg_gold_per_min=2000)

        assert scorer.score(match, benchmark=demanding).farming < scorer.score(match).farming

    def test_support_damage_ignores_benchmark(self, scorer):
        match = build_normalized(role="UTILITY", champion_id=412)
        low = build_benchmark(champion_id=412, role="UTILITY", avg_damage_share=1)
        high = build_benchmark(champion_id=412, role="UTILITY", avg_damage_share=9000)

        assert scorer.score(match, benchmark=low).combat == scorer.score(
            match, benchmark=high
        ).combat

    def test_solo_participant_uses_share_defaults(self, scorer, make_match):
        match = make_match()
        solo = match.model_copy(
            update={
                "info": match.info.model_copy(
                    update={"participants": match.info.participants[:1], "teams": []}
                )
            }
        )
        normalized = MatchRecordNormalizer().normalize(solo, "player-puuid")

        score = scorer.score(normalized)

        assert normalized.opponent is None
        assert 0 <= score.overall <= 100


class TestPenalties:
    """Each case trips one rule; allies are 4 x (3/4/5, 10000g, 15000 damage)."""

    def test_ordinary_game_has_no_penalty(self, scorer):
        assert _penalty(scorer, build_normalized()) == 0

    @pytest.mark.parametrize(
        "deaths, deduction, line",
        [
            (8, 0, "8 deaths - got caught out or took bad fights"),
            (9, 4, "9 deaths - got caught out or took bad fights"),
            (12, 16, "12 deaths - got caught out or took bad fights"),
        ],
    )
    def test_deaths_over_eight(self, scorer, deaths, deduction, line):
        match = build_normalized(kills=10, deaths=deaths, assists=10)

        assert _penalty(scorer, match) == deduction
        assert _lines(scorer, match)[1][0] == line

    @pytest.mark.parametrize(
        "kills, assists, deaths, deduction",
        [
            (1, 4, 5, 0),
            (1, 3, 5, 8),
            (0, 3, 7, 15),
        ],
    )
    def test_low_kda(self, scorer, kills, assists, deaths, deduction):
        match = build_normalized(kills=kills, deaths=deaths, assists=assists)

        assert _penalty(scorer, match) == deduction
        assert not any("KDA" in line for line in _lines(scorer, match)[0])

    @pytest.mark.parametrize(
        "role, deduction, line",
        [
            ("MIDDLE", 125 / 26, "15% KP - TP to fights or rotate faster"),
            ("UTILITY", 0, "15% KP - roam with jungler or follow ADC"),
        ],
    )
    def test_low_kill_participation(self, scorer, role, deduction, line):
        # 2 of 13 team kills
        match = build_normalized(role=role, kills=1, deaths=1, assists=1)

        assert _penalty(scorer, match) == pytest.approx(deduction)
        assert line in _lines(scorer, match)[1]

    @pytest.mark.parametrize(
        "role, duration, deduction, improvements",
        [
            ("MIDDLE", 1800, 45 / 13, ["8% damage - arrived late to fights"]),
            ("BOTTOM", 1800, 45 / 13, ["8% damage - arrived late to fights"]),
            ("TOP", 1800, 0, []),
            ("MIDDLE", 900, 0, ["8% damage - arrived late to fights"]),
        ],
    )
    def test_low_damage_share_in_carry_lanes(
        self, scorer, role, duration, deduction, improvements
    ):
        # 5000 of 65000 team damage
        match = build_normalized(
            role=role, duration=duration, total_damage_dealt_to_champions=5000
        )

        assert _penalty(scorer, match) == pytest.approx(deduction)
        if duration == 1800:
            assert _lines(scorer, match)[1] == improvements

    @pytest.mark.parametrize(
        "role, gold, deduction",
        [
            ("MIDDLE", 5000, 13 / 3),
            ("MIDDLE", 7000, 0),
            ("UTILITY", 5000, 0),
        ],
    )
    def test_low_gold_ratio(self, scorer, role, gold, deduction):
        match = build_normalized(role=role, gold_earned=gold)

        assert _penalty(scorer, match) == pytest.approx(deduction)

    def test_low_gold_ratio_line(self, scorer):
        match = build_normalized(gold_earned=5000)

        assert _lines(scorer, match)[1][0] == "Champ7 had +5000g - died early or got zoned"

    @pytest.mark.parametrize(
        "assists, net_deduction",
        [
            (3, 0),
            (1, 4),
            (0, 6),
        ],
    )
    def test_negative_net_contribution(self, scorer, assists, net_deduction):
        # Net below -5 always comes with KDA under 0.5 (15); support skips KP and gold
        match = build_normalized(role="UTILITY", kills=0, deaths=8, assists=assists)

        assert _penalty(scorer, match) == 15 + net_deduction
        assert _lines(scorer, match)[1][0] == "8 deaths - got caught out or took bad fights"

    def test_penalty_lowers_overall(self, scorer):
        clean = scorer.score(build_normalized(kills=10, deaths=8, assists=10))
        punished = scorer.score(build_normalized(kills=10, deaths=12, assists=10))

        assert punished.overall < clean.overall


class TestLineOrder:
    def test_improvements_follow_rule_order(self, scorer):
        match = build_normalized(
            win=False,
            kills=0,
            deaths=12,
            assists=1,
            gold_earned=5000,
            total_minions_killed=60,
            neutral_minions_killed=0,
            total_damage_dealt_to_champions=2000,
            vision_score=2,
            vision_wards_bought_in_game=0,
        )

        insights, improvements = _lines(scorer, match)

        assert improvements == [
            "12 deaths - got caught out or took bad fights",
            "8% KP - TP to fights or rotate faster",
            "Champ7 had +5000g - died early or got zoned",
            "Champ7 +90 CS - last-hit better",
            "3% damage - arrived late to fights",
            "2.0 CS/min - practice last-hitting",
            "0.1 vision/min - buy pinks, use trinket",
            "Only 0 pink - buy one every back",
        ]
        assert insights == ["Tough matchup"]
        score = scorer.score(match)
        assert score.improvements == improvements[:MAX_SCORE_LINES]
        assert score.insights == ["Tough matchup"]

    def test_insights_follow_rule_order(self, scorer):
        match = build_normalized(
            kills=10,
            deaths=0,
            assists=10,
            gold_earned=14000,
            total_damage_dealt_to_champions=40000,
            first_blood_kill=True,
        )

        insights, improvements = _lines(scorer, match)

        assert insights == [
            "20.0 KDA - hard carry performance",
            "91% KP - involved in almost every kill",
            "Stomped Champ7: +4000g lead",
            "+60 CS vs Champ7",
            "40% team damage - main carry",
            "0.8 vision/min - great awareness",
            "First blood",
            "Near-perfect game",
        ]
        assert improvements == []
        assert scorer.score(match).insights == insights[:MAX_SCORE_LINES]
