"""Aggregate statistics over a set of normalized matches."""

import math
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from riftcoach.core.enums import Role
from riftcoach.features.analysis.schemas import (
    BenchmarkComparison,
    BenchmarkMetric,
    OverallStats,
    RoleAggregate,
)
from riftcoach.features.benchmarks.comparator import compare
from riftcoach.features.matches.normalizer import NormalizedMatch
from riftcoach.features.scoring.roles import get_role_profile
from riftcoach.utils.statistics import calculate_kda, safe_divide

GOLD_PER_MIN_REFERENCE = 400.0

# Challenge field -> OverallStats field
CHALLENGE_AVERAGES: Dict[str, str] = {
    "solo_kills": "avg_solo_kills",
    "skillshots_hit": "avg_skillshots_hit",
    "skillshots_dodged": "avg_skillshots_dodged",
    "turret_plates_taken": "avg_turret_plates_taken",
    "dragon_takedowns": "avg_dragon_takedowns",
    "control_wards_placed": "avg_control_wards_placed",
    "early_laning_phase_gold_exp_advantage": "avg_early_gold_advantage",
    "lane_minions_first_10_minutes": "avg_lane_minions_first_10_min",
}

# Participant ping field -> key in ping totals
PING_FIELDS: Dict[str, str] = {
    "all_in_pings": "allIn",
    "assist_me_pings": "assistMe",
    "danger_pings": "danger",
    "enemy_missing_pings": "enemyMissing",
    "on_my_way_pings": "onMyWay",
    "push_pings": "push",
}


def _mean(values: List[float]) -> Optional[float]:
    """Order-independent mean, None for no values."""
    if not values:
        return None
    return math.fsum(values) / len(values)


class AggregateStatsBuilder:
    """Reduces normalized matches into ``OverallStats`` and role aggregates.

    Sums use ``math.fsum`` so the result does not depend on match order.
    Optional challenge values are averaged over the matches that reported
    them, never over the full game count.
    """

    def build(self, matches: Sequence[NormalizedMatch]) -> OverallStats:
        """
        Aggregate a set of matches.

        Args:
            matches: Normalized matches of one player

        Returns:
            OverallStats; zeroed when ``matches`` is empty
        """
        count = len(matches)
        if count == 0:
            return OverallStats()

        def total(values) -> float:
            return math.fsum(values)

        participants = [m.participant for m in matches]
        kills = total(p.kills for p in participants)
        deaths = total(p.deaths for p in participants)
        assists = total(p.assists for p in participants)
        cs = total(p.creep_score for p in participants)
        vision = total(p.vision_score for p in participants)
        damage = total(p.total_damage_dealt_to_champions for p in participants)
        damage_taken = total(p.total_damage_taken for p in participants)
        gold = total(p.gold_earned for p in participants)
        duration = total(m.duration for m in matches)
        wards_killed = total(p.wards_killed for p in participants)

        wins = sum(1 for p in participants if p.win)
        first_bloods = sum(
            1 for p in participants if p.first_blood_kill or p.first_blood_assist
        )
        first_towers = sum(
            1 for p in participants if p.first_tower_kill or p.first_tower_assist
        )
        multi_kills = sum(
            1
            for p in participants
            if p.double_kills or p.triple_kills or p.quadra_kills or p.penta_kills
        )

        kp_values: List[float] = []
        damage_share_values: List[float] = []
        gold_share_values: List[float] = []
        for match in matches:
            p = match.participant
            team_kills = match.team_total("kills")
            if team_kills > 0:
                kp_values.append((p.kills + p.assists) / team_kills)
            team_damage = match.team_total("total_damage_dealt_to_champions")
            if team_damage > 0:
                damage_share_values.append(
                    p.total_damage_dealt_to_champions / team_damage
                )
            team_gold = match.team_total("gold_earned")
            if team_gold > 0:
                gold_share_values.append(p.gold_earned / team_gold)

        challenge_values: Dict[str, List[float]] = defaultdict(list)
        for p in participants:
            for name in CHALLENGE_AVERAGES:
                value = p.challenge(name)
                if value is not None:
                    challenge_values[name].append(value)

        ping_totals: Dict[str, int] = {}
        for field, key in PING_FIELDS.items():
            present = [getattr(p, field) for p in participants]
            present = [v for v in present if v is not None]
            if present:
                ping_totals[key] = sum(present)
        all_pings = sum(ping_totals.values())

        avg_duration = duration / count / 60
        avg_minutes = max(avg_duration, 1.0)

        def per_game(value: float) -> float:
            return value / count

        def per_min(value: float) -> float:
            return value / count / avg_minutes

        def percent(values: List[float]) -> float:
            mean = _mean(values)
            return mean * 100 if mean is not None else 0.0

        challenges = {
            stats_field: _mean(challenge_values[name])
            for name, stats_field in CHALLENGE_AVERAGES.items()
        }

        return OverallStats(
            win_rate=per_game(wins) * 100,
            avg_kda=calculate_kda(kills, deaths, assists),
            avg_kills=per_game(kills),
            avg_deaths=per_game(deaths),
            avg_assists=per_game(assists),
            avg_cs=per_game(cs),
            avg_cs_per_min=per_min(cs),
            avg_vision_score=per_game(vision),
            avg_vision_per_min=per_min(vision),
            avg_damage_dealt=per_game(damage),
            avg_damage_per_min=per_min(damage),
            avg_damage_taken=per_game(damage_taken),
            avg_gold_earned=per_game(gold),
            avg_gold_per_min=per_min(gold),
            avg_kill_participation=percent(kp_values),
            avg_damage_share=percent(damage_share_values),
            avg_gold_share=percent(gold_share_values),
            first_blood_rate=per_game(first_bloods) * 100,
            first_tower_rate=per_game(first_towers) * 100,
            objective_participation=challenges["avg_dragon_takedowns"] or 0.0,
            multi_kill_rate=per_game(multi_kills) * 100,
            avg_game_duration=avg_duration,
            avg_wards_killed=per_game(wards_killed),
            avg_pings_per_game=per_game(all_pings),
            avg_missing_pings=per_game(ping_totals.get("enemyMissing", 0)),
            avg_danger_pings=per_game(ping_totals.get("danger", 0)),
            ping_totals=ping_totals,
            **challenges,
        )

    def build_role_aggregates(
        self, matches: Sequence[NormalizedMatch]
    ) -> Dict[str, RoleAggregate]:
        """Aggregate per normalized role, keyed by role name in first-seen order."""
        grouped: Dict[str, List[NormalizedMatch]] = {}
        for match in matches:
            grouped.setdefault(match.role.value, []).append(match)

        aggregates: Dict[str, RoleAggregate] = {}
        for role, role_matches in grouped.items():
            stats = self.build(role_matches)
            aggregates[role] = RoleAggregate(
                **stats.model_dump(),
                role=role,
                games=len(role_matches),
                benchmark_comparison=self.compare_to_role(stats, role_matches[0].role),
            )
        return aggregates

    @staticmethod
    def compare_to_role(stats: OverallStats, role: Role) -> BenchmarkComparison:
        """Compare aggregated stats with the reference values of a role."""
        reference = get_role_profile(role).benchmark

        def metric(value: float, ref: float) -> BenchmarkMetric:
            return BenchmarkMetric.from_comparison(compare(value, ref))

        return BenchmarkComparison(
            cs_per_min=metric(stats.avg_cs_per_min, reference.cs_per_min),
            vision_score=metric(stats.avg_vision_per_min, reference.vision_per_min),
            kda=metric(stats.avg_kda, reference.kda),
            damage_share=metric(
                safe_divide(stats.avg_damage_share, 100), reference.damage_share
            ),
            gold_efficiency=metric(stats.avg_gold_per_min, GOLD_PER_MIN_REFERENCE),
            kill_participation=metric(
                safe_divide(stats.avg_kill_participation, 100),
                reference.kill_participation,
            ),
        )
