"""Per-champion aggregates, notable games and population comparison."""

import math
from collections import Counter
from typing import Dict, List, Optional, Sequence

import structlog

from riftcoach.core.enums import Role
from riftcoach.features.analysis.schemas import (
    ChampionAggregate,
    HighEloComparison,
    MatchPerformance,
)
from riftcoach.features.benchmarks.comparator import compare, letter_rating
from riftcoach.features.benchmarks.schemas import (
    BenchmarkRecord,
    ComparisonMetric,
    benchmark_key,
)
from riftcoach.features.matches.normalizer import NormalizedMatch
from riftcoach.utils.statistics import calculate_kda

logger = structlog.get_logger(__name__)

# Metrics averaged into the champion letter rating
RATING_METRICS = ("winRate", "kda", "csPerMin", "damagePerMin", "killParticipation")

# Comparison metric -> benchmark record field
BENCHMARK_FIELDS: Dict[str, str] = {
    "winRate": "win_rate",
    "kda": "avg_kda",
    "csPerMin": "avg_cs_per_min",
    "damagePerMin": "avg_damage_per_min",
    "goldPerMin": "avg_gold_per_min",
    "visionPerMin": "avg_vision_score_per_min",
    "killParticipation": "avg_kill_participation",
    "damageShare": "avg_damage_share",
    "soloKills": "avg_solo_kills",
    "controlWards": "avg_control_wards_placed",
}


def _present_mean(values: List[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return math.fsum(present) / len(present)


def main_role(matches: Sequence[NormalizedMatch]) -> Role:
    """Most played role; ties go to the role seen first."""
    counts = Counter(m.role for m in matches)
    best = max(counts.values())
    return next(m.role for m in matches if counts[m.role] == best)


def performance(match: NormalizedMatch) -> MatchPerformance:
    p = match.participant
    return MatchPerformance(
        match_id=match.match_id,
        kda=p.kda,
        kills=p.kills,
        deaths=p.deaths,
        assists=p.assists,
        cs=p.creep_score,
        damage=p.total_damage_dealt_to_champions,
        win=p.win,
        game_creation=match.game_creation,
    )


class ChampionProfiler:
    """Builds one ``ChampionAggregate`` per champion played."""

    def profile(
        self,
        matches: Sequence[NormalizedMatch],
        benchmarks: Optional[Dict[str, BenchmarkRecord]] = None,
    ) -> List[ChampionAggregate]:
        """
        Aggregate matches per champion.

        Args:
            matches: Normalized matches of one player
            benchmarks: Benchmark records keyed ``{championId}-{role}``

        Returns:
            Champion aggregates, most played first
        """
        benchmarks = benchmarks or {}
        grouped: Dict[int, List[NormalizedMatch]] = {}
        for match in matches:
            grouped.setdefault(match.participant.champion_id, []).append(match)

        aggregates = [
            self.profile_champion(champion_matches, benchmarks)
            for champion_matches in grouped.values()
        ]
        aggregates.sort(key=lambda a: a.games, reverse=True)
        return aggregates

    def profile_champion(
        self,
        matches: Sequence[NormalizedMatch],
        benchmarks: Dict[str, BenchmarkRecord],
    ) -> ChampionAggregate:
        first = matches[0].participant
        role = main_role(matches)
        count = len(matches)
        participants = [m.participant for m in matches]

        wins = sum(1 for p in participants if p.win)
        kills = math.fsum(p.kills for p in participants)
        deaths = math.fsum(p.deaths for p in participants)
        assists = math.fsum(p.assists for p in participants)
        cs = math.fsum(p.creep_score for p in participants)
        damage = math.fsum(p.total_damage_dealt_to_champions for p in participants)
        vision = math.fsum(p.vision_score for p in participants)
        gold = math.fsum(p.gold_earned for p in participants)
        avg_minutes = max(math.fsum(m.duration for m in matches) / count / 60, 1.0)

        kp_values: List[Optional[float]] = []
        share_values: List[Optional[float]] = []
        for match in matches:
            p = match.participant
            team_kills = match.team_total("kills")
            team_damage = match.team_total("total_damage_dealt_to_champions")
            kp_values.append(
                (p.kills + p.assists) / team_kills if team_kills > 0 else None
            )
            share_values.append(
                p.total_damage_dealt_to_champions / team_damage
                if team_damage > 0
                else None
            )

        def challenge_mean(name: str) -> Optional[float]:
            return _present_mean([p.challenge(name) for p in participants])

        kill_participation = (_present_mean(kp_values) or 0.0) * 100
        damage_share = (_present_mean(share_values) or 0.0) * 100
        skillshots_hit = challenge_mean("skillshots_hit")

        aggregate = ChampionAggregate(
            champion_id=first.champion_id,
            champion_name=first.champion_name,
            role=role.value,
            games=count,
            wins=wins,
            losses=count - wins,
            win_rate=wins / count * 100,
            avg_kda=calculate_kda(kills, deaths, assists),
            avg_kills=kills / count,
            avg_deaths=deaths / count,
            avg_assists=assists / count,
            avg_cs=cs / count,
            avg_cs_per_min=cs / count / avg_minutes,
            avg_damage=damage / count,
            avg_damage_per_min=damage / count / avg_minutes,
            avg_vision=vision / count,
            avg_vision_per_min=vision / count / avg_minutes,
            avg_gold_per_min=gold / count / avg_minutes,
            avg_kill_participation=kill_participation,
            avg_damage_share=damage_share,
            avg_solo_kills=challenge_mean("solo_kills") or 0.0,
            avg_skillshots_hit=skillshots_hit or 0.0,
            avg_skillshots_dodged=challenge_mean("skillshots_dodged") or 0.0,
            avg_control_wards_placed=challenge_mean("control_wards_placed") or 0.0,
            avg_turret_plates_taken=challenge_mean("turret_plates_taken") or 0.0,
        )

        # Stable sort keeps the earlier match first on equal KDA
        by_kda = sorted(matches, key=lambda m: m.participant.kda, reverse=True)
        best = performance(by_kda[0])
        worst = performance(by_kda[-1]) if len(by_kda) > 1 else None

        record = benchmarks.get(benchmark_key(first.champion_id, role))
        comparison = None
        if record is not None and record.is_usable:
            comparison = self.compare_to_benchmark(aggregate, record, skillshots_hit)
        elif record is not None:
            logger.debug(
                "Skipping under-sampled benchmark",
                champion_id=first.champion_id,
                role=role.value,
                games_analyzed=record.games_analyzed,
            )

        return aggregate.model_copy(
            update={
                "high_elo_comparison": comparison,
                "best_performance": best,
                "worst_performance": worst,
            }
        )

    @staticmethod
    def compare_to_benchmark(
        aggregate: ChampionAggregate,
        record: BenchmarkRecord,
        skillshots_hit: Optional[float] = None,
    ) -> HighEloComparison:
        """
        Compare champion averages with a population record.

        :param aggregate: Champion averages of the player
        :param record: Usable benchmark for the champion's main role
        :param skillshots_hit: Player average, None when never reported
        :returns: HighEloComparison with a letter rating over five key metrics
        """
        player_values: Dict[str, float] = {
            "winRate": aggregate.win_rate,
            "kda": aggregate.avg_kda,
            "csPerMin": aggregate.avg_cs_per_min,
            "damagePerMin": aggregate.avg_damage_per_min,
            "goldPerMin": aggregate.avg_gold_per_min,
            "visionPerMin": aggregate.avg_vision_per_min,
            "killParticipation": aggregate.avg_kill_participation,
            "damageShare": aggregate.avg_damage_share,
            "soloKills": aggregate.avg_solo_kills,
            "controlWards": aggregate.avg_control_wards_placed,
        }
        metrics: Dict[str, ComparisonMetric] = {
            name: compare(player_values[name], record.value(field) or None)
            for name, field in BENCHMARK_FIELDS.items()
        }
        reference_hits = record.value("avg_skillshots_hit")
        if skillshots_hit is not None and reference_hits:
            metrics["skillshotsHit"] = compare(skillshots_hit, reference_hits)

        percentile = math.fsum(metrics[name].percentile for name in RATING_METRICS) / len(
            RATING_METRICS
        )
        return HighEloComparison(
            tier=record.tier.value,
            games_analyzed=record.games_analyzed,
            metrics=metrics,
            overall_rating=letter_rating(percentile),
            percentile=percentile,
        )
