"""Single-match scorer.

Grades one player's performance in one match on a 0-100 scale with four
sub-scores (combat, farming, vision, objectives), a bonus term and penalties
for pathological games. Targets come from the champion benchmark when one is
usable, otherwise from the role fallbacks in ``ROLE_PROFILES``.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import structlog

from riftcoach.core.enums import Grade, Role
from riftcoach.features.benchmarks.schemas import BenchmarkRecord
from riftcoach.features.matches.normalizer import NormalizedMatch
from riftcoach.features.scoring.roles import RoleProfile, get_role_profile
from riftcoach.features.scoring.schemas import MAX_SCORE_LINES, GameScore
from riftcoach.utils.statistics import clamp, round_half_up, safe_divide

logger = structlog.get_logger(__name__)

GRADE_CUTOFFS: List[Tuple[int, Grade]] = [
    (82, Grade.S_PLUS),
    (70, Grade.S),
    (58, Grade.A),
    (45, Grade.B),
    (32, Grade.C),
]

# Share defaults when team totals are unavailable
DEFAULT_KILL_PARTICIPATION = 50.0
DEFAULT_TEAM_SHARE = 20.0

JUNGLE_CAMPS_TARGET = 5.0
WIN_BONUS = 8
OBJECTIVE_BASE = 15
BONUS_BASE = 25

# Team objective key -> points per kill
TEAM_OBJECTIVE_POINTS = {
    "tower": 2,
    "dragon": 4,
    "baron": 8,
    "riftHerald": 3,
    "inhibitor": 4,
    "horde": 1.5,
}


def compare_vs_benchmark(
    value: float, benchmark: Optional[float], fallback: float
) -> float:
    """Score a value against a target on a 0-100 curve.

    The curve is monotonic in value/target: about 70 at parity, saturating
    at 100 from ratio 1.3 and falling to 0 at ratio 0. A zero target scores
    a flat 35.
    """
    target = benchmark if benchmark is not None else fallback
    if target == 0:
        return 35.0
    ratio = value / target

    if ratio >= 1.3:
        return min(100.0, 85 + (ratio - 1.3) * 50)
    if ratio >= 1.0:
        return 70 + (ratio - 1.0) * 50
    if ratio >= 0.8:
        return 50 + (ratio - 0.8) * 100
    if ratio >= 0.5:
        return 20 + (ratio - 0.5) * 100
    return max(0.0, ratio * 40)


def grade_for(overall: int) -> Grade:
    """Letter grade for an overall score."""
    for cutoff, grade in GRADE_CUTOFFS:
        if overall >= cutoff:
            return grade
    return Grade.D


@dataclass(frozen=True)
class _MatchStats:
    """Derived per-match values shared by the sub-score calculations."""

    minutes: float
    kda: float
    cs: int
    cs_per_min: float
    gold_per_min: float
    vision_per_min: float
    team_kills: float
    team_gold: float
    kill_participation: float
    damage_share: float
    damage_taken_share: float
    gold_share: float
    gold_diff: float
    cs_diff: float


class SingleMatchScorer:
    """Computes a ``GameScore`` for one normalized match."""

    def score(
        self,
        match: NormalizedMatch,
        win: Optional[bool] = None,
        benchmark: Optional[BenchmarkRecord] = None,
    ) -> GameScore:
        """
        Score one match.

        :param match: Normalized match for the scored player
        :param win: Win flag, defaults to the participant's own flag
        :param benchmark: Champion benchmark; ignored when not usable
        :returns: GameScore with sub-scores, grade, insights and improvements
        """
        is_win = match.win if win is None else win
        profile = get_role_profile(match.role)
        if benchmark is not None and not benchmark.is_usable:
            benchmark = None

        stats = self._derive_stats(match)

        combat = self._combat_score(match, profile, stats, benchmark)
        farming, gold_diff_bonus = self._farming_score(
            match, profile, stats, benchmark
        )
        vision = self._vision_score(match, profile, stats, benchmark)
        objectives = self._objectives_score(match, profile)
        bonus = self._bonus_score(match, profile, stats, is_win, gold_diff_bonus)
        penalty = self._penalty(match, profile, stats)

        weights = profile.weights
        weighted = (
            combat * weights.combat
            + farming * weights.farming
            + vision * weights.vision
            + objectives * weights.objectives
            + bonus * weights.bonus
        )
        overall = int(clamp(round_half_up(weighted - penalty), 0, 100))

        insights, improvements = self._lines(match, profile, stats, is_win)

        logger.debug(
            "match_scored",
            match_id=match.match_id,
            role=profile.role.value,
            overall=overall,
            penalty=round(penalty, 2),
            has_benchmark=benchmark is not None,
        )

        return GameScore(
            overall=overall,
            combat=self._sub_score(combat),
            farming=self._sub_score(farming),
            vision=self._sub_score(vision),
            objectives=self._sub_score(objectives),
            grade=grade_for(overall),
            insights=insights[:MAX_SCORE_LINES],
            improvements=improvements[:MAX_SCORE_LINES],
        )

    @staticmethod
    def _sub_score(value: float) -> int:
        return int(clamp(round_half_up(value), 0, 100))

    @staticmethod
    def _benchmark(benchmark: Optional[BenchmarkRecord], field: str) -> Optional[float]:
        # A zero average is treated like a missing one
        if benchmark is None:
            return None
        return benchmark.value(field) or None

    def _derive_stats(self, match: NormalizedMatch) -> _MatchStats:
        p = match.participant
        minutes = match.minutes
        has_team = match.has_team_data

        team_kills = match.team_total("kills")
        team_damage = match.team_total("total_damage_dealt_to_champions")
        team_damage_taken = match.team_total("total_damage_taken")
        team_gold = match.team_total("gold_earned")

        def _share(value: float, total: float, default: float) -> float:
            if has_team and total > 0:
                return value / total * 100
            return default

        cs = p.creep_score
        gold_diff = 0.0
        cs_diff = 0.0
        if match.opponent is not None and has_team:
            gold_diff = p.gold_earned - match.opponent.gold_earned
            cs_diff = cs - match.opponent.creep_score

        return _MatchStats(
            minutes=minutes,
            kda=p.kda,
            cs=cs,
            cs_per_min=cs / minutes,
            gold_per_min=p.gold_earned / minutes,
            vision_per_min=p.vision_score / minutes,
            team_kills=team_kills,
            team_gold=team_gold,
            kill_participation=_share(
                p.kills + p.assists, team_kills, DEFAULT_KILL_PARTICIPATION
            ),
            damage_share=_share(
                p.total_damage_dealt_to_champions, team_damage, DEFAULT_TEAM_SHARE
            ),
            damage_taken_share=_share(
                p.total_damage_taken, team_damage_taken, DEFAULT_TEAM_SHARE
            ),
            gold_share=_share(p.gold_earned, team_gold, DEFAULT_TEAM_SHARE),
            gold_diff=gold_diff,
            cs_diff=cs_diff,
        )

    def _combat_score(
        self,
        match: NormalizedMatch,
        profile: RoleProfile,
        stats: _MatchStats,
        benchmark: Optional[BenchmarkRecord],
    ) -> float:
        p = match.participant
        fallbacks = profile.fallbacks

        kda_score = compare_vs_benchmark(
            stats.kda, self._benchmark(benchmark, "avg_kda"), fallbacks.kda
        )
        kp_score = compare_vs_benchmark(
            stats.kill_participation,
            self._benchmark(benchmark, "avg_kill_participation"),
            fallbacks.kill_participation,
        )
        if profile.is_support:
            damage_score = min(100.0, 70 + stats.damage_share * 2)
        else:
            damage_score = compare_vs_benchmark(
                stats.damage_share,
                self._benchmark(benchmark, "avg_damage_share"),
                fallbacks.damage_share,
            )

        first_blood = (8 if p.first_blood_kill else 0) + (
            4 if p.first_blood_assist else 0
        )
        if profile.is_support:
            cc_bonus = min(15.0, p.time_ccing_others / stats.minutes * 2)
            assist_ratio = safe_divide(p.assists, stats.team_kills) * 100
            assist_bonus = min(10.0, assist_ratio / 50 * 10)
            bonus = cc_bonus + assist_bonus + first_blood
        else:
            multi_kill_bonus = min(15, p.largest_multi_kill * 3)
            vs_opponent = 0.0
            if match.opponent is not None:
                vs_opponent = clamp((p.kills - match.opponent.kills) * 2, -10, 10)
            gank_bonus = min(10.0, p.assists * 1.5) if profile.is_jungle else 0.0
            bonus = multi_kill_bonus + first_blood + vs_opponent + gank_bonus

        weights = profile.combat_weights
        return min(
            100.0,
            kda_score * weights.kda
            + kp_score * weights.kill_participation
            + damage_score * weights.damage
            + bonus * weights.bonus,
        )

    def _farming_score(
        self,
        match: NormalizedMatch,
        profile: RoleProfile,
        stats: _MatchStats,
        benchmark: Optional[BenchmarkRecord],
    ) -> Tuple[float, float]:
        """Farming sub-score and the gold-diff bonus reused by the bonus term."""
        p = match.participant
        fallbacks = profile.fallbacks
        has_opponent = match.opponent is not None

        cs_score = compare_vs_benchmark(
            stats.cs_per_min,
            self._benchmark(benchmark, "avg_cs_per_min"),
            fallbacks.cs_per_min,
        )
        gold_score = compare_vs_benchmark(
            stats.gold_per_min,
            self._benchmark(benchmark, "avg_gold_per_min"),
            fallbacks.gold_per_min,
        )

        cs_diff_bonus = 0.0
        if has_opponent and not (profile.is_support or profile.is_jungle):
            cs_diff_bonus = clamp(stats.cs_diff / 10, -15, 15)
        gold_diff_bonus = clamp(stats.gold_diff / 500, -15, 15) if has_opponent else 0.0

        if profile.is_support:
            farming = min(100.0, gold_score * 0.8 + (gold_diff_bonus + 10) * 0.2)
        elif profile.is_jungle:
            camps_per_min = p.neutral_minions_killed / stats.minutes
            camps_score = min(100.0, camps_per_min / JUNGLE_CAMPS_TARGET * 100)
            enemy_jungler = match.enemy_in_role(Role.JUNGLE)
            jungle_gold_diff = (
                p.gold_earned - enemy_jungler.gold_earned if enemy_jungler else 0
            )
            jungle_diff_bonus = clamp(jungle_gold_diff / 400, -10, 10)
            farming = min(
                100.0,
                camps_score * 0.40
                + gold_score * 0.35
                + (jungle_diff_bonus + 10) * 0.25,
            )
        else:
            farming = min(
                100.0,
                cs_score * 0.45
                + gold_score * 0.35
                + (cs_diff_bonus + gold_diff_bonus + 20) * 0.20,
            )
        return farming, gold_diff_bonus

    def _vision_score(
        self,
        match: NormalizedMatch,
        profile: RoleProfile,
        stats: _MatchStats,
        benchmark: Optional[BenchmarkRecord],
    ) -> float:
        p = match.participant
        fallbacks = profile.fallbacks

        base = compare_vs_benchmark(
            stats.vision_per_min,
            self._benchmark(benchmark, "avg_vision_score_per_min"),
            fallbacks.vision_per_min,
        )
        control_ward_bonus = min(
            15.0,
            compare_vs_benchmark(
                p.vision_wards_bought_in_game,
                self._benchmark(benchmark, "avg_control_wards_placed"),
                fallbacks.control_wards,
            )
            * 0.15,
        )
        wards_placed_bonus = min(
            10.0,
            compare_vs_benchmark(
                p.wards_placed,
                self._benchmark(benchmark, "avg_wards_placed"),
                fallbacks.wards_placed,
            )
            * 0.10,
        )
        wards_killed_bonus = min(10, p.wards_killed * 2)
        vision_diff_bonus = 0.0
        if match.opponent is not None:
            vision_diff_bonus = clamp(
                (p.vision_score - match.opponent.vision_score) / 5, -10, 10
            )

        if profile.is_support:
            return min(
                100.0,
                base * 0.40
                + control_ward_bonus * 0.15
                + wards_placed_bonus * 0.20
                + wards_killed_bonus * 0.15
                + (vision_diff_bonus + 10) * 0.10,
            )
        return min(
            100.0,
            base * 0.55
            + control_ward_bonus * 0.15
            + wards_killed_bonus * 0.10
            + (vision_diff_bonus + 10) * 0.20,
        )

    def _objectives_score(self, match: NormalizedMatch, profile: RoleProfile) -> float:
        p = match.participant
        objectives: float = OBJECTIVE_BASE

        if match.team is not None:
            objectives += sum(
                match.team.objective_kills(name) * points
                for name, points in TEAM_OBJECTIVE_POINTS.items()
            )

        turret_bonus = min(
            10.0,
            p.damage_dealt_to_turrets / profile.fallbacks.turret_damage_target * 10,
        )
        if profile.is_jungle:
            objective_damage_bonus = min(15.0, p.damage_dealt_to_objectives / 20000 * 15)
        else:
            objective_damage_bonus = min(8.0, p.damage_dealt_to_objectives / 15000 * 8)

        personal = p.dragon_kills * 5 + p.baron_kills * 10 + p.turret_kills * 3
        steals = p.objectives_stolen * 15
        first_tower = (5 if p.first_tower_kill else 0) + (
            3 if p.first_tower_assist else 0
        )

        return min(
            100.0,
            objectives
            + turret_bonus
            + objective_damage_bonus
            + personal
            + steals
            + first_tower,
        )

    def _bonus_score(
        self,
        match: NormalizedMatch,
        profile: RoleProfile,
        stats: _MatchStats,
        is_win: bool,
        gold_diff_bonus: float,
    ) -> float:
        p = match.participant
        level_bonus = 0.0
        if match.opponent is not None:
            level_bonus = clamp((p.champ_level - match.opponent.champ_level) * 2, -5, 5)

        tank_bonus = 0.0
        if (profile.role == Role.TOP or profile.is_support) and (
            stats.damage_taken_share >= 25
        ):
            tank_bonus = min(8.0, (stats.damage_taken_share - 20) * 0.5)

        win_bonus = WIN_BONUS if is_win else 0
        lane_lead = 5 if gold_diff_bonus > 5 else 0
        return min(100.0, BONUS_BASE + level_bonus + tank_bonus + win_bonus + lane_lead)

    def _penalty(
        self, match: NormalizedMatch, profile: RoleProfile, stats: _MatchStats
    ) -> float:
        p = match.participant
        penalty = 0.0

        if p.deaths > 8:
            penalty += (p.deaths - 8) * 4

        if stats.kda < 0.5:
            penalty += 15
        elif stats.kda < 1.0:
            penalty += 8

        if (
            not profile.is_support
            and stats.kill_participation < 25
            and stats.team_kills > 5
        ):
            penalty += (25 - stats.kill_participation) * 0.5

        if profile.is_carry_lane and stats.damage_share < 10 and stats.minutes > 15:
            penalty += (10 - stats.damage_share) * 1.5

        if not profile.is_support:
            gold_ratio = safe_divide(p.gold_earned, stats.team_gold / 5, 1.0)
            if gold_ratio < 0.7:
                penalty += (0.7 - gold_ratio) * 30

        net = p.kills + p.assists - p.deaths
        if net < -5:
            penalty += abs(net + 5) * 2

        return penalty

    def _lines(
        self,
        match: NormalizedMatch,
        profile: RoleProfile,
        stats: _MatchStats,
        is_win: bool,
    ) -> Tuple[List[str], List[str]]:
        """Insight and improvement lines in rule order, untruncated."""
        p = match.participant
        thresholds = profile.thresholds
        insights: List[str] = []
        improvements: List[str] = []
        kda = stats.kda

        if kda >= 6:
            insights.append(f"{kda:.1f} KDA - hard carry performance")
        elif kda >= 4:
            insights.append(f"{kda:.1f} KDA - minimal deaths, high impact")
        elif kda >= 2.5:
            insights.append(f"{kda:.1f} KDA - solid game")

        if p.deaths > 7:
            improvements.append(f"{p.deaths} deaths - got caught out or took bad fights")
        elif p.deaths > 5:
            improvements.append(f"{p.deaths} deaths - check minimap before trading")

        kp = stats.kill_participation
        kp_text = round_half_up(kp)
        if kp >= thresholds.kp_great:
            insights.append(f"{kp_text}% KP - involved in almost every kill")
        elif kp >= thresholds.kp_good:
            insights.append(f"{kp_text}% KP - good team presence")
        if kp < thresholds.kp_bad:
            if profile.is_support:
                improvements.append(f"{kp_text}% KP - roam with jungler or follow ADC")
            elif profile.is_jungle:
                improvements.append(f"{kp_text}% KP - gank more, track enemy jungler")
            else:
                improvements.append(f"{kp_text}% KP - TP to fights or rotate faster")

        if match.opponent is not None and match.has_team_data:
            opponent = match.opponent.champion_name
            gold_diff = round_half_up(stats.gold_diff)
            if stats.gold_diff > 2500:
                insights.append(f"Stomped {opponent}: +{gold_diff}g lead")
            elif stats.gold_diff > 1200:
                insights.append(f"Won vs {opponent}: +{gold_diff}g")
            elif stats.gold_diff < -2500:
                improvements.append(
                    f"{opponent} had +{abs(gold_diff)}g - died early or got zoned"
                )
            elif stats.gold_diff < -1200:
                improvements.append(f"{opponent} +{abs(gold_diff)}g ahead - farm safer")

            if not (profile.is_support or profile.is_jungle):
                cs_diff = int(stats.cs_diff)
                if cs_diff > 40:
                    insights.append(f"+{cs_diff} CS vs {opponent}")
                elif cs_diff < -40:
                    improvements.append(f"{opponent} +{abs(cs_diff)} CS - last-hit better")

        if not profile.is_support:
            share = stats.damage_share
            share_text = round_half_up(share)
            if share >= 30:
                insights.append(f"{share_text}% team damage - main carry")
            elif share >= 25:
                insights.append(f"{share_text}% team damage - high DPS")
            if share < 12 and profile.is_carry_lane:
                improvements.append(f"{share_text}% damage - arrived late to fights")

            if profile.is_jungle:
                camps = p.neutral_minions_killed / stats.minutes
                if camps >= 5:
                    insights.append(f"{camps:.1f} camps/min - efficient pathing")
                elif camps < 3.5:
                    improvements.append(f"{camps:.1f} camps/min - full clear more")
            else:
                if stats.cs_per_min >= thresholds.cs_great:
                    insights.append(f"{stats.cs_per_min:.1f} CS/min - clean farming")
                if stats.cs_per_min < thresholds.cs_bad:
                    improvements.append(
                        f"{stats.cs_per_min:.1f} CS/min - practice last-hitting"
                    )

        if stats.vision_per_min >= thresholds.vision_great:
            insights.append(f"{stats.vision_per_min:.1f} vision/min - great awareness")
        if stats.vision_per_min < thresholds.vision_bad:
            improvements.append(
                f"{stats.vision_per_min:.1f} vision/min - buy pinks, use trinket"
            )

        control_wards = p.vision_wards_bought_in_game
        if control_wards >= 5:
            insights.append(f"{control_wards} control wards")
        elif control_wards <= 1 and stats.minutes > 20:
            improvements.append(f"Only {control_wards} pink - buy one every back")

        steals = p.objectives_stolen
        if steals > 0:
            insights.append(f"{steals} objective steal{'s' if steals > 1 else ''}")
        if p.first_blood_kill:
            insights.append("First blood")
        if p.first_tower_kill:
            insights.append("First tower")
        if p.turret_kills >= 3:
            insights.append(f"{p.turret_kills} towers taken")

        if p.penta_kills > 0:
            insights.append("PENTAKILL!")
        elif p.quadra_kills > 0:
            insights.append("Quadra kill")
        elif p.triple_kills > 0:
            insights.append("Triple kill")

        if is_win and p.deaths <= 1:
            insights.append("Near-perfect game")
        elif is_win and p.deaths <= 3 and kda >= 4:
            insights.append("Clean win")

        if not insights:
            insights.append("Contributed to victory" if is_win else "Tough matchup")

        return insights, improvements
