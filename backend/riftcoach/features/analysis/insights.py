"""Strengths, weaknesses and a prioritized improvement plan.

Role rule sets run first, for the player's main role only, then the generic
rules. Every weakness maps to exactly one improvement template.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from riftcoach.core.enums import CombatFocus, Importance, InsightCategory, Rating, Role
from riftcoach.features.analysis.schemas import (
    AnalysisInsight,
    ImprovementSuggestion,
    OverallStats,
    RoleAggregate,
)
from riftcoach.features.matches.normalizer import DEFAULT_ROLE, NormalizedMatch
from riftcoach.utils.statistics import coefficient_of_variation, safe_mean

MAX_IMPROVEMENTS = 5
MIN_CONSISTENCY_GAMES = 5
NEUTRAL_CONSISTENCY = 0.5
TILT_FACTOR = 1.8


@dataclass
class InsightReport:
    strengths: List[AnalysisInsight] = field(default_factory=list)
    weaknesses: List[AnalysisInsight] = field(default_factory=list)
    improvements: List[ImprovementSuggestion] = field(default_factory=list)

    def strength(self, *args, **kwargs) -> None:
        self.strengths.append(_insight(*args, **kwargs))

    def weakness(self, *args, **kwargs) -> None:
        self.weaknesses.append(_insight(*args, **kwargs))


@dataclass(frozen=True)
class ImprovementTemplate:
    """Improvement text and target for one (category, variant).

    ``current_field`` names the ``OverallStats`` attribute reported as the
    current value; None reports the weakness value itself.
    """

    priority: int
    title: str
    description: str
    target: float
    tips: Tuple[str, ...]
    current_field: Optional[str] = None


_DAMAGE_TIPS = (
    "As ADC: auto the closest safe target, no need to focus the carry",
    "Arrive to fights BEFORE they start, not after",
    "Use poke spells before the fight starts",
    'Don\'t hold ult too long - a used ult > an ult saved "just in case"',
)
_FARMING_DESCRIPTION = "15 CS = 1 kill in gold. +1 CS/min = 300g more at 20min."
_VISION_DESCRIPTION = "Vision = information. Information = smart decisions."

IMPROVEMENT_TEMPLATES: Dict[Tuple[InsightCategory, str], ImprovementTemplate] = {
    (InsightCategory.COMBAT, "trades"): ImprovementTemplate(
        priority=1,
        title="Learn to win trades",
        description="1v1 pressure lets you deny CS, roam, and create leads.",
        current_field="avg_solo_kills",
        target=1.5,
        tips=(
            "Learn your power spikes: Level 2 (2 spells), Level 3, Level 6, completed items",
            "Trade when enemy is last-hitting (they're in animation)",
            "Track enemy cooldowns and all-in when they have no spells",
            "Use bushes to drop minion aggro during trades",
        ),
    ),
    (InsightCategory.COMBAT, "damage_carry"): ImprovementTemplate(
        priority=1,
        title="Output more damage in fights",
        description="Your damage share is too low, you're not contributing enough to fights.",
        current_field="avg_damage_share",
        target=28,
        tips=_DAMAGE_TIPS,
    ),
    (InsightCategory.COMBAT, "damage"): ImprovementTemplate(
        priority=1,
        title="Output more damage in fights",
        description="Your damage share is too low, you're not contributing enough to fights.",
        current_field="avg_damage_share",
        target=22,
        tips=_DAMAGE_TIPS,
    ),
    (InsightCategory.COMBAT, "mechanics"): ImprovementTemplate(
        priority=1,
        title="Improve your mechanics",
        description="You eat too many skillshots and don't know your limits.",
        current_field="avg_kda",
        target=3.0,
        tips=(
            "Sidestep after every auto/CS - never stand still",
            "Anticipate patterns: Lux E then Q, Thresh W then Q, Blitz W then Q",
            "In lane, stay behind your minions to block skillshots",
            "Practice kiting in Practice Tool against dummies",
        ),
    ),
    (InsightCategory.FARMING, "jungle"): ImprovementTemplate(
        priority=1,
        title="Master last-hitting",
        description=_FARMING_DESCRIPTION,
        current_field="avg_cs_per_min",
        target=5.5,
        tips=(
            "Full clear your camps, don't leave small monsters",
            "Kite camps to reduce damage taken",
            "Take waves when your laners back (with their permission)",
            "After a successful gank, push the wave with your laner for deny",
        ),
    ),
    (InsightCategory.FARMING, "lane"): ImprovementTemplate(
        priority=1,
        title="Master last-hitting",
        description=_FARMING_DESCRIPTION,
        current_field="avg_cs_per_min",
        target=8.0,
        tips=(
            "Last-hit under tower: Melee = 2 tower hits + 1 auto, Caster = 1 auto + tower + 1 auto",
            "Practice 10min/day in Practice Tool: goal 100 CS at 10min",
            "Don't trade if you'll miss a cannon (20g + important XP)",
            "After 15min, catch side waves - 1 wave = 125g",
        ),
    ),
    (InsightCategory.VISION, "support"): ImprovementTemplate(
        priority=2,
        title="Control vision",
        description=_VISION_DESCRIPTION,
        current_field="avg_vision_per_min",
        target=2.0,
        tips=(
            "Ward river level 1 to spot invade/jungler path",
            "After level 3 push, ward tribush or behind dragon pit",
            "Before dragon/baron: sweep + ward flanks 1min BEFORE spawn",
            "Place your pink in a permanent bush (pixel brush mid, tribush bot)",
        ),
    ),
    (InsightCategory.VISION, "jungle"): ImprovementTemplate(
        priority=2,
        title="Control vision",
        description=_VISION_DESCRIPTION,
        current_field="avg_vision_per_min",
        target=1.0,
        tips=(
            "Pink enemy jungle on the side you want to play",
            "Ward the enemy camp you want to steal 30s before respawn",
            "Sweep baron/dragon 1min before spawn",
            "Place deep wards when you have map priority",
        ),
    ),
    (InsightCategory.VISION, "lane"): ImprovementTemplate(
        priority=2,
        title="Control vision",
        description=_VISION_DESCRIPTION,
        current_field="avg_vision_per_min",
        target=1.0,
        tips=(
            "Buy a pink EVERY back - 75g can save your life",
            "Place your pink in river bush or tribush",
            "Use your trinket on CD - a placed ward > a saved ward",
            "If you push, ward both jungle entrances (river + tribush/raptors)",
        ),
    ),
    (InsightCategory.SURVIVABILITY, "default"): ImprovementTemplate(
        priority=1,
        title="Stop dying for nothing",
        description="Every death = 30s+ off the map = lost CS, XP, and pressure.",
        current_field="avg_deaths",
        target=4,
        tips=(
            "Check minimap every 3-5 seconds. If you don't see jungler, play safe.",
            "Never chase into fog of war - that's how you get turned on",
            "When behind, accept losing CS to avoid dying",
            "After killing your laner, BACK. Don't stay low HP for 2 minions.",
        ),
    ),
    (InsightCategory.TEAMPLAY, "top"): ImprovementTemplate(
        priority=2,
        title="Impact the rest of the map",
        description="Top isn't an island. Your TP and roams can win the game.",
        current_field="avg_kill_participation",
        target=55,
        tips=(
            "Save TP for dragons - 5v4 bot = free drake + kills",
            "If you're smashing lane, push and roam mid",
            "Ping when you TP so your team engages",
            "After 15min, group with team for objectives",
        ),
    ),
    (InsightCategory.TEAMPLAY, "jungle"): ImprovementTemplate(
        priority=1,
        title="Gank more effectively",
        description="Your map presence defines the game's tempo.",
        current_field="avg_kill_participation",
        target=65,
        tips=(
            "Gank a lane that has wave setup (slow push to their tower)",
            "Gank after enemy uses their escape (Ezreal E, Ahri R)",
            "Counter-gank = free double kill. Track enemy jungler and be there.",
            "Dive low HP enemies with your laners - tower will switch to you",
        ),
    ),
    (InsightCategory.TEAMPLAY, "default"): ImprovementTemplate(
        priority=2,
        title="Participate more in fights",
        description="Games are won as a team, not solo.",
        current_field="avg_kill_participation",
        target=60,
        tips=(
            "Watch minimap and move to fights BEFORE they start",
            'Ping "On my way" when you roam so team knows',
            "Don't farm bot when your team is fighting for Baron",
            "In mid-game, group with team rather than split alone",
        ),
    ),
    (InsightCategory.CONSISTENCY, "default"): ImprovementTemplate(
        priority=2,
        title="Stabilize your gameplay",
        description="Consistent players climb. Coinflip players stay stuck.",
        target=0.3,
        tips=(
            "One-trick or play max 3 champions. You can't be good on 10 champs.",
            "Stop playing after 2 losses in a row. Tilt = bad decisions.",
            "Even when fed, respect fundamentals: ward, track, farm.",
            "Review replays: every death = a mistake. Find which one.",
        ),
    ),
    (InsightCategory.OBJECTIVES, "default"): ImprovementTemplate(
        priority=2,
        title="Prioritize objectives",
        description="Dragons, heralds, barons win games. Not kills.",
        current_field="avg_dragon_takedowns",
        target=2.5,
        tips=(
            "Setup vision 1min before spawn (pink + sweep)",
            "Push bot/mid waves before starting dragon",
            "Herald = 2-3 plates = 320-480g. Use it in a lane with plates.",
            "After an ace or 2 kills, always take an objective (don't recall)",
        ),
    ),
}


def _insight(
    category: InsightCategory,
    title: str,
    description: str,
    value: float,
    importance: Importance,
    focus: Optional[CombatFocus] = None,
) -> AnalysisInsight:
    return AnalysisInsight(
        category=category,
        title=title,
        description=description,
        value=value,
        importance=importance,
        focus=focus,
    )


def main_role(role_aggregates: Dict[str, RoleAggregate]) -> Role:
    """Role with the most games, first on ties; MIDDLE when there is none."""
    best: Optional[RoleAggregate] = None
    for aggregate in role_aggregates.values():
        if best is None or aggregate.games > best.games:
            best = aggregate
    return Role(best.role) if best is not None else DEFAULT_ROLE


def early_death_ratio(minutes: float) -> float:
    """Share of a game's deaths assumed to happen before 15 minutes."""
    if minutes < 20:
        return 0.8
    if minutes < 30:
        return 0.5
    return 0.35


def estimate_early_deaths(matches: Sequence[NormalizedMatch]) -> float:
    """Average estimated deaths before 15 minutes per game."""
    return safe_mean(
        [m.participant.deaths * early_death_ratio(m.duration / 60) for m in matches]
    )


def deaths_by_outcome(matches: Sequence[NormalizedMatch]) -> Tuple[float, float]:
    """Average deaths in (wins, losses); 0 for an outcome never seen."""
    wins = [m.participant.deaths for m in matches if m.win]
    losses = [m.participant.deaths for m in matches if not m.win]
    return safe_mean(wins), safe_mean(losses)


def consistency(matches: Sequence[NormalizedMatch]) -> float:
    """Coefficient of variation of per-game KDA, lower is steadier."""
    if len(matches) < MIN_CONSISTENCY_GAMES:
        return NEUTRAL_CONSISTENCY
    return coefficient_of_variation(
        [m.participant.kda for m in matches], default=NEUTRAL_CONSISTENCY
    )


class InsightEngine:
    """Rule-based coaching output for a player's aggregated stats."""

    def generate(
        self,
        overall: OverallStats,
        role_aggregates: Dict[str, RoleAggregate],
        matches: Sequence[NormalizedMatch],
    ) -> InsightReport:
        """
        Run every rule and derive the improvement plan.

        :param overall: Aggregate over all analysed matches
        :param role_aggregates: Per-role aggregates keyed by role name
        :param matches: The analysed matches
        :returns: InsightReport with at most five improvements
        """
        role = main_role(role_aggregates)
        report = InsightReport()
        early_deaths = estimate_early_deaths(matches)

        role_rules = {
            Role.JUNGLE: self._jungle_rules,
            Role.UTILITY: self._support_rules,
            Role.BOTTOM: self._bottom_rules,
            Role.MIDDLE: self._mid_rules,
            Role.TOP: self._top_rules,
        }
        role_rules[role](report, overall, role_aggregates.get(role.value), early_deaths)

        self._general_rules(report, overall, role, matches, early_deaths)
        report.improvements = self.improvements(report.weaknesses, overall, role)
        return report

    @staticmethod
    def _jungle_rules(report, overall, aggregate, early_deaths) -> None:
        kp = overall.avg_kill_participation
        if kp > 65:
            report.strength(
                InsightCategory.TEAMPLAY,
                "Oppressive jungle presence",
                f"With {kp:.0f}% KP, you're involved in every play. You understand when to gank vs farm and your pathing creates pressure.",
                kp,
                Importance.HIGH,
            )
        elif kp < 50:
            report.weakness(
                InsightCategory.TEAMPLAY,
                "Ghost jungler",
                f"{kp:.0f}% KP means you're farming while your laners get dove. Track enemy timers and gank when your lanes have wave setup.",
                kp,
                Importance.HIGH,
            )

        dragons = overall.avg_dragon_takedowns
        if dragons and dragons > 2:
            report.strength(
                InsightCategory.OBJECTIVES,
                "Dragon Soul focused",
                f"{dragons:.1f} dragons/game average. You prioritize objectives well and setup vision before spawns.",
                dragons,
                Importance.HIGH,
            )

        vision = overall.avg_vision_per_min
        if vision < 0.8:
            report.weakness(
                InsightCategory.VISION,
                "Blind jungler",
                f"{vision:.2f} vision/min is not enough. Place pinks in enemy jungle, sweep objectives 1min before spawn.",
                vision,
                Importance.MEDIUM,
            )

    @staticmethod
    def _support_rules(report, overall, aggregate, early_deaths) -> None:
        vision = overall.avg_vision_per_min
        if vision > 2.0:
            report.strength(
                InsightCategory.VISION,
                "Pro-level vision",
                f"{vision:.2f} vision/min - your vision controls the map. You ward flanks in teamfights and track the enemy jungler.",
                vision,
                Importance.HIGH,
            )
        elif vision < 1.5:
            report.weakness(
                InsightCategory.VISION,
                "Wardless support",
                f"{vision:.2f} vision/min for support is critical. Use your support item + pinks. Ward river level 1, tribush after push.",
                vision,
                Importance.HIGH,
            )

        kp = overall.avg_kill_participation
        if kp > 70:
            report.strength(
                InsightCategory.TEAMPLAY,
                "Omnipresent support",
                f"{kp:.0f}% KP - you're everywhere. Your mid roams are well-timed and you follow up on your jungler's engages.",
                kp,
                Importance.HIGH,
            )

        deaths = overall.avg_deaths
        if deaths > 5:
            report.weakness(
                InsightCategory.SURVIVABILITY,
                "Kamikaze support",
                f"{deaths:.1f} deaths/game - you engage without backup or facecheck without vision. Your death = your ADC is alone.",
                deaths,
                Importance.HIGH,
            )

    @staticmethod
    def _bottom_rules(report, overall, aggregate, early_deaths) -> None:
        cs = overall.avg_cs_per_min
        cs_excellent = (
            aggregate is not None
            and aggregate.benchmark_comparison.cs_per_min.rating == Rating.EXCELLENT
        )
        if cs_excellent or cs > 8.5:
            report.strength(
                InsightCategory.FARMING,
                "Clean ADC farming",
                f"{cs:.1f} CS/min - you last-hit well and catch side waves. You hit your power spikes on time.",
                cs,
                Importance.HIGH,
            )
        elif cs < 7:
            report.weakness(
                InsightCategory.FARMING,
                "Low ADC CS",
                f"{cs:.1f} CS/min is 1.5 items behind at 25min. Practice last-hitting under tower (melee: 2 tower + 1 auto, caster: 1 auto + tower + 1 auto).",
                cs,
                Importance.HIGH,
            )

        share = overall.avg_damage_share
        if share > 28:
            report.strength(
                InsightCategory.COMBAT,
                "Carry damage dealer",
                f"{share:.0f}% of your team's damage. You DPS in teamfights without getting one-shot, your kiting is clean.",
                share,
                Importance.HIGH,
            )
        elif share < 22:
            report.weakness(
                InsightCategory.COMBAT,
                "Low damage ADC",
                f"{share:.0f}% damage share for ADC is too low. You position too far or arrive late to fights. Stay max range and auto the closest target.",
                share,
                Importance.HIGH,
                focus=CombatFocus.DAMAGE,
            )

        if early_deaths > 2:
            report.weakness(
                InsightCategory.SURVIVABILITY,
                "Suicidal laning phase",
                f"{early_deaths:.1f} deaths before 15min. You're getting ganked or taking losing trades. Freeze near your tower when behind, ward the tribush.",
                early_deaths,
                Importance.HIGH,
            )

    @staticmethod
    def _mid_rules(report, overall, aggregate, early_deaths) -> None:
        solo = overall.avg_solo_kills
        if solo and solo > 1.5:
            report.strength(
                InsightCategory.COMBAT,
                "Lane kingdom",
                f"{solo:.1f} solo kills/game - you win your 1v1s and know your champion's power spikes. You punish positioning mistakes.",
                solo,
                Importance.HIGH,
            )

        first_blood = overall.first_blood_rate
        if first_blood > 25:
            report.strength(
                InsightCategory.AGGRESSION,
                "First blood threat",
                f"{first_blood:.0f}% first blood rate - you abuse level 2/3 spikes or help your jungler invade. Early lead = snowball.",
                first_blood,
                Importance.MEDIUM,
            )

        cs = overall.avg_cs_per_min
        if cs < 7.5:
            report.weakness(
                InsightCategory.FARMING,
                "Low mid CS",
                f"{cs:.1f} CS/min - you roam without pushing or miss too many last-hits. Push wave THEN roam, otherwise you lose XP and gold.",
                cs,
                Importance.HIGH,
            )

    @staticmethod
    def _top_rules(report, overall, aggregate, early_deaths) -> None:
        solo = overall.avg_solo_kills
        if solo and solo > 1.5:
            report.strength(
                InsightCategory.COMBAT,
                "Island 1v1 king",
                f"{solo:.1f} solo kills/game in top. You know matchups and when to all-in. Your wave management forces favorable dives.",
                solo,
                Importance.HIGH,
            )

        plates = overall.avg_turret_plates_taken
        if plates and plates > 1.5:
            report.strength(
                InsightCategory.OBJECTIVES,
                "Plate collector",
                f"{plates:.1f} plates/game - you punish enemy backs and convert kills into objectives.",
                plates,
                Importance.MEDIUM,
            )

        kp = overall.avg_kill_participation
        if kp < 45:
            report.weakness(
                InsightCategory.TEAMPLAY,
                "Permanent top island",
                f"{kp:.0f}% KP - you splitpush 24/7 without TP or don't join fights. Save TP for dragons, join teamfights mid-game.",
                kp,
                Importance.MEDIUM,
            )

    @staticmethod
    def _general_rules(
        report: InsightReport,
        overall: OverallStats,
        role: Role,
        matches: Sequence[NormalizedMatch],
        early_deaths: float,
    ) -> None:
        solo = overall.avg_solo_kills
        if solo is not None and solo < 0.5 and role != Role.UTILITY:
            report.weakness(
                InsightCategory.COMBAT,
                "No 1v1 pressure",
                f"{solo:.1f} solo kills/game. You don't trade enough or don't know your all-in windows. Learn your champion's power spikes.",
                solo,
                Importance.MEDIUM,
                focus=CombatFocus.TRADES,
            )

        dodged = overall.avg_skillshots_dodged
        hit = overall.avg_skillshots_hit
        if dodged is not None and hit is not None:
            dodge_ratio = dodged / (hit + 1)
            if dodge_ratio > 1.5:
                report.strength(
                    InsightCategory.COMBAT,
                    "Challenger-level dodging",
                    f"You dodge {dodged:.0f} skillshots/game. Your spacing and sidesteps are clean, you force enemy cooldowns.",
                    dodged,
                    Importance.MEDIUM,
                )
            elif dodge_ratio < 0.7 and dodged < 20:
                report.weakness(
                    InsightCategory.COMBAT,
                    "Skillshot magnet",
                    "You eat every skillshot. Stop moving in straight lines, sidestep after each CS, anticipate enemy patterns (Lux Q after E, Blitz Q after W).",
                    dodged,
                    Importance.MEDIUM,
                    focus=CombatFocus.MECHANICS,
                )

        control_wards = overall.avg_control_wards_placed
        if control_wards is not None:
            if control_wards > 3:
                report.strength(
                    InsightCategory.VISION,
                    "Pink ward addict",
                    f"{control_wards:.1f} control wards/game. You secure vision for your team and deny enemy flanks.",
                    control_wards,
                    Importance.MEDIUM,
                )
            elif control_wards < 1.5 and role != Role.BOTTOM:
                report.weakness(
                    InsightCategory.VISION,
                    "Zero pinks",
                    f"{control_wards:.1f} control wards/game. 75g is nothing - buy a pink every back. Place it in a permanent bush (pixel brush, tribush).",
                    control_wards,
                    Importance.MEDIUM,
                )

        if early_deaths > 3:
            report.weakness(
                InsightCategory.SURVIVABILITY,
                "Early game deaths",
                f"{early_deaths:.1f} deaths before 15min on average. You're getting ganked, forcing losing trades, or overstaying. Respect the fog of war.",
                early_deaths,
                Importance.HIGH,
            )

        win_deaths, loss_deaths = deaths_by_outcome(matches)
        if loss_deaths > win_deaths * TILT_FACTOR:
            report.weakness(
                InsightCategory.CONSISTENCY,
                "Tilt deaths",
                f"{loss_deaths:.1f} deaths in losses vs {win_deaths:.1f} in wins. You int when behind. Accept farming safe and wait for enemy mistakes.",
                loss_deaths,
                Importance.HIGH,
            )

        variation = consistency(matches)
        if variation < 0.3:
            report.strength(
                InsightCategory.CONSISTENCY,
                "Stable performance",
                "Your performance is consistent. You have a solid baseline and don't tilt. This is key to climbing.",
                variation,
                Importance.MEDIUM,
            )
        elif variation > 0.6:
            report.weakness(
                InsightCategory.CONSISTENCY,
                "Coinflip player",
                "One game you carry, next game you int. Stick to 2-3 champs max, stop playing tilted, and focus fundamentals even when fed.",
                variation,
                Importance.HIGH,
            )

        minions = overall.avg_lane_minions_first_10_min
        if minions is not None and role not in (Role.JUNGLE, Role.UTILITY):
            if minions > 80:
                report.strength(
                    InsightCategory.FARMING,
                    "Early CS on point",
                    f"{minions:.0f} CS at 10min - you last-hit cleanly and don't lose CS to trades or bad backs.",
                    minions,
                    Importance.HIGH,
                )
            elif minions < 60:
                report.weakness(
                    InsightCategory.FARMING,
                    "Low CS@10",
                    f"{minions:.0f} CS at 10min (~107 possible). You're missing last-hits, backing badly, or getting zoned. Practice in tool and focus one minion at a time.",
                    minions,
                    Importance.HIGH,
                )

    @staticmethod
    def template_variant(weakness: AnalysisInsight, role: Role) -> str:
        """Pick the template variant for a weakness in the player's main role."""
        category = weakness.category
        if category == InsightCategory.COMBAT:
            focus = weakness.focus or CombatFocus.MECHANICS
            if focus == CombatFocus.DAMAGE:
                return "damage_carry" if role == Role.BOTTOM else "damage"
            return focus.value
        if category == InsightCategory.FARMING:
            return "jungle" if role == Role.JUNGLE else "lane"
        if category == InsightCategory.VISION:
            if role == Role.UTILITY:
                return "support"
            return "jungle" if role == Role.JUNGLE else "lane"
        if category == InsightCategory.TEAMPLAY:
            if role == Role.TOP:
                return "top"
            if role == Role.JUNGLE:
                return "jungle"
        return "default"

    def improvements(
        self,
        weaknesses: Sequence[AnalysisInsight],
        overall: OverallStats,
        role: Role,
    ) -> List[ImprovementSuggestion]:
        """One suggestion per weakness, highest priority first, at most five."""
        suggestions: List[ImprovementSuggestion] = []
        for weakness in weaknesses:
            key = (weakness.category, self.template_variant(weakness, role))
            template = IMPROVEMENT_TEMPLATES.get(key)
            if template is None:
                continue
            if template.current_field is None:
                current = weakness.value
            else:
                current = getattr(overall, template.current_field) or 0.0
            suggestions.append(
                ImprovementSuggestion(
                    priority=template.priority,
                    category=weakness.category,
                    title=template.title,
                    description=template.description,
                    current_value=current,
                    target_value=template.target,
                    tips=list(template.tips),
                )
            )

        suggestions.sort(key=lambda s: s.priority)
        return suggestions[:MAX_IMPROVEMENTS]
