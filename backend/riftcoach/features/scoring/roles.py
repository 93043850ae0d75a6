"""Role-conditional scoring constants.

Every role-dependent number used by the single-match scorer, the role
aggregates and the insight engine lives in ``ROLE_PROFILES``. Bump
``SCORING_VERSION`` whenever a constant here changes so cached or stored
scores can be told apart.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from riftcoach.core.enums import Role

SCORING_VERSION = "2024.1"


@dataclass(frozen=True)
class ScoreWeights:
    """Weights of the sub-scores in the overall score. Sum to 1."""

    combat: float
    farming: float
    vision: float
    objectives: float
    bonus: float


@dataclass(frozen=True)
class CombatWeights:
    """Weights inside the combat sub-score."""

    kda: float
    kill_participation: float
    damage: float
    bonus: float


@dataclass(frozen=True)
class RoleFallbacks:
    """Targets used when no champion benchmark is available."""

    kda: float
    kill_participation: float
    damage_share: float
    cs_per_min: float
    gold_per_min: float
    vision_per_min: float
    control_wards: float
    wards_placed: float
    turret_damage_target: float


@dataclass(frozen=True)
class InsightThresholds:
    """Cut-offs for single-match insight and improvement lines."""

    kp_great: float
    kp_good: float
    kp_bad: float
    cs_great: float
    cs_bad: float
    vision_great: float
    vision_bad: float


@dataclass(frozen=True)
class RoleBenchmark:
    """Reference averages for a role, used by role aggregates.

    ``damage_share`` and ``kill_participation`` are fractions (0.25 = 25%).
    """

    cs_per_min: float
    vision_per_min: float
    kda: float
    damage_share: float
    kill_participation: float


@dataclass(frozen=True)
class RoleProfile:
    role: Role
    weights: ScoreWeights
    combat_weights: CombatWeights
    fallbacks: RoleFallbacks
    thresholds: InsightThresholds
    benchmark: RoleBenchmark

    @property
    def is_support(self) -> bool:
        return self.role == Role.UTILITY

    @property
    def is_jungle(self) -> bool:
        return self.role == Role.JUNGLE

    @property
    def is_carry_lane(self) -> bool:
        """BOTTOM and MIDDLE are expected to deal the team's damage."""
        return self.role in (Role.BOTTOM, Role.MIDDLE)


_LANER_COMBAT = CombatWeights(kda=0.30, kill_participation=0.25, damage=0.25, bonus=0.20)
_SUPPORT_COMBAT = CombatWeights(kda=0.25, kill_participation=0.25, damage=0.05, bonus=0.45)

_LANER_THRESHOLDS = InsightThresholds(
    kp_great=65,
    kp_good=50,
    kp_bad=35,
    cs_great=8.0,
    cs_bad=5.5,
    vision_great=0.7,
    vision_bad=0.4,
)

ROLE_PROFILES: Dict[Role, RoleProfile] = {
    Role.TOP: RoleProfile(
        role=Role.TOP,
        weights=ScoreWeights(0.25, 0.25, 0.10, 0.20, 0.20),
        combat_weights=_LANER_COMBAT,
        fallbacks=RoleFallbacks(
            kda=3.0,
            kill_participation=50,
            damage_share=18,
            cs_per_min=7.5,
            gold_per_min=480,
            vision_per_min=0.7,
            control_wards=2,
            wards_placed=8,
            turret_damage_target=4000,
        ),
        thresholds=InsightThresholds(
            kp_great=65,
            kp_good=50,
            kp_bad=35,
            cs_great=7.0,
            cs_bad=5.0,
            vision_great=0.7,
            vision_bad=0.4,
        ),
        benchmark=RoleBenchmark(7.5, 0.8, 2.0, 0.22, 0.55),
    ),
    Role.JUNGLE: RoleProfile(
        role=Role.JUNGLE,
        weights=ScoreWeights(0.25, 0.20, 0.15, 0.25, 0.15),
        combat_weights=_LANER_COMBAT,
        fallbacks=RoleFallbacks(
            kda=3.0,
            kill_participation=65,
            damage_share=18,
            cs_per_min=5.5,
            gold_per_min=400,
            vision_per_min=1.0,
            control_wards=2,
            wards_placed=10,
            turret_damage_target=2000,
        ),
        thresholds=InsightThresholds(
            kp_great=75,
            kp_good=65,
            kp_bad=50,
            cs_great=8.0,
            cs_bad=5.5,
            vision_great=0.9,
            vision_bad=0.5,
        ),
        benchmark=RoleBenchmark(5.5, 1.0, 2.5, 0.18, 0.70),
    ),
    Role.MIDDLE: RoleProfile(
        role=Role.MIDDLE,
        weights=ScoreWeights(0.30, 0.25, 0.15, 0.15, 0.15),
        combat_weights=_LANER_COMBAT,
        fallbacks=RoleFallbacks(
            kda=3.0,
            kill_participation=50,
            damage_share=25,
            cs_per_min=8.5,
            gold_per_min=480,
            vision_per_min=0.7,
            control_wards=2,
            wards_placed=8,
            turret_damage_target=4000,
        ),
        thresholds=_LANER_THRESHOLDS,
        benchmark=RoleBenchmark(8.0, 0.9, 2.5, 0.25, 0.60),
    ),
    Role.BOTTOM: RoleProfile(
        role=Role.BOTTOM,
        weights=ScoreWeights(0.30, 0.30, 0.10, 0.15, 0.15),
        combat_weights=_LANER_COMBAT,
        fallbacks=RoleFallbacks(
            kda=3.0,
            kill_participation=50,
            damage_share=25,
            cs_per_min=8.5,
            gold_per_min=480,
            vision_per_min=0.7,
            control_wards=2,
            wards_placed=8,
            turret_damage_target=4000,
        ),
        thresholds=_LANER_THRESHOLDS,
        benchmark=RoleBenchmark(8.5, 0.7, 3.0, 0.28, 0.65),
    ),
    Role.UTILITY: RoleProfile(
        role=Role.UTILITY,
        weights=ScoreWeights(0.25, 0.10, 0.35, 0.15, 0.15),
        combat_weights=_SUPPORT_COMBAT,
        fallbacks=RoleFallbacks(
            kda=4.0,
            kill_participation=65,
            damage_share=10,
            cs_per_min=1.5,
            gold_per_min=320,
            vision_per_min=2.2,
            control_wards=4,
            wards_placed=25,
            turret_damage_target=1000,
        ),
        thresholds=InsightThresholds(
            kp_great=75,
            kp_good=65,
            kp_bad=50,
            cs_great=8.0,
            cs_bad=5.5,
            vision_great=2.0,
            vision_bad=1.2,
        ),
        benchmark=RoleBenchmark(1.5, 2.0, 2.5, 0.10, 0.70),
    ),
}


def get_role_profile(role: Optional[Role]) -> RoleProfile:
    """Profile for a role; MIDDLE when the role is missing."""
    if role is None:
        return ROLE_PROFILES[Role.MIDDLE]
    return ROLE_PROFILES.get(role, ROLE_PROFILES[Role.MIDDLE])
