"""Shared enums used across features.

This module provides a single source of truth for enums used in both the
analysis engine and the response schemas.
"""

from enum import Enum


class Role(str, Enum):
    """Normalized lane roles."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MIDDLE = "MIDDLE"
    BOTTOM = "BOTTOM"
    UTILITY = "UTILITY"


class Grade(str, Enum):
    """Single-match letter grades, best first."""

    S_PLUS = "S+"
    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class LetterRating(str, Enum):
    """Champion-level rating against a benchmark population."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class Rating(str, Enum):
    """Qualitative bucket for a benchmark comparison."""

    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    BELOW_AVERAGE = "below_average"
    POOR = "poor"


class TrendLabel(str, Enum):
    """Direction of a recent-form series."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class DataQuality(str, Enum):
    """How many qualifying matches back an analysis."""

    EXCELLENT = "excellent"
    GOOD = "good"
    LIMITED = "limited"
    INSUFFICIENT = "insufficient"


class QueueFilter(str, Enum):
    """Queue selection accepted by the analysis endpoint."""

    SOLO = "solo"
    FLEX = "flex"
    ALL = "all"


class BenchmarkTier(str, Enum):
    """Population a champion benchmark was aggregated from."""

    HIGH_ELO = "HIGH_ELO"
    ALL_RANKS = "ALL_RANKS"


class InsightCategory(str, Enum):
    """Category of a strength, weakness or improvement."""

    COMBAT = "combat"
    FARMING = "farming"
    VISION = "vision"
    OBJECTIVES = "objectives"
    CONSISTENCY = "consistency"
    SURVIVABILITY = "survivability"
    TEAMPLAY = "teamplay"
    AGGRESSION = "aggression"


class CombatFocus(str, Enum):
    """Which combat skill a combat weakness points at."""

    TRADES = "trades"
    DAMAGE = "damage"
    MECHANICS = "mechanics"


class Importance(str, Enum):
    """How strongly an insight should be surfaced."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
