"""Pydantic schemas for champion benchmarks."""

from datetime import datetime
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

from riftcoach.core.enums import BenchmarkTier, Rating, Role

# Records with fewer sampled games are ignored
MIN_BENCHMARK_GAMES = 5

# Stored multiplied by 100 to keep two decimals in integer columns
SCALED_FIELDS: FrozenSet[str] = frozenset(
    {
        "avg_kills",
        "avg_deaths",
        "avg_assists",
        "avg_kda",
        "win_rate",
        "avg_cs_per_min",
        "avg_vision_score_per_min",
        "avg_wards_placed",
        "avg_control_wards_placed",
        "avg_solo_kills",
    }
)


class BenchmarkRecord(BaseModel):
    """Population averages for one champion, role and tier.

    Values are kept in storage scale; use ``value()`` to read them in
    natural units.
    """

    champion_id: int = Field(..., alias="championId", description="Champion ID")
    champion_name: str = Field(..., alias="championName", description="Champion name")
    role: Role = Field(..., description="Normalized role")
    tier: BenchmarkTier = Field(BenchmarkTier.ALL_RANKS, description="Population tier")
    games_analyzed: int = Field(
        0, ge=0, alias="gamesAnalyzed", description="Games the averages came from"
    )

    avg_kills: Optional[int] = Field(None, alias="avgKills")
    avg_deaths: Optional[int] = Field(None, alias="avgDeaths")
    avg_assists: Optional[int] = Field(None, alias="avgAssists")
    avg_kda: Optional[int] = Field(None, alias="avgKda")
    win_rate: Optional[int] = Field(None, alias="winRate")
    avg_cs_per_min: Optional[int] = Field(None, alias="avgCsPerMin")
    avg_gold_per_min: Optional[int] = Field(None, alias="avgGoldPerMin")
    avg_damage_per_min: Optional[int] = Field(None, alias="avgDamagePerMin")
    avg_damage_share: Optional[int] = Field(None, alias="avgDamageShare")
    avg_vision_score_per_min: Optional[int] = Field(
        None, alias="avgVisionScorePerMin"
    )
    avg_wards_placed: Optional[int] = Field(None, alias="avgWardsPlaced")
    avg_control_wards_placed: Optional[int] = Field(
        None, alias="avgControlWardsPlaced"
    )
    avg_kill_participation: Optional[int] = Field(None, alias="avgKillParticipation")
    avg_solo_kills: Optional[int] = Field(None, alias="avgSoloKills")
    avg_skillshots_hit: Optional[int] = Field(None, alias="avgSkillshotsHit")
    avg_skillshots_dodged: Optional[int] = Field(None, alias="avgSkillshotsDodged")

    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(
        from_attributes=True, populate_by_name=True, frozen=True
    )

    @property
    def is_usable(self) -> bool:
        """Enough games sampled for the averages to be trusted."""
        return self.games_analyzed >= MIN_BENCHMARK_GAMES

    @property
    def key(self) -> str:
        """Lookup key ``{championId}-{role}``."""
        return benchmark_key(self.champion_id, self.role)

    def value(self, field: str) -> Optional[float]:
        """
        Read a stored average in natural units.

        :param field: Attribute name such as ``avg_kda``
        :returns: Unscaled value, or None when the average was not recorded
        """
        stored = getattr(self, field)
        if stored is None:
            return None
        if field in SCALED_FIELDS:
            return stored / 100
        return float(stored)


def benchmark_key(champion_id: int, role: Role) -> str:
    """Key used by the batch lookup map."""
    role_value = role.value if isinstance(role, Role) else str(role)
    return f"{champion_id}-{role_value}"


class ComparisonMetric(BaseModel):
    """A player statistic set against a reference value."""

    player_value: float = Field(..., alias="playerValue")
    reference_value: float = Field(0.0, alias="highEloValue")
    difference: float = Field(0.0, description="Relative difference in percent")
    percentile: float = Field(..., ge=0, le=100)
    rating: Rating

    model_config = ConfigDict(populate_by_name=True)
