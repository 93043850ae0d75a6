"""Pydantic schemas for the multi-match player analysis.

All models serialise with camelCase aliases and accept either the alias or
the field name on input, so cached payloads can be validated back.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from riftcoach.core.enums import (
    CombatFocus,
    DataQuality,
    Importance,
    InsightCategory,
    LetterRating,
    Rating,
    TrendLabel,
)
from riftcoach.features.benchmarks.schemas import ComparisonMetric


class OverallStats(BaseModel):
    """Per-game averages and rates over a set of matches."""

    win_rate: float = Field(0.0, alias="winRate", description="Win rate in percent")
    avg_kda: float = Field(0.0, alias="avgKDA")
    avg_kills: float = Field(0.0, alias="avgKills")
    avg_deaths: float = Field(0.0, alias="avgDeaths")
    avg_assists: float = Field(0.0, alias="avgAssists")
    avg_cs: float = Field(0.0, alias="avgCS")
    avg_cs_per_min: float = Field(0.0, alias="avgCSPerMin")
    avg_vision_score: float = Field(0.0, alias="avgVisionScore")
    avg_vision_per_min: float = Field(0.0, alias="avgVisionPerMin")
    avg_damage_dealt: float = Field(0.0, alias="avgDamageDealt")
    avg_damage_per_min: float = Field(0.0, alias="avgDamagePerMin")
    avg_damage_taken: float = Field(0.0, alias="avgDamageTaken")
    avg_gold_earned: float = Field(0.0, alias="avgGoldEarned")
    avg_gold_per_min: float = Field(0.0, alias="avgGoldPerMin")
    avg_kill_participation: float = Field(
        0.0, alias="avgKillParticipation", description="Percent of team kills"
    )
    avg_damage_share: float = Field(
        0.0, alias="avgDamageShare", description="Percent of team champion damage"
    )
    avg_gold_share: float = Field(0.0, alias="avgGoldShare")
    first_blood_rate: float = Field(0.0, alias="firstBloodRate")
    first_tower_rate: float = Field(0.0, alias="firstTowerRate")
    objective_participation: float = Field(
        0.0, alias="objectiveParticipation", description="Dragon takedowns per game"
    )
    multi_kill_rate: float = Field(0.0, alias="multiKillRate")
    avg_game_duration: float = Field(
        0.0, alias="avgGameDuration", description="Average game length in minutes"
    )

    # Challenge averages, None when never reported
    avg_solo_kills: Optional[float] = Field(None, alias="avgSoloKills")
    avg_skillshots_hit: Optional[float] = Field(None, alias="avgSkillshotsHit")
    avg_skillshots_dodged: Optional[float] = Field(None, alias="avgSkillshotsDodged")
    avg_turret_plates_taken: Optional[float] = Field(
        None, alias="avgTurretPlatesTaken"
    )
    avg_dragon_takedowns: Optional[float] = Field(None, alias="avgDragonTakedowns")
    avg_control_wards_placed: Optional[float] = Field(
        None, alias="avgControlWardsPlaced"
    )
    avg_early_gold_advantage: Optional[float] = Field(
        None, alias="avgEarlyGoldAdvantage"
    )
    avg_lane_minions_first_10_min: Optional[float] = Field(
        None, alias="avgLaneMinionsFirst10Min"
    )

    avg_wards_killed: float = Field(0.0, alias="avgWardsKilled")
    avg_pings_per_game: float = Field(0.0, alias="avgPingsPerGame")
    avg_missing_pings: float = Field(0.0, alias="avgMissingPings")
    avg_danger_pings: float = Field(0.0, alias="avgDangerPings")
    ping_totals: Dict[str, int] = Field(default_factory=dict, alias="pingTotals")

    model_config = ConfigDict(populate_by_name=True)


class BenchmarkMetric(BaseModel):
    """A role aggregate value against the role reference."""

    value: float
    benchmark: float
    percentile: float = Field(..., ge=0, le=100)
    rating: Rating

    @classmethod
    def from_comparison(cls, metric: ComparisonMetric) -> "BenchmarkMetric":
        return cls(
            value=metric.player_value,
            benchmark=metric.reference_value,
            percentile=metric.percentile,
            rating=metric.rating,
        )


class BenchmarkComparison(BaseModel):
    cs_per_min: BenchmarkMetric = Field(..., alias="csPerMin")
    vision_score: BenchmarkMetric = Field(..., alias="visionScore")
    kda: BenchmarkMetric
    damage_share: BenchmarkMetric = Field(..., alias="damageShare")
    gold_efficiency: BenchmarkMetric = Field(..., alias="goldEfficiency")
    kill_participation: BenchmarkMetric = Field(..., alias="killParticipation")

    model_config = ConfigDict(populate_by_name=True)


class RoleAggregate(OverallStats):
    """Overall stats restricted to one role, with a role reference comparison."""

    role: str
    games: int = Field(..., ge=0)
    benchmark_comparison: BenchmarkComparison = Field(..., alias="benchmarkComparison")


class MatchPerformance(BaseModel):
    """A single notable game on a champion."""

    match_id: str = Field(..., alias="matchId")
    kda: float
    kills: int
    deaths: int
    assists: int
    cs: int
    damage: int
    win: bool
    game_creation: int = Field(..., alias="gameCreation")

    model_config = ConfigDict(populate_by_name=True)


class HighEloComparison(BaseModel):
    """Champion averages against a stored population benchmark."""

    tier: str
    games_analyzed: int = Field(..., alias="gamesAnalyzed")
    metrics: Dict[str, ComparisonMetric]
    overall_rating: LetterRating = Field(..., alias="overallRating")
    percentile: float

    model_config = ConfigDict(populate_by_name=True)


class ChampionAggregate(BaseModel):
    """Averages for every game played on one champion."""

    champion_id: int = Field(..., alias="championId")
    champion_name: str = Field(..., alias="championName")
    role: str
    games: int
    wins: int
    losses: int
    win_rate: float = Field(..., alias="winRate")
    avg_kda: float = Field(..., alias="avgKDA")
    avg_kills: float = Field(..., alias="avgKills")
    avg_deaths: float = Field(..., alias="avgDeaths")
    avg_assists: float = Field(..., alias="avgAssists")
    avg_cs: float = Field(..., alias="avgCS")
    avg_cs_per_min: float = Field(..., alias="avgCSPerMin")
    avg_damage: float = Field(..., alias="avgDamage")
    avg_damage_per_min: float = Field(..., alias="avgDamagePerMin")
    avg_vision: float = Field(..., alias="avgVision")
    avg_vision_per_min: float = Field(..., alias="avgVisionPerMin")
    avg_gold_per_min: float = Field(..., alias="avgGoldPerMin")
    avg_kill_participation: float = Field(..., alias="avgKillParticipation")
    avg_damage_share: float = Field(..., alias="avgDamageShare")
    avg_solo_kills: float = Field(0.0, alias="avgSoloKills")
    avg_skillshots_hit: float = Field(0.0, alias="avgSkillshotsHit")
    avg_skillshots_dodged: float = Field(0.0, alias="avgSkillshotsDodged")
    avg_control_wards_placed: float = Field(0.0, alias="avgControlWardsPlaced")
    avg_turret_plates_taken: float = Field(0.0, alias="avgTurretPlatesTaken")
    high_elo_comparison: Optional[HighEloComparison] = Field(
        None, alias="highEloComparison"
    )
    best_performance: Optional[MatchPerformance] = Field(None, alias="bestPerformance")
    worst_performance: Optional[MatchPerformance] = Field(
        None, alias="worstPerformance"
    )

    model_config = ConfigDict(populate_by_name=True)


class PerformanceTrends(BaseModel):
    """Windowed recent-form series, most recent window first."""

    recent_kda: List[float] = Field(default_factory=list, alias="recentKDA")
    recent_win_rate: List[float] = Field(default_factory=list, alias="recentWinRate")
    recent_cs: List[float] = Field(default_factory=list, alias="recentCS")
    recent_vision: List[float] = Field(default_factory=list, alias="recentVision")
    recent_damage: List[float] = Field(default_factory=list, alias="recentDamage")
    kda_trend: TrendLabel = Field(TrendLabel.STABLE, alias="kdaTrend")
    win_rate_trend: TrendLabel = Field(TrendLabel.STABLE, alias="winRateTrend")
    cs_trend: TrendLabel = Field(TrendLabel.STABLE, alias="csTrend")
    vision_trend: TrendLabel = Field(TrendLabel.STABLE, alias="visionTrend")
    damage_trend: TrendLabel = Field(TrendLabel.STABLE, alias="damageTrend")

    model_config = ConfigDict(populate_by_name=True)


class AnalysisInsight(BaseModel):
    """A strength or weakness."""

    category: InsightCategory
    title: str
    description: str
    value: float
    comparison: Optional[str] = None
    importance: Importance
    focus: Optional[CombatFocus] = Field(
        None, exclude=True, description="Selects the combat improvement template"
    )


class ImprovementSuggestion(BaseModel):
    """A coaching tip tied to one weakness."""

    priority: int = Field(..., ge=1, le=3, description="1 is the highest priority")
    category: InsightCategory
    title: str
    description: str
    current_value: float = Field(..., alias="currentValue")
    target_value: float = Field(..., alias="targetValue")
    tips: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class TimelineAnalysis(BaseModel):
    """Lane-opponent differences read from match timelines.

    Differences are player minus lane opponent. Checkpoint averages are None
    when no analysed timeline reached that minute.
    """

    games_with_timeline: int = Field(..., ge=0, alias="gamesWithTimeline")
    avg_gold_diff_at_10: Optional[float] = Field(None, alias="avgGoldDiffAt10")
    avg_cs_diff_at_10: Optional[float] = Field(None, alias="avgCSDiffAt10")
    avg_xp_diff_at_10: Optional[float] = Field(None, alias="avgXPDiffAt10")
    avg_level_diff_at_10: Optional[float] = Field(None, alias="avgLevelDiffAt10")
    avg_gold_diff_at_15: Optional[float] = Field(None, alias="avgGoldDiffAt15")
    avg_cs_diff_at_15: Optional[float] = Field(None, alias="avgCSDiffAt15")
    avg_xp_diff_at_15: Optional[float] = Field(None, alias="avgXPDiffAt15")
    lead_rate_at_10: Optional[float] = Field(
        None, alias="leadRateAt10", description="Percent of games ahead in gold"
    )
    lead_rate_at_15: Optional[float] = Field(None, alias="leadRateAt15")
    lead_conversion_rate: Optional[float] = Field(
        None,
        alias="leadConversionRate",
        description="Percent of games ahead at 15 minutes that were won",
    )
    throw_rate: float = Field(0.0, alias="throwRate")
    comeback_rate: float = Field(0.0, alias="comebackRate")
    avg_max_lead: float = Field(0.0, alias="avgMaxLead")
    avg_max_deficit: float = Field(0.0, alias="avgMaxDeficit")

    model_config = ConfigDict(populate_by_name=True)


class PlayerAnalysis(BaseModel):
    """Full multi-match analysis of one player."""

    puuid: str
    game_name: str = Field("", alias="gameName")
    tag_line: str = Field("", alias="tagLine")
    region: str
    queue_name: str = Field(..., alias="queueName")
    analyzed_games: int = Field(..., ge=0, alias="analyzedGames")
    data_quality: DataQuality = Field(..., alias="dataQuality")
    overall_stats: OverallStats = Field(..., alias="overallStats")
    role_stats: Dict[str, RoleAggregate] = Field(
        default_factory=dict, alias="roleStats"
    )
    champion_analysis: List[ChampionAggregate] = Field(
        default_factory=list, alias="championAnalysis"
    )
    trends: PerformanceTrends
    strengths: List[AnalysisInsight] = Field(default_factory=list)
    weaknesses: List[AnalysisInsight] = Field(default_factory=list)
    improvements: List[ImprovementSuggestion] = Field(default_factory=list)
    timeline_analysis: Optional[TimelineAnalysis] = Field(
        None, alias="timelineAnalysis"
    )
    scoring_version: str = Field(..., alias="scoringVersion")

    model_config = ConfigDict(populate_by_name=True)
