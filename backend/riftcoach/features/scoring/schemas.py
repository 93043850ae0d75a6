"""Pydantic schemas for single-match scores."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from riftcoach.core.enums import Grade

MAX_SCORE_LINES = 4


class GameScore(BaseModel):
    """Performance grade for one match."""

    overall: int = Field(..., ge=0, le=100, description="Weighted overall score")
    combat: int = Field(..., ge=0, le=100)
    farming: int = Field(..., ge=0, le=100)
    vision: int = Field(..., ge=0, le=100)
    objectives: int = Field(..., ge=0, le=100)
    grade: Grade
    insights: List[str] = Field(default_factory=list, max_length=MAX_SCORE_LINES)
    improvements: List[str] = Field(default_factory=list, max_length=MAX_SCORE_LINES)

    model_config = ConfigDict(frozen=True)


class MatchScoreResponse(BaseModel):
    """Score of one match for one player."""

    match_id: str = Field(..., alias="matchId")
    puuid: str
    champion_id: int = Field(..., alias="championId")
    champion_name: str = Field(..., alias="championName")
    role: str
    win: bool
    score: GameScore
    scoring_version: str = Field(..., alias="scoringVersion")

    model_config = ConfigDict(populate_by_name=True)
