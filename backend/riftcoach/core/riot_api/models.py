"""Pydantic models for Riot match-v5 response data.

Only the fields the analysis engine reads are declared; everything else in
the payload is ignored. Records are immutable once parsed.
"""

from typing import Dict, Optional, List
from pydantic import BaseModel, Field, ConfigDict

from riftcoach.utils.statistics import calculate_kda


class ChallengesDTO(BaseModel):
    """Optional per-participant challenge counters.

    Riot omits the whole sub-record (or single keys) for some queues and
    older matches, so every field stays ``None`` when absent.
    """

    solo_kills: Optional[float] = Field(None, alias="soloKills")
    skillshots_hit: Optional[float] = Field(None, alias="skillshotsHit")
    skillshots_dodged: Optional[float] = Field(None, alias="skillshotsDodged")
    turret_plates_taken: Optional[float] = Field(None, alias="turretPlatesTaken")
    dragon_takedowns: Optional[float] = Field(None, alias="dragonTakedowns")
    control_wards_placed: Optional[float] = Field(None, alias="controlWardsPlaced")
    early_laning_phase_gold_exp_advantage: Optional[float] = Field(
        None, alias="earlyLaningPhaseGoldExpAdvantage"
    )
    lane_minions_first_10_minutes: Optional[float] = Field(
        None, alias="laneMinionsFirst10Minutes"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ParticipantDTO(BaseModel):
    """Match participant information."""

    puuid: str
    summoner_name: Optional[str] = Field(None, alias="summonerName")
    riot_id_game_name: Optional[str] = Field(None, alias="riotIdGameName")
    riot_id_tagline: Optional[str] = Field(None, alias="riotIdTagline")

    team_id: int = Field(..., alias="teamId")
    win: bool
    champion_id: int = Field(..., alias="championId")
    champion_name: str = Field(..., alias="championName")
    team_position: Optional[str] = Field(None, alias="teamPosition")
    individual_position: Optional[str] = Field(None, alias="individualPosition")

    kills: int
    deaths: int
    assists: int
    champ_level: int = Field(1, alias="champLevel")

    total_minions_killed: int = Field(0, alias="totalMinionsKilled")
    neutral_minions_killed: int = Field(0, alias="neutralMinionsKilled")
    gold_earned: int = Field(0, alias="goldEarned")

    # Damage stats
    total_damage_dealt_to_champions: int = Field(
        0, alias="totalDamageDealtToChampions"
    )
    total_damage_taken: int = Field(0, alias="totalDamageTaken")
    damage_dealt_to_turrets: int = Field(0, alias="damageDealtToTurrets")
    damage_dealt_to_objectives: int = Field(0, alias="damageDealtToObjectives")
    time_ccing_others: int = Field(0, alias="timeCCingOthers")

    # Vision
    vision_score: float = Field(0.0, alias="visionScore")
    wards_placed: int = Field(0, alias="wardsPlaced")
    wards_killed: int = Field(0, alias="wardsKilled")
    vision_wards_bought_in_game: int = Field(0, alias="visionWardsBoughtInGame")

    # Multi-kills and early game events
    double_kills: int = Field(0, alias="doubleKills")
    triple_kills: int = Field(0, alias="tripleKills")
    quadra_kills: int = Field(0, alias="quadraKills")
    penta_kills: int = Field(0, alias="pentaKills")
    largest_multi_kill: int = Field(0, alias="largestMultiKill")
    first_blood_kill: bool = Field(False, alias="firstBloodKill")
    first_blood_assist: bool = Field(False, alias="firstBloodAssist")
    first_tower_kill: bool = Field(False, alias="firstTowerKill")
    first_tower_assist: bool = Field(False, alias="firstTowerAssist")

    # Objectives
    dragon_kills: int = Field(0, alias="dragonKills")
    baron_kills: int = Field(0, alias="baronKills")
    turret_kills: int = Field(0, alias="turretKills")
    objectives_stolen: int = Field(0, alias="objectivesStolen")

    # Pings (absent on older matches)
    all_in_pings: Optional[int] = Field(None, alias="allInPings")
    assist_me_pings: Optional[int] = Field(None, alias="assistMePings")
    danger_pings: Optional[int] = Field(None, alias="dangerPings")
    enemy_missing_pings: Optional[int] = Field(None, alias="enemyMissingPings")
    on_my_way_pings: Optional[int] = Field(None, alias="onMyWayPings")
    push_pings: Optional[int] = Field(None, alias="pushPings")

    challenges: Optional[ChallengesDTO] = None

    @property
    def kda(self) -> float:
        """Calculate KDA (kills + assists) / deaths."""
        return calculate_kda(self.kills, self.deaths, self.assists)

    @property
    def creep_score(self) -> int:
        """Lane minions plus neutral monsters."""
        return self.total_minions_killed + self.neutral_minions_killed

    @property
    def position(self) -> str:
        """Raw lane position, preferring ``teamPosition``."""
        return self.team_position or self.individual_position or ""

    def challenge(self, name: str) -> Optional[float]:
        """Read one challenge counter, None when absent."""
        if self.challenges is None:
            return None
        return getattr(self.challenges, name)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ObjectiveDTO(BaseModel):
    """Team objective counter."""

    first: bool = False
    kills: int = 0

    model_config = ConfigDict(frozen=True)


class TeamDTO(BaseModel):
    """Team information with objective counters."""

    team_id: int = Field(..., alias="teamId")
    win: bool = False
    objectives: Dict[str, ObjectiveDTO] = Field(default_factory=dict)

    def objective_kills(self, name: str) -> int:
        """Kills for an objective key such as ``tower`` or ``horde``."""
        objective = self.objectives.get(name)
        return objective.kills if objective else 0

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class MatchInfoDTO(BaseModel):
    """Match information."""

    game_creation: int = Field(0, alias="gameCreation")
    game_duration: int = Field(..., alias="gameDuration")
    queue_id: int = Field(0, alias="queueId")
    map_id: Optional[int] = Field(None, alias="mapId")
    game_version: Optional[str] = Field(None, alias="gameVersion")
    game_mode: Optional[str] = Field(None, alias="gameMode")
    platform_id: Optional[str] = Field(None, alias="platformId")
    participants: List[ParticipantDTO]
    teams: List[TeamDTO] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class MatchMetadataDTO(BaseModel):
    """Match metadata."""

    match_id: str = Field(..., alias="matchId")
    participants: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class MatchDTO(BaseModel):
    """Complete match data."""

    metadata: MatchMetadataDTO
    info: MatchInfoDTO

    @property
    def match_id(self) -> str:
        """Get match ID from metadata."""
        return self.metadata.match_id

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TimelineParticipantFrameDTO(BaseModel):
    """One participant's running totals at a timeline frame."""

    participant_id: int = Field(0, alias="participantId")
    total_gold: int = Field(0, alias="totalGold")
    xp: int = 0
    level: int = 1
    minions_killed: int = Field(0, alias="minionsKilled")
    jungle_minions_killed: int = Field(0, alias="jungleMinionsKilled")

    @property
    def creep_score(self) -> int:
        """Lane minions plus neutral monsters."""
        return self.minions_killed + self.jungle_minions_killed

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TimelineFrameDTO(BaseModel):
    """Snapshot of every participant, taken once per frame interval.

    ``participantFrames`` is keyed by participant id as a string ("1".."10").
    Events are not parsed.
    """

    timestamp: int
    participant_frames: Dict[str, TimelineParticipantFrameDTO] = Field(
        default_factory=dict, alias="participantFrames"
    )

    def for_participant(
        self, participant_id: int
    ) -> Optional[TimelineParticipantFrameDTO]:
        """Frame of one participant, None when missing."""
        return self.participant_frames.get(str(participant_id))

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TimelineParticipantDTO(BaseModel):
    """Mapping from timeline participant id to PUUID."""

    participant_id: int = Field(..., alias="participantId")
    puuid: str

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TimelineInfoDTO(BaseModel):
    """Timeline frames and participant mapping."""

    frame_interval: int = Field(60000, alias="frameInterval")
    frames: List[TimelineFrameDTO] = Field(default_factory=list)
    participants: List[TimelineParticipantDTO] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TimelineDTO(BaseModel):
    """Match-v5 timeline."""

    metadata: MatchMetadataDTO
    info: TimelineInfoDTO

    @property
    def match_id(self) -> str:
        """Get match ID from metadata."""
        return self.metadata.match_id

    def participant_id(self, puuid: str) -> Optional[int]:
        """Timeline participant id of a PUUID, None when absent."""
        for participant in self.info.participants:
            if participant.puuid == puuid:
                return participant.participant_id
        return None

    model_config = ConfigDict(populate_by_name=True, frozen=True)
