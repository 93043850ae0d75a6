"""Builders for match records, normalized matches and benchmarks."""

from typing import Any, Dict, List, Optional

from riftcoach.core.riot_api.models import (
    ChallengesDTO,
    MatchDTO,
    MatchInfoDTO,
    MatchMetadataDTO,
    ObjectiveDTO,
    ParticipantDTO,
    TeamDTO,
    TimelineDTO,
    TimelineFrameDTO,
    TimelineInfoDTO,
    TimelineParticipantDTO,
    TimelineParticipantFrameDTO,
)
from riftcoach.features.benchmarks.schemas import BenchmarkRecord
from riftcoach.features.matches.normalizer import MatchRecordNormalizer, NormalizedMatch

PLAYER_PUUID = "player-puuid"
POSITIONS = ["TOP", "JUNGLE", "MIDDLE", "BOTTOM", "UTILITY"]

PARTICIPANT_DEFAULTS: Dict[str, Any] = {
    "team_id": 100,
    "win": True,
    "champion_id": 103,
    "champion_name": "Ahri",
    "team_position": "MIDDLE",
    "kills": 5,
    "deaths": 3,
    "assists": 4,
    "champ_level": 14,
    "total_minions_killed": 200,
    "neutral_minions_killed": 10,
    "gold_earned": 11000,
    "total_damage_dealt_to_champions": 20000,
    "total_damage_taken": 15000,
    "vision_score": 24,
    "wards_placed": 10,
    "wards_killed": 2,
    "vision_wards_bought_in_game": 2,
}


def build_participant(puuid: str = PLAYER_PUUID, **overrides: Any) -> ParticipantDTO:
    """Participant with sensible mid-lane defaults; overrides use field names."""
    data = dict(PARTICIPANT_DEFAULTS)
    data.update(overrides)
    challenges = data.pop("challenges", None)
    if isinstance(challenges, dict):
        challenges = ChallengesDTO(**challenges)
    return ParticipantDTO(puuid=puuid, challenges=challenges, **data)


def build_match(
    match_id: str = "EUW1_1",
    puuid: str = PLAYER_PUUID,
    win: bool = True,
    role: str = "MIDDLE",
    duration: int = 1800,
    game_creation: int = 1_700_000_000_000,
    queue_id: int = 420,
    include_player: bool = True,
    **player_overrides: Any,
) -> MatchDTO:
    """
    Ten-player match with the analysed player in ``role`` on team 100.

    Allies and enemies get flat, identical stat lines so team totals are
    easy to reason about in assertions.
    """
    participants: List[ParticipantDTO] = []
    if include_player:
        participants.append(
            build_participant(
                puuid,
                win=win,
                team_position=role,
                **player_overrides,
            )
        )

    for team_id, team_win in ((100, win), (200, not win)):
        for position in POSITIONS:
            if team_id == 100 and position == role and include_player:
                continue
            participants.append(
                build_participant(
                    f"{team_id}-{position}",
                    team_id=team_id,
                    win=team_win,
                    team_position=position,
                    champion_id=500 + len(participants),
                    champion_name=f"Champ{len(participants)}",
                    kills=3,
                    deaths=4,
                    assists=5,
                    total_minions_killed=150,
                    neutral_minions_killed=0,
                    gold_earned=10000,
                    total_damage_dealt_to_champions=15000,
                    vision_score=20,
                )
            )

    teams = [
        TeamDTO(
            team_id=100,
            win=win,
            objectives={"tower": ObjectiveDTO(kills=4), "dragon": ObjectiveDTO(kills=2)},
        ),
        TeamDTO(team_id=200, win=not win),
    ]
    return MatchDTO(
        metadata=MatchMetadataDTO(match_id=match_id),
        info=MatchInfoDTO(
            game_creation=game_creation,
            game_duration=duration,
            queue_id=queue_id,
            participants=participants,
            teams=teams,
        ),
    )


def build_normalized(
    match_id: str = "EUW1_1", puuid: str = PLAYER_PUUID, **kwargs: Any
) -> NormalizedMatch:
    return MatchRecordNormalizer().normalize(build_match(match_id, puuid, **kwargs), puuid)


def build_benchmark(
    champion_id: int = 103,
    role: str = "MIDDLE",
    games_analyzed: int = 100,
    tier: str = "HIGH_ELO",
    **values: Optional[int],
) -> BenchmarkRecord:
    """Benchmark in storage scale (x100 for the scaled fields)."""
    data: Dict[str, Any] = {
        "champion_id": champion_id,
        "champion_name": "Ahri",
        "role": role,
        "tier": tier,
        "games_analyzed": games_analyzed,
        "win_rate": 5200,
        "avg_kda": 300,
        "avg_cs_per_min": 800,
        "avg_gold_per_min": 420,
        "avg_damage_per_min": 700,
        "avg_damage_share": 25,
        "avg_vision_score_per_min": 90,
        "avg_kill_participation": 55,
        "avg_solo_kills": 100,
        "avg_control_wards_placed": 200,
        "avg_wards_placed": 900,
    }
    data.update(values)
    return BenchmarkRecord(**data)



# Timeline ids for ``build_match`` rosters: the player is 1, their lane
# opponent 200-MIDDLE is 8 (the mirrored slot 6 belongs to 200-TOP).
TIMELINE_IDS: Dict[str, int] = {
    PLAYER_PUUID: 1,
    "100-TOP": 2,
    "100-JUNGLE": 3,
    "100-BOTTOM": 4,
    "100-UTILITY": 5,
    "200-TOP": 6,
    "200-JUNGLE": 7,
    "200-MIDDLE": 8,
    "200-BOTTOM": 9,
    "200-UTILITY": 10,
}


def build_timeline(
    match_id: str = "EUW1_1",
    frames: Optional[Dict[int, Dict[int, Dict[str, int]]]] = None,
    participant_ids: Optional[Dict[str, int]] = None,
) -> TimelineDTO:
    """
    Timeline from ``{minute: {participant_id: frame fields}}``.

    Frame fields use model field names (``total_gold``, ``xp``, ``level``,
    ``minions_killed``, ``jungle_minions_killed``).
    """
    ids = TIMELINE_IDS if participant_ids is None else participant_ids
    return TimelineDTO(
        metadata=MatchMetadataDTO(match_id=match_id),
        info=TimelineInfoDTO(
            frames=[
                TimelineFrameDTO(
                    timestamp=minute * 60_000,
                    participant_frames={
                        str(pid): TimelineParticipantFrameDTO(
                            participant_id=pid, **fields
                        )
                        for pid, fields in by_participant.items()
                    },
                )
                for minute, by_participant in sorted((frames or {}).items())
            ],
            participants=[
                TimelineParticipantDTO(participant_id=pid, puuid=puuid)
                for puuid, pid in ids.items()
            ],
        ),
    )


def lane_frames(
    gold_diffs: Dict[int, int], base_gold: int = 3000
) -> Dict[int, Dict[int, Dict[str, int]]]:
    """Frames where the player (1) leads opponent (8) by ``gold_diffs[minute]``."""
    return {
        minute: {
            1: {"total_gold": base_gold + diff},
            8: {"total_gold": base_gold},
        }
        for minute, diff in gold_diffs.items()
    }
