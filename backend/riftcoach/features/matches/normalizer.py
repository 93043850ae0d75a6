"""Normalization of raw match records into the shape the analysis engine reads.

A ``NormalizedMatch`` pins one match to the analysed player: their
participant record, normalized role, team, and lane opponent. Everything
downstream (scoring, aggregation, insights) works on these.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from riftcoach.core.enums import Role
from riftcoach.core.exceptions import ParticipantNotFound
from riftcoach.core.riot_api.models import MatchDTO, ParticipantDTO, TeamDTO

logger = structlog.get_logger(__name__)

DEFAULT_ROLE = Role.MIDDLE

ROLE_ALIASES: Dict[str, Role] = {
    "TOP": Role.TOP,
    "JUNGLE": Role.JUNGLE,
    "MIDDLE": Role.MIDDLE,
    "MID": Role.MIDDLE,
    "BOTTOM": Role.BOTTOM,
    "ADC": Role.BOTTOM,
    "DUO_CARRY": Role.BOTTOM,
    "UTILITY": Role.UTILITY,
    "SUPPORT": Role.UTILITY,
    "DUO_SUPPORT": Role.UTILITY,
}


def normalize_role(position: Optional[str]) -> Role:
    """Map a raw position string to a ``Role``; empty or unknown means MIDDLE."""
    if not position:
        return DEFAULT_ROLE
    return ROLE_ALIASES.get(position.strip().upper(), DEFAULT_ROLE)


@dataclass(frozen=True)
class NormalizedMatch:
    """One match seen from the analysed player's seat."""

    match_id: str
    game_creation: int
    queue_id: int
    duration: int
    participant: ParticipantDTO
    role: Role
    team: Optional[TeamDTO]
    opponent: Optional[ParticipantDTO]
    participants: Tuple[ParticipantDTO, ...]

    @property
    def win(self) -> bool:
        return self.participant.win

    @property
    def minutes(self) -> float:
        """Game length in minutes, never below one."""
        return max(self.duration / 60, 1.0)

    @property
    def has_team_data(self) -> bool:
        return len(self.participants) > 1

    @property
    def teammates(self) -> Tuple[ParticipantDTO, ...]:
        """Participants on the player's team, the player included."""
        if not self.has_team_data:
            return (self.participant,)
        team_id = self.participant.team_id
        return tuple(p for p in self.participants if p.team_id == team_id)

    @property
    def enemies(self) -> Tuple[ParticipantDTO, ...]:
        team_id = self.participant.team_id
        return tuple(p for p in self.participants if p.team_id != team_id)

    def team_total(self, field: str) -> float:
        """Sum a numeric participant field over the player's team."""
        return sum(getattr(p, field) for p in self.teammates)

    def enemy_in_role(self, role: Role) -> Optional[ParticipantDTO]:
        """First enemy whose normalized role is ``role``."""
        for enemy in self.enemies:
            if normalize_role(enemy.position) == role:
                return enemy
        return None


class MatchRecordNormalizer:
    """Builds ``NormalizedMatch`` objects for one player."""

    def normalize(self, match: MatchDTO, puuid: str) -> NormalizedMatch:
        """
        Normalize a match for the given player.

        :param match: Parsed match-v5 record
        :param puuid: The analysed player's PUUID
        :returns: NormalizedMatch for this player
        :raises ParticipantNotFound: If the player is not in the match
        """
        participant = next(
            (p for p in match.info.participants if p.puuid == puuid), None
        )
        if participant is None:
            raise ParticipantNotFound(match.match_id, puuid)

        role = normalize_role(participant.position)
        team = next(
            (t for t in match.info.teams if t.team_id == participant.team_id), None
        )
        participants = tuple(match.info.participants)

        normalized = NormalizedMatch(
            match_id=match.match_id,
            game_creation=match.info.game_creation,
            queue_id=match.info.queue_id,
            duration=match.info.game_duration,
            participant=participant,
            role=role,
            team=team,
            opponent=None,
            participants=participants,
        )
        opponent = normalized.enemy_in_role(role)
        if opponent is None:
            return normalized

        return NormalizedMatch(
            match_id=normalized.match_id,
            game_creation=normalized.game_creation,
            queue_id=normalized.queue_id,
            duration=normalized.duration,
            participant=participant,
            role=role,
            team=team,
            opponent=opponent,
            participants=participants,
        )

    def normalize_many(
        self, matches: Iterable[MatchDTO], puuid: str
    ) -> List[NormalizedMatch]:
        """Normalize a batch, dropping matches the player is missing from."""
        normalized: List[NormalizedMatch] = []
        for match in matches:
            try:
                normalized.append(self.normalize(match, puuid))
            except ParticipantNotFound as e:
                logger.debug(
                    "Dropping match without analysed participant",
                    match_id=e.match_id,
                    puuid=puuid,
                )
        return normalized
