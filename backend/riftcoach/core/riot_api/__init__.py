"""
Riot API client package for League of Legends match data.

This package provides the HTTP client, response models, routing constants and
error types used to pull match-v5 data.
"""

from .client import RiotAPIClient
from .errors import (
    RiotAPIError,
    RateLimitError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    BadRequestError,
    ServiceUnavailableError,
)
from .models import (
    ChallengesDTO,
    ParticipantDTO,
    TeamDTO,
    MatchDTO,
    TimelineDTO,
)
from .endpoints import RiotAPIEndpoints
from .constants import Region, Platform, QueueType, REGIONS, RANKED_QUEUES

__all__ = [
    "RiotAPIClient",
    "RiotAPIError",
    "RateLimitError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "BadRequestError",
    "ServiceUnavailableError",
    "ChallengesDTO",
    "ParticipantDTO",
    "TeamDTO",
    "MatchDTO",
    "TimelineDTO",
    "RiotAPIEndpoints",
    "Region",
    "Platform",
    "QueueType",
    "REGIONS",
    "RANKED_QUEUES",
]
