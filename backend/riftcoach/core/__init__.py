"""Core infrastructure module.

This module exports core utilities used across features.
Never imports from features - only from external libraries.
"""

from .config import Settings, get_settings, get_global_settings
from .exceptions import (
    ServiceException,
    DatabaseError,
    ValidationError,
    ExternalServiceError,
    ParticipantNotFound,
    NoMatchesAvailable,
    CacheUnavailable,
)
from .enums import Role, Grade, Rating, TrendLabel, DataQuality, QueueFilter
from .logging import setup_logging, get_logger

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_global_settings",
    # Exceptions
    "ServiceException",
    "DatabaseError",
    "ValidationError",
    "ExternalServiceError",
    "ParticipantNotFound",
    "NoMatchesAvailable",
    "CacheUnavailable",
    # Enums
    "Role",
    "Grade",
    "Rating",
    "TrendLabel",
    "DataQuality",
    "QueueFilter",
    # Logging
    "setup_logging",
    "get_logger",
]
