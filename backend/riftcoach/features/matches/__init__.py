"""Match retrieval and normalization."""

from .normalizer import (
    MatchRecordNormalizer,
    NormalizedMatch,
    normalize_role,
)
from .gateway import MatchGateway

__all__ = [
    "MatchRecordNormalizer",
    "NormalizedMatch",
    "normalize_role",
    "MatchGateway",
]
