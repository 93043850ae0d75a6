from typing import Annotated

from fastapi import Depends

from riftcoach.core.config import get_global_settings
from riftcoach.core.dependencies import RiotClientDep
from riftcoach.features.matches.gateway import MatchGateway
from riftcoach.features.matches.normalizer import MatchRecordNormalizer


# Gateway dependency
def get_match_gateway(riot_client: RiotClientDep) -> MatchGateway:
    settings = get_global_settings()
    return MatchGateway(
        riot_client,
        concurrency=settings.match_fetch_concurrency,
        timeout=settings.match_fetch_timeout_seconds,
    )


MatchGatewayDep = Annotated[MatchGateway, Depends(get_match_gateway)]


def get_match_normalizer() -> MatchRecordNormalizer:
    return MatchRecordNormalizer()


MatchNormalizerDep = Annotated[MatchRecordNormalizer, Depends(get_match_normalizer)]
