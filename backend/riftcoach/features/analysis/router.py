import structlog
from fastapi import APIRouter, HTTPException, Query, status

from riftcoach.core.enums import QueueFilter
from riftcoach.core.exceptions import (
    NoMatchesAvailable,
    ServiceException,
    ValidationError,
)
from riftcoach.core.riot_api.errors import NotFoundError, RateLimitError, RiotAPIError
from riftcoach.features.analysis.dependencies import PlayerAnalysisServiceDep
from riftcoach.features.analysis.schemas import PlayerAnalysis

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.get("/{puuid}", response_model=PlayerAnalysis)
async def get_player_analysis(
    puuid: str,
    service: PlayerAnalysisServiceDep,
    region: str = Query(..., description="Region key, e.g. euw"),
    game_name: str = Query("", alias="gameName"),
    tag_line: str = Query("", alias="tagLine"),
    queue: QueueFilter = Query(QueueFilter.SOLO),
    count: int = Query(50, ge=1, le=100, description="Matches to analyse"),
) -> PlayerAnalysis:
    """
    Analyse a player's recent ranked games.

    Returns overall, per-role and per-champion aggregates, recent-form
    trends, strengths, weaknesses and an improvement plan.
    """
    try:
        return await service.analyze_player(
            puuid,
            region,
            game_name=game_name,
            tag_line=tag_line,
            queue=queue,
            count=count,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except (NoMatchesAvailable, NotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No ranked matches found for this player",
        )
    except RateLimitError:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limited. Please try again later.",
        )
    except (RiotAPIError, ServiceException) as e:
        logger.error("Failed to analyse player", puuid=puuid, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to analyse player",
        )
