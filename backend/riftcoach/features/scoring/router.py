import structlog
from fastapi import APIRouter, HTTPException, Query, status

from riftcoach.core.exceptions import (
    ParticipantNotFound,
    ServiceException,
    ValidationError,
)
from riftcoach.core.riot_api.errors import NotFoundError, RateLimitError, RiotAPIError
from riftcoach.features.scoring.dependencies import MatchScoreServiceDep
from riftcoach.features.scoring.schemas import MatchScoreResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get("/{match_id}/score", response_model=MatchScoreResponse)
async def get_match_score(
    match_id: str,
    service: MatchScoreServiceDep,
    puuid: str = Query(..., min_length=1),
    region: str = Query(..., description="Region key, e.g. euw"),
) -> MatchScoreResponse:
    """Grade one player's performance in one match."""
    try:
        return await service.score_match(match_id, puuid, region)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except (NotFoundError, ParticipantNotFound):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Match or participant not found",
        )
    except RateLimitError:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limited. Please try again later.",
        )
    except (RiotAPIError, ServiceException) as e:
        logger.error("failed_to_score_match", match_id=match_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to score match",
        )
