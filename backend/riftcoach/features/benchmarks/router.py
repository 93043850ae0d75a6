from typing import Dict, List, Optional, Union

import structlog
from fastapi import APIRouter, HTTPException, Query, status

from riftcoach.core.enums import Role
from riftcoach.core.exceptions import ServiceException
from riftcoach.features.benchmarks.dependencies import BenchmarkServiceDep
from riftcoach.features.benchmarks.schemas import BenchmarkRecord

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/champion-benchmarks", tags=["champion-benchmarks"])


def parse_champion_ids(raw: str) -> List[int]:
    """Parse a comma-separated id list, skipping entries that are not integers."""
    ids: List[int] = []
    for part in raw.split(","):
        part = part.strip()
        if part.lstrip("-").isdigit():
            ids.append(int(part))
    return ids


@router.get(
    "",
    response_model=Union[Dict[str, BenchmarkRecord], List[BenchmarkRecord]],
)
async def get_champion_benchmarks(
    service: BenchmarkServiceDep,
    champion_id: Optional[int] = Query(None, alias="championId"),
    champion_ids: Optional[str] = Query(
        None, alias="championIds", description="Comma-separated champion ids"
    ),
    champion_name: Optional[str] = Query(None, alias="championName"),
    role: Optional[Role] = Query(None),
):
    """
    Get champion benchmarks.

    - ``championIds``: map keyed ``{championId}-{role}``, HIGH_ELO preferred
    - ``championId`` (and optional ``role``): every tier of that champion
    - ``championName``: case-insensitive name match
    - no filter: every record, most sampled games first
    """
    try:
        if champion_ids is not None:
            ids = parse_champion_ids(champion_ids)
            if not ids:
                return []
            return await service.get_map(ids)
        if champion_id is not None:
            return await service.get_for_champion(champion_id, role)
        if champion_name:
            return await service.get_by_name(champion_name)
        return await service.list_all()
    except ServiceException as e:
        logger.error("failed_to_get_champion_benchmarks", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get champion benchmarks",
        )
