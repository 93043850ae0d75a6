from typing import Annotated

from fastapi import Depends

from riftcoach.features.benchmarks.dependencies import BenchmarkServiceDep
from riftcoach.features.matches.dependencies import MatchGatewayDep
from riftcoach.features.scoring.service import MatchScoreService


# Service dependency
def get_match_score_service(
    gateway: MatchGatewayDep, benchmark_service: BenchmarkServiceDep
) -> MatchScoreService:
    return MatchScoreService(gateway, benchmark_service)


MatchScoreServiceDep = Annotated[MatchScoreService, Depends(get_match_score_service)]
