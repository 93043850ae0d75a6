from typing import Annotated

from fastapi import Depends

from riftcoach.features.analysis.service import PlayerAnalysisService
from riftcoach.features.benchmarks.dependencies import BenchmarkServiceDep
from riftcoach.features.matches.dependencies import MatchGatewayDep, MatchNormalizerDep


# Service dependency
def get_player_analysis_service(
    gateway: MatchGatewayDep,
    benchmark_service: BenchmarkServiceDep,
    normalizer: MatchNormalizerDep,
) -> PlayerAnalysisService:
    return PlayerAnalysisService(gateway, benchmark_service, normalizer=normalizer)


PlayerAnalysisServiceDep = Annotated[
    PlayerAnalysisService, Depends(get_player_analysis_service)
]
