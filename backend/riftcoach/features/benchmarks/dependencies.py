from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from riftcoach.core.config import get_global_settings
from riftcoach.core.database import get_db
from riftcoach.features.benchmarks.repository import (
    BenchmarkRepositoryInterface,
    SQLAlchemyBenchmarkRepository,
)
from riftcoach.features.benchmarks.service import BenchmarkService

# Database dependency
DatabaseDep = Annotated[AsyncSession, Depends(get_db)]


# Repository dependency
def get_benchmark_repository(db: DatabaseDep) -> BenchmarkRepositoryInterface:
    return SQLAlchemyBenchmarkRepository(db)


BenchmarkRepositoryDep = Annotated[
    BenchmarkRepositoryInterface, Depends(get_benchmark_repository)
]


# Service dependency
def get_benchmark_service(repository: BenchmarkRepositoryDep) -> BenchmarkService:
    settings = get_global_settings()
    return BenchmarkService(repository, ttl=settings.benchmark_cache_ttl_seconds)


BenchmarkServiceDep = Annotated[BenchmarkService, Depends(get_benchmark_service)]
