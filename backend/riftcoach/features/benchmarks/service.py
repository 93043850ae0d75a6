"""Champion benchmark service with a process-wide lookup cache."""

from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from riftcoach.core.cache import TTLCache, benchmark_cache
from riftcoach.core.decorators import service_error_handler
from riftcoach.core.enums import BenchmarkTier, Role
from riftcoach.features.benchmarks.repository import BenchmarkRepositoryInterface
from riftcoach.features.benchmarks.schemas import BenchmarkRecord, benchmark_key

logger = structlog.get_logger(__name__)

# Cached marker for "no benchmark stored"
_NO_BENCHMARK = object()


def prefer_high_elo(records: Iterable[BenchmarkRecord]) -> Dict[str, BenchmarkRecord]:
    """Map ``{championId}-{role}`` to one record, HIGH_ELO winning over ALL_RANKS."""
    preferred: Dict[str, BenchmarkRecord] = {}
    for record in records:
        key = record.key
        if key not in preferred or record.tier == BenchmarkTier.HIGH_ELO:
            preferred[key] = record
    return preferred


class BenchmarkService:
    """Looks up champion benchmarks, memoising per (champion, role)."""

    def __init__(
        self,
        repository: BenchmarkRepositoryInterface,
        cache: Optional[TTLCache] = None,
        ttl: Optional[int] = None,
    ):
        """
        Initialize the service.

        :param repository: Benchmark store
        :param cache: Lookup cache, defaults to the process-wide one
        :param ttl: Entry TTL in seconds, defaults to the cache TTL
        """
        self.repository = repository
        self.cache = cache if cache is not None else benchmark_cache
        self.ttl = ttl

    @staticmethod
    def _cache_key(champion_id: int, role: Role) -> str:
        return f"benchmark:{benchmark_key(champion_id, role)}"

    def _cached(self, champion_id: int, role: Role) -> Tuple[bool, Optional[BenchmarkRecord]]:
        entry = self.cache.get(self._cache_key(champion_id, role))
        if entry is None:
            return False, None
        return True, None if entry is _NO_BENCHMARK else entry

    def _remember(
        self, champion_id: int, role: Role, record: Optional[BenchmarkRecord]
    ) -> None:
        self.cache.set(
            self._cache_key(champion_id, role),
            record if record is not None else _NO_BENCHMARK,
            ttl=self.ttl,
        )

    @service_error_handler("BenchmarkService")
    async def get_benchmark(
        self, champion_id: int, role: Role
    ) -> Optional[BenchmarkRecord]:
        """Preferred benchmark for one champion and role, None when absent."""
        hit, record = self._cached(champion_id, role)
        if hit:
            return record
        record = await self.repository.get_best(champion_id, role)
        self._remember(champion_id, role, record)
        return record

    @service_error_handler("BenchmarkService")
    async def get_batch(
        self, pairs: Iterable[Tuple[int, Role]]
    ) -> Dict[str, BenchmarkRecord]:
        """
        Preferred benchmarks for several (champion, role) pairs.

        :param pairs: (champion id, role) pairs, duplicates allowed
        :returns: Map keyed ``{championId}-{role}``; pairs without data are absent
        """
        found: Dict[str, BenchmarkRecord] = {}
        missing: List[Tuple[int, Role]] = []
        unique_pairs = list(dict.fromkeys(pairs))
        for champion_id, role in unique_pairs:
            hit, record = self._cached(champion_id, role)
            if not hit:
                missing.append((champion_id, role))
            elif record is not None:
                found[benchmark_key(champion_id, role)] = record

        if missing:
            champion_ids = sorted({champion_id for champion_id, _ in missing})
            stored = prefer_high_elo(
                await self.repository.get_for_champions(champion_ids)
            )
            for champion_id, role in missing:
                key = benchmark_key(champion_id, role)
                record = stored.get(key)
                self._remember(champion_id, role, record)
                if record is not None:
                    found[key] = record

        logger.debug(
            "benchmarks_resolved",
            requested=len(unique_pairs),
            fetched=len(missing),
            found=len(found),
        )
        return found

    @service_error_handler("BenchmarkService")
    async def get_map(self, champion_ids: List[int]) -> Dict[str, BenchmarkRecord]:
        """Every stored role of the given champions, keyed ``{championId}-{role}``."""
        if not champion_ids:
            return {}
        return prefer_high_elo(await self.repository.get_for_champions(champion_ids))

    @service_error_handler("BenchmarkService")
    async def get_for_champion(
        self, champion_id: int, role: Optional[Role] = None
    ) -> List[BenchmarkRecord]:
        return await self.repository.get_for_champion(champion_id, role)

    @service_error_handler("BenchmarkService")
    async def get_by_name(self, champion_name: str) -> List[BenchmarkRecord]:
        return await self.repository.get_by_name(champion_name)

    @service_error_handler("BenchmarkService")
    async def list_all(self) -> List[BenchmarkRecord]:
        return await self.repository.list_all()
