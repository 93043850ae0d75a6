from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from riftcoach.core.enums import BenchmarkTier, Role
from riftcoach.features.benchmarks.orm_models import ChampionBenchmarkORM
from riftcoach.features.benchmarks.schemas import BenchmarkRecord


class BenchmarkRepositoryInterface(Protocol):
    """Read access to stored champion benchmarks"""

    async def get_for_champion(
        self, champion_id: int, role: Optional[Role] = None
    ) -> List[BenchmarkRecord]:
        """Every tier of one champion, optionally for a single role"""
        ...

    async def get_for_champions(self, champion_ids: List[int]) -> List[BenchmarkRecord]:
        """Every record for a batch of champions"""
        ...

    async def get_by_name(self, champion_name: str) -> List[BenchmarkRecord]:
        """Records matching a champion name, case-insensitive"""
        ...

    async def get_best(self, champion_id: int, role: Role) -> Optional[BenchmarkRecord]:
        """The HIGH_ELO record if stored, else ALL_RANKS, else None"""
        ...

    async def list_all(self) -> List[BenchmarkRecord]:
        """Every record, most sampled games first"""
        ...


def _tier_rank(tier: BenchmarkTier) -> int:
    return 0 if tier == BenchmarkTier.HIGH_ELO else 1


class SQLAlchemyBenchmarkRepository:
    """SQLAlchemy implementation of the benchmark repository"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _to_records(rows: Iterable[ChampionBenchmarkORM]) -> List[BenchmarkRecord]:
        return [BenchmarkRecord.model_validate(row) for row in rows]

    async def get_for_champion(
        self, champion_id: int, role: Optional[Role] = None
    ) -> List[BenchmarkRecord]:
        stmt = select(ChampionBenchmarkORM).where(
            ChampionBenchmarkORM.champion_id == champion_id
        )
        if role is not None:
            stmt = stmt.where(ChampionBenchmarkORM.role == role.value)
        result = await self.db.execute(stmt)
        return self._to_records(result.scalars().all())

    async def get_for_champions(self, champion_ids: List[int]) -> List[BenchmarkRecord]:
        if not champion_ids:
            return []
        stmt = select(ChampionBenchmarkORM).where(
            ChampionBenchmarkORM.champion_id.in_(champion_ids)
        )
        result = await self.db.execute(stmt)
        return self._to_records(result.scalars().all())

    async def get_by_name(self, champion_name: str) -> List[BenchmarkRecord]:
        stmt = select(ChampionBenchmarkORM).where(
            func.lower(ChampionBenchmarkORM.champion_name) == champion_name.lower()
        )
        result = await self.db.execute(stmt)
        return self._to_records(result.scalars().all())

    async def get_best(self, champion_id: int, role: Role) -> Optional[BenchmarkRecord]:
        tier_order = case(
            (ChampionBenchmarkORM.tier == BenchmarkTier.HIGH_ELO.value, 0), else_=1
        )
        stmt = (
            select(ChampionBenchmarkORM)
            .where(
                ChampionBenchmarkORM.champion_id == champion_id,
                ChampionBenchmarkORM.role == role.value,
            )
            .order_by(tier_order)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        return BenchmarkRecord.model_validate(row) if row is not None else None

    async def list_all(self) -> List[BenchmarkRecord]:
        stmt = select(ChampionBenchmarkORM).order_by(
            ChampionBenchmarkORM.games_analyzed.desc()
        )
        result = await self.db.execute(stmt)
        return self._to_records(result.scalars().all())


class InMemoryBenchmarkRepository:
    """Process-local benchmark repository, used for tests and local runs"""

    def __init__(self, records: Optional[Iterable[BenchmarkRecord]] = None):
        self._records: Dict[Tuple[int, Role, BenchmarkTier], BenchmarkRecord] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: BenchmarkRecord) -> None:
        """Insert or replace the record for its champion, role and tier"""
        self._records[(record.champion_id, record.role, record.tier)] = record

    async def get_for_champion(
        self, champion_id: int, role: Optional[Role] = None
    ) -> List[BenchmarkRecord]:
        return [
            r
            for r in self._records.values()
            if r.champion_id == champion_id and (role is None or r.role == role)
        ]

    async def get_for_champions(self, champion_ids: List[int]) -> List[BenchmarkRecord]:
        wanted = set(champion_ids)
        return [r for r in self._records.values() if r.champion_id in wanted]

    async def get_by_name(self, champion_name: str) -> List[BenchmarkRecord]:
        name = champion_name.lower()
        return [r for r in self._records.values() if r.champion_name.lower() == name]

    async def get_best(self, champion_id: int, role: Role) -> Optional[BenchmarkRecord]:
        candidates = await self.get_for_champion(champion_id, role)
        if not candidates:
            return None
        return min(candidates, key=lambda r: _tier_rank(r.tier))

    async def list_all(self) -> List[BenchmarkRecord]:
        return sorted(
            self._records.values(), key=lambda r: r.games_analyzed, reverse=True
        )
