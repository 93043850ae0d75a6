from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from riftcoach.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChampionBenchmarkORM(Base):
    """Champion averages per role and population tier.

    Counting stats and rates are stored x100 as integers; gold/min,
    damage/min, damage share, kill participation and skillshot counts are
    stored as whole numbers.
    """

    __tablename__ = "champion_benchmarks"
    __table_args__ = (
        UniqueConstraint(
            "champion_id", "role", "tier", name="uq_champion_benchmarks_champ_role_tier"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    champion_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    champion_name: Mapped[str] = mapped_column(String(64), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    tier: Mapped[str] = mapped_column(String(16), nullable=False, default="ALL_RANKS")
    games_analyzed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    avg_kills: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_deaths: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_assists: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_kda: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    win_rate: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_cs_per_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_gold_per_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_damage_per_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_damage_share: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_vision_score_per_min: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )
    avg_wards_placed: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_control_wards_placed: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )
    avg_kill_participation: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )
    avg_solo_kills: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_skillshots_hit: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avg_skillshots_dodged: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<ChampionBenchmarkORM(champion_id={self.champion_id}, "
            f"role='{self.role}', tier='{self.tier}', games={self.games_analyzed})>"
        )
