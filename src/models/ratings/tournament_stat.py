"""tournament_stats table model."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import CreatedAtMixin


class TournamentStat(CreatedAtMixin, Base):
    """One headline stat of a completed tournament (best race, most helped, ...)."""

    __tablename__ = "tournament_stats"
    __table_args__ = (
        UniqueConstraint("tournament_id", "stat_type", name="uq_tournament_stats_type"),
        Index("idx_tournament_stats_tournament_id", "tournament_id"),
        Index("idx_tournament_stats_player_id", "player_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    stat_type: Mapped[str] = mapped_column(String(32), nullable=False)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    extra_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=True,
    )
