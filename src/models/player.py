"""players table model."""

from __future__ import annotations

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import CreatedAtMixin, EloRatingMixin


class Player(EloRatingMixin, CreatedAtMixin, Base):
    """A rated competitor; elo_rating is the all-time rating."""

    __tablename__ = "players"
    __table_args__ = (Index("idx_players_elo_rating", "elo_rating"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
