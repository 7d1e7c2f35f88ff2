"""player_tournament_scores table model."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import EloRatingMixin, TimestampMixin


class PlayerTournamentScore(EloRatingMixin, TimestampMixin, Base):
    """A player's rating scoped to one tournament (created lazily at 1200)."""

    __tablename__ = "player_tournament_scores"
    __table_args__ = (
        Index("idx_player_tournament_scores_tournament", "tournament_id", "elo_rating"),
    )

    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), primary_key=True)
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"), primary_key=True)
