"""player_teammate_elo_contributions table model."""

from __future__ import annotations

from sqlalchemy import ForeignKey, ForeignKeyConstraint, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import CreatedAtMixin


class PlayerTeammateEloContribution(CreatedAtMixin, Base):
    """Tournament rating bonus granted by one race participant to a teammate."""

    __tablename__ = "player_teammate_elo_contributions"
    __table_args__ = (
        ForeignKeyConstraint(
            ["match_id", "round_number"],
            ["rounds.match_id", "rounds.round_number"],
        ),
        Index("idx_teammate_contributions_beneficiary", "beneficiary_player_id", "match_id"),
        Index("idx_teammate_contributions_source", "source_player_id", "match_id"),
    )

    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), primary_key=True)
    round_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    source_player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), primary_key=True)
    beneficiary_player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), primary_key=True)
    source_tournament_elo_change: Mapped[int] = mapped_column(Integer, nullable=False)
    contribution_amount: Mapped[int] = mapped_column(Integer, nullable=False)
