"""player_race_scores table model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, ForeignKeyConstraint, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import CreatedAtMixin


class PlayerRaceScore(CreatedAtMixin, Base):
    """Finishing position plus the per-scope rating audit trail for one race.

    The before/change/after columns are NULL until the race has been processed
    (and again between the reset and replay steps of a full recompute).
    """

    __tablename__ = "player_race_scores"
    __table_args__ = (
        ForeignKeyConstraint(
            ["match_id", "round_number"],
            ["rounds.match_id", "rounds.round_number"],
        ),
        CheckConstraint("position >= 1", name="ck_player_race_scores_position"),
        CheckConstraint(
            "all_time_elo_after = all_time_elo_before + all_time_elo_change",
            name="ck_player_race_scores_all_time_audit",
        ),
        CheckConstraint(
            "tournament_elo_after = tournament_elo_before + tournament_elo_change",
            name="ck_player_race_scores_tournament_audit",
        ),
        Index("idx_player_race_scores_player", "player_id", "match_id"),
    )

    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), primary_key=True)
    round_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    all_time_elo_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    all_time_elo_change: Mapped[int | None] = mapped_column(Integer, nullable=True)
    all_time_elo_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tournament_elo_before: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tournament_elo_change: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tournament_elo_after: Mapped[int | None] = mapped_column(Integer, nullable=True)
