"""player_match_scores and team_match_scores table models."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class PlayerMatchScore(Base):
    """Per-player summary of one match, rebuilt from race and contribution rows."""

    __tablename__ = "player_match_scores"
    __table_args__ = (
        CheckConstraint(
            "tournament_elo_change = tournament_elo_from_races + tournament_elo_from_contributions",
            name="ck_player_match_scores_tournament_elo_breakdown",
        ),
    )

    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    elo_change: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tournament_elo_change: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tournament_elo_from_races: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tournament_elo_from_contributions: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )


class TeamMatchScore(Base):
    """Average points per round scored by a team in a completed match."""

    __tablename__ = "team_match_scores"

    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), primary_key=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), primary_key=True)
    score: Mapped[float] = mapped_column(Float, nullable=False)
