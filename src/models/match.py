"""matches, rounds, round_players, teams and team_players table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, ForeignKeyConstraint, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.mixins import CreatedAtMixin


class Match(CreatedAtMixin, Base):
    """One match of a tournament, made of a fixed number of rounds (races)."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("rounds > 0", name="ck_matches_rounds_positive"),
        Index("idx_matches_tournament", "tournament_id"),
        Index("idx_matches_time", "time", "id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    rounds: Mapped[int] = mapped_column(Integer, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Round(Base):
    """One race of a match."""

    __tablename__ = "rounds"
    __table_args__ = (Index("idx_rounds_completed", "match_id", "completed"),)

    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), primary_key=True)
    round_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Team(Base):
    """A team within a single match."""

    __tablename__ = "teams"
    __table_args__ = (Index("idx_teams_match", "match_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), nullable=False)
    team_num: Mapped[int] = mapped_column(Integer, nullable=False)
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)


class TeamPlayer(Base):
    """Team membership."""

    __tablename__ = "team_players"

    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), primary_key=True)


class RoundPlayer(Base):
    """A player assigned to race in one round."""

    __tablename__ = "round_players"
    __table_args__ = (
        ForeignKeyConstraint(
            ["match_id", "round_number"],
            ["rounds.match_id", "rounds.round_number"],
        ),
    )

    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), primary_key=True)
    round_number: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), primary_key=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
