"""Shared read queries for race history, leaderboards and tournaments."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.common import RaceHistoryEntry, RaceParticipant
from domain.errors import UnknownEntityReference
from models import Match, Player, PlayerRaceScore, PlayerTournamentScore, Tournament


@dataclass(frozen=True)
class LeaderboardRow:
    player_id: int
    player_name: str
    elo_rating: int


def fetch_race_history(session: Session) -> list[RaceHistoryEntry]:
    """Every race with recorded positions, in replay order.

    Ordered by match time, then round number; match id breaks ties between
    matches that share a start time.
    """
    statement = (
        select(
            PlayerRaceScore.match_id,
            PlayerRaceScore.round_number,
            PlayerRaceScore.player_id,
            PlayerRaceScore.position,
            Match.tournament_id,
            Match.time.label("match_time"),
        )
        .join(Match, Match.id == PlayerRaceScore.match_id)
        .where(PlayerRaceScore.position.is_not(None))
        .order_by(
            Match.time,
            Match.id,
            PlayerRaceScore.round_number,
            PlayerRaceScore.position,
        )
    )
    rows = session.execute(statement).all()

    history: list[RaceHistoryEntry] = []
    for (match_id, round_number), race_rows in groupby(
        rows, key=lambda row: (row.match_id, row.round_number)
    ):
        race_rows = list(race_rows)
        first = race_rows[0]
        history.append(
            RaceHistoryEntry(
                match_id=int(match_id),
                round_number=int(round_number),
                tournament_id=int(first.tournament_id),
                match_time=first.match_time,
                participants=tuple(
                    RaceParticipant(player_id=int(row.player_id), position=int(row.position))
                    for row in race_rows
                ),
            )
        )
    return history


def fetch_match_player_pairs(session: Session) -> list[tuple[int, int]]:
    """Every (match_id, player_id) with at least one race row."""
    statement = (
        select(PlayerRaceScore.match_id, PlayerRaceScore.player_id)
        .distinct()
        .order_by(PlayerRaceScore.match_id, PlayerRaceScore.player_id)
    )
    return [(int(match_id), int(player_id)) for match_id, player_id in session.execute(statement)]


def fetch_all_time_leaderboard(session: Session, *, top_n: int) -> list[LeaderboardRow]:
    statement = (
        select(Player.id, Player.name, Player.elo_rating)
        .order_by(Player.elo_rating.desc(), Player.id)
        .limit(top_n)
    )
    return [
        LeaderboardRow(player_id=row.id, player_name=row.name, elo_rating=row.elo_rating)
        for row in session.execute(statement)
    ]


def fetch_tournament_leaderboard(
    session: Session, *, tournament_id: int, top_n: int
) -> list[LeaderboardRow]:
    statement = (
        select(Player.id, Player.name, PlayerTournamentScore.elo_rating)
        .select_from(PlayerTournamentScore)
        .join(Player, Player.id == PlayerTournamentScore.player_id)
        .where(PlayerTournamentScore.tournament_id == tournament_id)
        .order_by(PlayerTournamentScore.elo_rating.desc(), Player.id)
        .limit(top_n)
    )
    return [
        LeaderboardRow(player_id=row.id, player_name=row.name, elo_rating=row.elo_rating)
        for row in session.execute(statement)
    ]


def get_tournament(session: Session, tournament_id: int) -> Tournament:
    tournament = session.get(Tournament, tournament_id)
    if tournament is None:
        raise UnknownEntityReference(f"Tournament not found: tournament_id={tournament_id}")
    return tournament


def fetch_tournament_leader_id(session: Session, tournament_id: int) -> int | None:
    """Player with the highest tournament rating; the lowest player id wins ties."""
    statement = (
        select(PlayerTournamentScore.player_id)
        .where(PlayerTournamentScore.tournament_id == tournament_id)
        .order_by(PlayerTournamentScore.elo_rating.desc(), PlayerTournamentScore.player_id)
        .limit(1)
    )
    return session.scalar(statement)
