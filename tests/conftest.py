"""Shared fixtures: an in-memory SQLite store and helpers to seed matches."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory, ensure_schema
from models import Match, Player, Round, RoundPlayer, Team, TeamPlayer, Tournament


@pytest.fixture
def session_factory() -> Iterator[sessionmaker[Session]]:
    engine = create_db_engine("sqlite+pysqlite:///:memory:")
    ensure_schema(engine)
    factory = create_session_factory(engine)
    yield factory
    engine.dispose()


class Seeder:
    """Builds players, tournaments and matches directly through the ORM."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self.base_time = datetime(2024, 1, 1, 20, 0, 0)

    def players(self, count: int) -> list[int]:
        with self.session_factory() as session:
            start = session.scalar(select(func.count()).select_from(Player)) or 0
            players = [Player(name=f"player_{start + index + 1}") for index in range(count)]
            session.add_all(players)
            session.commit()
            return [player.id for player in players]

    def tournament(self, name: str = "Cup") -> int:
        with self.session_factory() as session:
            tournament = Tournament(name=name)
            session.add(tournament)
            session.commit()
            return tournament.id

    def match(
        self,
        *,
        tournament_id: int,
        teams: Sequence[Sequence[int]],
        rounds: int = 1,
        offset_minutes: int = 0,
        assign_round_players: bool = True,
    ) -> tuple[int, list[int]]:
        """Create a match with its rounds and teams; returns (match_id, team_ids)."""
        with self.session_factory() as session:
            match = Match(
                tournament_id=tournament_id,
                time=self.base_time + timedelta(minutes=offset_minutes),
                rounds=rounds,
                completed=False,
            )
            session.add(match)
            session.flush()
            session.add_all(
                Round(match_id=match.id, round_number=number, completed=False)
                for number in range(1, rounds + 1)
            )
            team_ids: list[int] = []
            for team_num, roster in enumerate(teams, start=1):
                team = Team(match_id=match.id, team_num=team_num)
                session.add(team)
                session.flush()
                team_ids.append(team.id)
                session.add_all(TeamPlayer(team_id=team.id, player_id=player_id) for player_id in roster)
            session.flush()
            if assign_round_players:
                for number in range(1, rounds + 1):
                    for team_id, roster in zip(team_ids, teams):
                        session.add_all(
                            RoundPlayer(
                                match_id=match.id,
                                round_number=number,
                                player_id=player_id,
                                team_id=team_id,
                            )
                            for player_id in roster
                        )
            session.commit()
            return match.id, team_ids


@pytest.fixture
def seed(session_factory: sessionmaker[Session]) -> Seeder:
    return Seeder(session_factory)
