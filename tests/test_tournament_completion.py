"""Tests for tournament completion and leaderboards."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from domain.common import RaceParticipant, RoundResultsSubmission
from domain.errors import TournamentCompletionError, UnknownEntityReference
from domain.pipeline import recompute_all_ratings
from domain.recording import record_round_results
from domain.tournaments import complete_tournament
from models import PlayerTournamentScore, Tournament, TournamentStat
from repositories.ratings import fetch_all_time_leaderboard, fetch_tournament_leaderboard


def _record_race(session_factory, match_id: int, finishes: dict[int, int]) -> None:
    record_round_results(
        session_factory,
        RoundResultsSubmission(
            match_id=match_id,
            round_number=1,
            results=tuple(
                RaceParticipant(player_id=player_id, position=position)
                for player_id, position in finishes.items()
            ),
        ),
    )


def test_winner_is_highest_tournament_rating(session_factory, seed) -> None:
    p1, p2, p3 = seed.players(3)
    tournament_id = seed.tournament()
    match_id, _ = seed.match(tournament_id=tournament_id, teams=[(p1,), (p2,), (p3,)])
    _record_race(session_factory, match_id, {p1: 3, p2: 1, p3: 2})

    assert complete_tournament(session_factory, tournament_id).winner_id == p2
    with session_factory() as session:
        assert session.get(Tournament, tournament_id).winner_id == p2


def test_ties_go_to_the_lowest_player_id(session_factory, seed) -> None:
    p1, p2, p3 = seed.players(3)
    tournament_id = seed.tournament()
    with session_factory() as session:
        session.add_all(
            [
                PlayerTournamentScore(player_id=p3, tournament_id=tournament_id, elo_rating=1250),
                PlayerTournamentScore(player_id=p2, tournament_id=tournament_id, elo_rating=1250),
                PlayerTournamentScore(player_id=p1, tournament_id=tournament_id, elo_rating=1190),
            ]
        )
        session.commit()

    assert complete_tournament(session_factory, tournament_id).winner_id == p2


def test_completing_twice_is_rejected(session_factory, seed) -> None:
    p1, p2 = seed.players(2)
    tournament_id = seed.tournament()
    match_id, _ = seed.match(tournament_id=tournament_id, teams=[(p1,), (p2,)])
    _record_race(session_factory, match_id, {p1: 1, p2: 2})
    complete_tournament(session_factory, tournament_id)

    with pytest.raises(TournamentCompletionError, match="already completed"):
        complete_tournament(session_factory, tournament_id)


def test_tournament_without_ratings_cannot_complete(session_factory, seed) -> None:
    tournament_id = seed.tournament()

    with pytest.raises(TournamentCompletionError, match="No players"):
        complete_tournament(session_factory, tournament_id)
    with pytest.raises(UnknownEntityReference):
        complete_tournament(session_factory, tournament_id + 100)


def test_leaderboards_rank_by_rating(session_factory, seed) -> None:
    p1, p2, p3 = seed.players(3)
    first_tournament = seed.tournament("Spring")
    second_tournament = seed.tournament("Summer")
    first_match, _ = seed.match(tournament_id=first_tournament, teams=[(p1,), (p2,), (p3,)])
    second_match, _ = seed.match(
        tournament_id=second_tournament,
        teams=[(p1,), (p3,)],
        offset_minutes=30,
    )
    _record_race(session_factory, first_match, {p1: 1, p2: 2, p3: 24})
    _record_race(session_factory, second_match, {p1: 24, p3: 1})

    with session_factory() as session:
        all_time = fetch_all_time_leaderboard(session, top_n=2)
        summer = fetch_tournament_leaderboard(session, tournament_id=second_tournament, top_n=10)

    assert [row.player_id for row in all_time] == [p2, p3]
    assert [row.player_id for row in summer] == [p3, p1]
    assert summer[0].elo_rating == 1213
    assert summer[0].player_name == "player_3"


def _stored_stats(session_factory, tournament_id: int) -> dict[str, tuple[int, int, dict | None]]:
    with session_factory() as session:
        rows = session.scalars(
            select(TournamentStat).where(TournamentStat.tournament_id == tournament_id)
        )
        return {row.stat_type: (row.player_id, row.value, row.extra_data) for row in rows}


def test_completion_stores_tournament_stats(session_factory, seed) -> None:
    p1, p2, p3 = seed.players(3)
    tournament_id = seed.tournament()
    match_id, _ = seed.match(tournament_id=tournament_id, teams=[(p1, p2), (p3,)])
    # p1 +13, p2 -87, p3 +8; p1 gives p2 +3 and p2 gives p1 -17.
    _record_race(session_factory, match_id, {p1: 1, p2: 24, p3: 2})

    summary = complete_tournament(session_factory, tournament_id)

    assert summary.winner_id == p3
    assert _stored_stats(session_factory, tournament_id) == {
        "best_race": (p1, 13, None),
        "worst_race": (p2, -87, None),
        "biggest_swing": (p1, 0, {"high_value": 1213, "low_value": 1213}),
        "best_teammate": (p1, 3, None),
        "worst_teammate": (p2, -17, None),
        "most_helped": (p2, 3, None),
        "most_hurt": (p1, -17, None),
        "best_match": (p3, 8, None),
        "worst_match": (p2, -84, None),
    }
    assert [stat.stat_type.value for stat in summary.stats] == [
        "best_race",
        "worst_race",
        "biggest_swing",
        "best_teammate",
        "worst_teammate",
        "most_helped",
        "most_hurt",
        "best_match",
        "worst_match",
    ]


def test_recompute_rebuilds_stats_of_completed_tournaments(session_factory, seed) -> None:
    p1, p2, p3 = seed.players(3)
    finished = seed.tournament("Spring")
    running = seed.tournament("Summer")
    finished_match, _ = seed.match(tournament_id=finished, teams=[(p1, p2), (p3,)])
    running_match, _ = seed.match(tournament_id=running, teams=[(p1,), (p3,)], offset_minutes=30)
    _record_race(session_factory, finished_match, {p1: 1, p2: 24, p3: 2})
    _record_race(session_factory, running_match, {p1: 2, p3: 1})
    complete_tournament(session_factory, finished)
    before = _stored_stats(session_factory, finished)

    summary = recompute_all_ratings(session_factory=session_factory)

    assert summary.rebuilt_tournament_stats == 1
    assert _stored_stats(session_factory, finished) == before
    assert _stored_stats(session_factory, running) == {}
    with session_factory() as session:
        assert session.get(Tournament, finished).winner_id == p3
