"""Tests for the per-match projection."""

from __future__ import annotations

import pytest

from domain.errors import InvariantViolation
from domain.ratings.race_elo.aggregation import (
    MatchAggregate,
    RaceDeltaRow,
    build_match_aggregate,
    check_tournament_breakdown,
)


def _race(round_number: int, position: int, all_time: int | None, tournament: int | None) -> RaceDeltaRow:
    return RaceDeltaRow(
        round_number=round_number,
        position=position,
        all_time_elo_change=all_time,
        tournament_elo_change=tournament,
    )


def test_aggregate_sums_races_and_contributions() -> None:
    aggregate = build_match_aggregate(
        match_id=3,
        player_id=7,
        races=[_race(1, 1, 13, 13), _race(2, 4, -5, -2)],
        contribution_amounts=[3, -17, 2],
    )

    assert aggregate.elo_change == 8
    assert aggregate.tournament_elo_from_races == 11
    assert aggregate.tournament_elo_from_contributions == -12
    assert aggregate.tournament_elo_change == -1
    assert aggregate.position == 3


def test_aggregate_position_rounds_half_away_from_zero() -> None:
    aggregate = build_match_aggregate(
        match_id=1,
        player_id=1,
        races=[_race(1, 1, 0, 0), _race(2, 2, 0, 0)],
        contribution_amounts=[],
    )

    assert aggregate.position == 2


def test_aggregate_is_rebuilt_from_rows_only() -> None:
    races = [_race(1, 2, 8, 8)]
    first = build_match_aggregate(match_id=1, player_id=1, races=races, contribution_amounts=[1])
    second = build_match_aggregate(match_id=1, player_id=1, races=races, contribution_amounts=[1])

    assert first == second


def test_aggregate_requires_races() -> None:
    with pytest.raises(ValueError):
        build_match_aggregate(match_id=1, player_id=1, races=[], contribution_amounts=[3])


def test_aggregate_rejects_unprocessed_races() -> None:
    with pytest.raises(InvariantViolation):
        build_match_aggregate(
            match_id=1,
            player_id=1,
            races=[_race(1, 1, 13, 13), _race(2, 3, None, None)],
            contribution_amounts=[],
        )


def test_breakdown_check_rejects_inconsistent_aggregate() -> None:
    aggregate = MatchAggregate(
        match_id=1,
        player_id=1,
        position=1,
        elo_change=13,
        tournament_elo_change=14,
        tournament_elo_from_races=13,
        tournament_elo_from_contributions=0,
    )

    with pytest.raises(InvariantViolation):
        check_tournament_breakdown(aggregate)
