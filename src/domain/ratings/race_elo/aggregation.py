"""Per-match projection of race and contribution rows."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.errors import InvariantViolation
from domain.ratings.race_elo.calculator import round_half_away_from_zero


@dataclass(frozen=True)
class RaceDeltaRow:
    """The parts of a stored race result the match projection reads."""

    round_number: int
    position: int
    all_time_elo_change: int | None
    tournament_elo_change: int | None


@dataclass(frozen=True)
class MatchAggregate:
    match_id: int
    player_id: int
    position: int
    elo_change: int
    tournament_elo_change: int
    tournament_elo_from_races: int
    tournament_elo_from_contributions: int


def check_tournament_breakdown(aggregate: MatchAggregate) -> None:
    expected_total = (
        aggregate.tournament_elo_from_races + aggregate.tournament_elo_from_contributions
    )
    if aggregate.tournament_elo_change != expected_total:
        raise InvariantViolation(
            f"match_id={aggregate.match_id} player_id={aggregate.player_id} "
            f"tournament_elo_change={aggregate.tournament_elo_change} != "
            f"from_races={aggregate.tournament_elo_from_races} + "
            f"from_contributions={aggregate.tournament_elo_from_contributions}"
        )


def build_match_aggregate(
    *,
    match_id: int,
    player_id: int,
    races: Sequence[RaceDeltaRow],
    contribution_amounts: Sequence[int],
) -> MatchAggregate:
    """Fold a player's races and received contributions in one match.

    Always computed from scratch; the previous aggregate is never read.
    """
    if not races:
        raise ValueError(f"player_id={player_id} has no races in match_id={match_id}")

    unprocessed = [
        race.round_number
        for race in races
        if race.all_time_elo_change is None or race.tournament_elo_change is None
    ]
    if unprocessed:
        raise InvariantViolation(
            f"match_id={match_id} player_id={player_id} has unprocessed races in rounds {unprocessed}"
        )

    elo_change = sum(int(race.all_time_elo_change or 0) for race in races)
    from_races = sum(int(race.tournament_elo_change or 0) for race in races)
    from_contributions = sum(contribution_amounts)
    average_position = sum(race.position for race in races) / len(races)

    aggregate = MatchAggregate(
        match_id=match_id,
        player_id=player_id,
        position=round_half_away_from_zero(average_position),
        elo_change=elo_change,
        tournament_elo_change=from_races + from_contributions,
        tournament_elo_from_races=from_races,
        tournament_elo_from_contributions=from_contributions,
    )
    check_tournament_breakdown(aggregate)
    return aggregate
