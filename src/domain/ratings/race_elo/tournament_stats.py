"""Tournament-level projection: headline stats over race, contribution and match rows.

Every stat names one player; ties go to the lowest player id. A stat with no
underlying rows is omitted.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from domain.ratings.race_elo.aggregation import MatchAggregate
from domain.ratings.race_elo.teammate_calculator import TeammateContribution


class TournamentStatType(str, Enum):
    BEST_RACE = "best_race"
    WORST_RACE = "worst_race"
    BIGGEST_SWING = "biggest_swing"
    BEST_TEAMMATE = "best_teammate"
    WORST_TEAMMATE = "worst_teammate"
    MOST_HELPED = "most_helped"
    MOST_HURT = "most_hurt"
    BEST_MATCH = "best_match"
    WORST_MATCH = "worst_match"


@dataclass(frozen=True)
class TournamentRaceRow:
    """A processed race row of a tournament match."""

    match_id: int
    round_number: int
    player_id: int
    tournament_elo_change: int
    tournament_elo_after: int


@dataclass(frozen=True)
class TournamentStatResult:
    stat_type: TournamentStatType
    player_id: int
    value: int
    extra_data: dict[str, Any] | None = None


def _highest(candidates: Iterable[tuple[int, int]]) -> tuple[int, int] | None:
    """(player_id, value) with the largest value."""
    return min(candidates, key=lambda item: (-item[1], item[0]), default=None)


def _lowest(candidates: Iterable[tuple[int, int]]) -> tuple[int, int] | None:
    return min(candidates, key=lambda item: (item[1], item[0]), default=None)


def _totals(pairs: Iterable[tuple[int, int]]) -> dict[int, int]:
    totals: dict[int, int] = {}
    for player_id, amount in pairs:
        totals[player_id] = totals.get(player_id, 0) + amount
    return totals


def _swings(races: Sequence[TournamentRaceRow]) -> dict[int, tuple[int, int]]:
    """player_id -> (high, low) tournament rating reached after a race."""
    swings: dict[int, tuple[int, int]] = {}
    for race in races:
        after = race.tournament_elo_after
        high, low = swings.get(race.player_id, (after, after))
        swings[race.player_id] = (max(high, after), min(low, after))
    return swings


def calculate_tournament_stats(
    *,
    races: Sequence[TournamentRaceRow],
    contributions: Sequence[TeammateContribution],
    match_aggregates: Sequence[MatchAggregate],
) -> list[TournamentStatResult]:
    """Headline stats for one tournament from its processed rows."""
    race_deltas = [(race.player_id, race.tournament_elo_change) for race in races]
    swings = _swings(races)
    given = _totals(
        (contribution.source_player_id, contribution.contribution_amount)
        for contribution in contributions
    )
    received = _totals(
        (contribution.beneficiary_player_id, contribution.contribution_amount)
        for contribution in contributions
    )
    match_deltas = [
        (aggregate.player_id, aggregate.tournament_elo_change) for aggregate in match_aggregates
    ]

    picks = [
        (TournamentStatType.BEST_RACE, _highest(race_deltas)),
        (TournamentStatType.WORST_RACE, _lowest(race_deltas)),
        (
            TournamentStatType.BIGGEST_SWING,
            _highest((player_id, high - low) for player_id, (high, low) in swings.items()),
        ),
        (TournamentStatType.BEST_TEAMMATE, _highest(given.items())),
        (TournamentStatType.WORST_TEAMMATE, _lowest(given.items())),
        (TournamentStatType.MOST_HELPED, _highest(received.items())),
        (TournamentStatType.MOST_HURT, _lowest(received.items())),
        (TournamentStatType.BEST_MATCH, _highest(match_deltas)),
        (TournamentStatType.WORST_MATCH, _lowest(match_deltas)),
    ]

    stats: list[TournamentStatResult] = []
    for stat_type, pick in picks:
        if pick is None:
            continue
        player_id, value = pick
        extra_data = None
        if stat_type is TournamentStatType.BIGGEST_SWING:
            high, low = swings[player_id]
            extra_data = {"high_value": high, "low_value": low}
        stats.append(
            TournamentStatResult(
                stat_type=stat_type,
                player_id=player_id,
                value=value,
                extra_data=extra_data,
            )
        )
    return stats
