"""Race Elo against a padded grid of synthetic CPU opponents.

A race is scored as if the grid were always ``field_size`` racers deep. The
player's finishing position becomes a linear actual score (1st = 1.0, last =
0.0) and the expected score is taken against a ladder of CPU opponents whose
strength falls off with grid position. The number of real participants in the
race never changes the model.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from domain.common import RaceParticipant
from domain.errors import InvalidRaceSubmission
from domain.ratings.protocol import Scope


@dataclass(frozen=True)
class RaceEloParameters:
    k_factor: float = 100.0
    scale_factor: float = 400.0
    field_size: int = 24
    first_cpu_position: int = 3
    max_cpu_elo: int = 1400
    min_cpu_elo: int = 600
    cpu_elo_step: int = 100
    teammate_share: float = 0.2


DEFAULT_PARAMETERS = RaceEloParameters()


@dataclass(frozen=True)
class RaceEloEvent:
    player_id: int
    scope: Scope
    position: int
    actual_score: float
    expected_score: float
    pre_elo: int
    elo_delta: int
    post_elo: int


@dataclass(frozen=True)
class RaceOutcome:
    """Both scope events for one participant."""

    player_id: int
    position: int
    all_time: RaceEloEvent
    tournament: RaceEloEvent


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def position_to_score(position: int, field_size: int) -> float:
    """Normalise a finishing position to [0, 1]: first is 1.0, last is 0.0."""
    return (field_size - position) / (field_size - 1)


def cpu_rating(position: int, params: RaceEloParameters = DEFAULT_PARAMETERS) -> int:
    return max(params.min_cpu_elo, params.max_cpu_elo - (position - 1) * params.cpu_elo_step)


def cpu_ladder(field_size: int, params: RaceEloParameters = DEFAULT_PARAMETERS) -> list[int]:
    """Ratings of the synthetic opponents from ``first_cpu_position`` to the back of the grid."""
    return [
        cpu_rating(position, params)
        for position in range(params.first_cpu_position, field_size + 1)
    ]


def calculate_race_expected_score(
    player_rating: float,
    field_size: int,
    params: RaceEloParameters = DEFAULT_PARAMETERS,
) -> float:
    """Expected score against the CPU ladder, normalised by the rest of the grid."""
    total = sum(
        calculate_expected_score(player_rating, opponent, params.scale_factor)
        for opponent in cpu_ladder(field_size, params)
    )
    return total / (field_size - 1)


def _validate_inputs(position: int, field_size: int) -> None:
    if field_size < 2:
        raise ValueError(f"field_size must be >= 2, got {field_size}")
    if position < 1 or position > field_size:
        raise ValueError(f"position must be between 1 and {field_size}, got {position}")


def compute_delta(
    player_rating: int,
    position: int,
    field_size: int | None = None,
    *,
    params: RaceEloParameters = DEFAULT_PARAMETERS,
) -> int:
    """Signed integer rating change for finishing ``position`` with ``player_rating``."""
    size = params.field_size if field_size is None else field_size
    _validate_inputs(position, size)
    actual = position_to_score(position, size)
    expected = calculate_race_expected_score(player_rating, size, params)
    return round_half_away_from_zero(params.k_factor * (actual - expected))


def validate_participants(
    participants: Sequence[RaceParticipant],
    field_size: int,
) -> None:
    """Reject empty results, positions off the grid, and shared positions or players."""
    if not participants:
        raise InvalidRaceSubmission("At least one player result is required")

    positions = [participant.position for participant in participants]
    out_of_range = [position for position in positions if position < 1 or position > field_size]
    if out_of_range:
        raise InvalidRaceSubmission(
            f"Positions must be between 1 and {field_size}, got {sorted(out_of_range)}"
        )
    if len(set(positions)) != len(positions):
        raise InvalidRaceSubmission(f"Duplicate positions are not allowed: {sorted(positions)}")

    player_ids = [participant.player_id for participant in participants]
    if len(set(player_ids)) != len(player_ids):
        raise InvalidRaceSubmission("A player can only finish a race once")


class RaceEloCalculator:
    """Computes both rating scopes for every participant of a race.

    Each participant's deltas depend only on their own pre-race snapshot, so the
    order of ``participants`` never changes any outcome.
    """

    def __init__(self, params: RaceEloParameters = DEFAULT_PARAMETERS) -> None:
        self.params = params

    def _event(self, player_id: int, position: int, scope: Scope, pre_elo: int) -> RaceEloEvent:
        field_size = self.params.field_size
        actual = position_to_score(position, field_size)
        expected = calculate_race_expected_score(pre_elo, field_size, self.params)
        delta = round_half_away_from_zero(self.params.k_factor * (actual - expected))
        return RaceEloEvent(
            player_id=player_id,
            scope=scope,
            position=position,
            actual_score=actual,
            expected_score=expected,
            pre_elo=pre_elo,
            elo_delta=delta,
            post_elo=pre_elo + delta,
        )

    def process_race(
        self,
        participants: Sequence[RaceParticipant],
        all_time_ratings: Mapping[int, int],
        tournament_ratings: Mapping[int, int],
    ) -> list[RaceOutcome]:
        validate_participants(participants, self.params.field_size)

        missing = [
            participant.player_id
            for participant in participants
            if participant.player_id not in all_time_ratings
            or participant.player_id not in tournament_ratings
        ]
        if missing:
            raise KeyError(f"Missing rating snapshots for players {sorted(missing)}")

        return [
            RaceOutcome(
                player_id=participant.player_id,
                position=participant.position,
                all_time=self._event(
                    participant.player_id,
                    participant.position,
                    Scope.ALL_TIME,
                    all_time_ratings[participant.player_id],
                ),
                tournament=self._event(
                    participant.player_id,
                    participant.position,
                    Scope.TOURNAMENT,
                    tournament_ratings[participant.player_id],
                ),
            )
            for participant in participants
        ]
