"""Team points scoring from race positions."""

from __future__ import annotations

from collections.abc import Iterable

_POINTS_BY_POSITION = {
    1: 15,
    2: 12,
    3: 10,
    4: 9,
    5: 8,
    6: 7,
    7: 6,
    8: 5,
    9: 4,
    10: 3,
    11: 2,
    12: 1,
}


def position_to_points(position: int) -> int:
    """Points for a finishing position; 13th and below score nothing."""
    return _POINTS_BY_POSITION.get(position, 0)


def calculate_team_scores(
    team_positions: Iterable[tuple[int, int]],
    num_rounds: int,
) -> dict[int, float]:
    """Average points per round for each team from (team_id, position) pairs."""
    if num_rounds <= 0:
        raise ValueError("num_rounds must be greater than 0")

    totals: dict[int, int] = {}
    for team_id, position in team_positions:
        totals[team_id] = totals.get(team_id, 0) + position_to_points(position)
    return {team_id: total / num_rounds for team_id, total in totals.items()}
