"""Tests for team points scoring."""

from __future__ import annotations

import pytest

from domain.ratings.scoring import calculate_team_scores, position_to_points


def test_points_table() -> None:
    assert [position_to_points(position) for position in range(1, 14)] == [
        15, 12, 10, 9, 8, 7, 6, 5, 4, 3, 2, 1, 0,
    ]
    assert position_to_points(24) == 0


def test_team_score_is_average_points_per_round() -> None:
    scores = calculate_team_scores([(1, 1), (1, 4), (2, 2), (2, 13), (1, 2), (2, 1)], num_rounds=2)

    assert scores[1] == pytest.approx((15 + 9 + 12) / 2)
    assert scores[2] == pytest.approx((12 + 0 + 15) / 2)


def test_team_scores_require_rounds() -> None:
    with pytest.raises(ValueError):
        calculate_team_scores([(1, 1)], num_rounds=0)
