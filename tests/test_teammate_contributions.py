"""Tests for teammate contribution fan-out."""

from __future__ import annotations

from domain.ratings.race_elo.teammate_calculator import (
    calculate_teammate_contributions,
    contribution_amount,
    summarize_adjustments,
)


def test_contribution_amount_is_a_rounded_fifth() -> None:
    assert contribution_amount(13) == 3
    assert contribution_amount(-87) == -17
    assert contribution_amount(-13) == -3
    assert contribution_amount(0) == 0
    assert contribution_amount(10, share=0.25) == 3


def test_each_participant_feeds_every_other_teammate() -> None:
    contributions = calculate_teammate_contributions(
        match_id=5,
        round_number=2,
        tournament_elo_changes={1: 13, 2: -87},
        team_rosters={10: (1, 2, 3), 20: (4, 5)},
    )

    pairs = [(item.source_player_id, item.beneficiary_player_id) for item in contributions]
    assert pairs == [(1, 2), (1, 3), (2, 1), (2, 3)]
    assert all(item.match_id == 5 and item.round_number == 2 for item in contributions)
    assert [item.contribution_amount for item in contributions] == [3, 3, -17, -17]
    assert [item.source_tournament_elo_change for item in contributions] == [13, 13, -87, -87]


def test_team_of_k_participants_gives_k_minus_one_records_per_beneficiary() -> None:
    roster = (1, 2, 3, 4)
    contributions = calculate_teammate_contributions(
        match_id=1,
        round_number=1,
        tournament_elo_changes={player_id: 5 for player_id in roster},
        team_rosters={1: roster},
    )

    assert len(contributions) == 12
    for beneficiary in roster:
        received = [item for item in contributions if item.beneficiary_player_id == beneficiary]
        assert len(received) == 3


def test_players_without_teammates_contribute_nothing() -> None:
    contributions = calculate_teammate_contributions(
        match_id=1,
        round_number=1,
        tournament_elo_changes={1: 20},
        team_rosters={1: (1,), 2: (2, 3)},
    )

    assert contributions == []


def test_summarize_adjustments_totals_per_beneficiary() -> None:
    contributions = calculate_teammate_contributions(
        match_id=1,
        round_number=1,
        tournament_elo_changes={1: 13, 2: -87, 3: 8},
        team_rosters={1: (1, 2, 3)},
    )

    assert summarize_adjustments(contributions) == {1: -17 + 2, 2: 3 + 2, 3: 3 - 17}
