"""Teammate tournament-rating contributions.

Every race participant grants a share of their own tournament delta to each
other member of their team in that match. Contributions are additive bonuses:
the source keeps its full delta.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from domain.ratings.race_elo.calculator import DEFAULT_PARAMETERS, round_half_away_from_zero


@dataclass(frozen=True)
class TeammateContribution:
    match_id: int
    round_number: int
    source_player_id: int
    beneficiary_player_id: int
    source_tournament_elo_change: int
    contribution_amount: int


def contribution_amount(
    tournament_elo_change: int,
    share: float = DEFAULT_PARAMETERS.teammate_share,
) -> int:
    return round_half_away_from_zero(tournament_elo_change * share)


def _teammates_of(player_id: int, team_rosters: Mapping[int, Sequence[int]]) -> list[int]:
    teammates: set[int] = set()
    for roster in team_rosters.values():
        if player_id in roster:
            teammates.update(member for member in roster if member != player_id)
    return sorted(teammates)


def calculate_teammate_contributions(
    *,
    match_id: int,
    round_number: int,
    tournament_elo_changes: Mapping[int, int],
    team_rosters: Mapping[int, Sequence[int]],
    share: float = DEFAULT_PARAMETERS.teammate_share,
) -> list[TeammateContribution]:
    """Directional contributions for one race, ordered by (source, beneficiary).

    ``tournament_elo_changes`` maps each participant to their race tournament
    delta; ``team_rosters`` maps team id to the players on it for the match.
    """
    contributions: list[TeammateContribution] = []
    for source_player_id in sorted(tournament_elo_changes):
        source_change = tournament_elo_changes[source_player_id]
        amount = contribution_amount(source_change, share)
        for beneficiary_player_id in _teammates_of(source_player_id, team_rosters):
            contributions.append(
                TeammateContribution(
                    match_id=match_id,
                    round_number=round_number,
                    source_player_id=source_player_id,
                    beneficiary_player_id=beneficiary_player_id,
                    source_tournament_elo_change=source_change,
                    contribution_amount=amount,
                )
            )
    return contributions


def summarize_adjustments(contributions: Sequence[TeammateContribution]) -> dict[int, int]:
    """Total contribution received per beneficiary."""
    adjustments: dict[int, int] = {}
    for contribution in contributions:
        adjustments[contribution.beneficiary_player_id] = (
            adjustments.get(contribution.beneficiary_player_id, 0)
            + contribution.contribution_amount
        )
    return adjustments
