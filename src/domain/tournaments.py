"""Tournament completion: winner selection and tournament stats."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from db import acquire_rating_state_lock, run_in_transaction
from domain.errors import TournamentCompletionError
from domain.ratings.race_elo.tournament_stats import (
    TournamentStatResult,
    calculate_tournament_stats,
)
from repositories.ratings import tournament_repository
from repositories.ratings.common import fetch_tournament_leader_id, get_tournament

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TournamentCompletionSummary:
    tournament_id: int
    winner_id: int
    stats: tuple[TournamentStatResult, ...]


def rebuild_tournament_stats(session: Session, tournament_id: int) -> list[TournamentStatResult]:
    """Recompute and store a tournament's stats from its race, contribution and match rows."""
    stats = calculate_tournament_stats(
        races=tournament_repository.fetch_tournament_race_rows(session, tournament_id),
        contributions=tournament_repository.fetch_tournament_contributions(session, tournament_id),
        match_aggregates=tournament_repository.fetch_tournament_match_aggregates(
            session, tournament_id
        ),
    )
    tournament_repository.replace_tournament_stats(session, tournament_id, stats)
    return stats


def _complete(session: Session, tournament_id: int) -> TournamentCompletionSummary:
    acquire_rating_state_lock(session, exclusive=False)
    tournament = get_tournament(session, tournament_id)
    if tournament.winner_id is not None:
        raise TournamentCompletionError(
            f"Tournament already completed: tournament_id={tournament_id}"
        )

    winner_id = fetch_tournament_leader_id(session, tournament_id)
    if winner_id is None:
        raise TournamentCompletionError(
            f"No players in tournament: tournament_id={tournament_id}"
        )
    tournament.winner_id = winner_id
    session.flush()
    stats = rebuild_tournament_stats(session, tournament_id)
    return TournamentCompletionSummary(
        tournament_id=tournament_id,
        winner_id=winner_id,
        stats=tuple(stats),
    )


def complete_tournament(
    session_factory: Callable[[], Session],
    tournament_id: int,
    *,
    attempts: int = 3,
) -> TournamentCompletionSummary:
    """Declare the player with the highest tournament rating the winner and store its stats."""
    summary = run_in_transaction(
        session_factory,
        lambda session: _complete(session, tournament_id),
        attempts=attempts,
    )
    logger.info(
        "completed tournament tournament_id=%d winner_id=%d stats=%d",
        tournament_id,
        summary.winner_id,
        len(summary.stats),
    )
    return summary


__all__ = ["TournamentCompletionSummary", "complete_tournament", "rebuild_tournament_stats"]
