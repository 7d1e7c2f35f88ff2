"""Full recompute of every rating from the recorded race history."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from db import acquire_rating_state_lock, run_in_transaction
from domain.errors import RecomputeAborted
from domain.ratings.race_elo.calculator import DEFAULT_PARAMETERS, RaceEloParameters
from domain.recording import (
    AggregationLedger,
    RaceOutcomeProcessor,
    TeammateContributionDistributor,
)
from domain.tournaments import rebuild_tournament_stats
from repositories.ratings import race_repository, tournament_repository
from repositories.ratings.common import fetch_match_player_pairs, fetch_race_history

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecomputeSummary:
    """Outcome of one full recompute."""

    processed_races: int
    processed_results: int
    inserted_contributions: int
    rebuilt_aggregates: int
    rebuilt_tournament_stats: int
    dry_run: bool


def _replay(
    session: Session,
    *,
    params: RaceEloParameters,
    dry_run: bool,
    echo: Callable[[str], None] | None,
) -> RecomputeSummary:
    acquire_rating_state_lock(session, exclusive=True)
    race_repository.reset_rating_state(session)

    history = fetch_race_history(session)
    total_races = len(history)
    processor = RaceOutcomeProcessor(params)
    distributor = TeammateContributionDistributor(params)
    rosters_by_match: dict[int, dict[int, tuple[int, ...]]] = {}

    processed_results = 0
    inserted_contributions = 0
    for index, race in enumerate(history, start=1):
        results = processor.process_race(
            session,
            match_id=race.match_id,
            round_number=race.round_number,
            tournament_id=race.tournament_id,
            participants=race.participants,
        )
        if race.match_id not in rosters_by_match:
            rosters_by_match[race.match_id] = race_repository.fetch_team_rosters(
                session, race.match_id
            )
        contributions = distributor.distribute(
            session,
            match_id=race.match_id,
            round_number=race.round_number,
            tournament_id=race.tournament_id,
            tournament_elo_changes={
                result.player_id: result.tournament_elo_change for result in results
            },
            team_rosters=rosters_by_match[race.match_id],
        )
        processed_results += len(results)
        inserted_contributions += len(contributions)

        if echo is not None and index % 1_000 == 0:
            echo(f"processed_races={index}/{total_races}")

    ledger = AggregationLedger()
    pairs = fetch_match_player_pairs(session)
    for match_id, player_id in pairs:
        ledger.rebuild_match_aggregate(session, match_id=match_id, player_id=player_id)

    completed_tournaments = tournament_repository.fetch_completed_tournament_ids(session)
    for tournament_id in completed_tournaments:
        rebuild_tournament_stats(session, tournament_id)

    return RecomputeSummary(
        processed_races=total_races,
        processed_results=processed_results,
        inserted_contributions=inserted_contributions,
        rebuilt_aggregates=len(pairs),
        rebuilt_tournament_stats=len(completed_tournaments),
        dry_run=dry_run,
    )


def recompute_all_ratings(
    *,
    session_factory: Callable[[], Session],
    params: RaceEloParameters = DEFAULT_PARAMETERS,
    dry_run: bool = False,
    echo: Callable[[str], None] | None = None,
    attempts: int = 3,
) -> RecomputeSummary:
    """Reset every rating and replay the whole race history in one transaction.

    Either every rating, race row, contribution and aggregate is rebuilt, or the
    stored state is left exactly as it was. ``dry_run`` performs the replay and
    rolls it back.
    """
    logger.info("starting recompute dry_run=%s", dry_run)
    try:
        summary = run_in_transaction(
            session_factory,
            lambda session: _replay(session, params=params, dry_run=dry_run, echo=echo),
            attempts=attempts,
            commit=not dry_run,
        )
    except Exception as exc:
        logger.error("recompute aborted error=%s", exc)
        raise RecomputeAborted(f"Recompute aborted, no changes were applied: {exc}") from exc

    prefix = "[dry-run] " if dry_run else ""
    logger.info(
        "%srecompute finished races=%d results=%d contributions=%d aggregates=%d "
        "tournament_stats=%d",
        prefix,
        summary.processed_races,
        summary.processed_results,
        summary.inserted_contributions,
        summary.rebuilt_aggregates,
        summary.rebuilt_tournament_stats,
    )
    if echo is not None:
        echo(
            f"{prefix}completed "
            f"processed_races={summary.processed_races} "
            f"processed_results={summary.processed_results} "
            f"inserted_contributions={summary.inserted_contributions} "
            f"rebuilt_aggregates={summary.rebuilt_aggregates} "
            f"rebuilt_tournament_stats={summary.rebuilt_tournament_stats}"
        )
    return summary


__all__ = ["RecomputeSummary", "recompute_all_ratings"]
