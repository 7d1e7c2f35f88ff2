"""Race result recording: the write path for ratings, audit rows and match aggregates.

The three components below are the only code that mutates rating state. The
incremental entrypoint (``record_round_results``) and the full recompute
(``domain.pipeline``) both drive them, in the same order, inside one
transaction per unit of work.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from db import acquire_rating_state_lock, run_in_transaction
from domain.common import RaceParticipant, RaceResult, RoundResultsSubmission
from domain.errors import InvalidRaceSubmission
from domain.ratings.race_elo.aggregation import MatchAggregate, build_match_aggregate
from domain.ratings.race_elo.calculator import (
    DEFAULT_PARAMETERS,
    RaceEloCalculator,
    RaceEloParameters,
    validate_participants,
)
from domain.ratings.race_elo.teammate_calculator import (
    TeammateContribution,
    calculate_teammate_contributions,
    summarize_adjustments,
)
from domain.ratings.scoring import calculate_team_scores
from models import Match
from repositories.ratings import race_repository

logger = logging.getLogger(__name__)


class RaceOutcomeProcessor:
    """Applies the race Elo model to every participant of one race at both scopes."""

    def __init__(self, params: RaceEloParameters = DEFAULT_PARAMETERS) -> None:
        self.params = params
        self.calculator = RaceEloCalculator(params)

    def process_race(
        self,
        session: Session,
        *,
        match_id: int,
        round_number: int,
        tournament_id: int,
        participants: Sequence[RaceParticipant],
    ) -> list[RaceResult]:
        validate_participants(participants, self.params.field_size)

        player_ids = [participant.player_id for participant in participants]
        players = race_repository.lock_players(session, player_ids)
        tournament_scores = race_repository.get_or_create_tournament_scores(session, player_ids, tournament_id)

        # Snapshots are taken for every participant before any rating is written.
        all_time_snapshot = {player_id: players[player_id].elo_rating for player_id in player_ids}
        tournament_snapshot = {
            player_id: tournament_scores[player_id].elo_rating for player_id in player_ids
        }
        outcomes = self.calculator.process_race(
            participants,
            all_time_snapshot,
            tournament_snapshot,
        )

        results: list[RaceResult] = []
        for outcome in outcomes:
            players[outcome.player_id].elo_rating = outcome.all_time.post_elo
            tournament_scores[outcome.player_id].elo_rating = outcome.tournament.post_elo
            results.append(
                RaceResult(
                    match_id=match_id,
                    round_number=round_number,
                    player_id=outcome.player_id,
                    position=outcome.position,
                    all_time_elo_before=outcome.all_time.pre_elo,
                    all_time_elo_change=outcome.all_time.elo_delta,
                    all_time_elo_after=outcome.all_time.post_elo,
                    tournament_elo_before=outcome.tournament.pre_elo,
                    tournament_elo_change=outcome.tournament.elo_delta,
                    tournament_elo_after=outcome.tournament.post_elo,
                )
            )

        race_repository.save_race_results(session, results)
        logger.debug(
            "processed race match_id=%d round=%d participants=%d",
            match_id,
            round_number,
            len(results),
        )
        return results


class TeammateContributionDistributor:
    """Grants each participant's teammates a share of the participant's tournament delta."""

    def __init__(self, params: RaceEloParameters = DEFAULT_PARAMETERS) -> None:
        self.params = params

    def distribute(
        self,
        session: Session,
        *,
        match_id: int,
        round_number: int,
        tournament_id: int,
        tournament_elo_changes: Mapping[int, int],
        team_rosters: Mapping[int, Sequence[int]],
    ) -> list[TeammateContribution]:
        contributions = calculate_teammate_contributions(
            match_id=match_id,
            round_number=round_number,
            tournament_elo_changes=tournament_elo_changes,
            team_rosters=team_rosters,
            share=self.params.teammate_share,
        )
        if not contributions:
            return []

        adjustments = summarize_adjustments(contributions)
        race_repository.lock_players(session, adjustments)
        scores = race_repository.get_or_create_tournament_scores(session, adjustments, tournament_id)
        for player_id, adjustment in adjustments.items():
            scores[player_id].elo_rating += adjustment

        race_repository.insert_contributions(session, contributions)
        return contributions


class AggregationLedger:
    """Rebuilds per-match summaries from race and contribution rows."""

    def rebuild_match_aggregate(
        self,
        session: Session,
        *,
        match_id: int,
        player_id: int,
    ) -> MatchAggregate:
        aggregate = build_match_aggregate(
            match_id=match_id,
            player_id=player_id,
            races=race_repository.fetch_player_race_deltas(session, match_id, player_id),
            contribution_amounts=race_repository.fetch_contribution_amounts_received(
                session, match_id, player_id
            ),
        )
        race_repository.save_match_aggregate(session, aggregate)
        return aggregate


@dataclass(frozen=True)
class RoundRecordingSummary:
    """Everything changed by recording one round."""

    match_id: int
    round_number: int
    race_results: tuple[RaceResult, ...]
    contributions: tuple[TeammateContribution, ...]
    aggregates: tuple[MatchAggregate, ...]
    all_time_ratings: dict[int, int]
    tournament_ratings: dict[int, int]
    round_completed: bool
    match_completed: bool


def _check_round_roster(
    session: Session,
    submission: RoundResultsSubmission,
) -> None:
    assigned = race_repository.fetch_round_player_ids(
        session, submission.match_id, submission.round_number
    )
    if not assigned:
        return
    submitted = {participant.player_id for participant in submission.results}
    if submitted != assigned:
        raise InvalidRaceSubmission(
            "Results must include all players in this round, no more and no less: "
            f"missing={sorted(assigned - submitted)} unexpected={sorted(submitted - assigned)}"
        )


def _check_replay_order(
    session: Session,
    match: Match,
    submission: RoundResultsSubmission,
) -> None:
    """Only accept a round that a chronological replay would process next for its players."""
    pending_rounds = race_repository.fetch_incomplete_earlier_rounds(
        session, match.id, submission.round_number
    )
    if pending_rounds:
        raise InvalidRaceSubmission(
            f"Rounds {pending_rounds} of match_id={match.id} must be recorded before "
            f"round_number={submission.round_number}"
        )

    player_ids = race_repository.fetch_match_roster_ids(session, match.id)
    player_ids.update(participant.player_id for participant in submission.results)
    earlier = race_repository.fetch_pending_earlier_match_ids(session, match, player_ids)
    if earlier:
        raise InvalidRaceSubmission(
            f"Earlier matches {earlier} sharing players with match_id={match.id} "
            "still have unrecorded rounds"
        )
    later = race_repository.fetch_recorded_later_match_ids(session, match, player_ids)
    if later:
        raise InvalidRaceSubmission(
            f"Later matches {later} sharing players with match_id={match.id} "
            "are already recorded"
        )


def _complete_match_if_finished(session: Session, match_id: int) -> bool:
    if race_repository.count_incomplete_rounds(session, match_id) > 0:
        return False

    team_scores = calculate_team_scores(
        race_repository.fetch_team_race_positions(session, match_id),
        race_repository.count_rounds(session, match_id),
    )
    race_repository.save_team_scores(session, match_id, team_scores)
    match = race_repository.get_match(session, match_id)
    match.completed = True
    session.flush()
    return True


def record_round_results_in_session(
    session: Session,
    submission: RoundResultsSubmission,
    *,
    params: RaceEloParameters = DEFAULT_PARAMETERS,
) -> RoundRecordingSummary:
    """Record one round inside an open transaction; the caller commits or rolls back."""
    validate_participants(submission.results, params.field_size)
    acquire_rating_state_lock(session, exclusive=False)

    match = race_repository.get_match(session, submission.match_id)
    round_ = race_repository.get_round(session, submission.match_id, submission.round_number)
    if round_.completed:
        raise InvalidRaceSubmission(
            f"Results already recorded for match_id={submission.match_id} "
            f"round_number={submission.round_number}"
        )
    _check_round_roster(session, submission)
    _check_replay_order(session, match, submission)

    race_results = RaceOutcomeProcessor(params).process_race(
        session,
        match_id=match.id,
        round_number=submission.round_number,
        tournament_id=match.tournament_id,
        participants=submission.results,
    )
    contributions = TeammateContributionDistributor(params).distribute(
        session,
        match_id=match.id,
        round_number=submission.round_number,
        tournament_id=match.tournament_id,
        tournament_elo_changes={
            result.player_id: result.tournament_elo_change for result in race_results
        },
        team_rosters=race_repository.fetch_team_rosters(session, match.id),
    )

    involved = {result.player_id for result in race_results}
    involved.update(contribution.beneficiary_player_id for contribution in contributions)
    with_races = set(race_repository.fetch_match_race_player_ids(session, match.id))
    ledger = AggregationLedger()
    aggregates = [
        ledger.rebuild_match_aggregate(session, match_id=match.id, player_id=player_id)
        for player_id in sorted(involved & with_races)
    ]

    race_repository.mark_round_completed(session, round_)
    match_completed = _complete_match_if_finished(session, match.id)

    players = race_repository.lock_players(session, involved)
    tournament_scores = race_repository.get_or_create_tournament_scores(
        session, involved, match.tournament_id
    )

    logger.info(
        "recorded round match_id=%d round=%d participants=%d contributions=%d match_completed=%s",
        match.id,
        submission.round_number,
        len(race_results),
        len(contributions),
        match_completed,
    )
    return RoundRecordingSummary(
        match_id=match.id,
        round_number=submission.round_number,
        race_results=tuple(race_results),
        contributions=tuple(contributions),
        aggregates=tuple(aggregates),
        all_time_ratings={
            player_id: player.elo_rating for player_id, player in sorted(players.items())
        },
        tournament_ratings={
            player_id: score.elo_rating for player_id, score in sorted(tournament_scores.items())
        },
        round_completed=round_.completed,
        match_completed=match_completed,
    )


def record_round_results(
    session_factory: Callable[[], Session],
    submission: RoundResultsSubmission,
    *,
    params: RaceEloParameters = DEFAULT_PARAMETERS,
    attempts: int = 3,
) -> RoundRecordingSummary:
    """Record one round's results atomically; on any failure nothing is written."""
    validate_participants(submission.results, params.field_size)
    return run_in_transaction(
        session_factory,
        lambda session: record_round_results_in_session(session, submission, params=params),
        attempts=attempts,
    )


__all__ = [
    "AggregationLedger",
    "RaceOutcomeProcessor",
    "RoundRecordingSummary",
    "TeammateContributionDistributor",
    "record_round_results",
    "record_round_results_in_session",
]
