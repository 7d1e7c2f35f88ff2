"""Persistence helpers used by the race rating components.

Every rating write in the engine goes through these functions. Reads of rating
rows lock them (``SELECT ... FOR UPDATE``) so races sharing a player serialise.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.orm import Session

from domain.common import RaceResult
from domain.errors import UnknownEntityReference
from domain.ratings.race_elo.aggregation import MatchAggregate, RaceDeltaRow
from domain.ratings.race_elo.calculator import round_half_away_from_zero
from domain.ratings.race_elo.teammate_calculator import TeammateContribution
from models import (
    Match,
    Player,
    PlayerMatchScore,
    PlayerRaceScore,
    PlayerTeammateEloContribution,
    PlayerTournamentScore,
    Round,
    RoundPlayer,
    Team,
    TeamMatchScore,
    TeamPlayer,
)
from models.mixins import DEFAULT_ELO


def get_match(session: Session, match_id: int) -> Match:
    match = session.get(Match, match_id)
    if match is None:
        raise UnknownEntityReference(f"Match not found: match_id={match_id}")
    return match


def get_round(session: Session, match_id: int, round_number: int) -> Round:
    round_ = session.get(Round, (match_id, round_number))
    if round_ is None:
        raise UnknownEntityReference(
            f"Round not found: match_id={match_id} round_number={round_number}"
        )
    return round_


def fetch_round_player_ids(session: Session, match_id: int, round_number: int) -> set[int]:
    statement = select(RoundPlayer.player_id).where(
        RoundPlayer.match_id == match_id,
        RoundPlayer.round_number == round_number,
    )
    return set(session.scalars(statement))


def fetch_incomplete_earlier_rounds(
    session: Session, match_id: int, round_number: int
) -> list[int]:
    statement = (
        select(Round.round_number)
        .where(
            Round.match_id == match_id,
            Round.round_number < round_number,
            Round.completed.is_(False),
        )
        .order_by(Round.round_number)
    )
    return list(session.scalars(statement))


def fetch_match_roster_ids(session: Session, match_id: int) -> set[int]:
    """Every player on a team of the match or assigned to one of its rounds."""
    team_players = (
        select(TeamPlayer.player_id)
        .join(Team, Team.id == TeamPlayer.team_id)
        .where(Team.match_id == match_id)
    )
    round_players = select(RoundPlayer.player_id).where(RoundPlayer.match_id == match_id)
    return set(session.scalars(team_players)) | set(session.scalars(round_players))


def _replays_before(match: Match):
    return or_(
        Match.time < match.time,
        and_(Match.time == match.time, Match.id < match.id),
    )


def _replays_after(match: Match):
    return or_(
        Match.time > match.time,
        and_(Match.time == match.time, Match.id > match.id),
    )


def fetch_pending_earlier_match_ids(
    session: Session, match: Match, player_ids: Iterable[int]
) -> list[int]:
    """Earlier matches in replay order with unrecorded rounds involving ``player_ids``."""
    ids = sorted(set(player_ids))
    if not ids:
        return []
    incomplete = select(Round.match_id).where(Round.completed.is_(False))
    via_teams = (
        select(Match.id)
        .join(Team, Team.match_id == Match.id)
        .join(TeamPlayer, TeamPlayer.team_id == Team.id)
        .where(_replays_before(match), Match.id.in_(incomplete), TeamPlayer.player_id.in_(ids))
    )
    via_rounds = (
        select(Match.id)
        .join(RoundPlayer, RoundPlayer.match_id == Match.id)
        .where(_replays_before(match), Match.id.in_(incomplete), RoundPlayer.player_id.in_(ids))
    )
    return sorted(set(session.scalars(via_teams)) | set(session.scalars(via_rounds)))


def fetch_recorded_later_match_ids(
    session: Session, match: Match, player_ids: Iterable[int]
) -> list[int]:
    """Later matches in replay order with recorded rows for ``player_ids``."""
    ids = sorted(set(player_ids))
    if not ids:
        return []
    raced = (
        select(PlayerRaceScore.match_id)
        .join(Match, Match.id == PlayerRaceScore.match_id)
        .where(_replays_after(match), PlayerRaceScore.player_id.in_(ids))
    )
    received = (
        select(PlayerTeammateEloContribution.match_id)
        .join(Match, Match.id == PlayerTeammateEloContribution.match_id)
        .where(
            _replays_after(match),
            PlayerTeammateEloContribution.beneficiary_player_id.in_(ids),
        )
    )
    return sorted(set(session.scalars(raced)) | set(session.scalars(received)))


def lock_players(session: Session, player_ids: Iterable[int]) -> dict[int, Player]:
    """Load and row-lock players, in id order to avoid lock-order deadlocks."""
    ids = sorted(set(player_ids))
    if not ids:
        return {}
    statement = (
        select(Player)
        .where(Player.id.in_(ids))
        .order_by(Player.id)
        .with_for_update()
    )
    players = {player.id: player for player in session.scalars(statement)}
    missing = [player_id for player_id in ids if player_id not in players]
    if missing:
        raise UnknownEntityReference(f"Players not found: {missing}")
    return players


def get_or_create_tournament_scores(
    session: Session,
    player_ids: Iterable[int],
    tournament_id: int,
) -> dict[int, PlayerTournamentScore]:
    """Load and row-lock tournament ratings, creating missing rows at the default rating."""
    ids = sorted(set(player_ids))
    if not ids:
        return {}
    statement = (
        select(PlayerTournamentScore)
        .where(
            PlayerTournamentScore.tournament_id == tournament_id,
            PlayerTournamentScore.player_id.in_(ids),
        )
        .order_by(PlayerTournamentScore.player_id)
        .with_for_update()
    )
    scores = {score.player_id: score for score in session.scalars(statement)}
    created = False
    for player_id in ids:
        if player_id not in scores:
            score = PlayerTournamentScore(
                player_id=player_id,
                tournament_id=tournament_id,
                elo_rating=DEFAULT_ELO,
            )
            session.add(score)
            scores[player_id] = score
            created = True
    if created:
        session.flush()
    return scores


def save_race_results(session: Session, results: Sequence[RaceResult]) -> None:
    """Insert race rows, or overwrite the audit columns of rows that already exist."""
    for result in results:
        row = session.get(
            PlayerRaceScore,
            (result.match_id, result.round_number, result.player_id),
        )
        if row is None:
            row = PlayerRaceScore(
                match_id=result.match_id,
                round_number=result.round_number,
                player_id=result.player_id,
            )
            session.add(row)
        row.position = result.position
        row.all_time_elo_before = result.all_time_elo_before
        row.all_time_elo_change = result.all_time_elo_change
        row.all_time_elo_after = result.all_time_elo_after
        row.tournament_elo_before = result.tournament_elo_before
        row.tournament_elo_change = result.tournament_elo_change
        row.tournament_elo_after = result.tournament_elo_after
    session.flush()


def fetch_team_rosters(session: Session, match_id: int) -> dict[int, tuple[int, ...]]:
    """Team id -> player ids for every team of one match."""
    statement = (
        select(TeamPlayer.team_id, TeamPlayer.player_id)
        .join(Team, Team.id == TeamPlayer.team_id)
        .where(Team.match_id == match_id)
        .order_by(TeamPlayer.team_id, TeamPlayer.player_id)
    )
    rosters: dict[int, list[int]] = {}
    for team_id, player_id in session.execute(statement):
        rosters.setdefault(team_id, []).append(player_id)
    return {team_id: tuple(players) for team_id, players in rosters.items()}


def insert_contributions(session: Session, contributions: Sequence[TeammateContribution]) -> None:
    if not contributions:
        return
    session.add_all(
        PlayerTeammateEloContribution(
            match_id=contribution.match_id,
            round_number=contribution.round_number,
            source_player_id=contribution.source_player_id,
            beneficiary_player_id=contribution.beneficiary_player_id,
            source_tournament_elo_change=contribution.source_tournament_elo_change,
            contribution_amount=contribution.contribution_amount,
        )
        for contribution in contributions
    )
    session.flush()


def fetch_player_race_deltas(session: Session, match_id: int, player_id: int) -> list[RaceDeltaRow]:
    statement = (
        select(
            PlayerRaceScore.round_number,
            PlayerRaceScore.position,
            PlayerRaceScore.all_time_elo_change,
            PlayerRaceScore.tournament_elo_change,
        )
        .where(PlayerRaceScore.match_id == match_id, PlayerRaceScore.player_id == player_id)
        .order_by(PlayerRaceScore.round_number)
    )
    return [
        RaceDeltaRow(
            round_number=row.round_number,
            position=row.position,
            all_time_elo_change=row.all_time_elo_change,
            tournament_elo_change=row.tournament_elo_change,
        )
        for row in session.execute(statement)
    ]


def fetch_contribution_amounts_received(
    session: Session, match_id: int, player_id: int
) -> list[int]:
    statement = (
        select(PlayerTeammateEloContribution.contribution_amount)
        .where(
            PlayerTeammateEloContribution.match_id == match_id,
            PlayerTeammateEloContribution.beneficiary_player_id == player_id,
        )
        .order_by(
            PlayerTeammateEloContribution.round_number,
            PlayerTeammateEloContribution.source_player_id,
        )
    )
    return list(session.scalars(statement))


def fetch_match_race_player_ids(session: Session, match_id: int) -> list[int]:
    """Players with at least one race row in the match."""
    statement = (
        select(PlayerRaceScore.player_id)
        .where(PlayerRaceScore.match_id == match_id)
        .distinct()
        .order_by(PlayerRaceScore.player_id)
    )
    return list(session.scalars(statement))


def save_match_aggregate(session: Session, aggregate: MatchAggregate) -> PlayerMatchScore:
    """Overwrite the stored aggregate with a freshly built projection."""
    row = session.get(PlayerMatchScore, (aggregate.match_id, aggregate.player_id))
    if row is None:
        row = PlayerMatchScore(match_id=aggregate.match_id, player_id=aggregate.player_id)
        session.add(row)
    row.position = aggregate.position
    row.elo_change = aggregate.elo_change
    row.tournament_elo_change = aggregate.tournament_elo_change
    row.tournament_elo_from_races = aggregate.tournament_elo_from_races
    row.tournament_elo_from_contributions = aggregate.tournament_elo_from_contributions
    session.flush()
    return row


def mark_round_completed(session: Session, round_: Round) -> None:
    round_.completed = True
    session.flush()


def count_incomplete_rounds(session: Session, match_id: int) -> int:
    statement = select(func.count()).select_from(Round).where(
        Round.match_id == match_id,
        Round.completed.is_(False),
    )
    return int(session.scalar(statement) or 0)


def count_rounds(session: Session, match_id: int) -> int:
    statement = select(func.count()).select_from(Round).where(Round.match_id == match_id)
    return int(session.scalar(statement) or 0)


def fetch_team_race_positions(session: Session, match_id: int) -> list[tuple[int, int]]:
    """(team_id, position) for every race result of the match, via the round assignments."""
    statement = (
        select(RoundPlayer.team_id, PlayerRaceScore.position)
        .select_from(PlayerRaceScore)
        .join(
            RoundPlayer,
            (RoundPlayer.match_id == PlayerRaceScore.match_id)
            & (RoundPlayer.round_number == PlayerRaceScore.round_number)
            & (RoundPlayer.player_id == PlayerRaceScore.player_id),
        )
        .where(PlayerRaceScore.match_id == match_id)
        .order_by(PlayerRaceScore.round_number, PlayerRaceScore.position)
    )
    return [(int(team_id), int(position)) for team_id, position in session.execute(statement)]


def save_team_scores(session: Session, match_id: int, team_scores: dict[int, float]) -> None:
    for team_id, score in sorted(team_scores.items()):
        row = session.get(TeamMatchScore, (match_id, team_id))
        if row is None:
            row = TeamMatchScore(match_id=match_id, team_id=team_id, score=score)
            session.add(row)
        else:
            row.score = score
        team = session.get(Team, team_id)
        if team is not None:
            team.score = round_half_away_from_zero(score)
    session.flush()


def reset_rating_state(session: Session) -> None:
    """Reset ratings and discard all derived race, contribution and match data."""
    session.execute(update(Player).values(elo_rating=DEFAULT_ELO))
    session.execute(update(PlayerTournamentScore).values(elo_rating=DEFAULT_ELO))
    session.execute(
        update(PlayerRaceScore).values(
            all_time_elo_before=None,
            all_time_elo_change=None,
            all_time_elo_after=None,
            tournament_elo_before=None,
            tournament_elo_change=None,
            tournament_elo_after=None,
        )
    )
    session.execute(delete(PlayerTeammateEloContribution))
    session.execute(delete(PlayerMatchScore))
    session.flush()
