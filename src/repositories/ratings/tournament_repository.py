"""Reads and writes behind tournament completion stats."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from domain.ratings.race_elo.aggregation import MatchAggregate
from domain.ratings.race_elo.teammate_calculator import TeammateContribution
from domain.ratings.race_elo.tournament_stats import TournamentRaceRow, TournamentStatResult
from models import (
    Match,
    PlayerMatchScore,
    PlayerRaceScore,
    PlayerTeammateEloContribution,
    Tournament,
    TournamentStat,
)


def fetch_tournament_race_rows(session: Session, tournament_id: int) -> list[TournamentRaceRow]:
    statement = (
        select(
            PlayerRaceScore.match_id,
            PlayerRaceScore.round_number,
            PlayerRaceScore.player_id,
            PlayerRaceScore.tournament_elo_change,
            PlayerRaceScore.tournament_elo_after,
        )
        .join(Match, Match.id == PlayerRaceScore.match_id)
        .where(
            Match.tournament_id == tournament_id,
            PlayerRaceScore.tournament_elo_change.is_not(None),
        )
        .order_by(Match.time, Match.id, PlayerRaceScore.round_number, PlayerRaceScore.player_id)
    )
    return [
        TournamentRaceRow(
            match_id=row.match_id,
            round_number=row.round_number,
            player_id=row.player_id,
            tournament_elo_change=row.tournament_elo_change,
            tournament_elo_after=row.tournament_elo_after,
        )
        for row in session.execute(statement)
    ]


def fetch_tournament_contributions(
    session: Session, tournament_id: int
) -> list[TeammateContribution]:
    statement = (
        select(PlayerTeammateEloContribution)
        .join(Match, Match.id == PlayerTeammateEloContribution.match_id)
        .where(Match.tournament_id == tournament_id)
        .order_by(
            PlayerTeammateEloContribution.match_id,
            PlayerTeammateEloContribution.round_number,
            PlayerTeammateEloContribution.source_player_id,
            PlayerTeammateEloContribution.beneficiary_player_id,
        )
    )
    return [
        TeammateContribution(
            match_id=row.match_id,
            round_number=row.round_number,
            source_player_id=row.source_player_id,
            beneficiary_player_id=row.beneficiary_player_id,
            source_tournament_elo_change=row.source_tournament_elo_change,
            contribution_amount=row.contribution_amount,
        )
        for row in session.scalars(statement)
    ]


def fetch_tournament_match_aggregates(
    session: Session, tournament_id: int
) -> list[MatchAggregate]:
    statement = (
        select(PlayerMatchScore)
        .join(Match, Match.id == PlayerMatchScore.match_id)
        .where(Match.tournament_id == tournament_id)
        .order_by(PlayerMatchScore.match_id, PlayerMatchScore.player_id)
    )
    return [
        MatchAggregate(
            match_id=row.match_id,
            player_id=row.player_id,
            position=row.position,
            elo_change=row.elo_change,
            tournament_elo_change=row.tournament_elo_change,
            tournament_elo_from_races=row.tournament_elo_from_races,
            tournament_elo_from_contributions=row.tournament_elo_from_contributions,
        )
        for row in session.scalars(statement)
    ]


def replace_tournament_stats(
    session: Session, tournament_id: int, stats: Sequence[TournamentStatResult]
) -> None:
    session.execute(delete(TournamentStat).where(TournamentStat.tournament_id == tournament_id))
    session.add_all(
        TournamentStat(
            tournament_id=tournament_id,
            stat_type=stat.stat_type.value,
            player_id=stat.player_id,
            value=stat.value,
            extra_data=stat.extra_data,
        )
        for stat in stats
    )
    session.flush()


def fetch_completed_tournament_ids(session: Session) -> list[int]:
    statement = (
        select(Tournament.id).where(Tournament.winner_id.is_not(None)).order_by(Tournament.id)
    )
    return list(session.scalars(statement))
