"""Shared payload types for race rating processing."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RaceParticipant:
    """One player's finishing position in a race."""

    player_id: int
    position: int


@dataclass(frozen=True)
class RoundResultsSubmission:
    """Results submitted for one round (race) of a match."""

    match_id: int
    round_number: int
    results: tuple[RaceParticipant, ...]


@dataclass(frozen=True)
class RaceHistoryEntry:
    """A recorded race as replayed by the full recompute."""

    match_id: int
    round_number: int
    tournament_id: int
    match_time: datetime
    participants: tuple[RaceParticipant, ...]


@dataclass(frozen=True)
class RaceResult:
    """Per-race audit record for one participant at both rating scopes."""

    match_id: int
    round_number: int
    player_id: int
    position: int
    all_time_elo_before: int
    all_time_elo_change: int
    all_time_elo_after: int
    tournament_elo_before: int
    tournament_elo_change: int
    tournament_elo_after: int
