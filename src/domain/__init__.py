"""Race rating domain modules."""

from domain.common import RaceHistoryEntry, RaceParticipant, RaceResult, RoundResultsSubmission
from domain.errors import (
    InvalidRaceSubmission,
    InvariantViolation,
    RatingEngineError,
    RecomputeAborted,
    TournamentCompletionError,
    UnknownEntityReference,
)

__all__ = [
    "InvalidRaceSubmission",
    "InvariantViolation",
    "RaceHistoryEntry",
    "RaceParticipant",
    "RaceResult",
    "RatingEngineError",
    "RecomputeAborted",
    "RoundResultsSubmission",
    "TournamentCompletionError",
    "UnknownEntityReference",
]
