"""Exceptions raised by the race rating engine."""

from __future__ import annotations


class RatingEngineError(Exception):
    """Base class for rating engine failures."""


class InvalidRaceSubmission(RatingEngineError, ValueError):
    """Race results were rejected before any rating state was read."""


class UnknownEntityReference(RatingEngineError, LookupError):
    """A referenced match, round, player or tournament does not exist."""


class InvariantViolation(RatingEngineError):
    """Derived data failed an internal consistency check. Indicates a defect."""


class RecomputeAborted(RatingEngineError):
    """The full-history recompute failed and was rolled back."""


class TournamentCompletionError(RatingEngineError):
    """A tournament cannot be completed in its current state."""


__all__ = [
    "InvalidRaceSubmission",
    "InvariantViolation",
    "RatingEngineError",
    "RecomputeAborted",
    "TournamentCompletionError",
    "UnknownEntityReference",
]
