"""Shared enums for race rating scopes."""

from __future__ import annotations

from enum import Enum


class Scope(str, Enum):
    """Which rating a delta applies to."""

    ALL_TIME = "all_time"
    TOURNAMENT = "tournament"


__all__ = ["Scope"]
