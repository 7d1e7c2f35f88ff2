"""ORM models."""

from models.base import Base
from models.match import Match, Round, RoundPlayer, Team, TeamPlayer
from models.player import Player
from models.ratings import (
    PlayerMatchScore,
    PlayerRaceScore,
    PlayerTeammateEloContribution,
    PlayerTournamentScore,
    TeamMatchScore,
    TournamentStat,
)
from models.tournament import Tournament

__all__ = [
    "Base",
    "Match",
    "Player",
    "PlayerMatchScore",
    "PlayerRaceScore",
    "PlayerTeammateEloContribution",
    "PlayerTournamentScore",
    "Round",
    "RoundPlayer",
    "Team",
    "TeamMatchScore",
    "TeamPlayer",
    "Tournament",
    "TournamentStat",
]
