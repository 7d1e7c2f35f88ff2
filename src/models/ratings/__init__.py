"""Rating ORM models."""

from models.ratings.contribution import PlayerTeammateEloContribution
from models.ratings.match_score import PlayerMatchScore, TeamMatchScore
from models.ratings.race_score import PlayerRaceScore
from models.ratings.tournament_score import PlayerTournamentScore
from models.ratings.tournament_stat import TournamentStat

__all__ = [
    "PlayerMatchScore",
    "PlayerRaceScore",
    "PlayerTeammateEloContribution",
    "PlayerTournamentScore",
    "TeamMatchScore",
    "TournamentStat",
]
