"""Race rating repositories."""

from repositories.ratings.common import (
    LeaderboardRow,
    fetch_all_time_leaderboard,
    fetch_match_player_pairs,
    fetch_race_history,
    fetch_tournament_leader_id,
    fetch_tournament_leaderboard,
    get_tournament,
)

__all__ = [
    "LeaderboardRow",
    "fetch_all_time_leaderboard",
    "fetch_match_player_pairs",
    "fetch_race_history",
    "fetch_tournament_leader_id",
    "fetch_tournament_leaderboard",
    "get_tournament",
]
