"""Race Elo rating modules."""

from domain.ratings.race_elo.aggregation import (
    MatchAggregate,
    RaceDeltaRow,
    build_match_aggregate,
    check_tournament_breakdown,
)
from domain.ratings.race_elo.calculator import (
    DEFAULT_PARAMETERS,
    RaceEloCalculator,
    RaceEloEvent,
    RaceEloParameters,
    RaceOutcome,
    calculate_expected_score,
    calculate_race_expected_score,
    compute_delta,
    cpu_ladder,
    cpu_rating,
    position_to_score,
    round_half_away_from_zero,
    validate_participants,
)
from domain.ratings.race_elo.config import RaceEloSystemConfig, load_race_elo_system_configs
from domain.ratings.race_elo.teammate_calculator import (
    TeammateContribution,
    calculate_teammate_contributions,
    contribution_amount,
    summarize_adjustments,
)
from domain.ratings.race_elo.tournament_stats import (
    TournamentRaceRow,
    TournamentStatResult,
    TournamentStatType,
    calculate_tournament_stats,
)

__all__ = [
    "DEFAULT_PARAMETERS",
    "MatchAggregate",
    "RaceDeltaRow",
    "RaceEloCalculator",
    "RaceEloEvent",
    "RaceEloParameters",
    "RaceEloSystemConfig",
    "RaceOutcome",
    "TeammateContribution",
    "TournamentRaceRow",
    "TournamentStatResult",
    "TournamentStatType",
    "build_match_aggregate",
    "calculate_expected_score",
    "calculate_race_expected_score",
    "calculate_teammate_contributions",
    "calculate_tournament_stats",
    "check_tournament_breakdown",
    "compute_delta",
    "contribution_amount",
    "cpu_ladder",
    "cpu_rating",
    "load_race_elo_system_configs",
    "position_to_score",
    "round_half_away_from_zero",
    "summarize_adjustments",
    "validate_participants",
]
