from .models import GameSummary, PlayerGameStats, DailyRunResult, LiveRunResult
from .schemas import (
    ScoringRules,
    League,
    RosterAssignment,
    TeamScore,
    PlayerDailyScore,
    ProcessedDate,
    LivePlayerStat,
    LiveGameSnapshot,
    AppConfig,
)
from .exceptions import (
    PuckpoolError,
    LeagueNotFound,
    LeagueNotLive,
    MissingScoringRules,
    AlreadyProcessed,
    NHLAPIError,
    GameDataError,
    InvalidLeagueDocument,
)
from .scoring import score_skater, score_goalie, score_player, calculate_points
from .boxscore import parse_games, players_from_boxscore, count_fights
from .nhl_client import NHLClient
from .store import ScoreStore, MemoryStore, JsonFileStore, open_store
from .roster import active_roster_map
from .daily import DailyScorer, run_daily
from .live import LiveScorer, run_live, run_live_all_leagues, live_stats_summary
from .reprocess import reprocess_dates

__all__ = [
    # Models
    'GameSummary',
    'PlayerGameStats',
    'DailyRunResult',
    'LiveRunResult',
    # Stored documents
    'ScoringRules',
    'League',
    'RosterAssignment',
    'TeamScore',
    'PlayerDailyScore',
    'ProcessedDate',
    'LivePlayerStat',
    'LiveGameSnapshot',
    'AppConfig',
    # Errors
    'PuckpoolError',
    'LeagueNotFound',
    'LeagueNotLive',
    'MissingScoringRules',
    'AlreadyProcessed',
    'NHLAPIError',
    'GameDataError',
    'InvalidLeagueDocument',
    # Scoring functions
    'score_skater',
    'score_goalie',
    'score_player',
    'calculate_points',
    # NHL data
    'parse_games',
    'players_from_boxscore',
    'count_fights',
    'NHLClient',
    # Storage
    'ScoreStore',
    'MemoryStore',
    'JsonFileStore',
    'open_store',
    'active_roster_map',
    # Jobs
    'DailyScorer',
    'run_daily',
    'LiveScorer',
    'run_live',
    'run_live_all_leagues',
    'live_stats_summary',
    'reprocess_dates',
]
