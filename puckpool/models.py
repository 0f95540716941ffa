"""Data models for the puckpool scorer."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import POSITION_ROLES, ROLE_FORWARD, UNKNOWN_TEAM


@dataclass
class GameSummary:
    """One game from the NHL daily scoreboard."""
    game_id: int
    game_state: str
    date: str  # The scoring date (YYYY-MM-DD) the game belongs to
    away_team: str = UNKNOWN_TEAM
    home_team: str = UNKNOWN_TEAM
    away_score: int = 0
    home_score: int = 0


@dataclass
class PlayerGameStats:
    """A player's box score line for one game. None means the stat was absent."""
    player_id: int
    name: str
    position: str
    nhl_team: str = UNKNOWN_TEAM
    goals: Optional[int] = None
    assists: Optional[int] = None
    shots: Optional[int] = None
    hits: Optional[int] = None
    blocked_shots: Optional[int] = None
    pim: Optional[int] = None
    short_handed_goals: Optional[int] = None
    wins: Optional[int] = None
    saves: Optional[int] = None
    shutouts: Optional[int] = None
    goals_against: Optional[int] = None
    fights: int = 0  # Filled from play-by-play, not the box score

    @property
    def role(self) -> str:
        """Scoring role: forward, defense or goalie."""
        return POSITION_ROLES.get((self.position or '').upper(), ROLE_FORWARD)


@dataclass
class DailyRunResult:
    """Outcome of one daily reconciliation run."""
    date: str
    games_processed: int = 0
    teams_updated: int = 0
    player_performances: int = 0
    team_points: Dict[str, float] = field(default_factory=dict)
    failed_games: List[int] = field(default_factory=list)


@dataclass
class LiveRunResult:
    """Outcome of one live reconciliation poll."""
    games_processed: int = 0
    players_updated: int = 0
    games_skipped: int = 0
    failed_games: List[int] = field(default_factory=list)
