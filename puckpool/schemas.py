"""Pydantic schemas for stored documents and configuration."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import DEFAULT_SCORING_RULES, LEAGUE_STATUSES, ROSTER_SLOTS


class ScoringRules(BaseModel):
    """Point value for each scoring category in a league."""

    goal: float
    assist: float
    short_handed_goal: float
    overtime_goal: float
    fight: float
    blocked_shot: float
    hit: float
    win: float
    shutout: float
    save: float
    goalie_assist: float
    goalie_goal: float
    goalie_fight: float | None = None

    @classmethod
    def defaults(cls) -> 'ScoringRules':
        """Rules a league starts with."""
        return cls(**DEFAULT_SCORING_RULES)

    class Config:
        extra = 'forbid'


class LeagueTeam(BaseModel):
    """Fantasy team entry on a league."""

    team_name: str = Field(..., min_length=1)
    owner_uid: str | None = None
    owner_email: str | None = None

    class Config:
        extra = 'allow'


class League(BaseModel):
    """League document."""

    league_id: str = Field(..., min_length=1)
    league_name: str = ''
    status: str = Field(..., pattern=f'^({"|".join(LEAGUE_STATUSES)})$')
    scoring_rules: ScoringRules | None = None
    teams: list[LeagueTeam] = Field(default_factory=list)

    class Config:
        extra = 'allow'


class RosterAssignment(BaseModel):
    """A drafted NHL player and the fantasy team that owns the player."""

    league_id: str
    player_id: int
    drafted_by_team: str = Field(..., min_length=1)
    roster_slot: Optional[str] = Field(default=None, pattern=f'^({"|".join(ROSTER_SLOTS)})$')
    name: str | None = None
    position: str | None = None

    class Config:
        extra = 'allow'


class TeamScore(BaseModel):
    """Cumulative fantasy points for a team. Only ever incremented."""

    team_name: str
    total_points: float = 0.0
    wins: int = 0
    losses: int = 0
    last_updated: str

    class Config:
        extra = 'forbid'


class PlayerDailyScore(BaseModel):
    """A rostered player's fantasy points for one scoring date."""

    player_id: int
    player_name: str
    team_name: str
    nhl_team: str
    date: str = Field(..., pattern=r'^\d{4}-\d{2}-\d{2}$')
    points: float
    stats: dict[str, float] = Field(default_factory=dict)

    @property
    def key(self) -> str:
        return f'{self.player_id}-{self.date}'

    class Config:
        extra = 'forbid'


class ProcessedDate(BaseModel):
    """Marker that a date's team-score increments have been claimed and applied."""

    date: str = Field(..., pattern=r'^\d{4}-\d{2}-\d{2}$')
    status: str = Field(default='in_progress', pattern=r'^(in_progress|complete)$')
    claimed_at: str
    processed_at: str | None = None
    games_processed: int = 0
    teams_updated: int = 0
    player_performances: int = 0

    class Config:
        extra = 'forbid'


class LivePlayerStat(BaseModel):
    """Current-snapshot stats for a rostered player in one game."""

    player_id: int
    player_name: str
    team_name: str
    nhl_team: str
    game_id: int
    date: str = Field(..., pattern=r'^\d{4}-\d{2}-\d{2}$')
    game_state: str
    away_score: int = 0
    home_score: int = 0
    goals: int = 0
    assists: int = 0
    points: int = 0
    shots: int = 0
    hits: int = 0
    blocked_shots: int = 0
    wins: int = 0
    saves: int = 0
    shutouts: int = 0
    fights: int = 0

    @property
    def key(self) -> str:
        return f'{self.date}_{self.player_id}'

    class Config:
        extra = 'forbid'


class LiveGameSnapshot(BaseModel):
    """What the previous live poll recorded for a game."""

    game_id: int
    date: str = Field(..., pattern=r'^\d{4}-\d{2}-\d{2}$')
    game_state: str
    away_score: int = 0
    home_score: int = 0
    has_fantasy_events: bool = False
    refetched_after_final: bool = False
    polled_at: str

    class Config:
        extra = 'forbid'


class AppConfig(BaseModel):
    """Application configuration settings."""

    nhl_api_base: str = 'https://api-web.nhle.com/v1'
    user_agent: str = 'puckpool/0.1'
    scoring_utc_offset_hours: int = Field(default=-5, ge=-12, le=14)
    request_delay_seconds: float = Field(default=0.5, ge=0)
    request_timeout_seconds: float = Field(default=10, gt=0)
    reprocess_delay_seconds: float = Field(default=2.0, ge=0)
    data_dir: str = 'data/store'
    log_dir: str = 'data/logs'

    @field_validator('nhl_api_base')
    @classmethod
    def validate_api_base(cls, v):
        """Ensure the API base is an http(s) URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError(f'nhl_api_base must be an http(s) URL, got {v}')
        return v.rstrip('/')

    class Config:
        extra = 'forbid'
