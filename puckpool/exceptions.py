"""Exceptions raised by the scoring jobs and the NHL client."""

from typing import Optional


class PuckpoolError(Exception):
    """Base class for puckpool errors."""


class LeagueNotFound(PuckpoolError):
    def __init__(self, league_id: str):
        super().__init__(f'League {league_id} not found')
        self.league_id = league_id


class LeagueNotLive(PuckpoolError):
    def __init__(self, league_id: str, status: str):
        super().__init__(f'League {league_id} not live (status: {status})')
        self.league_id = league_id
        self.status = status


class MissingScoringRules(PuckpoolError):
    def __init__(self, league_id: str):
        super().__init__(f'League {league_id} missing scoring rules')
        self.league_id = league_id


class AlreadyProcessed(PuckpoolError):
    """The scoring date has already been claimed; nothing was changed."""

    def __init__(self, league_id: str, date: str, status: Optional[str] = None):
        message = f'League {league_id}: date {date} already processed'
        if status and status != 'complete':
            message += f' (marker status: {status})'
        super().__init__(message)
        self.league_id = league_id
        self.date = date
        self.status = status


class NHLAPIError(PuckpoolError):
    """An NHL API request failed or returned something other than JSON."""


class GameDataError(PuckpoolError):
    """An NHL payload is missing the structure scoring needs."""


class InvalidLeagueDocument(PuckpoolError):
    """A stored league document exists but does not validate."""

    def __init__(self, league_id: str, reason: str):
        super().__init__(f'League {league_id} document is invalid: {reason}')
        self.league_id = league_id
