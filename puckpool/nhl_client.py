"""Thin HTTP client for the NHL stats API (api-web.nhle.com)."""

import logging
from typing import Any, Dict, Optional

import requests

from .exceptions import NHLAPIError

DEFAULT_BASE_URL = 'https://api-web.nhle.com/v1'

logger = logging.getLogger('puckpool.nhl_client')


class NHLClient:
    """A minimal client returning parsed JSON from the NHL stats API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10,
        user_agent: str = 'puckpool/0.1',
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': user_agent})

    @classmethod
    def from_config(cls, config) -> 'NHLClient':
        """Build a client from an AppConfig."""
        return cls(
            base_url=config.nhl_api_base,
            timeout=config.request_timeout_seconds,
            user_agent=config.user_agent,
        )

    def get_json(self, path: str) -> Dict[str, Any]:
        """
        GET base_url + path and return the parsed JSON body.

        Raises:
            NHLAPIError: On connection errors, non-2xx responses or non-JSON bodies
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f'GET {url} failed: {e}')
            raise NHLAPIError(f'GET {url} failed: {e}') from e

        if not resp.ok:
            logger.error(f'GET {url} returned {resp.status_code}')
            raise NHLAPIError(f'GET {url} failed: {resp.status_code} {resp.text[:200]}')

        try:
            return resp.json()
        except ValueError as e:
            raise NHLAPIError(f'GET {url} returned invalid JSON: {e}') from e

    def scores_for_date(self, yyyy_mm_dd: str) -> Dict[str, Any]:
        """Fetch the daily scoreboard (all games and their states) for a date."""
        return self.get_json(f'/score/{yyyy_mm_dd}')

    def boxscore(self, game_id: int) -> Dict[str, Any]:
        """Fetch per-player statistics for a game."""
        return self.get_json(f'/gamecenter/{game_id}/boxscore')

    def play_by_play(self, game_id: int) -> Dict[str, Any]:
        """Fetch the play-by-play event list for a game."""
        return self.get_json(f'/gamecenter/{game_id}/play-by-play')
