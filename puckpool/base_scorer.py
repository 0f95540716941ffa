"""Base scoring engine with logic shared by the daily and live jobs."""

import logging
import time
from typing import Callable, Optional

from .boxscore import count_fights, parse_games, players_from_boxscore
from .config import get_config
from .exceptions import GameDataError, InvalidLeagueDocument, LeagueNotFound, NHLAPIError
from .models import GameSummary, PlayerGameStats
from .nhl_client import NHLClient
from .schemas import AppConfig, League
from .store import ScoreStore

logger = logging.getLogger('puckpool.scorer')


class BaseScorer:
    """
    Base class for the reconciliation jobs.

    Holds the injected store and NHL client and provides game fetching,
    fight counting and request pacing. Subclasses implement run().
    """

    def __init__(
        self,
        store: ScoreStore,
        client: NHLClient,
        config: Optional[AppConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize scorer.

        Args:
            store: Document store to read leagues/rosters from and write scores to
            client: NHL stats API client
            config: Settings (default: loaded from data/app_config.json)
            sleep: Called with the pacing delay between game fetches
        """
        self.store = store
        self.client = client
        self.config = config or get_config()
        self.sleep = sleep

    @property
    def utc_offset(self) -> int:
        return self.config.scoring_utc_offset_hours

    def load_league(self, league_id: str) -> League:
        try:
            league = self.store.get_league(league_id)
        except ValueError as e:
            raise InvalidLeagueDocument(league_id, str(e)) from e
        if league is None:
            raise LeagueNotFound(league_id)
        return league

    def games_for_date(self, date: str) -> list[GameSummary]:
        """
        All games on the NHL scoreboard for a date, in any state.

        Raises:
            NHLAPIError: If the scoreboard cannot be fetched
            GameDataError: If the scoreboard is malformed
        """
        games = parse_games(self.client.scores_for_date(date), date)
        logger.info(f'NHL Stats: Found {len(games)} games for {date}')
        return games

    def fetch_players(self, game_id: int) -> list[PlayerGameStats]:
        """
        Player lines from a game's box score.

        Raises:
            NHLAPIError: If the box score cannot be fetched
            GameDataError: If the box score is malformed
        """
        boxscore = self.client.boxscore(game_id)
        try:
            return players_from_boxscore(boxscore)
        except (AttributeError, TypeError, ValueError) as e:
            raise GameDataError(f'Could not parse box score for game {game_id}: {e}') from e

    def fetch_fights(self, league_id: str, game_id: int) -> dict[int, int]:
        """Fight counts for a game. Degrades to no fights if play-by-play is unavailable."""
        try:
            play_by_play = self.client.play_by_play(game_id)
        except NHLAPIError as e:
            logger.warning(
                f'[{league_id}] Could not fetch play-by-play for game {game_id}, '
                f'skipping fight scoring: {e}'
            )
            return {}

        fights = count_fights(play_by_play)
        if fights:
            logger.info(f'[{league_id}] Game {game_id}: Found {len(fights)} players with fights')
        return fights

    def pace(self, fetch_index: int) -> None:
        """Pause before every game fetch but the first, to respect the API's rate limits."""
        delay = self.config.request_delay_seconds
        if fetch_index > 0 and delay > 0:
            self.sleep(delay)
