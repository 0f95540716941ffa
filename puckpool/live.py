"""Live reconciliation: mirror in-progress box scores for rostered players."""

import logging
import time
from datetime import datetime, timedelta
from typing import Callable, Optional

from .base_scorer import BaseScorer
from .constants import COMPLETED_GAME_STATES, NOT_STARTED_GAME_STATES
from .dates import scoring_date, utc_now_iso
from .exceptions import GameDataError, NHLAPIError, PuckpoolError
from .models import GameSummary, LiveRunResult, PlayerGameStats
from .nhl_client import NHLClient
from .roster import active_roster_map
from .schemas import AppConfig, LiveGameSnapshot, LivePlayerStat
from .store import ScoreStore

logger = logging.getLogger('puckpool.live')


def _stat(value: Optional[int]) -> int:
    return value or 0


def has_fantasy_events(players: list[PlayerGameStats]) -> bool:
    """True if any player in the box score has recorded a scoring-relevant stat."""
    for player in players:
        if any(_stat(v) > 0 for v in (
            player.goals,
            player.assists,
            player.shots,
            player.hits,
            player.blocked_shots,
            player.saves,
        )):
            return True
    return False


def _score_total(snapshot: LiveGameSnapshot) -> int:
    return snapshot.away_score + snapshot.home_score


class LiveScorer(BaseScorer):
    """Polls today's games (and yesterday's finals) into per-player live records."""

    def games_to_poll(self, league_id: str, now: Optional[datetime] = None) -> list[GameSummary]:
        """
        Today's games in any state plus yesterday's completed games.

        Each game carries the scoring date it belongs to. Yesterday's
        scoreboard is a catch-up for late finals and is best-effort.

        Raises:
            NHLAPIError: If today's scoreboard cannot be fetched
        """
        today = scoring_date(now, self.utc_offset)
        yesterday = today - timedelta(days=1)

        games = self.games_for_date(today.isoformat())
        try:
            late_finals = [
                g for g in self.games_for_date(yesterday.isoformat())
                if g.game_state in COMPLETED_GAME_STATES
            ]
        except (NHLAPIError, GameDataError) as e:
            logger.warning(f'[{league_id}] Could not fetch games for {yesterday}: {e}')
            late_finals = []

        return games + late_finals

    def should_skip(self, game: GameSummary, previous: Optional[LiveGameSnapshot]) -> bool:
        """
        Whether a game needs no fetch this poll.

        Games that have not started are skipped. A game whose previous poll
        already saw it final with a nonzero score is skipped, unless that poll
        saw no fantasy events at all and has not yet been re-fetched: early
        finals are sometimes published before the box score is populated.
        """
        if game.game_state in NOT_STARTED_GAME_STATES:
            return True
        if previous is None or previous.game_state not in COMPLETED_GAME_STATES:
            return False
        if _score_total(previous) == 0:
            return False
        return previous.has_fantasy_events or previous.refetched_after_final

    def update_game(
        self,
        league_id: str,
        game: GameSummary,
        previous: Optional[LiveGameSnapshot],
        player_to_team: dict[int, str],
    ) -> int:
        """
        Fetch one game and write its snapshot and player records together.

        Returns:
            Number of player records written

        Raises:
            NHLAPIError: If the box score cannot be fetched
            GameDataError: If the box score is malformed
        """
        players = self.fetch_players(game.game_id)
        fights = self.fetch_fights(league_id, game.game_id)

        away_score, home_score = game.away_score, game.home_score
        if away_score == 0 and home_score == 0 and previous and _score_total(previous) > 0:
            logger.warning(
                f'[{league_id}] Game {game.game_id} reported 0-0 after '
                f'{previous.away_score}-{previous.home_score}, keeping previous score'
            )
            away_score, home_score = previous.away_score, previous.home_score

        refetched = bool(previous and previous.refetched_after_final)
        if previous and previous.game_state in COMPLETED_GAME_STATES and _score_total(previous) > 0:
            logger.info(f'[{league_id}] Re-fetching final game {game.game_id} with no recorded events')
            refetched = True

        records = []
        for player in players:
            team_name = player_to_team.get(player.player_id)
            if team_name is None:
                continue
            goals = _stat(player.goals)
            assists = _stat(player.assists)
            records.append(LivePlayerStat(
                player_id=player.player_id,
                player_name=player.name,
                team_name=team_name,
                nhl_team=player.nhl_team,
                game_id=game.game_id,
                date=game.date,
                game_state=game.game_state,
                away_score=away_score,
                home_score=home_score,
                goals=goals,
                assists=assists,
                points=goals + assists,
                shots=_stat(player.shots),
                hits=_stat(player.hits),
                blocked_shots=_stat(player.blocked_shots),
                wins=_stat(player.wins),
                saves=_stat(player.saves),
                shutouts=_stat(player.shutouts),
                fights=fights.get(player.player_id, 0),
            ))

        snapshot = LiveGameSnapshot(
            game_id=game.game_id,
            date=game.date,
            game_state=game.game_state,
            away_score=away_score,
            home_score=home_score,
            has_fantasy_events=has_fantasy_events(players),
            refetched_after_final=refetched,
            polled_at=utc_now_iso(),
        )
        self.store.write_live_game(league_id, snapshot, records)
        return len(records)

    def run(self, league_id: str, now: Optional[datetime] = None) -> LiveRunResult:
        """
        Poll one league's games once.

        Raises:
            LeagueNotFound: League document does not exist
            NHLAPIError: If today's scoreboard cannot be fetched
        """
        self.load_league(league_id)
        result = LiveRunResult()

        games = self.games_to_poll(league_id, now)
        if not games:
            logger.info(f'[{league_id}] No games to poll')
            return result

        player_to_team = active_roster_map(self.store, league_id)

        fetches = 0
        for game in games:
            previous = self.store.get_live_game(league_id, game.date, game.game_id)
            if self.should_skip(game, previous):
                result.games_skipped += 1
                continue

            self.pace(fetches)
            fetches += 1
            try:
                written = self.update_game(league_id, game, previous, player_to_team)
            except (NHLAPIError, GameDataError) as e:
                logger.error(f'[{league_id}] Error processing game {game.game_id}: {e}')
                result.failed_games.append(game.game_id)
                continue

            result.games_processed += 1
            result.players_updated += written

        logger.info(
            f'[{league_id}] Live update: {result.games_processed} games, '
            f'{result.players_updated} player records, {result.games_skipped} skipped'
        )
        return result


def run_live(
    store: ScoreStore,
    client: NHLClient,
    league_id: str,
    now: Optional[datetime] = None,
    *,
    config: Optional[AppConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> LiveRunResult:
    """
    Run one live poll for a league.

    Records are snapshots: re-running with unchanged upstream data rewrites
    identical records.
    """
    return LiveScorer(store, client, config=config, sleep=sleep).run(league_id, now)


def run_live_all_leagues(
    store: ScoreStore,
    client: NHLClient,
    now: Optional[datetime] = None,
    *,
    config: Optional[AppConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, LiveRunResult]:
    """
    Run one live poll for every league in the store.

    A league that fails, including one whose stored documents do not
    validate, is logged and left out of the results; the remaining leagues
    still run.

    Returns:
        Dict of league_id -> LiveRunResult for leagues that completed
    """
    scorer = LiveScorer(store, client, config=config, sleep=sleep)
    results = {}

    for league_id in store.list_league_ids():
        try:
            results[league_id] = scorer.run(league_id, now)
        except (PuckpoolError, ValueError) as e:
            logger.error(f'[{league_id}] Live update failed: {e}')

    logger.info(
        f'Live update complete: {len(results)} leagues, '
        f'{sum(r.games_processed for r in results.values())} games, '
        f'{sum(r.players_updated for r in results.values())} player records'
    )
    return results


def live_stats_summary(store: ScoreStore, league_id: str, date: str) -> dict[str, dict]:
    """
    Group a date's live records by fantasy team.

    Returns:
        Dict of team_name -> {'players', 'total_goals', 'total_assists', 'total_points'}
    """
    summary: dict[str, dict] = {}
    for stat in store.get_live_stats(league_id, date):
        team = summary.setdefault(stat.team_name, {
            'players': [],
            'total_goals': 0,
            'total_assists': 0,
            'total_points': 0,
        })
        team['players'].append(stat)
        team['total_goals'] += stat.goals
        team['total_assists'] += stat.assists
        team['total_points'] += stat.points
    return summary
