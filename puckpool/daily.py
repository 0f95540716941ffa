"""Daily reconciliation: credit fantasy teams for the previous day's completed games."""

import logging
import time
from datetime import datetime
from typing import Callable, Optional

from .base_scorer import BaseScorer
from .constants import COMPLETED_GAME_STATES, DAILY_STAT_FIELDS, LEAGUE_STATUS_LIVE
from .dates import previous_scoring_date, utc_now_iso
from .exceptions import (
    AlreadyProcessed,
    GameDataError,
    LeagueNotLive,
    MissingScoringRules,
    NHLAPIError,
)
from .models import DailyRunResult, GameSummary, PlayerGameStats
from .nhl_client import NHLClient
from .roster import active_roster_map
from .schemas import AppConfig, PlayerDailyScore, ProcessedDate, ScoringRules
from .scoring import calculate_points
from .store import ScoreStore
from .validators import (
    is_valid_points,
    validate_player_points,
    validate_scoring_rules,
    validate_team_total,
)

logger = logging.getLogger('puckpool.daily')


def daily_stats(player: PlayerGameStats) -> dict[str, float]:
    """
    Sparse stat map stored with a player's daily score.

    Stats the box score did not report are left out rather than stored as
    zero. Fights appear only when the player had at least one.
    """
    stats = {}
    for field_name in DAILY_STAT_FIELDS:
        value = getattr(player, field_name)
        if value is not None:
            stats[field_name] = value
    if player.fights > 0:
        stats['fights'] = player.fights
    return stats


class DailyScorer(BaseScorer):
    """Scores completed games once per scoring day and applies team increments."""

    def score_game(
        self,
        league_id: str,
        game: GameSummary,
        rules: ScoringRules,
        player_to_team: dict[int, str],
    ) -> tuple[dict[str, float], dict[str, int], list[PlayerDailyScore]]:
        """
        Score one completed game for a league's rostered players.

        Args:
            league_id: League being scored
            game: Completed game from the scoreboard
            rules: League scoring rules
            player_to_team: Active roster map

        Returns:
            Tuple of (points per fantasy team, contributing players per team,
            nonzero player daily scores)

        Raises:
            NHLAPIError: If the box score cannot be fetched
            GameDataError: If the box score is malformed
        """
        players = self.fetch_players(game.game_id)
        fights = self.fetch_fights(league_id, game.game_id)

        team_points: dict[str, float] = {}
        team_players: dict[str, int] = {}
        scores: list[PlayerDailyScore] = []

        for player in players:
            team_name = player_to_team.get(player.player_id)
            if team_name is None:
                continue

            player.fights = fights.get(player.player_id, 0)
            points = calculate_points(player, rules, player.fights)

            if not is_valid_points(points):
                logger.warning(
                    f'[{league_id}] Discarding invalid points for {player.name} '
                    f'({player.player_id}) in game {game.game_id}: {points!r}'
                )
                continue

            for warning in validate_player_points(player.name, points):
                logger.warning(f'[{league_id}] {warning}')

            team_points[team_name] = team_points.get(team_name, 0.0) + points
            team_players[team_name] = team_players.get(team_name, 0) + 1

            if points != 0:
                scores.append(PlayerDailyScore(
                    player_id=player.player_id,
                    player_name=player.name,
                    team_name=team_name,
                    nhl_team=player.nhl_team,
                    date=game.date,
                    points=points,
                    stats=daily_stats(player),
                ))

        return team_points, team_players, scores

    def collect_scores(
        self, league_id: str, target_date: str, rules: ScoringRules
    ) -> tuple[DailyRunResult, dict[str, int], list[PlayerDailyScore]]:
        """
        Score every completed game on target_date without writing anything.

        A game that fails to fetch or parse is logged, listed in
        failed_games and contributes nothing.

        Raises:
            NHLAPIError: If the scoreboard itself cannot be fetched
        """
        player_to_team = active_roster_map(self.store, league_id)
        games = [
            g for g in self.games_for_date(target_date)
            if g.game_state in COMPLETED_GAME_STATES
        ]
        logger.info(f'[{league_id}] {len(games)} completed games on {target_date}')

        result = DailyRunResult(date=target_date)
        team_players: dict[str, int] = {}
        daily_scores: list[PlayerDailyScore] = []

        for index, game in enumerate(games):
            self.pace(index)
            try:
                game_points, game_players, game_scores = self.score_game(
                    league_id, game, rules, player_to_team
                )
            except (NHLAPIError, GameDataError) as e:
                logger.error(f'[{league_id}] Error processing game {game.game_id}: {e}')
                result.failed_games.append(game.game_id)
                continue

            for team_name, points in game_points.items():
                result.team_points[team_name] = result.team_points.get(team_name, 0.0) + points
            for team_name, count in game_players.items():
                team_players[team_name] = team_players.get(team_name, 0) + count
            daily_scores.extend(game_scores)
            result.games_processed += 1

        return result, team_players, daily_scores

    def run(self, league_id: str, as_of: Optional[datetime] = None) -> DailyRunResult:
        """
        Score the scoring day before `as_of` for one league.

        Raises:
            LeagueNotFound: League document does not exist
            LeagueNotLive: League status is not live
            MissingScoringRules: League has no scoring rules
            AlreadyProcessed: The date's marker already exists
        """
        target_date = previous_scoring_date(as_of, self.utc_offset).isoformat()
        logger.info(f'[{league_id}] Processing games for date: {target_date}')

        league = self.load_league(league_id)
        if league.status != LEAGUE_STATUS_LIVE:
            raise LeagueNotLive(league_id, league.status)
        if league.scoring_rules is None:
            raise MissingScoringRules(league_id)
        rules = league.scoring_rules
        for warning in validate_scoring_rules(rules):
            logger.warning(f'[{league_id}] {warning}')

        marker = ProcessedDate(date=target_date, claimed_at=utc_now_iso())
        if not self.store.claim_processed_date(league_id, marker):
            existing = self.store.get_processed_date(league_id, target_date)
            raise AlreadyProcessed(league_id, target_date, existing.status if existing else None)

        try:
            result, team_players, daily_scores = self.collect_scores(league_id, target_date, rules)
        except Exception:
            logger.error(f'[{league_id}] Run for {target_date} failed before scoring, releasing claim')
            self.store.release_processed_date(league_id, target_date)
            raise

        updated_at = utc_now_iso()
        for team_name, points in result.team_points.items():
            if not is_valid_points(points):
                logger.warning(f'[{league_id}] Skipping team {team_name} with invalid total {points!r}')
                continue
            for warning in validate_team_total(team_name, points, team_players.get(team_name, 0)):
                logger.warning(f'[{league_id}] {warning}')

            self.store.increment_team_score(league_id, team_name, points, updated_at)
            result.teams_updated += 1
            logger.info(f'[{league_id}] {team_name}: +{points:.2f} points')

        self.store.save_player_daily_scores(league_id, daily_scores)
        result.player_performances = len(daily_scores)

        self.store.complete_processed_date(league_id, marker.model_copy(update={
            'status': 'complete',
            'processed_at': utc_now_iso(),
            'games_processed': result.games_processed,
            'teams_updated': result.teams_updated,
            'player_performances': result.player_performances,
        }))

        logger.info(
            f'[{league_id}] Processed {result.games_processed} games, '
            f'{result.teams_updated} teams, {result.player_performances} player performances '
            f'for {target_date}'
        )
        if result.failed_games:
            logger.warning(f'[{league_id}] Failed games: {result.failed_games}')
        return result


def run_daily(
    store: ScoreStore,
    client: NHLClient,
    league_id: str,
    as_of: Optional[datetime] = None,
    *,
    config: Optional[AppConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> DailyRunResult:
    """
    Run the daily reconciliation for one league.

    Scores every completed game of the scoring day before `as_of` (default:
    now) exactly once, adding each fantasy team's points to its running
    total and recording nonzero player performances.

    Args:
        store: Document store
        client: NHL stats API client
        league_id: League to score
        as_of: Moment the run is considered to happen at
        config: Settings (default: loaded from data/app_config.json)
        sleep: Pacing function, replaced in tests

    Returns:
        DailyRunResult with counts and per-team points
    """
    return DailyScorer(store, client, config=config, sleep=sleep).run(league_id, as_of)
