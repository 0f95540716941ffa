"""Tests for the live reconciliation job."""

import json
from unittest.mock import Mock, patch

import pytest

from helpers import (
    AS_OF,
    LEAGUE_ID,
    LEGACY_WINGER,
    MATTHEWS,
    MONTEMBEAULT,
    RESERVE_CENTER,
    RIELLY,
    SCORED_DATE,
    SUZUKI,
    TODAY,
    UNDRAFTED,
    boxscore,
    fight,
    goalie,
    play_by_play,
    scoreboard,
    scoreboard_game,
    skater,
)
from puckpool.exceptions import LeagueNotFound, NHLAPIError
from puckpool.live import (
    LiveScorer,
    has_fantasy_events,
    live_stats_summary,
    run_live,
    run_live_all_leagues,
)
from puckpool.models import LiveRunResult, PlayerGameStats
from puckpool.schemas import League, RosterAssignment
from puckpool.store import JsonFileStore

GAME_1 = 2024020710
GAME_2 = 2024020711
GAME_3 = 2024020712


def live_boxscore():
    return boxscore(
        away=[
            skater(MATTHEWS, 'Auston Matthews', goals=1, assists=1, sog=4, hits=2),
            skater(RIELLY, 'Morgan Rielly', 'D', hits=5, blockedShots=2),
            skater(RESERVE_CENTER, 'Reserve Center', goals=1),
            skater(UNDRAFTED, 'Undrafted Player', goals=1),
        ],
        home=[
            skater(SUZUKI, 'Nick Suzuki', assists=2),
            skater(LEGACY_WINGER, 'Legacy Winger', 'RW', goals=1),
            goalie(MONTEMBEAULT, 'Samuel Montembeault', saveShotsAgainst='20/23'),
        ],
    )


@pytest.fixture
def live_game(nhl):
    nhl.scoreboards[TODAY] = scoreboard(scoreboard_game(GAME_1, 'LIVE', away_score=3, home_score=2))
    nhl.boxscores[GAME_1] = live_boxscore()
    return nhl


def stats_by_player(store, date=TODAY):
    return {s.player_id: s for s in store.get_live_stats(LEAGUE_ID, date)}


class TestLiveRecords:
    """Tests for the per-player live records."""

    def test_records_for_active_roster(self, store, live_game, config):
        result = run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)

        stats = stats_by_player(store)
        assert set(stats) == {MATTHEWS, RIELLY, SUZUKI, MONTEMBEAULT, LEGACY_WINGER}
        assert result.games_processed == 1
        assert result.players_updated == 5

    def test_record_contents(self, store, live_game, config):
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)

        matthews = stats_by_player(store)[MATTHEWS]
        assert (matthews.goals, matthews.assists, matthews.points) == (1, 1, 2)
        assert (matthews.shots, matthews.hits) == (4, 2)
        assert matthews.team_name == 'Ice Hogs'
        assert matthews.game_state == 'LIVE'
        assert (matthews.away_score, matthews.home_score) == (3, 2)
        assert matthews.date == TODAY
        assert stats_by_player(store)[MONTEMBEAULT].saves == 20

    def test_reserve_and_undrafted_excluded(self, store, live_game, config):
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)

        stats = stats_by_player(store)
        assert RESERVE_CENTER not in stats
        assert UNDRAFTED not in stats
        assert LEGACY_WINGER in stats

    def test_fights_recorded(self, store, live_game, config):
        live_game.play_by_plays[GAME_1] = play_by_play(fight(RIELLY))
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)
        assert stats_by_player(store)[RIELLY].fights == 1

    def test_stats_overwritten_not_accumulated(self, store, live_game, config):
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)
        live_game.boxscores[GAME_1] = boxscore(away=[skater(MATTHEWS, 'Auston Matthews', goals=2)])
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)

        matthews = stats_by_player(store)[MATTHEWS]
        assert (matthews.goals, matthews.assists, matthews.points) == (2, 0, 2)


class TestIdempotency:
    """Tests that repeated polls of unchanged data rewrite identical records."""

    def test_memory_store_records_identical(self, store, live_game, config):
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)
        first = [s.model_dump_json() for s in store.get_live_stats(LEAGUE_ID, TODAY)]

        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)
        second = [s.model_dump_json() for s in store.get_live_stats(LEAGUE_ID, TODAY)]

        assert first == second

    def test_json_store_player_records_byte_identical(self, store, live_game, config, tmp_path):
        json_store = JsonFileStore(tmp_path)
        json_store.save_league(store.get_league(LEAGUE_ID))
        json_store.save_roster(LEAGUE_ID, store.get_roster(LEAGUE_ID))
        live_file = tmp_path / 'leagues' / LEAGUE_ID / 'live' / f'{TODAY}.json'

        def player_records():
            with open(live_file) as f:
                return json.dumps(json.load(f)['players'], sort_keys=True)

        run_live(json_store, live_game, LEAGUE_ID, AS_OF, config=config)
        first = player_records()
        run_live(json_store, live_game, LEAGUE_ID, AS_OF, config=config)

        assert player_records() == first


class TestScoreGlitch:
    """Tests for upstream 0-0 scores after a real score was seen."""

    def test_zero_zero_keeps_previous_score(self, store, live_game, config):
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)
        live_game.scoreboards[TODAY] = scoreboard(
            scoreboard_game(GAME_1, 'LIVE', away_score=0, home_score=0)
        )

        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)

        matthews = stats_by_player(store)[MATTHEWS]
        assert (matthews.away_score, matthews.home_score) == (3, 2)
        snapshot = store.get_live_game(LEAGUE_ID, TODAY, GAME_1)
        assert (snapshot.away_score, snapshot.home_score) == (3, 2)

    def test_zero_zero_accepted_without_history(self, store, nhl, config):
        nhl.scoreboards[TODAY] = scoreboard(scoreboard_game(GAME_1, 'LIVE', away_score=0, home_score=0))
        nhl.boxscores[GAME_1] = live_boxscore()

        run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)

        assert stats_by_player(store)[MATTHEWS].away_score == 0


class TestGameSelection:
    """Tests for which games a poll fetches."""

    def test_not_started_games_skipped(self, store, nhl, config):
        nhl.scoreboards[TODAY] = scoreboard(
            scoreboard_game(GAME_1, 'FUT', away_score=0, home_score=0),
            scoreboard_game(GAME_2, 'PRE', away_score=0, home_score=0),
        )

        result = run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)

        assert nhl.boxscore_calls() == []
        assert result.games_skipped == 2
        assert result.games_processed == 0

    def test_yesterdays_finals_included_with_their_date(self, store, nhl, config):
        nhl.scoreboards[SCORED_DATE] = scoreboard(
            scoreboard_game(GAME_2, 'OFF'),
            scoreboard_game(GAME_3, 'LIVE'),
        )
        nhl.boxscores[GAME_2] = boxscore(away=[skater(MATTHEWS, 'Auston Matthews', goals=1)])

        run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)

        assert nhl.boxscore_calls() == [GAME_2]
        assert stats_by_player(store, SCORED_DATE)[MATTHEWS].goals == 1
        assert stats_by_player(store, TODAY) == {}

    def test_yesterday_scoreboard_failure_tolerated(self, store, live_game, config):
        scores_for_date = live_game.scores_for_date

        def flaky_scores(date):
            if date == SCORED_DATE:
                raise NHLAPIError('yesterday unavailable')
            return scores_for_date(date)

        live_game.scores_for_date = flaky_scores
        result = run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)
        assert result.games_processed == 1

    def test_no_games(self, store, nhl, config):
        result = run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)
        assert (result.games_processed, result.players_updated) == (0, 0)

    def test_league_not_found(self, store, nhl, config):
        with pytest.raises(LeagueNotFound):
            run_live(store, nhl, 'missing-league', AS_OF, config=config)


class TestFinalGameSkipping:
    """Tests for skipping games already captured as final."""

    def test_final_with_events_not_refetched(self, store, nhl, config):
        nhl.scoreboards[TODAY] = scoreboard(scoreboard_game(GAME_1, 'OFF', away_score=3, home_score=2))
        nhl.boxscores[GAME_1] = live_boxscore()

        run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)
        result = run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)

        assert nhl.boxscore_calls() == [GAME_1]
        assert result.games_skipped == 1

    def test_final_without_events_refetched_once(self, store, nhl, config):
        """Test an empty final box score is fetched one more time, then left alone."""
        nhl.scoreboards[TODAY] = scoreboard(scoreboard_game(GAME_1, 'OFF', away_score=3, home_score=2))
        nhl.boxscores[GAME_1] = boxscore()

        run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)
        assert store.get_live_game(LEAGUE_ID, TODAY, GAME_1).has_fantasy_events is False

        nhl.boxscores[GAME_1] = live_boxscore()
        run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)
        snapshot = store.get_live_game(LEAGUE_ID, TODAY, GAME_1)
        assert snapshot.refetched_after_final is True
        assert stats_by_player(store)[MATTHEWS].goals == 1

        run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)
        assert nhl.boxscore_calls() == [GAME_1, GAME_1]

    def test_live_games_always_fetched(self, store, live_game, config):
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)
        assert live_game.boxscore_calls() == [GAME_1, GAME_1]


class TestFailureIsolation:
    """Tests for per-game failures."""

    def test_failed_game_does_not_block_others(self, store, nhl, config):
        nhl.scoreboards[TODAY] = scoreboard(scoreboard_game(GAME_1, 'LIVE'), scoreboard_game(GAME_2, 'LIVE'))
        nhl.boxscores[GAME_2] = boxscore(home=[skater(SUZUKI, 'Nick Suzuki', goals=1)])
        nhl.fail_boxscores.add(GAME_1)

        result = run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)

        assert result.failed_games == [GAME_1]
        assert result.games_processed == 1
        assert set(stats_by_player(store)) == {SUZUKI}
        assert store.get_live_game(LEAGUE_ID, TODAY, GAME_1) is None

    def test_non_object_player_entry_does_not_block_others(self, store, nhl, config):
        nhl.scoreboards[TODAY] = scoreboard(scoreboard_game(GAME_1, 'LIVE'), scoreboard_game(GAME_2, 'LIVE'))
        nhl.boxscores[GAME_1] = {'playerByGameStats': {'awayTeam': {'forwards': ['garbage']}}}
        nhl.boxscores[GAME_2] = boxscore(home=[skater(SUZUKI, 'Nick Suzuki', goals=2)])

        result = run_live(store, nhl, LEAGUE_ID, AS_OF, config=config)

        assert result.failed_games == [GAME_1]
        assert result.games_processed == 1
        assert stats_by_player(store)[SUZUKI].goals == 2
        assert store.get_live_game(LEAGUE_ID, TODAY, GAME_1) is None

    def test_malformed_yesterday_scoreboard_tolerated(self, store, live_game, config):
        live_game.scoreboards[SCORED_DATE] = {'games': 'unavailable'}

        result = run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)

        assert result.games_processed == 1

    def test_sleep_between_fetches_only(self, store, nhl, config):
        nhl.scoreboards[TODAY] = scoreboard(
            scoreboard_game(GAME_1, 'LIVE'),
            scoreboard_game(GAME_2, 'FUT'),
            scoreboard_game(GAME_3, 'LIVE'),
        )
        nhl.boxscores[GAME_1] = boxscore()
        nhl.boxscores[GAME_3] = boxscore()
        sleep = Mock()

        run_live(
            store, nhl, LEAGUE_ID, AS_OF,
            config=config.model_copy(update={'request_delay_seconds': 0.5}),
            sleep=sleep,
        )

        sleep.assert_called_once_with(0.5)


class TestAllLeagues:
    """Tests for polling every league."""

    def test_runs_every_league(self, store, live_game, config):
        store.save_league(League(league_id='league-2', status='live'))
        store.save_roster('league-2', [
            RosterAssignment(league_id='league-2', player_id=SUZUKI, drafted_by_team='Habs Fans'),
        ])

        results = run_live_all_leagues(store, live_game, AS_OF, config=config)

        assert set(results) == {LEAGUE_ID, 'league-2'}
        assert results['league-2'].players_updated == 1
        assert [s.team_name for s in store.get_live_stats('league-2', TODAY)] == ['Habs Fans']

    def test_failed_league_isolated(self, store, nhl, config):
        store.save_league(League(league_id='league-2', status='live'))

        with patch.object(
            LiveScorer, 'run', side_effect=[NHLAPIError('down'), LiveRunResult(games_processed=1)]
        ):
            results = run_live_all_leagues(store, nhl, AS_OF, config=config)

        assert list(results) == ['league-2']
        assert results['league-2'].games_processed == 1

    def test_corrupt_league_document_isolated(self, tmp_path, live_game, rules, config):
        """Test a league.json that fails validation does not stop the leagues after it."""
        json_store = JsonFileStore(tmp_path / 'store')
        bad_dir = tmp_path / 'store' / 'leagues' / 'a-bad'
        bad_dir.mkdir(parents=True)
        (bad_dir / 'league.json').write_text(json.dumps(
            {'league_id': 'a-bad', 'status': 'live', 'scoring_rules': {'goal': 1, 'bogus': 2}}
        ))
        json_store.save_league(League(league_id='b-good', status='live', scoring_rules=rules))
        json_store.save_roster('b-good', [
            RosterAssignment(league_id='b-good', player_id=MATTHEWS, drafted_by_team='Ice Hogs'),
        ])

        results = run_live_all_leagues(json_store, live_game, AS_OF, config=config)

        assert list(results) == ['b-good']
        assert [s.player_id for s in json_store.get_live_stats('b-good', TODAY)] == [MATTHEWS]


class TestSummary:
    """Tests for per-team live totals."""

    def test_grouped_by_team(self, store, live_game, config):
        run_live(store, live_game, LEAGUE_ID, AS_OF, config=config)

        summary = live_stats_summary(store, LEAGUE_ID, TODAY)

        assert summary['Ice Hogs']['total_goals'] == 1
        assert summary['Ice Hogs']['total_assists'] == 1
        assert summary['Ice Hogs']['total_points'] == 2
        assert len(summary['Ice Hogs']['players']) == 2
        assert summary['Puck Bunnies']['total_points'] == 3
        assert len(summary['Puck Bunnies']['players']) == 3

    def test_empty_date(self, store):
        assert live_stats_summary(store, LEAGUE_ID, TODAY) == {}


class TestHasFantasyEvents:
    """Tests for detecting a populated box score."""

    def test_empty(self):
        assert not has_fantasy_events([])

    def test_zero_lines(self):
        assert not has_fantasy_events([PlayerGameStats(player_id=1, name='P', position='C', goals=0)])

    def test_any_shot(self):
        assert has_fantasy_events([PlayerGameStats(player_id=1, name='P', position='C', shots=1)])
