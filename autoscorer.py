#!/usr/bin/env python3
"""
Puckpool Autoscorer CLI

Runs the fantasy hockey scoring jobs against the JSON store.

Usage:
    python autoscorer.py daily                      # yesterday, every live league
    python autoscorer.py daily --league abc123 --date 2025-01-14
    python autoscorer.py live                       # one poll, every league
    python autoscorer.py reprocess --league abc123 --start 2025-01-10 --end 2025-01-14
    python autoscorer.py clear --league abc123
"""

import argparse
import logging
import sys
from pathlib import Path

from puckpool import (
    AlreadyProcessed,
    NHLClient,
    PuckpoolError,
    live_stats_summary,
    open_store,
    reprocess_dates,
    run_daily,
    run_live,
    run_live_all_leagues,
)
from puckpool.config import get_config
from puckpool.constants import LEAGUE_STATUS_LIVE
from puckpool.dates import as_of_for_date, parse_date, scoring_date
from puckpool.logging_config import setup_logging

logger = logging.getLogger('puckpool.cli')


def live_league_ids(store) -> list[str]:
    """League ids to score by default. Leagues that fail to load are kept so the run reports them."""
    league_ids = []
    for league_id in store.list_league_ids():
        try:
            league = store.get_league(league_id)
        except ValueError as e:
            logger.error(f'[{league_id}] Could not load league: {e}')
            league_ids.append(league_id)
            continue
        if league and league.status == LEAGUE_STATUS_LIVE:
            league_ids.append(league_id)
    return league_ids


def cmd_daily(args, store, client, config) -> int:
    as_of = None
    if args.date:
        as_of = as_of_for_date(parse_date(args.date), config.scoring_utc_offset_hours)

    league_ids = [args.league] if args.league else live_league_ids(store)

    status = 0
    for league_id in league_ids:
        try:
            result = run_daily(store, client, league_id, as_of, config=config)
        except AlreadyProcessed as e:
            print(f"⏭️  {e}")
            continue
        except (PuckpoolError, ValueError) as e:
            logger.error(f'[{league_id}] Daily scoring failed: {e}')
            status = 1
            continue

        print(f"\n{league_id} ({result.date}): {result.games_processed} games")
        for team_name, points in sorted(result.team_points.items(), key=lambda x: x[1], reverse=True):
            print(f"  {team_name}: {points:+.2f} pts")
        if result.failed_games:
            print(f"  ⚠️  Failed games: {result.failed_games}")
            status = 1

    return status


def cmd_live(args, store, client, config) -> int:
    if args.league:
        try:
            results = {args.league: run_live(store, client, args.league, config=config)}
        except PuckpoolError as e:
            logger.error(f'[{args.league}] Live update failed: {e}')
            return 1
    else:
        results = run_live_all_leagues(store, client, config=config)

    today = scoring_date(None, config.scoring_utc_offset_hours).isoformat()
    for league_id, result in results.items():
        print(f"\n{league_id}: {result.games_processed} games, {result.players_updated} players")
        summary = live_stats_summary(store, league_id, today)
        for team_name, totals in sorted(summary.items()):
            print(
                f"  {team_name}: {totals['total_goals']}G {totals['total_assists']}A "
                f"{totals['total_points']}P"
            )

    return 1 if any(r.failed_games for r in results.values()) else 0


def cmd_reprocess(args, store, client, config) -> int:
    results, errors = reprocess_dates(
        store,
        client,
        args.league,
        parse_date(args.start),
        parse_date(args.end),
        force=not args.no_force,
        config=config,
    )
    for date_str, result in sorted(results.items()):
        print(f"  ✓ {date_str}: {result.games_processed} games, {result.teams_updated} teams")
    for date_str, message in sorted(errors.items()):
        print(f"  ✗ {date_str}: {message}")
    return 1 if errors else 0


def cmd_clear(args, store, client, config) -> int:
    teams, players = store.clear_scores(args.league)
    print(f"Cleared {teams} team scores and {players} player daily scores for {args.league}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Puckpool Fantasy Hockey Autoscorer")
    parser.add_argument(
        "--data-dir", "-d",
        default=None,
        help="Path to the JSON store (defaults to data_dir in data/app_config.json)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to the console only",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    daily = subparsers.add_parser("daily", help="Score the previous day's completed games")
    daily.add_argument("--league", "-l", help="League id (default: every live league)")
    daily.add_argument("--date", help="Scoring date to process, YYYY-MM-DD (default: yesterday)")
    daily.set_defaults(func=cmd_daily)

    live = subparsers.add_parser("live", help="Poll in-progress games once")
    live.add_argument("--league", "-l", help="League id (default: every league)")
    live.set_defaults(func=cmd_live)

    reprocess = subparsers.add_parser("reprocess", help="Re-run the daily job over a date range")
    reprocess.add_argument("--league", "-l", required=True, help="League id")
    reprocess.add_argument("--start", required=True, help="First date, YYYY-MM-DD")
    reprocess.add_argument("--end", required=True, help="Last date, YYYY-MM-DD")
    reprocess.add_argument(
        "--no-force",
        action="store_true",
        help="Keep existing processed markers (already scored dates are skipped)",
    )
    reprocess.set_defaults(func=cmd_reprocess)

    clear = subparsers.add_parser("clear", help="Delete a league's team and player scores")
    clear.add_argument("--league", "-l", required=True, help="League id")
    clear.set_defaults(func=cmd_clear)

    args = parser.parse_args(argv)

    level = logging.WARNING if args.quiet else logging.INFO

    try:
        config = get_config()
    except ValueError as e:
        setup_logging(args.command, level=level)
        logger.error(f'Invalid configuration: {e}')
        return 1

    setup_logging(
        args.command,
        log_dir=None if args.no_log_file else Path(config.log_dir),
        level=level,
    )

    store = open_store(Path(args.data_dir) if args.data_dir else None)
    client = NHLClient.from_config(config)
    return args.func(args, store, client, config)


if __name__ == "__main__":
    sys.exit(main())
