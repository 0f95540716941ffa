"""Batch reprocessing of past scoring dates."""

import logging
import time
from datetime import date
from typing import Callable, Optional

from .config import get_config
from .daily import DailyScorer
from .dates import as_of_for_date, date_range
from .exceptions import AlreadyProcessed, PuckpoolError
from .models import DailyRunResult
from .nhl_client import NHLClient
from .schemas import AppConfig
from .store import ScoreStore

logger = logging.getLogger('puckpool.reprocess')


def reprocess_dates(
    store: ScoreStore,
    client: NHLClient,
    league_id: str,
    start: date,
    end: date,
    *,
    force: bool = True,
    config: Optional[AppConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[dict[str, DailyRunResult], dict[str, str]]:
    """
    Run the daily job for every date from start to end, inclusive.

    With force, any existing processed-date marker is deleted first so the
    date is scored again. Team totals are only ever incremented, so forcing
    a date that was already fully applied adds its points a second time;
    use it to repair dates left in progress or never scored.

    Args:
        store: Document store
        client: NHL stats API client
        league_id: League to reprocess
        start: First scoring date
        end: Last scoring date
        force: Delete existing markers before running
        config: Settings (default: loaded from data/app_config.json)
        sleep: Pause function used between dates and between game fetches

    Returns:
        Tuple of (results by date, error messages by date)
    """
    config = config or get_config()
    scorer = DailyScorer(store, client, config=config, sleep=sleep)
    dates = date_range(start, end)
    results: dict[str, DailyRunResult] = {}
    errors: dict[str, str] = {}

    logger.info(f'[{league_id}] Reprocessing {len(dates)} dates from {start} to {end}')

    for index, target in enumerate(dates):
        if index > 0 and config.reprocess_delay_seconds > 0:
            sleep(config.reprocess_delay_seconds)

        date_str = target.isoformat()
        if force and store.release_processed_date(league_id, date_str):
            logger.info(f'[{league_id}] Deleted processed marker for {date_str}')

        try:
            results[date_str] = scorer.run(league_id, as_of_for_date(target, config.scoring_utc_offset_hours))
        except AlreadyProcessed as e:
            logger.info(f'[{league_id}] Skipping {date_str}: {e}')
        except PuckpoolError as e:
            logger.error(f'[{league_id}] Reprocess of {date_str} failed: {e}')
            errors[date_str] = str(e)

    logger.info(
        f'[{league_id}] Reprocess complete: {len(results)} succeeded, {len(errors)} failed'
    )
    return results, errors
