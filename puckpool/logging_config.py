"""Logging for the scoring jobs: one log file per job run plus the console."""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

LOGGER_NAME = 'puckpool'

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def log_file_path(log_dir: Path, job: str, started_at: Optional[datetime] = None) -> Path:
    """
    Path of the log file for one job run, e.g. logs/daily_20250115T120000Z.log.

    Timestamps are UTC so files sort the same way the scoring dates do.
    """
    started_at = started_at or datetime.now(timezone.utc)
    return log_dir / f'{job}_{started_at.strftime("%Y%m%dT%H%M%SZ")}.log'


def setup_logging(
    job: str,
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure the 'puckpool' logger for one job run.

    Module loggers ('puckpool.daily', 'puckpool.live', ...) propagate here.
    Calling this again replaces the previous handlers.

    Args:
        job: Job name used in the log file name ('daily', 'live', ...)
        log_dir: Directory for the run's log file; None logs to the console only
        level: Logging level for every handler

    Returns:
        The configured 'puckpool' logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path(log_dir, job), encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    return logger
