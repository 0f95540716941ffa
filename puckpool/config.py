"""Application configuration management."""

from functools import lru_cache
from pathlib import Path

from .schemas import AppConfig
from .utils import load_json

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'app_config.json'


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """
    Load application configuration from data/app_config.json.

    Configuration is cached after first load. A missing file yields the
    built-in defaults; a malformed one raises.

    Returns:
        AppConfig object with validated settings

    Raises:
        ValueError: If config file has invalid structure

    Example:
        from puckpool.config import get_config
        config = get_config()
        print(f"Scoring offset: UTC{config.scoring_utc_offset_hours:+d}")
    """
    if not CONFIG_PATH.exists():
        return AppConfig()
    return load_json(CONFIG_PATH, schema=AppConfig)


def get_data_dir() -> Path:
    """Get the JSON store directory."""
    return Path(get_config().data_dir)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
