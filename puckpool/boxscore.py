"""Parsing of NHL scoreboard, box score and play-by-play payloads."""

import logging
from typing import Any, Dict, List, Optional

from .constants import (
    PENALTY_FIGHTING,
    PLAY_TYPE_PENALTY,
    POSITION_GROUPS,
    UNKNOWN_TEAM,
)
from .exceptions import GameDataError
from .models import GameSummary, PlayerGameStats

logger = logging.getLogger('puckpool.boxscore')


def _optional_int(value: Optional[object]) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _first_int(entry: dict, *keys: str) -> Optional[int]:
    """Value of the first key present in entry, as an int (None if absent/invalid)."""
    for key in keys:
        if key in entry:
            return _optional_int(entry.get(key))
    return None


def _player_name(entry: dict) -> str:
    name = entry.get('name')
    if isinstance(name, dict):
        name = name.get('default')
    if not name:
        first = entry.get('firstName')
        last = entry.get('lastName')
        if isinstance(first, dict):
            first = first.get('default')
        if isinstance(last, dict):
            last = last.get('default')
        name = f"{first or ''} {last or ''}".strip()
    return name or f"Player {entry.get('playerId')}"


def _as_dict(value: Optional[object]) -> dict:
    return value if isinstance(value, dict) else {}


def _saves_from_fraction(value: Optional[object]) -> Optional[int]:
    """Saves from a 'saves/shots' string such as '28/30'."""
    if not isinstance(value, str) or '/' not in value:
        return None
    return _optional_int(value.split('/', 1)[0].strip())


def parse_games(payload: Dict[str, Any], date: str) -> List[GameSummary]:
    """
    Parse a /score/{date} payload into GameSummary objects.

    Args:
        payload: Scoreboard JSON
        date: Scoring date the games belong to (YYYY-MM-DD)

    Returns:
        List of games; entries without an id are dropped

    Raises:
        GameDataError: If the payload is not a scoreboard
    """
    if not isinstance(payload, dict):
        raise GameDataError(f'Scoreboard payload for {date} is not an object')
    entries = payload.get('games') or []
    if not isinstance(entries, list):
        raise GameDataError(f'Scoreboard games for {date} is not a list')

    games = []
    for game in entries:
        game_id = _optional_int(game.get('id')) if isinstance(game, dict) else None
        if game_id is None:
            logger.warning(f'Skipping scoreboard entry without id on {date}')
            continue
        away = _as_dict(game.get('awayTeam'))
        home = _as_dict(game.get('homeTeam'))
        games.append(
            GameSummary(
                game_id=game_id,
                game_state=str(game.get('gameState') or ''),
                date=date,
                away_team=away.get('abbrev') or UNKNOWN_TEAM,
                home_team=home.get('abbrev') or UNKNOWN_TEAM,
                away_score=_optional_int(away.get('score')) or 0,
                home_score=_optional_int(home.get('score')) or 0,
            )
        )
    return games


def parse_player(entry: Dict[str, Any], nhl_team: str, group: str) -> PlayerGameStats:
    """
    Parse one box score player line.

    Absent stats stay None. Goalie lines get wins, saves and shutouts derived
    from decision / saveShotsAgainst when the feed does not carry them.
    """
    if not isinstance(entry, dict):
        raise GameDataError(f'Box score player entry is not an object: {entry!r}')
    player_id = _optional_int(entry.get('playerId'))
    if player_id is None:
        raise GameDataError(f'Box score player entry without playerId: {entry!r}')

    position = entry.get('position') or ('G' if group == 'goalies' else 'D' if group == 'defense' else 'C')

    stats = PlayerGameStats(
        player_id=player_id,
        name=_player_name(entry),
        position=str(position),
        nhl_team=nhl_team,
        goals=_first_int(entry, 'goals'),
        assists=_first_int(entry, 'assists'),
        shots=_first_int(entry, 'shots', 'sog'),
        hits=_first_int(entry, 'hits'),
        blocked_shots=_first_int(entry, 'blockedShots'),
        pim=_first_int(entry, 'pim'),
        short_handed_goals=_first_int(entry, 'shortHandedGoals', 'shorthandedGoals'),
        wins=_first_int(entry, 'wins'),
        saves=_first_int(entry, 'saves'),
        shutouts=_first_int(entry, 'shutouts'),
        goals_against=_first_int(entry, 'goalsAgainst'),
    )

    if group == 'goalies':
        decision = entry.get('decision')
        if stats.saves is None:
            stats.saves = _saves_from_fraction(entry.get('saveShotsAgainst'))
        if stats.wins is None and decision is not None:
            stats.wins = 1 if decision == 'W' else 0
        if (
            stats.shutouts is None
            and decision == 'W'
            and stats.goals_against == 0
            and (stats.saves or 0) > 0
        ):
            stats.shutouts = 1

    return stats


def players_from_boxscore(boxscore: Dict[str, Any]) -> List[PlayerGameStats]:
    """
    Collect every player line from a box score, away team first.

    Raises:
        GameDataError: If the payload is not a box score or a player line is unusable
    """
    if not isinstance(boxscore, dict):
        raise GameDataError('Box score payload is not an object')

    by_team = boxscore.get('playerByGameStats')
    if not by_team:
        return []
    if not isinstance(by_team, dict):
        raise GameDataError('Box score playerByGameStats is not an object')

    players = []
    for side in ('awayTeam', 'homeTeam'):
        team_stats = by_team.get(side)
        if not team_stats:
            continue
        if not isinstance(team_stats, dict):
            raise GameDataError(f'Box score {side} stats are not an object')
        abbrev = _as_dict(boxscore.get(side)).get('abbrev') or UNKNOWN_TEAM
        for group in POSITION_GROUPS:
            entries = team_stats.get(group) or []
            if not isinstance(entries, list):
                raise GameDataError(f'Box score {side} {group} is not a list')
            for entry in entries:
                players.append(parse_player(entry, abbrev, group))
    return players


def count_fights(play_by_play: Any) -> Dict[int, int]:
    """
    Count fighting majors per player from a play-by-play payload.

    The box score's penalty minutes are not a reliable proxy for fights, so
    this scans penalty plays whose descriptor is 'fighting' and keys them by
    the committing player.

    Never raises: a missing or malformed payload yields an empty dict.
    """
    fight_counts: Dict[int, int] = {}

    try:
        plays = (play_by_play or {}).get('plays') or []
        for play in plays:
            if play.get('typeDescKey') != PLAY_TYPE_PENALTY:
                continue
            details = play.get('details') or {}
            if details.get('descKey') != PENALTY_FIGHTING:
                continue
            player_id = _optional_int(details.get('committedByPlayerId'))
            if player_id is not None:
                fight_counts[player_id] = fight_counts.get(player_id, 0) + 1
    except (AttributeError, TypeError) as e:
        logger.warning(f'Could not parse play-by-play for fights: {e}')
        return {}

    return fight_counts
