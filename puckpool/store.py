"""Document store for leagues, rosters and scores.

The scoring jobs take a ScoreStore handle rather than reaching for a global
client. MemoryStore keeps everything in process; JsonFileStore keeps one
directory of JSON documents per league.
"""

import logging
import shutil
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from .config import get_data_dir
from .schemas import (
    League,
    LiveGameSnapshot,
    LivePlayerStat,
    PlayerDailyScore,
    ProcessedDate,
    RosterAssignment,
    TeamScore,
)
from .utils import create_json_exclusive, load_json_safe, save_json

logger = logging.getLogger('puckpool.store')


class ScoreStore(ABC):
    """Persistence operations the scoring jobs depend on."""

    # Leagues and rosters

    @abstractmethod
    def get_league(self, league_id: str) -> Optional[League]:
        ...

    @abstractmethod
    def save_league(self, league: League) -> None:
        ...

    @abstractmethod
    def list_league_ids(self) -> list[str]:
        ...

    @abstractmethod
    def get_roster(self, league_id: str) -> list[RosterAssignment]:
        ...

    @abstractmethod
    def save_roster(self, league_id: str, assignments: Iterable[RosterAssignment]) -> None:
        ...

    # Processed-date markers

    @abstractmethod
    def get_processed_date(self, league_id: str, date: str) -> Optional[ProcessedDate]:
        ...

    @abstractmethod
    def claim_processed_date(self, league_id: str, marker: ProcessedDate) -> bool:
        """
        Create the marker for marker.date if none exists.

        Atomic: of several concurrent claims for the same date exactly one
        returns True.
        """

    @abstractmethod
    def complete_processed_date(self, league_id: str, marker: ProcessedDate) -> None:
        """Overwrite a claimed marker with its final counts."""

    @abstractmethod
    def release_processed_date(self, league_id: str, date: str) -> bool:
        """Delete a marker. Returns False if there was none."""

    # Team and player scores

    @abstractmethod
    def get_team_scores(self, league_id: str) -> dict[str, TeamScore]:
        ...

    @abstractmethod
    def increment_team_score(
        self, league_id: str, team_name: str, points: float, updated_at: str
    ) -> TeamScore:
        """Add points to a team's total, creating the record with points as its total."""

    @abstractmethod
    def save_player_daily_scores(self, league_id: str, scores: Iterable[PlayerDailyScore]) -> None:
        ...

    @abstractmethod
    def get_player_daily_scores(
        self, league_id: str, date: Optional[str] = None
    ) -> list[PlayerDailyScore]:
        ...

    @abstractmethod
    def clear_scores(self, league_id: str) -> tuple[int, int]:
        """
        Delete all team scores and player daily scores for a league.

        Returns:
            Tuple of (team scores deleted, player daily scores deleted)
        """

    # Live snapshots

    @abstractmethod
    def get_live_game(self, league_id: str, date: str, game_id: int) -> Optional[LiveGameSnapshot]:
        ...

    @abstractmethod
    def write_live_game(
        self,
        league_id: str,
        snapshot: LiveGameSnapshot,
        player_stats: Iterable[LivePlayerStat],
    ) -> None:
        """Upsert a game's snapshot and its player records as one atomic batch."""

    @abstractmethod
    def get_live_stats(self, league_id: str, date: str) -> list[LivePlayerStat]:
        ...


class MemoryStore(ScoreStore):
    """In-process store. Returned records are copies."""

    def __init__(self):
        self._lock = threading.Lock()
        self._leagues: dict[str, League] = {}
        self._rosters: dict[str, list[RosterAssignment]] = {}
        self._processed: dict[str, dict[str, ProcessedDate]] = {}
        self._team_scores: dict[str, dict[str, TeamScore]] = {}
        self._daily_scores: dict[str, dict[str, PlayerDailyScore]] = {}
        self._live_games: dict[str, dict[tuple[str, int], LiveGameSnapshot]] = {}
        self._live_stats: dict[str, dict[str, LivePlayerStat]] = {}

    def get_league(self, league_id: str) -> Optional[League]:
        league = self._leagues.get(league_id)
        return league.model_copy(deep=True) if league else None

    def save_league(self, league: League) -> None:
        with self._lock:
            self._leagues[league.league_id] = league.model_copy(deep=True)

    def list_league_ids(self) -> list[str]:
        return sorted(self._leagues)

    def get_roster(self, league_id: str) -> list[RosterAssignment]:
        return [a.model_copy() for a in self._rosters.get(league_id, [])]

    def save_roster(self, league_id: str, assignments: Iterable[RosterAssignment]) -> None:
        with self._lock:
            self._rosters[league_id] = [a.model_copy() for a in assignments]

    def get_processed_date(self, league_id: str, date: str) -> Optional[ProcessedDate]:
        marker = self._processed.get(league_id, {}).get(date)
        return marker.model_copy() if marker else None

    def claim_processed_date(self, league_id: str, marker: ProcessedDate) -> bool:
        with self._lock:
            markers = self._processed.setdefault(league_id, {})
            if marker.date in markers:
                return False
            markers[marker.date] = marker.model_copy()
            return True

    def complete_processed_date(self, league_id: str, marker: ProcessedDate) -> None:
        with self._lock:
            self._processed.setdefault(league_id, {})[marker.date] = marker.model_copy()

    def release_processed_date(self, league_id: str, date: str) -> bool:
        with self._lock:
            return self._processed.get(league_id, {}).pop(date, None) is not None

    def get_team_scores(self, league_id: str) -> dict[str, TeamScore]:
        return {k: v.model_copy() for k, v in self._team_scores.get(league_id, {}).items()}

    def increment_team_score(
        self, league_id: str, team_name: str, points: float, updated_at: str
    ) -> TeamScore:
        with self._lock:
            scores = self._team_scores.setdefault(league_id, {})
            current = scores.get(team_name)
            if current is None:
                current = TeamScore(team_name=team_name, total_points=points, last_updated=updated_at)
            else:
                current = current.model_copy(
                    update={'total_points': current.total_points + points, 'last_updated': updated_at}
                )
            scores[team_name] = current
            return current.model_copy()

    def save_player_daily_scores(self, league_id: str, scores: Iterable[PlayerDailyScore]) -> None:
        with self._lock:
            stored = self._daily_scores.setdefault(league_id, {})
            for score in scores:
                stored[score.key] = score.model_copy(deep=True)

    def get_player_daily_scores(
        self, league_id: str, date: Optional[str] = None
    ) -> list[PlayerDailyScore]:
        scores = self._daily_scores.get(league_id, {}).values()
        return [
            s.model_copy(deep=True)
            for s in sorted(scores, key=lambda s: (s.date, s.player_id))
            if date is None or s.date == date
        ]

    def clear_scores(self, league_id: str) -> tuple[int, int]:
        with self._lock:
            teams = self._team_scores.pop(league_id, {})
            players = self._daily_scores.pop(league_id, {})
            return len(teams), len(players)

    def get_live_game(self, league_id: str, date: str, game_id: int) -> Optional[LiveGameSnapshot]:
        snapshot = self._live_games.get(league_id, {}).get((date, game_id))
        return snapshot.model_copy() if snapshot else None

    def write_live_game(
        self,
        league_id: str,
        snapshot: LiveGameSnapshot,
        player_stats: Iterable[LivePlayerStat],
    ) -> None:
        records = [stat.model_copy() for stat in player_stats]
        with self._lock:
            self._live_games.setdefault(league_id, {})[(snapshot.date, snapshot.game_id)] = (
                snapshot.model_copy()
            )
            stats = self._live_stats.setdefault(league_id, {})
            for record in records:
                stats[record.key] = record

    def get_live_stats(self, league_id: str, date: str) -> list[LivePlayerStat]:
        stats = self._live_stats.get(league_id, {}).values()
        return [
            s.model_copy()
            for s in sorted(stats, key=lambda s: s.player_id)
            if s.date == date
        ]


class JsonFileStore(ScoreStore):
    """
    Store backed by JSON documents on disk.

    Layout under root:
        leagues/<league_id>/league.json
        leagues/<league_id>/roster.json
        leagues/<league_id>/team_scores.json
        leagues/<league_id>/player_daily_scores/<date>.json
        leagues/<league_id>/processed_dates/<date>.json
        leagues/<league_id>/live/<date>.json   (games and player records together)

    Every write replaces a whole document atomically. Read-modify-write
    updates (team score increments, live batches) are serialized within the
    process; separate processes must not run the same job concurrently,
    except for the processed-date claim, which is an exclusive file create.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self._lock = threading.Lock()

    def _league_dir(self, league_id: str) -> Path:
        return self.root / 'leagues' / league_id

    def get_league(self, league_id: str) -> Optional[League]:
        return load_json_safe(self._league_dir(league_id) / 'league.json', schema=League)

    def save_league(self, league: League) -> None:
        save_json(self._league_dir(league.league_id) / 'league.json', league)

    def list_league_ids(self) -> list[str]:
        leagues_dir = self.root / 'leagues'
        if not leagues_dir.exists():
            return []
        return sorted(p.name for p in leagues_dir.iterdir() if (p / 'league.json').exists())

    def get_roster(self, league_id: str) -> list[RosterAssignment]:
        data = load_json_safe(self._league_dir(league_id) / 'roster.json', default=[])
        return [RosterAssignment(**entry) for entry in data]

    def save_roster(self, league_id: str, assignments: Iterable[RosterAssignment]) -> None:
        save_json(self._league_dir(league_id) / 'roster.json', list(assignments))

    def _marker_path(self, league_id: str, date: str) -> Path:
        return self._league_dir(league_id) / 'processed_dates' / f'{date}.json'

    def get_processed_date(self, league_id: str, date: str) -> Optional[ProcessedDate]:
        return load_json_safe(self._marker_path(league_id, date), schema=ProcessedDate)

    def claim_processed_date(self, league_id: str, marker: ProcessedDate) -> bool:
        return create_json_exclusive(self._marker_path(league_id, marker.date), marker)

    def complete_processed_date(self, league_id: str, marker: ProcessedDate) -> None:
        save_json(self._marker_path(league_id, marker.date), marker)

    def release_processed_date(self, league_id: str, date: str) -> bool:
        path = self._marker_path(league_id, date)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info(f'[{league_id}] Released processed-date marker {date}')
        return True

    def _team_scores_path(self, league_id: str) -> Path:
        return self._league_dir(league_id) / 'team_scores.json'

    def get_team_scores(self, league_id: str) -> dict[str, TeamScore]:
        data = load_json_safe(self._team_scores_path(league_id), default={})
        return {name: TeamScore(**entry) for name, entry in data.items()}

    def increment_team_score(
        self, league_id: str, team_name: str, points: float, updated_at: str
    ) -> TeamScore:
        with self._lock:
            scores = self.get_team_scores(league_id)
            current = scores.get(team_name)
            if current is None:
                current = TeamScore(team_name=team_name, total_points=points, last_updated=updated_at)
            else:
                current = current.model_copy(
                    update={'total_points': current.total_points + points, 'last_updated': updated_at}
                )
            scores[team_name] = current
            save_json(self._team_scores_path(league_id), scores)
            return current

    def _daily_dir(self, league_id: str) -> Path:
        return self._league_dir(league_id) / 'player_daily_scores'

    def save_player_daily_scores(self, league_id: str, scores: Iterable[PlayerDailyScore]) -> None:
        by_date: dict[str, list[PlayerDailyScore]] = {}
        for score in scores:
            by_date.setdefault(score.date, []).append(score)

        with self._lock:
            for date, date_scores in by_date.items():
                path = self._daily_dir(league_id) / f'{date}.json'
                stored = load_json_safe(path, default={})
                for score in date_scores:
                    stored[score.key] = score
                save_json(path, stored)

    def get_player_daily_scores(
        self, league_id: str, date: Optional[str] = None
    ) -> list[PlayerDailyScore]:
        daily_dir = self._daily_dir(league_id)
        if date is not None:
            paths = [daily_dir / f'{date}.json']
        elif daily_dir.exists():
            paths = sorted(daily_dir.glob('*.json'))
        else:
            paths = []

        scores = []
        for path in paths:
            for entry in load_json_safe(path, default={}).values():
                scores.append(PlayerDailyScore(**entry))
        return sorted(scores, key=lambda s: (s.date, s.player_id))

    def clear_scores(self, league_id: str) -> tuple[int, int]:
        with self._lock:
            team_count = len(self.get_team_scores(league_id))
            player_count = len(self.get_player_daily_scores(league_id))
            self._team_scores_path(league_id).unlink(missing_ok=True)
            shutil.rmtree(self._daily_dir(league_id), ignore_errors=True)
        return team_count, player_count

    def _live_path(self, league_id: str, date: str) -> Path:
        return self._league_dir(league_id) / 'live' / f'{date}.json'

    def _load_live(self, league_id: str, date: str) -> dict:
        data = load_json_safe(self._live_path(league_id, date), default={})
        data.setdefault('games', {})
        data.setdefault('players', {})
        return data

    def get_live_game(self, league_id: str, date: str, game_id: int) -> Optional[LiveGameSnapshot]:
        entry = self._load_live(league_id, date)['games'].get(str(game_id))
        return LiveGameSnapshot(**entry) if entry else None

    def write_live_game(
        self,
        league_id: str,
        snapshot: LiveGameSnapshot,
        player_stats: Iterable[LivePlayerStat],
    ) -> None:
        with self._lock:
            data = self._load_live(league_id, snapshot.date)
            data['games'][str(snapshot.game_id)] = snapshot
            for stat in player_stats:
                if stat.date != snapshot.date:
                    raise ValueError(
                        f'Live stat {stat.key} dated {stat.date} written with game dated {snapshot.date}'
                    )
                data['players'][stat.key] = stat
            save_json(self._live_path(league_id, snapshot.date), data)

    def get_live_stats(self, league_id: str, date: str) -> list[LivePlayerStat]:
        players = self._load_live(league_id, date)['players'].values()
        return sorted((LivePlayerStat(**entry) for entry in players), key=lambda s: s.player_id)


def open_store(root: Path | str | None = None) -> ScoreStore:
    """Open the JSON store at root, or at the configured data directory."""
    if root is None:
        root = get_data_dir()
    return JsonFileStore(root)


