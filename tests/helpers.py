"""Shared test data: league ids, player ids, NHL payload builders and a fake NHL client."""

from datetime import datetime, timezone

from puckpool.exceptions import NHLAPIError

LEAGUE_ID = 'league-1'

# Noon UTC on Jan 15 is 07:00 on Jan 15 at UTC-5: daily job scores Jan 14.
AS_OF = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
SCORED_DATE = '2025-01-14'
TODAY = '2025-01-15'

# Rostered players
MATTHEWS = 8479318  # C, Ice Hogs
RIELLY = 8476853  # D, Ice Hogs
SUZUKI = 8480018  # C, Puck Bunnies
MONTEMBEAULT = 8477967  # G, Puck Bunnies
RESERVE_CENTER = 8481000  # C, Ice Hogs reserve
LEGACY_WINGER = 8482000  # RW, Puck Bunnies, assigned before roster slots existed
UNDRAFTED = 8483000


def scoreboard_game(game_id, state='OFF', away='TOR', home='MTL', away_score=3, home_score=2):
    """One entry of a /score/{date} payload."""
    return {
        'id': game_id,
        'gameState': state,
        'awayTeam': {'abbrev': away, 'score': away_score},
        'homeTeam': {'abbrev': home, 'score': home_score},
    }


def scoreboard(*games):
    return {'games': list(games)}


def skater(player_id, name, position='C', **stats):
    """A box score skater line. Stats use the NHL API's camelCase keys."""
    entry = {'playerId': player_id, 'name': {'default': name}, 'position': position}
    entry.update(stats)
    return entry


def goalie(player_id, name, **stats):
    entry = {'playerId': player_id, 'name': {'default': name}, 'position': 'G'}
    entry.update(stats)
    return entry


def boxscore(away=None, home=None, away_abbrev='TOR', home_abbrev='MTL'):
    """
    A /gamecenter/{id}/boxscore payload.

    away/home are lists of player lines; they are sorted into forwards,
    defense and goalies by position.
    """
    def team(players):
        groups = {'forwards': [], 'defense': [], 'goalies': []}
        for player in players or []:
            if player['position'] == 'G':
                groups['goalies'].append(player)
            elif player['position'] == 'D':
                groups['defense'].append(player)
            else:
                groups['forwards'].append(player)
        return groups

    return {
        'awayTeam': {'abbrev': away_abbrev},
        'homeTeam': {'abbrev': home_abbrev},
        'playerByGameStats': {'awayTeam': team(away), 'homeTeam': team(home)},
    }


def fight(player_id):
    """A fighting major in a play-by-play payload."""
    return {
        'typeDescKey': 'penalty',
        'details': {'descKey': 'fighting', 'committedByPlayerId': player_id, 'duration': 5},
    }


def play_by_play(*plays):
    return {'plays': list(plays)}


class FakeNHLClient:
    """
    In-memory stand-in for NHLClient.

    Payloads are registered per date / game id. Anything unregistered, or
    listed in fail_boxscores / fail_play_by_play, raises NHLAPIError like a
    failed request would.
    """

    def __init__(self):
        self.scoreboards = {}
        self.boxscores = {}
        self.play_by_plays = {}
        self.fail_boxscores = set()
        self.fail_play_by_play = set()
        self.calls = []

    def scores_for_date(self, yyyy_mm_dd):
        self.calls.append(('score', yyyy_mm_dd))
        if yyyy_mm_dd not in self.scoreboards:
            return {'games': []}
        return self.scoreboards[yyyy_mm_dd]

    def boxscore(self, game_id):
        self.calls.append(('boxscore', game_id))
        if game_id in self.fail_boxscores or game_id not in self.boxscores:
            raise NHLAPIError(f'GET /gamecenter/{game_id}/boxscore failed: 500')
        return self.boxscores[game_id]

    def play_by_play(self, game_id):
        self.calls.append(('play-by-play', game_id))
        if game_id in self.fail_play_by_play:
            raise NHLAPIError(f'GET /gamecenter/{game_id}/play-by-play failed: 500')
        return self.play_by_plays.get(game_id, {'plays': []})

    def boxscore_calls(self):
        return [game_id for kind, game_id in self.calls if kind == 'boxscore']
