"""Shared fixtures: a seeded in-memory store, a fake NHL client and test settings."""

import pytest

from helpers import (
    LEAGUE_ID,
    LEGACY_WINGER,
    MATTHEWS,
    MONTEMBEAULT,
    RESERVE_CENTER,
    RIELLY,
    SUZUKI,
    FakeNHLClient,
)
from puckpool.schemas import AppConfig, League, LeagueTeam, RosterAssignment, ScoringRules
from puckpool.store import MemoryStore


@pytest.fixture
def config():
    """Settings with no pacing delays."""
    return AppConfig(request_delay_seconds=0, reprocess_delay_seconds=0)


@pytest.fixture
def rules():
    return ScoringRules(**{**ScoringRules.defaults().model_dump(), 'goal': 1, 'assist': 1, 'fight': 2})


@pytest.fixture
def store(rules):
    """MemoryStore with one live league, two teams and a mixed roster."""
    store = MemoryStore()
    store.save_league(League(
        league_id=LEAGUE_ID,
        league_name='Test League',
        status='live',
        scoring_rules=rules,
        teams=[LeagueTeam(team_name='Ice Hogs'), LeagueTeam(team_name='Puck Bunnies')],
    ))
    store.save_roster(LEAGUE_ID, [
        RosterAssignment(league_id=LEAGUE_ID, player_id=MATTHEWS, drafted_by_team='Ice Hogs',
                         roster_slot='active', name='Auston Matthews', position='C'),
        RosterAssignment(league_id=LEAGUE_ID, player_id=RIELLY, drafted_by_team='Ice Hogs',
                         roster_slot='active', name='Morgan Rielly', position='D'),
        RosterAssignment(league_id=LEAGUE_ID, player_id=RESERVE_CENTER, drafted_by_team='Ice Hogs',
                         roster_slot='reserve', name='Reserve Center', position='C'),
        RosterAssignment(league_id=LEAGUE_ID, player_id=SUZUKI, drafted_by_team='Puck Bunnies',
                         roster_slot='active', name='Nick Suzuki', position='C'),
        RosterAssignment(league_id=LEAGUE_ID, player_id=MONTEMBEAULT, drafted_by_team='Puck Bunnies',
                         roster_slot='active', name='Samuel Montembeault', position='G'),
        RosterAssignment(league_id=LEAGUE_ID, player_id=LEGACY_WINGER, drafted_by_team='Puck Bunnies',
                         name='Legacy Winger', position='RW'),
    ])
    return store


@pytest.fixture
def nhl():
    return FakeNHLClient()
