"""Roster filtering for the scoring jobs."""

import logging

from .constants import ROSTER_SLOT_RESERVE
from .schemas import RosterAssignment
from .store import ScoreStore

logger = logging.getLogger('puckpool.roster')


def is_active(assignment: RosterAssignment) -> bool:
    """
    Whether a drafted player counts toward scoring.

    Only the reserve slot is excluded. Assignments created before roster
    slots existed have no slot at all and count as active.
    """
    return assignment.roster_slot != ROSTER_SLOT_RESERVE


def active_roster_map(store: ScoreStore, league_id: str) -> dict[int, str]:
    """
    Map NHL player id to fantasy team name for a league's active roster.

    Args:
        store: Document store
        league_id: League to load

    Returns:
        Dict of player_id -> drafted_by_team, reserve players excluded
    """
    player_to_team: dict[int, str] = {}
    reserves = 0

    for assignment in store.get_roster(league_id):
        if assignment.league_id != league_id:
            continue
        if not is_active(assignment):
            reserves += 1
            continue
        player_to_team[assignment.player_id] = assignment.drafted_by_team

    logger.info(
        f'[{league_id}] Found {len(player_to_team)} active roster players ({reserves} in reserve)'
    )
    return player_to_team
