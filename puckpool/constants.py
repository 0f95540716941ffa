"""Constants and mappings for the puckpool scorer."""

# Default scoring rules for a new league
DEFAULT_SCORING_RULES = {
    # Skaters
    'goal': 1.0,
    'assist': 1.0,
    'short_handed_goal': 1.0,  # Bonus on top of goal
    'overtime_goal': 1.0,  # Bonus on top of goal
    'fight': 2.0,
    # Defense only
    'blocked_shot': 0.15,
    'hit': 0.1,
    # Goalies
    'win': 1.0,
    'shutout': 2.0,
    'save': 0.04,
    'goalie_assist': 1.0,
    'goalie_goal': 20.0,
    'goalie_fight': 5.0,
}

# NHL game states
GAME_STATE_FUTURE = 'FUT'
GAME_STATE_PREGAME = 'PRE'
GAME_STATE_FINAL = 'FINAL'
GAME_STATE_OFF = 'OFF'

COMPLETED_GAME_STATES = frozenset({GAME_STATE_FINAL, GAME_STATE_OFF})
NOT_STARTED_GAME_STATES = frozenset({GAME_STATE_FUTURE, GAME_STATE_PREGAME})

# Box score position groups, in the order players are collected
POSITION_GROUPS = ('forwards', 'defense', 'goalies')

# Scoring roles that raw NHL position codes collapse to
ROLE_FORWARD = 'forward'
ROLE_DEFENSE = 'defense'
ROLE_GOALIE = 'goalie'

POSITION_ROLES = {
    'C': ROLE_FORWARD,
    'L': ROLE_FORWARD,
    'R': ROLE_FORWARD,
    'LW': ROLE_FORWARD,
    'RW': ROLE_FORWARD,
    'F': ROLE_FORWARD,
    'D': ROLE_DEFENSE,
    'G': ROLE_GOALIE,
}

# Roster slots
ROSTER_SLOT_ACTIVE = 'active'
ROSTER_SLOT_RESERVE = 'reserve'
ROSTER_SLOTS = (ROSTER_SLOT_ACTIVE, ROSTER_SLOT_RESERVE)

# League lifecycle
LEAGUE_STATUS_PENDING = 'pending'
LEAGUE_STATUS_LIVE = 'live'
LEAGUE_STATUS_COMPLETE = 'complete'
LEAGUE_STATUSES = (LEAGUE_STATUS_PENDING, LEAGUE_STATUS_LIVE, LEAGUE_STATUS_COMPLETE)

# Play-by-play descriptors
PLAY_TYPE_PENALTY = 'penalty'
PENALTY_FIGHTING = 'fighting'

# Placeholder for missing NHL team abbreviations
UNKNOWN_TEAM = 'UNK'

# Counting stats kept on a PlayerDailyScore when present in the box score
DAILY_STAT_FIELDS = (
    'goals',
    'assists',
    'shots',
    'hits',
    'blocked_shots',
    'pim',
    'short_handed_goals',
    'wins',
    'saves',
    'shutouts',
)
