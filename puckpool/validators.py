"""Validation functions for scoring rules and computed points."""

import math

from .schemas import ScoringRules


def is_valid_points(points) -> bool:
    """True if points is a real, finite number that may be persisted or aggregated."""
    if isinstance(points, bool) or not isinstance(points, (int, float)):
        return False
    return math.isfinite(points)


def validate_scoring_rules(rules: ScoringRules) -> list[str]:
    """
    Check a league's scoring rules for values that would corrupt totals.

    Checks:
    - No NaN or infinite weights
    - No negative weights

    Args:
        rules: ScoringRules to validate

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    for name, value in rules.model_dump().items():
        if value is None:
            continue
        if not math.isfinite(value):
            warnings.append(f'Scoring rule {name} is not a finite number ({value})')
        elif value < 0:
            warnings.append(f'Scoring rule {name} is negative ({value})')

    return warnings


def validate_player_points(player_name: str, points: float) -> list[str]:
    """
    Check that a player's single-game points are plausible.

    Sanity checks:
    - Points are finite
    - Points in a reasonable range (-10 to 50)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    if not is_valid_points(points):
        warnings.append(f'{player_name} has invalid points: {points!r}')
        return warnings

    if points > 50:
        warnings.append(
            f'{player_name} scored {points:.2f} pts (unusually high - check for scoring bug)'
        )
    elif points < -10:
        warnings.append(
            f'{player_name} scored {points:.2f} pts (unusually low - check for scoring bug)'
        )

    return warnings


def validate_team_total(team_name: str, team_total: float, num_players: int) -> list[str]:
    """
    Check that a team's total for one scoring date is reasonable.

    Sanity checks:
    - Total is finite
    - Total not negative
    - Average per contributing player not impossibly high (>25)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    if not is_valid_points(team_total):
        warnings.append(f'{team_name} has invalid total: {team_total!r}')
        return warnings

    if team_total < 0:
        warnings.append(
            f'{team_name} scored {team_total:.2f} pts (negative total - check for scoring bug)'
        )

    if num_players > 0:
        avg_per_player = team_total / num_players
        if avg_per_player > 25:
            warnings.append(
                f'{team_name} averaged {avg_per_player:.2f} pts/player (unusually high - check for scoring bug)'
            )

    return warnings
