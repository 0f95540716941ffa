"""Scoring functions for skaters and goalies."""

from typing import Dict, Tuple

from .constants import ROLE_DEFENSE, ROLE_GOALIE
from .models import PlayerGameStats
from .schemas import ScoringRules


def _points(count, weight: float) -> float:
    """count * weight, or 0 when the stat is absent or zero."""
    if not count:
        return 0.0
    return count * weight


def score_skater(
    stats: PlayerGameStats,
    rules: ScoringRules,
    fight_count: int = 0,
) -> Tuple[float, Dict[str, float]]:
    """
    Score a skater (forward or defenseman).

    Scoring:
        - Goals: rules.goal each
        - Assists: rules.assist each
        - Short-handed goals: rules.short_handed_goal bonus each
        - Fights: rules.fight each (from play-by-play, not PIM)
        - Defense only: blocked shots at rules.blocked_shot, hits at rules.hit

    Forwards earn nothing for hits or blocked shots.

    Args:
        stats: Box score line
        rules: League scoring rules
        fight_count: Fighting majors from the play-by-play
    """
    points = 0.0
    breakdown = {}

    goal_pts = _points(stats.goals, rules.goal)
    if goal_pts:
        breakdown['goals'] = goal_pts
    points += goal_pts

    assist_pts = _points(stats.assists, rules.assist)
    if assist_pts:
        breakdown['assists'] = assist_pts
    points += assist_pts

    shg_pts = _points(stats.short_handed_goals, rules.short_handed_goal)
    if shg_pts:
        breakdown['short_handed_goals'] = shg_pts
    points += shg_pts

    fight_pts = _points(fight_count, rules.fight)
    if fight_pts:
        breakdown['fights'] = fight_pts
    points += fight_pts

    if stats.role == ROLE_DEFENSE:
        block_pts = _points(stats.blocked_shots, rules.blocked_shot)
        if block_pts:
            breakdown['blocked_shots'] = block_pts
        points += block_pts

        hit_pts = _points(stats.hits, rules.hit)
        if hit_pts:
            breakdown['hits'] = hit_pts
        points += hit_pts

    return points, breakdown


def score_goalie(stats: PlayerGameStats, rules: ScoringRules) -> Tuple[float, Dict[str, float]]:
    """
    Score a goalie.

    Scoring:
        - Wins: rules.win
        - Shutouts: rules.shutout
        - Saves: rules.save each
        - Assists: rules.goalie_assist each
        - Goals: rules.goalie_goal each

    Goalie points and assists use their own, much larger weights than the
    skater equivalents.
    """
    points = 0.0
    breakdown = {}

    for category, count, weight in (
        ('wins', stats.wins, rules.win),
        ('shutouts', stats.shutouts, rules.shutout),
        ('saves', stats.saves, rules.save),
        ('assists', stats.assists, rules.goalie_assist),
        ('goals', stats.goals, rules.goalie_goal),
    ):
        category_pts = _points(count, weight)
        if category_pts:
            breakdown[category] = category_pts
        points += category_pts

    return points, breakdown


def score_player(
    stats: PlayerGameStats,
    rules: ScoringRules,
    fight_count: int = 0,
) -> Tuple[float, Dict[str, float]]:
    """Score any player, dispatching on scoring role."""
    if stats.role == ROLE_GOALIE:
        return score_goalie(stats, rules)
    return score_skater(stats, rules, fight_count)


def calculate_points(stats: PlayerGameStats, rules: ScoringRules, fight_count: int = 0) -> float:
    """
    Fantasy points for one player in one game.

    The result can be NaN or infinite when upstream data is malformed;
    callers check it with validators.is_valid_points before using it.
    """
    points, _ = score_player(stats, rules, fight_count)
    return points
