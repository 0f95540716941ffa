"""Tests for validation functions."""

import pytest

from puckpool.schemas import ScoringRules
from puckpool.validators import (
    is_valid_points,
    validate_player_points,
    validate_scoring_rules,
    validate_team_total,
)


class TestIsValidPoints:
    """Tests for the finite-number check applied before persisting points."""

    @pytest.mark.parametrize('points', [0, 3, 4.2, -1.5])
    def test_finite_numbers_valid(self, points):
        assert is_valid_points(points)

    @pytest.mark.parametrize('points', [float('nan'), float('inf'), float('-inf'), None, '3', True])
    def test_invalid_values(self, points):
        assert not is_valid_points(points)


class TestScoringRulesValidation:
    """Tests for league scoring rule checks."""

    def test_default_rules_pass(self):
        """Test the default rules produce no warnings."""
        assert validate_scoring_rules(ScoringRules.defaults()) == []

    def test_negative_weight(self):
        rules = ScoringRules.defaults().model_copy(update={'hit': -0.1})
        warnings = validate_scoring_rules(rules)
        assert len(warnings) == 1
        assert 'hit' in warnings[0]
        assert 'negative' in warnings[0]

    def test_non_finite_weight(self):
        rules = ScoringRules.defaults().model_copy(update={'save': float('nan')})
        warnings = validate_scoring_rules(rules)
        assert len(warnings) == 1
        assert 'not a finite number' in warnings[0]

    def test_missing_goalie_fight_ignored(self):
        rules = ScoringRules.defaults().model_copy(update={'goalie_fight': None})
        assert validate_scoring_rules(rules) == []


class TestPlayerPointsValidation:
    """Tests for single-game player sanity checks."""

    def test_normal_game(self):
        assert validate_player_points('Auston Matthews', 4.0) == []

    def test_unusually_high(self):
        """Test over 50 points in a game generates a warning."""
        warnings = validate_player_points('Test Player', 61.0)
        assert len(warnings) == 1
        assert 'unusually high' in warnings[0]
        assert '61.00' in warnings[0]

    def test_unusually_low(self):
        warnings = validate_player_points('Test Player', -12.0)
        assert len(warnings) == 1
        assert 'unusually low' in warnings[0]

    def test_invalid_points(self):
        warnings = validate_player_points('Test Player', float('nan'))
        assert len(warnings) == 1
        assert 'invalid points' in warnings[0]


class TestTeamTotalValidation:
    """Tests for per-date team total sanity checks."""

    def test_normal_total(self):
        assert validate_team_total('Ice Hogs', 12.5, 6) == []

    def test_negative_total(self):
        warnings = validate_team_total('Ice Hogs', -1.0, 3)
        assert len(warnings) == 1
        assert 'negative total' in warnings[0]

    def test_high_average(self):
        """Test an average over 25 points per player generates a warning."""
        warnings = validate_team_total('Ice Hogs', 60.0, 2)
        assert len(warnings) == 1
        assert 'averaged 30.00' in warnings[0]

    def test_no_players_skips_average(self):
        assert validate_team_total('Ice Hogs', 60.0, 0) == []

    def test_invalid_total(self):
        warnings = validate_team_total('Ice Hogs', float('inf'), 2)
        assert len(warnings) == 1
        assert 'invalid total' in warnings[0]
