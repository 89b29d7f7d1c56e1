"""
Tests for the Kelly staking engine
Run with: pytest tests/test_kelly.py -v
"""

import pytest

from betjournal.core.kelly import DEFAULT_SAFETY_FRACTION, full_kelly_fraction, kelly_stake


class TestFullKelly:

    def test_even_money_edge(self):
        # b = 1, p = 0.55 → (0.55 − 0.45) / 1
        assert full_kelly_fraction(2.0, 0.55) == pytest.approx(0.10)

    def test_negative_edge_is_reported(self):
        assert full_kelly_fraction(2.0, 0.40) == pytest.approx(-0.20)

    def test_longshot(self):
        # b = 4, p = 0.25 → (1.0 − 0.75) / 4
        assert full_kelly_fraction(5.0, 0.25) == pytest.approx(0.0625)

    @pytest.mark.parametrize("odds", [1.0, 0.9, 0.0, -2.0])
    def test_no_payout_is_zero(self, odds):
        assert full_kelly_fraction(odds, 0.99) == 0.0


class TestKellyStake:

    def test_half_kelly_default(self):
        result = kelly_stake(2.0, 0.55, 10_000)
        assert DEFAULT_SAFETY_FRACTION == 0.5
        assert result.stake == pytest.approx(500.0)
        assert result.fraction == pytest.approx(0.05)
        assert result.full_fraction == pytest.approx(0.10)
        assert result.has_edge

    def test_full_kelly(self):
        result = kelly_stake(2.0, 0.55, 10_000, 1.0)
        assert result.stake == pytest.approx(1_000.0)

    def test_negative_edge_clamps_to_zero(self):
        result = kelly_stake(2.0, 0.40, 10_000, 0.5)
        assert result.stake == 0.0
        assert result.fraction == 0.0
        assert result.full_fraction < 0
        assert not result.has_edge

    @pytest.mark.parametrize("odds", [1.0, 0.5, 0.0])
    def test_malformed_odds_never_raise(self, odds):
        result = kelly_stake(odds, 0.9, 10_000, 1.0)
        assert result.stake == 0.0
        assert result.fraction == 0.0

    @pytest.mark.parametrize("odds, p, safety", [
        (1.5, 0.30, 0.5),
        (1.9, 0.52, 0.25),
        (3.0, 0.10, 1.0),
        (10.0, 0.12, 0.5),
    ])
    def test_stake_never_negative(self, odds, p, safety):
        assert kelly_stake(odds, p, 5_000, safety).stake >= 0.0

    def test_zero_bankroll(self):
        assert kelly_stake(2.0, 0.6, 0.0).stake == 0.0

    def test_to_dict(self):
        d = kelly_stake(2.0, 0.55, 10_000).to_dict()
        assert d["stake"] == 500.0
        assert d["has_edge"] is True
