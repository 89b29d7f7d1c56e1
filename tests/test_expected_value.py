"""Tests for expected value helpers."""

import pytest

from betjournal.core.expected_value import (
    breakeven_probability,
    ev_per_unit,
    expected_value,
    implied_probability,
    probability_edge,
)


@pytest.mark.parametrize("odds, p, ev", [
    (2.0, 0.55, 0.10),
    (1.8, 0.50, -0.10),
    (3.0, 1 / 3, 0.0),
    (1.5, 1.0, 0.5),
    (4.0, 0.0, -1.0),
])
def test_ev_per_unit(odds, p, ev):
    assert ev_per_unit(odds, p) == pytest.approx(ev)


def test_expected_value_absolute():
    result = expected_value(2.0, 0.55, 100)
    assert result.ev_percent == pytest.approx(0.10)
    assert result.ev_absolute == pytest.approx(10.0)
    assert result.is_positive


def test_expected_value_negative():
    result = expected_value(1.8, 0.50, 200)
    assert result.ev_absolute == pytest.approx(-20.0)
    assert not result.is_positive


@pytest.mark.parametrize("odds, pct", [
    (2.0, 50.0),
    (1.25, 80.0),
    (4.0, 25.0),
])
def test_breakeven(odds, pct):
    assert breakeven_probability(odds) == pytest.approx(pct)


@pytest.mark.parametrize("odds", [0.0, -1.5])
def test_breakeven_non_positive_odds(odds):
    assert breakeven_probability(odds) == 0.0
    assert implied_probability(odds) == 0.0


def test_implied_probability_fraction():
    assert implied_probability(2.5) == pytest.approx(0.4)


def test_probability_edge():
    # 55% against a 50% breakeven
    assert probability_edge(55.0, 2.0) == pytest.approx(5.0)
    assert expected_value(2.0, 0.55, 100).edge == pytest.approx(5.0)
    assert expected_value(2.0, 0.55, 100).breakeven_prob == pytest.approx(50.0)
