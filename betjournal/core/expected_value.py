"""Expected value of a single wager.

Pure functions; no I/O, no logging.  These numbers are for display and
diagnosis only; stake sizing is the job of :mod:`betjournal.core.kelly`.

For decimal odds ``d`` and win probability ``p`` the expected return per
unit staked is::

    EV  =  p · (d − 1)  −  (1 − p) · 1  =  p · d − 1

A bet is +EV when ``p`` exceeds the breakeven probability ``1 / d``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EVResult:
    """Output of :func:`expected_value`."""

    ev_percent: float       # Expected return per unit staked (0.10 = +10%)
    ev_absolute: float      # ev_percent × stake
    breakeven_prob: float   # 100 / odds, in percent
    edge: float             # user probability (%) − breakeven (%)

    @property
    def is_positive(self) -> bool:
        return self.ev_percent > 0.0

    def to_dict(self) -> dict:
        return {
            "ev_percent": round(self.ev_percent, 6),
            "ev_absolute": round(self.ev_absolute, 2),
            "breakeven_prob": round(self.breakeven_prob, 4),
            "edge": round(self.edge, 4),
            "is_positive": self.is_positive,
        }


def ev_per_unit(decimal_odds: float, win_prob: float) -> float:
    """``p · d − 1``: expected profit per unit staked."""
    return win_prob * decimal_odds - 1.0


def breakeven_probability(decimal_odds: float) -> float:
    """Win probability (in percent) at which the bet is EV-neutral.

    Returns 0.0 for non-positive odds instead of dividing by zero.

    Examples::

        breakeven_probability(2.0)   →  50.0
        breakeven_probability(1.25)  →  80.0
    """
    if decimal_odds <= 0.0:
        return 0.0
    return 100.0 / decimal_odds


def implied_probability(decimal_odds: float) -> float:
    """Bookmaker-implied probability ``1 / d`` as a fraction (vig-inclusive)."""
    return breakeven_probability(decimal_odds) / 100.0


def probability_edge(win_prob_pct: float, decimal_odds: float) -> float:
    """Percentage-point gap between the user's probability and breakeven."""
    return win_prob_pct - breakeven_probability(decimal_odds)


def expected_value(decimal_odds: float, win_prob: float, stake: float) -> EVResult:
    """Expected value of staking ``stake`` at ``decimal_odds``.

    Args:
        decimal_odds: Decimal odds including the stake.
        win_prob: Probability of winning, in ``[0, 1]``.
        stake: Amount staked.

    Examples::

        expected_value(2.0, 0.55, 100)  →  ev_percent 0.10, ev_absolute 10.0
        expected_value(1.8, 0.50, 100)  →  ev_percent -0.10, ev_absolute -10.0
    """
    ev = ev_per_unit(decimal_odds, win_prob)
    return EVResult(
        ev_percent=ev,
        ev_absolute=stake * ev,
        breakeven_prob=breakeven_probability(decimal_odds),
        edge=probability_edge(win_prob * 100.0, decimal_odds),
    )
