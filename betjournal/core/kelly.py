"""Kelly criterion sizing: the single source of truth for bet sizing math.

All functions here are **pure**: no I/O, no database, no logging.
Import from this module; never reimplement Kelly locally in services or
dashboard pages.

Design decisions
----------------
* **Fractional Kelly** is expressed as a *multiplier* (``safety_fraction``)
  rather than a divisor: 0.5 = half-Kelly, 0.25 = quarter-Kelly, 1.0 = full
  Kelly.  This matches how the staking slider is presented to the user.
* **Malformed odds never raise.**  Decimal odds ≤ 1 leave no profit per unit
  (``b ≤ 0``), and the closed form would divide by zero or by a negative
  number.  The engine returns a zero recommendation instead, so a half-typed
  form field can never crash a page.
* **Negative edge clamps to zero.**  A negative Kelly fraction is a
  recommendation to take the other side of the bet, which a bettor cannot do
  at the same price.  The raw full-Kelly value is still reported so the UI
  can show *how* negative the edge is.

Run tests with::

    pytest tests/test_kelly.py -v
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

#: Default safety multiplier applied to full Kelly (half-Kelly).
DEFAULT_SAFETY_FRACTION: Final[float] = 0.5


@dataclass(frozen=True)
class KellyResult:
    """Output of :func:`kelly_stake`."""

    stake: float            # Amount to risk, never negative
    fraction: float         # Applied fraction of bankroll, never negative
    full_fraction: float    # Unclamped full-Kelly fraction (may be negative)

    @property
    def has_edge(self) -> bool:
        return self.full_fraction > 0.0

    def to_dict(self) -> dict:
        return {
            "stake": round(self.stake, 2),
            "fraction": round(self.fraction, 6),
            "full_fraction": round(self.full_fraction, 6),
            "has_edge": self.has_edge,
        }


_NO_BET: Final[KellyResult] = KellyResult(stake=0.0, fraction=0.0, full_fraction=0.0)


def full_kelly_fraction(decimal_odds: float, win_prob: float) -> float:
    """Unclamped full-Kelly fraction ``f* = (b·p − q) / b``.

    The Kelly criterion maximises the expected logarithm of wealth for a
    binary bet paying ``b`` per unit with probability ``p`` and losing the
    stake with probability ``q = 1 − p`` (Kelly 1956).

    Returns 0.0 when ``b = decimal_odds − 1 ≤ 0``.

    Examples::

        full_kelly_fraction(2.0, 0.55)  →  0.10
        full_kelly_fraction(2.0, 0.40)  → -0.20
        full_kelly_fraction(1.0, 0.99)  →  0.00  (no payout, no bet)
    """
    b = decimal_odds - 1.0
    if b <= 0.0:
        return 0.0
    q = 1.0 - win_prob
    return (b * win_prob - q) / b


def kelly_stake(
    decimal_odds: float,
    win_prob: float,
    bankroll: float,
    safety_fraction: float = DEFAULT_SAFETY_FRACTION,
) -> KellyResult:
    """Compute the fractional Kelly stake for a win/loss bet.

    Args:
        decimal_odds: Decimal odds for the bet.  Profit per unit = odds − 1.
        win_prob: Estimated probability of winning, in ``[0, 1]``.
        bankroll: Capital the fraction is applied to.
        safety_fraction: Multiplier on full Kelly, in ``(0, 1]``.

    Returns:
        :class:`KellyResult` with ``stake = max(0, f* · safety · bankroll)``.
        Odds ≤ 1 yield an all-zero result.

    Examples::

        kelly_stake(2.0, 0.55, 10_000, 0.5)   →  stake 500.0, fraction 0.05
        kelly_stake(2.0, 0.40, 10_000, 0.5)   →  stake   0.0, fraction 0.0
        kelly_stake(0.9, 0.90, 10_000, 1.0)   →  stake   0.0 (malformed odds)
    """
    if decimal_odds - 1.0 <= 0.0:
        return _NO_BET

    full = full_kelly_fraction(decimal_odds, win_prob)
    applied = full * safety_fraction
    stake = max(0.0, applied * bankroll)

    return KellyResult(
        stake=stake,
        fraction=max(0.0, applied),
        full_fraction=full,
    )
