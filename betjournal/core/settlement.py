"""Bet settlement arithmetic: the single source of truth for realized P&L.

All functions here are **pure**: no I/O, no logging.  The stats engine, the
segmentation tables and the dashboard all settle bets through
:func:`realized_profit`; never re-derive the per-outcome formulas locally.

Outcome table (decimal odds, ``b = odds − 1``)::

    WIN        +stake · b
    HALF_WIN   +stake · b / 2
    PUSH        0
    HALF_LOSS  −stake / 2
    LOSS       −stake
    PENDING     0   (and excluded from every aggregate)

Half outcomes come from Asian-handicap quarter lines, where half the stake
rides on each of two adjacent lines.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class BetResult(str, Enum):
    """Settlement state of a journal entry."""

    WIN = "WIN"
    LOSS = "LOSS"
    PUSH = "PUSH"
    PENDING = "PENDING"
    HALF_WIN = "HALF_WIN"
    HALF_LOSS = "HALF_LOSS"


#: Fraction of a full win credited to the win-rate numerator per outcome.
WIN_CREDIT: Final[dict] = {
    BetResult.WIN: 1.0,
    BetResult.HALF_WIN: 0.5,
}


def is_settled(result: BetResult | str) -> bool:
    """True for every outcome except ``PENDING``."""
    return BetResult(result) is not BetResult.PENDING


def realized_profit(result: BetResult | str, stake: float, decimal_odds: float) -> float:
    """Net profit (positive) or loss (negative) realized by a bet.

    Args:
        result: Settlement outcome.  Plain strings such as ``"WIN"`` are
            accepted so stored documents can be settled without conversion.
        stake: Amount risked.
        decimal_odds: Decimal odds including the stake (2.0 = even money).

    Returns:
        Profit in the stake's currency.  ``PUSH`` and ``PENDING`` return 0.0.

    Examples::

        realized_profit("WIN", 100, 2.5)        →  150.0
        realized_profit("HALF_WIN", 100, 2.5)   →   75.0
        realized_profit("HALF_LOSS", 100, 2.5)  →  -50.0
        realized_profit("LOSS", 100, 2.5)       → -100.0
    """
    result = BetResult(result)
    if result is BetResult.WIN:
        return stake * (decimal_odds - 1.0)
    if result is BetResult.HALF_WIN:
        return stake * (decimal_odds - 1.0) / 2.0
    if result is BetResult.LOSS:
        return -stake
    if result is BetResult.HALF_LOSS:
        return -stake / 2.0
    return 0.0


def win_credit(result: BetResult | str) -> float:
    """Win-rate credit: 1 for a win, 0.5 for a half-win, 0 otherwise."""
    return WIN_CREDIT.get(BetResult(result), 0.0)
