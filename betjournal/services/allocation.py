"""
Capital allocation planner.

Combines the live betting bankroll with the user's other asset values into
a net-worth picture, tracks progress toward a wealth goal, and splits
realised betting profit across buckets according to the allocation policy.

All functions are pure over :class:`~betjournal.schemas.AllocationState`;
persistence is the journal service's job.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from betjournal.schemas import AllocationState

logger = logging.getLogger(__name__)

MILESTONES = [
    (10_000.0, "$10K Milestone"),
    (25_000.0, "$25K Milestone"),
    (50_000.0, "$50K Milestone"),
    (75_000.0, "$75K Milestone"),
    (100_000.0, "$100K GOAL"),
]

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_POLICY_BUCKETS = [
    ("betting", "betting_split", "Reinvest in Betting Bankroll"),
    ("crypto", "crypto_split", "Crypto Portfolio"),
    ("cash", "cash_split", "Cash Reserves"),
    ("emergency", "emergency_split", "Emergency Fund"),
]


def _share(value: float, total: float) -> float:
    return value / total * 100.0 if total != 0 else 0.0


def policy_total(state: AllocationState) -> float:
    p = state.policy
    return p.betting_split + p.crypto_split + p.cash_split + p.emergency_split


def total_distributed(state: AllocationState) -> float:
    """Sum of every scheduled monthly amount across all years."""
    return sum(sum(months) for months in state.monthly_schedule.values())


def year_schedule(state: AllocationState, year: int) -> List[float]:
    """Twelve monthly amounts for ``year``; zeros when nothing is scheduled."""
    return list(state.monthly_schedule.get(str(year), [0.0] * 12))


def update_schedule(state: AllocationState, year: int, month_index: int, amount: float) -> AllocationState:
    """Return a copy of ``state`` with one scheduled month replaced."""
    if not 0 <= month_index < 12:
        raise ValueError(f"month_index must be 0-11, got {month_index}")
    months = year_schedule(state, year)
    months[month_index] = float(amount)
    schedule = dict(state.monthly_schedule)
    schedule[str(year)] = months
    logger.debug("Scheduled %.2f for %s %d", amount, MONTHS[month_index], year)
    return state.model_copy(update={"monthly_schedule": schedule})


def summarize_allocation(
    state: AllocationState,
    betting_bankroll: float,
    betting_profit: float,
    as_of: Optional[date] = None,
) -> Dict:
    """
    Net worth, goal progress, growth and profit distribution in one dict.

    Args:
        state: Planner inputs (assets, policy, settings, schedule).
        betting_bankroll: Current bankroll from the stats engine.
        betting_profit: Realised betting profit from the stats engine.
        as_of: Reference date for the ``current_year`` field.
    """
    assets = state.assets
    settings = state.settings

    holdings = {
        "betting_bankroll": betting_bankroll,
        "crypto": assets.crypto,
        "real_estate": assets.real_estate,
        "cash": assets.cash,
        "other": assets.other,
    }
    net_worth = sum(holdings.values())

    monthly_growth = net_worth - settings.start_net_worth
    monthly_growth_pct = _share(monthly_growth, settings.start_net_worth) if settings.start_net_worth > 0 else 0.0
    annualized_growth_pct = ((1.0 + monthly_growth_pct / 100.0) ** 12 - 1.0) * 100.0

    progress = _share(net_worth, settings.target_goal) if settings.target_goal > 0 else 0.0

    distribution = []
    for bucket, attr, label in _POLICY_BUCKETS:
        pct = getattr(state.policy, attr)
        usd = betting_profit * pct / 100.0
        distribution.append({
            "bucket": bucket,
            "label": label,
            "pct": pct,
            "amount_usd": round(usd, 2),
            "amount_local": round(usd * settings.exchange_rate, 2),
        })

    distributed = total_distributed(state)
    total_pct = policy_total(state)

    return {
        "holdings": {k: round(v, 2) for k, v in holdings.items()},
        "shares": {k: round(_share(v, net_worth), 2) for k, v in holdings.items()},
        "net_worth": round(net_worth, 2),
        "goal_progress": round(min(progress, 100.0), 2),
        "remaining_to_goal": round(settings.target_goal - net_worth, 2),
        "monthly_growth": round(monthly_growth, 2),
        "monthly_growth_pct": round(monthly_growth_pct, 2),
        "annualized_growth_pct": round(annualized_growth_pct, 2),
        "milestones": [
            {"label": label, "target": target, "achieved": net_worth >= target}
            for target, label in MILESTONES
        ],
        "distribution": distribution,
        "policy_total": total_pct,
        "policy_valid": abs(total_pct - 100.0) < 1e-9,
        "total_distributed": round(distributed, 2),
        "unallocated_profit": round(betting_profit - distributed, 2),
        "reinvest_due": settings.auto_reinvest and betting_profit >= settings.reinvest_threshold,
        "current_year": (as_of or date.today()).year,
    }
