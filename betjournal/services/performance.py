"""
Performance analytics computation.

All public functions receive a list of :class:`~betjournal.schemas.Bet`
records and return dataclasses or plain dicts, so they can be called from the
dashboard pages or from scripts without importing any Streamlit code.

Pending bets are ignored by every aggregate here.  Per-bet profit always
comes from :func:`betjournal.core.settlement.realized_profit`.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional

from betjournal.core.settlement import BetResult, is_settled, realized_profit, win_credit
from betjournal.schemas import Bet

logger = logging.getLogger(__name__)

#: Group keys accepted by :func:`group_performance`.
GROUP_KEYS = ("sport", "market_type", "confidence", "emotional_state", "bookmaker", "odds_range")

_ODDS_BUCKETS = [
    (1.50, "1.01 - 1.49"),
    (2.00, "1.50 - 1.99"),
    (2.50, "2.00 - 2.49"),
    (3.00, "2.50 - 2.99"),
    (4.00, "3.00 - 3.99"),
]

_STAKE_BUCKETS = [
    (50.0, "<$50"),
    (100.0, "$50-100"),
    (250.0, "$101-250"),
    (500.0, "$251-500"),
    (1000.0, "$501-1k"),
]


@dataclass
class JournalStats:
    total_bets: int          # settled bets only
    pending_bets: int
    total_stake: float
    total_return: float      # Σ(stake + profit) over settled bets
    profit: float
    roi: float               # percent
    yield_pct: float         # percent of turnover; same basis as roi
    win_rate: float          # percent, half-wins count 0.5
    max_drawdown: float      # percent, peak-to-trough of the running bankroll
    current_bankroll: float
    average_odds: float      # stake-weighted

    def to_dict(self) -> Dict:
        return {k: (round(v, 4) if isinstance(v, float) else v) for k, v in asdict(self).items()}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _safe_pct(numerator: float, denominator: float) -> float:
    return numerator / denominator * 100.0 if denominator > 0 else 0.0


def _settled(bets: Iterable[Bet]) -> List[Bet]:
    return [b for b in bets if is_settled(b.result)]


def _chronological(bets: Iterable[Bet]) -> List[Bet]:
    # sorted() is stable, so same-day bets keep their journal order
    return sorted(bets, key=lambda b: b.date)


def _profit(bet: Bet) -> float:
    return realized_profit(bet.result, bet.stake, bet.odds)


def _max_drawdown(bets: List[Bet], initial_bankroll: float) -> float:
    """Largest (peak − running) / peak seen while folding ``bets`` in order."""
    running = peak = initial_bankroll
    max_dd = 0.0
    for b in bets:
        running += _profit(b)
        if running > peak:
            peak = running
        if peak > 0:
            dd = (peak - running) / peak
            if dd > max_dd:
                max_dd = dd
    return max_dd


# ---------------------------------------------------------------------------
# calculate_stats / bankroll_curve
# ---------------------------------------------------------------------------

def calculate_stats(bets: List[Bet], initial_bankroll: float = 10_000.0) -> JournalStats:
    """
    Aggregate performance over every settled bet.

    Sums are order-independent.  Drawdown is folded in date order so it
    reflects the bankroll the bettor actually saw.  An empty journal gives
    all-zero metrics and ``current_bankroll == initial_bankroll``.
    """
    settled = _chronological(_settled(bets))
    pending = sum(1 for b in bets if not is_settled(b.result))

    total_stake = sum(b.stake for b in settled)
    profit = sum(_profit(b) for b in settled)
    wins = sum(win_credit(b.result) for b in settled)
    weighted_odds = sum(b.odds * b.stake for b in settled)

    return JournalStats(
        total_bets=len(settled),
        pending_bets=pending,
        total_stake=total_stake,
        total_return=total_stake + profit,
        profit=profit,
        roi=_safe_pct(profit, total_stake),
        yield_pct=_safe_pct(profit, total_stake),
        win_rate=_safe_pct(wins, len(settled)),
        max_drawdown=_max_drawdown(settled, initial_bankroll) * 100.0,
        current_bankroll=initial_bankroll + profit,
        average_odds=weighted_odds / total_stake if total_stake > 0 else 0.0,
    )


def bankroll_curve(bets: List[Bet], initial_bankroll: float = 10_000.0) -> List[Dict]:
    """
    Running bankroll after each settled bet, oldest first.

    The first point is always ``{"name": "Start", ...}`` at the baseline.
    """
    balance = initial_bankroll
    points = [{"name": "Start", "date": None, "balance": round(initial_bankroll, 2), "change": 0.0}]
    for i, b in enumerate(_chronological(_settled(bets)), start=1):
        change = _profit(b)
        balance += change
        points.append({
            "name": f"Bet {i}",
            "date": b.date.isoformat(),
            "balance": round(balance, 2),
            "change": round(change, 2),
        })
    return points


# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------

def odds_range_bucket(odds: float) -> str:
    for upper, label in _ODDS_BUCKETS:
        if odds < upper:
            return label
    return "4.00+"


def stake_bucket(stake: float) -> str:
    for upper, label in _STAKE_BUCKETS:
        if stake <= upper:
            return label
    return "$1k+"


def segment_stats(bets: List[Bet]) -> Dict:
    """bets / wins / win_rate / profit / avg_odds for one segment (settled only)."""
    settled = _settled(bets)
    n = len(settled)
    wins = sum(win_credit(b.result) for b in settled)
    return {
        "bets": n,
        "wins": wins,
        "win_rate": round(_safe_pct(wins, n), 2),
        "profit": round(sum(_profit(b) for b in settled), 2),
        "avg_odds": round(sum(b.odds for b in settled) / n, 3) if n else 0.0,
    }


def _group_label(bet: Bet, key: str) -> str:
    if key == "odds_range":
        return odds_range_bucket(bet.odds)
    value = getattr(bet, key, None)
    if value is None or value == "":
        return "Unknown"
    return value.value if hasattr(value, "value") else str(value)


def group_performance(bets: List[Bet], key: str) -> List[Dict]:
    """
    Segment the journal by ``key`` and compute :func:`segment_stats` per group.

    Missing or blank values fall into ``"Unknown"``.  Rows are sorted by
    settled volume, largest first.
    """
    if key not in GROUP_KEYS:
        raise ValueError(f"Unknown group key {key!r}; expected one of {GROUP_KEYS}")

    groups: Dict[str, List[Bet]] = {}
    for b in bets:
        groups.setdefault(_group_label(b, key), []).append(b)

    rows = [{"group": label, **segment_stats(lst)} for label, lst in groups.items()]
    rows.sort(key=lambda r: r["bets"], reverse=True)
    return rows


def stake_distribution(bets: List[Bet]) -> List[Dict]:
    """Count of bets (any status) per stake bucket, in bucket order."""
    labels = [label for _, label in _STAKE_BUCKETS] + ["$1k+"]
    counts = {label: 0 for label in labels}
    for b in bets:
        counts[stake_bucket(b.stake)] += 1
    return [{"range": label, "count": counts[label]} for label in labels]


def sport_performance(bets: List[Bet]) -> List[Dict]:
    """Per-sport profit / ROI / count over settled bets, best sport first."""
    by_sport: Dict[str, List[Bet]] = {}
    for b in _settled(bets):
        by_sport.setdefault(b.sport or "Unknown", []).append(b)

    rows = []
    for sport, lst in by_sport.items():
        staked = sum(b.stake for b in lst)
        profit = sum(_profit(b) for b in lst)
        rows.append({
            "sport": sport,
            "profit": round(profit, 2),
            "roi": round(_safe_pct(profit, staked), 2),
            "count": len(lst),
        })
    rows.sort(key=lambda r: r["profit"], reverse=True)
    return rows


def active_exposure(bets: List[Bet]) -> Dict:
    """Money currently at risk on unsettled bets."""
    pending = [b for b in bets if BetResult(b.result) is BetResult.PENDING]
    return {
        "pending_stake": round(sum(b.stake for b in pending), 2),
        "pending_count": len(pending),
    }


def recent_bets(bets: List[Bet], n: int = 5) -> List[Bet]:
    """The ``n`` most recent bets by date, newest first."""
    return sorted(bets, key=lambda b: b.date, reverse=True)[:n]


def biggest_result(bets: List[Bet], best: bool = True) -> Optional[Bet]:
    """Largest single win (``best=True``) or loss among settled bets."""
    settled = _settled(bets)
    if not settled:
        return None
    pick = max if best else min
    return pick(settled, key=_profit)
