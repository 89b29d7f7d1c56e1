"""
Cycle / ladder betting simulator.

A ladder stakes the whole running bankroll on each step at fixed odds:

    stake₁ = capital,   targetᵢ = stakeᵢ × odds,   stakeᵢ₊₁ = targetᵢ

State machine::

    IDLE ──start_cycle──▶ ACTIVE ──WIN on last step──▶ COMPLETED
                            │
                            └──────LOSS on any step──▶ FAILED

    any ──reset_cycle──▶ IDLE

Every transition is a pure function ``CycleState → CycleState``; the input
state is never mutated.  Reaching COMPLETED or FAILED appends exactly one
entry to ``history``, which only ``clear_history`` ever shrinks.

Run tests with::

    pytest tests/test_cycle.py -v
"""

import logging
from datetime import date
from typing import List, Literal

from betjournal.schemas import CycleHistoryItem, CycleState, LadderStep

logger = logging.getLogger(__name__)


class CycleTransitionError(ValueError):
    """Raised when an operation is not allowed in the current cycle status."""


# ---------------------------------------------------------------------------
# Ladder projection
# ---------------------------------------------------------------------------

def generate_ladder(capital: float, steps: int, odds: float) -> List[LadderStep]:
    """
    Project the stake/target ladder for a cycle.

    Example: ``generate_ladder(100, 3, 2.0)`` gives stakes 100/200/400 and
    targets 200/400/800.
    """
    ladder = []
    stake = capital
    for i in range(1, steps + 1):
        target = stake * odds
        ladder.append(LadderStep(step=i, stake=stake, target=target, status="PENDING"))
        stake = target
    return ladder


def new_cycle(start_capital: float = 100_000.0, steps: int = 5, base_odds: float = 2.0) -> CycleState:
    """A fresh IDLE state with its projected ladder."""
    return CycleState(
        start_capital=start_capital,
        steps=steps,
        base_odds=base_odds,
        current_step=1,
        cycle_bankroll=start_capital,
        cycle_status="IDLE",
        ladder=generate_ladder(start_capital, steps, base_odds),
    )


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def _require(state: CycleState, status: str, action: str) -> None:
    if state.cycle_status != status:
        raise CycleTransitionError(
            f"Cannot {action} while cycle is {state.cycle_status}; it must be {status}"
        )


def configure(
    state: CycleState,
    start_capital: float,
    steps: int,
    base_odds: float,
) -> CycleState:
    """Change the cycle parameters and re-project the ladder.  IDLE only."""
    _require(state, "IDLE", "configure")
    return CycleState(
        start_capital=start_capital,
        steps=steps,
        base_odds=base_odds,
        current_step=1,
        cycle_bankroll=start_capital,
        cycle_status="IDLE",
        ladder=generate_ladder(start_capital, steps, base_odds),
        history=list(state.history),
    )


def start_cycle(state: CycleState) -> CycleState:
    """IDLE → ACTIVE with counters cleared and every step PENDING."""
    _require(state, "IDLE", "start a cycle")
    ladder = state.ladder or generate_ladder(state.start_capital, state.steps, state.base_odds)
    logger.info(
        "Starting %d-step cycle: capital %.2f @ %.2f", state.steps, state.start_capital, state.base_odds
    )
    return state.model_copy(
        update={
            "cycle_status": "ACTIVE",
            "current_step": 1,
            "cycle_bankroll": state.start_capital,
            "wins": 0,
            "losses": 0,
            "ladder": [s.model_copy(update={"status": "PENDING"}) for s in ladder],
        },
        deep=True,
    )


def _history_item(state: CycleState, end_bankroll: float, status: str, steps_completed: int) -> CycleHistoryItem:
    return CycleHistoryItem(
        date=date.today(),
        start_capital=state.start_capital,
        end_bankroll=end_bankroll,
        profit=end_bankroll - state.start_capital,
        status=status,
        steps_completed=steps_completed,
        total_steps=state.steps,
    )


def record_result(state: CycleState, result: Literal["WIN", "LOSS"]) -> CycleState:
    """
    Settle the current step.

    WIN moves the bankroll to the step target and advances, or completes the
    cycle on the last step.  LOSS forfeits the whole running bankroll and
    fails the cycle.
    """
    _require(state, "ACTIVE", "record a result")
    if result not in ("WIN", "LOSS"):
        raise ValueError(f"result must be 'WIN' or 'LOSS', got {result!r}")

    idx = state.current_step - 1
    ladder = [s.model_copy() for s in state.ladder]
    step = ladder[idx]
    ladder[idx] = step.model_copy(update={"status": result})
    history = list(state.history)

    if result == "WIN":
        bankroll = step.target
        update = {"wins": state.wins + 1, "cycle_bankroll": bankroll}
        if state.current_step < state.steps:
            update["current_step"] = state.current_step + 1
        else:
            update["cycle_status"] = "COMPLETED"
            history.append(_history_item(state, bankroll, "COMPLETED", state.steps))
            logger.info("Cycle completed: %.2f → %.2f", state.start_capital, bankroll)
    else:
        update = {
            "losses": state.losses + 1,
            "cycle_bankroll": 0.0,
            "cycle_status": "FAILED",
        }
        history.append(_history_item(state, 0.0, "FAILED", state.current_step - 1))
        logger.info("Cycle failed at step %d of %d", state.current_step, state.steps)

    update["ladder"] = ladder
    update["history"] = history
    return state.model_copy(update=update)


def reset_cycle(state: CycleState) -> CycleState:
    """Any status → IDLE with a freshly projected ladder.  History is kept."""
    return state.model_copy(
        update={
            "cycle_status": "IDLE",
            "current_step": 1,
            "cycle_bankroll": state.start_capital,
            "wins": 0,
            "losses": 0,
            "ladder": generate_ladder(state.start_capital, state.steps, state.base_odds),
        }
    )


def clear_history(state: CycleState) -> CycleState:
    return state.model_copy(update={"history": []})


# ---------------------------------------------------------------------------
# Derived metrics
# ---------------------------------------------------------------------------

def target_multiplier(state: CycleState) -> float:
    return state.base_odds ** state.steps


def target_profit(state: CycleState) -> float:
    return state.start_capital * target_multiplier(state) - state.start_capital


def current_profit(state: CycleState) -> float:
    return state.cycle_bankroll - state.start_capital


def win_rate(state: CycleState) -> float:
    """Percent of settled steps won in the current cycle."""
    settled = state.wins + state.losses
    return state.wins / settled * 100.0 if settled > 0 else 0.0


def cycle_summary(state: CycleState) -> dict:
    return {
        "status": state.cycle_status,
        "current_step": state.current_step,
        "cycle_bankroll": round(state.cycle_bankroll, 2),
        "target_multiplier": round(target_multiplier(state), 4),
        "target_profit": round(target_profit(state), 2),
        "current_profit": round(current_profit(state), 2),
        "win_rate": round(win_rate(state), 2),
        "completed_cycles": sum(1 for h in state.history if h.status == "COMPLETED"),
        "failed_cycles": sum(1 for h in state.history if h.status == "FAILED"),
    }
