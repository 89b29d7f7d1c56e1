"""Cycle / ladder betting page."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import pandas as pd
import streamlit as st

from betjournal.services.cycle import (
    CycleTransitionError,
    clear_history,
    configure,
    cycle_summary,
    new_cycle,
    record_result,
    reset_cycle,
    start_cycle,
)
from dashboard.utils import fmt_money, get_journal, sidebar_bankroll

st.set_page_config(page_title="Cycle | Bet Journal", layout="wide")
sidebar_bankroll()

st.title("Cycle / Ladder Engine")
st.caption("Roll the whole bankroll forward at fixed odds. One loss ends the cycle.")

journal = get_journal()
state = journal.get_cycle_state() or new_cycle()


def _apply(transition, *args):
    """Run a transition, persist the new state and rerun the page."""
    try:
        updated = transition(state, *args)
    except CycleTransitionError as exc:
        st.error(str(exc))
        return
    journal.save_cycle_state(updated)
    st.rerun()


summary = cycle_summary(state)

left, right = st.columns([1, 2])

# --- Configuration ---
with left:
    st.subheader("Configuration")
    idle = state.cycle_status == "IDLE"
    with st.form("cycle_config"):
        capital = st.number_input("Start Capital ($)", min_value=1.0, value=float(state.start_capital), step=1000.0, disabled=not idle)
        steps = st.number_input("Steps", min_value=1, max_value=30, value=int(state.steps), disabled=not idle)
        odds = st.number_input("Odds per Step", min_value=1.01, value=float(state.base_odds), step=0.05, disabled=not idle)
        if st.form_submit_button("Update Ladder", disabled=not idle):
            _apply(configure, capital, int(steps), odds)

    st.metric("Target Multiplier", f"{summary['target_multiplier']:.2f}x")
    st.metric("Target Profit", fmt_money(summary["target_profit"]))

    b1, b2 = st.columns(2)
    if idle:
        if b1.button("Start Cycle", type="primary"):
            _apply(start_cycle)
    if b2.button("Reset"):
        _apply(reset_cycle)

# --- Live cycle ---
with right:
    status = state.cycle_status
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Status", status)
    c2.metric("Step", f"{state.current_step} / {state.steps}")
    c3.metric("Cycle Bankroll", fmt_money(summary["cycle_bankroll"]))
    c4.metric("Current Profit", fmt_money(summary["current_profit"]))

    if status == "ACTIVE":
        step = state.ladder[state.current_step - 1]
        st.info(f"Step {step.step}: stake {fmt_money(step.stake)} to return {fmt_money(step.target)}")
        w, l = st.columns(2)
        if w.button("✅ WIN", type="primary", use_container_width=True):
            _apply(record_result, "WIN")
        if l.button("❌ LOSS", use_container_width=True):
            _apply(record_result, "LOSS")
    elif status == "COMPLETED":
        st.success(f"Cycle completed. Bankroll {fmt_money(state.cycle_bankroll)}.")
    elif status == "FAILED":
        st.error("Cycle failed. The running bankroll was lost.")

    ladder_df = pd.DataFrame([s.model_dump() for s in state.ladder])
    if not ladder_df.empty:
        st.dataframe(
            ladder_df.rename(columns={"step": "Step", "stake": "Stake ($)", "target": "Target ($)", "status": "Status"}),
            use_container_width=True,
            hide_index=True,
        )

st.markdown("---")
st.subheader("Cycle History")
if state.history:
    hist = pd.DataFrame([h.model_dump(mode="json") for h in reversed(state.history)])
    st.dataframe(hist.drop(columns=["id"]), use_container_width=True, hide_index=True)
    st.caption(
        f"{summary['completed_cycles']} completed | {summary['failed_cycles']} failed"
    )
    if st.button("Clear History"):
        _apply(clear_history)
else:
    st.info("No finished cycles yet.")
