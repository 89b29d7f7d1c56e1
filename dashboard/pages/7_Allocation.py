"""Capital allocation planner page."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from betjournal.schemas import AllocationPolicy, AllocationSettings, AllocationState, AssetConfig
from betjournal.services.allocation import MONTHS, summarize_allocation, update_schedule, year_schedule
from betjournal.services.performance import calculate_stats
from dashboard.utils import fmt_money, get_journal, load_bets, sidebar_bankroll

st.set_page_config(page_title="Allocation | Bet Journal", layout="wide")
bankroll = sidebar_bankroll()

st.title("Capital Allocation Engine")

journal = get_journal()
state = journal.get_allocation_state() or AllocationState()
stats = calculate_stats(load_bets(), bankroll)

# --- Inputs ---
with st.expander("Assets, policy and settings", expanded=False):
    with st.form("allocation_inputs"):
        a1, a2, a3, a4 = st.columns(4)
        crypto = a1.number_input("Crypto ($)", value=float(state.assets.crypto))
        real_estate = a2.number_input("Real Estate ($)", value=float(state.assets.real_estate))
        cash = a3.number_input("Cash ($)", value=float(state.assets.cash))
        other = a4.number_input("Other ($)", value=float(state.assets.other))

        p1, p2, p3, p4 = st.columns(4)
        betting_split = p1.number_input("Betting %", 0.0, 100.0, float(state.policy.betting_split))
        crypto_split = p2.number_input("Crypto %", 0.0, 100.0, float(state.policy.crypto_split))
        cash_split = p3.number_input("Cash %", 0.0, 100.0, float(state.policy.cash_split))
        emergency_split = p4.number_input("Emergency %", 0.0, 100.0, float(state.policy.emergency_split))

        s1, s2, s3 = st.columns(3)
        target_goal = s1.number_input("Target Goal ($)", min_value=0.0, value=float(state.settings.target_goal), step=5000.0)
        start_net_worth = s2.number_input("Start Net Worth ($)", value=float(state.settings.start_net_worth), step=1000.0)
        exchange_rate = s3.number_input("Exchange Rate (local per USD)", min_value=0.0, value=float(state.settings.exchange_rate))
        s4, s5, s6 = st.columns(3)
        auto_reinvest = s4.checkbox("Auto Reinvest", value=state.settings.auto_reinvest)
        reinvest_threshold = s5.number_input("Reinvest Threshold ($)", min_value=0.0, value=float(state.settings.reinvest_threshold))
        frequencies = ["Daily", "Weekly", "Monthly"]
        frequency = s6.selectbox("Frequency", frequencies, index=frequencies.index(state.settings.frequency))

        if st.form_submit_button("Save", type="primary"):
            state = state.model_copy(update={
                "assets": AssetConfig(crypto=crypto, real_estate=real_estate, cash=cash, other=other),
                "policy": AllocationPolicy(
                    betting_split=betting_split,
                    crypto_split=crypto_split,
                    cash_split=cash_split,
                    emergency_split=emergency_split,
                ),
                "settings": AllocationSettings(
                    target_goal=target_goal,
                    start_net_worth=start_net_worth,
                    exchange_rate=exchange_rate,
                    auto_reinvest=auto_reinvest,
                    reinvest_threshold=reinvest_threshold,
                    frequency=frequency,
                ),
            })
            journal.save_allocation_state(state)
            st.success("Allocation saved")

summary = summarize_allocation(state, stats.current_bankroll, stats.profit)

# --- Net worth ---
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Net Worth", fmt_money(summary["net_worth"]))
c2.metric("Goal Progress", f"{summary['goal_progress']:.1f}%")
c3.metric("Remaining", fmt_money(summary["remaining_to_goal"]))
c4.metric(
    "Growth vs Start",
    f"{summary['monthly_growth_pct']:+.2f}%",
    delta=f"{summary['annualized_growth_pct']:+.1f}% annualized",
)
st.progress(summary["goal_progress"] / 100.0)

left, right = st.columns(2)
with left:
    st.subheader("Asset Breakdown")
    holdings = pd.DataFrame({
        "asset": list(summary["holdings"]),
        "value": list(summary["holdings"].values()),
        "share": list(summary["shares"].values()),
    })
    st.dataframe(holdings, use_container_width=True, hide_index=True)
    positive = holdings[holdings["value"] > 0]
    if not positive.empty:
        fig = px.pie(positive, names="asset", values="value", hole=0.4)
        fig.update_layout(height=300)
        st.plotly_chart(fig, use_container_width=True)

with right:
    st.subheader("Wealth Milestones")
    for m in summary["milestones"]:
        icon = "✅" if m["achieved"] else "⬜"
        st.write(f"{icon} {m['label']} ({fmt_money(m['target'])})")

st.markdown("---")
st.subheader("Profit Distribution")
if not summary["policy_valid"]:
    st.warning(f"Policy splits add up to {summary['policy_total']:.1f}%, not 100%.")
dist = pd.DataFrame(summary["distribution"])
st.dataframe(
    dist[["label", "pct", "amount_usd", "amount_local"]].rename(columns={
        "label": "Bucket", "pct": "%", "amount_usd": "USD", "amount_local": "Local",
    }),
    use_container_width=True,
    hide_index=True,
)
d1, d2, d3 = st.columns(3)
d1.metric("Betting Profit", fmt_money(stats.profit))
d2.metric("Distributed (schedule)", fmt_money(summary["total_distributed"]))
d3.metric("Unallocated", fmt_money(summary["unallocated_profit"]))
if summary["reinvest_due"]:
    st.info(f"Profit has passed the reinvest threshold. Next transfer: {state.settings.frequency.lower()}.")

st.markdown("---")
st.subheader("Monthly Distribution Schedule")
year = st.number_input("Year", min_value=2000, max_value=2100, value=date.today().year, step=1)
months = year_schedule(state, int(year))
edited = st.data_editor(
    pd.DataFrame({"month": MONTHS, "amount": months}),
    disabled=["month"],
    hide_index=True,
    use_container_width=True,
    key=f"schedule_{year}",
)
if st.button("Save Schedule"):
    for i, amount in enumerate(edited["amount"].fillna(0.0).tolist()):
        if amount != months[i]:
            state = update_schedule(state, int(year), i, amount)
    journal.save_allocation_state(state)
    st.success(f"Schedule for {year} saved")
