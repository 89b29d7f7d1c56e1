"""Analytics page: aggregate stats, bankroll curve and segment tables."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from betjournal.services.performance import (
    bankroll_curve,
    calculate_stats,
    group_performance,
    stake_distribution,
)
from dashboard.utils import fmt_money, load_bets, sidebar_bankroll

st.set_page_config(page_title="Analytics | Bet Journal", layout="wide")
bankroll = sidebar_bankroll()

st.title("Performance Analytics")

bets = load_bets()
stats = calculate_stats(bets, bankroll)

if stats.total_bets == 0:
    st.info("No settled bets yet.")
    st.stop()

# --- Key metrics ---
c1, c2, c3, c4, c5, c6 = st.columns(6)
c1.metric("Settled Bets", stats.total_bets)
c2.metric("Profit", fmt_money(stats.profit))
c3.metric("ROI", f"{stats.roi:.2f}%")
c4.metric("Win Rate", f"{stats.win_rate:.1f}%")
c5.metric("Max Drawdown", f"{stats.max_drawdown:.1f}%")
c6.metric("Avg Odds", f"{stats.average_odds:.2f}")

st.caption(
    f"Staked {fmt_money(stats.total_stake)} | Returned {fmt_money(stats.total_return)} | "
    f"{stats.pending_bets} pending"
)

st.markdown("---")

left, right = st.columns([2, 1])

with left:
    st.subheader("Bankroll Growth")
    curve = pd.DataFrame(bankroll_curve(bets, bankroll))
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=curve["name"], y=curve["balance"], mode="lines+markers",
        line=dict(color="green" if stats.profit >= 0 else "red"),
    ))
    fig.add_hline(y=bankroll, line_dash="dash", line_color="gray")
    fig.update_layout(yaxis_title="Bankroll ($)", height=340)
    st.plotly_chart(fig, use_container_width=True)

with right:
    st.subheader("Stake Distribution")
    dist = pd.DataFrame(stake_distribution(bets))
    fig_dist = px.bar(dist, x="range", y="count")
    fig_dist.update_layout(height=340, xaxis_title="", yaxis_title="Bets")
    st.plotly_chart(fig_dist, use_container_width=True)

st.markdown("---")
st.subheader("Segment Performance")

segments = [
    ("Sport", "sport"),
    ("Market Type", "market_type"),
    ("Odds Range", "odds_range"),
    ("Confidence", "confidence"),
    ("Emotional State", "emotional_state"),
    ("Bookmaker", "bookmaker"),
]

cols = st.columns(2)
for i, (title, key) in enumerate(segments):
    with cols[i % 2]:
        st.markdown(f"**By {title}**")
        df = pd.DataFrame(group_performance(bets, key))
        if df.empty:
            st.caption("No data")
            continue
        st.dataframe(
            df.rename(columns={
                "group": title,
                "bets": "Bets",
                "wins": "Wins",
                "win_rate": "Win Rate %",
                "profit": "Profit ($)",
                "avg_odds": "Avg Odds",
            }),
            use_container_width=True,
            hide_index=True,
        )
