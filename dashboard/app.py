"""
Streamlit Dashboard for the Bet Journal
Overview of bankroll, exposure and recent activity
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from betjournal.services.performance import (
    active_exposure,
    bankroll_curve,
    calculate_stats,
    recent_bets,
    sport_performance,
)
from dashboard.utils import RESULT_ICONS, fmt_money, load_bets, sidebar_bankroll

st.set_page_config(
    page_title="Bet Journal",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ==============================================================================
# SIDEBAR
# ==============================================================================

with st.sidebar:
    st.title("📒 Bet Journal")
    st.caption("Tracking, analytics and staking tools")
    st.markdown("---")

bankroll = sidebar_bankroll()
bets = load_bets()
stats = calculate_stats(bets, bankroll)


# ==============================================================================
# OVERVIEW
# ==============================================================================

st.title("Overview")

if not bets:
    st.info("Journal is empty. Log your first bet on the Journal page.")
    st.stop()

exposure = active_exposure(bets)

c1, c2, c3, c4 = st.columns(4)
c1.metric(
    "Total Bankroll",
    fmt_money(stats.current_bankroll),
    delta=fmt_money(stats.profit),
)
c2.metric("Active Exposure", fmt_money(exposure["pending_stake"]))
c3.metric("Yield (ROI)", f"{stats.yield_pct:.2f}%")
c4.metric("Pending Bets", exposure["pending_count"])

st.markdown("---")

# --- Bankroll growth ---
st.subheader("Bankroll Growth")
curve = bankroll_curve(bets, bankroll)
fig = go.Figure()
fig.add_trace(go.Scatter(
    x=[p["name"] for p in curve],
    y=[p["balance"] for p in curve],
    mode="lines",
    fill="tozeroy",
    line=dict(color="green" if stats.profit >= 0 else "red"),
    customdata=[p["date"] or "" for p in curve],
    hovertemplate="%{x} (%{customdata})<br>$%{y:,.2f}<extra></extra>",
))
fig.add_hline(y=bankroll, line_dash="dash", line_color="gray")
fig.update_layout(xaxis_title="", yaxis_title="Bankroll ($)", height=320)
st.plotly_chart(fig, use_container_width=True)

left, right = st.columns(2)

# --- Recent activity ---
with left:
    st.subheader("Recent Activity")
    for b in recent_bets(bets, 5):
        icon = RESULT_ICONS.get(b.result.value, "")
        st.markdown(
            f"{icon} **{b.selection or b.match}** ({b.match}) "
            f"@ {b.odds:.2f} | {fmt_money(b.stake)} | {b.date.isoformat()}"
        )

# --- Performance by sport ---
with right:
    st.subheader("Performance by Sport")
    rows = sport_performance(bets)
    if rows:
        df = pd.DataFrame(rows)
        fig_sport = px.bar(
            df, x="sport", y="profit",
            color=df["profit"] >= 0,
            color_discrete_map={True: "green", False: "red"},
            hover_data=["roi", "count"],
        )
        fig_sport.update_layout(showlegend=False, height=300, xaxis_title="", yaxis_title="Profit ($)")
        st.plotly_chart(fig_sport, use_container_width=True)
    else:
        st.info("No settled bets yet")


# Footer
st.markdown("---")
st.caption("Bet Journal | Built with Streamlit")
