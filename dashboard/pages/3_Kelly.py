"""Kelly criterion staking calculator."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import numpy as np
import plotly.graph_objects as go
import streamlit as st

from betjournal.core.expected_value import breakeven_probability
from betjournal.core.kelly import DEFAULT_SAFETY_FRACTION, full_kelly_fraction, kelly_stake
from dashboard.utils import fmt_money, sidebar_bankroll

st.set_page_config(page_title="Kelly | Bet Journal", layout="wide")
bankroll_default = sidebar_bankroll()

st.title("Kelly Criterion Calculator")

col1, col2 = st.columns(2)
with col1:
    odds = st.number_input("Decimal Odds", min_value=1.0, value=2.0, step=0.01)
    win_prob_pct = st.slider("Win Probability (%)", 0.0, 100.0, 55.0, step=0.5)
with col2:
    bankroll = st.number_input("Bankroll ($)", min_value=0.0, value=float(bankroll_default), step=100.0)
    safety = st.select_slider(
        "Kelly Fraction",
        options=[0.1, 0.25, 0.5, 0.75, 1.0],
        value=DEFAULT_SAFETY_FRACTION,
        help="1.0 = full Kelly, 0.5 = half Kelly",
    )

result = kelly_stake(odds, win_prob_pct / 100.0, bankroll, safety)

st.markdown("---")
c1, c2, c3 = st.columns(3)
c1.metric("Recommended Stake", fmt_money(result.stake))
c2.metric("Bankroll %", f"{result.fraction * 100:.2f}%")
c3.metric("Full Kelly", f"{result.full_fraction * 100:.2f}%")

if odds <= 1.0:
    st.warning("Odds of 1.00 pay nothing; no stake is recommended.")
elif not result.has_edge:
    st.error(
        f"No edge: breakeven is {breakeven_probability(odds):.1f}%, "
        f"your estimate is {win_prob_pct:.1f}%. Do not bet."
    )
else:
    st.success(f"Positive edge. Stake {fmt_money(result.stake)} at {safety}x Kelly.")

# --- Growth curve over stake fraction ---
st.subheader("Expected Log Growth by Stake Size")
if odds > 1.0 and 0.0 < win_prob_pct < 100.0:
    p = win_prob_pct / 100.0
    b = odds - 1.0
    fractions = np.linspace(0.0, 0.99, 100)
    growth = p * np.log1p(fractions * b) + (1.0 - p) * np.log1p(-fractions)
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=fractions * 100, y=growth, mode="lines", name="E[log growth]"))
    f_star = full_kelly_fraction(odds, p)
    if f_star > 0:
        fig.add_vline(x=f_star * 100, line_dash="dash", line_color="green", annotation_text="Full Kelly")
    if result.fraction > 0:
        fig.add_vline(x=result.fraction * 100, line_dash="dot", line_color="orange", annotation_text=f"{safety}x")
    fig.add_hline(y=0, line_color="gray")
    fig.update_layout(xaxis_title="Stake (% of bankroll)", yaxis_title="Expected log growth per bet", height=340)
    st.plotly_chart(fig, use_container_width=True)
else:
    st.caption("Enter odds above 1.00 and a probability strictly between 0 and 100.")
