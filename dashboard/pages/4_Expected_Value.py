"""Expected value calculator."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import numpy as np
import plotly.graph_objects as go
import streamlit as st

from betjournal.core.expected_value import expected_value
from dashboard.utils import fmt_money, sidebar_bankroll

st.set_page_config(page_title="Expected Value | Bet Journal", layout="wide")
sidebar_bankroll()

st.title("Expected Value Calculator")

col1, col2, col3 = st.columns(3)
odds = col1.number_input("Decimal Odds", min_value=1.0, value=2.10, step=0.01)
win_prob_pct = col2.slider("True Win Probability (%)", 0.0, 100.0, 50.0, step=0.5)
stake = col3.number_input("Stake ($)", min_value=0.0, value=100.0, step=10.0)

ev = expected_value(odds, win_prob_pct / 100.0, stake)

st.markdown("---")
c1, c2, c3, c4 = st.columns(4)
c1.metric("EV %", f"{ev.ev_percent * 100:+.2f}%")
c2.metric("Expected Profit", fmt_money(ev.ev_absolute))
c3.metric("Breakeven", f"{ev.breakeven_prob:.2f}%")
c4.metric("Edge", f"{ev.edge:+.2f} pts")

if ev.is_positive:
    st.success("+EV bet: your probability beats the price.")
elif ev.ev_percent == 0:
    st.info("Break-even bet.")
else:
    st.error("-EV bet: the price does not pay for the risk.")

st.subheader("EV across probabilities at these odds")
probs = np.linspace(0.0, 1.0, 101)
fig = go.Figure()
fig.add_trace(go.Scatter(x=probs * 100, y=(probs * odds - 1.0) * 100, mode="lines"))
fig.add_hline(y=0, line_color="gray")
fig.add_vline(x=win_prob_pct, line_dash="dash", line_color="orange", annotation_text="You")
fig.add_vline(x=ev.breakeven_prob, line_dash="dot", line_color="gray", annotation_text="Breakeven")
fig.update_layout(xaxis_title="Win probability (%)", yaxis_title="EV (%)", height=320)
st.plotly_chart(fig, use_container_width=True)
