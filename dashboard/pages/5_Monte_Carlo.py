"""Monte Carlo bankroll projection page."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from betjournal.services.monte_carlo import MonteCarloSimulator, SimulationParams
from dashboard.utils import fmt_money, sidebar_bankroll

st.set_page_config(page_title="Monte Carlo | Bet Journal", layout="wide")
bankroll_default = sidebar_bankroll()

st.title("Monte Carlo Simulator")
st.caption("Projects many bankroll paths under a fixed win rate, price and stake size.")

with st.form("mc_form"):
    col1, col2, col3 = st.columns(3)
    with col1:
        bankroll = st.number_input("Starting Bankroll ($)", min_value=1.0, value=float(bankroll_default or 10_000.0), step=500.0)
        win_prob = st.slider("Win Rate", 0.0, 1.0, 0.55, step=0.01)
    with col2:
        avg_odds = st.number_input("Average Odds", min_value=1.01, value=1.95, step=0.01)
        stake_pct = st.slider("Stake (% of bankroll)", 0.1, 25.0, 2.0, step=0.1)
    with col3:
        num_bets = st.number_input("Bets per Run", min_value=10, max_value=5000, value=500, step=10)
        num_runs = st.number_input("Runs", min_value=1, max_value=10_000, value=50, step=10)
    seed_text = st.text_input("Seed (optional)", value="")
    submitted = st.form_submit_button("Run Simulation", type="primary")

if not submitted and "mc_result" not in st.session_state:
    st.info("Set the parameters and run the simulation.")
    st.stop()

if submitted:
    params = SimulationParams(
        bankroll=bankroll,
        win_prob=win_prob,
        avg_odds=avg_odds,
        stake_fraction=stake_pct / 100.0,
        num_bets=int(num_bets),
        num_runs=int(num_runs),
    )
    seed = int(seed_text) if seed_text.strip().isdigit() else None
    st.session_state["mc_result"] = MonteCarloSimulator().run(params, seed=seed)

result = st.session_state["mc_result"]

c1, c2, c3, c4 = st.columns(4)
c1.metric("Profit Probability", f"{result.profit_probability:.1f}%")
c2.metric("Median Ending", fmt_money(result.median_ending))
c3.metric("Ruin Probability", f"{result.ruin_probability:.1f}%")
c4.metric("5th / 95th pct", f"{fmt_money(result.percentile_ending(5))} / {fmt_money(result.percentile_ending(95))}")

series = pd.DataFrame(result.chart_series(max_runs=20))
fig = go.Figure()
for col in series.columns:
    if col == "step":
        continue
    fig.add_trace(go.Scatter(
        x=series["step"], y=series[col], mode="lines",
        line=dict(width=1), opacity=0.6, showlegend=False,
    ))
fig.add_hline(y=result.params.bankroll, line_dash="dash", line_color="gray")
fig.update_layout(xaxis_title="Bet #", yaxis_title="Bankroll ($)", height=420)
st.plotly_chart(fig, use_container_width=True)
st.caption(f"Showing {min(20, result.num_runs)} of {result.num_runs} runs.")
