"""Live match prediction page."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import streamlit as st

from betjournal.schemas import MarketOdds
from betjournal.services.prediction import PredictionClient, evaluate_prediction
from dashboard.utils import fmt_money, sidebar_bankroll

st.set_page_config(page_title="Prediction | Bet Journal", layout="wide")
bankroll_default = sidebar_bankroll()

st.title("Live Prediction Engine")
st.caption("Second-half model for double chance and goal totals.")

client = PredictionClient()
if not client.configured:
    st.warning("GEMINI_API_KEY is not set. Analyses will return statistical averages.")

with st.form("match_form"):
    col1, col2 = st.columns(2)
    with col1:
        home = st.text_input("Home Team", "Arsenal")
        away = st.text_input("Away Team", "Chelsea")
        league = st.text_input("League", "Premier League")
    with col2:
        score = st.text_input("Current Score", "0-0")
        minute = st.text_input("Minute", "45")
        context = st.text_area("Context (optional)", placeholder="Red cards, injuries, momentum...")

    st.markdown("**Live odds**")
    o1, o2, o3 = st.columns(3)
    dc_odds = o1.number_input("Double Chance", min_value=1.01, value=1.40, step=0.01)
    o05_odds = o2.number_input("Over 0.5 Goals", min_value=1.01, value=1.10, step=0.01)
    o15_odds = o3.number_input("Over 1.5 Goals", min_value=1.01, value=1.50, step=0.01)

    k1, k2 = st.columns(2)
    bankroll = k1.number_input("Bankroll ($)", min_value=0.0, value=float(bankroll_default), step=500.0)
    kelly_fraction = k2.select_slider("Fractional Kelly", options=[0.1, 0.25, 0.5, 0.75, 1.0], value=0.5)

    submitted = st.form_submit_button("Analyze", type="primary")

if submitted:
    with st.spinner("Analyzing match..."):
        st.session_state["prediction"] = client.analyze_match(home, away, league, score, minute, context)

prediction = st.session_state.get("prediction")
if prediction is None:
    st.stop()

if prediction.is_fallback:
    st.warning("Model unavailable. Showing fallback averages.")

p1, p2, p3, p4 = st.columns(4)
p1.metric("Home", f"{prediction.home_win:.0%}")
p2.metric("Draw", f"{prediction.draw:.0%}")
p3.metric("Away", f"{prediction.away_win:.0%}")
p4.metric("Confidence", f"{prediction.confidence:.0f}/100")
st.info(prediction.reasoning)

market_odds = MarketOdds(double_chance=dc_odds, over_05=o05_odds, over_15=o15_odds)
cards = evaluate_prediction(prediction, market_odds, bankroll, kelly_fraction)

cols = st.columns(len(cards))
for col, card in zip(cols, cards):
    with col:
        st.subheader(card["market"])
        st.write(f"Odds **{card['odds']:.2f}**")
        st.write(f"Model **{card['probability']:.1%}** vs implied {card['implied_probability']:.1%}")
        ev_pct = card["ev"] * 100
        if card["is_value"]:
            st.success(f"VALUE: EV {ev_pct:+.1f}%")
        else:
            st.error(f"NO VALUE: EV {ev_pct:+.1f}%")
        st.metric(f"Rec. Stake ({kelly_fraction}x Kelly)", fmt_money(card["kelly_stake"]))
