"""Shared utilities for all dashboard pages."""

import logging
from typing import List

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from betjournal.core.settlement import realized_profit
from betjournal.schemas import Bet
from betjournal.services.journal import JournalService, get_journal_service

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def get_journal() -> JournalService:
    """One journal service per Streamlit server process."""
    return get_journal_service()


def load_bets() -> List[Bet]:
    return get_journal().get_bets()


def starting_bankroll() -> float:
    return get_journal().get_starting_bankroll()


def sidebar_bankroll() -> float:
    """Show and edit the bankroll baseline in the sidebar; return it."""
    journal = get_journal()
    current = journal.get_starting_bankroll()
    with st.sidebar:
        st.subheader("Bankroll")
        value = st.number_input(
            "Starting bankroll ($)",
            min_value=0.0,
            value=float(current),
            step=500.0,
            key="sidebar_bankroll",
        )
        if value != current:
            journal.save_starting_bankroll(value)
            st.success("Baseline updated")
            current = value
    return current


def fmt_money(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def bets_dataframe(bets: List[Bet]) -> pd.DataFrame:
    """Flatten bets into a table with a realised P&L column, newest first."""
    if not bets:
        return pd.DataFrame()
    rows = []
    for b in bets:
        row = b.model_dump(mode="json")
        row["profit"] = realized_profit(b.result, b.stake, b.odds)
        rows.append(row)
    df = pd.DataFrame(rows)
    df["date"] = pd.to_datetime(df["date"])
    return df.sort_values("date", ascending=False, kind="stable").reset_index(drop=True)


RESULT_ICONS = {
    "WIN":       "🟢",
    "HALF_WIN":  "🟢",
    "PUSH":      "⚪",
    "HALF_LOSS": "🔴",
    "LOSS":      "🔴",
    "PENDING":   "🟡",
}

SPORTS = ["Football", "Tennis", "Basketball", "MMA", "Baseball", "Esports"]

MARKET_TYPES = [
    "Match Winner",
    "Asian Handicap",
    "Over/Under",
    "BTTS",
    "Prop",
    "Futures",
    "Parlay",
]

EMOTIONAL_STATES = ["Calm", "Confident", "Excited", "Tired", "Frustrated", "Chasing Losses"]
