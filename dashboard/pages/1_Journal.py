"""Journal page: log, settle, edit and export bets."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from datetime import date

import streamlit as st
from pydantic import ValidationError

from betjournal.core.expected_value import expected_value
from betjournal.schemas import Bet, BetResult, ConfidenceLevel
from dashboard.utils import (
    EMOTIONAL_STATES,
    MARKET_TYPES,
    SPORTS,
    bets_dataframe,
    fmt_money,
    get_journal,
    load_bets,
    sidebar_bankroll,
)

st.set_page_config(page_title="Journal | Bet Journal", layout="wide")
sidebar_bankroll()

st.title("Betting Journal")

journal = get_journal()
bets = load_bets()
results = [r.value for r in BetResult]

tab_add, tab_settle, tab_history = st.tabs(["Add Bet", "Settle Pending", "History"])


# --------------------------------------------------------------------------
# TAB 1: ADD / EDIT BET
# --------------------------------------------------------------------------
with tab_add:
    by_id = {b.id: b for b in bets}
    edit_choice = st.selectbox(
        "Entry",
        [None] + list(by_id),
        format_func=lambda i: "New bet" if i is None else f"{by_id[i].date} | {by_id[i].match} | {by_id[i].selection}",
        key="edit_choice",
    )
    editing = by_id.get(edit_choice)
    base = editing or Bet()

    st.subheader("Edit Bet" if editing else "Log a New Bet")

    with st.form("bet_form", clear_on_submit=editing is None):
        col1, col2 = st.columns(2)
        with col1:
            bet_date = st.date_input("Date", value=base.date)
            sport = st.selectbox(
                "Sport", SPORTS,
                index=SPORTS.index(base.sport) if base.sport in SPORTS else 0,
            )
            match = st.text_input("Match / Event", value=base.match, placeholder="e.g. Manchester City vs Liverpool")
            league = st.text_input("League / Tournament", value=base.league, placeholder="e.g. Premier League")
            bookmaker = st.text_input("Bookmaker", value=base.bookmaker, placeholder="e.g. Pinnacle")
        with col2:
            selection = st.text_input("Selection (Bet)", value=base.selection, placeholder="e.g. Home Win -0.5")
            market_type = st.selectbox(
                "Market Type", MARKET_TYPES,
                index=MARKET_TYPES.index(base.market_type) if base.market_type in MARKET_TYPES else 0,
            )
            odds = st.number_input("Decimal Odds", min_value=1.01, value=float(base.odds), step=0.01)
            stake = st.number_input("Stake ($)", min_value=0.01, value=float(base.stake), step=10.0)
            closing_line = st.number_input(
                "Closing Line (optional, 0 = none)", min_value=0.0,
                value=float(base.closing_line or 0.0), step=0.01,
            )

        col3, col4, col5 = st.columns(3)
        with col3:
            confidence = st.radio(
                "Confidence", [c.value for c in ConfidenceLevel],
                index=[c.value for c in ConfidenceLevel].index(base.confidence.value),
                horizontal=True,
            )
        with col4:
            result = st.selectbox("Result", results, index=results.index(base.result.value))
        with col5:
            emotional_state = st.selectbox(
                "Emotional State", EMOTIONAL_STATES,
                index=EMOTIONAL_STATES.index(base.emotional_state) if base.emotional_state in EMOTIONAL_STATES else 0,
            )

        win_prob_pct = st.slider(
            "Your win probability (%), for the EV column (0 = skip)", 0.0, 100.0,
            value=0.0, step=0.5,
        )
        notes = st.text_area("Journal Notes", value=base.notes or "", max_chars=2000)

        submitted = st.form_submit_button("Save Bet", type="primary")

    if submitted:
        ev = base.expected_value
        if win_prob_pct > 0:
            ev = expected_value(odds, win_prob_pct / 100.0, stake).ev_percent * 100.0
        try:
            bet = Bet(
                id=base.id,
                date=bet_date or date.today(),
                sport=sport,
                league=league,
                match=match,
                selection=selection,
                odds=odds,
                stake=stake,
                result=result,
                bookmaker=bookmaker,
                confidence=confidence,
                market_type=market_type,
                emotional_state=emotional_state,
                notes=notes or None,
                closing_line=closing_line if closing_line > 1.0 else None,
                expected_value=ev,
            )
        except ValidationError as exc:
            st.error(f"Invalid bet: {exc.errors()[0]['msg']}")
        else:
            if not match.strip() or not selection.strip():
                st.error("Match and selection are required.")
            else:
                journal.save_bet(bet)
                st.success(f"Saved **{bet.selection}** ({bet.match}) @ {bet.odds:.2f}")
                st.rerun()

    if editing is not None:
        if st.button("Delete this bet", type="secondary"):
            journal.delete_bet(editing.id)
            st.success("Bet deleted")
            st.rerun()


# --------------------------------------------------------------------------
# TAB 2: SETTLE PENDING BETS
# --------------------------------------------------------------------------
with tab_settle:
    pending = [b for b in bets if b.result is BetResult.PENDING]
    if not pending:
        st.info("No pending bets.")
    else:
        st.write(f"**{len(pending)} pending bet(s)**")
        settle_options = [r for r in results if r != BetResult.PENDING.value]
        for b in pending:
            with st.expander(f"{b.date} | {b.match} | {b.selection} @ {b.odds:.2f} | {fmt_money(b.stake)}"):
                with st.form(f"settle_{b.id}"):
                    outcome = st.radio("Result", settle_options, horizontal=True, key=f"outcome_{b.id}")
                    if st.form_submit_button("Record Outcome", type="primary"):
                        journal.save_bet(b.model_copy(update={"result": BetResult(outcome)}))
                        st.rerun()


# --------------------------------------------------------------------------
# TAB 3: HISTORY
# --------------------------------------------------------------------------
with tab_history:
    if not bets:
        st.info("No bets logged yet.")
    else:
        df = bets_dataframe(bets)

        col_f1, col_f2 = st.columns(2)
        with col_f1:
            sport_filter = st.multiselect("Sport", sorted(df["sport"].unique()))
        with col_f2:
            result_filter = st.multiselect("Result", results)
        if sport_filter:
            df = df[df["sport"].isin(sport_filter)]
        if result_filter:
            df = df[df["result"].isin(result_filter)]

        display_cols = [
            "date", "sport", "league", "match", "selection", "market_type",
            "odds", "stake", "result", "profit", "bookmaker", "confidence",
            "emotional_state", "closing_line", "expected_value", "notes",
        ]
        display_cols = [c for c in display_cols if c in df.columns]
        rename_map = {c: c.replace("_", " ").title() for c in display_cols}
        rename_map["profit"] = "P&L ($)"

        st.write(f"**{len(df)} bet(s)**")
        st.dataframe(
            df[display_cols].rename(columns=rename_map),
            use_container_width=True,
            hide_index=True,
        )

        st.markdown("---")
        col_e1, col_e2, col_e3 = st.columns(3)
        with col_e1:
            csv = df[display_cols].rename(columns=rename_map).to_csv(index=False).encode("utf-8")
            st.download_button(
                label="Export to CSV",
                data=csv,
                file_name="bet_journal.csv",
                mime="text/csv",
            )
        with col_e2:
            st.download_button(
                label="Export to JSON",
                data=journal.export_bets_json().encode("utf-8"),
                file_name="bet_journal.json",
                mime="application/json",
            )
        with col_e3:
            confirm = st.checkbox("I understand this deletes every bet")
            if st.button("Clear journal", disabled=not confirm):
                journal.clear_journal()
                st.rerun()
