"""
Tests for the journal service over both document stores
Run with: pytest tests/test_journal.py -v
"""

import json
from datetime import date
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from betjournal.schemas import AllocationState, Bet, BetResult
from betjournal.services import journal as journal_module
from betjournal.services.cycle import generate_ladder, new_cycle, record_result, start_cycle
from betjournal.services.journal import (
    ALLOCATION_KEY,
    BANKROLL_KEY,
    BETS_KEY,
    CYCLE_KEY,
    DEFAULT_STARTING_BANKROLL,
    JournalService,
)
from betjournal.services.storage import InMemoryDocumentStore, SQLAlchemyDocumentStore


def _sqlite_store():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    return SQLAlchemyDocumentStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    if request.param == "memory":
        return InMemoryDocumentStore()
    return _sqlite_store()


@pytest.fixture
def journal(store):
    return JournalService(store)


def _bet(**kw):
    defaults = dict(date=date(2025, 3, 1), match="Arsenal vs Chelsea", selection="Arsenal", odds=2.0, stake=100)
    defaults.update(kw)
    return Bet(**defaults)


# ---------------------------------------------------------------------------
# Document stores
# ---------------------------------------------------------------------------

class TestDocumentStore:

    def test_absent_key(self, store):
        assert store.get("missing") is None

    def test_put_get_replace_delete(self, store):
        store.put("k", {"a": 1})
        assert store.get("k") == {"a": 1}
        store.put("k", [1, 2, 3])
        assert store.get("k") == [1, 2, 3]
        store.delete("k")
        assert store.get("k") is None

    def test_delete_absent_is_noop(self, store):
        store.delete("never-written")

    def test_memory_store_copies(self):
        store = InMemoryDocumentStore()
        doc = {"a": [1]}
        store.put("k", doc)
        doc["a"].append(2)
        assert store.get("k") == {"a": [1]}

    def test_sqlalchemy_delete_rolls_back_on_error(self):
        session = MagicMock()
        session.commit.side_effect = RuntimeError("disk full")
        store = SQLAlchemyDocumentStore(session_factory=lambda: session, create_tables=False)
        with pytest.raises(RuntimeError):
            store.delete("k")
        session.rollback.assert_called_once()
        session.close.assert_called_once()

    def test_sqlalchemy_put_raw_rolls_back_on_error(self):
        session = MagicMock()
        session.commit.side_effect = RuntimeError("disk full")
        store = SQLAlchemyDocumentStore(session_factory=lambda: session, create_tables=False)
        with pytest.raises(RuntimeError):
            store.put_raw("k", "{}")
        session.rollback.assert_called_once()
        session.close.assert_called_once()


# ---------------------------------------------------------------------------
# Bets
# ---------------------------------------------------------------------------

class TestBets:

    def test_empty_journal(self, journal):
        assert journal.get_bets() == []

    def test_save_and_load(self, journal):
        bet = _bet(result=BetResult.WIN, confidence="High", notes="value on the DNB")
        journal.save_bet(bet)
        loaded = journal.get_bets()
        assert len(loaded) == 1
        assert loaded[0].model_dump() == bet.model_dump()
        assert loaded[0].result is BetResult.WIN

    def test_save_replaces_by_id(self, journal):
        bet = _bet()
        journal.save_bet(bet)
        journal.save_bet(_bet(selection="Chelsea"))
        journal.save_bet(bet.model_copy(update={"result": BetResult.LOSS}))
        bets = journal.get_bets()
        assert len(bets) == 2
        assert bets[0].id == bet.id
        assert bets[0].result is BetResult.LOSS

    def test_delete(self, journal):
        keep, drop = _bet(), _bet()
        journal.save_bet(keep)
        journal.save_bet(drop)
        remaining = journal.delete_bet(drop.id)
        assert [b.id for b in remaining] == [keep.id]
        assert [b.id for b in journal.get_bets()] == [keep.id]

    def test_clear(self, journal):
        journal.save_bet(_bet())
        journal.clear_journal()
        assert journal.get_bets() == []

    def test_invalid_rows_skipped(self, journal, store):
        good = _bet().model_dump(mode="json")
        store.put(BETS_KEY, [good, {"odds": 0.5}, "garbage"])
        bets = journal.get_bets()
        assert [b.id for b in bets] == [good["id"]]

    def test_invalid_rows_survive_rewrites(self, journal, store):
        store.put(BETS_KEY, [{"odds": 0.5}])
        journal.save_bet(_bet())
        journal.delete_bet("no-such-id")
        stored = store.get(BETS_KEY)
        assert len(stored) == 2
        assert {"odds": 0.5} in stored
        assert len(journal.get_bets()) == 1

    def test_row_without_id_keeps_a_stable_id(self, journal, store):
        row = _bet().model_dump(mode="json")
        del row["id"]
        store.put(BETS_KEY, [row])
        first = journal.get_bets()[0].id
        assert journal.get_bets()[0].id == first
        assert journal.delete_bet(first) == []
        assert store.get(BETS_KEY) == []

    def test_non_list_document_ignored(self, journal, store):
        store.put(BETS_KEY, {"not": "a list"})
        assert journal.get_bets() == []

    def test_export_json(self, journal):
        journal.save_bet(_bet(stake=42))
        exported = json.loads(journal.export_bets_json())
        assert exported[0]["stake"] == 42
        assert exported[0]["date"] == "2025-03-01"


def test_corrupt_payload_treated_as_empty():
    store = _sqlite_store()
    store.put_raw(BETS_KEY, "{not json")
    assert JournalService(store).get_bets() == []


# ---------------------------------------------------------------------------
# Bankroll baseline
# ---------------------------------------------------------------------------

class TestBankroll:

    def test_default(self, journal):
        assert journal.get_starting_bankroll() == DEFAULT_STARTING_BANKROLL

    def test_round_trip(self, journal):
        journal.save_starting_bankroll(2_500)
        assert journal.get_starting_bankroll() == 2_500.0

    def test_non_numeric_falls_back(self, journal, store):
        store.put(BANKROLL_KEY, "lots")
        assert journal.get_starting_bankroll() == DEFAULT_STARTING_BANKROLL


# ---------------------------------------------------------------------------
# Cycle and allocation documents
# ---------------------------------------------------------------------------

class TestStateDocuments:

    def test_cycle_absent(self, journal):
        assert journal.get_cycle_state() is None

    def test_cycle_round_trip(self, journal):
        state = record_result(start_cycle(new_cycle(100, 3, 2.0)), "LOSS")
        journal.save_cycle_state(state)
        loaded = journal.get_cycle_state()
        assert loaded.cycle_status == "FAILED"
        assert loaded.history[0].steps_completed == 0
        assert [s.status for s in loaded.ladder] == ["LOSS", "PENDING", "PENDING"]

    def test_invalid_cycle_ignored(self, journal, store):
        store.put(CYCLE_KEY, {"cycle_status": "EXPLODED"})
        assert journal.get_cycle_state() is None

    @pytest.mark.parametrize("doc", [
        {"cycle_status": "ACTIVE", "ladder": []},
        {"steps": 5, "current_step": 6},
        {"steps": 5, "ladder": [s.model_dump() for s in generate_ladder(100, 3, 2.0)]},
    ])
    def test_inconsistent_cycle_ignored(self, journal, store, doc):
        store.put(CYCLE_KEY, doc)
        assert journal.get_cycle_state() is None

    def test_idle_cycle_without_ladder_loads(self, journal, store):
        store.put(CYCLE_KEY, {"steps": 3, "start_capital": 100})
        state = journal.get_cycle_state()
        assert state.ladder == []
        assert len(start_cycle(state).ladder) == 3

    def test_allocation_round_trip(self, journal):
        state = AllocationState(monthly_schedule={"2025": [100.0] * 12})
        journal.save_allocation_state(state)
        loaded = journal.get_allocation_state()
        assert loaded.monthly_schedule == {"2025": [100.0] * 12}
        assert loaded.assets.real_estate == 12_000

    def test_legacy_flat_schedule_migrates(self, journal, store):
        store.put(ALLOCATION_KEY, {"monthly_schedule": [50.0, 25.0]})
        loaded = journal.get_allocation_state()
        year = str(date.today().year)
        assert list(loaded.monthly_schedule) == [year]
        assert loaded.monthly_schedule[year][:2] == [50.0, 25.0]
        assert len(loaded.monthly_schedule[year]) == 12


# ---------------------------------------------------------------------------
# Shared service
# ---------------------------------------------------------------------------

def test_journal_service_is_shared(monkeypatch):
    monkeypatch.setattr(journal_module, "_journal", None)
    monkeypatch.setattr(journal_module, "SQLAlchemyDocumentStore", InMemoryDocumentStore)
    first = journal_module.get_journal_service()
    assert journal_module.get_journal_service() is first
    assert isinstance(first.store, InMemoryDocumentStore)
