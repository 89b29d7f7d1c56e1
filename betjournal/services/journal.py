"""
Journal service: typed access to every document the app persists.

Four fixed keys live in the document store:

    alphabet_bets_v1         list of bet records
    alphabet_bankroll_v1     scalar starting bankroll
    alphabet_cycle_v1        ladder simulator state
    alphabet_allocation_v1   capital allocation planner state

Reads never raise.  An absent key, a payload that will not parse, or a
document that fails validation is logged and treated as "no data yet".
Individual invalid bets are left out of the list with a warning so one bad
row cannot hide the rest of the journal.  Writes keep those rows as they
were stored, and a row saved without an id gets one derived from its content.
"""

import json
import logging
import os
import uuid
from typing import Any, List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import ValidationError

from betjournal.schemas import AllocationState, Bet, CycleState
from betjournal.services.storage import DocumentStore, SQLAlchemyDocumentStore

load_dotenv()

logger = logging.getLogger(__name__)

BETS_KEY = "alphabet_bets_v1"
BANKROLL_KEY = "alphabet_bankroll_v1"
CYCLE_KEY = "alphabet_cycle_v1"
ALLOCATION_KEY = "alphabet_allocation_v1"

DEFAULT_STARTING_BANKROLL = float(os.getenv("DEFAULT_STARTING_BANKROLL", "10000"))


def _content_id(row: dict) -> str:
    # Stable across reads so edits and deletes can find the row again.
    return str(uuid.uuid5(uuid.NAMESPACE_OID, json.dumps(row, sort_keys=True, default=str)))


class JournalService:
    def __init__(self, store: DocumentStore):
        self.store = store

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self, key: str) -> Optional[Any]:
        try:
            return self.store.get(key)
        except (json.JSONDecodeError, TypeError, ValueError) as exc:
            logger.warning("Stored document %s is corrupt, ignoring: %s", key, exc)
            return None

    # ------------------------------------------------------------------
    # Bets
    # ------------------------------------------------------------------

    def _load_bets(self) -> Tuple[List[Bet], List[Any]]:
        """Valid bets plus the raw rows that failed validation."""
        raw = self._read(BETS_KEY)
        if raw is None:
            return [], []
        if not isinstance(raw, list):
            logger.warning("Stored %s is not a list (%s), ignoring", BETS_KEY, type(raw).__name__)
            return [], []

        bets, unreadable = [], []
        for i, item in enumerate(raw):
            if isinstance(item, dict) and not item.get("id"):
                item = {**item, "id": _content_id(item)}
            try:
                bets.append(Bet.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping invalid bet at index %d: %s", i, exc.errors()[:1])
                unreadable.append(raw[i])
        return bets, unreadable

    def get_bets(self) -> List[Bet]:
        return self._load_bets()[0]

    def _write_bets(self, bets: List[Bet], unreadable: List[Any]) -> None:
        if unreadable:
            logger.warning("Keeping %d unreadable bet rows in %s", len(unreadable), BETS_KEY)
        self.store.put(BETS_KEY, [b.model_dump(mode="json") for b in bets] + unreadable)

    def save_bet(self, bet: Bet) -> List[Bet]:
        """Insert ``bet`` or replace the record with the same id."""
        bets, unreadable = self._load_bets()
        for i, existing in enumerate(bets):
            if existing.id == bet.id:
                bets[i] = bet
                logger.info("Updated bet %s", bet.id)
                break
        else:
            bets.append(bet)
            logger.info("Logged bet %s (%s @ %.2f)", bet.id, bet.selection or bet.match, bet.odds)
        self._write_bets(bets, unreadable)
        return bets

    def delete_bet(self, bet_id: str) -> List[Bet]:
        bets, unreadable = self._load_bets()
        bets = [b for b in bets if b.id != bet_id]
        self._write_bets(bets, unreadable)
        logger.info("Deleted bet %s", bet_id)
        return bets

    def clear_journal(self) -> None:
        self.store.delete(BETS_KEY)
        logger.info("Journal cleared")

    def export_bets_json(self) -> str:
        """Pretty-printed JSON of every valid bet, for download."""
        return json.dumps([b.model_dump(mode="json") for b in self.get_bets()], indent=2)

    # ------------------------------------------------------------------
    # Bankroll baseline
    # ------------------------------------------------------------------

    def get_starting_bankroll(self) -> float:
        raw = self._read(BANKROLL_KEY)
        if raw is None:
            return DEFAULT_STARTING_BANKROLL
        try:
            return float(raw)
        except (TypeError, ValueError):
            logger.warning("Stored bankroll %r is not a number, using default", raw)
            return DEFAULT_STARTING_BANKROLL

    def save_starting_bankroll(self, amount: float) -> float:
        amount = float(amount)
        self.store.put(BANKROLL_KEY, amount)
        logger.info("Starting bankroll set to %.2f", amount)
        return amount

    # ------------------------------------------------------------------
    # Cycle / allocation documents
    # ------------------------------------------------------------------

    def get_cycle_state(self) -> Optional[CycleState]:
        raw = self._read(CYCLE_KEY)
        if raw is None:
            return None
        try:
            return CycleState.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Stored cycle state is invalid, ignoring: %s", exc.errors()[:1])
            return None

    def save_cycle_state(self, state: CycleState) -> None:
        self.store.put(CYCLE_KEY, state.model_dump(mode="json"))

    def get_allocation_state(self) -> Optional[AllocationState]:
        raw = self._read(ALLOCATION_KEY)
        if raw is None:
            return None
        try:
            return AllocationState.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Stored allocation state is invalid, ignoring: %s", exc.errors()[:1])
            return None

    def save_allocation_state(self, state: AllocationState) -> None:
        self.store.put(ALLOCATION_KEY, state.model_dump(mode="json"))


# ---------------------------------------------------------------------------
# Process-wide singleton
# ---------------------------------------------------------------------------

_journal: Optional[JournalService] = None


def get_journal_service() -> JournalService:
    """Return the shared service backed by the configured database."""
    global _journal
    if _journal is None:
        _journal = JournalService(SQLAlchemyDocumentStore())
    return _journal
