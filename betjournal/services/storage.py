"""
Whole-document key-value persistence.

The journal never assumes anything beyond ``get(key) → document`` and
``put(key, document)``.  Two interchangeable backends satisfy the contract:

    InMemoryDocumentStore   dict-backed; tests and throwaway sessions
    SQLAlchemyDocumentStore one row per key in the ``documents`` table

Documents are JSON-compatible values (dicts, lists, numbers, strings).
Reads return ``None`` for an absent key.  A stored payload that is not valid
JSON raises ``json.JSONDecodeError``; the journal service above this layer
decides how to degrade.
"""

import copy
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from betjournal.models import Base, Document, SessionLocal, engine

logger = logging.getLogger(__name__)


class DocumentStore(ABC):
    """Contract every persistence backend must satisfy."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the document stored under ``key`` or ``None``."""

    @abstractmethod
    def put(self, key: str, document: Any) -> None:
        """Replace the document stored under ``key``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``.  Deleting an absent key is a no-op."""


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store.  Documents are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._docs: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._docs.get(key))

    def put(self, key: str, document: Any) -> None:
        self._docs[key] = copy.deepcopy(document)

    def delete(self, key: str) -> None:
        self._docs.pop(key, None)


class SQLAlchemyDocumentStore(DocumentStore):
    """
    Store backed by the ``documents`` table.

    Each call opens and closes its own session so the store can be held for
    the lifetime of a dashboard process without pinning a connection.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        create_tables: bool = True,
    ):
        self._session_factory = session_factory
        if create_tables:
            bind = getattr(session_factory, "kw", {}).get("bind") or engine
            Base.metadata.create_all(bind=bind)

    def get(self, key: str) -> Optional[Any]:
        db = self._session_factory()
        try:
            row = db.get(Document, key)
            if row is None:
                return None
            return json.loads(row.payload)
        finally:
            db.close()

    def put(self, key: str, document: Any) -> None:
        payload = json.dumps(document)
        db = self._session_factory()
        try:
            row = db.get(Document, key)
            if row is None:
                db.add(Document(key=key, payload=payload))
            else:
                row.payload = payload
                row.updated_at = datetime.utcnow()
            db.commit()
            logger.debug("Stored document %s (%d bytes)", key, len(payload))
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def delete(self, key: str) -> None:
        db = self._session_factory()
        try:
            row = db.get(Document, key)
            if row is not None:
                db.delete(row)
                db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def put_raw(self, key: str, payload: str) -> None:
        """Write ``payload`` verbatim, bypassing JSON encoding."""
        db = self._session_factory()
        try:
            row = db.get(Document, key)
            if row is None:
                db.add(Document(key=key, payload=payload))
            else:
                row.payload = payload
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
