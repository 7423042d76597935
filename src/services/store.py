"""
Record stores.

A store persists the JSON documents of one resource collection. Route
handlers never hold collections themselves: they receive a ``Stores``
registry through dependency injection, so every process shares whatever
backend the registry was built on.
"""

import copy
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session, sessionmaker

from src.models.schema.record import Record
from src.utils.logging import get_logger

logger = get_logger(__name__)

Document = dict[str, Any]

RESOURCES = (
    "animals",
    "enclosures",
    "inventory",
    "medical-records",
    "feeding-schedules",
    "notifications",
    "audit-logs",
    "species",
    "users",
)


def new_id() -> str:
    return uuid.uuid4().hex


class RecordStore(ABC):
    """CRUD over the documents of a single resource."""

    def __init__(self, resource: str):
        self.resource = resource

    @abstractmethod
    def list(self) -> list[Document]:
        """Return every document in insertion order."""

    @abstractmethod
    def get(self, record_id: str) -> Optional[Document]:
        """Return the document with ``record_id`` or None."""

    @abstractmethod
    def create(self, data: Document) -> Document:
        """Store a new document, minting its id, and return it."""

    @abstractmethod
    def update(self, record_id: str, changes: Document) -> Optional[Document]:
        """Shallow-merge ``changes`` onto a document; None when missing."""

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        """Remove a document; False when missing."""

    @staticmethod
    def _with_identity(data: Document) -> Document:
        document = dict(data)
        record_id = document.get("id") or document.get("_id") or new_id()
        document["id"] = record_id
        document["_id"] = record_id
        return document


class MemoryRecordStore(RecordStore):
    def __init__(self, resource: str):
        super().__init__(resource)
        self._documents: dict[str, Document] = {}
        self._lock = threading.Lock()

    def list(self) -> list[Document]:
        with self._lock:
            return [copy.deepcopy(d) for d in self._documents.values()]

    def get(self, record_id: str) -> Optional[Document]:
        with self._lock:
            document = self._documents.get(record_id)
            return copy.deepcopy(document) if document is not None else None

    def create(self, data: Document) -> Document:
        document = self._with_identity(data)
        with self._lock:
            self._documents[document["id"]] = document
            return copy.deepcopy(document)

    def update(self, record_id: str, changes: Document) -> Optional[Document]:
        with self._lock:
            current = self._documents.get(record_id)
            if current is None:
                return None
            merged = {**current, **changes, "id": current["id"], "_id": current["_id"]}
            self._documents[record_id] = merged
            return copy.deepcopy(merged)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._documents.pop(record_id, None) is not None


class SqlRecordStore(RecordStore):
    def __init__(self, resource: str, session_factory: sessionmaker):
        super().__init__(resource)
        self.session_factory = session_factory

    def _find(self, db: Session, record_id: str) -> Optional[Record]:
        return (
            db.query(Record)
            .filter(Record.resource == self.resource, Record.id == record_id)
            .first()
        )

    def list(self) -> list[Document]:
        db: Session = self.session_factory()
        try:
            rows = (
                db.query(Record)
                .filter(Record.resource == self.resource)
                .order_by(Record.created_at)
                .all()
            )
            return [dict(row.data) for row in rows]
        finally:
            db.close()

    def get(self, record_id: str) -> Optional[Document]:
        db: Session = self.session_factory()
        try:
            row = self._find(db, record_id)
            return dict(row.data) if row else None
        finally:
            db.close()

    def create(self, data: Document) -> Document:
        document = self._with_identity(data)
        db: Session = self.session_factory()
        try:
            now = datetime.now(timezone.utc).replace(tzinfo=None)
            db.add(
                Record(
                    id=document["id"],
                    resource=self.resource,
                    data=document,
                    created_at=now,
                    updated_at=now,
                )
            )
            db.commit()
            return document
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def update(self, record_id: str, changes: Document) -> Optional[Document]:
        db: Session = self.session_factory()
        try:
            row = self._find(db, record_id)
            if row is None:
                return None
            merged = {**row.data, **changes, "id": row.id, "_id": row.id}
            # Reassign so SQLAlchemy sees the JSON column change
            row.data = merged
            db.commit()
            return merged
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def delete(self, record_id: str) -> bool:
        db: Session = self.session_factory()
        try:
            row = self._find(db, record_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


class Stores:
    """Registry mapping each resource name to its store."""

    def __init__(self, stores: dict[str, RecordStore]):
        self._stores = stores

    def __getitem__(self, resource: str) -> RecordStore:
        return self._stores[resource]

    @classmethod
    def memory(cls) -> "Stores":
        return cls({name: MemoryRecordStore(name) for name in RESOURCES})

    @classmethod
    def sql(cls, session_factory: sessionmaker) -> "Stores":
        return cls({name: SqlRecordStore(name, session_factory) for name in RESOURCES})


def build_stores(backend: str, session_factory: Optional[sessionmaker] = None) -> Stores:
    if backend == "memory":
        logger.info("Using in-memory record stores")
        return Stores.memory()
    if backend == "sql":
        if session_factory is None:
            from src.core.db import SessionLocal, init_db

            init_db()
            session_factory = SessionLocal
        logger.info("Using SQL record stores")
        return Stores.sql(session_factory)
    raise ValueError(f"Unknown storage backend '{backend}'")
