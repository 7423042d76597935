import math
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

from src.core.exceptions import NotFoundError
from src.models.audit_log import AuditLog
from src.models.common import AuditAction
from src.models.user import User
from src.services.store import Document, RecordStore
from src.utils.logging import get_logger

logger = get_logger(__name__)

Predicate = Callable[[Document], bool]


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class Actor:
    """Who performed a write, for the audit trail."""

    def __init__(self, user: User, ip_address: Optional[str] = None):
        self.user = user
        self.ip_address = ip_address


class ResourceService:
    """
    Stateless CRUD over one record store.

    Every write refreshes ``updatedAt`` and, when an audit store is given,
    appends an audit log entry describing the change.
    """

    def __init__(
        self,
        store: RecordStore,
        label: str,
        audit_store: Optional[RecordStore] = None,
    ):
        self.store = store
        self.label = label
        self.audit_store = audit_store

    @property
    def resource(self) -> str:
        return self.store.resource

    def list(self, predicates: Iterable[Predicate] = ()) -> list[Document]:
        predicates = list(predicates)
        return [
            document
            for document in self.store.list()
            if all(predicate(document) for predicate in predicates)
        ]

    def get(self, record_id: str) -> Document:
        document = self.store.get(record_id)
        if document is None:
            logger.warning(f"{self.label} {record_id} not found")
            raise NotFoundError(f"{self.label} not found")
        return document

    def create(self, data: Document, actor: Optional[Actor] = None, **stamps: Any) -> Document:
        now = timestamp()
        document = self.store.create(
            {**data, **stamps, "createdAt": now, "updatedAt": now}
        )
        logger.info(f"Created {self.resource} record {document['id']}")
        self._audit(actor, AuditAction.CREATE, document["id"], None, document)
        return document

    def update(
        self, record_id: str, changes: Document, actor: Optional[Actor] = None
    ) -> Document:
        previous = self.get(record_id)
        document = self.store.update(record_id, {**changes, "updatedAt": timestamp()})
        if document is None:
            # Deleted between the read and the write
            raise NotFoundError(f"{self.label} not found")
        logger.info(f"Updated {self.resource} record {record_id}")
        self._audit(actor, AuditAction.UPDATE, record_id, previous, document)
        return document

    def delete(self, record_id: str, actor: Optional[Actor] = None) -> None:
        previous = self.get(record_id)
        if not self.store.delete(record_id):
            raise NotFoundError(f"{self.label} not found")
        logger.info(f"Deleted {self.resource} record {record_id}")
        self._audit(actor, AuditAction.DELETE, record_id, previous, None)

    def _audit(
        self,
        actor: Optional[Actor],
        action: AuditAction,
        record_id: str,
        old_data: Optional[Document],
        new_data: Optional[Document],
    ) -> None:
        if self.audit_store is None or actor is None:
            return
        entry = AuditLog(
            user_id=actor.user.id,
            action=action,
            resource=self.resource,
            resource_id=record_id,
            old_data=old_data,
            new_data=new_data,
            ip_address=actor.ip_address,
        )
        self.audit_store.create(entry.to_create_document())


def field_equals(field: str, value: Any) -> Predicate:
    return lambda document: document.get(field) == value


def paginate(records: list[Document], page: int = 1, limit: int = 20) -> tuple[list[Document], dict]:
    """Slice one page out of ``records`` and describe it."""
    page = max(page, 1)
    limit = max(limit, 1)
    start = (page - 1) * limit
    total = len(records)
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }
    return records[start : start + limit], pagination
