from collections import Counter
from typing import Optional

from src.domain.refs import ref_id
from src.models.user import User
from src.services.resources import Actor, ResourceService
from src.services.store import Document, RecordStore


class NotificationService(ResourceService):
    """Notifications addressed to a user, or broadcast when ``userId`` is empty."""

    def __init__(self, store: RecordStore, audit_store: Optional[RecordStore] = None):
        super().__init__(store, "Notification", audit_store)

    @staticmethod
    def _visible_to(user: User):
        return lambda n: ref_id(n.get("userId")) in (None, user.id)

    def for_user(
        self,
        user: User,
        read: Optional[bool] = None,
        type: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> list[Document]:
        predicates = [self._visible_to(user)]
        if read is not None:
            predicates.append(lambda n: bool(n.get("read")) == read)
        if type:
            predicates.append(lambda n: n.get("type") == type)
        if priority:
            predicates.append(lambda n: n.get("priority") == priority)
        notifications = self.list(predicates)
        return sorted(notifications, key=lambda n: n.get("createdAt") or "", reverse=True)

    def unread_count(self, user: User) -> int:
        return len(self.for_user(user, read=False))

    def mark_read(self, record_id: str, actor: Optional[Actor] = None) -> Document:
        return self.update(record_id, {"read": True}, actor)

    def mark_all_read(self, user: User, actor: Optional[Actor] = None) -> int:
        unread = self.for_user(user, read=False)
        for notification in unread:
            self.update(notification["id"], {"read": True}, actor)
        return len(unread)

    def stats(self) -> dict:
        notifications = self.list()
        unread = sum(1 for n in notifications if not n.get("read"))
        return {
            "total": len(notifications),
            "unread": unread,
            "read": len(notifications) - unread,
            "typeBreakdown": dict(Counter(n.get("type") for n in notifications)),
        }
