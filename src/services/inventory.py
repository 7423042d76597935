from typing import Optional

from src.core.exceptions import InvalidInputError
from src.domain.derivations import is_expired, is_low_stock, stock_status
from src.models.common import NotificationPriority, NotificationType
from src.models.notification import NotificationCreate
from src.services.resources import Actor, ResourceService, timestamp
from src.services.store import Document, RecordStore
from src.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryService(ResourceService):
    def __init__(
        self,
        store: RecordStore,
        audit_store: Optional[RecordStore] = None,
        notification_store: Optional[RecordStore] = None,
    ):
        super().__init__(store, "Inventory item", audit_store)
        self.notification_store = notification_store

    def search(
        self,
        category: Optional[str] = None,
        low_stock: bool = False,
        expired: bool = False,
    ) -> list[Document]:
        predicates = []
        if category:
            predicates.append(lambda item: item.get("category") == category)
        if low_stock:
            predicates.append(is_low_stock)
        if expired:
            predicates.append(is_expired)
        return self.list(predicates)

    def add_item(self, data: Document, actor: Optional[Actor] = None) -> Document:
        return self.create(data, actor, lastRestocked=timestamp())

    def restock(
        self, record_id: str, quantity: Optional[int], actor: Optional[Actor] = None
    ) -> Document:
        if not quantity or quantity <= 0:
            raise InvalidInputError("Invalid quantity provided")

        item = self.get(record_id)
        now = timestamp()
        return self.update(
            record_id,
            {"quantity": (item.get("quantity") or 0) + quantity, "lastRestocked": now},
            actor,
        )

    def use(
        self, record_id: str, quantity: Optional[int], actor: Optional[Actor] = None
    ) -> Document:
        if not quantity or quantity <= 0:
            raise InvalidInputError("Invalid quantity provided")

        item = self.get(record_id)
        available = item.get("quantity") or 0
        if quantity > available:
            raise InvalidInputError(
                f"Insufficient stock: only {available} {item.get('unit', '')} available".rstrip()
            )

        was_low = is_low_stock(item)
        updated = self.update(record_id, {"quantity": available - quantity}, actor)
        if not was_low and stock_status(updated) == "low":
            self._notify_low_stock(updated)
        return updated

    def _notify_low_stock(self, item: Document) -> None:
        if self.notification_store is None:
            return
        notification = NotificationCreate(
            type=NotificationType.LOW_INVENTORY,
            title=f"Low stock: {item.get('name')}",
            message=(
                f"{item.get('name')} is down to {item.get('quantity')} "
                f"{item.get('unit', '')}".rstrip()
            ),
            priority=NotificationPriority.HIGH,
            related_id=item["id"],
        )
        now = timestamp()
        self.notification_store.create(
            {**notification.to_create_document(), "createdAt": now, "updatedAt": now}
        )
        logger.info(f"Raised low stock notification for inventory item {item['id']}")


def restock_message(quantity: int, item: Document) -> str:
    unit = item.get("unit", "units")
    return (
        f"Successfully restocked {quantity} {unit}. "
        f"New total: {item.get('quantity')} {unit}"
    )
