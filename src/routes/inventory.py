from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.core.security import get_current_user
from src.domain.permissions import INVENTORY_USE, INVENTORY_WRITE
from src.models.inventory import InventoryItemCreate, InventoryItemUpdate, StockChange
from src.models.user import User
from src.routes.deps import actor_for, get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.inventory import InventoryService, restock_message
from src.services.store import Stores

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])


def inventory_service(stores: Stores = Depends(get_stores)) -> InventoryService:
    return InventoryService(
        stores["inventory"],
        audit_store=stores["audit-logs"],
        notification_store=stores["notifications"],
    )


@router.get("")
@handle_route_errors("Failed to fetch inventory items")
async def list_inventory(
    category: Optional[str] = None,
    low_stock: bool = Query(False, alias="lowStock"),
    expired: bool = False,
    user: User = Depends(get_current_user),
    service: InventoryService = Depends(inventory_service),
):
    items = service.search(category=category, low_stock=low_stock, expired=expired)
    return envelope(
        "Inventory items retrieved successfully", count=len(items), inventoryItems=items
    )


@router.post("")
@handle_route_errors("Failed to create inventory item")
async def create_inventory_item(
    payload: InventoryItemCreate,
    request: Request,
    user: User = Depends(require_roles(INVENTORY_WRITE)),
    service: InventoryService = Depends(inventory_service),
):
    item = service.add_item(payload.to_create_document(), actor_for(request, user))
    return envelope("Inventory item created successfully", inventoryItem=item)


@router.get("/{item_id}")
@handle_route_errors("Failed to fetch inventory item")
async def get_inventory_item(
    item_id: str,
    user: User = Depends(get_current_user),
    service: InventoryService = Depends(inventory_service),
):
    return envelope("Inventory item retrieved successfully", inventoryItem=service.get(item_id))


@router.put("/{item_id}")
@handle_route_errors("Failed to update inventory item")
async def update_inventory_item(
    item_id: str,
    payload: InventoryItemUpdate,
    request: Request,
    user: User = Depends(require_roles(INVENTORY_WRITE)),
    service: InventoryService = Depends(inventory_service),
):
    item = service.update(item_id, payload.to_update_document(), actor_for(request, user))
    return envelope("Inventory item updated successfully", inventoryItem=item)


@router.delete("/{item_id}")
@handle_route_errors("Failed to delete inventory item")
async def delete_inventory_item(
    item_id: str,
    request: Request,
    user: User = Depends(require_roles(INVENTORY_WRITE)),
    service: InventoryService = Depends(inventory_service),
):
    service.delete(item_id, actor_for(request, user))
    return envelope("Inventory item deleted successfully")


@router.put("/{item_id}/restock")
@handle_route_errors("Failed to restock inventory item")
async def restock_inventory_item(
    item_id: str,
    payload: StockChange,
    request: Request,
    user: User = Depends(require_roles(INVENTORY_WRITE)),
    service: InventoryService = Depends(inventory_service),
):
    item = service.restock(item_id, payload.quantity, actor_for(request, user))
    return envelope(restock_message(payload.quantity, item), inventoryItem=item)


@router.put("/{item_id}/use")
@handle_route_errors("Failed to record inventory usage")
async def use_inventory_item(
    item_id: str,
    payload: StockChange,
    request: Request,
    user: User = Depends(require_roles(INVENTORY_USE)),
    service: InventoryService = Depends(inventory_service),
):
    """Draw stock, e.g. when a caretaker completes a feeding."""
    item = service.use(item_id, payload.quantity, actor_for(request, user))
    return envelope(
        f"Used {payload.quantity} {item.get('unit', '')}".rstrip(), inventoryItem=item
    )
