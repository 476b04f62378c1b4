"""Store catalogue operations - sales items and used gear moderation."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from src.models.listing import ListingRecord, sort_newest_first
from src.services.supabase_client import (
    delete_document,
    fetch_documents,
    insert_document,
    split_document,
    update_document,
)
from src.utils.config import ConsoleConfig
from src.utils.errors import InvalidRecordError
from src.utils.logging import get_structured_logger, mask_user_id, timed

logger = get_structured_logger(__name__)

SALES_ITEMS = ConsoleConfig.SALES_ITEMS_TABLE
USED_GEAR = ConsoleConfig.USED_GEAR_TABLE
STORE_SOURCES = (SALES_ITEMS, USED_GEAR)


class ItemStatus(str, Enum):
    """Moderation status of a store item."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SOLD = "sold"


class ItemType(str, Enum):
    EQUIPMENT = "equipment"
    NON_EQUIPMENT = "non-equipment"


class StoreItemDraft(BaseModel):
    """Admin form input for a sales item."""
    title: str = Field(..., description="Item title")
    category: str = Field(..., description="Category")
    price: float = Field(..., ge=0, description="Asking price")
    description: str = ""
    item_type: ItemType = ItemType.EQUIPMENT
    condition: str = "Good"
    location: str = ""
    seller_name: str = ""
    seller_phone: str = ""
    seller_fg_id: Optional[str] = None
    image_url: Optional[str] = None
    status: ItemStatus = ItemStatus.PENDING


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _source_or_default(source: Optional[str]) -> str:
    source = source or SALES_ITEMS
    if source not in STORE_SOURCES:
        raise InvalidRecordError(f"Unknown store collection: {source}")
    return source


@timed("list_store_items", logger=logger)
async def list_store_items() -> list[ListingRecord]:
    """Sales items and used gear merged into one list, newest first."""
    records: list[ListingRecord] = []
    for source in STORE_SOURCES:
        rows = await fetch_documents(source, order_by="createdAt")
        for row in rows:
            doc_id, data = split_document(row)
            data.setdefault("itemType", None)
            if source == SALES_ITEMS and data["itemType"] is None:
                data["itemType"] = ItemType.EQUIPMENT.value
            if data.get("status") is None:
                data["status"] = ItemStatus.PENDING.value
            records.append(ListingRecord.from_document(doc_id, data, source=source))

    records = sort_newest_first(records)
    logger.info("Store items listed", record_count=len(records))
    return records


async def change_item_status(
    item_id: str,
    status: ItemStatus,
    admin_id: Optional[str],
    reason: Optional[str] = None,
    source: Optional[str] = None,
) -> dict:
    """
    Move an item to a new moderation status.

    Approval stamps approvedAt/approvedBy; rejection stores the reason.
    """
    status = ItemStatus(status)
    updates: dict = {"status": status.value, "updatedAt": _now()}
    if status is ItemStatus.APPROVED:
        updates["approvedAt"] = _now()
        updates["approvedBy"] = admin_id or "admin"
    if status is ItemStatus.REJECTED and reason:
        updates["rejectionReason"] = reason

    updated = await update_document(_source_or_default(source), item_id, updates)
    logger.info(
        "Store item status changed",
        item_id=item_id,
        status=status.value,
        admin_id=mask_user_id(admin_id) if admin_id else None,
    )
    return updated


async def delete_store_item(item_id: str, source: Optional[str] = None) -> None:
    """Delete a store item. Irreversible."""
    await delete_document(_source_or_default(source), item_id)
    logger.warning("Store item deleted", item_id=item_id, source=source or SALES_ITEMS)


async def save_store_item(draft: StoreItemDraft, admin_id: Optional[str], item_id: Optional[str] = None) -> dict:
    """Create a sales item, or update it when item_id is given."""
    if not draft.title.strip() or not draft.category.strip():
        raise InvalidRecordError("Title and category are required")

    document = {
        "title": draft.title.strip(),
        "description": draft.description,
        "category": draft.category.strip(),
        "itemType": draft.item_type.value,
        "price": draft.price,
        "condition": draft.condition,
        "location": draft.location,
        "sellerName": draft.seller_name,
        "sellerPhone": draft.seller_phone,
        "sellerFgId": draft.seller_fg_id or None,
        "imageUrl": draft.image_url or None,
        "status": draft.status.value,
        "updatedAt": _now(),
    }

    if item_id:
        return await update_document(SALES_ITEMS, item_id, document)

    document["sellerId"] = admin_id or "admin"
    document["createdAt"] = document["updatedAt"]
    created = await insert_document(SALES_ITEMS, document)
    logger.info("Store item created", item_id=created.get("id"))
    return created
