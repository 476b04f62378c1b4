"""Equipment admin operations - listing, verification, status, edits and categories."""

import asyncio
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field

from src.models.listing import ListingRecord, sort_newest_first
from src.services.normalizer import category_enum_name
from src.services.supabase_client import (
    delete_document,
    fetch_documents,
    get_document,
    insert_document,
    split_document,
    update_document,
)
from src.utils.config import ConsoleConfig
from src.utils.errors import InvalidRecordError, RecordNotFoundError, RemoteStoreError
from src.utils.logging import get_structured_logger, log_timing, mask_user_id

logger = get_structured_logger(__name__)

EQUIPMENT = ConsoleConfig.EQUIPMENT_TABLE
UNKNOWN_OWNER = "Unknown"
ADMIN_OWNER_ID = "admin"
ADMIN_OWNER_NAME = "FilmGrid"


class EquipmentDraft(BaseModel):
    """Admin form input for creating or editing equipment."""
    title: Optional[str] = Field(None, description="Product title")
    brand: Optional[str] = Field(None, description="Brand")
    category: Optional[str] = Field(None, description="Display category, e.g. Lenses")
    description: Optional[str] = None
    daily_rate: Optional[float] = Field(None, ge=0, description="Rate per day")
    photos: Optional[list[str]] = None
    city: Optional[str] = None
    is_active: Optional[bool] = None


class CatalogItemDraft(BaseModel):
    """Admin form input for a reference catalog item."""
    name: str = Field(..., description="Product name")
    brand: str = Field(..., description="Brand")
    category: str = Field(..., description="Display category, e.g. Cameras")
    description: str = ""
    suggested_daily_rate: float = Field(default=0, ge=0, description="Suggested rate per day")
    image_urls: list[str] = Field(default_factory=list)
    is_active: bool = True


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def owner_display_name(user: dict) -> str:
    """Pick the best display name from a user document."""
    for key in ("displayName", "name", "filmgridId", "phoneNumber"):
        if user.get(key):
            return user[key]
    return UNKNOWN_OWNER


async def _lookup_owner_name(owner_id: str) -> Optional[str]:
    try:
        user = await get_document(ConsoleConfig.USERS_TABLE, owner_id)
    except RemoteStoreError as e:
        logger.warning(
            "Owner lookup failed",
            owner_id=mask_user_id(owner_id),
            error=str(e),
        )
        return None
    return owner_display_name(user) if user else None


def _needs_owner_name(row: dict) -> bool:
    owner_name = row.get("ownerName")
    return bool(row.get("ownerId")) and (not owner_name or owner_name == UNKNOWN_OWNER)


async def _resolve_owner_names(rows: list[dict]) -> list[dict]:
    """Fill in owner names that are missing or "Unknown" from the users collection."""
    owner_ids = list(dict.fromkeys(row["ownerId"] for row in rows if _needs_owner_name(row)))
    looked_up = await asyncio.gather(*(_lookup_owner_name(owner_id) for owner_id in owner_ids))
    names = dict(zip(owner_ids, looked_up))

    resolved = []
    for row in rows:
        if _needs_owner_name(row) and names.get(row["ownerId"]):
            row = {**row, "ownerName": names[row["ownerId"]]}
        resolved.append(row)
    return resolved


async def list_equipment(pending_only: bool = False) -> list[ListingRecord]:
    """
    Fetch equipment as listing records, newest first.

    With pending_only, only documents awaiting verification are returned.
    """
    filters = {"verificationStatus": "pending"} if pending_only else None
    with log_timing("list_equipment", logger=logger, pending_only=pending_only):
        rows = await fetch_documents(EQUIPMENT, filters=filters, order_by="createdAt")
        rows = await _resolve_owner_names(rows)

    records = []
    for row in rows:
        doc_id, data = split_document(row)
        records.append(ListingRecord.from_document(doc_id, data, source=EQUIPMENT))

    logger.info("Equipment listed", record_count=len(records), pending_only=pending_only)
    return sort_newest_first(records)


async def verify_equipment(equipment_id: str, approved: bool, notes: Optional[str] = None) -> dict:
    """Approve or reject equipment and notify its owner."""
    equipment = await get_document(EQUIPMENT, equipment_id)
    if equipment is None:
        raise RecordNotFoundError(f"Equipment not found: {equipment_id}")

    updates = {
        "verificationStatus": "verified" if approved else "rejected",
        "isVerified": approved,
        "verifiedAt": _now(),
    }
    if notes:
        updates["verificationNotes"] = notes
    updated = await update_document(EQUIPMENT, equipment_id, updates)

    owner_id = equipment.get("ownerId")
    if owner_id:
        await insert_document(
            ConsoleConfig.NOTIFICATIONS_TABLE,
            build_verification_notification(equipment_id, equipment, approved, notes),
        )

    logger.info(
        "Equipment verification updated",
        equipment_id=equipment_id,
        approved=approved,
        owner_id=mask_user_id(owner_id) if owner_id else None,
    )
    return updated


def build_verification_notification(
    equipment_id: str,
    equipment: dict,
    approved: bool,
    notes: Optional[str] = None,
) -> dict:
    """Notification document telling the owner about a verification decision."""
    title = equipment.get("title") or "equipment"
    if approved:
        heading = "Equipment Approved!"
        body = f"Your {title} has been verified and is now live on FilmGrid!"
    else:
        heading = "Equipment Not Approved"
        reason = f" Reason: {notes}" if notes else " Please contact support for more details."
        body = f"Your {title} was not approved.{reason}"

    return {
        "userId": equipment["ownerId"],
        "type": "equipmentVerified" if approved else "equipmentRejected",
        "title": heading,
        "body": body,
        "data": {"equipmentId": equipment_id, "equipmentTitle": equipment.get("title")},
        "isRead": False,
        "createdAt": _now(),
    }


async def toggle_equipment_status(equipment_id: str, is_active: bool) -> dict:
    """Show or hide equipment."""
    updated = await update_document(EQUIPMENT, equipment_id, {
        "isActive": is_active,
        "isAvailable": is_active,
        "updatedAt": _now(),
    })
    logger.info("Equipment status toggled", equipment_id=equipment_id, is_active=is_active)
    return updated


async def update_equipment_title(equipment_id: str, title: str) -> dict:
    """Rename equipment; blank titles are rejected."""
    title = (title or "").strip()
    if not title:
        raise InvalidRecordError("Title must not be empty")
    return await update_document(EQUIPMENT, equipment_id, {
        "title": title,
        "name": title,
        "updatedAt": _now(),
    })


async def delete_equipment(equipment_id: str) -> None:
    """Delete equipment. Irreversible."""
    await delete_document(EQUIPMENT, equipment_id)
    logger.warning("Equipment deleted", equipment_id=equipment_id)


def draft_to_document(draft: EquipmentDraft) -> dict:
    """
    Map draft fields to stored fields.

    Both the mobile app's field names and the console's aliases are written,
    and the category is stored as the app's enum name. Only fields set on
    the draft are included.
    """
    data = draft.model_dump(exclude_unset=True)
    document: dict = {}
    if data.get("title"):
        document["title"] = document["name"] = data["title"].strip()
    if data.get("brand"):
        document["brand"] = data["brand"].strip()
    if data.get("category"):
        document["category"] = category_enum_name(data["category"])
    if data.get("description"):
        document["description"] = data["description"]
    if data.get("daily_rate") is not None:
        document["dailyRate"] = data["daily_rate"]
    if data.get("photos") is not None:
        document["photos"] = document["imageUrls"] = list(data["photos"])
    if data.get("city"):
        document["city"] = document["location"] = data["city"]
    if data.get("is_active") is not None:
        document["isActive"] = document["isAvailable"] = data["is_active"]
    return document


async def create_equipment(draft: EquipmentDraft) -> str:
    """Create admin-owned, pre-verified equipment. Returns the new ID."""
    if not (draft.title or "").strip() or not (draft.category or "").strip():
        raise InvalidRecordError("Title and category are required")

    now = _now()
    document = {
        "description": "",
        "dailyRate": 0,
        "photos": [],
        "imageUrls": [],
        "city": "",
        "location": "",
        "isActive": True,
        "isAvailable": True,
        **draft_to_document(draft),
        "ownerId": ADMIN_OWNER_ID,
        "ownerName": ADMIN_OWNER_NAME,
        "ownerPhone": "",
        "accessories": [],
        "isVerified": True,
        "verificationStatus": "verified",
        "createdAt": now,
        "updatedAt": now,
    }
    created = await insert_document(EQUIPMENT, document)
    logger.info("Equipment created", equipment_id=created.get("id"), category=document["category"])
    return created["id"]


async def update_equipment(equipment_id: str, draft: EquipmentDraft) -> dict:
    """Patch only the fields provided on the draft."""
    document = draft_to_document(draft)
    document["updatedAt"] = _now()
    return await update_document(EQUIPMENT, equipment_id, document)


async def list_equipment_categories() -> list[str]:
    """Category names managed by admins, alphabetical."""
    rows = await fetch_documents(ConsoleConfig.EQUIPMENT_CATEGORIES_TABLE, order_by="name", descending=False)
    return [row["name"] for row in rows if row.get("name")]


async def create_equipment_category(name: str) -> bool:
    """Create a category unless it exists. Returns True when one was created."""
    name = (name or "").strip()
    if not name:
        raise InvalidRecordError("Category name must not be empty")

    existing = await fetch_documents(ConsoleConfig.EQUIPMENT_CATEGORIES_TABLE, filters={"name": name})
    if existing:
        return False

    await insert_document(ConsoleConfig.EQUIPMENT_CATEGORIES_TABLE, {"name": name, "createdAt": _now()})
    logger.info("Equipment category created", category=name)
    return True


async def list_equipment_catalog() -> list[ListingRecord]:
    """Reference catalog entries (suggested products and rates), newest first."""
    rows = await fetch_documents(ConsoleConfig.EQUIPMENT_CATALOG_TABLE, order_by="createdAt")
    records = []
    for row in rows:
        doc_id, data = split_document(row)
        records.append(ListingRecord.from_document(doc_id, data, source=ConsoleConfig.EQUIPMENT_CATALOG_TABLE))
    return sort_newest_first(records)


async def toggle_catalog_item_status(item_id: str, is_active: bool) -> dict:
    return await update_document(ConsoleConfig.EQUIPMENT_CATALOG_TABLE, item_id, {
        "isActive": is_active,
        "updatedAt": _now(),
    })


async def delete_catalog_item(item_id: str) -> None:
    await delete_document(ConsoleConfig.EQUIPMENT_CATALOG_TABLE, item_id)
    logger.warning("Catalog item deleted", item_id=item_id)


async def save_catalog_item(draft: CatalogItemDraft, item_id: Optional[str] = None) -> dict:
    """Create a reference catalog item, or replace its fields when item_id is given."""
    if not draft.name.strip() or not draft.brand.strip() or not draft.category.strip():
        raise InvalidRecordError("Name, brand and category are required")

    document = {
        "name": draft.name.strip(),
        "brand": draft.brand.strip(),
        "category": draft.category.strip(),
        "description": draft.description,
        "suggestedDailyRate": draft.suggested_daily_rate,
        "imageUrls": [url for url in draft.image_urls if url.startswith("http")],
        "isActive": draft.is_active,
        "updatedAt": _now(),
    }

    if item_id:
        return await update_document(ConsoleConfig.EQUIPMENT_CATALOG_TABLE, item_id, document)

    document["createdAt"] = document["updatedAt"]
    created = await insert_document(ConsoleConfig.EQUIPMENT_CATALOG_TABLE, document)
    logger.info("Catalog item created", item_id=created.get("id"), category=document["category"])
    return created
