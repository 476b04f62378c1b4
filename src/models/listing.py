"""Listing record model - the single record shape the catalog pipeline consumes."""

import math
from typing import Any, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field

from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


# used_gear documents mark consumables with a type label instead of itemType
NON_EQUIPMENT_GEAR_TYPE = "Materials & Consumables"


def _first_present(data: dict, *keys: str) -> Any:
    """Return the first value among keys that is not None or an empty string."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _rate(value: Any) -> Optional[float]:
    """A usable non-negative rate, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(rate) or math.isinf(rate) or rate < 0:
        return None
    return rate


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    # Store timestamp objects expose to_datetime()
    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return to_datetime()
    return None


def _photos(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str) and item]
    return []


class ListingRecord(BaseModel):
    """A marketplace entry (equipment, catalog item, store item)."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Document ID assigned by the remote store")
    category: str = Field(default="", description="Free-text category")
    brand: str = Field(default="", description="Free-text brand")
    title: str = Field(default="", description="Free-text title, displayed as entered")
    is_active: bool = Field(default=False, description="Visible to end users")
    is_verified: bool = Field(default=False, description="Approved by an admin")
    daily_rate: Optional[float] = Field(None, ge=0, description="Rate per day (or price)")
    owner_id: Optional[str] = Field(None, description="Author user ID")
    owner_name: str = Field(default="", description="Author display name")
    status: Optional[str] = Field(None, description="Verification or moderation status")
    item_type: Optional[str] = Field(None, description="equipment or non-equipment")
    city: str = Field(default="", description="City or pickup location")
    description: str = Field(default="")
    photos: list[str] = Field(default_factory=list, description="Image URLs")
    source: Optional[str] = Field(None, description="Collection the record was read from")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict, source: Optional[str] = None) -> "ListingRecord":
        """
        Assemble a record from a raw store document.

        Resolves the alias fields written by the mobile app and the admin
        forms (title/name, dailyRate/pricePerDay/price, ownerName/sellerName,
        isActive/isAvailable, ...) so downstream code sees one shape.
        Malformed values are recovered: an unusable rate becomes None,
        non-text values are stringified and unparseable timestamps are
        dropped. Recovered fields are logged with the document id.
        """
        data = data if isinstance(data, dict) else {}
        coerced = []

        is_active = data.get("isActive")
        if is_active is None:
            is_active = data.get("isAvailable", False)

        is_verified = data.get("isVerified")
        if is_verified is None:
            is_verified = data.get("verificationStatus") == "verified"

        item_type = data.get("itemType")
        if item_type is None and source == "used_gear":
            item_type = "non-equipment" if data.get("type") == NON_EQUIPMENT_GEAR_TYPE else "equipment"

        raw_rate = _first_present(data, "dailyRate", "pricePerDay", "suggestedDailyRate", "price")
        rate = _rate(raw_rate)
        if raw_rate is not None and rate is None:
            coerced.append("daily_rate")

        text_fields = {
            "category": data.get("category"),
            "brand": data.get("brand"),
            "title": _first_present(data, "title", "name"),
            "owner_name": _first_present(data, "ownerName", "sellerName", "storeName"),
            "city": _first_present(data, "city", "location"),
            "description": data.get("description"),
        }
        coerced.extend(
            field for field, value in text_fields.items()
            if value is not None and not isinstance(value, str)
        )

        raw_created = data.get("createdAt") or data.get("created_at")
        raw_updated = data.get("updatedAt") or data.get("updated_at")
        created_at = _timestamp(raw_created)
        updated_at = _timestamp(raw_updated)
        if raw_created is not None and created_at is None:
            coerced.append("created_at")
        if raw_updated is not None and updated_at is None:
            coerced.append("updated_at")

        if coerced:
            logger.warning(
                "Malformed document fields recovered",
                doc_id=str(doc_id),
                source=source,
                fields=coerced,
            )

        return cls(
            id=_text(doc_id),
            is_active=bool(is_active),
            is_verified=bool(is_verified),
            daily_rate=rate,
            owner_id=_optional_text(_first_present(data, "ownerId", "sellerId")),
            status=_optional_text(_first_present(data, "status", "verificationStatus")),
            item_type=_optional_text(item_type),
            photos=_photos(_first_present(data, "photos", "imageUrls", "images")),
            source=source,
            created_at=created_at,
            updated_at=updated_at,
            **{field: _text(value) for field, value in text_fields.items()},
        )

    @property
    def rate_or_zero(self) -> float:
        """Daily rate with a missing rate read as 0."""
        return self.daily_rate if self.daily_rate is not None else 0.0


def sort_newest_first(records: list[ListingRecord]) -> list[ListingRecord]:
    """Order records by creation time, newest first; undated records go last."""
    oldest = datetime.min.replace(tzinfo=timezone.utc)

    def created(record: ListingRecord) -> datetime:
        if record.created_at is None:
            return oldest
        if record.created_at.tzinfo is None:
            return record.created_at.replace(tzinfo=timezone.utc)
        return record.created_at

    return sorted(records, key=created, reverse=True)
