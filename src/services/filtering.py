"""Search, filter and pagination over flat record lists."""

import math
from typing import Any, Mapping, Optional, Sequence

from src.models.catalog import Page
from src.models.listing import ListingRecord


DEFAULT_SEARCH_FIELDS = ("title", "brand", "owner_name")


def _field_text(record: Any, field: str) -> str:
    value = record.get(field) if isinstance(record, Mapping) else getattr(record, field, None)
    return "" if value is None else str(value)


def _field_value(record: Any, field: str) -> Any:
    return record.get(field) if isinstance(record, Mapping) else getattr(record, field, None)


def matches_search(record: Any, query: Optional[str], fields: Sequence[str] = DEFAULT_SEARCH_FIELDS) -> bool:
    """Case-insensitive substring match against ANY of fields; empty query matches."""
    if not query:
        return True
    needle = query.lower()
    return any(needle in _field_text(record, field).lower() for field in fields)


def matches_filters(record: Any, filters: Optional[Mapping[str, Any]]) -> bool:
    """All active filters hold; a filter with value None is inactive."""
    if not filters:
        return True
    return all(
        _field_value(record, field) == value
        for field, value in filters.items()
        if value is not None
    )


def filter_records(
    records: Sequence[ListingRecord],
    query: Optional[str] = None,
    filters: Optional[Mapping[str, Any]] = None,
    search_fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
) -> list[ListingRecord]:
    """Return matching records in input order; the input is left untouched."""
    return [
        record
        for record in records
        if matches_search(record, query, search_fields) and matches_filters(record, filters)
    ]


def total_pages_for(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


def paginate(items: Sequence[ListingRecord], page_size: int, page_number: int) -> Page:
    """
    Slice one page out of items.

    Args:
        items: Already filtered list
        page_size: Records per page (>= 1)
        page_number: 1-based page number (>= 1)

    Returns:
        Page with the slice and total-page metadata. A page past the end is
        returned empty; clamping to the last page is left to the caller.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    if page_number < 1:
        raise ValueError(f"page_number must be >= 1, got {page_number}")

    start = (page_number - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        total_pages=total_pages_for(len(items), page_size),
        total_count=len(items),
        page_number=page_number,
        page_size=page_size,
    )


def filter_and_paginate(
    records: Sequence[ListingRecord],
    query: Optional[str],
    filters: Optional[Mapping[str, Any]],
    page_size: int,
    page_number: int,
    search_fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
) -> Page:
    """Search, filter, then return one page of the result."""
    return paginate(filter_records(records, query, filters, search_fields), page_size, page_number)
