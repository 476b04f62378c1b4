"""Page views - assemble grouped and paginated listings from a fetched snapshot."""

from typing import Any, Sequence

from src.models.listing import ListingRecord
from src.models.view_state import CatalogViewState
from src.services.filtering import filter_records, paginate
from src.services.grouper import GroupedCatalog, group, group_by_category
from src.services.normalizer import get_normalizer
from src.utils.logging import get_structured_logger, log_timing, sanitize_search_query

logger = get_structured_logger(__name__)

EQUIPMENT_SEARCH_FIELDS = ("title", "brand", "owner_name")
EQUIPMENT_CATALOG_SEARCH_FIELDS = ("title", "brand")
STORE_SEARCH_FIELDS = ("title", "owner_name", "category")


def _count_status(records: Sequence[ListingRecord], status: str) -> int:
    return sum(1 for record in records if record.status == status)


def _distinct_owners(records: Sequence[ListingRecord]) -> int:
    return len({record.owner_id for record in records if record.owner_id})


def equipment_stats(records: Sequence[ListingRecord]) -> dict[str, int]:
    """Header counters of the equipment page, computed over the unfiltered snapshot."""
    return {
        "total_count": len(records),
        "lender_count": _distinct_owners(records),
        "pending_count": _count_status(records, "pending"),
    }


def store_stats(records: Sequence[ListingRecord]) -> dict[str, int]:
    """Header counters of the store catalogue page."""
    return {
        "total": len(records),
        "pending": _count_status(records, "pending"),
        "approved": _count_status(records, "approved"),
        "equipment": sum(1 for record in records if record.item_type == "equipment"),
        "non_equipment": sum(1 for record in records if record.item_type == "non-equipment"),
    }


def render_tree(catalog: GroupedCatalog, state: CatalogViewState) -> list[dict[str, Any]]:
    """Flatten a grouped catalog into the nested JSON the tree view renders."""
    tree = []
    for category in catalog.categories():
        brands = []
        for brand in catalog.brands_for(category):
            brands.append({
                "brand": brand,
                "product_count": catalog.distinct_product_count(category, brand),
                "expanded": state.is_brand_expanded(category, brand),
                "products": [
                    bucket.model_dump(mode="json")
                    for bucket in catalog.products_for(category, brand)
                ],
            })
        tree.append({
            "category": category,
            "count": catalog.count_for(category),
            "expanded": state.is_category_expanded(category),
            "brands": brands,
        })
    return tree


def build_equipment_view(records: Sequence[ListingRecord], state: CatalogViewState) -> dict[str, Any]:
    """Equipment page: search, group by category -> brand -> product."""
    with log_timing(
        "build_equipment_view",
        logger=logger,
        record_count=len(records),
        search_query=sanitize_search_query(state.search_query),
    ):
        filtered = filter_records(
            records,
            state.search_query,
            state.active_filters(),
            EQUIPMENT_SEARCH_FIELDS,
        )
        catalog = group(
            filtered,
            category_normalizer=get_normalizer("equipment", "category"),
            brand_normalizer=get_normalizer("equipment", "brand"),
        )

        logger.debug(
            "Equipment grouped",
            matched_count=len(filtered),
            category_count=len(catalog.categories()),
        )

        return {
            "stats": equipment_stats(records),
            "matched_count": len(filtered),
            "categories": render_tree(catalog, state),
        }


def build_equipment_catalog_view(records: Sequence[ListingRecord], state: CatalogViewState) -> dict[str, Any]:
    """Equipment catalog page: search and category filter, grouped by category."""
    with log_timing("build_equipment_catalog_view", logger=logger, record_count=len(records)):
        filtered = filter_records(
            records,
            state.search_query,
            state.active_filters(),
            EQUIPMENT_CATALOG_SEARCH_FIELDS,
        )
        grouped = group_by_category(filtered, get_normalizer("equipment_catalog", "category"))

        return {
            "matched_count": len(filtered),
            "categories": [
                {
                    "category": category,
                    "count": len(items),
                    "expanded": state.is_category_expanded(category),
                    "items": [item.model_dump(mode="json") for item in items],
                }
                for category, items in grouped.items()
            ],
        }


def build_table_view(
    records: Sequence[ListingRecord],
    state: CatalogViewState,
    search_fields: Sequence[str],
) -> dict[str, Any]:
    """Generic flat table: search, filters, one page."""
    filtered = filter_records(records, state.search_query, state.active_filters(), search_fields)
    page = paginate(filtered, state.page_size, state.page_number)
    return page.model_dump(mode="json")


def build_store_view(records: Sequence[ListingRecord], state: CatalogViewState) -> dict[str, Any]:
    """Store catalogue page: search, status and item type filters, one page."""
    with log_timing(
        "build_store_view",
        logger=logger,
        record_count=len(records),
        page_number=state.page_number,
    ):
        view = build_table_view(records, state, STORE_SEARCH_FIELDS)
        view["stats"] = store_stats(records)

        if not view["items"]:
            logger.info(
                "Store catalogue page is empty",
                total_count=view["total_count"],
                page_number=state.page_number,
            )

        return view
