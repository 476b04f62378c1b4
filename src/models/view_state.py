"""Presentation view state - search, filters, paging and tree expansion."""

from typing import Any, Optional, TYPE_CHECKING
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from src.services.grouper import GroupedCatalog


# Filter value the UI uses for "no filter"
ALL = "all"


class CatalogViewState(BaseModel):
    """
    Serializable view state owned by the presentation layer.

    Transitions return a new state; the catalog pipeline receives the state
    as a parameter and never reads it from anywhere else.
    """
    search_query: str = Field(default="", description="Free-text search")
    filters: dict[str, Any] = Field(default_factory=dict, description="field -> required value")
    page_number: int = Field(default=1, ge=1, description="1-based page number")
    page_size: int = Field(default=15, ge=1, description="Records per page")
    expanded_categories: set[str] = Field(default_factory=set)
    expanded_brands: set[str] = Field(default_factory=set, description="category:brand keys")

    def with_search(self, query: Optional[str]) -> "CatalogViewState":
        return self.model_copy(update={"search_query": query or "", "page_number": 1})

    def with_filter(self, field: str, value: Any) -> "CatalogViewState":
        """Set a filter; None or "all" clears it."""
        filters = dict(self.filters)
        if value is None or value == ALL:
            filters.pop(field, None)
        else:
            filters[field] = value
        return self.model_copy(update={"filters": filters, "page_number": 1})

    def with_page(self, page_number: int) -> "CatalogViewState":
        if page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {page_number}")
        return self.model_copy(update={"page_number": page_number})

    def toggle_category(self, category: str) -> "CatalogViewState":
        return self.model_copy(update={"expanded_categories": self.expanded_categories ^ {category}})

    def toggle_brand(self, category: str, brand: str) -> "CatalogViewState":
        return self.model_copy(update={"expanded_brands": self.expanded_brands ^ {f"{category}:{brand}"}})

    def expand_all(self, catalog: "GroupedCatalog") -> "CatalogViewState":
        return self.model_copy(update={
            "expanded_categories": set(catalog.categories()),
            "expanded_brands": set(catalog.brand_keys()),
        })

    def collapse_all(self) -> "CatalogViewState":
        return self.model_copy(update={"expanded_categories": set(), "expanded_brands": set()})

    def is_category_expanded(self, category: str) -> bool:
        return category in self.expanded_categories

    def is_brand_expanded(self, category: str, brand: str) -> bool:
        return f"{category}:{brand}" in self.expanded_brands

    def active_filters(self) -> dict[str, Any]:
        return {field: value for field, value in self.filters.items() if value is not None and value != ALL}
