"""Catalog pipeline result models."""

from pydantic import BaseModel, Field, computed_field

from src.models.listing import ListingRecord


class ProductBucket(BaseModel):
    """Leaf bucket - records sharing normalized category, brand and title key."""
    title_key: str = Field(..., description="Lower-cased trimmed title used for grouping")
    representative_title: str = Field(..., description="Title of the first record inserted")
    records: list[ListingRecord] = Field(default_factory=list)

    @computed_field
    @property
    def min_rate(self) -> float:
        return min((record.rate_or_zero for record in self.records), default=0.0)

    @computed_field
    @property
    def max_rate(self) -> float:
        return max((record.rate_or_zero for record in self.records), default=0.0)

    @computed_field
    @property
    def active_count(self) -> int:
        return sum(1 for record in self.records if record.is_active)

    @computed_field
    @property
    def verified_count(self) -> int:
        return sum(1 for record in self.records if record.is_verified)

    @computed_field
    @property
    def owner_count(self) -> int:
        """Distinct owners offering this product."""
        owners = {record.owner_id or record.owner_name for record in self.records}
        owners.discard("")
        owners.discard(None)
        return len(owners)


class Page(BaseModel):
    """One fixed-size page of a filtered list."""
    items: list[ListingRecord] = Field(default_factory=list)
    total_pages: int = Field(..., ge=1)
    total_count: int = Field(..., ge=0)
    page_number: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)

    @computed_field
    @property
    def start_index(self) -> int:
        """1-based position of the first item shown, 0 when the page is empty."""
        if not self.items:
            return 0
        return (self.page_number - 1) * self.page_size + 1

    @computed_field
    @property
    def end_index(self) -> int:
        """1-based position of the last item shown, 0 when the page is empty."""
        if not self.items:
            return 0
        return min(self.page_number * self.page_size, self.total_count)
