"""Catalog grouping - category -> brand -> product title tree for hierarchical display."""

from typing import Iterable, Optional

from src.models.catalog import ProductBucket
from src.models.listing import ListingRecord
from src.services.normalizer import (
    CATALOG_CATEGORY,
    EQUIPMENT_BRAND,
    EQUIPMENT_CATEGORY,
    UNKNOWN,
    Normalizer,
    title_key,
)


class GroupedCatalog:
    """
    Nested mapping category -> brand -> title key -> records.

    Built once per snapshot by `group`; accessors never mutate it. Dict
    insertion order is kept so the first record in a leaf is the one whose
    title is displayed.
    """

    def __init__(self, tree: dict[str, dict[str, dict[str, list[ListingRecord]]]]):
        self._tree = tree

    @property
    def tree(self) -> dict[str, dict[str, dict[str, list[ListingRecord]]]]:
        return self._tree

    def categories(self) -> list[str]:
        return sorted(self._tree)

    def brands_for(self, category: str) -> list[str]:
        return sorted(self._tree.get(category, {}))

    def products_for(self, category: str, brand: str) -> list[ProductBucket]:
        products = self._tree.get(category, {}).get(brand, {})
        buckets = [
            ProductBucket(
                title_key=key,
                representative_title=items[0].title.strip() or UNKNOWN,
                records=list(items),
            )
            for key, items in products.items()
        ]
        return sorted(buckets, key=lambda bucket: (bucket.representative_title, bucket.title_key))

    def count_for(self, category: str) -> int:
        """Total records under a category, not distinct products."""
        brands = self._tree.get(category, {})
        return sum(len(items) for products in brands.values() for items in products.values())

    def distinct_product_count(self, category: str, brand: str) -> int:
        return len(self._tree.get(category, {}).get(brand, {}))

    def brand_keys(self) -> list[str]:
        """`category:brand` keys for every brand node, as used by expand-all."""
        return [f"{category}:{brand}" for category in self.categories() for brand in self.brands_for(category)]

    def records(self) -> list[ListingRecord]:
        """Every leaf record, each exactly once."""
        return [
            record
            for brands in self._tree.values()
            for products in brands.values()
            for items in products.values()
            for record in items
        ]

    def total_count(self) -> int:
        return sum(self.count_for(category) for category in self._tree)

    def __len__(self) -> int:
        return self.total_count()


def group(
    records: Iterable[ListingRecord],
    category_normalizer: Normalizer = EQUIPMENT_CATEGORY,
    brand_normalizer: Normalizer = EQUIPMENT_BRAND,
) -> GroupedCatalog:
    """Group records by normalized category, brand and title key."""
    tree: dict[str, dict[str, dict[str, list[ListingRecord]]]] = {}

    for record in records:
        category = category_normalizer(record.category)
        brand = brand_normalizer(record.brand)
        key = title_key(record.title)
        tree.setdefault(category, {}).setdefault(brand, {}).setdefault(key, []).append(record)

    return GroupedCatalog(tree)


def group_by_category(
    records: Iterable[ListingRecord],
    normalizer: Optional[Normalizer] = None,
) -> dict[str, list[ListingRecord]]:
    """One-level grouping by category, each bucket sorted by brand then title."""
    normalizer = normalizer or CATALOG_CATEGORY
    grouped: dict[str, list[ListingRecord]] = {}
    for record in records:
        grouped.setdefault(normalizer(record.category), []).append(record)

    return {
        category: sorted(items, key=lambda record: (record.brand, record.title))
        for category, items in sorted(grouped.items())
    }
