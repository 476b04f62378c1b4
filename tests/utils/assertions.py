"""Custom assertion helpers."""

from typing import Any, Dict
import json

from src.services.grouper import GroupedCatalog


def assert_valid_response(response: Dict[str, Any], expected_status: int = 200) -> None:
    """Assert that a Vercel function response is valid."""
    assert 'statusCode' in response
    assert response['statusCode'] == expected_status
    assert 'headers' in response
    assert 'body' in response

    if 'application/json' in response.get('headers', {}).get('Content-Type', ''):
        try:
            json.loads(response['body'])
        except json.JSONDecodeError:
            assert False, "Response body is not valid JSON"


def assert_grouping_consistent(catalog: GroupedCatalog, expected_total: int) -> None:
    """Every record lands in exactly one leaf and category counts add up."""
    assert catalog.total_count() == expected_total
    assert len(catalog.records()) == expected_total
    assert sum(catalog.count_for(category) for category in catalog.categories()) == expected_total

    for category in catalog.categories():
        leaf_total = sum(
            len(bucket.records)
            for brand in catalog.brands_for(category)
            for bucket in catalog.products_for(category, brand)
        )
        assert leaf_total == catalog.count_for(category)


def assert_page_valid(page: Any, page_size: int) -> None:
    assert 1 <= page.total_pages
    assert len(page.items) <= page_size
    if page.items:
        assert page.end_index - page.start_index + 1 == len(page.items)
