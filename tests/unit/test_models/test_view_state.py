"""Tests for the presentation view state."""

import pytest
from pydantic import ValidationError
from src.models.view_state import ALL, CatalogViewState
from src.services.grouper import group


@pytest.mark.unit
def test_defaults():
    state = CatalogViewState()

    assert state.search_query == ""
    assert state.page_number == 1
    assert state.page_size == 15
    assert state.active_filters() == {}


@pytest.mark.unit
def test_search_resets_page():
    state = CatalogViewState().with_page(4).with_search("sony")

    assert state.search_query == "sony"
    assert state.page_number == 1


@pytest.mark.unit
def test_filter_all_clears_filter():
    state = CatalogViewState().with_filter("status", "pending")
    assert state.active_filters() == {"status": "pending"}

    cleared = state.with_filter("status", ALL)
    assert cleared.active_filters() == {}
    assert state.active_filters() == {"status": "pending"}


@pytest.mark.unit
def test_filter_none_clears_filter():
    state = CatalogViewState().with_filter("item_type", "equipment").with_filter("item_type", None)
    assert "item_type" not in state.filters


@pytest.mark.unit
def test_invalid_page_rejected():
    with pytest.raises(ValueError):
        CatalogViewState().with_page(0)
    with pytest.raises(ValidationError):
        CatalogViewState(page_size=0)


@pytest.mark.unit
def test_toggle_category_and_brand():
    state = CatalogViewState().toggle_category("Lenses").toggle_brand("Lenses", "Sony")

    assert state.is_category_expanded("Lenses")
    assert state.is_brand_expanded("Lenses", "Sony")

    state = state.toggle_category("Lenses")
    assert not state.is_category_expanded("Lenses")
    assert state.is_brand_expanded("Lenses", "Sony")


@pytest.mark.unit
def test_expand_and_collapse_all(camera_records):
    catalog = group(camera_records)
    state = CatalogViewState().expand_all(catalog)

    assert all(state.is_category_expanded(c) for c in catalog.categories())
    assert state.is_brand_expanded("Lenses", "Sony")

    collapsed = state.collapse_all()
    assert collapsed.expanded_categories == set()
    assert collapsed.expanded_brands == set()


@pytest.mark.unit
def test_state_serializes():
    state = CatalogViewState().with_search("red").toggle_category("Cameras")
    restored = CatalogViewState.model_validate_json(state.model_dump_json())

    assert restored == state
