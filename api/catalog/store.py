"""Store catalogue page endpoint."""

from src.models.view_state import CatalogViewState
from src.services.admin_guard import verify_admin_request
from src.services.catalog_view import build_store_view
from src.services.store_catalogue import list_store_items
from src.utils.config import get_page_size
from src.utils.http import (
    error_response,
    json_response,
    query_params,
    request_correlation_id,
    request_headers,
    run_async,
)
from src.utils.logging import correlation_context, get_structured_logger, setup_logging

setup_logging()
logger = get_structured_logger(__name__)


def _page_number(params: dict) -> int:
    raw = params.get("page", "1")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid page number: {raw}")


def handler(request):
    """
    Return one page of the store catalogue.

    Query params: search, status (pending/approved/rejected/sold/all),
    type (equipment/non-equipment/all), page (1-based).
    """
    with correlation_context(request_correlation_id(request)):
        try:
            verify_admin_request(request_headers(request))

            params = query_params(request)
            state = (
                CatalogViewState(page_size=get_page_size())
                .with_search(params.get("search"))
                .with_filter("status", params.get("status"))
                .with_filter("item_type", params.get("type"))
                .with_page(_page_number(params))
            )

            records = run_async(list_store_items())
            view = build_store_view(records, state)
            return json_response(200, {"ok": True, **view})

        except Exception as e:
            logger.error("Store catalogue view failed", exc_info=True, error=str(e), error_type=type(e).__name__)
            return error_response(e)
