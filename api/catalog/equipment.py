"""Grouped equipment view endpoint."""

from src.models.view_state import CatalogViewState
from src.services.admin_guard import verify_admin_request
from src.services.catalog_view import build_equipment_view
from src.services.equipment_admin import list_equipment
from src.services.grouper import group
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


def handler(request):
    """
    Return the equipment tree for the admin console.

    Query params:
        search: free-text search over title, brand and owner name
        filter: "pending" to show only equipment awaiting verification
        expanded: "all" to expand every category and brand node
    """
    with correlation_context(request_correlation_id(request)):
        try:
            verify_admin_request(request_headers(request))

            params = query_params(request)
            pending_only = params.get("filter") == "pending"
            # Header stats always cover the full collection
            records = run_async(list_equipment())

            state = CatalogViewState().with_search(params.get("search"))
            if pending_only:
                state = state.with_filter("status", "pending")
            if params.get("expanded") == "all":
                state = state.expand_all(group(records))

            view = build_equipment_view(records, state)
            return json_response(200, {"ok": True, "pending_only": pending_only, **view})

        except Exception as e:
            logger.error("Equipment view failed", exc_info=True, error=str(e), error_type=type(e).__name__)
            return error_response(e)
