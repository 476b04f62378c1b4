"""Equipment admin actions endpoint (verify, reject, toggle, rename, delete)."""

from src.services.admin_guard import verify_admin_request
from src.services.equipment_admin import (
    delete_equipment,
    toggle_equipment_status,
    update_equipment_title,
    verify_equipment,
)
from src.utils.http import (
    error_response,
    json_response,
    request_body,
    request_correlation_id,
    request_headers,
    run_async,
)
from src.utils.logging import correlation_context, get_structured_logger, mask_sensitive_data, setup_logging

setup_logging()
logger = get_structured_logger(__name__)

ACTIONS = ("verify", "reject", "toggle", "rename", "delete")


async def perform_action(action: str, equipment_id: str, body: dict):
    """Dispatch one admin action; returns the updated document, or None after a delete."""
    if action == "verify":
        return await verify_equipment(equipment_id, approved=True, notes=body.get("notes"))
    if action == "reject":
        return await verify_equipment(equipment_id, approved=False, notes=body.get("notes"))
    if action == "toggle":
        if "is_active" not in body:
            raise ValueError("is_active is required")
        return await toggle_equipment_status(equipment_id, bool(body["is_active"]))
    if action == "rename":
        return await update_equipment_title(equipment_id, body.get("title", ""))
    if action == "delete":
        await delete_equipment(equipment_id)
        return None
    raise ValueError(f"Unknown action: {action}")


def handler(request):
    """
    Apply an admin action to one equipment document.

    Body: {"action": ..., "equipment_id": ..., plus action fields}
        verify / reject: optional "notes"
        toggle: "is_active"
        rename: "title"
    """
    with correlation_context(request_correlation_id(request)):
        try:
            admin = verify_admin_request(request_headers(request))
            body = request_body(request)

            action = body.get("action")
            equipment_id = body.get("equipment_id")
            if action not in ACTIONS:
                raise ValueError(f"Unknown action: {action}")
            if not equipment_id:
                raise ValueError("equipment_id is required")

            result = run_async(perform_action(action, equipment_id, body))
            logger.info(
                "Equipment action applied",
                action=action,
                equipment_id=equipment_id,
                admin=mask_sensitive_data(admin),
            )
            return json_response(200, {"ok": True, "action": action, "equipment": result})

        except Exception as e:
            logger.error("Equipment action failed", exc_info=True, error=str(e), error_type=type(e).__name__)
            return error_response(e)
