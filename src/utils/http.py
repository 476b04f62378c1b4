"""Response helpers shared by the serverless handlers."""

import json
import asyncio
from typing import Any, Coroutine, Optional

from src.utils.errors import (
    AdminAuthorizationError,
    InvalidRecordError,
    RecordNotFoundError,
)
from src.utils.logging_config import LoggingConfig


JSON_HEADERS = {"Content-Type": "application/json"}


def json_response(status_code: int, payload: Any) -> dict:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(payload, default=str),
    }


def status_for_error(error: Exception) -> int:
    """HTTP status for an error raised while serving a console request."""
    if isinstance(error, AdminAuthorizationError):
        return 401
    if isinstance(error, RecordNotFoundError):
        return 404
    if isinstance(error, (InvalidRecordError, ValueError)):
        return 400
    return 500


def error_response(error: Exception) -> dict:
    return json_response(status_for_error(error), {"error": str(error)})


def query_params(request: dict) -> dict:
    return request.get("query", {}) or {}


def request_headers(request: dict) -> dict:
    return request.get("headers", {}) or {}


def request_body(request: dict) -> dict:
    """Decode a JSON body; bodies may arrive as text, bytes or an already parsed dict."""
    body = request.get("body") or {}
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    if isinstance(body, str):
        try:
            body = json.loads(body) if body.strip() else {}
        except json.JSONDecodeError:
            raise ValueError("Request body must be JSON")
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def run_async(coro: Coroutine) -> Any:
    """Run a coroutine to completion from a synchronous handler."""
    try:
        loop = asyncio.get_event_loop()
        if loop.is_closed():
            raise RuntimeError("closed")
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

    return loop.run_until_complete(coro)


def request_correlation_id(request: dict) -> Optional[str]:
    """Correlation ID supplied by the caller, if any."""
    wanted = LoggingConfig.LOG_CORRELATION_ID_HEADER.lower()
    for key, value in request_headers(request).items():
        if key.lower() == wanted:
            return value or None
    return None
