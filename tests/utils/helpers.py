"""Test helper functions."""

import json
from typing import Dict, Any, Optional


def create_vercel_request(
    method: str = "GET",
    path: str = "/api/catalog/equipment",
    body: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    query: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Create a Vercel request object for testing."""
    if headers is None:
        headers = {
            "content-type": "application/json",
            "authorization": "Bearer session-admin",
        }

    return {
        "method": method,
        "path": path,
        "headers": headers,
        "body": json.dumps(body) if isinstance(body, dict) else body,
        "query": query or {},
    }


def response_json(response: Dict[str, Any]) -> Dict[str, Any]:
    return json.loads(response["body"])
