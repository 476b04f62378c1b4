"""Admin check for console requests - bearer session resolved by supabase auth, then the allow-list."""

import os
import logging
from typing import Mapping, Optional
from supabase import AuthError
from src.services.supabase_client import get_supabase_client
from src.utils.errors import AdminAuthorizationError, RemoteStoreError

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "bearer "


def should_bypass_auth() -> bool:
    """Check if the admin check should be bypassed (dev mode)."""
    env = os.environ.get("ENVIRONMENT", "").lower()
    if env in ("development", "local"):
        return True

    return os.environ.get("CONSOLE_BYPASS_AUTH", "").lower() == "true"


def admin_emails() -> set[str]:
    """Admin emails from the comma separated ADMIN_EMAILS variable."""
    raw = os.environ.get("ADMIN_EMAILS", "")
    return {email.strip().lower() for email in raw.split(",") if email.strip()}


def is_admin_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return email.strip().lower() in admin_emails()


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


def bearer_token(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    """Extract the session token from an `Authorization: Bearer <token>` header."""
    value = _header(headers or {}, AUTHORIZATION_HEADER)
    if not value or not value.lower().startswith(BEARER_PREFIX):
        return None
    return value[len(BEARER_PREFIX):].strip() or None


def resolve_session_email(token: str) -> Optional[str]:
    """
    Resolve a session token to the signed-in user's email.

    Returns None when the auth service rejects the token; any other auth
    failure raises RemoteStoreError.
    """
    client = get_supabase_client()
    try:
        response = client.auth.get_user(token)
    except AuthError as e:
        logger.warning("Session token rejected", extra={"error_type": type(e).__name__})
        return None
    except Exception as e:
        raise RemoteStoreError(f"Failed to resolve session: {e}")

    user = getattr(response, "user", None)
    return getattr(user, "email", None) if user else None


def verify_admin_request(headers: Optional[Mapping[str, str]]) -> str:
    """
    Verify the caller holds a session for an allow-listed admin.

    Returns the admin email (or "dev" when bypassed); raises
    AdminAuthorizationError otherwise.
    """
    if should_bypass_auth():
        logger.debug("Admin check bypassed (dev mode)")
        return "dev"

    token = bearer_token(headers)
    if not token:
        logger.warning("Rejected console request without a session token")
        raise AdminAuthorizationError("Unauthorized: Missing bearer token")

    email = resolve_session_email(token)
    if not is_admin_email(email):
        logger.warning("Rejected non-admin console request", extra={"has_email": bool(email)})
        raise AdminAuthorizationError("Unauthorized: Not an admin email")
    return email.strip().lower()
