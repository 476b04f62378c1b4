"""Shared pytest fixtures and configuration."""

import os
import pytest
from unittest.mock import MagicMock
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("ADMIN_EMAILS", "admin@filmgrid.test,ops@filmgrid.test")
os.environ.setdefault("CONSOLE_BYPASS_AUTH", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from tests.utils.factories import make_listing  # noqa: E402


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client whose query builder chains back to itself."""
    client = MagicMock()
    table = MagicMock()
    query = MagicMock()

    for method in ("select", "eq", "order", "insert", "update", "delete"):
        getattr(table, method).return_value = query
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=[])
    client.table.return_value = table

    client.mock_table = table
    client.mock_query = query
    return client


@pytest.fixture
def patched_store(mock_supabase_client):
    """Route the document helpers to the mock client."""
    from unittest.mock import patch

    with patch('src.services.supabase_client.SupabaseClient') as mock_client_class:
        mock_client_class.return_value.__aenter__.return_value = mock_supabase_client
        mock_client_class.return_value.__aexit__.return_value = False
        yield mock_supabase_client


@pytest.fixture
def camera_records():
    """Records from the equipment page examples: one Sony lens listed twice with different spellings."""
    return [
        make_listing(id="1", category="lens", brand="sony_g", title="FE 24-70mm", daily_rate=50, owner_id="o1", owner_name="Ama"),
        make_listing(id="2", category="Lenses", brand="Sony", title="fe 24-70mm", daily_rate=40, owner_id="o2", owner_name="Kofi"),
        make_listing(id="3", category="CAMERA", brand="red", title="Komodo 6K", daily_rate=300, owner_id="o1", owner_name="Ama"),
        make_listing(id="4", category="", brand="", title="", daily_rate=None, owner_id=None, owner_name=""),
    ]


ADMIN_TOKEN = "session-admin"
MEMBER_TOKEN = "session-member"


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def auth_sessions():
    """Supabase auth resolving known session tokens to users; others are rejected."""
    from unittest.mock import patch
    from supabase import AuthError

    sessions = {ADMIN_TOKEN: "admin@filmgrid.test", MEMBER_TOKEN: "lender@filmgrid.test"}

    def get_user(jwt=None):
        if jwt not in sessions:
            raise AuthError("invalid JWT", None)
        return MagicMock(user=MagicMock(email=sessions[jwt]))

    client = MagicMock()
    client.auth.get_user.side_effect = get_user
    with patch("src.services.admin_guard.get_supabase_client", return_value=client):
        yield client


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture
def mock_vercel_request(admin_headers):
    """Mock Vercel serverless function request."""
    return {
        "method": "GET",
        "path": "/api/catalog/equipment",
        "headers": dict(admin_headers),
        "body": None,
        "query": {},
    }
