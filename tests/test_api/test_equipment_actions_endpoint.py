"""Tests for the equipment actions endpoint."""

import pytest
from unittest.mock import AsyncMock, patch
from api.equipment.actions import handler
from src.utils.errors import InvalidRecordError, RecordNotFoundError
from tests.utils.assertions import assert_valid_response
from tests.utils.helpers import create_vercel_request, response_json

MODULE = "api.equipment.actions"


@pytest.fixture(autouse=True)
def console_env(monkeypatch, auth_sessions):
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("CONSOLE_BYPASS_AUTH", "false")
    monkeypatch.setenv("ADMIN_EMAILS", "admin@filmgrid.test")


def _request(body):
    return create_vercel_request(method="POST", path="/api/equipment/actions", body=body)


@pytest.mark.unit
def test_verify_action():
    with patch(f"{MODULE}.verify_equipment", new=AsyncMock(return_value={"id": "e1"})) as mock_verify:
        response = handler(_request({"action": "verify", "equipment_id": "e1"}))

    assert_valid_response(response, 200)
    assert response_json(response)["equipment"] == {"id": "e1"}
    mock_verify.assert_awaited_once_with("e1", approved=True, notes=None)


@pytest.mark.unit
def test_reject_action_with_notes():
    with patch(f"{MODULE}.verify_equipment", new=AsyncMock(return_value={"id": "e1"})) as mock_verify:
        handler(_request({"action": "reject", "equipment_id": "e1", "notes": "Duplicate"}))

    mock_verify.assert_awaited_once_with("e1", approved=False, notes="Duplicate")


@pytest.mark.unit
def test_toggle_action():
    with patch(f"{MODULE}.toggle_equipment_status", new=AsyncMock(return_value={})) as mock_toggle:
        response = handler(_request({"action": "toggle", "equipment_id": "e1", "is_active": False}))

    assert_valid_response(response, 200)
    mock_toggle.assert_awaited_once_with("e1", False)


@pytest.mark.unit
def test_toggle_requires_flag():
    response = handler(_request({"action": "toggle", "equipment_id": "e1"}))
    assert_valid_response(response, 400)


@pytest.mark.unit
def test_rename_blank_title_is_bad_request():
    with patch(f"{MODULE}.update_equipment_title", new=AsyncMock(side_effect=InvalidRecordError("Title must not be empty"))):
        response = handler(_request({"action": "rename", "equipment_id": "e1", "title": ""}))

    assert_valid_response(response, 400)


@pytest.mark.unit
def test_delete_action():
    with patch(f"{MODULE}.delete_equipment", new=AsyncMock()) as mock_delete:
        response = handler(_request({"action": "delete", "equipment_id": "e1"}))

    assert_valid_response(response, 200)
    assert response_json(response)["equipment"] is None
    mock_delete.assert_awaited_once_with("e1")


@pytest.mark.unit
def test_missing_record_is_not_found():
    with patch(f"{MODULE}.delete_equipment", new=AsyncMock(side_effect=RecordNotFoundError("gone"))):
        response = handler(_request({"action": "delete", "equipment_id": "gone"}))

    assert_valid_response(response, 404)


@pytest.mark.unit
@pytest.mark.parametrize("body", [
    {"action": "archive", "equipment_id": "e1"},
    {"action": "verify"},
    "not json",
])
def test_bad_requests(body):
    assert_valid_response(handler(_request(body)), 400)


@pytest.mark.unit
def test_requires_admin():
    request = create_vercel_request(method="POST", body={"action": "delete", "equipment_id": "e1"}, headers={})

    with patch(f"{MODULE}.delete_equipment", new=AsyncMock()) as mock_delete:
        response = handler(request)

    assert_valid_response(response, 401)
    mock_delete.assert_not_awaited()


@pytest.mark.unit
def test_self_declared_admin_email_cannot_delete():
    request = create_vercel_request(
        method="POST",
        body={"action": "delete", "equipment_id": "e1"},
        headers={"X-Admin-Email": "admin@filmgrid.test"},
    )

    with patch(f"{MODULE}.delete_equipment", new=AsyncMock()) as mock_delete:
        response = handler(request)

    assert_valid_response(response, 401)
    mock_delete.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.parametrize("token", ["session-member", "forged"])
def test_non_admin_sessions_cannot_act(token):
    request = create_vercel_request(
        method="POST",
        body={"action": "delete", "equipment_id": "e1"},
        headers={"Authorization": f"Bearer {token}"},
    )

    with patch(f"{MODULE}.delete_equipment", new=AsyncMock()) as mock_delete:
        response = handler(request)

    assert_valid_response(response, 401)
    mock_delete.assert_not_awaited()
