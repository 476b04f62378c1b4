"""Tests for the document store helpers."""

import pytest
from unittest.mock import MagicMock, patch
from src.services import supabase_client
from src.services.supabase_client import (
    delete_document,
    fetch_documents,
    generate_document_id,
    get_document,
    get_supabase_client,
    insert_document,
    split_document,
    update_document,
)
from src.utils.errors import RecordNotFoundError, RemoteStoreError


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fetch_documents_applies_filters_and_order(patched_store):
    patched_store.mock_query.execute.return_value = MagicMock(data=[{"id": "a"}])

    rows = await fetch_documents("equipment", filters={"verificationStatus": "pending"}, order_by="createdAt")

    assert rows == [{"id": "a"}]
    patched_store.table.assert_called_with("equipment")
    patched_store.mock_query.eq.assert_called_with("verificationStatus", "pending")
    patched_store.mock_query.order.assert_called_with("createdAt", desc=True)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_fetch_documents_wraps_errors(patched_store):
    patched_store.mock_query.execute.side_effect = Exception("connection reset")

    with pytest.raises(RemoteStoreError):
        await fetch_documents("equipment")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_document_missing_returns_none(patched_store):
    assert await get_document("users", "nobody") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_insert_document_generates_id(patched_store):
    patched_store.mock_query.execute.return_value = MagicMock(data=[{"id": "new"}])

    await insert_document("notifications", {"title": "hi"})

    row = patched_store.mock_table.insert.call_args[0][0]
    assert len(row["id"]) == 26
    assert row["title"] == "hi"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_insert_document_without_data_fails(patched_store):
    with pytest.raises(RemoteStoreError):
        await insert_document("notifications", {"title": "hi"}, doc_id="n1")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_missing_document_raises_not_found(patched_store):
    with pytest.raises(RecordNotFoundError):
        await update_document("equipment", "gone", {"isActive": True})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_document(patched_store):
    patched_store.mock_query.execute.return_value = MagicMock(data=[{"id": "e1"}])

    await delete_document("equipment", "e1")

    patched_store.mock_query.eq.assert_called_with("id", "e1")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_missing_document_raises_not_found(patched_store):
    with pytest.raises(RecordNotFoundError):
        await delete_document("equipment", "gone")


@pytest.mark.unit
def test_split_document():
    doc_id, data = split_document({"id": 7, "title": "FX3"})

    assert doc_id == "7"
    assert data == {"title": "FX3"}


@pytest.mark.unit
def test_split_document_without_id():
    with pytest.raises(RemoteStoreError):
        split_document({"title": "FX3"})


@pytest.mark.unit
def test_generate_document_id():
    first, second = generate_document_id(), generate_document_id()

    assert len(first) == 26
    assert first != second


@pytest.mark.unit
def test_client_requires_credentials(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.setattr(supabase_client, "_client", None)

    with pytest.raises(RemoteStoreError):
        get_supabase_client()


@pytest.mark.unit
def test_client_is_singleton(monkeypatch):
    monkeypatch.setattr(supabase_client, "_client", None)

    with patch("src.services.supabase_client.create_client") as mock_create:
        first = get_supabase_client()
        second = get_supabase_client()

    assert first is second
    mock_create.assert_called_once()
    monkeypatch.setattr(supabase_client, "_client", None)
