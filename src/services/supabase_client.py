"""Supabase client wrapper with async context manager support."""

import os
from typing import Any, Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from ulid import ULID
from src.utils.errors import RemoteStoreError, RecordNotFoundError
import logging

logger = logging.getLogger(__name__)

# Global client instance (singleton pattern)
_client: Optional[Client] = None

# Primary key column of every console collection
ID_COLUMN = "id"


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

        if not url or not key:
            raise RemoteStoreError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"url": url})

    return _client


async def close_supabase_client() -> None:
    """Drop the client reference."""
    global _client
    if _client:
        _client = None
        logger.info("Supabase client closed")


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        """Enter async context."""
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context."""
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


def generate_document_id() -> str:
    """Generate a text document ID (ULID format)."""
    return str(ULID())


def split_document(row: dict) -> tuple[str, dict]:
    """Split a row into its document ID and the remaining fields."""
    data = dict(row)
    doc_id = data.pop(ID_COLUMN, None)
    if doc_id is None:
        raise RemoteStoreError("Row has no id column")
    return str(doc_id), data


async def fetch_documents(
    table: str,
    filters: Optional[dict[str, Any]] = None,
    order_by: Optional[str] = None,
    descending: bool = True,
) -> list[dict]:
    """Fetch every row of a collection matching equality filters."""
    async with SupabaseClient() as client:
        try:
            query = client.table(table).select("*")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=descending)
            result = query.execute()
            return result.data if result.data else []
        except Exception as e:
            raise RemoteStoreError(f"Failed to fetch {table}: {e}")


async def get_document(table: str, doc_id: str) -> Optional[dict]:
    """Get one row by ID, or None."""
    async with SupabaseClient() as client:
        try:
            result = client.table(table).select("*").eq(ID_COLUMN, doc_id).execute()
            return result.data[0] if result.data and len(result.data) > 0 else None
        except Exception as e:
            raise RemoteStoreError(f"Failed to get {table}/{doc_id}: {e}")


async def insert_document(table: str, data: dict, doc_id: Optional[str] = None) -> dict:
    """Insert a row; an ID is generated when none is given."""
    row = {ID_COLUMN: doc_id or generate_document_id(), **data}
    async with SupabaseClient() as client:
        try:
            result = client.table(table).insert(row).execute()
            if result.data and len(result.data) > 0:
                return result.data[0]
            raise RemoteStoreError(f"Failed to insert into {table}: no data returned")
        except RemoteStoreError:
            raise
        except Exception as e:
            raise RemoteStoreError(f"Failed to insert into {table}: {e}")


async def update_document(table: str, doc_id: str, updates: dict) -> dict:
    """Patch the given fields of one row."""
    async with SupabaseClient() as client:
        try:
            result = client.table(table).update(updates).eq(ID_COLUMN, doc_id).execute()
        except Exception as e:
            raise RemoteStoreError(f"Failed to update {table}/{doc_id}: {e}")
        if result.data and len(result.data) > 0:
            return result.data[0]
        raise RecordNotFoundError(f"{table}/{doc_id} not found")


async def delete_document(table: str, doc_id: str) -> None:
    """Delete one row. Irreversible."""
    async with SupabaseClient() as client:
        try:
            result = client.table(table).delete().eq(ID_COLUMN, doc_id).execute()
        except Exception as e:
            raise RemoteStoreError(f"Failed to delete {table}/{doc_id}: {e}")
        if not result.data:
            raise RecordNotFoundError(f"{table}/{doc_id} not found")
