"""
Remote table access.

Every screen fetches its rows in full and writes single rows back; this
module is the only place that talks to the hosted backend. Rows are plain
dicts keyed by column name.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import structlog
from postgrest.exceptions import APIError
from supabase import Client, create_client

from freightboard.core.config import ConfigManager, get_config
from freightboard.core.exceptions import RecordNotFoundError, StoreError

logger = structlog.get_logger(__name__)

DRIVERS_TABLE = "drivers"
FREIGHTS_TABLE = "freights"

# Postgres SQLSTATE for a foreign key violation
FOREIGN_KEY_VIOLATION = "23503"


class TableStore(ABC):
    """Row-level operations on remote tables."""

    @abstractmethod
    def select(
        self,
        table: str,
        columns: str = "*",
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Fetch all rows of a table."""

    @abstractmethod
    def get(self, table: str, record_id: str, columns: str = "*") -> dict[str, Any]:
        """Fetch one row by id. Raises RecordNotFoundError."""

    @abstractmethod
    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it as stored."""

    @abstractmethod
    def update(self, table: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        """Patch a row by id and return it. Raises RecordNotFoundError."""

    @abstractmethod
    def delete(self, table: str, record_id: str) -> None:
        """Delete a row by id."""

    @abstractmethod
    def count(self, table: str) -> int:
        """Number of rows in a table."""


class SupabaseTableStore(TableStore):
    """TableStore backed by a Supabase (PostgREST) client."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def _fail(self, table: str, operation: str, error: Exception) -> StoreError:
        code = getattr(error, "code", None)
        logger.error("store_call_failed", table=table, operation=operation, code=code, error=str(error))
        return StoreError(table, operation, cause=error, code=code)

    def select(
        self,
        table: str,
        columns: str = "*",
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        query = self.client.table(table).select(columns)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(limit)
        try:
            response = query.execute()
        except APIError as e:
            raise self._fail(table, "select", e) from e
        return list(response.data or [])

    def get(self, table: str, record_id: str, columns: str = "*") -> dict[str, Any]:
        try:
            response = self.client.table(table).select(columns).eq("id", record_id).execute()
        except APIError as e:
            raise self._fail(table, "get", e) from e
        if not response.data:
            raise RecordNotFoundError(table, record_id)
        return response.data[0]

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.client.table(table).insert(row).execute()
        except APIError as e:
            raise self._fail(table, "insert", e) from e
        return response.data[0] if response.data else dict(row)

    def update(self, table: str, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self.client.table(table).update(patch).eq("id", record_id).execute()
        except APIError as e:
            raise self._fail(table, "update", e) from e
        if not response.data:
            raise RecordNotFoundError(table, record_id)
        return response.data[0]

    def delete(self, table: str, record_id: str) -> None:
        try:
            self.client.table(table).delete().eq("id", record_id).execute()
        except APIError as e:
            raise self._fail(table, "delete", e) from e

    def count(self, table: str) -> int:
        try:
            response = self.client.table(table).select("id", count="exact").execute()
        except APIError as e:
            raise self._fail(table, "count", e) from e
        return response.count if response.count is not None else len(response.data or [])


_store: Optional[TableStore] = None


def get_store(config_manager: Optional[ConfigManager] = None) -> TableStore:
    """
    Get or create the global Supabase-backed store.

    Raises:
        ValueError: If SUPABASE_URL / SUPABASE_KEY are not set
    """
    global _store
    if _store is None:
        env = (config_manager or get_config()).env
        if not env.supabase_configured:
            raise ValueError("Supabase not configured. Set SUPABASE_URL and SUPABASE_KEY")
        logger.info("initializing_supabase_client")
        _store = SupabaseTableStore(create_client(env.supabase_url, env.supabase_key))
    return _store


def set_store(store: Optional[TableStore]) -> None:
    """Replace the global store (None resets it)."""
    global _store
    _store = store
