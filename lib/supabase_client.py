# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# One instance is built at application startup (see app/main.py lifespan)
# and handed to services through FastAPI dependencies; nothing here holds
# module-level client state.
#
# The helpers cover the handful of query shapes the academy tables need:
# - fetch one row by id / fetch filtered, ordered lists
# - insert, upsert, delete
# - conditional update (compare-and-set on extra column values)
#
# Usage:
#   supabase = SupabaseClient.from_settings(settings)
#   rows = supabase.fetch_all("testimonials", filters={"status": "Published"})
# =============================================================================

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from supabase import create_client, Client

if TYPE_CHECKING:
    from app.config import Settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "no rows" on .single()
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: the message says what failed,
    the suggestion says how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper around a supabase-py `Client`.

    Example:
        supabase = SupabaseClient.from_settings(settings)

        # Newest inquiries first
        rows = supabase.fetch_all(
            "student_inquiries",
            order_by="timestamp",
            desc=True,
        )

        # Move review forward only if nobody else touched the row
        row = supabase.update(
            "student_inquiries",
            inquiry_id,
            {"review": "completed"},
            match={"review": "in progress"},
        )
    """

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> SupabaseClient:
        """
        Create the client from application settings.

        Uses the service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            client = create_client(
                settings.SUPABASE_URL,
                settings.SUPABASE_SERVICE_KEY
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
            )
        logger.info("Supabase client initialized successfully")
        return cls(client)

    @property
    def raw(self) -> Client:
        """The underlying supabase-py client (storage access, RPC)."""
        return self._client

    def table(self, name: str):
        """Start a query builder on a table."""
        return self._client.table(name)

    @staticmethod
    def _normalize_id(value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(value) if isinstance(value, UUID) else value

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def fetch_one(
        self,
        table: str,
        record_id: str | UUID,
        id_column: str = "id",
    ) -> dict[str, Any] | None:
        """
        Fetch a single row by id.

        Returns:
            Row dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        record_id_str = self._normalize_id(record_id)

        try:
            response = (
                self._client.table(table)
                .select("*")
                .eq(id_column, record_id_str)
                .limit(1)
                .execute()
            )
        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} row: {e}",
                code="FETCH_FAILED",
                suggestion=f"Check that the {table} table exists and is reachable",
                details={"table": table, "id": record_id_str},
            )

        rows = response.data or []
        return rows[0] if rows else None

    def fetch_all(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        desc: bool = True,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """
        Fetch rows matching equality filters.

        Args:
            table: Table name
            filters: Column -> value equality predicates (None values skipped)
            order_by: Column to sort by
            desc: Sort descending (newest first) when ordering
            limit: Maximum number of rows
            columns: Column list for the select

        Raises:
            SupabaseClientError: If query fails
        """
        try:
            query = self._client.table(table).select(columns)
            for column, value in (filters or {}).items():
                if value is None:
                    continue
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=desc)
            if limit:
                query = query.limit(limit)

            response = query.execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list {table}: {e}",
                code="LIST_FAILED",
                suggestion=f"Check that the {table} table exists and is reachable",
                details={"table": table, "filters": filters or {}},
            )

        rows = response.data or []
        logger.debug(f"Fetched {len(rows)} rows from {table}")
        return rows

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row and return it.

        Raises:
            SupabaseClientError: If the insert fails or returns nothing
        """
        try:
            response = self._client.table(table).insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                suggestion="Check required columns and table permissions",
                details={"table": table},
            )

        if not response.data:
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_FAILED",
                details={"table": table},
            )
        return response.data[0]

    def upsert(
        self,
        table: str,
        data: dict[str, Any],
        on_conflict: str = "id",
    ) -> dict[str, Any]:
        """
        Insert or replace one row keyed by `on_conflict`.

        Raises:
            SupabaseClientError: If the upsert fails or returns nothing
        """
        try:
            response = (
                self._client.table(table)
                .upsert(data, on_conflict=on_conflict)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to upsert into {table}: {e}",
                code="UPSERT_FAILED",
                suggestion=f"Check that {table}.{on_conflict} has a unique constraint",
                details={"table": table, "on_conflict": on_conflict},
            )

        if not response.data:
            raise SupabaseClientError(
                message=f"Upsert into {table} returned no data",
                code="UPSERT_FAILED",
                details={"table": table},
            )
        return response.data[0]

    def update(
        self,
        table: str,
        record_id: str | UUID,
        data: dict[str, Any],
        match: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Update one row by id.

        `match` adds extra equality predicates to the UPDATE, which turns it
        into a compare-and-set: the row only changes if those columns still
        hold the given values.

        Returns:
            The updated row, or None when no row matched

        Raises:
            SupabaseClientError: If the update fails
        """
        record_id_str = self._normalize_id(record_id)

        try:
            query = self._client.table(table).update(data).eq("id", record_id_str)
            for column, value in (match or {}).items():
                query = query.eq(column, value)
            response = query.execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table} row: {e}",
                code="UPDATE_FAILED",
                suggestion="Check the column names and table permissions",
                details={"table": table, "id": record_id_str},
            )

        rows = response.data or []
        if rows:
            logger.info(f"Updated {table} row: {record_id_str}")
            return rows[0]
        return None

    def delete(self, table: str, record_id: str | UUID) -> bool:
        """
        Delete one row by id.

        Returns:
            True if a row was deleted, False if none matched

        Raises:
            SupabaseClientError: If the delete fails
        """
        return self.delete_where(table, "id", self._normalize_id(record_id)) > 0

    def delete_where(self, table: str, column: str, value: Any) -> int:
        """
        Delete every row where `column` equals `value`.

        Returns:
            Number of deleted rows

        Raises:
            SupabaseClientError: If the delete fails
        """
        try:
            response = (
                self._client.table(table)
                .delete()
                .eq(column, value)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete from {table}: {e}",
                code="DELETE_FAILED",
                suggestion="Check table permissions",
                details={"table": table, column: value},
            )

        deleted = len(response.data or [])
        logger.info(f"Deleted {deleted} row(s) from {table} where {column}={value}")
        return deleted

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    def ping(self, table: str = "student_inquiries") -> None:
        """
        Run the cheapest possible query.

        Raises:
            SupabaseClientError: If the database is unreachable
        """
        self.fetch_all(table, limit=1, columns="id")
