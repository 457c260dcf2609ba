"""Key-based document access over Supabase tables."""

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import AsyncClient

from src.api.middleware.error_handler import StoreError

logger = logging.getLogger(__name__)


class DocumentStore:
    """CRUD on a single table, addressed by equality filters.

    Every method maps to exactly one PostgREST request. Driver and
    transport failures are re-raised as StoreError so callers never see
    database internals.
    """

    def __init__(self, client: AsyncClient, table: str, columns: str = "*") -> None:
        """Initialize the store.

        Args:
            client: Async Supabase client.
            table: Table name.
            columns: Select list used for reads, may embed related rows.
        """
        self.client = client
        self.table = table
        self.columns = columns

    async def find_one(self, filters: dict[str, Any]) -> dict[str, Any] | None:
        """Return the first row matching all filters, or None."""
        try:
            response = (
                await self.client.table(self.table)
                .select(self.columns)
                .match(filters)
                .limit(1)
                .execute()
            )
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise self._fault("find_one", exc) from exc
        return response.data[0] if response.data else None

    async def find_many(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Return every row matching the filters (all rows when none)."""
        try:
            query = self.client.table(self.table).select(self.columns)
            if filters:
                query = query.match(filters)
            response = await query.execute()
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise self._fault("find_many", exc) from exc
        return list(response.data or [])

    async def create(self, doc: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it as stored."""
        try:
            response = await self.client.table(self.table).insert(doc).execute()
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise self._fault("create", exc) from exc
        if not response.data:
            raise StoreError(f"Insert into {self.table} returned no row")
        return response.data[0]

    async def create_if_absent(self, doc: dict[str, Any], on_conflict: str) -> dict[str, Any] | None:
        """Insert a row unless one with the same unique key exists.

        Runs as a single ``INSERT ... ON CONFLICT DO NOTHING``.

        Returns:
            dict | None: The inserted row, or None when the key was taken.
        """
        try:
            response = (
                await self.client.table(self.table)
                .upsert(doc, on_conflict=on_conflict, ignore_duplicates=True)
                .execute()
            )
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise self._fault("create_if_absent", exc) from exc
        return response.data[0] if response.data else None

    async def upsert(self, doc: dict[str, Any], on_conflict: str) -> dict[str, Any]:
        """Insert a row or merge the given columns into the existing one.

        Columns absent from ``doc`` keep their stored values on update.
        """
        try:
            response = (
                await self.client.table(self.table)
                .upsert(doc, on_conflict=on_conflict)
                .execute()
            )
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise self._fault("upsert", exc) from exc
        if not response.data:
            raise StoreError(f"Upsert into {self.table} returned no row")
        return response.data[0]

    async def update_one(self, filters: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any] | None:
        """Apply a patch to the matching row and return it, or None if absent."""
        try:
            response = (
                await self.client.table(self.table)
                .update(patch)
                .match(filters)
                .execute()
            )
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise self._fault("update_one", exc) from exc
        return response.data[0] if response.data else None

    async def delete_one(self, filters: dict[str, Any]) -> bool:
        """Delete matching rows. Returns whether anything was removed."""
        try:
            response = (
                await self.client.table(self.table)
                .delete()
                .match(filters)
                .execute()
            )
        except (PostgrestAPIError, httpx.HTTPError) as exc:
            raise self._fault("delete_one", exc) from exc
        return bool(response.data)

    def _fault(self, operation: str, exc: Exception) -> StoreError:
        logger.error("Store %s on %s failed: %s", operation, self.table, exc)
        return StoreError(f"{operation} on {self.table} failed")
