"""Supabase persistence for zones, edges and the dispatch log."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import DispatchRecord, Edge, VehicleType, Zone
from ..services.dispatch.errors import DispatchStoreError
from .rows import edge_from_row, record_from_row, record_to_row, zone_from_row

logger = logging.getLogger(__name__)


class SupabaseDispatchStore:
    """PostgREST-backed store.

    Counter updates are filtered on the expected value
    (``UPDATE ... WHERE id = :id AND <type>_count = :expected``), so the database
    applies each compare-and-swap atomically; an empty representation means the
    row had already changed.
    """

    def __init__(
        self,
        client: Any | None = None,
        *,
        zones_table: str | None = None,
        edges_table: str | None = None,
        dispatch_logs_table: str | None = None,
    ) -> None:
        self._client = client
        self.zones_table = zones_table or settings.zones_table
        self.edges_table = edges_table or settings.edges_table
        self.dispatch_logs_table = dispatch_logs_table or settings.dispatch_logs_table

    @property
    def client(self) -> Any:
        client = self._client or get_supabase_client()
        if client is None:
            raise DispatchStoreError(
                "Supabase not configured. Set DISPATCH_SUPABASE_URL and DISPATCH_SUPABASE_KEY environment variables."
            )
        return client

    def load_zones(self) -> list[Zone]:
        rows = self._execute(
            lambda: self.client.table(self.zones_table).select("*").order("code").execute(),
            f"load zones from '{self.zones_table}'",
        )
        try:
            return [zone_from_row(row) for row in rows]
        except (KeyError, ValueError, TypeError) as exc:
            raise DispatchStoreError(f"Invalid zone data: {exc}") from exc

    def load_edges(self) -> list[Edge]:
        rows = self._execute(
            lambda: self.client.table(self.edges_table).select("*").order("created_at").execute(),
            f"load edges from '{self.edges_table}'",
        )
        try:
            return [edge_from_row(row, position) for position, row in enumerate(rows)]
        except (KeyError, ValueError, TypeError) as exc:
            raise DispatchStoreError(f"Invalid edge data: {exc}") from exc

    def read_count(self, zone_id: str, vehicle_type: VehicleType) -> int:
        column = vehicle_type.count_column
        rows = self._execute(
            lambda: self.client.table(self.zones_table).select(column).eq("id", zone_id).limit(1).execute(),
            f"read {column} for zone {zone_id}",
        )
        if not rows:
            raise DispatchStoreError(f"Zone '{zone_id}' does not exist in the store.")
        return int(rows[0].get(column) or 0)

    def try_decrement(self, zone_id: str, vehicle_type: VehicleType, expected: int) -> bool:
        if expected <= 0:
            return False
        return self._compare_and_swap(zone_id, vehicle_type, expected, expected - 1)

    def try_increment(self, zone_id: str, vehicle_type: VehicleType, expected: int) -> bool:
        return self._compare_and_swap(zone_id, vehicle_type, expected, expected + 1)

    def append_dispatch(self, record: DispatchRecord) -> DispatchRecord:
        rows = self._execute(
            lambda: self.client.table(self.dispatch_logs_table).insert(record_to_row(record)).execute(),
            "append dispatch log entry",
        )
        # The insert has committed from here on; never report it as failed.
        if not rows:
            logger.warning("Dispatch log insert returned no representation; keeping the local record")
            return record
        try:
            return record_from_row(rows[0])
        except (KeyError, ValueError, TypeError) as exc:
            logger.warning(f"Could not parse stored dispatch log row ({exc}); keeping the local record")
            stored_id = rows[0].get("id")
            return replace(record, id=str(stored_id) if stored_id is not None else record.id)

    def list_dispatches(self, limit: int) -> list[DispatchRecord]:
        rows = self._execute(
            lambda: self.client.table(self.dispatch_logs_table)
            .select("*")
            .order("created_at", desc=True)
            .limit(limit)
            .execute(),
            "list dispatch log entries",
        )
        try:
            return [record_from_row(row) for row in rows]
        except (KeyError, ValueError, TypeError) as exc:
            raise DispatchStoreError(f"Invalid dispatch log data: {exc}") from exc

    def _compare_and_swap(self, zone_id: str, vehicle_type: VehicleType, expected: int, new_value: int) -> bool:
        column = vehicle_type.count_column
        rows = self._execute(
            lambda: self.client.table(self.zones_table)
            .update({column: new_value})
            .eq("id", zone_id)
            .eq(column, expected)
            .execute(),
            f"update {column} for zone {zone_id}",
        )
        return bool(rows)

    def _execute(self, query, action: str) -> list[dict[str, Any]]:
        try:
            response = query()
        except DispatchStoreError:
            raise
        except Exception as exc:
            logger.error(f"Supabase request failed ({action}): {exc}")
            raise DispatchStoreError(f"Failed to {action}: {exc}") from exc
        return list(response.data or [])
