"""Atomic claim of one vehicle unit paired with its dispatch log entry."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from ...config import settings
from ...models.domain import DispatchRecord, VehicleType, Zone
from ...persistence.store import DispatchStore
from .errors import AllocationConflictError, DispatchStoreError, ResourceUnavailableError

logger = logging.getLogger(__name__)


class AllocationTransaction:
    """Claims a unit with the store's compare-and-swap, then appends the record.

    If the append fails the claimed unit is handed back with a second
    compare-and-swap, so a counter change never outlives a missing log entry.
    """

    def __init__(self, store: DispatchStore, max_attempts: int | None = None) -> None:
        self.store = store
        self.max_attempts = max_attempts if max_attempts is not None else settings.allocation_max_attempts

    def commit(
        self,
        *,
        vehicle_type: VehicleType,
        source: Zone,
        destination: Zone,
        path: Sequence[str],
        distance: float,
    ) -> DispatchRecord:
        remaining = self._claim(vehicle_type, source)

        record = DispatchRecord(
            vehicle_type=vehicle_type,
            source_code=source.code,
            dest_code=destination.code,
            path=tuple(path) if path else (destination.code,),
            distance=float(distance),
            created_at=datetime.now(timezone.utc),
        )
        try:
            stored = self.store.append_dispatch(record)
        except Exception as exc:
            logger.error(f"Dispatch log append failed for {vehicle_type.value} at {source.code}: {exc}")
            self._release(vehicle_type, source, remaining)
            if isinstance(exc, DispatchStoreError):
                raise
            raise DispatchStoreError(f"Failed to record dispatch: {exc}") from exc

        logger.info(
            f"Allocated {vehicle_type.value} from {source.code} to {destination.code} "
            f"({remaining} left at source)"
        )
        return stored

    def _claim(self, vehicle_type: VehicleType, source: Zone) -> int:
        """Decrement the counter by one; returns the value after the decrement."""
        for attempt in range(1, self.max_attempts + 1):
            current = self.store.read_count(source.id, vehicle_type)
            if current <= 0:
                raise ResourceUnavailableError(f"No {vehicle_type.value} available at {source.code}")
            if self.store.try_decrement(source.id, vehicle_type, current):
                return current - 1
            logger.warning(
                f"Lost {vehicle_type.value} claim race at {source.code} "
                f"(attempt {attempt}/{self.max_attempts})"
            )
        raise AllocationConflictError(
            f"{vehicle_type.value} at {source.code} was claimed by concurrent dispatches; try again"
        )

    def _release(self, vehicle_type: VehicleType, source: Zone, expected: int) -> None:
        # the counter may have moved since our claim; follow it until the unit is returned
        for _ in range(self.max_attempts + 1):
            try:
                if self.store.try_increment(source.id, vehicle_type, expected):
                    logger.info(f"Returned {vehicle_type.value} to {source.code} after failed log append")
                    return
                expected = self.store.read_count(source.id, vehicle_type)
            except Exception as exc:
                logger.error(f"Compensation failed for {vehicle_type.value} at {source.code}: {exc}")
                break
        logger.error(
            f"Could not return {vehicle_type.value} to {source.code}; counter needs manual correction"
        )
