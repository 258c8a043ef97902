import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from vehicle_dispatch.models.domain import VehicleType, Zone
from vehicle_dispatch.persistence.memory import InMemoryDispatchStore
from vehicle_dispatch.services.dispatch import (
    AllocationConflictError,
    AllocationTransaction,
    DispatchError,
    DispatchStoreError,
    ResourceUnavailableError,
)

AMBULANCE = VehicleType.AMBULANCE


def _zone(zid: str, ambulances: int = 0) -> Zone:
    return Zone(
        id=zid,
        code=f"Z{zid}",
        name=f"Zone {zid}",
        counts={AMBULANCE: ambulances},
        depots={AMBULANCE: ambulances > 0},
    )


def test_commit_decrements_and_records():
    source, destination = _zone("1", ambulances=2), _zone("2")
    store = InMemoryDispatchStore([source, destination])

    record = AllocationTransaction(store).commit(
        vehicle_type=AMBULANCE,
        source=source,
        destination=destination,
        path=["Z1", "Z2"],
        distance=4.5,
    )

    assert store.read_count("1", AMBULANCE) == 1
    assert record.id
    assert record.path == ("Z1", "Z2")
    assert record.distance == 4.5
    assert record.source_code == "Z1"
    assert record.dest_code == "Z2"
    assert store.list_dispatches(10) == [record]


def test_commit_with_empty_counter_changes_nothing():
    source, destination = _zone("1", ambulances=0), _zone("2")
    store = InMemoryDispatchStore([source, destination])

    with pytest.raises(ResourceUnavailableError):
        AllocationTransaction(store).commit(
            vehicle_type=AMBULANCE, source=source, destination=destination, path=["Z1", "Z2"], distance=1.0
        )

    assert store.read_count("1", AMBULANCE) == 0
    assert store.list_dispatches(10) == []


def test_concurrent_claims_on_last_unit():
    attempts = 12
    source, destination = _zone("1", ambulances=1), _zone("2")
    store = InMemoryDispatchStore([source, destination])
    transaction = AllocationTransaction(store)
    barrier = threading.Barrier(attempts)

    def claim():
        barrier.wait()
        try:
            transaction.commit(
                vehicle_type=AMBULANCE, source=source, destination=destination, path=["Z1", "Z2"], distance=1.0
            )
            return "ok"
        except (ResourceUnavailableError, AllocationConflictError) as exc:
            return exc.error_type

    with ThreadPoolExecutor(max_workers=attempts) as pool:
        outcomes = list(pool.map(lambda _: claim(), range(attempts)))

    assert outcomes.count("ok") == 1
    assert all(outcome in {"resource_unavailable", "conflict"} for outcome in outcomes if outcome != "ok")
    assert store.read_count("1", AMBULANCE) == 0
    assert len(store.list_dispatches(100)) == 1


def test_counter_never_goes_negative_under_load():
    attempts = 20
    source, destination = _zone("1", ambulances=5), _zone("2")
    store = InMemoryDispatchStore([source, destination])
    transaction = AllocationTransaction(store, max_attempts=50)

    def claim():
        try:
            transaction.commit(
                vehicle_type=AMBULANCE, source=source, destination=destination, path=["Z1", "Z2"], distance=1.0
            )
            return True
        except DispatchError:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(lambda _: claim(), range(attempts)))

    assert sum(outcomes) == 5
    assert store.read_count("1", AMBULANCE) == 0
    assert len(store.list_dispatches(100)) == 5


class AlwaysRacingStore(InMemoryDispatchStore):
    def try_decrement(self, zone_id, vehicle_type, expected):
        return False


def test_lost_races_surface_as_conflict():
    source, destination = _zone("1", ambulances=3), _zone("2")
    store = AlwaysRacingStore([source, destination])

    with pytest.raises(AllocationConflictError):
        AllocationTransaction(store, max_attempts=2).commit(
            vehicle_type=AMBULANCE, source=source, destination=destination, path=["Z1", "Z2"], distance=1.0
        )

    assert store.read_count("1", AMBULANCE) == 3
    assert store.list_dispatches(10) == []


class FailingLogStore(InMemoryDispatchStore):
    def append_dispatch(self, record):
        raise RuntimeError("connection reset")


def test_failed_log_append_returns_the_unit():
    source, destination = _zone("1", ambulances=2), _zone("2")
    store = FailingLogStore([source, destination])

    with pytest.raises(DispatchStoreError):
        AllocationTransaction(store).commit(
            vehicle_type=AMBULANCE, source=source, destination=destination, path=["Z1", "Z2"], distance=1.0
        )

    assert store.read_count("1", AMBULANCE) == 2
    assert store.list_dispatches(10) == []


class CompetingLogStore(InMemoryDispatchStore):
    """Another dispatch takes a unit while the log append is in flight, then the append fails."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.increments: list[int] = []

    def append_dispatch(self, record):
        current = self.read_count("1", AMBULANCE)
        assert self.try_decrement("1", AMBULANCE, current)
        raise RuntimeError("connection reset")

    def try_increment(self, zone_id, vehicle_type, expected):
        self.increments.append(expected)
        return super().try_increment(zone_id, vehicle_type, expected)


def test_failed_log_append_follows_a_moved_counter():
    source, destination = _zone("1", ambulances=3), _zone("2")
    store = CompetingLogStore([source, destination])

    with pytest.raises(DispatchStoreError):
        AllocationTransaction(store).commit(
            vehicle_type=AMBULANCE, source=source, destination=destination, path=["Z1", "Z2"], distance=1.0
        )

    # claim left 2, the competing dispatch left 1; the stale increment misses, the re-read one lands
    assert store.increments == [2, 1]
    assert store.read_count("1", AMBULANCE) == 2
    assert store.list_dispatches(10) == []
