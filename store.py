from __future__ import annotations

import logging
from decimal import InvalidOperation
from typing import Iterable, List, Optional, Tuple

from db import TRIPS_KEY, LocalStorage, load_list, save_list
from filters import TripFilter, search as search_trips
from models import TripRecord, TripStatus, row_to_trip, trip_to_row


logger = logging.getLogger(__name__)


class TripStoreError(Exception):
    pass


class TripNotFoundError(TripStoreError, LookupError):
    def __init__(self, trip_id: str):
        super().__init__(f"No trip with id {trip_id!r}.")
        self.trip_id = trip_id


class DuplicateTripError(TripStoreError, ValueError):
    def __init__(self, trip_id: str):
        super().__init__(f"A trip with id {trip_id!r} already exists.")
        self.trip_id = trip_id


class StorageError(TripStoreError):
    pass


def sort_trips(trips: Iterable[TripRecord]) -> List[TripRecord]:
    """Newest date first; same date -> most recently created first."""
    return sorted(trips, key=lambda t: (t.date, t.created_at, t.id), reverse=True)


def rows_to_trips(rows: Iterable) -> List[TripRecord]:
    """Decode stored rows, skipping (and logging) any that can't be used."""
    trips: List[TripRecord] = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            logger.warning("Skipping stored trip #%d: not an object", index)
            continue
        try:
            trips.append(row_to_trip(row))
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.warning("Skipping stored trip #%d (%s): %r", index, row.get("id"), e)
    return trips


class TripStore:
    """
    The trip collection. Owns ordering and durability:
    every mutation re-sorts and writes the full list before returning.
    """

    def __init__(self, storage: LocalStorage, key: str = TRIPS_KEY,
                 trips: Optional[Iterable[TripRecord]] = None):
        self._storage = storage
        self._key = key
        self._trips: List[TripRecord] = sort_trips(trips or [])

    @classmethod
    def load(cls, storage: LocalStorage, key: str = TRIPS_KEY) -> "TripStore":
        trips = rows_to_trips(load_list(storage, key))
        logger.info("Loaded %d trips from %s", len(trips), storage.path)
        return cls(storage, key=key, trips=trips)

    # -----------------------------
    # Reads
    # -----------------------------

    def all(self) -> Tuple[TripRecord, ...]:
        return tuple(self._trips)

    def __len__(self) -> int:
        return len(self._trips)

    def get(self, trip_id: str) -> Optional[TripRecord]:
        for trip in self._trips:
            if trip.id == trip_id:
                return trip
        return None

    def query(self, trip_filter: Optional[TripFilter] = None, search: str = "") -> List[TripRecord]:
        trips = trip_filter.apply(self._trips) if trip_filter else list(self._trips)
        return search_trips(trips, search)

    # -----------------------------
    # Mutations
    # -----------------------------

    def _commit(self, trips: List[TripRecord]) -> None:
        """Persist first, then swap in; a failed write leaves the store as it was."""
        try:
            save_list(self._storage, self._key, [trip_to_row(t) for t in trips])
        except OSError as e:
            raise StorageError(f"Could not save trips to {self._storage.path}: {e}") from e
        self._trips = trips

    def _index_of(self, trip_id: str) -> int:
        for i, trip in enumerate(self._trips):
            if trip.id == trip_id:
                return i
        raise TripNotFoundError(trip_id)

    def add(self, trip: TripRecord) -> None:
        if self.get(trip.id) is not None:
            raise DuplicateTripError(trip.id)
        self._commit(sort_trips([*self._trips, trip]))
        logger.info("Added trip %s (order %s)", trip.id, trip.order_id)

    def update(self, trip: TripRecord) -> None:
        """Replace the trip with the same id. Raises TripNotFoundError if there is none."""
        index = self._index_of(trip.id)
        trips = list(self._trips)
        trips[index] = trip
        self._commit(sort_trips(trips))
        logger.info("Updated trip %s", trip.id)

    def delete(self, trip_id: str) -> bool:
        """Remove a trip. Unknown ids are a no-op (returns False, nothing written)."""
        if self.get(trip_id) is None:
            return False
        self._commit([t for t in self._trips if t.id != trip_id])
        logger.info("Deleted trip %s", trip_id)
        return True

    def set_status(self, trip_id: str, status: TripStatus) -> TripRecord:
        """Change only the status; position in the list stays the same."""
        index = self._index_of(trip_id)
        updated = self._trips[index].with_status(status)
        trips = list(self._trips)
        trips[index] = updated
        self._commit(trips)
        logger.info("Trip %s status -> %s", trip_id, status.value)
        return updated
