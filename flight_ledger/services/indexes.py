"""
Hand-rolled secondary indexes over the key-value store.

The store has no range queries, so lookups by route, globally and by
passenger go through explicit lists of flight identifiers. Every index is
read, changed in memory and written back whole; this is only safe because
calls are serialized by the host and staged by StagedTransaction.
"""

import logging
from typing import Iterator, List

from ..models.codec import decode_flight_ids, encode_flight_ids
from ..models.flight import FlightDetails
from ..store.keys import (
    DataKey,
    GlobalRegistryKey,
    PassengerRegistryKey,
    RouteRegistryKey,
)
from ..store.transaction import StagedTransaction

logger = logging.getLogger(__name__)


class IdIndex:
    """An ordered list of flight ids stored under one key."""

    def __init__(self, txn: StagedTransaction, key: DataKey, ids: List[str], stored: bool):
        self.txn = txn
        self.key = key
        self.ids = ids
        self.stored = stored

    @classmethod
    def load_or_empty(cls, txn: StagedTransaction, key: DataKey) -> "IdIndex":
        """Load the index at key, or start an empty one if nothing is stored there."""
        raw = txn.get(key)
        if raw is None:
            return cls(txn, key, [], stored=False)
        return cls(txn, key, decode_flight_ids(raw), stored=True)

    def append(self, flight_id: str) -> None:
        self.ids.append(flight_id)

    def remove_all_matching(self, flight_id: str) -> int:
        """Drop every occurrence of flight_id, keeping the rest in order. Returns the count removed."""
        kept = [entry for entry in self.ids if entry != flight_id]
        removed = len(self.ids) - len(kept)
        self.ids = kept
        return removed

    def save(self) -> None:
        self.txn.set(self.key, encode_flight_ids(self.ids))
        self.stored = True

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, flight_id: object) -> bool:
        return flight_id in self.ids


class IndexMaintainer:
    """Keeps the route, global and passenger indexes in step with the records."""

    def __init__(self, txn: StagedTransaction):
        self.txn = txn

    def route_index(self, src: str, dest: str) -> IdIndex:
        return IdIndex.load_or_empty(self.txn, RouteRegistryKey(src, dest))

    def global_index(self) -> IdIndex:
        return IdIndex.load_or_empty(self.txn, GlobalRegistryKey())

    def passenger_index(self, passenger: str) -> IdIndex:
        return IdIndex.load_or_empty(self.txn, PassengerRegistryKey(passenger))

    def register_flight(self, flight: FlightDetails) -> None:
        """Add a new flight to its route index and to the global index."""
        route = self.route_index(flight.src, flight.dest)
        route.append(flight.id)
        route.save()

        everything = self.global_index()
        everything.append(flight.id)
        everything.save()
        logger.debug(f"Indexed flight {flight.id} under route {flight.src}->{flight.dest}")

    def record_booking(self, passenger: str, flight_id: str) -> None:
        index = self.passenger_index(passenger)
        index.append(flight_id)
        index.save()

    def forget_booking(self, passenger: str, flight_id: str) -> int:
        """Remove flight_id from the passenger's index, if the passenger has one."""
        index = self.passenger_index(passenger)
        if not index.stored:
            return 0
        removed = index.remove_all_matching(flight_id)
        index.save()
        return removed
