"""
Passenger ledger: the PassengerRecords booked on each flight.
"""

from typing import List, Optional, Tuple

from ..models.codec import decode_passenger_records, encode_passenger_records
from ..models.passenger import PassengerRecord
from ..store.keys import PassengerListKey
from ..store.transaction import StagedTransaction


class PassengerLedger:
    """Reads and writes per-flight passenger lists within one call."""

    def __init__(self, txn: StagedTransaction):
        self.txn = txn

    def load(self, flight_id: str) -> Optional[List[PassengerRecord]]:
        """Return the flight's records, or None if the flight never had a passenger list."""
        raw = self.txn.get(PassengerListKey(flight_id))
        return decode_passenger_records(raw) if raw is not None else None

    def append(self, flight_id: str, record: PassengerRecord) -> List[PassengerRecord]:
        records = self.load(flight_id) or []
        records.append(record)
        self.replace(flight_id, records)
        return records

    def replace(self, flight_id: str, records: List[PassengerRecord]) -> None:
        self.txn.set(PassengerListKey(flight_id), encode_passenger_records(records))


def split_by_passenger(
    records: List[PassengerRecord], passenger: str
) -> Tuple[List[PassengerRecord], List[PassengerRecord]]:
    """Partition records into (matching passenger, everyone else), both in original order."""
    matched = [record for record in records if record.passenger == passenger]
    kept = [record for record in records if record.passenger != passenger]
    return matched, kept
