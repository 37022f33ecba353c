"""
All-or-nothing call boundary.

A StagedTransaction buffers every write made during one ledger call. Reads
see the call's own staged writes first, then the store. The buffer is pushed
to the store in a single atomic batch when the call returns normally and is
dropped if the call raises.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from .backend import KeyValueStore
from .keys import DataKey

logger = logging.getLogger(__name__)


class TransactionClosedError(RuntimeError):
    """Raised when a committed or discarded transaction is used again."""
    pass


class StagedTransaction:
    """Write buffer layered over a KeyValueStore for the duration of one call."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._writes: Dict[DataKey, str] = {}
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise TransactionClosedError("Transaction already committed or discarded")

    def has(self, key: DataKey) -> bool:
        self._check_open()
        return key in self._writes or self.store.has(key)

    def get(self, key: DataKey) -> Optional[str]:
        self._check_open()
        if key in self._writes:
            return self._writes[key]
        return self.store.get(key)

    def set(self, key: DataKey, value: str) -> None:
        self._check_open()
        self._writes[key] = value

    @property
    def pending_writes(self) -> int:
        return len(self._writes)

    def commit(self) -> None:
        """Apply every staged write to the store in one batch."""
        self._check_open()
        self._closed = True
        if self._writes:
            self.store.apply(self._writes)
            logger.debug(f"Committed {len(self._writes)} staged write(s)")
        self._writes = {}

    def discard(self) -> None:
        """Drop every staged write."""
        if self._writes:
            logger.debug(f"Discarded {len(self._writes)} staged write(s)")
        self._closed = True
        self._writes = {}


@contextmanager
def atomic(store: KeyValueStore) -> Iterator[StagedTransaction]:
    """
    Run one ledger call inside a staged transaction.

    Usage:
        with atomic(store) as txn:
            txn.set(key, value)
        # committed here; an exception inside the block discards everything
    """
    txn = StagedTransaction(store)
    try:
        yield txn
    except BaseException:
        txn.discard()
        raise
    txn.commit()
