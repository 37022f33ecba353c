"""
Key-value store adapters for the ledger.

The ledger only needs has/get/set on logical keys plus one atomic batch write
used to commit a call. Two adapters are provided: a dict-backed store for
tests and local runs, and a Valkey-backed store.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

from .client import ValkeyClient
from .keys import DataKey

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "ledger"


class KeyValueStore(ABC):
    """
    Abstract key-value store keyed by logical ledger keys.

    Subclasses implement the raw string operations; key rendering and the
    namespace are handled here.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE):
        self.namespace = namespace

    def render(self, key: DataKey) -> str:
        return key.render(self.namespace)

    def has(self, key: DataKey) -> bool:
        return self._has(self.render(key))

    def get(self, key: DataKey) -> Optional[str]:
        return self._get(self.render(key))

    def set(self, key: DataKey, value: str) -> None:
        self.apply({key: value})

    def apply(self, writes: Mapping[DataKey, str]) -> None:
        """Write every entry atomically: all of them become visible, or none."""
        if not writes:
            return
        self._apply({self.render(key): value for key, value in writes.items()})

    @abstractmethod
    def _has(self, raw_key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def _get(self, raw_key: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def _apply(self, writes: Dict[str, str]) -> None:
        raise NotImplementedError


class InMemoryStore(KeyValueStore):
    """Dict-backed store. State lives only as long as the instance."""

    def __init__(self, namespace: str = DEFAULT_NAMESPACE):
        super().__init__(namespace)
        self.data: Dict[str, str] = {}

    def _has(self, raw_key: str) -> bool:
        return raw_key in self.data

    def _get(self, raw_key: str) -> Optional[str]:
        return self.data.get(raw_key)

    def _apply(self, writes: Dict[str, str]) -> None:
        self.data.update(writes)

    def __len__(self) -> int:
        return len(self.data)


class ValkeyStore(KeyValueStore):
    """
    Valkey-backed store.

    Batches are committed with a transactional pipeline (MULTI/EXEC), so a
    call's writes are applied together or not at all.
    """

    def __init__(self, client: ValkeyClient, namespace: str = DEFAULT_NAMESPACE):
        super().__init__(namespace)
        self.client = client
        logger.info(f"ValkeyStore initialized with namespace '{namespace}'")

    def _connection(self):
        self.client.ensure_connection()
        return self.client.client

    def _has(self, raw_key: str) -> bool:
        return bool(self._connection().exists(raw_key))

    def _get(self, raw_key: str) -> Optional[str]:
        value = self._connection().get(raw_key)
        if isinstance(value, bytes):
            return value.decode()
        return value

    def _apply(self, writes: Dict[str, str]) -> None:
        pipe = self._connection().pipeline(transaction=True)
        for raw_key, value in writes.items():
            pipe.set(raw_key, value)
        pipe.execute()
        logger.debug(f"Committed {len(writes)} key(s) to Valkey")
