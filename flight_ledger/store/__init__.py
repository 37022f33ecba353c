"""
Storage layer for the flight ledger.

This package contains the Valkey connection configuration and client, the
logical keyspace, the key-value store adapters, and the staged transaction
that makes each ledger call all-or-nothing.
"""

from .config import ValkeyConfig, ValkeyConnectionError
from .client import ValkeyClient
from .keys import (
    LedgerKeyPrefix,
    LedgerKeyBuilder,
    LedgerKey,
    AdminKey,
    FlightKey,
    RouteRegistryKey,
    GlobalRegistryKey,
    PassengerListKey,
    PassengerRegistryKey,
    DataKey,
)
from .backend import KeyValueStore, InMemoryStore, ValkeyStore, DEFAULT_NAMESPACE
from .transaction import StagedTransaction, TransactionClosedError, atomic

__all__ = [
    # Configuration
    "ValkeyConfig",
    "ValkeyConnectionError",

    # Client
    "ValkeyClient",

    # Keyspace
    "LedgerKeyPrefix",
    "LedgerKeyBuilder",
    "LedgerKey",
    "AdminKey",
    "FlightKey",
    "RouteRegistryKey",
    "GlobalRegistryKey",
    "PassengerListKey",
    "PassengerRegistryKey",
    "DataKey",

    # Stores
    "KeyValueStore",
    "InMemoryStore",
    "ValkeyStore",
    "DEFAULT_NAMESPACE",

    # Transactions
    "StagedTransaction",
    "TransactionClosedError",
    "atomic",
]
