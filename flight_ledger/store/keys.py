"""
Keyspace model for the ledger.

Every value the ledger stores lives under one of a closed set of logical key
families. Each family is a frozen dataclass that knows its storage tier and
how to render itself to a namespaced string key, e.g.

    FlightKey("ab12...").render("ledger")
    # Returns: "ledger:persistent:flight:ab12..."
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Tuple, Union

from ..models.enums import StorageTier


class LedgerKeyPrefix(str, Enum):
    """Key family prefixes."""

    ADMIN = "admin"
    FLIGHT = "flight"
    ROUTE_REGISTRY = "route"
    GLOBAL_REGISTRY = "flights"
    PASSENGER_LIST = "passengers"
    PASSENGER_REGISTRY = "passenger"


class LedgerKeyBuilder:
    """Builds colon-separated keys from a namespace, tier, prefix and parts."""

    @staticmethod
    def build_key(namespace: str, tier: StorageTier, prefix: LedgerKeyPrefix, *parts: Any) -> str:
        """
        Build a store key.

        Example:
            build_key("ledger", StorageTier.PERSISTENT, LedgerKeyPrefix.ROUTE_REGISTRY, "NYC", "LON")
            # Returns: "ledger:persistent:route:NYC:LON"
        """
        key_parts = [namespace, tier.value, prefix.value]
        key_parts.extend(str(part) for part in parts)
        return ":".join(key_parts)


class LedgerKey:
    """Base class for logical keys."""

    tier: ClassVar[StorageTier] = StorageTier.PERSISTENT
    prefix: ClassVar[LedgerKeyPrefix]

    def parts(self) -> Tuple[Any, ...]:
        return ()

    def render(self, namespace: str) -> str:
        return LedgerKeyBuilder.build_key(namespace, self.tier, self.prefix, *self.parts())


@dataclass(frozen=True)
class AdminKey(LedgerKey):
    """Ledger administrator address."""
    tier: ClassVar[StorageTier] = StorageTier.INSTANCE
    prefix: ClassVar[LedgerKeyPrefix] = LedgerKeyPrefix.ADMIN


@dataclass(frozen=True)
class FlightKey(LedgerKey):
    """Canonical FlightDetails record."""
    prefix: ClassVar[LedgerKeyPrefix] = LedgerKeyPrefix.FLIGHT

    flight_id: str

    def parts(self) -> Tuple[Any, ...]:
        return (self.flight_id,)


@dataclass(frozen=True)
class RouteRegistryKey(LedgerKey):
    """Flight ids serving one (src, dest) route."""
    prefix: ClassVar[LedgerKeyPrefix] = LedgerKeyPrefix.ROUTE_REGISTRY

    src: str
    dest: str

    def parts(self) -> Tuple[Any, ...]:
        return (self.src, self.dest)


@dataclass(frozen=True)
class GlobalRegistryKey(LedgerKey):
    """Every flight id ever created."""
    prefix: ClassVar[LedgerKeyPrefix] = LedgerKeyPrefix.GLOBAL_REGISTRY


@dataclass(frozen=True)
class PassengerListKey(LedgerKey):
    """PassengerRecords booked on one flight."""
    prefix: ClassVar[LedgerKeyPrefix] = LedgerKeyPrefix.PASSENGER_LIST

    flight_id: str

    def parts(self) -> Tuple[Any, ...]:
        return (self.flight_id,)


@dataclass(frozen=True)
class PassengerRegistryKey(LedgerKey):
    """Flight ids booked by one passenger."""
    prefix: ClassVar[LedgerKeyPrefix] = LedgerKeyPrefix.PASSENGER_REGISTRY

    passenger: str

    def parts(self) -> Tuple[Any, ...]:
        return (self.passenger,)


DataKey = Union[
    AdminKey,
    FlightKey,
    RouteRegistryKey,
    GlobalRegistryKey,
    PassengerListKey,
    PassengerRegistryKey,
]
