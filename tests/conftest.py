"""
Shared fixtures for the flight ledger tests.

Every test runs against an in-memory store unless it builds its own; no
running Valkey instance is required.
"""

import pytest

from flight_ledger.services.ledger import FlightLedger
from flight_ledger.services.payments import PaymentRail
from flight_ledger.store.backend import InMemoryStore
from flight_ledger.utils.config import reset_config

ADMIN = "GADMIN"
PASSENGER = "GPASSENGER1"
OTHER_PASSENGER = "GPASSENGER2"
FLIGHT_ID = "f1" * 32
SECOND_FLIGHT_ID = "f2" * 32


class RecordingPaymentRail(PaymentRail):
    """Payment rail that remembers every requested transfer."""

    def __init__(self):
        self.transfers = []

    def transfer(self, source, destination, amount):
        self.transfers.append((source, destination, amount))


class RefusingPaymentRail(PaymentRail):
    """Payment rail that refuses every transfer."""

    def transfer(self, source, destination, amount):
        raise RuntimeError(f"Transfer of {amount} refused")


@pytest.fixture
def store():
    """Fresh in-memory store."""
    return InMemoryStore()


@pytest.fixture
def rail():
    """Recording payment rail."""
    return RecordingPaymentRail()


@pytest.fixture
def ledger(store, rail):
    """Uninitialized ledger with no signers."""
    return FlightLedger(store, payment_rail=rail)


@pytest.fixture
def initialized(ledger):
    """Ledger whose admin has been provisioned."""
    ledger.with_signers(ADMIN).initialize(ADMIN)
    return ledger


@pytest.fixture
def as_admin(initialized):
    """Ledger view signed by the admin."""
    return initialized.with_signers(ADMIN)


@pytest.fixture
def as_passenger(initialized):
    """Ledger view signed by the first passenger."""
    return initialized.with_signers(PASSENGER)


@pytest.fixture
def flight(as_admin):
    """A booking flight NYC->LON with 2 seats at fare 100."""
    return as_admin.create_flight(FLIGHT_ID, 2, 100, "NYC", "LON")


@pytest.fixture(autouse=True)
def clean_config():
    """Drop the cached configuration around every test."""
    reset_config()
    yield
    reset_config()
