"""
Flight ledger workflow tests.

Covers admin provisioning, flight creation, ticket sales and cancellations,
status transitions, queries, and the all-or-nothing call boundary, all on an
in-memory store.
"""

import pytest

from flight_ledger import (
    AlreadyInitialized,
    ArithmeticOverflow,
    FlightAlreadyExists,
    FlightFull,
    FlightLedger,
    FlightNotFound,
    InvalidInput,
    InvalidStatus,
    NoPassengers,
    NotInitialized,
    PassengerNotFound,
    Unauthorized,
)
from flight_ledger.models import FlightStatus
from flight_ledger.models.codec import encode_flight_ids
from flight_ledger.store import (
    FlightKey,
    GlobalRegistryKey,
    PassengerListKey,
    PassengerRegistryKey,
    RouteRegistryKey,
)
from flight_ledger.utils.arithmetic import I128_MAX, U32_MAX

from conftest import (
    ADMIN,
    FLIGHT_ID,
    OTHER_PASSENGER,
    PASSENGER,
    SECOND_FLIGHT_ID,
    RefusingPaymentRail,
)


def ids(flights):
    return [flight.id for flight in flights]


class TestInitialize:
    """Test admin provisioning."""

    def test_initialize_stores_admin(self, ledger):
        """Test the admin is stored and readable."""
        assert ledger.with_signers(ADMIN).initialize(ADMIN) == ADMIN
        assert ledger.get_admin() == ADMIN

    def test_initialize_twice(self, initialized):
        """Test a second initialization is rejected."""
        with pytest.raises(AlreadyInitialized):
            initialized.with_signers("GOTHER").initialize("GOTHER")
        assert initialized.get_admin() == ADMIN

    def test_initialize_requires_admin_signature(self, ledger, store):
        """Test the new admin must authorize provisioning."""
        with pytest.raises(Unauthorized):
            ledger.with_signers("GOTHER").initialize(ADMIN)
        assert len(store) == 0

    def test_not_initialized(self, ledger):
        """Test admin lookups before provisioning."""
        with pytest.raises(NotInitialized):
            ledger.get_admin()
        with pytest.raises(NotInitialized):
            ledger.with_signers(ADMIN).create_flight(FLIGHT_ID, 2, 100, "NYC", "LON")

    def test_with_signers_leaves_original_untouched(self, ledger):
        """Test signer views share the store but not the verifier."""
        view = ledger.with_signers(ADMIN)
        assert view.store is ledger.store
        assert view.verifier is not ledger.verifier
        assert not ledger.verifier.is_authorized(ADMIN)


class TestCreateFlight:
    """Test flight creation."""

    def test_create_flight(self, as_admin, store):
        """Test the record, escrow and indexes of a new flight."""
        flight = as_admin.create_flight(FLIGHT_ID, 3, 100, "NYC", "LON")
        assert flight.escrow_amount == 300
        assert flight.status == FlightStatus.BOOKING
        assert flight.passenger_count == 0
        assert store.has(FlightKey(FLIGHT_ID))
        assert store.get(RouteRegistryKey("NYC", "LON")) == encode_flight_ids([FLIGHT_ID])
        assert store.get(GlobalRegistryKey()) == encode_flight_ids([FLIGHT_ID])

    def test_accepts_raw_bytes_id(self, as_admin):
        """Test 32-byte identifiers are accepted."""
        flight = as_admin.create_flight(b"\xab" * 32, 1, 10, "NYC", "LON")
        assert flight.id == "ab" * 32

    def test_requires_admin(self, as_passenger, store):
        """Test non-admin callers are rejected."""
        before = dict(store.data)
        with pytest.raises(Unauthorized):
            as_passenger.create_flight(FLIGHT_ID, 2, 100, "NYC", "LON")
        assert store.data == before

    @pytest.mark.parametrize("max_passengers,distance", [
        (0, 100),
        (2, 0),
        (2, -5),
        (-1, 100),
        (U32_MAX + 1, 100),
        (2, I128_MAX + 1),
    ])
    def test_invalid_parameters(self, as_admin, store, max_passengers, distance):
        """Test out-of-range capacity and distance are rejected without writes."""
        before = dict(store.data)
        with pytest.raises(InvalidInput):
            as_admin.create_flight(FLIGHT_ID, max_passengers, distance, "NYC", "LON")
        assert store.data == before

    def test_malformed_tokens(self, as_admin):
        """Test malformed ids and endpoints are rejected."""
        with pytest.raises(InvalidInput):
            as_admin.create_flight("F1", 2, 100, "NYC", "LON")
        with pytest.raises(InvalidInput):
            as_admin.create_flight(FLIGHT_ID, 2, 100, "New York", "LON")
        with pytest.raises(InvalidInput):
            as_admin.create_flight(FLIGHT_ID, "2", 100, "NYC", "LON")

    def test_duplicate_id(self, as_admin, flight):
        """Test a flight id can only be registered once."""
        with pytest.raises(FlightAlreadyExists):
            as_admin.create_flight(FLIGHT_ID, 5, 10, "SFO", "TYO")
        assert as_admin.get_flight_admin(FLIGHT_ID).src == "NYC"

    def test_escrow_overflow_rolls_back(self, as_admin, store):
        """Test escrow overflow aborts the call without writes."""
        before = dict(store.data)
        with pytest.raises(ArithmeticOverflow):
            as_admin.create_flight(FLIGHT_ID, U32_MAX, I128_MAX, "NYC", "LON")
        assert store.data == before

    def test_route_index_keeps_creation_order(self, as_admin):
        """Test flights on one route are listed in creation order."""
        as_admin.create_flight(SECOND_FLIGHT_ID, 1, 10, "NYC", "LON")
        as_admin.create_flight(FLIGHT_ID, 1, 10, "NYC", "LON")
        assert ids(as_admin.get_flights_search("NYC", "LON")) == [SECOND_FLIGHT_ID, FLIGHT_ID]


class TestBuyTicket:
    """Test ticket sales."""

    def test_buy_ticket(self, as_passenger, flight, store, rail):
        """Test a purchase records the passenger and moves the fare to escrow."""
        receipt = as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        assert receipt.fare == 100
        assert receipt.passenger_count == 1
        assert store.has(PassengerListKey(FLIGHT_ID))
        assert store.get(PassengerRegistryKey(PASSENGER)) == encode_flight_ids([FLIGHT_ID])
        assert rail.transfers == [(PASSENGER, "escrow", 100)]

    def test_requires_passenger_signature(self, initialized, flight, store, rail):
        """Test the passenger must authorize the purchase."""
        before = dict(store.data)
        with pytest.raises(Unauthorized):
            initialized.with_signers(OTHER_PASSENGER).buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        assert store.data == before
        assert rail.transfers == []

    def test_unknown_flight(self, as_passenger, initialized):
        """Test buying on a missing flight."""
        with pytest.raises(FlightNotFound):
            as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")

    def test_flight_full(self, initialized, flight, store):
        """Test capacity is enforced."""
        initialized.with_signers(PASSENGER).buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        initialized.with_signers(OTHER_PASSENGER).buy_ticket(FLIGHT_ID, OTHER_PASSENGER, "economy")
        before = dict(store.data)
        with pytest.raises(FlightFull):
            initialized.with_signers("GLATE").buy_ticket(FLIGHT_ID, "GLATE", "economy")
        assert store.data == before

    def test_only_while_booking(self, as_admin, as_passenger, flight):
        """Test tickets cannot be bought after takeoff."""
        as_admin.update_flight_status(FLIGHT_ID, "takeoff")
        with pytest.raises(InvalidStatus):
            as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")

    def test_same_passenger_twice(self, as_passenger, flight):
        """Test a passenger may hold several tickets on one flight."""
        as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        receipt = as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "business")
        assert receipt.passenger_count == 2

    def test_refused_payment_rolls_back(self, store, flight):
        """Test a failing payment rail aborts the purchase."""
        ledger = FlightLedger(store, payment_rail=RefusingPaymentRail())
        before = dict(store.data)
        with pytest.raises(RuntimeError):
            ledger.with_signers(PASSENGER).buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        assert store.data == before


class TestCancelTicket:
    """Test cancellations and refunds."""

    def test_cancel_refunds_ninety_percent(self, as_passenger, flight, rail):
        """Test refund and admin fee transfers out of escrow."""
        as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        receipt = as_passenger.cancel_ticket(FLIGHT_ID, PASSENGER)
        assert receipt.tickets_cancelled == 1
        assert receipt.total_refund == 90
        assert receipt.total_admin_fee == 10
        assert receipt.passenger_count == 0
        assert rail.transfers[1:] == [
            ("escrow", PASSENGER, 90),
            ("escrow", ADMIN, 10),
        ]

    def test_cancel_removes_every_ticket(self, initialized, as_passenger, flight, as_admin):
        """Test all of a passenger's tickets go, others stay."""
        as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "business")
        with pytest.raises(FlightFull):
            initialized.with_signers(OTHER_PASSENGER).buy_ticket(FLIGHT_ID, OTHER_PASSENGER, "economy")

        receipt = as_passenger.cancel_ticket(FLIGHT_ID, PASSENGER)
        assert receipt.tickets_cancelled == 2
        assert receipt.total_refund == 180
        assert as_admin.get_flight_admin(FLIGHT_ID).passenger_count == 0
        assert as_passenger.get_flights_pass(PASSENGER) == []

        initialized.with_signers(OTHER_PASSENGER).buy_ticket(FLIGHT_ID, OTHER_PASSENGER, "economy")
        assert ids(initialized.get_flights_pass(OTHER_PASSENGER)) == [FLIGHT_ID]

    def test_passenger_not_on_flight(self, initialized, as_passenger, flight, store):
        """Test cancelling without a ticket."""
        as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        before = dict(store.data)
        with pytest.raises(PassengerNotFound):
            initialized.with_signers(OTHER_PASSENGER).cancel_ticket(FLIGHT_ID, OTHER_PASSENGER)
        assert store.data == before

    def test_flight_without_passengers(self, as_passenger, flight):
        """Test cancelling on a flight nobody ever booked."""
        with pytest.raises(NoPassengers):
            as_passenger.cancel_ticket(FLIGHT_ID, PASSENGER)

    def test_emptied_list_is_not_no_passengers(self, initialized, as_passenger, flight):
        """Test an emptied passenger list reports the passenger missing instead."""
        as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        as_passenger.cancel_ticket(FLIGHT_ID, PASSENGER)
        with pytest.raises(PassengerNotFound):
            as_passenger.cancel_ticket(FLIGHT_ID, PASSENGER)

    def test_requires_passenger_signature(self, as_admin, as_passenger, flight):
        """Test the admin cannot cancel on a passenger's behalf."""
        as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        with pytest.raises(Unauthorized):
            as_admin.cancel_ticket(FLIGHT_ID, PASSENGER)

    def test_unknown_flight(self, as_passenger, initialized):
        """Test cancelling on a missing flight."""
        with pytest.raises(FlightNotFound):
            as_passenger.cancel_ticket(FLIGHT_ID, PASSENGER)


class TestUpdateFlightStatus:
    """Test the booking -> takeoff / cancelled lifecycle."""

    @pytest.mark.parametrize("status", ["takeoff", "cancelled", FlightStatus.TAKEOFF])
    def test_finalize(self, as_admin, flight, status):
        """Test booking flights can be finalized."""
        updated = as_admin.update_flight_status(FLIGHT_ID, status)
        assert updated.status.is_terminal
        assert as_admin.get_flight_admin(FLIGHT_ID).status == updated.status

    def test_terminal_states_are_final(self, as_admin, flight):
        """Test finalized flights cannot change again."""
        as_admin.update_flight_status(FLIGHT_ID, "takeoff")
        with pytest.raises(InvalidStatus):
            as_admin.update_flight_status(FLIGHT_ID, "cancelled")
        with pytest.raises(InvalidStatus):
            as_admin.update_flight_status(FLIGHT_ID, "takeoff")

    def test_cannot_return_to_booking(self, as_admin, flight):
        """Test booking is never a target status."""
        with pytest.raises(InvalidStatus):
            as_admin.update_flight_status(FLIGHT_ID, "booking")

    def test_unknown_status(self, as_admin, flight):
        """Test unrecognized status names."""
        with pytest.raises(InvalidStatus):
            as_admin.update_flight_status(FLIGHT_ID, "landed")

    def test_requires_admin(self, as_passenger, flight):
        """Test passengers cannot change status."""
        with pytest.raises(Unauthorized):
            as_passenger.update_flight_status(FLIGHT_ID, "takeoff")

    def test_unknown_flight(self, as_admin):
        """Test changing status of a missing flight."""
        with pytest.raises(FlightNotFound):
            as_admin.update_flight_status(FLIGHT_ID, "takeoff")


class TestQueries:
    """Test route, global, single-flight and passenger lookups."""

    def test_search_unknown_route(self, initialized):
        """Test unknown routes return an empty list."""
        assert initialized.get_flights_search("NYC", "LON") == []

    def test_search_is_directional(self, as_admin, flight):
        """Test routes are keyed by (src, dest) order."""
        assert ids(as_admin.get_flights_search("NYC", "LON")) == [FLIGHT_ID]
        assert as_admin.get_flights_search("LON", "NYC") == []

    def test_admin_listing(self, as_admin, as_passenger, flight):
        """Test the global listing is admin only."""
        as_admin.create_flight(SECOND_FLIGHT_ID, 1, 10, "SFO", "TYO")
        assert ids(as_admin.get_flights_admin()) == [FLIGHT_ID, SECOND_FLIGHT_ID]
        with pytest.raises(Unauthorized):
            as_passenger.get_flights_admin()
        with pytest.raises(Unauthorized):
            as_passenger.get_flight_admin(FLIGHT_ID)

    def test_get_flight_admin_missing(self, as_admin):
        """Test single-flight lookup of a missing id."""
        with pytest.raises(FlightNotFound):
            as_admin.get_flight_admin(FLIGHT_ID)

    def test_passenger_flights_are_public(self, initialized, as_passenger, flight):
        """Test anyone can list a passenger's flights."""
        as_passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        assert ids(initialized.get_flights_pass(PASSENGER)) == [FLIGHT_ID]
        assert initialized.get_flights_pass(OTHER_PASSENGER) == []

    def test_dangling_index_entries_are_skipped(self, as_admin, store, flight):
        """Test index ids without a flight record are ignored."""
        store.set(GlobalRegistryKey(), encode_flight_ids([SECOND_FLIGHT_ID, FLIGHT_ID]))
        assert ids(as_admin.get_flights_admin()) == [FLIGHT_ID]

    def test_dangling_entries_skipped_in_route_and_passenger_indexes(self, as_admin, store, flight):
        """Test a missing id mid-index is dropped and the rest keep their order."""
        third_flight_id = "f3" * 32
        as_admin.create_flight(third_flight_id, 1, 10, "NYC", "LON")
        with_gap = encode_flight_ids([FLIGHT_ID, SECOND_FLIGHT_ID, third_flight_id])
        store.set(RouteRegistryKey("NYC", "LON"), with_gap)
        store.set(PassengerRegistryKey(PASSENGER), with_gap)

        assert ids(as_admin.get_flights_search("NYC", "LON")) == [FLIGHT_ID, third_flight_id]
        assert ids(as_admin.get_flights_pass(PASSENGER)) == [FLIGHT_ID, third_flight_id]

    def test_queries_write_nothing(self, as_admin, store, flight):
        """Test lookups leave the store unchanged."""
        before = dict(store.data)
        as_admin.get_flights_search("SFO", "TYO")
        as_admin.get_flights_pass(PASSENGER)
        assert store.data == before


class TestEndToEnd:
    """Full booking scenario."""

    def test_buy_then_cancel_scenario(self, initialized, store):
        """Test the F1 / P1 book-and-cancel scenario leaves indexes consistent."""
        admin = initialized.with_signers(ADMIN)
        passenger = initialized.with_signers(PASSENGER)

        flight = admin.create_flight(FLIGHT_ID, 2, 50, "NYC", "LON")
        assert flight.escrow_amount == 100

        receipt = passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        assert receipt.passenger_count == 1
        assert receipt.fare == 50

        cancellation = passenger.cancel_ticket(FLIGHT_ID, PASSENGER)
        assert (cancellation.total_refund, cancellation.total_admin_fee) == (45, 5)
        assert cancellation.passenger_count == 0
        assert store.get(PassengerListKey(FLIGHT_ID)) == "[]"
        assert initialized.get_flights_pass(PASSENGER) == []
        assert ids(initialized.get_flights_search("NYC", "LON")) == [FLIGHT_ID]
        assert ids(admin.get_flights_admin()) == [FLIGHT_ID]

    def test_book_cancel_and_takeoff(self, initialized, rail):
        """Test a flight from creation through cancellation to takeoff."""
        admin = initialized.with_signers(ADMIN)
        passenger = initialized.with_signers(PASSENGER)

        admin.create_flight(FLIGHT_ID, 2, 100, "NYC", "LON")
        passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        assert ids(initialized.get_flights_search("NYC", "LON")) == [FLIGHT_ID]
        assert ids(initialized.get_flights_pass(PASSENGER)) == [FLIGHT_ID]

        receipt = passenger.cancel_ticket(FLIGHT_ID, PASSENGER)
        assert (receipt.total_refund, receipt.total_admin_fee) == (90, 10)

        passenger.buy_ticket(FLIGHT_ID, PASSENGER, "economy")
        flight = admin.update_flight_status(FLIGHT_ID, "takeoff")
        assert flight.status == FlightStatus.TAKEOFF
        assert flight.passenger_count == 1
        assert flight.escrow_amount == 200

        assert rail.transfers == [
            (PASSENGER, "escrow", 100),
            ("escrow", PASSENGER, 90),
            ("escrow", ADMIN, 10),
            (PASSENGER, "escrow", 100),
        ]
