"""
Flight ledger workflows and queries.

FlightLedger is the public surface: admin provisioning, flight creation,
ticket sales and cancellations, status transitions, and lookups. Every public
method runs as one all-or-nothing call: writes are staged and committed only
when the method returns, and any error discards them.

Flights move through a strict lifecycle: booking -> takeoff or
booking -> cancelled. Both end states are terminal.
"""

import copy
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from ..errors import (
    AlreadyInitialized,
    FlightAlreadyExists,
    FlightFull,
    InvalidFare,
    InvalidInput,
    InvalidStatus,
    LedgerError,
    NoPassengers,
    PassengerNotFound,
)
from ..models.enums import FlightStatus
from ..models.flight import FlightDetails
from ..models.passenger import PassengerRecord
from ..models.receipt import CancellationReceipt, RefundQuote, TicketReceipt
from ..models.types import address_adapter, flight_id_adapter, symbol_adapter
from ..store.backend import KeyValueStore
from ..store.keys import AdminKey
from ..store.transaction import StagedTransaction, atomic
from ..utils.arithmetic import I128_MAX, U32_MAX, checked_add, checked_mul, saturating_sub
from .auth import AuthorizationGate, AuthVerifier, InvocationSigners
from .indexes import IdIndex, IndexMaintainer
from .passenger_ledger import PassengerLedger, split_by_passenger
from .registry import FlightRegistry
from .payments import LoggingPaymentRail, PaymentRail

logger = logging.getLogger(__name__)

DEFAULT_ESCROW_ACCOUNT = "escrow"


def _parse(adapter: TypeAdapter, value: Any, what: str) -> str:
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise InvalidInput(f"Invalid {what}: {value!r}") from e


def _require_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{what} must be an integer, got {value!r}")
    return value


class _Call:
    """Components bound to the transaction of a single ledger call."""

    def __init__(self, txn: StagedTransaction, verifier: AuthVerifier):
        self.txn = txn
        self.auth = AuthorizationGate(txn, verifier)
        self.flights = FlightRegistry(txn)
        self.indexes = IndexMaintainer(txn)
        self.passengers = PassengerLedger(txn)

    def resolve(self, index: IdIndex) -> List[FlightDetails]:
        """Fetch the flights an index points at, skipping ids with no record."""
        flights = []
        for flight_id in index:
            flight = self.flights.find(flight_id)
            if flight is None:
                logger.debug(f"Skipping dangling index entry {flight_id} in {index.key}")
                continue
            flights.append(flight)
        return flights


class FlightLedger:
    """
    Flight-booking ledger over a key-value store.

    Args:
        store: Key-value store holding the ledger keyspace
        verifier: Tells the ledger which addresses authorized the current call
        payment_rail: Settles fares, refunds and fees; defaults to a logging stub
        escrow_account: Account that holds fares until takeoff or refund
    """

    def __init__(
        self,
        store: KeyValueStore,
        verifier: Optional[AuthVerifier] = None,
        payment_rail: Optional[PaymentRail] = None,
        escrow_account: str = DEFAULT_ESCROW_ACCOUNT,
    ):
        self.store = store
        self.verifier = verifier or InvocationSigners()
        self.payment_rail = payment_rail or LoggingPaymentRail()
        self.escrow_account = escrow_account

    def with_signers(self, *addresses: str) -> "FlightLedger":
        """Return a view of this ledger whose calls are authorized by the given addresses."""
        view = copy.copy(self)
        view.verifier = InvocationSigners(addresses)
        return view

    @contextmanager
    def _call(self, operation: str) -> Iterator[_Call]:
        with atomic(self.store) as txn:
            try:
                yield _Call(txn, self.verifier)
            except LedgerError as e:
                logger.warning(f"{operation} rejected: {type(e).__name__}: {e}")
                raise
            except ArithmeticError as e:
                logger.error(f"{operation} aborted: {e}")
                raise

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def initialize(self, admin: str) -> str:
        """
        Provision the ledger admin. Can only be done once.

        Raises:
            AlreadyInitialized: If an admin is already stored
            Unauthorized: If the admin did not authorize the call
        """
        with self._call("initialize") as call:
            admin = _parse(address_adapter, admin, "admin address")
            if call.txn.has(AdminKey()):
                raise AlreadyInitialized()
            call.auth.require_caller(admin)
            call.auth.store_admin(admin)
        logger.info(f"Ledger initialized with admin {admin}")
        return admin

    def get_admin(self) -> str:
        """Return the provisioned admin address (NotInitialized if none)."""
        with self._call("get_admin") as call:
            return call.auth.load_admin()

    # ------------------------------------------------------------------
    # Flight registry
    # ------------------------------------------------------------------

    def create_flight(
        self,
        flight_id: Union[str, bytes],
        max_passengers: int,
        distance: int,
        src: str,
        dest: str,
    ) -> FlightDetails:
        """
        Register a new flight and index it by route and globally.

        Checks run in order: admin authorization, capacity and distance,
        then uniqueness of the identifier.

        Raises:
            Unauthorized: If the admin did not authorize the call
            InvalidInput: If max_passengers is 0, distance is not positive, or a value is malformed
            FlightAlreadyExists: If flight_id is already registered
            ArithmeticOverflow: If the escrow amount leaves the 128-bit range
        """
        with self._call("create_flight") as call:
            call.auth.require_admin()

            max_passengers = _require_int(max_passengers, "max_passengers")
            distance = _require_int(distance, "distance")
            if max_passengers == 0 or distance <= 0:
                raise InvalidInput(
                    f"max_passengers must be non-zero and distance positive "
                    f"(got {max_passengers}, {distance})"
                )
            if max_passengers < 0 or max_passengers > U32_MAX or distance > I128_MAX:
                raise InvalidInput(f"Values out of range (got {max_passengers}, {distance})")

            flight_id = _parse(flight_id_adapter, flight_id, "flight id")
            src = _parse(symbol_adapter, src, "source")
            dest = _parse(symbol_adapter, dest, "destination")

            if call.flights.exists(flight_id):
                raise FlightAlreadyExists(f"Flight already exists: {flight_id}")

            escrow = checked_mul(max_passengers, distance)

            flight = FlightDetails(
                id=flight_id,
                max_passengers=max_passengers,
                distance=distance,
                src=src,
                dest=dest,
                status=FlightStatus.BOOKING,
                escrow_amount=escrow,
                passenger_count=0,
            )
            call.flights.save(flight)
            call.indexes.register_flight(flight)

        logger.info(
            f"Flight {flight.id} created: {src}->{dest}, "
            f"{max_passengers} seats, escrow {escrow}"
        )
        return flight

    # ------------------------------------------------------------------
    # Booking and cancellation
    # ------------------------------------------------------------------

    def buy_ticket(self, flight_id: Union[str, bytes], passenger: str, details: str) -> TicketReceipt:
        """
        Sell one seat on a flight to a passenger.

        The fare equals the flight distance. The same passenger may hold
        several tickets on one flight.

        Raises:
            Unauthorized: If the passenger did not authorize the call
            FlightNotFound: If the flight does not exist
            InvalidStatus: If the flight is no longer in booking status
            FlightFull: If every seat is sold
            InvalidFare: If the fare is not positive
        """
        with self._call("buy_ticket") as call:
            passenger = _parse(address_adapter, passenger, "passenger address")
            call.auth.require_caller(passenger)

            flight_id = _parse(flight_id_adapter, flight_id, "flight id")
            details = _parse(symbol_adapter, details, "booking details")
            flight = call.flights.require(flight_id)

            if flight.status != FlightStatus.BOOKING:
                raise InvalidStatus(f"Flight {flight_id} is {flight.status.value}, not booking")
            if flight.is_full:
                raise FlightFull(f"Flight {flight_id} is full ({flight.max_passengers} seats)")

            fare = flight.distance
            if fare <= 0:
                raise InvalidFare(f"Fare must be positive, got {fare}")

            call.passengers.append(
                flight_id, PassengerRecord(passenger=passenger, paid=fare, details=details)
            )
            call.indexes.record_booking(passenger, flight_id)

            flight = flight.model_copy(
                update={"passenger_count": checked_add(flight.passenger_count, 1)}
            )
            call.flights.save(flight)

            self.payment_rail.transfer(passenger, self.escrow_account, fare)

        logger.info(
            f"Ticket sold on {flight_id} to {passenger} for {fare} "
            f"({flight.passenger_count}/{flight.max_passengers})"
        )
        return TicketReceipt(
            flight_id=flight_id,
            passenger=passenger,
            fare=fare,
            passenger_count=flight.passenger_count,
        )

    def cancel_ticket(self, flight_id: Union[str, bytes], passenger: str) -> CancellationReceipt:
        """
        Cancel every ticket a passenger holds on a flight.

        Each ticket is refunded 90% of what was paid (integer division,
        truncating); the remainder is the admin fee.

        Raises:
            Unauthorized: If the passenger did not authorize the call
            FlightNotFound: If the flight does not exist
            NoPassengers: If the flight never had a passenger list
            PassengerNotFound: If the passenger holds no ticket on the flight
        """
        with self._call("cancel_ticket") as call:
            passenger = _parse(address_adapter, passenger, "passenger address")
            call.auth.require_caller(passenger)

            flight_id = _parse(flight_id_adapter, flight_id, "flight id")
            flight = call.flights.require(flight_id)

            records = call.passengers.load(flight_id)
            if records is None:
                raise NoPassengers(f"Flight {flight_id} has no passengers")

            cancelled, kept = split_by_passenger(records, passenger)
            if not cancelled:
                raise PassengerNotFound(f"{passenger} holds no ticket on {flight_id}")

            refunds = [RefundQuote.for_payment(record.paid) for record in cancelled]

            call.passengers.replace(flight_id, kept)
            flight = flight.model_copy(
                update={"passenger_count": saturating_sub(flight.passenger_count, len(cancelled))}
            )
            call.flights.save(flight)
            call.indexes.forget_booking(passenger, flight_id)

            admin = call.auth.load_admin()
            for quote in refunds:
                if quote.refund:
                    self.payment_rail.transfer(self.escrow_account, passenger, quote.refund)
                if quote.admin_fee:
                    self.payment_rail.transfer(self.escrow_account, admin, quote.admin_fee)

        receipt = CancellationReceipt(
            flight_id=flight_id,
            passenger=passenger,
            refunds=refunds,
            passenger_count=flight.passenger_count,
        )
        logger.info(
            f"Cancelled {receipt.tickets_cancelled} ticket(s) on {flight_id} for {passenger}: "
            f"refund {receipt.total_refund}, fee {receipt.total_admin_fee}"
        )
        return receipt

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    def update_flight_status(
        self, flight_id: Union[str, bytes], new_status: Union[str, FlightStatus]
    ) -> FlightDetails:
        """
        Finalize a flight as taken off or cancelled.

        Only booking -> takeoff and booking -> cancelled are allowed.

        Raises:
            Unauthorized: If the admin did not authorize the call
            FlightNotFound: If the flight does not exist
            InvalidStatus: If new_status is not takeoff/cancelled, or the flight is already final
        """
        with self._call("update_flight_status") as call:
            call.auth.require_admin()

            flight_id = _parse(flight_id_adapter, flight_id, "flight id")
            flight = call.flights.require(flight_id)

            try:
                status = FlightStatus(new_status)
            except ValueError:
                raise InvalidStatus(f"Unknown status: {new_status!r}") from None
            if status == FlightStatus.BOOKING:
                raise InvalidStatus("A flight cannot be moved back to booking")
            if flight.status.is_terminal:
                raise InvalidStatus(
                    f"Flight {flight_id} is already {flight.status.value}"
                )

            flight = flight.model_copy(update={"status": status})
            call.flights.save(flight)

        logger.info(f"Flight {flight_id} status changed to {status.value}")
        return flight

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_flights_search(self, src: str, dest: str) -> List[FlightDetails]:
        """Flights serving a route, in creation order."""
        with self._call("get_flights_search") as call:
            src = _parse(symbol_adapter, src, "source")
            dest = _parse(symbol_adapter, dest, "destination")
            return call.resolve(call.indexes.route_index(src, dest))

    def get_flights_admin(self) -> List[FlightDetails]:
        """Every flight ever created. Admin only."""
        with self._call("get_flights_admin") as call:
            call.auth.require_admin()
            return call.resolve(call.indexes.global_index())

    def get_flight_admin(self, flight_id: Union[str, bytes]) -> FlightDetails:
        """A single flight. Admin only."""
        with self._call("get_flight_admin") as call:
            call.auth.require_admin()
            flight_id = _parse(flight_id_adapter, flight_id, "flight id")
            return call.flights.require(flight_id)

    def get_flights_pass(self, passenger: str) -> List[FlightDetails]:
        """
        Flights a passenger currently holds tickets on.

        Public: passenger manifests are ledger data, so no authorization is
        required to read them.
        """
        with self._call("get_flights_pass") as call:
            passenger = _parse(address_adapter, passenger, "passenger address")
            return call.resolve(call.indexes.passenger_index(passenger))

