"""
Ledger services.

This module contains the authorization gate, the flight registry, the index
maintainer, the passenger ledger, the payment rail interface, and the
FlightLedger facade that runs the booking, cancellation, status and query
workflows.
"""

from .auth import AuthVerifier, InvocationSigners, AuthorizationGate
from .registry import FlightRegistry
from .indexes import IdIndex, IndexMaintainer
from .passenger_ledger import PassengerLedger, split_by_passenger
from .payments import PaymentRail, LoggingPaymentRail
from .ledger import FlightLedger, DEFAULT_ESCROW_ACCOUNT

__all__ = [
    'AuthVerifier',
    'InvocationSigners',
    'AuthorizationGate',
    'FlightRegistry',
    'IdIndex',
    'IndexMaintainer',
    'PassengerLedger',
    'split_by_passenger',
    'PaymentRail',
    'LoggingPaymentRail',
    'FlightLedger',
    'DEFAULT_ESCROW_ACCOUNT',
]
