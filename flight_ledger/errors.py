"""
Error taxonomy for the flight ledger.

Every rejected call raises exactly one LedgerError subclass. Each carries a
stable integer code so hosts can surface discriminated error values. Raising
aborts the call and discards every staged write.
"""

from typing import Dict, Optional, Type


class LedgerError(Exception):
    """Base class for business-rule failures of a ledger call."""

    code: int = 0
    default_message: str = "Ledger call rejected"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @classmethod
    def from_code(cls, code: int) -> Type["LedgerError"]:
        """
        Look up the error class registered for a numeric code.

        Raises:
            KeyError: If no error class uses the code
        """
        return _ERRORS_BY_CODE[code]


class AlreadyInitialized(LedgerError):
    """The ledger already has an admin."""
    code = 1
    default_message = "Ledger is already initialized"


class Unauthorized(LedgerError):
    """The caller could not prove control of the required address."""
    code = 2
    default_message = "Caller is not authorized"


class FlightAlreadyExists(LedgerError):
    """A flight with the given identifier is already registered."""
    code = 3
    default_message = "Flight already exists"


class FlightNotFound(LedgerError):
    """No flight is stored under the given identifier."""
    code = 4
    default_message = "Flight not found"


class InvalidInput(LedgerError):
    """Flight parameters are out of range or malformed."""
    code = 5
    default_message = "Invalid input"


class FlightFull(LedgerError):
    """Every seat on the flight has been sold."""
    code = 6
    default_message = "Flight is full"


class InvalidFare(LedgerError):
    """The computed fare is not positive."""
    code = 7
    default_message = "Invalid fare"


class PassengerNotFound(LedgerError):
    """The passenger holds no ticket on the flight."""
    code = 8
    default_message = "Passenger not found on flight"


class InvalidStatus(LedgerError):
    """The flight status does not allow the operation or transition."""
    code = 9
    default_message = "Invalid flight status"


class NoPassengers(LedgerError):
    """The flight has never had a passenger list."""
    code = 10
    default_message = "Flight has no passengers"


class NotInitialized(LedgerError):
    """No admin has been provisioned for the ledger."""
    code = 11
    default_message = "Ledger is not initialized"


class ArithmeticOverflow(ArithmeticError):
    """
    A checked integer operation left its range.

    This is a defect rather than a business outcome, so it does not derive
    from LedgerError. It still aborts the call with full rollback.
    """
    pass


_ERRORS_BY_CODE: Dict[int, Type[LedgerError]] = {
    error.code: error
    for error in (
        AlreadyInitialized,
        Unauthorized,
        FlightAlreadyExists,
        FlightNotFound,
        InvalidInput,
        FlightFull,
        InvalidFare,
        PassengerNotFound,
        InvalidStatus,
        NoPassengers,
        NotInitialized,
    )
}
