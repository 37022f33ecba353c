"""
Settlement receipts returned by the booking and cancellation workflows.

The ledger computes money amounts but leaves moving them to the payment
rail; receipts expose exactly what was computed for each call.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .types import Address, FlightId

REFUND_NUMERATOR = 9
REFUND_DENOMINATOR = 10


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


class RefundQuote(BaseModel):
    """Refund split for one cancelled ticket: 90% back, the rest is the admin fee."""
    model_config = ConfigDict(frozen=True)

    paid: int
    refund: int
    admin_fee: int

    @classmethod
    def for_payment(cls, paid: int) -> "RefundQuote":
        """
        Split a paid fare into refund and admin fee.

        Example:
            RefundQuote.for_payment(101)  # refund=90, admin_fee=11
        """
        refund = _truncating_div(paid * REFUND_NUMERATOR, REFUND_DENOMINATOR)
        return cls(paid=paid, refund=refund, admin_fee=paid - refund)


class TicketReceipt(BaseModel):
    """Outcome of a successful ticket purchase."""
    model_config = ConfigDict(frozen=True)

    flight_id: FlightId
    passenger: Address
    fare: int
    passenger_count: int


class CancellationReceipt(BaseModel):
    """Outcome of a successful cancellation, covering every ticket the passenger held."""
    model_config = ConfigDict(frozen=True)

    flight_id: FlightId
    passenger: Address
    refunds: List[RefundQuote] = Field(default_factory=list)
    passenger_count: int

    @property
    def tickets_cancelled(self) -> int:
        return len(self.refunds)

    @property
    def total_refund(self) -> int:
        return sum(quote.refund for quote in self.refunds)

    @property
    def total_admin_fee(self) -> int:
        return sum(quote.admin_fee for quote in self.refunds)
