"""
Flight-related Pydantic models for the flight ledger.

FlightDetails is the canonical record stored once per flight identifier.
Capacity, fare and route are fixed at creation; only the status and the
passenger count change afterwards.
"""

from pydantic import BaseModel, Field, model_validator

from ..utils.arithmetic import I128_MAX, U32_MAX
from .enums import FlightStatus
from .types import FlightId, Symbol


class FlightDetails(BaseModel):
    """
    Canonical flight record.

    The escrow amount is the total notionally reserved for the flight,
    max_passengers * distance, and is never recomputed after creation.
    """
    id: FlightId = Field(..., description="32-byte flight identifier (hex)")
    max_passengers: int = Field(..., ge=1, le=U32_MAX, description="Seat capacity")
    distance: int = Field(..., gt=0, le=I128_MAX, description="Per-seat fare and escrow unit")
    src: Symbol = Field(..., description="Departure endpoint token")
    dest: Symbol = Field(..., description="Arrival endpoint token")
    status: FlightStatus = Field(default=FlightStatus.BOOKING, description="Lifecycle status")
    escrow_amount: int = Field(..., gt=0, le=I128_MAX, description="max_passengers * distance")
    passenger_count: int = Field(default=0, ge=0, le=U32_MAX, description="Tickets currently held")

    @model_validator(mode="after")
    def check_invariants(self) -> "FlightDetails":
        if self.escrow_amount != self.max_passengers * self.distance:
            raise ValueError("escrow_amount must equal max_passengers * distance")
        if self.passenger_count > self.max_passengers:
            raise ValueError("passenger_count cannot exceed max_passengers")
        return self

    @property
    def is_full(self) -> bool:
        return self.passenger_count >= self.max_passengers
