"""
Request/response bodies of the booking payment handlers.

These mirror the JSON contract used by the web client, so fields are
camelCase on the wire. Unknown fields are rejected.
"""
from typing import Optional
from uuid import UUID
from datetime import date, time

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


# POST /booking-payments
class BookingPaymentCreate(_CamelModel):
    venue_id: UUID = Field(alias="venueId")
    venue_name: Optional[str] = Field(None, alias="venueName", max_length=255)
    booking_date: date = Field(alias="bookingDate")
    booking_time: time = Field(alias="bookingTime")
    party_size: Optional[int] = Field(None, alias="partySize", ge=1, le=20)
    amount_cents: int = Field(alias="amountCents", gt=0)


class BookingPaymentCreated(_CamelModel):
    url: str
    booking_id: UUID = Field(alias="bookingId")


# POST /booking-payments/verify
class BookingPaymentVerify(_CamelModel):
    session_id: str = Field(alias="sessionId", min_length=1)
    booking_id: UUID = Field(alias="bookingId")


# POST /booking-payments/cancel
class BookingCancel(_CamelModel):
    booking_id: UUID = Field(alias="bookingId")


# Returned by verify and cancel; success=False is a normal outcome, not an error
class BookingPaymentOutcome(BaseModel):
    success: bool
    status: str
