from typing import Optional
from pydantic import BaseModel, UUID4
from datetime import date, datetime, time

from app.schemas.venue import VenueSummary


# Booking — Full response (GET /bookings, GET /bookings/{id})
class Booking(BaseModel):
    id: UUID4
    venue_id: UUID4
    booking_date: date
    booking_time: time
    party_size: int
    amount_cents: int
    status: str
    stripe_payment_intent_id: Optional[str] = None
    canceled_at: Optional[datetime] = None
    created_at: datetime
    venue: Optional[VenueSummary] = None

    class Config:
        from_attributes = True
