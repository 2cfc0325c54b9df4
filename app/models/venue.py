import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, func, Text, Integer, Float, ForeignKey, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.session import Base

class VenueCategory(str, enum.Enum):
    BARS_NIGHTLIFE = "bars_nightlife"
    COMEDY = "comedy"
    FOOD_DINING = "food_dining"
    PLACES_TO_STAY = "places_to_stay"
    LIVE_MUSIC = "live_music"
    EVENTS = "events"
    HIDDEN_GEMS = "hidden_gems"


# Display copy for the category picker
CATEGORY_DETAILS = {
    VenueCategory.BARS_NIGHTLIFE: ("Bars & Nightlife", "Hottest spots in town"),
    VenueCategory.COMEDY: ("Comedy", "Stand-up & improv shows"),
    VenueCategory.FOOD_DINING: ("Food & Dining", "Local favorites & more"),
    VenueCategory.PLACES_TO_STAY: ("Places to Stay", "Airbnb & hotels"),
    VenueCategory.LIVE_MUSIC: ("Live Music", "Concerts & gigs"),
    VenueCategory.EVENTS: ("Events", "What's happening now"),
    VenueCategory.HIDDEN_GEMS: ("Off the Beaten Path", "Hidden gems & secrets"),
}


class Venue(Base):
    __tablename__ = "venues"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    # Stored as the enum value ("bars_nightlife"), not the member name
    category = Column(
        SAEnum(
            VenueCategory,
            native_enum=False,
            length=32,
            values_callable=lambda e: [member.value for member in e],
        ),
        nullable=False,
        index=True,
    )
    address = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    image_url = Column(Text, nullable=True)
    is_hidden_gem = Column(Boolean, default=False)
    submitted_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    traffic_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    reviews = relationship("Review", back_populates="venue", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="venue")
    visits = relationship("VenueVisit", back_populates="venue", cascade="all, delete-orphan")


class VenueVisit(Base):
    __tablename__ = "venue_visits"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    venue_id = Column(UUID(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    user_latitude = Column(Float, nullable=True)
    user_longitude = Column(Float, nullable=True)
    visited_at = Column(DateTime(timezone=True), server_default=func.now())

    venue = relationship("Venue", back_populates="visits")
