from typing import Annotated, Optional
from pydantic import BaseModel, Field, StringConstraints, UUID4, model_validator
from datetime import datetime

from app.models.venue import VenueCategory

Latitude = Annotated[float, Field(ge=-90, le=90)]
Longitude = Annotated[float, Field(ge=-180, le=180)]


# Venue Schemas
class VenueBase(BaseModel):
    name: str
    category: VenueCategory
    address: Optional[str] = None
    description: Optional[str] = None
    latitude: Latitude
    longitude: Longitude
    image_url: Optional[str] = None


# Operator-created venue (POST /admin/venues)
class VenueCreate(VenueBase):
    pass


# Category is fixed once a venue exists, so it is not updatable
class VenueUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[Latitude] = None
    longitude: Optional[Longitude] = None
    image_url: Optional[str] = None


class Venue(VenueBase):
    id: UUID4
    is_hidden_gem: bool = False
    submitted_by: Optional[UUID4] = None
    traffic_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Venue card/detail with aggregated review stats
class VenueWithStats(Venue):
    avg_rating: float = 0.0
    review_count: int = 0


# Compact venue for nested responses (booking)
class VenueSummary(BaseModel):
    id: UUID4
    name: str
    category: VenueCategory
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class CategoryInfo(BaseModel):
    key: VenueCategory
    title: str
    description: str


# Hidden gem submission (POST /venues/hidden-gems)
class HiddenGemCreate(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
    description: Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=500)]
    address: Annotated[str, StringConstraints(strip_whitespace=True, min_length=5, max_length=200)]
    latitude: Optional[Latitude] = None
    longitude: Optional[Longitude] = None

    @model_validator(mode="after")
    def require_location(self):
        if self.latitude is None or self.longitude is None:
            raise ValueError("Please capture your current location.")
        return self


class VenueVisitCreate(BaseModel):
    user_latitude: Optional[Latitude] = None
    user_longitude: Optional[Longitude] = None


class VenueVisit(BaseModel):
    id: UUID4
    venue_id: UUID4
    user_latitude: Optional[float] = None
    user_longitude: Optional[float] = None
    visited_at: datetime

    class Config:
        from_attributes = True
