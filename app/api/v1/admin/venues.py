from uuid import UUID
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_admin_user
from app.models.user import User
from app.models.venue import Venue, VenueCategory
from app.schemas.venue import (
    VenueCreate,
    VenueUpdate,
    Venue as VenueSchema,
)
from app.schemas.common import PaginatedResponse, paginate

router = APIRouter(prefix="/admin/venues", tags=["Admin - Venues"])


# ---------------------------------------------------------------------------
# Operator venue CRUD
# ---------------------------------------------------------------------------


@router.post("/", response_model=VenueSchema, status_code=status.HTTP_201_CREATED)
def create_venue(
    data: VenueCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    venue = Venue(
        **data.model_dump(),
        is_hidden_gem=data.category == VenueCategory.HIDDEN_GEMS,
    )
    db.add(venue)
    db.commit()
    db.refresh(venue)
    return venue


@router.get("/", response_model=PaginatedResponse[VenueSchema])
def list_venues(
    category: Optional[VenueCategory] = None,
    hidden_gems_only: bool = Query(False, description="Only user-submitted hidden gems"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    query = db.query(Venue).filter(Venue.is_active == True)
    if category:
        query = query.filter(Venue.category == category)
    if hidden_gems_only:
        query = query.filter(Venue.is_hidden_gem == True)

    total = query.with_entities(func.count(Venue.id)).scalar()
    venues = query.order_by(Venue.created_at.desc()).offset((page - 1) * limit).limit(limit).all()

    return PaginatedResponse(**paginate(venues, total, page, limit))


@router.patch("/{id}", response_model=VenueSchema)
def update_venue(
    id: UUID,
    data: VenueUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    venue = db.query(Venue).filter(Venue.id == id, Venue.is_active == True).first()
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in ("name", "latitude", "longitude"):
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")
        setattr(venue, field, value)

    db.commit()
    db.refresh(venue)
    return venue


@router.delete("/{id}", status_code=status.HTTP_200_OK)
def delete_venue(
    id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Soft delete: the venue disappears from discovery but bookings keep their reference."""
    venue = db.query(Venue).filter(Venue.id == id, Venue.is_active == True).first()
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")

    venue.is_active = False
    db.commit()
    return {"id": str(id), "is_active": False}
