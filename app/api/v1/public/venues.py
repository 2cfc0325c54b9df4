from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_user
from app.models.user import User
from app.models.venue import Venue, VenueVisit, VenueCategory, CATEGORY_DETAILS
from app.models.review import Review
from app.schemas.venue import (
    Venue as VenueSchema,
    VenueWithStats,
    CategoryInfo,
    HiddenGemCreate,
    VenueVisitCreate,
    VenueVisit as VenueVisitSchema,
)
from app.schemas.common import PaginatedResponse, paginate

router = APIRouter(prefix="/venues", tags=["Venues"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _venues_with_stats(db: Session):
    """Active venues joined with their average rating and review count."""
    return (
        db.query(
            Venue,
            func.coalesce(func.avg(Review.rating), 0).label("avg_rating"),
            func.count(Review.id).label("review_count"),
        )
        .outerjoin(Review, Review.venue_id == Venue.id)
        .filter(Venue.is_active == True)
        .group_by(Venue.id)
    )


def _with_stats(venue: Venue, avg_rating, review_count: int) -> VenueWithStats:
    item = VenueWithStats.model_validate(venue)
    item.avg_rating = round(float(avg_rating), 1)
    item.review_count = review_count
    return item


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


@router.get("/categories", response_model=List[CategoryInfo])
def list_categories():
    """The fixed set of venue categories with their display copy."""
    return [
        CategoryInfo(key=category, title=title, description=description)
        for category, (title, description) in CATEGORY_DETAILS.items()
    ]


@router.get("/", response_model=PaginatedResponse[VenueWithStats])
def list_venues(
    category: Optional[VenueCategory] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Active venues ordered by name, each with its rating stats."""
    query = _venues_with_stats(db)
    count_query = db.query(func.count(Venue.id)).filter(Venue.is_active == True)
    if category:
        query = query.filter(Venue.category == category)
        count_query = count_query.filter(Venue.category == category)

    total = count_query.scalar()
    rows = query.order_by(Venue.name).offset((page - 1) * limit).limit(limit).all()

    return PaginatedResponse(
        **paginate([_with_stats(*row) for row in rows], total, page, limit)
    )


@router.get("/trending", response_model=List[VenueWithStats])
def list_trending_venues(
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
):
    """Most visited active venues first."""
    rows = (
        _venues_with_stats(db)
        .order_by(Venue.traffic_count.desc(), Venue.name)
        .limit(limit)
        .all()
    )
    return [_with_stats(*row) for row in rows]


@router.get("/{venue_id}", response_model=VenueWithStats)
def get_venue(venue_id: UUID, db: Session = Depends(get_db)):
    row = _venues_with_stats(db).filter(Venue.id == venue_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Venue not found")
    return _with_stats(*row)


# ---------------------------------------------------------------------------
# POST /venues/{id}/visits — visit telemetry
# ---------------------------------------------------------------------------


@router.post(
    "/{venue_id}/visits",
    response_model=VenueVisitSchema,
    status_code=status.HTTP_201_CREATED,
)
def record_visit(
    venue_id: UUID,
    data: VenueVisitCreate,
    db: Session = Depends(get_db),
):
    """Record a visit and bump the venue's traffic counter."""
    venue = db.query(Venue.id).filter(Venue.id == venue_id, Venue.is_active == True).first()
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")

    visit = VenueVisit(venue_id=venue_id, **data.model_dump())
    db.add(visit)
    # Increment in SQL so concurrent visits don't overwrite each other
    db.query(Venue).filter(Venue.id == venue_id).update(
        {Venue.traffic_count: Venue.traffic_count + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(visit)
    return visit


# ---------------------------------------------------------------------------
# POST /venues/hidden-gems — user-submitted venue
# ---------------------------------------------------------------------------


@router.post(
    "/hidden-gems",
    response_model=VenueSchema,
    status_code=status.HTTP_201_CREATED,
)
def submit_hidden_gem(
    data: HiddenGemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Submit a hidden gem.

    Name, description and address are trimmed and length-checked, and a
    captured location is required; nothing is stored otherwise. The category
    is always `hidden_gems`.
    """
    venue = Venue(
        name=data.name,
        description=data.description,
        address=data.address,
        latitude=data.latitude,
        longitude=data.longitude,
        category=VenueCategory.HIDDEN_GEMS,
        is_hidden_gem=True,
        submitted_by=current_user.id,
    )
    db.add(venue)
    db.commit()
    db.refresh(venue)
    return venue
