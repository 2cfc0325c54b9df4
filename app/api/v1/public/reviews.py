from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_user
from app.models.user import User
from app.models.venue import Venue
from app.models.review import Review
from app.schemas.review import ReviewUpsert, Review as ReviewSchema
from app.schemas.common import PaginatedResponse, paginate

router = APIRouter(prefix="/venues", tags=["Reviews"])


def _require_venue(db: Session, venue_id: UUID) -> None:
    if not db.query(Venue.id).filter(Venue.id == venue_id, Venue.is_active == True).first():
        raise HTTPException(status_code=404, detail="Venue not found")


def _find_user_review(db: Session, venue_id: UUID, user_id) -> Review:
    return db.query(Review).filter(
        Review.venue_id == venue_id, Review.user_id == user_id
    ).first()


@router.get("/{venue_id}/reviews", response_model=PaginatedResponse[ReviewSchema])
def list_reviews(
    venue_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Return paginated reviews for a venue, newest first. No authentication required."""
    _require_venue(db, venue_id)

    query = db.query(Review).filter(Review.venue_id == venue_id)
    total = query.count()
    reviews = (
        query.order_by(Review.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return PaginatedResponse(**paginate(reviews, total, page, limit))


@router.get("/{venue_id}/reviews/me", response_model=ReviewSchema)
def get_my_review(
    venue_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The caller's review of this venue, used to pre-fill the edit form."""
    _require_venue(db, venue_id)
    review = _find_user_review(db, venue_id, current_user.id)
    if not review:
        raise HTTPException(status_code=404, detail="You have not reviewed this venue")
    return review


@router.put("/{venue_id}/reviews", response_model=ReviewSchema)
def upsert_review(
    venue_id: UUID,
    data: ReviewUpsert,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Set or update the caller's rating (1-5) and optional comment for a venue.

    One review per user per venue: an existing review is updated in place
    (200), otherwise a new one is created (201). If a concurrent submission
    inserts first, the unique constraint rejects ours and it is applied as an
    update to that row instead.
    """
    _require_venue(db, venue_id)

    review = _find_user_review(db, venue_id, current_user.id)
    if not review:
        review = Review(
            venue_id=venue_id,
            user_id=current_user.id,
            rating=data.rating,
            comment=data.comment,
        )
        db.add(review)
        try:
            db.commit()
            db.refresh(review)
            response.status_code = status.HTTP_201_CREATED
            return review
        except IntegrityError:
            db.rollback()
            review = _find_user_review(db, venue_id, current_user.id)
            if not review:
                raise

    review.rating = data.rating
    review.comment = data.comment
    db.commit()
    db.refresh(review)
    return review
