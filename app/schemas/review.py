from typing import Annotated, Optional
from pydantic import BaseModel, Field, StringConstraints, UUID4, field_validator
from datetime import datetime

ReviewComment = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]


class ReviewUpsert(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[ReviewComment] = None

    # A whitespace-only comment is stored as no comment
    @field_validator("comment")
    @classmethod
    def blank_comment_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class Review(BaseModel):
    id: UUID4
    user_id: UUID4
    venue_id: UUID4
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
