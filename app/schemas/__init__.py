from app.schemas.common import PaginatedResponse, ErrorResponse, MessageResponse
from app.schemas.user import User, UserCreate, AdminCreate, Profile, ProfileUpdate, Token, TokenPayload, RefreshRequest
from app.schemas.venue import (
    Venue, VenueCreate, VenueUpdate, VenueSummary, VenueWithStats,
    CategoryInfo, HiddenGemCreate, VenueVisit, VenueVisitCreate,
)
from app.schemas.review import Review, ReviewUpsert
from app.schemas.booking import Booking
from app.schemas.booking_payment import (
    BookingPaymentCreate, BookingPaymentCreated, BookingPaymentVerify,
    BookingCancel, BookingPaymentOutcome,
)
