from app.models.user import User
from app.models.profile import Profile
from app.models.venue import Venue, VenueVisit, VenueCategory, CATEGORY_DETAILS
from app.models.review import Review
from app.models.booking import Booking, BookingStatus
