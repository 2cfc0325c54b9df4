# Importing every model registers its table on Base.metadata
from app.db.session import Base
from app.models.user import User
from app.models.profile import Profile
from app.models.venue import Venue, VenueVisit
from app.models.review import Review
from app.models.booking import Booking
