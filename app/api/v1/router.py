from fastapi import APIRouter

# Auth
from app.api.v1.public.auth import router as auth_router

# Public — discovery, visits, hidden gems
from app.api.v1.public.venues import router as venues_router

# Public — reviews
from app.api.v1.public.reviews import router as reviews_router

# Public — bookings and checkout
from app.api.v1.public.bookings import router as bookings_router
from app.api.v1.public.booking_payments import router as booking_payments_router

# Public — user profile
from app.api.v1.public.me import router as me_router

# Admin
from app.api.v1.admin.venues import router as admin_venues_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public: discovery ---
api_router.include_router(venues_router)

# --- Public: reviews ---
api_router.include_router(reviews_router)

# --- Public: bookings ---
api_router.include_router(bookings_router)
api_router.include_router(booking_payments_router)

# --- Public: profile ---
api_router.include_router(me_router)

# --- Admin ---
api_router.include_router(admin_venues_router)
