import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from app.api.deps import optional_oauth2_scheme, resolve_user
from app.core.config import settings
from app.db.session import get_db
from app.models.booking import Booking, BookingStatus
from app.models.profile import Profile
from app.models.user import User
from app.models.venue import Venue
from app.schemas.booking_payment import (
    BookingCancel,
    BookingPaymentCreate,
    BookingPaymentCreated,
    BookingPaymentOutcome,
    BookingPaymentVerify,
)
from app.schemas.common import ErrorResponse
from app.services.stripe_gateway import StripeGateway, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/booking-payments", tags=["Booking Payments"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

M = TypeVar("M", bound=BaseModel)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class BookingPaymentError(Exception):
    """Expected failure with a client-facing status code."""

    status_code = 400


class NotAuthenticated(BookingPaymentError):
    status_code = 401


class NotFound(BookingPaymentError):
    status_code = 404


def _log_step(tag: str, step: str, details: Optional[dict] = None) -> None:
    details_str = f" - {json.dumps(details, default=str)}" if details else ""
    logger.info("[%s] %s%s", tag, step, details_str)


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


INVALID_JSON = object()


async def read_json_body(request: Request) -> Any:
    """
    Raw JSON body, or None when empty and INVALID_JSON when unparseable.

    Parsing happens here rather than through a typed Body parameter so that
    malformed requests reach the handler and get the same {error} response.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return INVALID_JSON


def _parse_body(schema: Type[M], payload: Any, missing_message: str) -> M:
    """Validate a raw JSON body, collapsing pydantic errors into one message."""
    if payload is INVALID_JSON:
        raise BookingPaymentError("Request body must be valid JSON")
    if payload is None:
        raise BookingPaymentError(missing_message)
    if not isinstance(payload, dict):
        raise BookingPaymentError("Request body must be a JSON object")
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        errors = exc.errors()
        if any(err["type"] == "missing" for err in errors):
            raise BookingPaymentError(missing_message)
        first = errors[0]
        field = ".".join(str(part) for part in first["loc"])
        raise BookingPaymentError(f"Invalid {field}: {first['msg']}")


def _session_metadata(session) -> dict:
    """Checkout session metadata as a plain dict (StripeObject is not a dict)."""
    metadata = getattr(session, "metadata", None)
    if metadata is None:
        return {}
    if hasattr(metadata, "to_dict"):
        return metadata.to_dict()
    return dict(metadata)


def _get_or_create_profile(db: Session, user: User) -> Profile:
    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    if not profile:
        profile = Profile(user_id=user.id)
        db.add(profile)
        db.flush()
    return profile


def _resolve_customer_id(
    db: Session, gateway: StripeGateway, user: User, tag: str
) -> Optional[str]:
    """
    Stripe customer to charge.

    The id stored on the profile wins. Otherwise fall back to the first
    customer registered under the user's email and remember it. Returns
    None when neither exists; checkout will then create the customer.
    """
    profile = _get_or_create_profile(db, user)
    if profile.stripe_customer_id:
        _log_step(tag, "Using stored Stripe customer", {"customerId": profile.stripe_customer_id})
        return profile.stripe_customer_id

    customer_id = gateway.find_customer_id(user.email)
    if customer_id:
        profile.stripe_customer_id = customer_id
        _log_step(tag, "Found existing Stripe customer", {"customerId": customer_id})
    else:
        _log_step(tag, "No existing customer found")
    return customer_id


def _redirect_origin(request: Request) -> str:
    return (request.headers.get("origin") or settings.FRONTEND_URL).rstrip("/")


# ---------------------------------------------------------------------------
# POST /booking-payments — create a pending booking + checkout session
# ---------------------------------------------------------------------------


@router.post("/", response_model=BookingPaymentCreated, responses=ERROR_RESPONSES)
def create_booking_payment(
    request: Request,
    payload: Any = Depends(read_json_body),
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    """
    Start a paid booking.

    The booking row is committed as `pending` before Stripe is called, so a
    processor failure still leaves an auditable record. The amount is always
    the flat booking fee; party size does not change it.
    """
    tag = "CREATE-BOOKING-PAYMENT"
    try:
        _log_step(tag, "Function started")

        data = _parse_body(BookingPaymentCreate, payload, "Missing required booking fields")
        _log_step(tag, "Request body parsed", data.model_dump(mode="json"))

        if data.amount_cents != settings.BOOKING_FEE_CENTS:
            raise BookingPaymentError(
                f"Booking fee must be {settings.BOOKING_FEE_CENTS} cents"
            )

        user = resolve_user(db, token)
        if not user or not user.email:
            raise NotAuthenticated("User not authenticated or email not available")
        _log_step(tag, "User authenticated", {"userId": user.id, "email": user.email})

        venue = db.query(Venue).filter(Venue.id == data.venue_id, Venue.is_active == True).first()
        if not venue:
            raise NotFound("Venue not found")

        customer_id = _resolve_customer_id(db, gateway, user, tag)

        party_size = data.party_size or settings.DEFAULT_PARTY_SIZE
        booking = Booking(
            venue_id=venue.id,
            user_id=user.id,
            booking_date=data.booking_date,
            booking_time=data.booking_time,
            party_size=party_size,
            amount_cents=settings.BOOKING_FEE_CENTS,
            status=BookingStatus.PENDING.value,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        _log_step(tag, "Booking created", {"bookingId": booking.id})

        origin = _redirect_origin(request)
        booking_time = data.booking_time.strftime("%H:%M")
        session = gateway.create_checkout_session(
            customer_id=customer_id,
            customer_email=user.email,
            product_name=f"Booking at {data.venue_name or venue.name}",
            product_description=(
                f"{data.booking_date.isoformat()} at {booking_time} - Party of {party_size}"
            ),
            amount_cents=booking.amount_cents,
            currency=settings.BOOKING_CURRENCY,
            success_url=(
                f"{origin}/booking-success?booking_id={booking.id}"
                "&session_id={CHECKOUT_SESSION_ID}"
            ),
            cancel_url=f"{origin}/booking-canceled?booking_id={booking.id}",
            metadata={
                "booking_id": str(booking.id),
                "venue_id": str(venue.id),
                "user_id": str(user.id),
            },
        )
        _log_step(tag, "Checkout session created", {"sessionId": session.id, "url": session.url})

        booking.stripe_checkout_session_id = session.id
        db.commit()

        body = BookingPaymentCreated(url=session.url, booking_id=booking.id)
        return JSONResponse(content=body.model_dump(mode="json", by_alias=True))
    except BookingPaymentError as exc:
        db.rollback()
        _log_step(tag, "ERROR", {"message": str(exc)})
        return _error_response(str(exc), exc.status_code)
    except Exception as exc:
        db.rollback()
        logger.exception("[%s] ERROR - %s", tag, exc)
        return _error_response(str(exc), 500)


# ---------------------------------------------------------------------------
# POST /booking-payments/verify — confirm a booking once Stripe reports it paid
# ---------------------------------------------------------------------------


@router.post("/verify", response_model=BookingPaymentOutcome, responses=ERROR_RESPONSES)
def verify_booking_payment(
    payload: Any = Depends(read_json_body),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    """
    Check a checkout session and confirm its booking when paid.

    An unpaid session is a normal outcome (`success: false` with the observed
    payment status) and leaves the booking untouched. Repeating the call for a
    paid session is harmless.
    """
    tag = "VERIFY-BOOKING-PAYMENT"
    try:
        _log_step(tag, "Function started")

        data = _parse_body(BookingPaymentVerify, payload, "Missing session ID or booking ID")
        _log_step(tag, "Request body parsed", data.model_dump(mode="json"))

        session = gateway.retrieve_checkout_session(data.session_id)
        payment_intent = session.payment_intent
        if payment_intent is not None and not isinstance(payment_intent, str):
            payment_intent = payment_intent.id
        _log_step(tag, "Session retrieved", {
            "status": session.payment_status,
            "paymentIntent": payment_intent,
        })

        session_booking_id = _session_metadata(session).get("booking_id")
        if session_booking_id and session_booking_id != str(data.booking_id):
            raise BookingPaymentError("Checkout session does not belong to this booking")

        booking = db.query(Booking).filter(Booking.id == data.booking_id).first()
        if not booking:
            raise NotFound("Booking not found")

        if session.payment_status != "paid":
            _log_step(tag, "Payment not completed", {"status": session.payment_status})
            body = BookingPaymentOutcome(success=False, status=session.payment_status)
            return JSONResponse(content=body.model_dump())

        if booking.status == BookingStatus.CANCELED.value:
            logger.warning(
                "[%s] Paid session %s for canceled booking %s",
                tag, data.session_id, booking.id,
            )
            body = BookingPaymentOutcome(success=False, status=booking.status)
            return JSONResponse(content=body.model_dump())

        try:
            booking.status = BookingStatus.CONFIRMED.value
            booking.stripe_payment_intent_id = payment_intent
            if not booking.stripe_checkout_session_id:
                booking.stripe_checkout_session_id = data.session_id

            customer_id = session.customer
            if customer_id is not None and not isinstance(customer_id, str):
                customer_id = customer_id.id
            if customer_id:
                profile = _get_or_create_profile(db, booking.user)
                if not profile.stripe_customer_id:
                    profile.stripe_customer_id = customer_id

            db.commit()
        except Exception as exc:
            _log_step(tag, "Error updating booking", {"bookingId": booking.id, "error": str(exc)})
            raise RuntimeError("Failed to update booking status") from exc

        _log_step(tag, "Booking confirmed", {"bookingId": booking.id})
        body = BookingPaymentOutcome(success=True, status=BookingStatus.CONFIRMED.value)
        return JSONResponse(content=body.model_dump())
    except BookingPaymentError as exc:
        db.rollback()
        _log_step(tag, "ERROR", {"message": str(exc)})
        return _error_response(str(exc), exc.status_code)
    except Exception as exc:
        db.rollback()
        logger.exception("[%s] ERROR - %s", tag, exc)
        return _error_response(str(exc), 500)


# ---------------------------------------------------------------------------
# POST /booking-payments/cancel — abandon a pending booking
# ---------------------------------------------------------------------------


@router.post("/cancel", response_model=BookingPaymentOutcome, responses=ERROR_RESPONSES)
def cancel_booking(
    payload: Any = Depends(read_json_body),
    db: Session = Depends(get_db),
):
    """
    Mark a pending booking as canceled after the user backs out of checkout.

    Idempotent: canceling twice returns the same result. Confirmed bookings
    are never touched.
    """
    tag = "CANCEL-BOOKING"
    try:
        _log_step(tag, "Function started")

        data = _parse_body(BookingCancel, payload, "Missing booking ID")
        _log_step(tag, "Request body parsed", data.model_dump(mode="json"))

        booking = db.query(Booking).filter(Booking.id == data.booking_id).first()
        if not booking:
            raise NotFound("Booking not found")

        if booking.status == BookingStatus.CONFIRMED.value:
            _log_step(tag, "Booking already confirmed", {"bookingId": booking.id})
            body = BookingPaymentOutcome(success=False, status=booking.status)
            return JSONResponse(content=body.model_dump())

        if booking.status == BookingStatus.PENDING.value:
            booking.status = BookingStatus.CANCELED.value
            booking.canceled_at = datetime.now(timezone.utc)
            db.commit()
            _log_step(tag, "Booking canceled", {"bookingId": booking.id})
        else:
            _log_step(tag, "Booking already canceled", {"bookingId": booking.id})

        body = BookingPaymentOutcome(success=True, status=BookingStatus.CANCELED.value)
        return JSONResponse(content=body.model_dump())
    except BookingPaymentError as exc:
        db.rollback()
        _log_step(tag, "ERROR", {"message": str(exc)})
        return _error_response(str(exc), exc.status_code)
    except Exception as exc:
        db.rollback()
        logger.exception("[%s] ERROR - %s", tag, exc)
        return _error_response(str(exc), 500)
