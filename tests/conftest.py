import os

# Must be set before the app's settings are imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
import stripe
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.profile import Profile
from app.models.user import User
from app.models.venue import Venue, VenueCategory
from app.services.stripe_gateway import get_payment_gateway

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _as_session(values):
    return stripe.checkout.Session.construct_from(values, "sk_test_fake")


class FakeStripeGateway:
    """In-memory stand-in for StripeGateway.

    Sessions are kept as plain dicts and handed out as real Stripe objects,
    the same types the live gateway returns.
    """

    def __init__(self):
        self.customers = {}
        self.sessions = {}
        self.created = []
        self.customer_lookups = []
        self.fail_create = False

    def find_customer_id(self, email):
        self.customer_lookups.append(email)
        return self.customers.get(email)

    def create_checkout_session(self, **kwargs):
        if self.fail_create:
            raise RuntimeError("Stripe is unavailable")
        self.created.append(kwargs)
        session_id = f"cs_test_{len(self.sessions) + 1}"
        self.sessions[session_id] = {
            "id": session_id,
            "object": "checkout.session",
            "url": f"https://checkout.stripe.test/pay/{session_id}",
            "payment_status": "unpaid",
            "payment_intent": None,
            "customer": kwargs["customer_id"],
            "metadata": dict(kwargs["metadata"]),
        }
        return _as_session(self.sessions[session_id])

    def retrieve_checkout_session(self, session_id):
        if session_id not in self.sessions:
            raise LookupError(f"No such checkout.session: '{session_id}'")
        return _as_session(self.sessions[session_id])

    def mark_paid(self, session_id, payment_intent="pi_test_123", customer="cus_test_new"):
        session = self.sessions[session_id]
        session["payment_status"] = "paid"
        session["payment_intent"] = payment_intent
        session["customer"] = session["customer"] or customer


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def gateway():
    return FakeStripeGateway()


@pytest.fixture()
def client(db, gateway):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make_user(email=None, role="user", display_name="Tester"):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            # Tests that log in go through /auth/register instead
            password_hash="not-a-real-hash",
            role=role,
        )
        user.profile = Profile(display_name=display_name)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_venue(db):
    def _make_venue(name="The Blue Room", category=VenueCategory.BARS_NIGHTLIFE, **fields):
        venue = Venue(
            name=name,
            category=category,
            address=fields.pop("address", "12 Main St"),
            latitude=fields.pop("latitude", 40.7128),
            longitude=fields.pop("longitude", -74.0060),
            **fields,
        )
        db.add(venue)
        db.commit()
        db.refresh(venue)
        return venue

    return _make_venue


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}


@pytest.fixture()
def user(make_user):
    return make_user(email="booker@example.com")


@pytest.fixture()
def venue(make_venue):
    return make_venue()


@pytest.fixture()
def headers_for():
    return auth_headers
