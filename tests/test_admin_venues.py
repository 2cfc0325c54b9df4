import pytest

from app.models.venue import Venue, VenueCategory

ADMIN_URL = "/api/v1/admin/venues/"


@pytest.fixture()
def admin(make_user):
    return make_user(email="ops@example.com", role="admin")


def _venue_body(**overrides):
    body = {
        "name": "Comedy Cellar",
        "category": "comedy",
        "address": "117 MacDougal St",
        "description": "Late-night stand-up",
        "latitude": 40.73,
        "longitude": -74.0,
    }
    body.update(overrides)
    return body


def test_operator_creates_venue(client, db, admin, headers_for):
    response = client.post(ADMIN_URL, json=_venue_body(), headers=headers_for(admin))

    assert response.status_code == 201, response.text
    assert response.json()["category"] == "comedy"
    assert response.json()["is_hidden_gem"] is False
    assert db.query(Venue).count() == 1


def test_unknown_category_is_rejected(client, db, admin, headers_for):
    response = client.post(ADMIN_URL, json=_venue_body(category="casinos"), headers=headers_for(admin))

    assert response.status_code == 422
    assert db.query(Venue).count() == 0


def test_regular_users_cannot_manage_venues(client, db, user, headers_for):
    response = client.post(ADMIN_URL, json=_venue_body(), headers=headers_for(user))
    assert response.status_code == 403
    assert db.query(Venue).count() == 0


def test_update_keeps_category(client, db, admin, venue, headers_for):
    response = client.patch(
        f"{ADMIN_URL}{venue.id}",
        json={"name": "The Red Room", "category": "comedy"},
        headers=headers_for(admin),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "The Red Room"
    assert response.json()["category"] == "bars_nightlife"


def test_update_rejects_null_required_fields(client, admin, venue, headers_for):
    response = client.patch(f"{ADMIN_URL}{venue.id}", json={"name": None}, headers=headers_for(admin))
    assert response.status_code == 400


def test_delete_is_soft(client, db, admin, venue, headers_for):
    response = client.delete(f"{ADMIN_URL}{venue.id}", headers=headers_for(admin))

    assert response.status_code == 200
    assert response.json() == {"id": str(venue.id), "is_active": False}
    db.expire_all()
    assert db.query(Venue).count() == 1
    assert client.get("/api/v1/venues/").json()["total"] == 0
    assert client.get(ADMIN_URL, headers=headers_for(admin)).json()["total"] == 0


def test_list_filters_hidden_gems(client, admin, make_venue, headers_for):
    make_venue(name="Operator Bar")
    make_venue(name="Backyard Jazz", is_hidden_gem=True, category=VenueCategory.HIDDEN_GEMS)

    response = client.get(ADMIN_URL, params={"hidden_gems_only": True}, headers=headers_for(admin))

    assert response.status_code == 200
    assert [v["name"] for v in response.json()["data"]] == ["Backyard Jazz"]
