from app.models.user import User


def _register(client, email="ana@example.com", password="secret123", **extra):
    return client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, **extra},
    )


def test_register_creates_user_and_profile(client, db):
    response = _register(client, display_name="Ana")

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "ana@example.com"
    assert body["user"]["role"] == "user"
    assert body["user"]["profile"]["display_name"] == "Ana"
    assert db.query(User).count() == 1


def test_register_rejects_duplicates_and_short_passwords(client):
    assert _register(client).status_code == 201
    duplicate = _register(client, email="ANA@example.com")
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Email already registered"

    assert _register(client, email="bo@example.com", password="12345").status_code == 422


def test_login_and_me(client):
    _register(client, display_name="Ana")

    bad = client.post("/api/v1/auth/login", data={"username": "ana@example.com", "password": "wrong"})
    assert bad.status_code == 401

    login = client.post(
        "/api/v1/auth/login", data={"username": "ana@example.com", "password": "secret123"}
    )
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    me = client.get("/api/v1/me/", headers=headers)
    assert me.status_code == 200
    assert me.json()["profile"]["display_name"] == "Ana"

    updated = client.patch(
        "/api/v1/me/",
        json={"display_name": "Ana B", "avatar_url": "https://img.example/ana.png"},
        headers=headers,
    )
    assert updated.status_code == 200
    profile = updated.json()["profile"]
    assert profile["display_name"] == "Ana B"
    assert profile["avatar_url"] == "https://img.example/ana.png"


def test_refresh_token_exchange(client):
    tokens = _register(client).json()

    response = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "ana@example.com"

    # An access token is not accepted as a refresh token
    response = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert response.status_code == 401


def test_refresh_token_is_not_an_access_token(client):
    tokens = _register(client).json()
    headers = {"Authorization": f"Bearer {tokens['refresh_token']}"}
    assert client.get("/api/v1/me/", headers=headers).status_code == 401


def test_inactive_user_cannot_use_token(client, db, make_user, headers_for):
    user = make_user()
    user.is_active = False
    db.commit()
    assert client.get("/api/v1/me/", headers=headers_for(user)).status_code == 401


def test_admin_register_requires_secret(client):
    response = client.post(
        "/api/v1/auth/admin/register",
        json={"email": "ops@example.com", "password": "secret123", "admin_secret": "nope"},
    )
    assert response.status_code == 403

    response = client.post(
        "/api/v1/auth/admin/register",
        json={
            "email": "ops@example.com",
            "password": "secret123",
            "admin_secret": "change-this-admin-secret",
        },
    )
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "admin"


def test_logout(client, make_user, headers_for):
    response = client.post("/api/v1/auth/logout", headers=headers_for(make_user()))
    assert response.status_code == 200
    assert response.json() == {"message": "Successfully logged out"}
