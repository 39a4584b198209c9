import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from onpoint.core.security import create_access_token
from onpoint.models.booking import Booking
from onpoint.models.user import User


def _signup(client, email="new.traveler@example.com", password="hunter22", **names):
    body = {"email": email, "password": password, "firstName": "Grace", "lastName": "Hopper"}
    body.update(names)
    return client.post("/api/v1/auth/signup", json=body)


def test_signup_then_me(client, db):
    r = _signup(client, email="  New.Traveler@Example.com ")
    assert r.status_code == 201, r.text
    tokens = r.json()
    assert tokens["token_type"] == "bearer"

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new.traveler@example.com"
    assert me.json()["firstName"] == "Grace"

    u = db.query(User).filter(User.email == "new.traveler@example.com").one()
    assert u.favorite_trips == []
    assert u.password_hash != "hunter22"


def test_signup_rejects_duplicates_and_short_passwords(client, user):
    assert _signup(client, email="traveler@example.com").status_code == 400
    r = _signup(client, password="123")
    assert r.status_code == 400
    assert "at least 6" in r.json()["detail"]


def test_login_and_refresh(client, user):
    r = client.post("/api/v1/auth/login", json={"email": "Traveler@example.com", "password": "secret123"})
    assert r.status_code == 200
    refresh = r.json()["refresh_token"]

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
    assert r.status_code == 200
    assert r.json()["access_token"]


def test_login_wrong_password(client, user):
    r = client.post("/api/v1/auth/login", json={"email": "traveler@example.com", "password": "nope"})
    assert r.status_code == 401


def test_refresh_rejects_access_token(client, auth_headers):
    access = auth_headers["Authorization"].split()[1]
    assert client.post("/api/v1/auth/refresh", json={"refresh_token": access}).status_code == 401


def test_me_with_garbage_token(client):
    assert client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_profile_counts_recent_bookings(client, auth_headers, db, user, trip):
    now = datetime.now(timezone.utc)
    for days_ago in (1, 10, 45):
        db.add(Booking(
            id=str(uuid.uuid4()), user_id=user.id, trip_id=trip.id,
            start_date=date(2026, 12, 1), end_date=date(2026, 12, 1), number_of_people=1,
            total_price=Decimal("500.00"), booked_at=now - timedelta(days=days_ago),
        ))
    db.commit()

    r = client.get("/api/v1/profile", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["firstName"] == "Ada"
    assert data["avatarUrl"] is None
    assert data["recentBookingsCount"] == 2


def test_profile_update_trims_and_clears_blank_avatar(client, auth_headers):
    r = client.put("/api/v1/profile", headers=auth_headers,
                   json={"firstName": "  Ada ", "lastName": " King ", "avatarUrl": "https://cdn.example.com/ada.png"})
    assert r.status_code == 200
    assert (r.json()["firstName"], r.json()["lastName"]) == ("Ada", "King")
    assert r.json()["avatarUrl"] == "https://cdn.example.com/ada.png"

    r = client.put("/api/v1/profile", headers=auth_headers, json={"firstName": "Ada", "lastName": "King", "avatarUrl": "  "})
    assert r.json()["avatarUrl"] is None


def test_profile_update_requires_names(client, auth_headers):
    r = client.put("/api/v1/profile", headers=auth_headers, json={"firstName": " ", "lastName": "King"})
    assert r.status_code == 400
    assert r.json()["detail"] == "First name and last name are required"


def test_expired_access_token_is_rejected(client, user):
    stale = create_access_token(user.id, expires_minutes=-1)
    assert client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {stale}"}).status_code == 401
