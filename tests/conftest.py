import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from onpoint.db.session import Base, engine, SessionLocal
from onpoint.core.security import create_access_token, hash_password
from onpoint.main import app
from onpoint.models.user import User
from onpoint.models.destination import Destination
from onpoint.models.trip import Trip
from onpoint.models.addon import Addon
from onpoint.models.booking import Booking  # noqa: F401
from onpoint.models.booking_addon import BookingAddon  # noqa: F401
from onpoint.models.payment import Payment  # noqa: F401
from onpoint.models.invoice import Invoice  # noqa: F401


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def make_user(db, email="traveler@example.com", password="secret123", first="Ada", last="Lovelace") -> User:
    u = User(
        id=str(uuid.uuid4()),
        email=email,
        password_hash=hash_password(password),
        first_name=first,
        last_name=last,
        role="user",
        favorite_trips=[],
        favorites_version=0,
    )
    db.add(u)
    db.commit()
    return u


def make_destination(db, name="Zanzibar", location="Tanzania") -> Destination:
    d = Destination(id=str(uuid.uuid4()), name=name, location=location, description="", main_image_url="")
    db.add(d)
    db.commit()
    return d


def make_trip(db, destination, name="Spice Tour", price=Decimal("500.00")) -> Trip:
    t = Trip(
        id=str(uuid.uuid4()),
        destination_id=destination.id,
        name=name,
        price=price,
        short_description="",
        description="",
        main_featured_image_url="",
    )
    db.add(t)
    db.commit()
    return t


def make_addon(db, addon_type, price) -> Addon:
    a = Addon(id=str(uuid.uuid4()), type=addon_type, description=f"{addon_type} for each traveler", price=price)
    db.add(a)
    db.commit()
    return a


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def destination(db):
    return make_destination(db)


@pytest.fixture
def trip(db, destination):
    return make_trip(db, destination)


@pytest.fixture
def addons(db):
    return [
        make_addon(db, "Airport transfer", Decimal("50.00")),
        make_addon(db, "Photo package", Decimal("30.00")),
    ]
