from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.exc import OperationalError

from onpoint.db.session import engine
from onpoint.models.booking import Booking
from onpoint.models.booking_addon import BookingAddon
from onpoint.services import booking_service
from onpoint.services.errors import ValidationError, NotFoundError, BookingFailedError

from conftest import make_trip


@pytest.fixture
def statements():
    seen = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    yield seen
    event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture
def fail_inserts():
    """Make the next INSERT into the given model raise like a driver error would."""
    installed = []

    def _install(model):
        def _boom(mapper, connection, target):
            raise OperationalError("INSERT", {}, Exception(f"{model.__tablename__} unavailable"))
        event.listen(model, "before_insert", _boom)
        installed.append((model, _boom))

        def _restore():
            event.remove(model, "before_insert", _boom)
        return _restore

    yield _install
    for model, fn in installed:
        if event.contains(model, "before_insert", fn):
            event.remove(model, "before_insert", fn)


def _count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def test_booking_with_addons_prices_per_traveler(db, user, trip, addons):
    b, created = booking_service.create_booking(
        db, user, trip.id, "2026-12-01", people_count=2, addon_ids=[a.id for a in addons],
    )
    assert b.total_price == Decimal("1160.00")
    assert b.status == "pending"
    assert b.payment_status == "unpaid"
    assert b.start_date == b.end_date == date(2026, 12, 1)
    assert b.number_of_people == 2

    rows = booking_service.get_booking_addons(db, b.id)
    assert sorted(r.addon_type for r in rows) == ["Airport transfer", "Photo package"]
    assert all(r.quantity == 2 for r in rows)
    assert all(r.booking_id == b.id for r in rows)
    assert sorted(r.id for r in created) == sorted(r.id for r in rows)


def test_booking_without_addons_issues_no_addon_insert(db, user, destination, statements):
    trip = make_trip(db, destination, name="City Walk", price=Decimal("200"))
    statements.clear()

    b, created = booking_service.create_booking(db, user, trip.id, "2026-11-15", people_count=1)
    assert created == []

    assert b.total_price == Decimal("200.00")
    assert not [s for s in statements if s.lstrip().upper().startswith("INSERT INTO BOOKING_ADDONS")]
    assert _count(db, BookingAddon) == 0


@pytest.mark.parametrize("selected_date", ["", "   ", None])
def test_missing_date_never_touches_the_database(db, user, trip, addons, statements, selected_date):
    trip_id, addon_ids = trip.id, [a.id for a in addons]
    statements.clear()
    with pytest.raises(ValidationError) as exc:
        booking_service.create_booking(db, user, trip_id, selected_date, 2, addon_ids)

    assert exc.value.title == "Selection Required"
    assert str(exc.value) == "Please select a travel date."
    assert statements == []


@pytest.mark.parametrize("selected_date", ["12/01/2026", "2026-1-5", "20261201", "2026-02-30"])
def test_malformed_date_is_rejected(db, user, trip, selected_date):
    with pytest.raises(ValidationError) as exc:
        booking_service.create_booking(db, user, trip.id, selected_date)
    assert exc.value.title == "Selection Required"
    assert _count(db, Booking) == 0


def test_unknown_trip(db, user):
    with pytest.raises(NotFoundError):
        booking_service.create_booking(db, user, "no-such-trip", "2026-12-01")


def test_unknown_addon_ids_are_ignored(db, user, trip, addons):
    b, _ = booking_service.create_booking(db, user, trip.id, "2026-12-01", 1, [addons[0].id, "ghost-addon"])
    assert b.total_price == Decimal("550.00")
    assert [r.addon_type for r in booking_service.get_booking_addons(db, b.id)] == ["Airport transfer"]


def test_people_count_is_clamped_to_one(db, user, trip):
    b, _ = booking_service.create_booking(db, user, trip.id, "2026-12-01", people_count=0)
    assert b.number_of_people == 1
    assert b.total_price == Decimal("500.00")


def test_null_trip_price_books_addons_only(db, user, destination, addons):
    trip = make_trip(db, destination, name="Free Walking Tour", price=None)
    b, _ = booking_service.create_booking(db, user, trip.id, "2026-12-01", 3, [addons[1].id])
    assert b.total_price == Decimal("90.00")


def test_booking_insert_failure_leaves_no_addon_rows(db, user, trip, addons, fail_inserts):
    fail_inserts(Booking)
    with pytest.raises(BookingFailedError) as exc:
        booking_service.create_booking(db, user, trip.id, "2026-12-01", 2, [a.id for a in addons])

    assert "bookings unavailable" in str(exc.value)
    assert _count(db, Booking) == 0
    assert _count(db, BookingAddon) == 0


def test_addon_insert_failure_rolls_back_the_booking(db, user, trip, addons, fail_inserts):
    fail_inserts(BookingAddon)
    with pytest.raises(BookingFailedError) as exc:
        booking_service.create_booking(db, user, trip.id, "2026-12-01", 2, [a.id for a in addons])

    assert exc.value.title == "Booking Failed"
    assert _count(db, BookingAddon) == 0
    # no booking row without its add-ons
    assert _count(db, Booking) == 0


def test_booking_succeeds_once_the_database_recovers(db, user, trip, addons, fail_inserts):
    restore = fail_inserts(BookingAddon)
    with pytest.raises(BookingFailedError):
        booking_service.create_booking(db, user, trip.id, "2026-12-01", 1, [addons[0].id])

    restore()
    b, _ = booking_service.create_booking(db, user, trip.id, "2026-12-01", 1, [addons[0].id])
    assert _count(db, Booking) == 1
    assert [r.booking_id for r in booking_service.get_booking_addons(db, b.id)] == [b.id]


def test_created_booking_is_answered_without_reading_back(db, user, trip, addons, statements):
    trip_id, addon_ids = trip.id, [a.id for a in addons]
    after_commit = []
    event.listen(db, "after_commit", lambda session: after_commit.append(len(statements)))

    b, created = booking_service.create_booking(db, user, trip_id, "2026-12-01", 2, addon_ids)

    # everything the booking response needs, read after the commit
    assert (b.total_price, b.status, b.payment_status, b.number_of_people) == (Decimal("1160.00"), "pending", "unpaid", 2)
    assert b.booked_at is not None
    assert sorted((r.addon_type, r.price, r.quantity) for r in created) == [
        ("Airport transfer", Decimal("50.00"), 2),
        ("Photo package", Decimal("30.00"), 2),
    ]
    assert statements[after_commit[0]:] == []
    assert _count(db, Booking) == 1
