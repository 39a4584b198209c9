import logging
import re
import uuid
from datetime import datetime, date, timedelta, timezone
from typing import Iterable, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from onpoint.models.user import User
from onpoint.models.trip import Trip
from onpoint.models.addon import Addon
from onpoint.models.booking import Booking
from onpoint.models.booking_addon import BookingAddon
from onpoint.services import pricing
from onpoint.services.errors import ValidationError, NotFoundError, BookingFailedError

logger = logging.getLogger(__name__)

# fromisoformat alone also takes 20261201 and week dates
TRAVEL_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_travel_date(selected_date: Optional[str]) -> date:
    if not selected_date or not str(selected_date).strip():
        raise ValidationError("Please select a travel date.", title="Selection Required")
    value = str(selected_date).strip()
    if TRAVEL_DATE_RE.fullmatch(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass  # 2026-02-30 and the like
    raise ValidationError("selectedDate must be YYYY-MM-DD", title="Selection Required")


def select_addons(catalog: list[Addon], addon_ids: Iterable[str]) -> list[Addon]:
    """Catalog entries whose id was selected, in catalog order. Unknown ids are dropped."""
    wanted = set(addon_ids or ())
    return [a for a in catalog if a.id in wanted]


def get_trip_or_404(db: Session, trip_id: str) -> Trip:
    trip = db.get(Trip, trip_id)
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def quote_trip(db: Session, trip_id: str, people_count: int, addon_ids: Iterable[str]) -> tuple[Trip, list[Addon], pricing.PriceQuote]:
    trip = get_trip_or_404(db, trip_id)
    catalog = db.query(Addon).order_by(Addon.type).all()
    selected = select_addons(catalog, addon_ids)
    q = pricing.quote(trip.price, people_count, [a.price for a in selected])
    return trip, selected, q


def create_booking(
    db: Session,
    user: User,
    trip_id: str,
    selected_date: Optional[str],
    people_count: int = 1,
    addon_ids: Iterable[str] = (),
) -> tuple[Booking, list[BookingAddon]]:
    """Price and persist a booking together with its add-ons.

    The booking row and its booking_addons rows are written in one
    transaction: if any insert fails nothing is kept and BookingFailedError
    carries the database message. Validation runs before any query.

    Returns the booking and its add-on rows, detached and fully loaded, so
    the caller can answer without reading them back after the commit.
    """
    travel_date = parse_travel_date(selected_date)
    trip, selected, q = quote_trip(db, trip_id, people_count, addon_ids)
    user_id = user.id

    booking = Booking(
        id=str(uuid.uuid4()),
        user_id=user_id,
        trip_id=trip_id,
        start_date=travel_date,
        end_date=travel_date,
        number_of_people=q.people,
        total_price=q.final_total,
        calculated_price=q.final_total,
        status="pending",
        payment_status="unpaid",
    )
    booking_addons = []
    try:
        db.add(booking)
        db.flush()  # booking row first; add-ons reference its id

        if selected:
            booking_addons = [
                BookingAddon(
                    id=str(uuid.uuid4()),
                    booking_id=booking.id,
                    addon_type=a.type,
                    description=a.description or "",
                    price=pricing.to_money(a.price),
                    quantity=q.people,
                )
                for a in selected
            ]
            db.add_all(booking_addons)
            db.flush()

        # commit would expire them; flushed rows are still part of the transaction
        for obj in (booking, *booking_addons):
            db.expunge(obj)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        message = str(getattr(e, "orig", None) or e)
        logger.warning("Booking for trip %s by user %s rolled back: %s", trip_id, user_id, message)
        raise BookingFailedError(message)

    logger.info(
        "Booking %s created: trip=%s people=%s addons=%s total=%s",
        booking.id, trip_id, q.people, len(booking_addons), q.final_total,
    )
    return booking, booking_addons


def list_user_bookings(db: Session, user: User) -> list[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.user_id == user.id)
        .order_by(Booking.booked_at.desc())
        .all()
    )


def get_user_booking(db: Session, user: User, booking_id: str) -> Booking:
    # owner-only, like the row-level policy on the hosted table
    b = db.get(Booking, booking_id)
    if not b or b.user_id != user.id:
        raise NotFoundError("Booking not found")
    return b


def get_booking_addons(db: Session, booking_id: str) -> list[BookingAddon]:
    return (
        db.query(BookingAddon)
        .filter(BookingAddon.booking_id == booking_id)
        .order_by(BookingAddon.created_at, BookingAddon.addon_type)
        .all()
    )


def count_recent_bookings(db: Session, user: User, days: int) -> int:
    since = datetime.now(timezone.utc) - timedelta(days=days)
    return db.execute(
        select(func.count(Booking.id)).where(Booking.user_id == user.id, Booking.booked_at >= since)
    ).scalar_one()
