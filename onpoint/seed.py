import logging
import uuid
from decimal import Decimal

from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import ProgrammingError, OperationalError

from onpoint.db.session import SessionLocal
from onpoint.models.destination import Destination
from onpoint.models.trip import Trip
from onpoint.models.addon import Addon

logger = logging.getLogger(__name__)

DESTINATIONS = [
    # slug, name, location, description
    ("zanzibar", "Zanzibar", "Tanzania", "Spice island beaches, Stone Town alleys and dhow sunsets."),
    ("kyoto", "Kyoto", "Japan", "Temples, gardens and tea houses in Japan's old capital."),
    ("lisbon", "Lisbon", "Portugal", "Hilltop viewpoints, trams and Atlantic light."),
    ("patagonia", "Patagonia", "Argentina & Chile", "Glaciers, granite spires and open steppe."),
]

TRIPS = [
    # slug, destination slug, name, price per person, rating, short description
    ("stone-town-spice-tour", "zanzibar", "Stone Town & Spice Farm", Decimal("180.00"), 4.7, "Guided walk and spice plantation visit."),
    ("mnemba-snorkel", "zanzibar", "Mnemba Atoll Snorkeling", Decimal("95.00"), 4.8, "Half-day boat trip with reef stops."),
    ("kyoto-temples", "kyoto", "Kyoto Temples in a Day", Decimal("220.00"), 4.9, "Fushimi Inari, Kinkaku-ji and Gion at dusk."),
    ("lisbon-sintra", "lisbon", "Sintra Palaces Day Trip", Decimal("140.00"), 4.6, "Pena Palace, Quinta da Regaleira and Cabo da Roca."),
    ("torres-del-paine-w", "patagonia", "Torres del Paine W Trek", Decimal("1250.00"), 4.9, "Five days on the W circuit with refugio stays."),
]

ADDONS = [
    # type, description, price per traveler
    ("Travel insurance", "Medical and cancellation cover for the trip dates", Decimal("35.00")),
    ("Airport transfer", "Private pickup and drop-off", Decimal("50.00")),
    ("Photo package", "Edited photos from your guide", Decimal("30.00")),
]


def ensure_destination(db: Session, slug: str, name: str, location: str, description: str) -> Destination:
    d = db.query(Destination).filter(Destination.slug == slug).first()
    if d:
        return d
    d = Destination(
        id=str(uuid.uuid4()),
        slug=slug,
        name=name,
        location=location,
        description=description,
        main_image_url=f"https://images.onpoint.travel/destinations/{slug}.jpg",
        is_featured=True,
    )
    db.add(d)
    db.flush()
    return d


def ensure_trip(db: Session, slug: str, destination: Destination, name: str, price: Decimal, rating: float, short: str):
    if db.query(Trip).filter(Trip.slug == slug).first():
        return
    db.add(Trip(
        id=str(uuid.uuid4()),
        slug=slug,
        destination_id=destination.id,
        name=name,
        price=price,
        rating=rating,
        short_description=short,
        description=short,
        main_featured_image_url=f"https://images.onpoint.travel/trips/{slug}.jpg",
        extra_featured_images=[],
    ))


def ensure_addon(db: Session, addon_type: str, description: str, price: Decimal):
    if db.query(Addon).filter(Addon.type == addon_type).first():
        return
    db.add(Addon(id=str(uuid.uuid4()), type=addon_type, description=description, price=price))


def run(db=None):
    if db is None:
        db = SessionLocal()
    try:
        # If migrations haven't been applied yet, seeding must not crash the API.
        try:
            db.execute(text("SELECT 1 FROM trips LIMIT 1"))
        except (ProgrammingError, OperationalError):
            db.rollback()
            logger.warning("trips table not found yet. Skipping seeding (run alembic upgrade head).")
            return

        dests = {}
        for slug, name, location, description in DESTINATIONS:
            dests[slug] = ensure_destination(db, slug, name, location, description)
        for slug, dest_slug, name, price, rating, short in TRIPS:
            ensure_trip(db, slug, dests[dest_slug], name, price, rating, short)
        for addon_type, description, price in ADDONS:
            ensure_addon(db, addon_type, description, price)
        db.commit()
        logger.info("Catalog seeded: %d destinations, %d trips, %d addons", len(DESTINATIONS), len(TRIPS), len(ADDONS))
    finally:
        db.close()


if __name__ == "__main__":
    run()
