from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from onpoint.models.destination import Destination
from onpoint.models.trip import Trip
from onpoint.models.addon import Addon
from onpoint.services.errors import NotFoundError

HOME_DESTINATIONS_LIMIT = 6
HOME_TRIPS_LIMIT = 10


def _like(q: str) -> str:
    return f"%{q.strip().lower()}%"


def list_destinations(db: Session, q: Optional[str] = None, limit: Optional[int] = None) -> list[Destination]:
    query = db.query(Destination)
    if q and q.strip():
        query = query.filter(or_(
            func.lower(Destination.name).like(_like(q)),
            func.lower(Destination.location).like(_like(q)),
        ))
    query = query.order_by(Destination.name.asc())
    if limit:
        query = query.limit(limit)
    return query.all()


def get_destination(db: Session, destination_id: str) -> Destination:
    d = db.get(Destination, destination_id)
    if not d:
        raise NotFoundError("Destination not found")
    return d


def list_trips(db: Session, destination_id: Optional[str] = None, q: Optional[str] = None) -> list[Trip]:
    """Trips by name; `q` matches the trip name or its destination's name."""
    query = db.query(Trip)
    if destination_id:
        query = query.filter(Trip.destination_id == destination_id)
    if q and q.strip():
        matching_dest = db.query(Destination.id).filter(func.lower(Destination.name).like(_like(q)))
        query = query.filter(or_(
            func.lower(Trip.name).like(_like(q)),
            Trip.destination_id.in_(matching_dest),
        ))
    return query.order_by(Trip.name.asc()).all()


def latest_trips(db: Session, limit: int = HOME_TRIPS_LIMIT) -> list[Trip]:
    return db.query(Trip).order_by(Trip.created_at.desc()).limit(limit).all()


def destinations_by_id(db: Session, ids) -> dict[str, Destination]:
    ids = {i for i in ids if i}
    if not ids:
        return {}
    return {d.id: d for d in db.query(Destination).filter(Destination.id.in_(ids)).all()}


def trips_by_id(db: Session, ids) -> dict[str, Trip]:
    ids = {i for i in ids if i}
    if not ids:
        return {}
    return {t.id: t for t in db.query(Trip).filter(Trip.id.in_(ids)).all()}


def list_addons(db: Session) -> list[Addon]:
    return db.query(Addon).order_by(Addon.type).all()
