from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from onpoint.db.session import get_db
from onpoint.api.deps import get_optional_user
from onpoint.models.destination import Destination
from onpoint.models.trip import Trip
from onpoint.models.user import User
from onpoint.schemas.catalog import DestinationOut, TripOut, AddonOut, HomeOut, HomeUser, QuoteOut
from onpoint.services import catalog_service
from onpoint.services.booking_service import get_trip_or_404, quote_trip
from onpoint.services.errors import ServiceError

router = APIRouter(tags=["catalog"])


def destination_out(d: Destination) -> DestinationOut:
    return DestinationOut(
        id=d.id,
        name=d.name,
        slug=d.slug,
        description=d.description or "",
        location=d.location or "",
        mainImageUrl=d.main_image_url or "",
        isFeatured=bool(d.is_featured),
    )


def trip_out(t: Trip, dest: Optional[Destination] = None) -> TripOut:
    return TripOut(
        id=t.id,
        name=t.name,
        slug=t.slug,
        shortDescription=t.short_description or "",
        description=t.description or "",
        price=t.price,
        rating=t.rating,
        destinationId=t.destination_id,
        destination=destination_out(dest) if dest else None,
        mainFeaturedImageUrl=t.main_featured_image_url or "",
        extraFeaturedImages=list(t.extra_featured_images or []),
        isFeatured=bool(t.is_featured),
    )


def trips_out(db: Session, trips: list[Trip]) -> list[TripOut]:
    dests = catalog_service.destinations_by_id(db, (t.destination_id for t in trips))
    return [trip_out(t, dests.get(t.destination_id)) for t in trips]


@router.get("/home", response_model=HomeOut)
def home(db: Session = Depends(get_db), user: Optional[User] = Depends(get_optional_user)):
    """Landing feed: a few destinations, the newest trips, and a greeting when signed in."""
    dests = catalog_service.list_destinations(db, limit=catalog_service.HOME_DESTINATIONS_LIMIT)
    trips = catalog_service.latest_trips(db)
    return HomeOut(
        destinations=[destination_out(d) for d in dests],
        trips=trips_out(db, trips),
        user=HomeUser(firstName=user.first_name or "", avatarUrl=user.logo_url) if user else None,
    )


@router.get("/destinations", response_model=list[DestinationOut])
def list_destinations(q: Optional[str] = None, db: Session = Depends(get_db)):
    return [destination_out(d) for d in catalog_service.list_destinations(db, q=q)]


@router.get("/destinations/{destination_id}", response_model=DestinationOut)
def get_destination(destination_id: str, db: Session = Depends(get_db)):
    try:
        return destination_out(catalog_service.get_destination(db, destination_id))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/trips", response_model=list[TripOut])
def list_trips(
    destinationId: Optional[str] = None,
    q: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Trips by name. With destinationId only that destination's trips; q searches trip and destination names."""
    return trips_out(db, catalog_service.list_trips(db, destination_id=destinationId, q=q))


@router.get("/trips/{trip_id}", response_model=TripOut)
def get_trip(trip_id: str, db: Session = Depends(get_db)):
    try:
        t = get_trip_or_404(db, trip_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    dest = db.get(Destination, t.destination_id) if t.destination_id else None
    return trip_out(t, dest)


@router.get("/trips/{trip_id}/quote", response_model=QuoteOut)
def get_quote(
    trip_id: str,
    people: int = 1,
    addonIds: List[str] = Query(default=[]),
    db: Session = Depends(get_db),
):
    """Price breakdown for the booking screen; nothing is written."""
    try:
        trip, selected, q = quote_trip(db, trip_id, people, addonIds)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return QuoteOut(
        tripId=trip.id,
        peopleCount=q.people,
        unitPrice=q.unit_price,
        addonsUnitTotal=q.addons_unit_total,
        subtotal=q.subtotal,
        addonsTotal=q.addons_total,
        finalTotal=q.final_total,
        selectedAddonIds=[a.id for a in selected],
    )


@router.get("/addons", response_model=list[AddonOut])
def list_addons(db: Session = Depends(get_db)):
    return [
        AddonOut(id=a.id, type=a.type, description=a.description or "", price=a.price)
        for a in catalog_service.list_addons(db)
    ]
