from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from onpoint.db.session import get_db
from onpoint.api.deps import get_current_user
from onpoint.api.v1.routes.catalog import trip_out
from onpoint.models.booking import Booking
from onpoint.models.destination import Destination
from onpoint.models.invoice import Invoice
from onpoint.models.payment import Payment
from onpoint.models.trip import Trip
from onpoint.models.user import User
from onpoint.schemas.booking import BookingCreate, BookingOut, BookingDetailOut, BookingAddonOut, PaymentOut, InvoiceOut
from onpoint.services import booking_service, catalog_service
from onpoint.services.errors import ServiceError

router = APIRouter(tags=["bookings"])


def _addons_out(addons) -> list[BookingAddonOut]:
    return [
        BookingAddonOut(id=a.id, addonType=a.addon_type, description=a.description or "", price=a.price, quantity=a.quantity)
        for a in addons
    ]


def _booking_fields(b: Booking) -> dict:
    return dict(
        id=b.id,
        tripId=b.trip_id,
        startDate=b.start_date,
        endDate=b.end_date,
        numberOfPeople=b.number_of_people,
        totalPrice=b.total_price,
        status=b.status,
        paymentStatus=b.payment_status,
        bookedAt=b.booked_at,
    )


@router.post("/bookings", response_model=BookingOut, status_code=201)
def create_booking(body: BookingCreate, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    try:
        b, booking_addons = booking_service.create_booking(
            db, me,
            trip_id=body.tripId,
            selected_date=body.selectedDate,
            people_count=body.peopleCount,
            addon_ids=body.selectedAddonIds,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail={"title": e.title, "message": str(e)})
    return BookingOut(**_booking_fields(b), addons=_addons_out(booking_addons))


@router.get("/bookings", response_model=list[BookingOut])
def list_my_bookings(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    """Newest first, each with its trip and the trip's destination."""
    bookings = booking_service.list_user_bookings(db, me)
    trips = catalog_service.trips_by_id(db, (b.trip_id for b in bookings))
    dests = catalog_service.destinations_by_id(db, (t.destination_id for t in trips.values()))
    out = []
    for b in bookings:
        t = trips.get(b.trip_id)
        out.append(BookingOut(
            **_booking_fields(b),
            trip=trip_out(t, dests.get(t.destination_id)) if t else None,
        ))
    return out


@router.get("/bookings/{booking_id}", response_model=BookingDetailOut)
def get_my_booking(booking_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    try:
        b = booking_service.get_user_booking(db, me, booking_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    t = db.get(Trip, b.trip_id) if b.trip_id else None
    dest = db.get(Destination, t.destination_id) if t and t.destination_id else None
    payments = db.query(Payment).filter(Payment.booking_id == b.id).order_by(Payment.processed_at.desc()).all()
    invoices = db.query(Invoice).filter(Invoice.booking_id == b.id).order_by(Invoice.issued_at.desc()).all()

    return BookingDetailOut(
        **_booking_fields(b),
        trip=trip_out(t, dest) if t else None,
        addons=_addons_out(booking_service.get_booking_addons(db, b.id)),
        specialRequests=b.special_requests,
        notes=b.notes,
        payments=[
            PaymentOut(
                id=p.id, amount=p.amount, currency=p.currency or "USD", paymentMethod=p.payment_method,
                status=p.status, processedAt=p.processed_at, refundedAt=p.refunded_at, errorMessage=p.error_message,
            )
            for p in payments
        ],
        invoices=[
            InvoiceOut(
                id=i.id, invoiceNumber=i.invoice_number, totalAmount=i.total_amount, currency=i.currency or "USD",
                status=i.status, details=i.details or {}, dueDate=i.due_date, issuedAt=i.issued_at,
            )
            for i in invoices
        ],
    )
