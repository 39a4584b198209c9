from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from onpoint.schemas.catalog import TripOut

class BookingCreate(BaseModel):
    tripId: str
    selectedDate: str = ""  # YYYY-MM-DD; empty is rejected by the service with "Selection Required"
    peopleCount: int = 1
    selectedAddonIds: List[str] = Field(default_factory=list)

class BookingAddonOut(BaseModel):
    id: str
    addonType: str
    description: str = ""
    price: Decimal
    quantity: int

class PaymentOut(BaseModel):
    id: str
    amount: Decimal
    currency: str = "USD"
    paymentMethod: str
    status: str
    processedAt: Optional[datetime] = None
    refundedAt: Optional[datetime] = None
    errorMessage: Optional[str] = None

class InvoiceOut(BaseModel):
    id: str
    invoiceNumber: str
    totalAmount: Decimal
    currency: str = "USD"
    status: str
    details: Dict[str, Any] = {}
    dueDate: Optional[date] = None
    issuedAt: Optional[datetime] = None

class BookingOut(BaseModel):
    id: str
    tripId: str
    startDate: date
    endDate: date
    numberOfPeople: int
    totalPrice: Decimal
    currency: str = "USD"
    status: str
    paymentStatus: str
    bookedAt: Optional[datetime] = None
    trip: Optional[TripOut] = None
    addons: List[BookingAddonOut] = []

class BookingDetailOut(BookingOut):
    specialRequests: Optional[str] = None
    notes: Optional[str] = None
    payments: List[PaymentOut] = []
    invoices: List[InvoiceOut] = []
