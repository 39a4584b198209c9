from decimal import Decimal
from pydantic import BaseModel
from typing import List, Optional

class DestinationOut(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    description: str = ""
    location: str = ""
    mainImageUrl: str = ""
    isFeatured: bool = False

class TripOut(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    shortDescription: str = ""
    description: str = ""
    price: Optional[Decimal] = None
    currency: str = "USD"
    rating: Optional[float] = None
    destinationId: str
    destination: Optional[DestinationOut] = None
    mainFeaturedImageUrl: str = ""
    extraFeaturedImages: List[str] = []
    isFeatured: bool = False

class AddonOut(BaseModel):
    id: str
    type: str
    description: str = ""
    price: Decimal

class HomeUser(BaseModel):
    firstName: str = ""
    avatarUrl: Optional[str] = None

class HomeOut(BaseModel):
    destinations: List[DestinationOut]
    trips: List[TripOut]
    user: Optional[HomeUser] = None

class QuoteOut(BaseModel):
    tripId: str
    peopleCount: int
    unitPrice: Decimal
    addonsUnitTotal: Decimal
    subtotal: Decimal
    addonsTotal: Decimal
    finalTotal: Decimal
    selectedAddonIds: List[str] = []
    currency: str = "USD"
