from pydantic import BaseModel, ConfigDict
from typing import List, Optional


class BookingRequestData(BaseModel):
    """Snapshot of what was offered in the last booking request email."""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    adminName: Optional[str] = None
    carId: Optional[str] = None
    carName: Optional[str] = None
    rentalStart: Optional[str] = None
    rentalEnd: Optional[str] = None
    rentalFee: Optional[str] = None
    deposit: Optional[str] = None
    insurance: Optional[str] = None
    deliveryFee: Optional[str] = None
    extrasFee: Optional[str] = None
    locale: Optional[str] = None
    contactName: Optional[str] = None
    contactEmail: Optional[str] = None
    bookingLink: Optional[str] = None


class QuoteOut(BaseModel):
    id: str
    humanId: Optional[str] = None
    locale: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    preferredChannel: str = "email"
    rentalStart: Optional[str] = None
    rentalEnd: Optional[str] = None
    arrivalFlight: str = ""
    departureFlight: str = ""
    partySize: Optional[str] = None
    children: Optional[str] = None
    carId: Optional[str] = None
    carName: Optional[str] = None
    status: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    bookingRequestData: Optional[BookingRequestData] = None


class BookingRequestEmailIn(BaseModel):
    """Fees typed by the admin; contact and car fields default to the quote's own."""
    email: Optional[str] = None
    name: Optional[str] = None
    locale: Optional[str] = None
    carId: Optional[str] = None
    carName: Optional[str] = None
    rentalStart: Optional[str] = None
    rentalEnd: Optional[str] = None
    rentalFee: Optional[str] = None
    deposit: Optional[str] = None
    insurance: Optional[str] = None
    deliveryFee: Optional[str] = None
    extrasFee: Optional[str] = None
    adminName: Optional[str] = None
    carImages: Optional[List[str]] = None


class StatusMetaOut(BaseModel):
    label: str
    badge: str
