from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class _PayloadPart(BaseModel):
    # Written by the public site; tolerate fields this service does not use.
    model_config = ConfigDict(extra="allow", frozen=True)


class Address(_PayloadPart):
    country: Optional[str] = None
    postalCode: Optional[str] = None
    city: Optional[str] = None
    street: Optional[str] = None
    streetType: Optional[str] = None
    doorNumber: Optional[str] = None


class DriverDocument(_PayloadPart):
    type: Optional[str] = None
    number: Optional[str] = None
    validFrom: Optional[str] = None
    validUntil: Optional[str] = None
    drivingLicenceNumber: Optional[str] = None
    drivingLicenceValidFrom: Optional[str] = None
    drivingLicenceValidUntil: Optional[str] = None
    drivingLicenceIsOlderThan_3: Optional[bool] = None
    drivingLicenceCategory: Optional[str] = None


class Driver(_PayloadPart):
    firstName_1: Optional[str] = None
    firstName_2: Optional[str] = None
    lastName_1: Optional[str] = None
    lastName_2: Optional[str] = None
    phoneNumber: Optional[str] = None
    email: Optional[str] = None
    location: Optional[Address] = None
    dateOfBirth: Optional[str] = None
    placeOfBirth: Optional[str] = None
    nameOfMother: Optional[str] = None
    document: Optional[DriverDocument] = None


class Child(_PayloadPart):
    age: Optional[float] = None
    height: Optional[float] = None


class RentalPeriod(_PayloadPart):
    startDate: Optional[str] = None
    endDate: Optional[str] = None


class Contact(_PayloadPart):
    same: Optional[bool] = None
    name: Optional[str] = None
    email: Optional[str] = None


class Invoice(_PayloadPart):
    same: Optional[bool] = None
    name: Optional[str] = None
    phoneNumber: Optional[str] = None
    email: Optional[str] = None
    location: Optional[Address] = None


class Delivery(_PayloadPart):
    placeType: Optional[str] = None
    locationName: Optional[str] = None
    arrivalFlight: Optional[str] = None
    departureFlight: Optional[str] = None
    address: Optional[Address] = None


class Tax(_PayloadPart):
    id: Optional[str] = None
    companyName: Optional[str] = None


class Consents(_PayloadPart):
    privacy: Optional[bool] = None
    terms: Optional[bool] = None
    insurance: Optional[bool] = None


class Pricing(BaseModel):
    """The five free-form fee fields. Numbers are accepted and kept as text."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    rentalFee: Optional[str] = None
    insurance: Optional[str] = None
    deposit: Optional[str] = None
    deliveryFee: Optional[str] = None
    extrasFee: Optional[str] = None


class BookingPayload(_PayloadPart):
    locale: Optional[str] = None
    carId: Optional[str] = None
    quoteId: Optional[str] = None
    extras: Optional[List[str]] = None
    adults: Optional[int] = None
    children: Optional[List[Child]] = None
    rentalPeriod: Optional[RentalPeriod] = None
    driver: Optional[List[Driver]] = None
    contact: Optional[Contact] = None
    invoice: Optional[Invoice] = None
    delivery: Optional[Delivery] = None
    tax: Optional[Tax] = None
    consents: Optional[Consents] = None
    pricing: Optional[Pricing] = None


class BookingOut(BaseModel):
    id: str
    humanId: Optional[str] = None
    locale: str = ""
    carId: Optional[str] = None
    carLabel: Optional[str] = None
    quoteId: Optional[str] = None
    contactName: str = ""
    contactEmail: Optional[str] = None
    contactPhone: Optional[str] = None
    rentalStart: Optional[str] = None
    rentalEnd: Optional[str] = None
    status: Optional[str] = None
    updatedNote: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    payload: Optional[BookingPayload] = None
    # set when the stored payload could not be read; payload is then None
    payloadError: Optional[str] = None


class RegisteredIn(BaseModel):
    registered: bool


class PricingIn(Pricing):
    pass


class FinalizationEmailIn(BaseModel):
    signerName: str = Field(default="")
