"""Read side: turn stored rows into the camelCase views the dashboard uses.

Column names are lowercase (``carid``, ``rentalstart``) because the public site
writes the same tables; everything returned from here uses the API names.
"""
from datetime import datetime, timezone

import structlog
from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_admin.models.booking import RentRequest
from fleet_admin.models.car import Car
from fleet_admin.models.quote import ContactQuote, CONTACT_STATUS_NEW, CONTACT_STATUS_QUOTE_ACCEPTED, QUOTE_STATUS_RANK
from fleet_admin.schemas.booking import BookingOut, BookingPayload
from fleet_admin.schemas.car import CarOut
from fleet_admin.schemas.quote import BookingRequestData, QuoteOut, StatusMetaOut

log = structlog.get_logger(__name__)


def _date(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date().isoformat()


def _datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


# --- bookings ----------------------------------------------------------------

def parse_booking_payload(raw) -> tuple[BookingPayload | None, str | None]:
    """Validate a stored payload once. Returns (payload, error)."""
    if raw is None:
        return None, None
    if not isinstance(raw, dict):
        return None, f"payload is {type(raw).__name__}, expected an object"
    try:
        return BookingPayload.model_validate(raw), None
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()[:5]
        )
        return None, problems


def _booking_out(row: RentRequest, quote: ContactQuote | None, car_labels: dict[str, str]) -> BookingOut:
    payload, payload_error = parse_booking_payload(row.payload)
    if payload_error:
        log.warning("booking.payload_invalid", booking_id=row.id, error=payload_error)

    car_id = row.carid or (payload.carId if payload else None)
    return BookingOut(
        id=row.id,
        humanId=row.humanid or (quote.humanid if quote else None),
        locale=row.locale or "",
        carId=row.carid,
        carLabel=car_labels.get(car_id, car_id) if car_id else None,
        quoteId=row.quoteid,
        contactName=row.contactname or "",
        contactEmail=row.contactemail,
        contactPhone=row.contactphone,
        rentalStart=_date(row.rentalstart),
        rentalEnd=_date(row.rentalend),
        status=row.status,
        updatedNote=row.updated,
        createdAt=_datetime(row.created_at),
        updatedAt=_datetime(row.updated_at),
        payload=payload,
        payloadError=payload_error,
    )


def _car_labels(db: Session, car_ids: set[str]) -> dict[str, str]:
    if not car_ids:
        return {}
    cars = db.execute(select(Car.id, Car.manufacturer, Car.model).where(Car.id.in_(car_ids))).all()
    return {c.id: f"{c.manufacturer} {c.model}".strip() for c in cars}


def _quotes_by_id(db: Session, quote_ids: set[str]) -> dict[str, ContactQuote]:
    if not quote_ids:
        return {}
    return {q.id: q for q in db.scalars(select(ContactQuote).where(ContactQuote.id.in_(quote_ids)))}


def sync_quote_statuses(db: Session, quotes: list[ContactQuote]) -> int:
    """A booking exists for these quotes, so they are accepted.

    Quotes already at or past ``quote_accepted``, and quotes in a status outside
    the workflow (canceled), are left alone. Failures are logged and do not
    break the read.
    """
    accepted = QUOTE_STATUS_RANK[CONTACT_STATUS_QUOTE_ACCEPTED]
    behind = []
    for q in quotes:
        rank = QUOTE_STATUS_RANK.get(q.status or CONTACT_STATUS_NEW)
        if rank is not None and rank < accepted:
            behind.append(q.id)
    if not behind:
        return 0
    try:
        db.execute(
            update(ContactQuote)
            .where(ContactQuote.id.in_(behind))
            .values(status=CONTACT_STATUS_QUOTE_ACCEPTED, updated_at=datetime.now(timezone.utc))
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("quote.status_sync_failed", quote_ids=behind, error=str(exc))
        return 0
    for q in quotes:
        if q.id in behind:
            q.status = CONTACT_STATUS_QUOTE_ACCEPTED
    log.info("quote.status_synced", count=len(behind))
    return len(behind)


def _bookings_out(db: Session, rows: list[RentRequest]) -> list[BookingOut]:
    quotes = _quotes_by_id(db, {r.quoteid for r in rows if r.quoteid})
    sync_quote_statuses(db, list(quotes.values()))

    car_ids = set()
    for r in rows:
        if r.carid:
            car_ids.add(r.carid)
        elif isinstance(r.payload, dict) and isinstance(r.payload.get("carId"), str):
            car_ids.add(r.payload["carId"])
    labels = _car_labels(db, car_ids)
    return [_booking_out(r, quotes.get(r.quoteid), labels) for r in rows]


def get_bookings(db: Session) -> list[BookingOut]:
    rows = list(db.scalars(select(RentRequest).order_by(RentRequest.created_at.desc())))
    return _bookings_out(db, rows)


def get_booking_by_id(db: Session, booking_id: str) -> BookingOut | None:
    row = db.get(RentRequest, booking_id)
    if not row:
        return None
    return _bookings_out(db, [row])[0]


def get_booking_by_quote_id(db: Session, quote_id: str) -> BookingOut | None:
    row = db.scalars(
        select(RentRequest).where(RentRequest.quoteid == quote_id).order_by(RentRequest.created_at.desc()).limit(1)
    ).first()
    if not row:
        return None
    return _bookings_out(db, [row])[0]


# --- quotes ------------------------------------------------------------------

def _request_data(quote: ContactQuote) -> BookingRequestData | None:
    raw = quote.booking_request_data
    if not isinstance(raw, dict):
        return None
    try:
        return BookingRequestData.model_validate(raw)
    except ValidationError as exc:
        log.warning("quote.request_data_invalid", quote_id=quote.id, error=str(exc))
        return None


def quote_out(quote: ContactQuote) -> QuoteOut:
    return QuoteOut(
        id=quote.id,
        humanId=quote.humanid,
        locale=quote.locale or "",
        name=quote.name or "",
        email=quote.email or "",
        phone=quote.phone or "",
        preferredChannel=quote.preferredchannel or "email",
        rentalStart=_date(quote.rentalstart),
        rentalEnd=_date(quote.rentalend),
        arrivalFlight=quote.arrivalflight or "",
        departureFlight=quote.departureflight or "",
        partySize=quote.partysize,
        children=quote.children,
        carId=quote.carid,
        carName=quote.carname,
        status=quote.status,
        createdAt=_datetime(quote.created_at),
        updatedAt=_datetime(quote.updated_at),
        bookingRequestData=_request_data(quote),
    )


def get_quotes(db: Session) -> list[QuoteOut]:
    return [quote_out(q) for q in db.scalars(select(ContactQuote).order_by(ContactQuote.created_at.desc()))]


def get_quote_by_id(db: Session, quote_id: str) -> QuoteOut | None:
    quote = db.get(ContactQuote, quote_id)
    return quote_out(quote) if quote else None


# --- cars --------------------------------------------------------------------

def car_out(car: Car) -> CarOut:
    return CarOut(
        id=car.id,
        licensePlate=car.license_plate,
        manufacturer=car.manufacturer,
        model=car.model,
        label=car.label,
        year=car.year,
        category=car.category,
        bodyType=car.body_type,
        fuel=car.fuel,
        transmission=car.transmission,
        seats=car.seats,
        smallLuggage=car.small_luggage or 0,
        largeLuggage=car.large_luggage or 0,
        status=car.status,
        tires=car.tires,
        vin=car.vin,
        engineNumber=car.engine_number,
        odometer=car.odometer or 0,
        colors=sorted(c.name for c in car.colors),
        images=list(car.images or []),
        dailyPrices=list(car.daily_prices or []),
        monthlyPrices=list(car.monthly_prices) if car.monthly_prices else None,
        description=car.description,
        serviceNotes=car.service_notes,
        notes=car.notes,
        knownDamages=car.known_damages,
        firstRegistration=_date(car.first_registration),
        fleetJoinedAt=_date(car.fleet_joined_at),
        inspectionValidUntil=_date(car.inspection_valid_until),
        nextServiceAt=_date(car.next_service_at),
        createdAt=_datetime(car.created_at),
        updatedAt=_datetime(car.updated_at),
    )


def get_cars(db: Session) -> list[CarOut]:
    return [car_out(c) for c in db.scalars(select(Car).order_by(Car.created_at.desc()))]


def get_car_by_id(db: Session, car_id: str) -> CarOut | None:
    car = db.get(Car, car_id)
    return car_out(car) if car else None


def get_car_by_license_plate(db: Session, license_plate: str) -> CarOut | None:
    car = db.scalars(select(Car).where(Car.license_plate == license_plate)).first()
    return car_out(car) if car else None


# --- status badges -------------------------------------------------------------

_NEW = ("Új", "bg-sky-100 text-sky-800 border-sky-200")
_SENT = ("Ajánlat kiküldve", "bg-amber-100 text-amber-800 border-amber-200")
_ACCEPTED_QUOTE = ("Ajánlat elfogadva", "bg-emerald-100 text-emerald-800 border-emerald-200")
_FORM_SUBMITTED = ("Foglalási űrlap kitöltve", "bg-blue-100 text-blue-800 border-blue-200")
_ACCEPTED = ("Elfogadott", "bg-emerald-100 text-emerald-800 border-emerald-200")
_REGISTERED = ("Regisztrált", "bg-slate-900 text-white border-slate-900")
_CANCELLED = ("Törölt", "bg-red-100 text-red-800 border-red-200")

STATUS_META = {
    "new": _NEW,
    "uj": _NEW,
    "contacted": _SENT,
    "pending": _SENT,
    "in_progress": _SENT,
    "quote_sent": _SENT,
    "answered": _SENT,
    "ajanlat_kikuldve": _SENT,
    "quote_accepted": _ACCEPTED_QUOTE,
    "resolved": _ACCEPTED_QUOTE,
    "closed": _ACCEPTED_QUOTE,
    "ajanlat_elfogadva": _ACCEPTED_QUOTE,
    "form_submitted": _FORM_SUBMITTED,
    "foglalasi_urlap_kitoltve": _FORM_SUBMITTED,
    "done": _FORM_SUBMITTED,
    "accepted": _ACCEPTED,
    "elfogadott": _ACCEPTED,
    "registered": _REGISTERED,
    "regisztralt": _REGISTERED,
    "cancelled": _CANCELLED,
    "canceled": _CANCELLED,
    "torolt": _CANCELLED,
}

DEFAULT_BADGE = "bg-muted text-foreground border-border"


def get_status_meta(status: str | None) -> StatusMetaOut:
    if not status:
        return StatusMetaOut(label="—", badge=DEFAULT_BADGE)
    label, badge = STATUS_META.get(status, (status, DEFAULT_BADGE))
    return StatusMetaOut(label=label, badge=badge)
