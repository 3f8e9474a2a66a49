from datetime import datetime, timezone

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_admin.emails import render
from fleet_admin.emails.logo import LogoResolver
from fleet_admin.models.booking import (
    RentRequest,
    RENT_STATUS_ACCEPTED,
    RENT_STATUS_FORM_SUBMITTED,
    RENT_STATUS_NEW,
    RENT_STATUS_REGISTERED,
)
from fleet_admin.emails import copy as email_copy
from fleet_admin.schemas.booking import BookingOut
from fleet_admin.schemas.common import ActionResult
from fleet_admin.services import data_access, fees, messages
from fleet_admin.services.mailer import Mailer, deliver
from fleet_admin.services.revalidate import InvalidationBus

log = structlog.get_logger(__name__)


def _clean_id(value: str | None) -> str:
    return (value or "").strip()


def write_booking(db: Session, booking: RentRequest, **values) -> None:
    """Persist field changes on a booking and bump updated_at."""
    for key, value in values.items():
        setattr(booking, key, value)
    booking.updated_at = datetime.now(timezone.utc)
    db.commit()


def _invalidate_booking(bus: InvalidationBus | None, booking_id: str) -> None:
    if bus is not None:
        bus.invalidate("/", f"/{booking_id}")


def set_booking_registered(
    db: Session, booking_id: str, registered: bool, bus: InvalidationBus | None = None
) -> ActionResult:
    booking_id = _clean_id(booking_id)
    if not booking_id:
        return ActionResult.fail(messages.MISSING_BOOKING_ID)

    booking = db.get(RentRequest, booking_id)
    if not booking:
        return ActionResult.fail(messages.BOOKING_NOT_FOUND)

    current = booking.status or RENT_STATUS_NEW
    if registered and current == RENT_STATUS_REGISTERED:
        return ActionResult.ok(messages.BOOKING_ALREADY_REGISTERED, status=current)
    if not registered and current != RENT_STATUS_REGISTERED:
        return ActionResult.ok(messages.BOOKING_NOT_REGISTERED, status=current)

    next_status = RENT_STATUS_REGISTERED if registered else RENT_STATUS_ACCEPTED
    try:
        write_booking(db, booking, status=next_status)
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("booking.status_update_failed", booking_id=booking_id, error=str(exc))
        return ActionResult.fail(messages.STATUS_UPDATE_FAILED)

    _invalidate_booking(bus, booking_id)
    log.info("booking.registered" if registered else "booking.unregistered", booking_id=booking_id)
    return ActionResult.ok(
        messages.BOOKING_REGISTERED if registered else messages.BOOKING_UNREGISTERED,
        status=next_status,
    )


def save_booking_pricing(
    db: Session, booking_id: str, pricing: dict | None, bus: InvalidationBus | None = None
) -> ActionResult:
    """Store the five fee fields under payload.pricing; drop the key when all are empty."""
    booking_id = _clean_id(booking_id)
    if not booking_id:
        return ActionResult.fail(messages.MISSING_BOOKING_ID)

    booking = db.get(RentRequest, booking_id)
    if not booking:
        return ActionResult.fail(messages.BOOKING_NOT_FOUND)

    normalized = fees.normalize_pricing(pricing)
    # new dict so the JSON column registers the change
    payload = dict(booking.payload) if isinstance(booking.payload, dict) else {}
    if normalized:
        payload["pricing"] = normalized
    else:
        payload.pop("pricing", None)

    try:
        write_booking(db, booking, payload=payload)
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("booking.pricing_save_failed", booking_id=booking_id, error=str(exc))
        return ActionResult.fail(messages.PRICING_SAVE_FAILED)

    _invalidate_booking(bus, booking_id)
    log.info("booking.pricing_saved", booking_id=booking_id, fields=sorted(normalized or {}))
    return ActionResult.ok(messages.PRICING_SAVED, pricing=normalized)


# --- emails ----------------------------------------------------------------------

def booking_recipient(booking: BookingOut) -> str | None:
    """contactEmail, then the payload's contact email, then the invoice email."""
    payload = booking.payload
    candidates = [booking.contactEmail]
    if payload is not None:
        candidates.append(payload.contact.email if payload.contact else None)
        candidates.append(payload.invoice.email if payload.invoice else None)
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def _request_data(db: Session, booking: BookingOut) -> tuple[dict | None, str | None, str | None]:
    """(bookingRequestData, quote locale, quote car name) of the linked quote."""
    if not booking.quoteId:
        return None, None, None
    quote = data_access.get_quote_by_id(db, booking.quoteId)
    if quote is None:
        return None, None, None
    data = quote.bookingRequestData.model_dump() if quote.bookingRequestData else None
    return data, quote.locale or None, quote.carName


def _rental_period(booking: BookingOut) -> tuple[str | None, str | None]:
    period = booking.payload.rentalPeriod if booking.payload else None
    start = booking.rentalStart or (period.startDate if period else None)
    end = booking.rentalEnd or (period.endDate if period else None)
    return start, end


def _address(value) -> str | None:
    return render.format_address(value.model_dump()) if value is not None else None


def build_finalization_input(db: Session, booking: BookingOut, signer_name: str) -> render.FinalizationInput:
    payload = booking.payload
    request_data, _, _ = _request_data(db, booking)
    manual = payload.pricing.model_dump() if payload and payload.pricing else None
    consent = payload.consents.insurance if payload and payload.consents else None
    resolved = fees.resolve_fees(request_data, manual, consent)

    start, end = _rental_period(booking)
    contact = payload.contact if payload else None
    invoice = payload.invoice if payload else None
    delivery = payload.delivery if payload else None
    children = payload.children if payload else None

    return render.FinalizationInput(
        booking_id=booking.id,
        booking_code=booking.humanId or booking.id,
        car_id=booking.carId or (payload.carId if payload else None),
        signer_name=signer_name,
        fees=resolved,
        locale=(payload.locale if payload else None) or booking.locale,
        car_label=booking.carLabel or booking.carId or (payload.carId if payload else None),
        rental_start=start,
        rental_end=end,
        extras=[e for e in (payload.extras or []) if e] if payload else [],
        adults=payload.adults if payload else None,
        children=len(children) if children else None,
        contact_name=(contact.name if contact else None) or booking.contactName,
        contact_email=(contact.email if contact else None) or booking.contactEmail,
        contact_phone=booking.contactPhone,
        invoice_name=invoice.name if invoice else None,
        invoice_email=invoice.email if invoice else None,
        invoice_phone=invoice.phoneNumber if invoice else None,
        invoice_address=_address(invoice.location) if invoice else None,
        delivery_place_type=delivery.placeType if delivery else None,
        delivery_location=delivery.locationName if delivery else None,
        delivery_address=_address(delivery.address) if delivery else None,
        arrival_flight=delivery.arrivalFlight if delivery else None,
        departure_flight=delivery.departureFlight if delivery else None,
    )


def send_booking_finalization_email(
    db: Session,
    mailer: Mailer,
    logo: LogoResolver | None,
    booking_id: str,
    signer_name: str,
    bus: InvalidationBus | None = None,
) -> ActionResult:
    """Email the finalized booking summary, then mark the booking form_submitted.

    The email goes first. If it was sent but the status write fails, the
    caller is told exactly that.
    """
    booking_id = _clean_id(booking_id)
    signer_name = (signer_name or "").strip()
    if not booking_id:
        return ActionResult.fail(messages.MISSING_BOOKING_ID)
    if not signer_name:
        return ActionResult.fail(messages.MISSING_SIGNER)

    booking = data_access.get_booking_by_id(db, booking_id)
    if booking is None:
        return ActionResult.fail(messages.BOOKING_NOT_FOUND)

    recipient = booking_recipient(booking)
    if not recipient:
        return ActionResult.fail(messages.BOOKING_NO_RECIPIENT)
    if not mailer.is_configured:
        return ActionResult.fail(messages.MAILER_NOT_CONFIGURED)

    data = build_finalization_input(db, booking, signer_name)
    doc = render.build_finalization_document(data, logo.resolve() if logo else None)
    try:
        deliver(
            db, mailer, recipient, doc.subject, render.render_text(doc), render.render_html(doc),
            kind="booking_finalization", related_id=booking.id,
        )
    except Exception as exc:
        log.error("booking.finalization_send_failed", booking_id=booking.id, error=str(exc))
        return ActionResult.fail(messages.SEND_FAILED)

    try:
        row = db.get(RentRequest, booking.id)
        write_booking(db, row, status=RENT_STATUS_FORM_SUBMITTED)
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("booking.finalization_status_failed", booking_id=booking.id, error=str(exc))
        return ActionResult.fail(messages.FINALIZATION_STATUS_FAILED)

    _invalidate_booking(bus, booking.id)
    log.info("booking.finalization_sent", booking_id=booking.id, total=data.fees.total)
    return ActionResult.ok(messages.FINALIZATION_SENT, status=RENT_STATUS_FORM_SUBMITTED)


def send_booking_confirmation_email(db: Session, mailer: Mailer, booking_id: str) -> ActionResult:
    """Fee summary built from what the customer was offered on the quote."""
    booking_id = _clean_id(booking_id)
    if not booking_id:
        return ActionResult.fail(messages.MISSING_BOOKING_ID)

    booking = data_access.get_booking_by_id(db, booking_id)
    if booking is None:
        return ActionResult.fail(messages.BOOKING_NOT_FOUND)

    recipient = booking_recipient(booking)
    if not recipient:
        return ActionResult.fail(messages.BOOKING_NO_RECIPIENT)
    if not mailer.is_configured:
        return ActionResult.fail(messages.MAILER_NOT_CONFIGURED)

    payload = booking.payload
    request_data, quote_locale, quote_car_name = _request_data(db, booking)
    locale = email_copy.normalize_locale(
        (payload.locale if payload else None) or booking.locale or quote_locale
    )
    car_label = booking.carLabel
    if quote_car_name and (not car_label or car_label == booking.carId):
        car_label = quote_car_name
    contact = payload.contact if payload else None
    start, end = _rental_period(booking)

    doc = render.build_confirmation_document(render.ConfirmationInput(
        booking_code=booking.humanId or booking.id,
        fees=fees.resolve_fees(request_data, None),
        name=(contact.name if contact else None) or booking.contactName,
        locale=locale,
        car_label=car_label,
        rental_start=start,
        rental_end=end,
    ))
    try:
        deliver(
            db, mailer, recipient, doc.subject, render.render_text(doc), render.render_html(doc),
            kind="booking_confirmation", related_id=booking.id,
        )
    except Exception as exc:
        log.error("booking.confirmation_send_failed", booking_id=booking.id, error=str(exc))
        return ActionResult.fail(messages.SEND_FAILED)

    log.info("booking.confirmation_sent", booking_id=booking.id)
    return ActionResult.ok(email_copy.confirmation_copy(doc.locale)["success_message"])
