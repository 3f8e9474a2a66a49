from datetime import datetime, timezone

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_admin.emails import copy as email_copy
from fleet_admin.emails import render
from fleet_admin.emails.logo import LogoResolver
from fleet_admin.models.car import Car
from fleet_admin.models.quote import ContactQuote, CONTACT_STATUS_QUOTE_SENT, QUOTE_STATUS_RANK
from fleet_admin.schemas.common import ActionResult
from fleet_admin.schemas.quote import BookingRequestEmailIn
from fleet_admin.services import data_access, fees, messages
from fleet_admin.services.mailer import Mailer, deliver
from fleet_admin.services.revalidate import InvalidationBus

log = structlog.get_logger(__name__)


def _text(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def build_request_input(db: Session, quote: ContactQuote, body: BookingRequestEmailIn) -> tuple[str | None, render.BookingRequestInput]:
    """Merge the admin's form over the quote's own fields.

    Returns the recipient and the email input. The car's photos are taken from
    the fleet unless the form sends its own list.
    """
    view = data_access.quote_out(quote)
    car_id = _text(body.carId) or view.carId
    car = db.get(Car, car_id) if car_id else None

    images = body.carImages
    if images is None:
        images = list(car.images or []) if car else []

    data = render.BookingRequestInput(
        quote_id=quote.id,
        car_id=car_id or "",
        name=_text(body.name) or view.name or None,
        locale=_text(body.locale) or view.locale or None,
        car_name=_text(body.carName) or view.carName or (car.label if car else None),
        rental_start=_text(body.rentalStart) or view.rentalStart,
        rental_end=_text(body.rentalEnd) or view.rentalEnd,
        pricing={key: getattr(body, key) for key in fees.FEE_FIELDS},
        admin_name=_text(body.adminName),
        car_images=images,
    )
    recipient = _text(body.email) if body.email is not None else _text(view.email)
    return recipient, data


def request_snapshot(data: render.BookingRequestInput, recipient: str, link: str) -> dict:
    """What the customer was offered; the finalization email reads fees from here."""
    return {
        "adminName": data.admin_name,
        "carId": data.car_id or None,
        "carName": data.car_name,
        "rentalStart": data.rental_start,
        "rentalEnd": data.rental_end,
        "rentalFee": data.pricing.get("rentalFee"),
        "deposit": data.pricing.get("deposit"),
        "insurance": data.pricing.get("insurance"),
        "deliveryFee": data.pricing.get("deliveryFee"),
        "extrasFee": data.pricing.get("extrasFee"),
        "locale": data.locale,
        "contactName": data.name,
        "contactEmail": recipient,
        "bookingLink": link,
    }


def mark_quote_sent(db: Session, quote: ContactQuote, snapshot: dict) -> str | None:
    """Store the snapshot and move the quote to quote_sent unless it is already further."""
    current = quote.status
    rank = QUOTE_STATUS_RANK.get(current or "new")
    if rank is None or rank < QUOTE_STATUS_RANK[CONTACT_STATUS_QUOTE_SENT]:
        quote.status = CONTACT_STATUS_QUOTE_SENT
    quote.booking_request_data = snapshot
    quote.updated_at = datetime.now(timezone.utc)
    db.commit()
    return quote.status


def send_booking_request_email(
    db: Session,
    mailer: Mailer,
    logo: LogoResolver | None,
    quote_id: str,
    body: BookingRequestEmailIn,
    bus: InvalidationBus | None = None,
) -> ActionResult:
    quote = db.get(ContactQuote, (quote_id or "").strip()) if quote_id else None
    if quote is None:
        return ActionResult.fail(messages.QUOTE_NOT_FOUND)

    recipient, data = build_request_input(db, quote, body)
    if not recipient:
        return ActionResult.fail(messages.QUOTE_NO_RECIPIENT)
    if not data.car_id:
        return ActionResult.fail(messages.QUOTE_NO_CAR)
    if not mailer.is_configured:
        return ActionResult.fail(messages.MAILER_NOT_CONFIGURED)

    doc = render.build_booking_request_document(data, logo.resolve() if logo else None)
    link = render.booking_link(doc.locale, data.car_id, quote.id)
    try:
        deliver(
            db, mailer, recipient, doc.subject, render.render_text(doc), render.render_html(doc),
            kind="booking_request", related_id=quote.id,
        )
    except Exception as exc:
        log.error("quote.request_send_failed", quote_id=quote.id, error=str(exc))
        return ActionResult.fail(messages.SEND_FAILED)

    try:
        status = mark_quote_sent(db, quote, request_snapshot(data, recipient, link))
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("quote.status_update_failed", quote_id=quote.id, error=str(exc))
        return ActionResult.fail(messages.REQUEST_STATUS_FAILED)

    if bus is not None:
        bus.invalidate("/quotes", f"/quotes/{quote.id}")
    log.info("quote.request_sent", quote_id=quote.id, status=status)
    copy = email_copy.request_copy(doc.locale)
    return ActionResult.ok(copy.get("success_message") or email_copy.DEFAULT_REQUEST_SUCCESS, status=status)
