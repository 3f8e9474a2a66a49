from datetime import datetime, timezone

import pytest

from fleet_admin.models.quote import QUOTE_STATUS_RANK
from fleet_admin.services import data_access


def test_malformed_payload_is_quarantined(db, make_booking):
    booking = make_booking(payload={"adults": "many", "contact": {"email": "anna@example.com"}})

    out = data_access.get_booking_by_id(db, booking.id)

    assert out is not None
    assert out.payload is None
    assert "adults" in out.payloadError
    assert out.contactEmail == "anna@example.com"


def test_non_object_payload_is_quarantined(db, make_booking):
    booking = make_booking(payload=["not", "a", "dict"])
    out = data_access.get_booking_by_id(db, booking.id)
    assert out.payload is None
    assert out.payloadError == "payload is list, expected an object"


def test_valid_payload_keeps_unknown_fields(db, make_booking):
    booking = make_booking(payload={"locale": "hu", "pricing": {"rentalFee": 300}, "marketing": {"source": "ads"}})
    out = data_access.get_booking_by_id(db, booking.id)
    assert out.payloadError is None
    assert out.payload.locale == "hu"
    assert out.payload.pricing.rentalFee == "300"
    assert out.payload.model_dump()["marketing"] == {"source": "ads"}


def test_booking_view_fields(db, make_booking, make_quote, make_car):
    car = make_car()
    quote = make_quote(humanid="Q-7")
    booking = make_booking(
        humanid=None,
        carid=car.id,
        quoteid=quote.id,
        rentalstart=datetime(2025, 7, 1, 22, 30, tzinfo=timezone.utc),
    )

    out = data_access.get_booking_by_id(db, booking.id)

    assert out.humanId == "Q-7"
    assert out.carLabel == "Skoda Octavia"
    assert out.rentalStart == "2025-07-01"


def test_car_label_falls_back_to_id(db, make_booking):
    booking = make_booking(carid="retired-car")
    assert data_access.get_booking_by_id(db, booking.id).carLabel == "retired-car"


def test_booking_read_accepts_linked_quote(db, make_booking, make_quote):
    quote = make_quote(status="quote_sent")
    make_booking(quoteid=quote.id)

    data_access.get_bookings(db)

    db.expire_all()
    assert data_access.get_quote_by_id(db, quote.id).status == "quote_accepted"


def test_quote_sync_leaves_canceled_and_accepted_quotes(db, make_booking, make_quote):
    canceled = make_quote(status="canceled")
    done = make_quote(status="closed")
    make_booking(quoteid=canceled.id)
    make_booking(quoteid=done.id)

    assert data_access.sync_quote_statuses(db, [canceled, done]) == 0
    data_access.get_bookings(db)

    db.expire_all()
    assert data_access.get_quote_by_id(db, canceled.id).status == "canceled"
    assert data_access.get_quote_by_id(db, done.id).status == "closed"


RANK_LABELS = {0: "Új", 1: "Ajánlat kiküldve", 2: "Ajánlat elfogadva", 3: "Foglalási űrlap kitöltve"}


@pytest.mark.parametrize("status", sorted(QUOTE_STATUS_RANK))
def test_status_rank_matches_badge(status):
    assert data_access.get_status_meta(status).label == RANK_LABELS[QUOTE_STATUS_RANK[status]]


def test_quote_sync_leaves_submitted_quotes(db, make_booking, make_quote):
    done = make_quote(status="done")
    make_booking(quoteid=done.id)

    assert data_access.sync_quote_statuses(db, [done]) == 0
    db.expire_all()
    assert data_access.get_quote_by_id(db, done.id).status == "done"


def test_booking_by_quote_id(db, make_booking, make_quote):
    quote = make_quote()
    booking = make_booking(quoteid=quote.id)
    assert data_access.get_booking_by_quote_id(db, quote.id).id == booking.id
    assert data_access.get_booking_by_quote_id(db, "other") is None


def test_invalid_request_snapshot_reads_as_none(db, make_quote):
    quote = make_quote(booking_request_data={"rentalFee": {"amount": 300}})
    assert data_access.get_quote_by_id(db, quote.id).bookingRequestData is None


def test_request_snapshot_numbers_become_text(db, make_quote):
    quote = make_quote(booking_request_data={"rentalFee": 300, "insurance": "50"})
    data = data_access.get_quote_by_id(db, quote.id).bookingRequestData
    assert data.rentalFee == "300"
    assert data.insurance == "50"


def test_status_meta():
    assert data_access.get_status_meta("registered").label == "Regisztrált"
    assert data_access.get_status_meta("uj").label == "Új"
    empty = data_access.get_status_meta(None)
    assert empty.label == "—"
    assert empty.badge == data_access.DEFAULT_BADGE
    unknown = data_access.get_status_meta("archived")
    assert unknown.label == "archived"
    assert unknown.badge == data_access.DEFAULT_BADGE
