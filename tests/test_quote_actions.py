from fleet_admin.emails import copy as email_copy
from fleet_admin.emails import render
from fleet_admin.schemas.quote import BookingRequestEmailIn
from fleet_admin.services import messages, quote_service
from fleet_admin.services.revalidate import InvalidationBus


def _body(**values) -> BookingRequestEmailIn:
    values.setdefault("rentalFee", "300")
    values.setdefault("deposit", "500")
    values.setdefault("insurance", "200")
    return BookingRequestEmailIn(**values)


def test_request_email_advances_quote_and_stores_snapshot(db, make_quote, make_car, mailer, logo):
    car = make_car()
    quote = make_quote(carid=car.id, carname="Skoda Octavia", locale="hu")
    bus = InvalidationBus()

    result = quote_service.send_booking_request_email(db, mailer, logo, quote.id, _body(adminName="Eva Admin"), bus)

    assert result.success == email_copy.REQUEST_COPY["hu"]["success_message"]
    assert result.status == "quote_sent"
    assert quote.status == "quote_sent"
    assert bus.paths == ["/quotes", f"/quotes/{quote.id}"]

    snapshot = quote.booking_request_data
    assert snapshot["rentalFee"] == "300"
    assert snapshot["deposit"] == "500"
    assert snapshot["insurance"] == "200"
    assert snapshot["contactEmail"] == "anna@example.com"
    assert snapshot["adminName"] == "Eva Admin"
    assert snapshot["locale"] == "hu"
    assert snapshot["bookingLink"] == render.booking_link("hu", car.id, quote.id)

    [sent] = mailer.sent
    assert sent["subject"] == email_copy.REQUEST_COPY["hu"]["subject"]
    assert "https://cdn.test/cars/octavia.jpg" in sent["html"]


def test_request_email_never_moves_accepted_quote_back(db, make_quote, make_car, mailer, logo):
    car = make_car()
    quote = make_quote(carid=car.id, status="quote_accepted")

    result = quote_service.send_booking_request_email(db, mailer, logo, quote.id, _body())

    assert not result.is_error
    assert quote.status == "quote_accepted"
    assert quote.booking_request_data["rentalFee"] == "300"


def test_request_email_leaves_legacy_accepted_status(db, make_quote, make_car, mailer, logo):
    car = make_car()
    quote = make_quote(carid=car.id, status="resolved")
    quote_service.send_booking_request_email(db, mailer, logo, quote.id, _body())
    assert quote.status == "resolved"


def test_form_fields_override_quote(db, make_quote, make_car, mailer, logo):
    car = make_car()
    quote = make_quote(carid=None)

    result = quote_service.send_booking_request_email(
        db, mailer, logo, quote.id,
        _body(email="other@example.com", name="Bela", locale="de", carId=car.id, carImages=[]),
    )

    assert not result.is_error
    # no success_message for de; the admin sees the default
    assert result.success == email_copy.DEFAULT_REQUEST_SUCCESS
    [sent] = mailer.sent
    assert sent["to"] == "other@example.com"
    assert "Bela" in sent["text"]
    assert "Skoda Octavia" in sent["text"]
    assert "octavia.jpg" not in sent["html"]


def test_request_email_log_failure_still_reports_sent(db, make_quote, make_car, mailer, logo, broken_log_update):
    car = make_car()
    quote = make_quote(carid=car.id)

    result = quote_service.send_booking_request_email(db, mailer, logo, quote.id, _body())

    assert broken_log_update == [True]
    assert not result.is_error
    assert result.status == "quote_sent"
    assert len(mailer.sent) == 1


def test_request_email_validation(db, make_quote, mailer, unconfigured_mailer, logo):
    assert quote_service.send_booking_request_email(db, mailer, logo, "nope", _body()).error == messages.QUOTE_NOT_FOUND

    no_email = make_quote(email="", carid="car-1")
    assert quote_service.send_booking_request_email(db, mailer, logo, no_email.id, _body()).error == messages.QUOTE_NO_RECIPIENT

    no_car = make_quote(carid=None)
    assert quote_service.send_booking_request_email(db, mailer, logo, no_car.id, _body()).error == messages.QUOTE_NO_CAR

    ready = make_quote(carid="car-1")
    result = quote_service.send_booking_request_email(db, unconfigured_mailer, logo, ready.id, _body())
    assert result.error == messages.MAILER_NOT_CONFIGURED
    assert mailer.sent == []


def test_request_email_send_failure_keeps_status(db, make_quote, failing_mailer, logo):
    quote = make_quote(carid="car-1")
    result = quote_service.send_booking_request_email(db, failing_mailer, logo, quote.id, _body())
    assert result.error == messages.SEND_FAILED
    assert quote.status == "new"
    assert quote.booking_request_data is None
