from sqlalchemy import select

from fleet_admin.emails import copy as email_copy
from fleet_admin.models.email_log import EmailLog
from fleet_admin.services import booking_service, messages
from fleet_admin.services.revalidate import InvalidationBus

LABELS = email_copy.FINALIZATION_COPY["en"]["labels"]


# --- registered toggle -------------------------------------------------------------

def test_register_twice_writes_once(db, make_booking, write_spy):
    booking = make_booking(status="accepted")

    first = booking_service.set_booking_registered(db, booking.id, True)
    second = booking_service.set_booking_registered(db, booking.id, True)

    assert first.success == messages.BOOKING_REGISTERED
    assert first.status == "registered"
    assert second.success == messages.BOOKING_ALREADY_REGISTERED
    assert len(write_spy) == 1


def test_register_already_registered_never_writes(db, make_booking, write_spy):
    booking = make_booking(status="registered")
    for _ in range(2):
        result = booking_service.set_booking_registered(db, booking.id, True)
        assert result.success == messages.BOOKING_ALREADY_REGISTERED
    assert write_spy == []


def test_unregister_returns_to_accepted(db, make_booking, write_spy):
    booking = make_booking(status="registered")
    bus = InvalidationBus()

    result = booking_service.set_booking_registered(db, booking.id, False, bus)

    assert result.success == messages.BOOKING_UNREGISTERED
    assert booking.status == "accepted"
    assert booking.updated_at is not None
    assert bus.paths == ["/", f"/{booking.id}"]
    assert write_spy == [{"status": "accepted"}]


def test_unregister_when_not_registered_is_a_no_op(db, make_booking, write_spy):
    booking = make_booking(status="new")
    result = booking_service.set_booking_registered(db, booking.id, False)
    assert result.success == messages.BOOKING_NOT_REGISTERED
    assert result.status == "new"
    assert write_spy == []


def test_register_validation(db):
    assert booking_service.set_booking_registered(db, "  ", True).error == messages.MISSING_BOOKING_ID
    assert booking_service.set_booking_registered(db, "missing", True).error == messages.BOOKING_NOT_FOUND


def test_register_write_failure(db, make_booking, broken_writes):
    booking = make_booking(status="accepted")
    bus = InvalidationBus()
    result = booking_service.set_booking_registered(db, booking.id, True, bus)
    assert result.error == messages.STATUS_UPDATE_FAILED
    assert bus.paths == []


# --- pricing -----------------------------------------------------------------------

def test_save_pricing_keeps_rest_of_payload(db, make_booking):
    booking = make_booking(payload={"locale": "en", "contact": {"email": "anna@example.com"}})
    bus = InvalidationBus()

    result = booking_service.save_booking_pricing(db, booking.id, {"rentalFee": " 300 ", "deposit": "", "deliveryFee": "50"}, bus)

    assert result.success == messages.PRICING_SAVED
    assert result.model_dump()["pricing"] == {"rentalFee": "300", "deliveryFee": "50"}
    assert booking.payload["pricing"] == {"rentalFee": "300", "deliveryFee": "50"}
    assert booking.payload["contact"] == {"email": "anna@example.com"}
    assert bus.paths == ["/", f"/{booking.id}"]


def test_save_empty_pricing_removes_key(db, make_booking):
    booking = make_booking(payload={"locale": "en", "pricing": {"rentalFee": "300"}})
    result = booking_service.save_booking_pricing(db, booking.id, {"rentalFee": "  ", "insurance": None})
    assert not result.is_error
    assert "pricing" not in booking.payload
    assert booking.payload["locale"] == "en"


def test_save_pricing_on_empty_payload(db, make_booking):
    booking = make_booking(payload=None)
    booking_service.save_booking_pricing(db, booking.id, {"extrasFee": "15"})
    assert booking.payload == {"pricing": {"extrasFee": "15"}}


def test_save_pricing_write_failure(db, make_booking, broken_writes):
    booking = make_booking()
    result = booking_service.save_booking_pricing(db, booking.id, {"rentalFee": "300"})
    assert result.error == messages.PRICING_SAVE_FAILED


# --- finalization email ------------------------------------------------------------

def test_finalization_total_without_insurance_or_deposit(db, make_booking, mailer, logo):
    booking = make_booking(payload={"locale": "en", "pricing": {"rentalFee": "300", "deliveryFee": "50"}})
    bus = InvalidationBus()

    result = booking_service.send_booking_finalization_email(db, mailer, logo, booking.id, "Eva Admin", bus)

    assert result.success == messages.FINALIZATION_SENT
    assert result.status == "form_submitted"
    assert booking.status == "form_submitted"
    assert bus.paths == ["/", f"/{booking.id}"]

    [sent] = mailer.sent
    assert sent["to"] == "anna@example.com"
    assert f"{LABELS['total']}: 350 €" in sent["text"]
    assert f"{LABELS['deposit']}:" not in sent["text"]
    assert f"{LABELS['insurance']}:" not in sent["text"]
    assert "https://cdn.test/logo.png" in sent["html"]

    log_row = db.scalars(select(EmailLog).where(EmailLog.related_id == booking.id)).one()
    assert log_row.status == "sent"
    assert log_row.kind == "booking_finalization"


def test_finalization_insurance_consent_drops_deposit(db, make_quote, make_booking, mailer, logo):
    quote = make_quote(booking_request_data={"rentalFee": "250", "insurance": "200", "deposit": "500"})
    booking = make_booking(quoteid=quote.id, payload={"locale": "en", "consents": {"insurance": True}})

    result = booking_service.send_booking_finalization_email(db, mailer, logo, booking.id, "Eva Admin")

    assert not result.is_error
    text = mailer.sent[0]["text"]
    assert f"{LABELS['insurance']}: 200 €" in text
    assert f"{LABELS['deposit']}:" not in text
    assert "500 €" not in text
    assert f"{LABELS['total']}: 450 €" in text


def test_finalization_status_failure_after_send(db, make_booking, mailer, logo, broken_writes):
    booking = make_booking(status="accepted", payload={"pricing": {"rentalFee": "300"}})

    result = booking_service.send_booking_finalization_email(db, mailer, logo, booking.id, "Eva Admin")

    assert result.error == messages.FINALIZATION_STATUS_FAILED
    assert len(mailer.sent) == 1
    db.expire_all()
    assert db.get(type(booking), booking.id).status == "accepted"


def test_finalization_email_log_failure_still_reports_sent(db, make_booking, mailer, logo, broken_log_update):
    booking = make_booking(status="accepted")

    result = booking_service.send_booking_finalization_email(db, mailer, logo, booking.id, "Eva Admin")

    assert broken_log_update == [True]
    assert result.success == messages.FINALIZATION_SENT
    assert result.status == "form_submitted"
    assert len(mailer.sent) == 1
    db.expire_all()
    assert db.get(type(booking), booking.id).status == "form_submitted"
    log_row = db.scalars(select(EmailLog).where(EmailLog.related_id == booking.id)).one()
    assert log_row.status == "queued"


def test_finalization_send_failure_leaves_status(db, make_booking, failing_mailer, logo, write_spy):
    booking = make_booking(status="accepted")

    result = booking_service.send_booking_finalization_email(db, failing_mailer, logo, booking.id, "Eva Admin")

    assert result.error == messages.SEND_FAILED
    assert write_spy == []
    log_row = db.scalars(select(EmailLog).where(EmailLog.related_id == booking.id)).one()
    assert log_row.status == "failed"
    assert "smtp unavailable" in log_row.error


def test_finalization_validation(db, make_booking, mailer, unconfigured_mailer, logo):
    booking = make_booking()
    assert booking_service.send_booking_finalization_email(db, mailer, logo, "", "Eva").error == messages.MISSING_BOOKING_ID
    assert booking_service.send_booking_finalization_email(db, mailer, logo, booking.id, "  ").error == messages.MISSING_SIGNER
    assert booking_service.send_booking_finalization_email(db, mailer, logo, "nope", "Eva").error == messages.BOOKING_NOT_FOUND
    result = booking_service.send_booking_finalization_email(db, unconfigured_mailer, logo, booking.id, "Eva")
    assert result.error == messages.MAILER_NOT_CONFIGURED
    assert mailer.sent == []


def test_finalization_recipient_falls_back_to_invoice_email(db, make_booking, mailer, logo):
    booking = make_booking(contactemail=None, payload={"contact": {"name": "Anna"}, "invoice": {"email": " billing@example.com "}})
    booking_service.send_booking_finalization_email(db, mailer, logo, booking.id, "Eva Admin")
    assert mailer.sent[0]["to"] == "billing@example.com"


def test_finalization_without_any_email(db, make_booking, mailer, logo):
    booking = make_booking(contactemail=None, payload={"contact": {"email": "  "}})
    result = booking_service.send_booking_finalization_email(db, mailer, logo, booking.id, "Eva Admin")
    assert result.error == messages.BOOKING_NO_RECIPIENT


# --- confirmation email ------------------------------------------------------------

def test_confirmation_uses_quote_fees_and_locale(db, make_quote, make_booking, mailer):
    quote = make_quote(locale="hu", carname="Toyota Corolla", booking_request_data={"rentalFee": "300", "deposit": "100"})
    booking = make_booking(locale="", carid="car-x", quoteid=quote.id, payload={"locale": "hu", "pricing": {"rentalFee": "999"}})

    result = booking_service.send_booking_confirmation_email(db, mailer, booking.id)

    copy = email_copy.CONFIRMATION_COPY["hu"]
    assert result.success == copy["success_message"]
    [sent] = mailer.sent
    assert sent["subject"] == f"{copy['subject']} (B-2001)"
    assert "Toyota Corolla" in sent["text"]
    assert f"{copy['rental_fee_label']}: 300 €" in sent["text"]
    assert "999" not in sent["text"]


def test_confirmation_english_for_other_locales(db, make_booking, mailer):
    booking = make_booking(locale="de")
    result = booking_service.send_booking_confirmation_email(db, mailer, booking.id)
    assert result.success == email_copy.CONFIRMATION_COPY["en"]["success_message"]


def test_confirmation_send_failure(db, make_booking, failing_mailer):
    booking = make_booking()
    assert booking_service.send_booking_confirmation_email(db, failing_mailer, booking.id).error == messages.SEND_FAILED
