from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from fleet_admin.db.session import Base

CONTACT_STATUS_NEW = "new"
CONTACT_STATUS_QUOTE_SENT = "quote_sent"
CONTACT_STATUS_QUOTE_ACCEPTED = "quote_accepted"

# Position in the new -> quote_sent -> quote_accepted -> form_submitted workflow.
# Legacy spellings map onto the same steps; "done" means the booking form was filled in.
QUOTE_STATUS_RANK = {
    CONTACT_STATUS_NEW: 0,
    "uj": 0,
    "contacted": 1,
    "pending": 1,
    "in_progress": 1,
    CONTACT_STATUS_QUOTE_SENT: 1,
    "answered": 1,
    "ajanlat_kikuldve": 1,
    CONTACT_STATUS_QUOTE_ACCEPTED: 2,
    "resolved": 2,
    "closed": 2,
    "ajanlat_elfogadva": 2,
    "form_submitted": 3,
    "foglalasi_urlap_kitoltve": 3,
    "done": 3,
}


class ContactQuote(Base):
    """A customer enquiry. Created by the public site."""
    __tablename__ = "contact_quotes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    humanid: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    locale: Mapped[str] = mapped_column(String(5), default="")
    name: Mapped[str] = mapped_column(String(200), default="")
    email: Mapped[str] = mapped_column(String(320), default="")
    phone: Mapped[str] = mapped_column(String(40), default="")
    preferredchannel: Mapped[str] = mapped_column(String(20), default="email")  # email|phone|whatsapp|viber

    rentalstart: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rentalend: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    arrivalflight: Mapped[str | None] = mapped_column(String(40), nullable=True)
    departureflight: Mapped[str | None] = mapped_column(String(40), nullable=True)
    partysize: Mapped[str | None] = mapped_column(String(10), nullable=True)
    children: Mapped[str | None] = mapped_column(String(10), nullable=True)

    carid: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    carname: Mapped[str | None] = mapped_column(String(200), nullable=True)

    status: Mapped[str | None] = mapped_column(String(30), default=CONTACT_STATUS_NEW, index=True)
    booking_request_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # fees last sent to the customer

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
