from sqlalchemy import String, DateTime, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from fleet_admin.db.session import Base

RENT_STATUS_NEW = "new"
RENT_STATUS_FORM_SUBMITTED = "form_submitted"
RENT_STATUS_ACCEPTED = "accepted"
RENT_STATUS_REGISTERED = "registered"
RENT_STATUS_CANCELLED = "cancelled"

RENT_STATUSES = (
    RENT_STATUS_NEW,
    RENT_STATUS_FORM_SUBMITTED,
    RENT_STATUS_ACCEPTED,
    RENT_STATUS_REGISTERED,
    RENT_STATUS_CANCELLED,
)


class RentRequest(Base):
    """A booking. Written by the public site, edited here."""
    __tablename__ = "rent_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    humanid: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    locale: Mapped[str] = mapped_column(String(5), default="")

    carid: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    quoteid: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    contactname: Mapped[str] = mapped_column(String(200), default="")
    contactemail: Mapped[str | None] = mapped_column(String(320), nullable=True)
    contactphone: Mapped[str | None] = mapped_column(String(40), nullable=True)

    rentalstart: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rentalend: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    status: Mapped[str | None] = mapped_column(String(30), default=RENT_STATUS_NEW, index=True)
    updated: Mapped[str | None] = mapped_column(Text, nullable=True)  # free-form admin note
    payload: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # driver, delivery, invoice, consents, pricing

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
