from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from fleet_admin.db.session import Base


class EmailLog(Base):
    __tablename__ = "email_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    to_email: Mapped[str] = mapped_column(String(320), index=True)
    subject: Mapped[str] = mapped_column(String(255))
    kind: Mapped[str] = mapped_column(String(40), default="")  # booking_request, booking_confirmation, booking_finalization
    status: Mapped[str] = mapped_column(String(30), default="queued")  # queued, sent, failed
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    related_id: Mapped[str] = mapped_column(String(36), default="", index=True)  # booking or quote id
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
