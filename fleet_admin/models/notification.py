from sqlalchemy import String, DateTime, JSON, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from fleet_admin.db.session import Base

# pending: scheduled reminder not yet due/surfaced
# promoted: a pending reminder that has been turned into an active notification
# active: visible in the sidebar, unread
# read: acknowledged by an admin
STATE_PENDING = "pending"
STATE_PROMOTED = "promoted"
STATE_ACTIVE = "active"
STATE_READ = "read"

TONES = ("info", "warning", "danger")


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        CheckConstraint("state IN ('pending', 'promoted', 'active', 'read')", name="ck_notifications_state"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    event_key: Mapped[str] = mapped_column(String(255), unique=True, index=True)  # source:type:entity:timestamp:phase
    type: Mapped[str] = mapped_column(String(40), index=True)  # rent_request, rent_update, ...
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    href: Mapped[str] = mapped_column(String(255), default="/")
    tone: Mapped[str] = mapped_column(String(10), default="info")
    state: Mapped[str] = mapped_column(String(10), default=STATE_ACTIVE, index=True)
    meta: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)

    notify_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
