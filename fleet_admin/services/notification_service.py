"""Sidebar notifications and promotion of scheduled rental reminders.

A reminder is stored as a ``pending`` ``rent_request`` notification whose
``notify_at`` is the moment it becomes relevant and whose event key ends in
``:0``. Once that moment is within two days it is promoted: the source is
claimed (``pending -> promoted``, key suffix ``:0 -> :1``) and an ``active``
``rent_update`` notification is inserted in the same transaction.
"""
import uuid
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_admin.models.notification import (
    Notification,
    STATE_ACTIVE,
    STATE_PENDING,
    STATE_PROMOTED,
    STATE_READ,
)
from fleet_admin.schemas.common import ActionResult
from fleet_admin.schemas.notification import NotificationOut
from fleet_admin.services import messages
from fleet_admin.services.revalidate import InvalidationBus

log = structlog.get_logger(__name__)

STALE_WINDOW = timedelta(days=10)
UPCOMING_WINDOW = timedelta(days=2)
SIDEBAR_LIMIT = 12

TYPE_RENT_REQUEST = "rent_request"
TYPE_RENT_UPDATE = "rent_update"
PROMOTED_TITLE = "Bérlés aktuális 48 órán belül"

UNPROCESSED_SUFFIX = ":0"
PROCESSED_SUFFIX = ":1"


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def notification_out(n: Notification) -> NotificationOut:
    stamp = n.notify_at or n.created_at
    return NotificationOut(
        id=n.id,
        title=n.title,
        description=n.description or "",
        href=n.href or "/",
        timestamp=stamp.isoformat() if stamp else None,
        tone=n.tone if n.tone in ("warning", "danger") else "info",
        read=n.state == STATE_READ,
        state=n.state,
        eventKey=n.event_key,
        metadata=n.meta,
    )


def get_sidebar_notifications(db: Session, now: datetime | None = None) -> list[NotificationOut]:
    since = _now(now) - STALE_WINDOW
    rows = db.scalars(
        select(Notification)
        .where(Notification.state == STATE_ACTIVE, Notification.created_at >= since)
        .order_by(Notification.created_at.desc())
        .limit(SIDEBAR_LIMIT)
    )
    return [notification_out(n) for n in rows]


def get_unread_notifications_count(db: Session, now: datetime | None = None) -> int:
    now = _now(now)
    return db.scalar(
        select(func.count(Notification.id)).where(
            Notification.state == STATE_ACTIVE,
            or_(Notification.notify_at.is_(None), Notification.notify_at <= now),
            Notification.created_at >= now - STALE_WINDOW,
        )
    ) or 0


def mark_notification_read(db: Session, notification_id: str, bus: InvalidationBus | None = None) -> ActionResult:
    notification_id = (notification_id or "").strip()
    if not notification_id:
        return ActionResult.fail(messages.MISSING_NOTIFICATION_ID)
    now = datetime.now(timezone.utc)
    try:
        result = db.execute(
            update(Notification)
            .where(Notification.id == notification_id)
            .values(state=STATE_READ, read_at=now, updated_at=now)
        )
        if result.rowcount == 0:
            db.rollback()
            return ActionResult.fail(messages.NOTIFICATION_UPDATE_FAILED)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("notification.mark_read_failed", notification_id=notification_id, error=str(exc))
        return ActionResult.fail(messages.NOTIFICATION_UPDATE_FAILED)
    if bus is not None:
        bus.invalidate("/")
    return ActionResult.ok()


def mark_all_notifications_read(db: Session, bus: InvalidationBus | None = None) -> ActionResult:
    now = datetime.now(timezone.utc)
    try:
        result = db.execute(
            update(Notification)
            .where(Notification.state == STATE_ACTIVE)
            .values(state=STATE_READ, read_at=now, updated_at=now)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("notification.mark_all_read_failed", error=str(exc))
        return ActionResult.fail(messages.NOTIFICATIONS_UPDATE_FAILED)
    if bus is not None:
        bus.invalidate("/")
    log.info("notification.all_read", count=result.rowcount)
    return ActionResult.ok()


# --- delayed reminders -------------------------------------------------------------

def get_delayed_notifications(db: Session, now: datetime | None = None) -> list[Notification]:
    """Pending reminders whose time falls within the next two days."""
    now = _now(now)
    return list(db.scalars(
        select(Notification)
        .where(
            Notification.state == STATE_PENDING,
            Notification.type == TYPE_RENT_REQUEST,
            Notification.notify_at.is_not(None),
            Notification.notify_at >= now,
            Notification.notify_at <= now + UPCOMING_WINDOW,
            Notification.event_key.endswith(UNPROCESSED_SUFFIX),
        )
        .order_by(Notification.notify_at.asc())
    ))


def processed_key(event_key: str) -> str:
    if event_key.endswith(UNPROCESSED_SUFFIX):
        return event_key[: -len(UNPROCESSED_SUFFIX)] + PROCESSED_SUFFIX
    return event_key


def rent_id_from_href(href: str | None) -> str | None:
    """``/abc-123`` or ``/abc-123/edit`` -> ``abc-123``."""
    parts = (href or "").split("/")
    return parts[1] if len(parts) > 1 and parts[1] else None


def promote_notification(db: Session, source: Notification, now: datetime | None = None) -> Notification | None:
    """Turn one pending reminder into an active notification.

    The source row is claimed with a conditional UPDATE; when another caller
    already claimed it no row matches and nothing is inserted.
    """
    now = _now(now)
    claim = db.execute(
        update(Notification)
        .where(Notification.id == source.id, Notification.state == STATE_PENDING)
        .values(state=STATE_PROMOTED, event_key=processed_key(source.event_key), updated_at=now)
        .execution_options(synchronize_session=False)
    )
    if claim.rowcount != 1:
        db.rollback()
        log.info("notification.promotion_skipped", source_id=source.id)
        return None

    rent_id = rent_id_from_href(source.href) or str(uuid.uuid4())
    promoted = Notification(
        id=str(uuid.uuid4()),
        # one pass shares `now`; the source id keeps keys distinct per reminder
        event_key=f"db-event:{TYPE_RENT_UPDATE}:{rent_id}:{int(now.timestamp() * 1000)}:{source.id}{PROCESSED_SUFFIX}",
        type=TYPE_RENT_UPDATE,
        title=PROMOTED_TITLE,
        description=source.description or "",
        href=f"/{rent_id}",
        tone="info",
        state=STATE_ACTIVE,
        meta=source.meta,
        created_at=now,
        updated_at=now,
    )
    db.add(promoted)
    db.commit()
    log.info("notification.promoted", source_id=source.id, notification_id=promoted.id)
    return promoted


def promote_delayed_notifications(db: Session, now: datetime | None = None) -> int:
    """Promote every due reminder. Returns how many this call promoted."""
    now = _now(now)
    promoted = 0
    for source in get_delayed_notifications(db, now):
        try:
            if promote_notification(db, source, now) is not None:
                promoted += 1
        except SQLAlchemyError as exc:
            db.rollback()
            log.error("notification.promotion_failed", source_id=source.id, error=str(exc))
    return promoted
