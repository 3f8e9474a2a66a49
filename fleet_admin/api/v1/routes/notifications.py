import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from fleet_admin.db.session import get_db
from fleet_admin.models.user import User
from fleet_admin.schemas.notification import NotificationOut, UnreadCountOut
from fleet_admin.services import notification_service
from fleet_admin.services.revalidate import InvalidationBus
from fleet_admin.api.deps import require_admin, get_bus, finish

router = APIRouter(tags=["notifications"])
log = structlog.get_logger(__name__)

@router.get("/notifications", response_model=list[NotificationOut])
def sidebar_notifications(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    # the beat job is the primary promoter; this only catches up between runs
    try:
        notification_service.promote_delayed_notifications(db)
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("notification.promotion_pass_failed", error=str(exc))
    return notification_service.get_sidebar_notifications(db)

@router.get("/notifications/unread-count", response_model=UnreadCountOut)
def unread_count(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return UnreadCountOut(count=notification_service.get_unread_notifications_count(db))

@router.post("/notifications/read-all")
def read_all(
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
    bus: InvalidationBus = Depends(get_bus),
):
    result = notification_service.mark_all_notifications_read(db, bus)
    return finish(result, bus, response, background)

@router.post("/notifications/{notification_id}/read")
def read_one(
    notification_id: str,
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
    bus: InvalidationBus = Depends(get_bus),
):
    result = notification_service.mark_notification_read(db, notification_id, bus)
    return finish(result, bus, response, background)
