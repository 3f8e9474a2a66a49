from datetime import datetime, timezone
import structlog
from sqlalchemy.exc import ProgrammingError
from fleet_admin.core.config import settings
from fleet_admin.db.session import Database
from fleet_admin.services import notification_service

log = structlog.get_logger(__name__)

def promote_delayed_notifications(database: Database | None = None, now: datetime | None = None):
    """One promotion pass. Builds and disposes its own Database unless one is passed in."""
    owned = database is None
    database = database or Database(settings.DATABASE_URL)
    db = database.session()
    try:
        try:
            promoted = notification_service.promote_delayed_notifications(db, now or datetime.now(timezone.utc))
        except ProgrammingError:
            # DB not migrated yet; don't crash the worker.
            db.rollback()
            return {"skipped": True, "reason": "missing_tables"}
        if promoted:
            log.info("worker.notifications_promoted", count=promoted)
        return {"promoted": promoted}
    finally:
        db.close()
        if owned:
            database.dispose()
