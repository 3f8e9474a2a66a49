import uuid, json
from sqlalchemy.orm import Session
from fleet_admin.models.audit_log import AuditLog
from fleet_admin.schemas.common import ActionResult


def log_audit(db: Session, actor_user_id: str, action: str, entity_type: str, entity_id: str, details: dict | None = None):
    db.add(AuditLog(
        id=str(uuid.uuid4()),
        actor_user_id=actor_user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details_json=json.dumps(details or {}, ensure_ascii=False, default=str),
    ))
    db.commit()


def audit_result(db: Session, actor_user_id: str, action: str, entity_type: str, entity_id: str, result: ActionResult):
    """Record a successful admin action; failed ones are only logged by the service."""
    if result.is_error:
        return
    log_audit(db, actor_user_id, action, entity_type, entity_id, {"status": result.status, "message": result.success})
