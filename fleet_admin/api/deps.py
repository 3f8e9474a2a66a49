from fastapi import BackgroundTasks, Depends, HTTPException, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from fleet_admin.db.session import get_db
from fleet_admin.core.security import ACCESS, decode_token
from fleet_admin.emails.logo import LogoResolver
from fleet_admin.models.user import User, ADMIN_ROLES
from fleet_admin.schemas.common import ActionResult
from fleet_admin.services.mailer import Mailer
from fleet_admin.services.revalidate import INVALIDATE_HEADER, InvalidationBus, trigger_public_revalidate
from fleet_admin.services.storage_service import StorageClient

bearer = HTTPBearer(auto_error=False)

def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if not creds:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = decode_token(creds.credentials, expected_type=ACCESS)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    user_id = payload.get("sub")
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return user

def require_roles(*roles: str):
    def _guard(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Forbidden")
        return user
    return _guard

require_admin = require_roles(*ADMIN_ROLES)


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer

def get_logo(request: Request) -> LogoResolver:
    return request.app.state.logo

def get_storage(request: Request) -> StorageClient:
    return request.app.state.storage

def get_bus() -> InvalidationBus:
    return InvalidationBus()


def finish(result: ActionResult, bus: InvalidationBus, response: Response, background: BackgroundTasks) -> dict:
    """Expose invalidated views to the UI and queue public-site revalidation."""
    if bus.paths:
        response.headers[INVALIDATE_HEADER] = bus.header_value
    for payload in bus.public_payloads:
        background.add_task(trigger_public_revalidate, payload)
    return result.model_dump(exclude_none=True)
