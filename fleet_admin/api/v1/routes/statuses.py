from fastapi import APIRouter, Depends
from fleet_admin.models.user import User
from fleet_admin.schemas.quote import StatusMetaOut
from fleet_admin.services.data_access import get_status_meta
from fleet_admin.api.deps import require_admin

router = APIRouter(tags=["statuses"])

@router.get("/statuses/{status}", response_model=StatusMetaOut)
def status_meta(status: str, _: User = Depends(require_admin)):
    return get_status_meta(status)
