import requests
import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from fleet_admin.models.user import User
from fleet_admin.services import messages
from fleet_admin.services.storage_service import DEFAULT_FOLDER, MAX_FILES_PER_REQUEST, StorageClient, StorageError
from fleet_admin.services.storage_service import UploadFile as StoredFile
from fleet_admin.api.deps import require_admin, get_storage

router = APIRouter(prefix="/api/uploads", tags=["uploads"])
log = structlog.get_logger(__name__)

@router.post("/cars")
def upload_car_images(
    files: list[UploadFile] = File(default=[]),
    folder: str = Form(DEFAULT_FOLDER),
    _: User = Depends(require_admin),
    storage: StorageClient = Depends(get_storage),
):
    if not storage.cfg.is_configured:
        return JSONResponse(status_code=500, content={"error": messages.UPLOAD_NOT_CONFIGURED})

    picked = [f for f in files if f.filename][:MAX_FILES_PER_REQUEST]
    if not picked:
        return JSONResponse(status_code=400, content={"error": messages.UPLOAD_NO_FILES})

    uploads = [
        StoredFile(name=f.filename, content=f.file.read(), content_type=f.content_type or "")
        for f in picked
    ]
    try:
        urls = storage.upload_many(uploads, folder.strip() or DEFAULT_FOLDER)
    except (StorageError, requests.RequestException) as exc:
        log.error("storage.upload_failed", folder=folder, error=str(exc))
        return JSONResponse(status_code=500, content={"error": messages.UPLOAD_FAILED})
    return {"urls": urls}
