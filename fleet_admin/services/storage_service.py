import uuid
from dataclasses import dataclass

import requests
import structlog

from fleet_admin.core.config import Settings

log = structlog.get_logger(__name__)

MAX_FILES_PER_REQUEST = 3
DEFAULT_FOLDER = "uncategorized"


@dataclass
class StorageConfig:
    url: str                 # https://<project>.supabase.co
    service_role_key: str    # bearer token with write access to the bucket
    bucket: str = "cars"
    timeout: int = 30

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        return cls(
            url=settings.SUPABASE_URL.rstrip("/"),
            service_role_key=settings.SUPABASE_SERVICE_ROLE_KEY,
            bucket=settings.SUPABASE_STORAGE_BUCKET,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.service_role_key and self.bucket)


class StorageError(RuntimeError):
    pass


@dataclass
class UploadFile:
    name: str
    content: bytes
    content_type: str = ""


def _extension(filename: str) -> str:
    _, dot, ext = (filename or "").rpartition(".")
    return ext if dot and ext else "jpg"


class StorageClient:
    """Uploads car images to Supabase Storage over its REST API."""

    def __init__(self, cfg: StorageConfig, session: requests.Session | None = None):
        self.cfg = cfg
        self._http = session or requests.Session()

    def public_url(self, path: str) -> str:
        return f"{self.cfg.url}/storage/v1/object/public/{self.cfg.bucket}/{path}"

    def upload(self, file: UploadFile, folder: str = DEFAULT_FOLDER) -> dict:
        path = f"{folder or DEFAULT_FOLDER}/{uuid.uuid4()}.{_extension(file.name)}"
        r = self._http.post(
            f"{self.cfg.url}/storage/v1/object/{self.cfg.bucket}/{path}",
            data=file.content,
            headers={
                "Authorization": f"Bearer {self.cfg.service_role_key}",
                "Content-Type": file.content_type or "application/octet-stream",
                "x-upsert": "true",
            },
            timeout=self.cfg.timeout,
        )
        if r.status_code >= 400:
            raise StorageError(r.text or "Ismeretlen hiba a feltöltés közben.")
        url = self.public_url(path)
        log.info("storage.uploaded", path=path)
        return {"name": file.name, "path": path, "url": url}

    def upload_many(self, files: list[UploadFile], folder: str = DEFAULT_FOLDER) -> list[dict]:
        """Upload at most MAX_FILES_PER_REQUEST files; the first failure aborts."""
        return [self.upload(f, folder) for f in files[:MAX_FILES_PER_REQUEST]]

    def close(self) -> None:
        self._http.close()
