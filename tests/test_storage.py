import re

import pytest

from fleet_admin.services.storage_service import (
    MAX_FILES_PER_REQUEST,
    StorageClient,
    StorageConfig,
    StorageError,
    UploadFile,
)


class _Response:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text
        self.posts: list[dict] = []
        self.closed = False

    def post(self, url, data=None, headers=None, timeout=None):
        self.posts.append({"url": url, "data": data, "headers": headers})
        return _Response(self.status_code, self.text)

    def close(self):
        self.closed = True


def _client(session, **cfg):
    values = {"url": "https://proj.supabase.co", "service_role_key": "service-key"}
    values.update(cfg)
    return StorageClient(StorageConfig(**values), session=session)


def test_config_completeness():
    assert StorageConfig(url="https://p.supabase.co", service_role_key="k").is_configured
    assert not StorageConfig(url="", service_role_key="k").is_configured
    assert not StorageConfig(url="https://p.supabase.co", service_role_key="k", bucket="").is_configured


def test_upload_path_and_headers():
    session = FakeSession()
    result = _client(session).upload(UploadFile("front.PNG", b"img", "image/png"), "corolla")

    assert re.fullmatch(r"corolla/[0-9a-f-]{36}\.PNG", result["path"])
    assert result["name"] == "front.PNG"
    assert result["url"] == f"https://proj.supabase.co/storage/v1/object/public/cars/{result['path']}"

    post = session.posts[0]
    assert post["url"] == f"https://proj.supabase.co/storage/v1/object/cars/{result['path']}"
    assert post["data"] == b"img"
    assert post["headers"]["Authorization"] == "Bearer service-key"
    assert post["headers"]["Content-Type"] == "image/png"
    assert post["headers"]["x-upsert"] == "true"


def test_upload_defaults():
    session = FakeSession()
    result = _client(session).upload(UploadFile("noext", b"x"), "")

    assert result["path"].startswith("uncategorized/")
    assert result["path"].endswith(".jpg")
    assert session.posts[0]["headers"]["Content-Type"] == "application/octet-stream"


def test_upload_error_status_raises():
    with pytest.raises(StorageError, match="Bucket not found"):
        _client(FakeSession(404, "Bucket not found")).upload(UploadFile("a.jpg", b"x"))


def test_upload_many_caps_file_count():
    session = FakeSession()
    files = [UploadFile(f"{i}.jpg", b"x") for i in range(MAX_FILES_PER_REQUEST + 2)]

    results = _client(session).upload_many(files, "fleet")

    assert len(results) == MAX_FILES_PER_REQUEST
    assert len(session.posts) == MAX_FILES_PER_REQUEST


def test_close_releases_session():
    session = FakeSession()
    _client(session).close()
    assert session.closed
