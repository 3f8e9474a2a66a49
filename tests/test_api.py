import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from fleet_admin.core.security import create_refresh_token, hash_password
from fleet_admin.models.audit_log import AuditLog
from fleet_admin.models.notification import Notification
from fleet_admin.models.user import User
from fleet_admin.services import messages
from fleet_admin.services.storage_service import StorageClient, StorageConfig


class _Response:
    def __init__(self, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text


class _StorageSession:
    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.urls: list[str] = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.urls.append(url)
        return _Response(self.status_code, "upstream error")

    def close(self):
        pass


def _configured_storage(status_code: int = 200) -> StorageClient:
    cfg = StorageConfig(url="https://proj.supabase.co", service_role_key="service-key")
    return StorageClient(cfg, session=_StorageSession(status_code))


# --- auth ------------------------------------------------------------------------

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_requires_token(client):
    assert client.get("/api/v1/bookings").status_code == 401
    assert client.get("/api/v1/bookings", headers={"Authorization": "Bearer nonsense"}).status_code == 401


def test_refresh_token_is_not_an_access_token(client, admin):
    headers = {"Authorization": f"Bearer {create_refresh_token(admin.id)}"}
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_login_refresh_and_me(client, admin):
    r = client.post("/api/v1/auth/login", json={"email": " ADMIN@test ", "password": "admin-pass"})
    assert r.status_code == 200
    tokens = r.json()
    assert tokens["token_type"] == "bearer"

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}).json()
    assert me == {"id": admin.id, "email": "admin@test", "fullName": "Eva Admin", "role": "admin"}

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 200
    assert r.json()["access_token"]

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert r.status_code == 401


def test_login_rejects_bad_password(client, admin):
    r = client.post("/api/v1/auth/login", json={"email": "admin@test", "password": "nope"})
    assert r.status_code == 401


def test_non_admin_role_is_forbidden(client, db):
    from fleet_admin.core.security import create_access_token

    user = User(id=str(uuid.uuid4()), email="viewer@test", role="viewer", password_hash=hash_password("x"))
    db.add(user)
    db.commit()

    r = client.get("/api/v1/cars", headers={"Authorization": f"Bearer {create_access_token(user.id)}"})
    assert r.status_code == 403


# --- bookings --------------------------------------------------------------------

def test_list_and_get_bookings(client, auth_headers, make_booking):
    booking = make_booking(humanid="B-7")

    listed = client.get("/api/v1/bookings", headers=auth_headers).json()
    assert [b["id"] for b in listed] == [booking.id]
    assert listed[0]["humanId"] == "B-7"

    assert client.get(f"/api/v1/bookings/{booking.id}", headers=auth_headers).json()["contactName"] == "Anna Kovacs"
    assert client.get("/api/v1/bookings/missing", headers=auth_headers).status_code == 404
    assert client.get("/api/v1/bookings/by-quote/missing", headers=auth_headers).status_code == 404


def test_register_sets_invalidate_header_and_audits(client, auth_headers, make_booking, db, admin):
    booking = make_booking(status="accepted")

    r = client.post(f"/api/v1/bookings/{booking.id}/registered", json={"registered": True}, headers=auth_headers)

    assert r.status_code == 200
    assert r.json() == {"success": messages.BOOKING_REGISTERED, "status": "registered"}
    assert r.headers["X-Invalidate"] == f"/,/{booking.id}"

    entry = db.scalars(select(AuditLog)).one()
    assert (entry.action, entry.entity_id, entry.actor_user_id) == ("BOOKING_REGISTERED", booking.id, admin.id)


def test_action_errors_come_back_as_results(client, auth_headers, db):
    r = client.post("/api/v1/bookings/missing/registered", json={"registered": True}, headers=auth_headers)

    assert r.status_code == 200
    assert r.json() == {"error": messages.BOOKING_NOT_FOUND}
    assert "X-Invalidate" not in r.headers
    assert db.scalars(select(AuditLog)).first() is None


def test_save_pricing(client, auth_headers, make_booking):
    booking = make_booking()

    r = client.put(f"/api/v1/bookings/{booking.id}/pricing", json={"rentalFee": " 300 ", "deposit": ""}, headers=auth_headers)

    assert r.json()["pricing"] == {"rentalFee": "300"}
    payload = client.get(f"/api/v1/bookings/{booking.id}", headers=auth_headers).json()["payload"]
    assert payload["pricing"]["rentalFee"] == "300"


def test_finalization_signed_by_current_admin(client, auth_headers, make_booking, mailer):
    booking = make_booking(status="accepted")

    r = client.post(f"/api/v1/bookings/{booking.id}/finalization-email", json={}, headers=auth_headers)

    assert r.json()["status"] == "form_submitted"
    assert mailer.sent[0]["to"] == "anna@example.com"
    assert "Eva Admin" in mailer.sent[0]["text"]


# --- cars ------------------------------------------------------------------------

def test_create_car_and_list(client, auth_headers, car_form):
    r = client.post("/api/v1/cars", json=car_form(), headers=auth_headers)

    body = r.json()
    assert body["success"] == messages.CAR_CREATED
    assert r.headers["X-Invalidate"] == "/cars"

    cars = client.get("/api/v1/cars", headers=auth_headers).json()
    assert [c["licensePlate"] for c in cars] == ["ABC-123"]
    assert client.get(f"/api/v1/cars/{body['id']}", headers=auth_headers).json()["model"] == "Corolla"


def test_invalid_car_form_returns_field_errors(client, auth_headers, car_form):
    r = client.post("/api/v1/cars", json=car_form(licensePlate="", seats=0), headers=auth_headers)

    assert r.status_code == 200
    body = r.json()
    assert body["error"] == messages.INVALID_CAR_FORM
    assert {"licensePlate", "seats"} <= set(body["fieldErrors"])


def test_car_status_and_delete(client, auth_headers, make_car):
    make_car()

    r = client.post("/api/v1/cars/xyz-987/deactivate", headers=auth_headers)
    assert r.json() == {"success": messages.CAR_DEACTIVATED, "status": "inactive"}

    r = client.delete("/api/v1/cars/XYZ-987", headers=auth_headers)
    assert r.json() == {"success": messages.CAR_DELETED}
    assert client.get("/api/v1/cars", headers=auth_headers).json() == []


# --- notifications ---------------------------------------------------------------

def test_sidebar_promotes_due_reminders(client, auth_headers, db):
    now = datetime.now(timezone.utc)
    db.add(Notification(
        id=str(uuid.uuid4()),
        event_key="db-event:rent_request:rent-9:1:0",
        type="rent_request",
        title="Új bérlés",
        description="Anna Kovacs",
        href="/rent-9",
        state="pending",
        notify_at=now + timedelta(hours=3),
        created_at=now - timedelta(days=1),
    ))
    db.commit()

    items = client.get("/api/v1/notifications", headers=auth_headers).json()

    assert [(n["href"], n["read"]) for n in items] == [("/rent-9", False)]
    assert client.get("/api/v1/notifications/unread-count", headers=auth_headers).json() == {"count": 1}

    r = client.post(f"/api/v1/notifications/{items[0]['id']}/read", headers=auth_headers)
    assert r.json() == {"success": True}
    assert r.headers["X-Invalidate"] == "/"
    assert client.get("/api/v1/notifications/unread-count", headers=auth_headers).json() == {"count": 0}


def test_mark_unknown_notification(client, auth_headers):
    r = client.post("/api/v1/notifications/missing/read", headers=auth_headers)
    assert r.json() == {"error": messages.NOTIFICATION_UPDATE_FAILED}


def test_status_meta(client, auth_headers):
    assert client.get("/api/v1/statuses/registered", headers=auth_headers).json()["label"] == "Regisztrált"
    assert client.get("/api/v1/statuses/mystery", headers=auth_headers).json()["label"] == "mystery"


# --- uploads ---------------------------------------------------------------------

def test_upload_without_storage_config(client, auth_headers):
    r = client.post("/api/uploads/cars", files=[("files", ("a.jpg", b"x", "image/jpeg"))], headers=auth_headers)
    assert r.status_code == 500
    assert r.json() == {"error": messages.UPLOAD_NOT_CONFIGURED}


def test_upload_without_files(client, auth_headers):
    client.app.state.storage = _configured_storage()
    r = client.post("/api/uploads/cars", data={"folder": "corolla"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json() == {"error": messages.UPLOAD_NO_FILES}


def test_upload_failure(client, auth_headers):
    client.app.state.storage = _configured_storage(status_code=500)
    r = client.post("/api/uploads/cars", files=[("files", ("a.jpg", b"x", "image/jpeg"))], headers=auth_headers)
    assert r.status_code == 500
    assert r.json() == {"error": messages.UPLOAD_FAILED}


def test_upload_returns_public_urls(client, auth_headers):
    storage = _configured_storage()
    client.app.state.storage = storage
    files = [("files", (f"{i}.jpg", b"x", "image/jpeg")) for i in range(4)]

    r = client.post("/api/uploads/cars", files=files, data={"folder": "corolla"}, headers=auth_headers)

    urls = r.json()["urls"]
    assert len(urls) == 3
    assert urls[0]["name"] == "0.jpg"
    assert urls[0]["path"].startswith("corolla/")
    assert urls[0]["url"].startswith("https://proj.supabase.co/storage/v1/object/public/cars/corolla/")
    assert len(storage._http.urls) == 3


def test_upload_requires_admin(client):
    assert client.post("/api/uploads/cars", data={"folder": "x"}).status_code == 401
