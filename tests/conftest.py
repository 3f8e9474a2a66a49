import os

# Settings are read at import time; give them a throwaway environment.
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PUBLIC_SITE_BASE_URL"] = "https://rent.example.com"
os.environ["PUBLIC_SITE_REVALIDATE_URL"] = ""
os.environ["PUBLIC_SITE_REVALIDATE_SECRET"] = ""
os.environ["DEFAULT_EMAIL_LOCALE"] = "en"
os.environ["SENDGRID_API_KEY"] = ""

import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from fleet_admin.core.security import create_access_token, hash_password
from fleet_admin.db.session import Database
from fleet_admin.emails.logo import LogoResolver
from fleet_admin.models.booking import RentRequest
from fleet_admin.models.car import Car
from fleet_admin.models.quote import ContactQuote
from fleet_admin.models.user import User
from fleet_admin.services.mailer import Mailer
from fleet_admin.services.storage_service import StorageClient, StorageConfig


class FakeMailer(Mailer):
    """Records messages instead of sending them; ``fail`` makes every send raise."""

    def __init__(self, configured: bool = True, fail: bool = False):
        if configured:
            super().__init__(host="smtp.test", port=587, user="bookings@test", password="pw", from_address="bookings@test")
        else:
            super().__init__()
        self.fail = fail
        self.sent: list[dict] = []

    def send(self, to_email, subject, text, html, reply_to=None):
        if self.fail:
            raise RuntimeError("smtp unavailable")
        self.sent.append({"to": to_email, "subject": subject, "text": text, "html": html})


@pytest.fixture
def database():
    database = Database("sqlite://", poolclass=StaticPool)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def failing_mailer():
    return FakeMailer(fail=True)


@pytest.fixture
def unconfigured_mailer():
    return FakeMailer(configured=False)


@pytest.fixture
def logo():
    return LogoResolver(url="https://cdn.test/logo.png")


@pytest.fixture
def make_quote(db):
    def _make(**values):
        quote = ContactQuote(
            id=values.pop("id", str(uuid.uuid4())),
            humanid=values.pop("humanid", "Q-1001"),
            locale=values.pop("locale", "en"),
            name=values.pop("name", "Anna Kovacs"),
            email=values.pop("email", "anna@example.com"),
            phone=values.pop("phone", "+36 30 123 4567"),
            rentalstart=values.pop("rentalstart", datetime(2025, 7, 1, tzinfo=timezone.utc)),
            rentalend=values.pop("rentalend", datetime(2025, 7, 5, tzinfo=timezone.utc)),
            status=values.pop("status", "new"),
            **values,
        )
        db.add(quote)
        db.commit()
        return quote
    return _make


@pytest.fixture
def make_booking(db):
    def _make(**values):
        booking = RentRequest(
            id=values.pop("id", str(uuid.uuid4())),
            humanid=values.pop("humanid", "B-2001"),
            locale=values.pop("locale", "en"),
            contactname=values.pop("contactname", "Anna Kovacs"),
            contactemail=values.pop("contactemail", "anna@example.com"),
            rentalstart=values.pop("rentalstart", datetime(2025, 7, 1, tzinfo=timezone.utc)),
            rentalend=values.pop("rentalend", datetime(2025, 7, 5, tzinfo=timezone.utc)),
            status=values.pop("status", "new"),
            **values,
        )
        db.add(booking)
        db.commit()
        return booking
    return _make


def _car_form(**overrides) -> dict:
    form = {
        "licensePlate": "abc-123",
        "category": "medium",
        "manufacturer": "Toyota",
        "model": "Corolla",
        "year": 2022,
        "firstRegistration": "2022-03-01",
        "bodyType": "sedan",
        "colors": ["white", "white", "gray"],
        "images": ["https://cdn.test/cars/corolla.jpg"],
        "description": "Comfortable family sedan.",
        "dailyPrices": [60, 58, 56, 54, 52, 50, 48, 45, 42, 38],
        "seats": 5,
        "odometer": 12000,
        "smallLuggage": 2,
        "largeLuggage": 1,
        "transmission": "automatic",
        "fuel": "hybrid",
        "vin": "jtdbr32e720123456",
        "engineNumber": "2zr-123456",
        "fleetJoinedAt": "2023-01-15",
        "status": "available",
        "inspectionValidUntil": "2026-01-15",
        "tires": "all_season",
    }
    form.update(overrides)
    return form


@pytest.fixture
def car_form():
    return _car_form


@pytest.fixture
def make_car(db):
    def _make(**values):
        car = Car(
            id=values.pop("id", str(uuid.uuid4())),
            license_plate=values.pop("license_plate", "XYZ-987"),
            manufacturer=values.pop("manufacturer", "Skoda"),
            model=values.pop("model", "Octavia"),
            year=2021,
            category="medium",
            body_type="wagon",
            fuel="diesel",
            transmission="manual",
            seats=5,
            status=values.pop("status", "available"),
            tires="summer",
            vin="TMBJJ7NE1L0123456",
            engine_number="DFG123456",
            daily_prices=[50] * 10,
            images=values.pop("images", ["https://cdn.test/cars/octavia.jpg"]),
            first_registration=datetime(2021, 5, 1, tzinfo=timezone.utc),
            fleet_joined_at=datetime(2021, 6, 1, tzinfo=timezone.utc),
            inspection_valid_until=datetime(2026, 6, 1, tzinfo=timezone.utc),
            **values,
        )
        db.add(car)
        db.commit()
        return car
    return _make


@pytest.fixture
def admin(db):
    user = User(
        id=str(uuid.uuid4()),
        email="admin@test",
        full_name="Eva Admin",
        role="admin",
        password_hash=hash_password("admin-pass"),
        is_active=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def storage():
    return StorageClient(StorageConfig(url="", service_role_key=""))


@pytest.fixture
def client(database, mailer, logo, storage):
    from fleet_admin.main import app

    # lifespan is not run; the test doubles take the place of the real resources
    app.state.db = database
    app.state.mailer = mailer
    app.state.logo = logo
    app.state.storage = storage
    return TestClient(app)


@pytest.fixture
def auth_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin.id)}"}


@pytest.fixture
def write_spy(monkeypatch):
    """Counts booking writes; each entry is the values of one write."""
    from fleet_admin.services import booking_service

    calls: list[dict] = []
    real = booking_service.write_booking

    def spy(db, booking, **values):
        calls.append(values)
        return real(db, booking, **values)

    monkeypatch.setattr(booking_service, "write_booking", spy)
    return calls


@pytest.fixture
def broken_writes(monkeypatch):
    """Make every booking write fail like a lost database connection."""
    from sqlalchemy.exc import OperationalError
    from fleet_admin.services import booking_service

    def fail(db, booking, **values):
        raise OperationalError("UPDATE rent_requests", {}, Exception("connection lost"))

    monkeypatch.setattr(booking_service, "write_booking", fail)


@pytest.fixture
def broken_log_update(db, mailer, monkeypatch):
    """Fail the first commit made after the mailer has sent, i.e. the email log update."""
    from sqlalchemy.exc import OperationalError

    real_commit = db.commit
    failed: list[bool] = []

    def commit():
        if mailer.sent and not failed:
            failed.append(True)
            raise OperationalError("UPDATE email_logs", {}, Exception("connection lost"))
        real_commit()

    monkeypatch.setattr(db, "commit", commit)
    return failed
