import requests

from fleet_admin.services import revalidate
from fleet_admin.services.revalidate import InvalidationBus, trigger_public_revalidate


class _Response:
    def __init__(self, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text


def test_bus_dedupes_paths_in_order():
    bus = InvalidationBus()
    bus.invalidate("/", "/b-1")
    bus.invalidate("/cars", "/")

    assert bus.paths == ["/", "/b-1", "/cars"]
    assert bus.header_value == "/,/b-1,/cars"


def test_bus_collects_public_payloads():
    bus = InvalidationBus()
    bus.revalidate_public(carId="car-1")
    bus.revalidate_public(carId=None)
    assert bus.public_payloads == [{"carId": "car-1"}, {"carId": None}]


def test_trigger_skipped_without_config(monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("must not post")

    monkeypatch.setattr(revalidate.requests, "post", boom)
    assert trigger_public_revalidate({"carId": "c"}, url="", secret="s") is False
    assert trigger_public_revalidate({"carId": "c"}, url="https://site.test/api/revalidate", secret="") is False


def test_trigger_posts_with_token(monkeypatch):
    calls = []

    def post(url, json=None, headers=None, timeout=None):
        calls.append((url, json, headers))
        return _Response(200)

    monkeypatch.setattr(revalidate.requests, "post", post)

    assert trigger_public_revalidate({"carId": "c-1"}, url="https://site.test/api/revalidate", secret="s3cret") is True
    assert calls == [("https://site.test/api/revalidate", {"carId": "c-1"}, {"x-revalidate-token": "s3cret"})]


def test_trigger_reports_error_status(monkeypatch):
    monkeypatch.setattr(revalidate.requests, "post", lambda *a, **kw: _Response(401, "bad token"))
    assert trigger_public_revalidate({}, url="https://site.test/r", secret="s") is False


def test_trigger_never_raises(monkeypatch):
    def post(*args, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(revalidate.requests, "post", post)
    assert trigger_public_revalidate({}, url="https://site.test/r", secret="s") is False
