import requests
import structlog

from fleet_admin.core.config import settings

log = structlog.get_logger(__name__)

INVALIDATE_HEADER = "X-Invalidate"


class InvalidationBus:
    """Collects what an action changed, for one request.

    ``paths`` are dashboard views that must be refetched; the API hands them to
    the UI in the ``X-Invalidate`` header. ``public_payloads`` are revalidation
    requests for the public site, sent after the response.
    """

    def __init__(self):
        self.paths: list[str] = []
        self.public_payloads: list[dict] = []

    def invalidate(self, *paths: str) -> None:
        for path in paths:
            if path not in self.paths:
                self.paths.append(path)
        log.info("cache.invalidated", paths=list(paths))

    def revalidate_public(self, **payload) -> None:
        self.public_payloads.append(payload)

    @property
    def header_value(self) -> str:
        return ",".join(self.paths)


def trigger_public_revalidate(payload: dict | None = None, url: str | None = None, secret: str | None = None) -> bool:
    """Ask the public site to rebuild its car pages. Never raises.

    Skipped when the webhook URL or its secret is not configured.
    """
    url = settings.PUBLIC_SITE_REVALIDATE_URL if url is None else url
    secret = settings.PUBLIC_SITE_REVALIDATE_SECRET if secret is None else secret
    if not url or not secret:
        return False
    try:
        r = requests.post(
            url,
            json=payload or {},
            headers={"x-revalidate-token": secret},
            timeout=10,
        )
    except requests.RequestException as exc:
        log.error("public_revalidate.request_error", error=str(exc))
        return False
    if r.status_code >= 400:
        log.error("public_revalidate.failed", status=r.status_code, body=r.text[:500])
        return False
    return True
