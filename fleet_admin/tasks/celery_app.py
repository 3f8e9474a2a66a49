from urllib.parse import urlparse, urlunparse, parse_qs, urlencode

from celery import Celery
from celery.signals import worker_ready
from fleet_admin.core.config import settings

PROMOTE_TASK = "fleet_admin.tasks.jobs.promote_delayed_notifications"


def broker_url(url: str) -> str:
    """TLS Redis (rediss://) needs ssl_cert_reqs in the URL for Celery."""
    if not url or not url.strip().lower().startswith("rediss://"):
        return url
    parsed = urlparse(url)
    qs = parse_qs(parsed.query)
    qs.setdefault("ssl_cert_reqs", ["CERT_NONE"])
    return urlunparse(parsed._replace(query=urlencode(qs, doseq=True)))


celery = Celery(
    "fleet_admin",
    broker=broker_url(settings.REDIS_URL),
    backend=broker_url(settings.REDIS_URL),
    include=["fleet_admin.tasks.jobs"],
)

celery.conf.timezone = "Europe/Budapest"
celery.conf.beat_schedule = {
    # reminders are promoted within a minute of entering the 48 hour window
    "promote-delayed-notifications": {"task": PROMOTE_TASK, "schedule": 60.0},
}


@worker_ready.connect
def on_worker_ready(sender, **kwargs):
    from fleet_admin.core.logging import configure_logging
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    # catch up on reminders that came due while no worker was running
    celery.send_task(PROMOTE_TASK)
