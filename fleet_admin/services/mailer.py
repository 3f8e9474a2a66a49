from datetime import datetime, timezone
import smtplib
from email.message import EmailMessage
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import uuid
import requests
import structlog

from fleet_admin.core.config import Settings
from fleet_admin.models.email_log import EmailLog

log = structlog.get_logger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class Mailer:
    """Outbound mail transport, built once from settings at startup.

    SendGrid's HTTP API is used when an API key is configured, SMTP otherwise.
    SMTP connections are opened per message; the SendGrid HTTP session is kept
    for the life of the process and released by ``close``.
    """

    def __init__(
        self,
        host: str = "",
        port: int = 0,
        user: str = "",
        password: str = "",
        from_address: str = "",
        reply_to: str = "",
        sendgrid_api_key: str = "",
        timeout: int = 10,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_address = from_address
        self.reply_to = reply_to
        self.sendgrid_api_key = sendgrid_api_key
        self.timeout = timeout
        self._http: requests.Session | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        return cls(
            host=settings.MAIL_HOST,
            port=settings.MAIL_PORT,
            user=settings.MAIL_USER,
            password=settings.MAIL_PASS,
            from_address=settings.from_address,
            reply_to=settings.reply_to,
            sendgrid_api_key=settings.SENDGRID_API_KEY,
        )

    @property
    def has_smtp_config(self) -> bool:
        return bool(self.host and self.port and self.user and self.password)

    @property
    def is_configured(self) -> bool:
        return bool((self.sendgrid_api_key or self.has_smtp_config) and self.from_address)

    def send(self, to_email: str, subject: str, text: str, html: str, reply_to: str | None = None) -> None:
        """Send a multipart/alternative message. Raises on any transport failure."""
        reply_to = reply_to or self.reply_to
        if self.sendgrid_api_key:
            self._send_via_sendgrid(to_email, subject, text, html, reply_to)
            return

        msg = EmailMessage()
        msg["From"] = self.from_address
        msg["To"] = to_email
        msg["Subject"] = subject
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")

        if self.port == 465:
            smtp = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        with smtp:
            if self.port != 465:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(msg)

    def _send_via_sendgrid(self, to_email: str, subject: str, text: str, html: str, reply_to: str | None):
        payload = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {"email": self.from_address},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": text},
                {"type": "text/html", "value": html},
            ],
        }
        if reply_to:
            payload["reply_to"] = {"email": reply_to}

        if self._http is None:
            self._http = requests.Session()
        r = self._http.post(
            SENDGRID_URL,
            json=payload,
            headers={"Authorization": f"Bearer {self.sendgrid_api_key}"},
            timeout=20,
        )
        if r.status_code >= 400:
            raise RuntimeError(f"SendGrid error {r.status_code}: {r.text}")

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None


def deliver(
    db: Session,
    mailer: Mailer,
    to_email: str,
    subject: str,
    text: str,
    html: str,
    kind: str = "",
    related_id: str = "",
) -> str:
    """Send through ``mailer`` and record the attempt in email_logs.

    The log row is committed before sending so a crash mid-send still leaves a
    ``queued`` trace. Transport errors are recorded and re-raised.
    """
    eid = str(uuid.uuid4())
    db.add(EmailLog(id=eid, to_email=to_email, subject=subject[:255], kind=kind, status="queued", related_id=related_id))
    db.commit()

    try:
        mailer.send(to_email, subject, text, html)
    except Exception as exc:
        entry = db.get(EmailLog, eid)
        if entry:
            entry.status = "failed"
            entry.error = str(exc)[:2000]
            db.commit()
        log.warning("mail.send_failed", kind=kind, related_id=related_id, error=str(exc))
        raise

    # the message is out; a failed log update must not read as a failed send
    try:
        entry = db.get(EmailLog, eid)
        if entry:
            entry.status = "sent"
            entry.sent_at = datetime.now(timezone.utc)
            db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("mail.log_update_failed", email_log_id=eid, kind=kind, related_id=related_id, error=str(exc))
    log.info("mail.sent", kind=kind, related_id=related_id)
    return eid
