from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from fleet_admin.db.session import get_db
from fleet_admin.models.user import User
from fleet_admin.schemas.quote import BookingRequestEmailIn, QuoteOut
from fleet_admin.services import data_access, quote_service
from fleet_admin.services.audit_service import audit_result
from fleet_admin.services.mailer import Mailer
from fleet_admin.services.revalidate import InvalidationBus
from fleet_admin.emails.logo import LogoResolver
from fleet_admin.api.deps import require_admin, get_mailer, get_logo, get_bus, finish

router = APIRouter(tags=["quotes"])

@router.get("/quotes", response_model=list[QuoteOut])
def list_quotes(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return data_access.get_quotes(db)

@router.get("/quotes/{quote_id}", response_model=QuoteOut)
def get_quote(quote_id: str, db: Session = Depends(get_db), _: User = Depends(require_admin)):
    quote = data_access.get_quote_by_id(db, quote_id)
    if not quote:
        raise HTTPException(status_code=404, detail="Not found")
    return quote

@router.post("/quotes/{quote_id}/booking-request-email")
def send_booking_request(
    quote_id: str,
    body: BookingRequestEmailIn,
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    mailer: Mailer = Depends(get_mailer),
    logo: LogoResolver = Depends(get_logo),
    bus: InvalidationBus = Depends(get_bus),
):
    if not (body.adminName or "").strip():
        body = body.model_copy(update={"adminName": me.full_name or None})
    result = quote_service.send_booking_request_email(db, mailer, logo, quote_id, body, bus)
    audit_result(db, me.id, "QUOTE_REQUEST_SENT", "quote", quote_id, result)
    return finish(result, bus, response, background)
