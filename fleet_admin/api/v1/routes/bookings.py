from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from fleet_admin.db.session import get_db
from fleet_admin.models.user import User
from fleet_admin.schemas.booking import BookingOut, FinalizationEmailIn, PricingIn, RegisteredIn
from fleet_admin.services import booking_service, data_access
from fleet_admin.services.audit_service import audit_result
from fleet_admin.services.mailer import Mailer
from fleet_admin.services.revalidate import InvalidationBus
from fleet_admin.emails.logo import LogoResolver
from fleet_admin.api.deps import require_admin, get_mailer, get_logo, get_bus, finish

router = APIRouter(tags=["bookings"])

@router.get("/bookings", response_model=list[BookingOut])
def list_bookings(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return data_access.get_bookings(db)

@router.get("/bookings/by-quote/{quote_id}", response_model=BookingOut)
def booking_by_quote(quote_id: str, db: Session = Depends(get_db), _: User = Depends(require_admin)):
    booking = data_access.get_booking_by_quote_id(db, quote_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Not found")
    return booking

@router.get("/bookings/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: str, db: Session = Depends(get_db), _: User = Depends(require_admin)):
    booking = data_access.get_booking_by_id(db, booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Not found")
    return booking

@router.post("/bookings/{booking_id}/registered")
def set_registered(
    booking_id: str,
    body: RegisteredIn,
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    bus: InvalidationBus = Depends(get_bus),
):
    result = booking_service.set_booking_registered(db, booking_id, body.registered, bus)
    audit_result(db, me.id, "BOOKING_REGISTERED" if body.registered else "BOOKING_UNREGISTERED", "booking", booking_id, result)
    return finish(result, bus, response, background)

@router.put("/bookings/{booking_id}/pricing")
def save_pricing(
    booking_id: str,
    body: PricingIn,
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    bus: InvalidationBus = Depends(get_bus),
):
    result = booking_service.save_booking_pricing(db, booking_id, body.model_dump(), bus)
    audit_result(db, me.id, "BOOKING_PRICING_SAVED", "booking", booking_id, result)
    return finish(result, bus, response, background)

@router.post("/bookings/{booking_id}/finalization-email")
def send_finalization(
    booking_id: str,
    body: FinalizationEmailIn,
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    mailer: Mailer = Depends(get_mailer),
    logo: LogoResolver = Depends(get_logo),
    bus: InvalidationBus = Depends(get_bus),
):
    # the logged-in admin signs unless the form names someone else
    signer = body.signerName.strip() or me.full_name or ""
    result = booking_service.send_booking_finalization_email(db, mailer, logo, booking_id, signer, bus)
    audit_result(db, me.id, "BOOKING_FINALIZATION_SENT", "booking", booking_id, result)
    return finish(result, bus, response, background)

@router.post("/bookings/{booking_id}/confirmation-email")
def send_confirmation(
    booking_id: str,
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    mailer: Mailer = Depends(get_mailer),
    bus: InvalidationBus = Depends(get_bus),
):
    result = booking_service.send_booking_confirmation_email(db, mailer, booking_id)
    audit_result(db, me.id, "BOOKING_CONFIRMATION_SENT", "booking", booking_id, result)
    return finish(result, bus, response, background)
