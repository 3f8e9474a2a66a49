from typing import Any
from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from fleet_admin.db.session import get_db
from fleet_admin.models.user import User
from fleet_admin.schemas.car import CarOut
from fleet_admin.services import car_service, data_access
from fleet_admin.services.audit_service import audit_result
from fleet_admin.services.revalidate import InvalidationBus
from fleet_admin.api.deps import require_admin, get_bus, finish

router = APIRouter(tags=["cars"])

# Car forms are posted as raw objects so validation errors come back as
# Hungarian fieldErrors in the action result rather than as a 422.

@router.get("/cars", response_model=list[CarOut])
def list_cars(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    return data_access.get_cars(db)

@router.get("/cars/{car_id}", response_model=CarOut)
def get_car(car_id: str, db: Session = Depends(get_db), _: User = Depends(require_admin)):
    car = data_access.get_car_by_id(db, car_id)
    if not car:
        raise HTTPException(status_code=404, detail="Not found")
    return car

@router.post("/cars")
def create_car(
    response: Response,
    background: BackgroundTasks,
    values: dict[str, Any] = Body(default_factory=dict),
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    bus: InvalidationBus = Depends(get_bus),
):
    result = car_service.create_car(db, values, bus)
    audit_result(db, me.id, "CAR_CREATED", "car", getattr(result, "id", None) or "", result)
    return finish(result, bus, response, background)

@router.put("/cars/{license_plate}")
def update_car(
    license_plate: str,
    response: Response,
    background: BackgroundTasks,
    values: dict[str, Any] = Body(default_factory=dict),
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    bus: InvalidationBus = Depends(get_bus),
):
    result = car_service.update_car(db, license_plate, values, bus)
    audit_result(db, me.id, "CAR_UPDATED", "car", license_plate, result)
    return finish(result, bus, response, background)

@router.post("/cars/{license_plate}/deactivate")
def deactivate_car(
    license_plate: str,
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    bus: InvalidationBus = Depends(get_bus),
):
    result = car_service.deactivate_car(db, license_plate, bus)
    audit_result(db, me.id, "CAR_DEACTIVATED", "car", license_plate, result)
    return finish(result, bus, response, background)

@router.post("/cars/{license_plate}/activate")
def activate_car(
    license_plate: str,
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    bus: InvalidationBus = Depends(get_bus),
):
    result = car_service.activate_car(db, license_plate, bus)
    audit_result(db, me.id, "CAR_ACTIVATED", "car", license_plate, result)
    return finish(result, bus, response, background)

@router.delete("/cars/{license_plate}")
def delete_car(
    license_plate: str,
    response: Response,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    me: User = Depends(require_admin),
    bus: InvalidationBus = Depends(get_bus),
):
    result = car_service.delete_car(db, license_plate, bus)
    audit_result(db, me.id, "CAR_DELETED", "car", license_plate, result)
    return finish(result, bus, response, background)
