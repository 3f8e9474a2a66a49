import uuid
from datetime import datetime, timezone

import structlog
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_admin.models.car import Car, Color
from fleet_admin.schemas.car import CarIn, CAR_STATUS_AVAILABLE, CAR_STATUS_INACTIVE, field_errors
from fleet_admin.schemas.common import ActionResult
from fleet_admin.services import messages
from fleet_admin.services.revalidate import InvalidationBus

log = structlog.get_logger(__name__)

CARS_PATH = "/cars"


def _colors(db: Session, names: list[str]) -> list[Color]:
    """Existing colors by name, creating the missing ones."""
    existing = {c.name: c for c in db.scalars(select(Color).where(Color.name.in_(names)))}
    out = []
    for name in dict.fromkeys(names):
        color = existing.get(name)
        if color is None:
            color = Color(name=name)
            db.add(color)
        out.append(color)
    return out


def _apply(db: Session, car: Car, data: CarIn) -> None:
    car.license_plate = data.licensePlate
    car.manufacturer = data.manufacturer
    car.model = data.model
    car.year = data.year
    car.category = data.category
    car.body_type = data.bodyType
    car.fuel = data.fuel
    car.transmission = data.transmission
    car.seats = data.seats
    car.small_luggage = data.smallLuggage
    car.large_luggage = data.largeLuggage
    car.status = data.status
    car.tires = data.tires
    car.vin = data.vin
    car.engine_number = data.engineNumber
    car.odometer = data.odometer
    car.daily_prices = list(data.dailyPrices)
    car.monthly_prices = list(data.monthlyPrices) if data.monthlyPrices else None
    car.images = list(data.images)
    car.description = data.description
    car.service_notes = data.serviceNotes
    car.notes = data.notes
    car.known_damages = data.knownDamages
    car.first_registration = data.firstRegistration
    car.fleet_joined_at = data.fleetJoinedAt
    car.inspection_valid_until = data.inspectionValidUntil
    car.next_service_at = data.nextServiceAt
    car.colors = _colors(db, data.colors)


def _validate(values: dict) -> tuple[CarIn | None, ActionResult | None]:
    try:
        return CarIn.model_validate(values or {}), None
    except ValidationError as exc:
        return None, ActionResult.fail(messages.INVALID_CAR_FORM, fieldErrors=field_errors(exc))


def _changed(bus: InvalidationBus | None, car_id: str | None) -> None:
    if bus is None:
        return
    bus.invalidate(CARS_PATH)
    bus.revalidate_public(carId=car_id)


def _find(db: Session, license_plate: str) -> Car | None:
    plate = (license_plate or "").strip().upper()
    if not plate:
        return None
    return db.scalars(select(Car).where(Car.license_plate == plate)).first()


def create_car(db: Session, values: dict, bus: InvalidationBus | None = None) -> ActionResult:
    data, error = _validate(values)
    if error:
        return error

    car = Car(id=str(uuid.uuid4()))
    try:
        _apply(db, car, data)
        db.add(car)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("car.create_failed", license_plate=data.licensePlate, error=str(exc))
        return ActionResult.fail(messages.CAR_CREATE_FAILED)

    _changed(bus, car.id)
    log.info("car.created", car_id=car.id, license_plate=car.license_plate)
    return ActionResult.ok(messages.CAR_CREATED, id=car.id)


def update_car(db: Session, original_license_plate: str, values: dict, bus: InvalidationBus | None = None) -> ActionResult:
    data, error = _validate(values)
    if error:
        return error

    try:
        car = _find(db, original_license_plate)
        if car is None:
            return ActionResult.fail(messages.CAR_NOT_FOUND)
        _apply(db, car, data)
        car.updated_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("car.update_failed", license_plate=original_license_plate, error=str(exc))
        return ActionResult.fail(messages.CAR_UPDATE_FAILED)

    _changed(bus, car.id)
    log.info("car.updated", car_id=car.id, license_plate=car.license_plate)
    return ActionResult.ok(messages.CAR_UPDATED, id=car.id)


def _set_status(db: Session, license_plate: str, status: str, ok: str, failed: str, bus: InvalidationBus | None) -> ActionResult:
    try:
        car = _find(db, license_plate)
        if car is None:
            return ActionResult.fail(messages.CAR_NOT_FOUND)
        car.status = status
        car.updated_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("car.status_update_failed", license_plate=license_plate, status=status, error=str(exc))
        return ActionResult.fail(failed)

    _changed(bus, car.id)
    log.info("car.status_changed", car_id=car.id, status=status)
    return ActionResult.ok(ok, status=status)


def deactivate_car(db: Session, license_plate: str, bus: InvalidationBus | None = None) -> ActionResult:
    return _set_status(db, license_plate, CAR_STATUS_INACTIVE, messages.CAR_DEACTIVATED, messages.CAR_DEACTIVATE_FAILED, bus)


def activate_car(db: Session, license_plate: str, bus: InvalidationBus | None = None) -> ActionResult:
    return _set_status(db, license_plate, CAR_STATUS_AVAILABLE, messages.CAR_ACTIVATED, messages.CAR_ACTIVATE_FAILED, bus)


def delete_car(db: Session, license_plate: str, bus: InvalidationBus | None = None) -> ActionResult:
    try:
        car = _find(db, license_plate)
        if car is None:
            return ActionResult.fail(messages.CAR_NOT_FOUND)
        car_id = car.id
        db.delete(car)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.error("car.delete_failed", license_plate=license_plate, error=str(exc))
        return ActionResult.fail(messages.CAR_DELETE_FAILED)

    _changed(bus, car_id)
    log.info("car.deleted", car_id=car_id, license_plate=license_plate)
    return ActionResult.ok(messages.CAR_DELETED)
