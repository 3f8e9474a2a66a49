from sqlalchemy import func, select

from fleet_admin.models.car import Car, Color, car_colors
from fleet_admin.services import car_service, data_access, messages
from fleet_admin.services.revalidate import InvalidationBus


def test_create_car(db, car_form):
    bus = InvalidationBus()

    result = car_service.create_car(db, car_form(), bus)

    assert result.success == messages.CAR_CREATED
    car = data_access.get_car_by_license_plate(db, "ABC-123")
    assert car.id == result.id
    assert car.label == "Toyota Corolla"
    assert car.colors == ["gray", "white"]
    assert car.dailyPrices[0] == 60
    assert car.firstRegistration == "2022-03-01"
    assert bus.paths == ["/cars"]
    assert bus.public_payloads == [{"carId": car.id}]


def test_create_reuses_existing_colors(db, car_form):
    car_service.create_car(db, car_form())
    car_service.create_car(db, car_form(licensePlate="DEF-456", colors=["white", "blue"]))
    names = sorted(db.scalars(select(Color.name)))
    assert names == ["blue", "gray", "white"]


def test_create_invalid_form_returns_field_errors(db, car_form):
    bus = InvalidationBus()

    result = car_service.create_car(db, car_form(licensePlate="x", images=[]), bus)

    assert result.error == messages.INVALID_CAR_FORM
    errors = result.model_dump()["fieldErrors"]
    assert errors["licensePlate"] == "Adj meg legalább 5 karakteres rendszámot."
    assert errors["images"] == "Adj meg legalább egy képet."
    assert db.scalar(select(func.count(Car.id))) == 0
    assert bus.paths == [] and bus.public_payloads == []


def test_duplicate_plate_fails_cleanly(db, car_form):
    car_service.create_car(db, car_form())
    result = car_service.create_car(db, car_form(licensePlate="abc-123"))
    assert result.error == messages.CAR_CREATE_FAILED
    assert db.scalar(select(func.count(Car.id))) == 1


def test_update_car_by_original_plate(db, car_form):
    created = car_service.create_car(db, car_form())
    bus = InvalidationBus()

    result = car_service.update_car(db, "abc-123", car_form(licensePlate="NEW-777", model="Yaris", colors=["blue"]), bus)

    assert result.success == messages.CAR_UPDATED
    assert result.id == created.id
    car = data_access.get_car_by_id(db, created.id)
    assert car.licensePlate == "NEW-777"
    assert car.model == "Yaris"
    assert car.colors == ["blue"]
    assert car.updatedAt is not None
    assert bus.public_payloads == [{"carId": created.id}]


def test_update_unknown_car(db, car_form):
    assert car_service.update_car(db, "NOPE-1", car_form()).error == messages.CAR_NOT_FOUND


def test_update_validates_before_lookup(db, car_form):
    result = car_service.update_car(db, "NOPE-1", car_form(year=1900))
    assert result.error == messages.INVALID_CAR_FORM


def test_deactivate_and_activate(db, make_car):
    car = make_car(license_plate="XYZ-987")
    bus = InvalidationBus()

    off = car_service.deactivate_car(db, "xyz-987", bus)
    assert off.success == messages.CAR_DEACTIVATED
    assert off.status == "inactive"
    assert car.status == "inactive"

    on = car_service.activate_car(db, "XYZ-987", bus)
    assert on.success == messages.CAR_ACTIVATED
    assert car.status == "available"
    assert bus.paths == ["/cars"]
    assert len(bus.public_payloads) == 2


def test_status_change_on_unknown_car(db):
    assert car_service.deactivate_car(db, "NOPE-1").error == messages.CAR_NOT_FOUND
    assert car_service.activate_car(db, "").error == messages.CAR_NOT_FOUND


def test_delete_car_removes_color_links(db, car_form):
    created = car_service.create_car(db, car_form())
    bus = InvalidationBus()

    result = car_service.delete_car(db, "ABC-123", bus)

    assert result.success == messages.CAR_DELETED
    assert data_access.get_car_by_id(db, created.id) is None
    assert db.scalar(select(func.count()).select_from(car_colors)) == 0
    assert bus.public_payloads == [{"carId": created.id}]


def test_delete_unknown_car(db):
    assert car_service.delete_car(db, "NOPE-1").error == messages.CAR_NOT_FOUND
