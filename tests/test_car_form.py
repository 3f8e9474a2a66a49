from datetime import datetime

import pytest
from pydantic import ValidationError

from fleet_admin.schemas.car import CarIn, field_errors


def _errors(values: dict) -> dict:
    with pytest.raises(ValidationError) as exc:
        CarIn.model_validate(values)
    return field_errors(exc.value)


def test_valid_form_is_normalized(car_form):
    car = CarIn.model_validate(car_form(description="  ", monthlyPrices=[], notes="  keep me  "))
    assert car.licensePlate == "ABC-123"
    assert car.vin == "JTDBR32E720123456"
    assert car.engineNumber == "2ZR-123456"
    assert car.colors == ["white", "gray"]
    assert car.description is None
    assert car.monthlyPrices is None
    assert car.notes == "keep me"
    assert car.firstRegistration.year == 2022
    assert car.firstRegistration.tzinfo is not None


def test_numbers_posted_as_text(car_form):
    car = CarIn.model_validate(car_form(
        year="2022", seats="7", odometer="",
        dailyPrices={f"day{i}": str(70 - i) for i in range(1, 11)},
    ))
    assert car.seats == 7
    assert car.odometer == 0
    assert car.dailyPrices == [69, 68, 67, 66, 65, 64, 63, 62, 61, 60]


@pytest.mark.parametrize("field, value, message", [
    ("licensePlate", "ab", "Adj meg legalább 5 karakteres rendszámot."),
    ("licensePlate", "AB 123", "Csak betű, szám és kötőjel szerepelhet a rendszámban."),
    ("manufacturer", "T", "A gyártó neve legalább 2 karakter legyen."),
    ("model", "", "Add meg a típus nevét."),
    ("vin", "123", "Adj meg legalább 10 karakteres alvázszámot."),
    ("engineNumber", "12", "Adj meg motorszámot."),
    ("year", 1979, "Évjárat minimum 1980."),
    ("year", datetime.now().year + 2, "Érvénytelen évjárat."),
    ("seats", "2.5", "Szállítható személyek száma egész szám legyen."),
    ("seats", "sok", "Szállítható személyek száma csak szám lehet."),
    ("odometer", -1, "Kilométeróra állás minimum 0."),
    ("largeLuggage", -2, "Nagyméretű csomagok minimum 0."),
    ("category", "", "Válassz kategóriát."),
    ("category", "spaceship", "Érvénytelen kategória."),
    ("bodyType", "tank", "Érvénytelen kivitel."),
    ("fuel", None, "Válassz üzemanyagot."),
    ("transmission", "cvt", "Érvénytelen váltótípus."),
    ("status", "lost", "Érvénytelen státusz."),
    ("tires", "studded", "Érvénytelen gumitípus."),
    ("colors", [], "Válassz legalább egy színt."),
    ("colors", ["pink"], "Érvénytelen szín."),
    ("images", [], "Adj meg legalább egy képet."),
    ("images", ["https://cdn.test/1.jpg"] * 4, "Legfeljebb 3 képet tölthetsz fel."),
    ("images", ["cdn.test/1.jpg"], "Adj meg érvényes kép URL-t."),
    ("dailyPrices", [50] * 9, "Pontosan 10 napi árat adj meg."),
    ("dailyPrices", [0] + [50] * 9, "1 naptól (EUR) minimum 1."),
    ("monthlyPrices", [900] * 11, "Pontosan 12 havi árat adj meg."),
    ("description", "too short", "A leírás legalább 10 karakter legyen vagy maradjon üresen."),
    ("description", "x" * 1001, "A leírás legfeljebb 1000 karakter lehet."),
    ("notes", "x" * 1001, "Legfeljebb 1000 karakteres megjegyzés legyen."),
    ("firstRegistration", "", "Első forgalomba helyezés megadása kötelező."),
    ("inspectionValidUntil", "soon", "Műszaki érvényesség formátuma hibás."),
    ("nextServiceAt", "later", "Adj meg érvényes dátumot."),
])
def test_field_messages(car_form, field, value, message):
    assert _errors(car_form(**{field: value}))[field] == message


def test_every_problem_reported_once_per_field(car_form):
    errors = _errors(car_form(licensePlate="", year="x", images=None, colors=None))
    assert set(errors) == {"licensePlate", "year", "images", "colors"}


def test_missing_fields_are_reported():
    errors = _errors({})
    for field in ("licensePlate", "manufacturer", "category", "dailyPrices", "images", "firstRegistration", "tires"):
        assert field in errors
