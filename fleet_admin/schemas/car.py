import re
from datetime import datetime, timezone
from typing import Any, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

CAR_CATEGORIES = ("small", "medium", "large", "premium", "minibus")
CAR_BODY_TYPES = ("sedan", "hatchback", "suv", "wagon", "van", "pickup", "coupe")
CAR_FUELS = ("petrol", "diesel", "electric", "hybrid")
CAR_TRANSMISSIONS = ("manual", "automatic")
CAR_COLORS = ("milky_beige", "white", "silver_metal", "blue", "metal_blue", "gray")
CAR_STATUSES = ("available", "rented", "maintenance", "inactive", "reserved")
CAR_TIRE_TYPES = ("summer", "winter", "all_season")

CAR_STATUS_AVAILABLE = "available"
CAR_STATUS_INACTIVE = "inactive"

# Daily price i applies from RENTAL_DAY_THRESHOLDS[i] rental days upward.
RENTAL_DAY_THRESHOLDS = (1, 2, 3, 4, 5, 6, 7, 10, 14, 30)
MONTH_COUNT = 12

_PLATE = re.compile(r"^[A-Z0-9-]+$", re.IGNORECASE)

_ENUMS = {
    "category": (CAR_CATEGORIES, "Válassz kategóriát.", "Érvénytelen kategória."),
    "bodyType": (CAR_BODY_TYPES, "Válassz kivitelt.", "Érvénytelen kivitel."),
    "transmission": (CAR_TRANSMISSIONS, "Válassz váltót.", "Érvénytelen váltótípus."),
    "fuel": (CAR_FUELS, "Válassz üzemanyagot.", "Érvénytelen üzemanyag típus."),
    "status": (CAR_STATUSES, "Válassz státuszt.", "Érvénytelen státusz."),
    "tires": (CAR_TIRE_TYPES, "Válassz gumitípust.", "Érvénytelen gumitípus."),
}

# field -> (label, minimum, upper bound or None)
_INTEGERS = {
    "year": ("Évjárat", 1980, datetime.now().year + 1),
    "seats": ("Szállítható személyek száma", 1, None),
    "odometer": ("Kilométeróra állás", 0, None),
    "smallLuggage": ("Kisméretű csomagok", 0, None),
    "largeLuggage": ("Nagyméretű csomagok", 0, None),
}

_REQUIRED_DATES = {
    "firstRegistration": "Első forgalomba helyezés",
    "fleetJoinedAt": "Flottába vétel dátuma",
    "inspectionValidUntil": "Műszaki érvényesség",
}

_NOTES = {
    "serviceNotes": "Legfeljebb 1000 karakteres leírás legyen.",
    "notes": "Legfeljebb 1000 karakteres megjegyzés legyen.",
    "knownDamages": "Legfeljebb 1000 karakteres leírás legyen.",
}


def _invalid(message: str) -> PydanticCustomError:
    return PydanticCustomError("car_form", message)


def _to_int(value: Any, label: str, minimum: int) -> int:
    if isinstance(value, bool):
        raise _invalid(f"{label} csak szám lehet.")
    if isinstance(value, str):
        value = value.strip() or 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise _invalid(f"{label} csak szám lehet.")
    if not number.is_integer():
        raise _invalid(f"{label} egész szám legyen.")
    if number < minimum:
        raise _invalid(f"{label} minimum {minimum}.")
    return int(number)


def _parse_date(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _is_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


class CarIn(BaseModel):
    """Car form, validated and normalized for storage.

    Every field is checked in a ``before`` validator so each problem surfaces
    as one Hungarian message per field.
    """
    model_config = ConfigDict(validate_default=True, extra="ignore")

    licensePlate: str = ""
    category: str = ""
    manufacturer: str = ""
    model: str = ""
    year: int = 0
    firstRegistration: Optional[datetime] = None
    bodyType: str = ""
    colors: List[str] = []
    images: List[str] = []
    description: Optional[str] = None
    dailyPrices: List[int] = []
    monthlyPrices: Optional[List[int]] = None
    seats: int = 0
    odometer: int = 0
    smallLuggage: int = 0
    largeLuggage: int = 0
    transmission: str = ""
    fuel: str = ""
    vin: str = ""
    engineNumber: str = ""
    fleetJoinedAt: Optional[datetime] = None
    status: str = ""
    inspectionValidUntil: Optional[datetime] = None
    tires: str = ""
    nextServiceAt: Optional[datetime] = None
    serviceNotes: Optional[str] = None
    notes: Optional[str] = None
    knownDamages: Optional[str] = None

    @field_validator("licensePlate", mode="before")
    @classmethod
    def _license_plate(cls, v):
        plate = _text(v)
        if len(plate) < 5:
            raise _invalid("Adj meg legalább 5 karakteres rendszámot.")
        if not _PLATE.match(plate):
            raise _invalid("Csak betű, szám és kötőjel szerepelhet a rendszámban.")
        return plate.upper()

    @field_validator("manufacturer", mode="before")
    @classmethod
    def _manufacturer(cls, v):
        if len(_text(v)) < 2:
            raise _invalid("A gyártó neve legalább 2 karakter legyen.")
        return _text(v)

    @field_validator("model", mode="before")
    @classmethod
    def _model(cls, v):
        if len(_text(v)) < 2:
            raise _invalid("Add meg a típus nevét.")
        return _text(v)

    @field_validator("vin", mode="before")
    @classmethod
    def _vin(cls, v):
        if len(_text(v)) < 10:
            raise _invalid("Adj meg legalább 10 karakteres alvázszámot.")
        return _text(v).upper()

    @field_validator("engineNumber", mode="before")
    @classmethod
    def _engine_number(cls, v):
        if len(_text(v)) < 5:
            raise _invalid("Adj meg motorszámot.")
        return _text(v).upper()

    @field_validator(*_ENUMS, mode="before")
    @classmethod
    def _enum(cls, v, info: ValidationInfo):
        allowed, required, invalid = _ENUMS[info.field_name]
        if v is None or v == "":
            raise _invalid(required)
        if v not in allowed:
            raise _invalid(invalid)
        return v

    @field_validator(*_INTEGERS, mode="before")
    @classmethod
    def _integer(cls, v, info: ValidationInfo):
        label, minimum, upper = _INTEGERS[info.field_name]
        number = _to_int(v, label, minimum)
        if upper is not None and number > upper:
            raise _invalid("Érvénytelen évjárat.")
        return number

    @field_validator(*_REQUIRED_DATES, mode="before")
    @classmethod
    def _required_date(cls, v, info: ValidationInfo):
        label = _REQUIRED_DATES[info.field_name]
        if v is None or (isinstance(v, str) and not v.strip()):
            raise _invalid(f"{label} megadása kötelező.")
        parsed = _parse_date(v)
        if parsed is None:
            raise _invalid(f"{label} formátuma hibás.")
        return parsed

    @field_validator("nextServiceAt", mode="before")
    @classmethod
    def _next_service(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        parsed = _parse_date(v)
        if parsed is None:
            raise _invalid("Adj meg érvényes dátumot.")
        return parsed

    @field_validator("colors", mode="before")
    @classmethod
    def _colors(cls, v):
        values = [c for c in (v or []) if c]
        if not values:
            raise _invalid("Válassz legalább egy színt.")
        if any(c not in CAR_COLORS for c in values):
            raise _invalid("Érvénytelen szín.")
        return list(dict.fromkeys(values))

    @field_validator("images", mode="before")
    @classmethod
    def _images(cls, v):
        values = list(v or [])
        if not values:
            raise _invalid("Adj meg legalább egy képet.")
        if len(values) > 3:
            raise _invalid("Legfeljebb 3 képet tölthetsz fel.")
        if not all(_is_url(url) for url in values):
            raise _invalid("Adj meg érvényes kép URL-t.")
        return [url.strip() for url in values]

    @field_validator("dailyPrices", mode="before")
    @classmethod
    def _daily_prices(cls, v):
        # the form posts day1..day10; API clients send a plain list
        if isinstance(v, dict):
            v = [v.get(f"day{i + 1}") for i in range(len(RENTAL_DAY_THRESHOLDS))]
        values = list(v or [])
        if len(values) != len(RENTAL_DAY_THRESHOLDS):
            raise _invalid(f"Pontosan {len(RENTAL_DAY_THRESHOLDS)} napi árat adj meg.")
        return [
            _to_int(price, f"{days} naptól (EUR)", 1)
            for days, price in zip(RENTAL_DAY_THRESHOLDS, values)
        ]

    @field_validator("monthlyPrices", mode="before")
    @classmethod
    def _monthly_prices(cls, v):
        if v is None or v == []:
            return None
        values = list(v)
        if len(values) != MONTH_COUNT:
            raise _invalid(f"Pontosan {MONTH_COUNT} havi árat adj meg.")
        return [_to_int(price, f"{i + 1}. havi ár (EUR)", 1) for i, price in enumerate(values)]

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        text = _text(v)
        if len(text) > 1000:
            raise _invalid("A leírás legfeljebb 1000 karakter lehet.")
        if text and len(text) < 10:
            raise _invalid("A leírás legalább 10 karakter legyen vagy maradjon üresen.")
        return text or None

    @field_validator(*_NOTES, mode="before")
    @classmethod
    def _note(cls, v, info: ValidationInfo):
        text = _text(v)
        if len(text) > 1000:
            raise _invalid(_NOTES[info.field_name])
        return text or None


def field_errors(exc) -> dict[str, str]:
    """First message per field from a pydantic ValidationError."""
    out: dict[str, str] = {}
    for err in exc.errors():
        key = ".".join(str(p) for p in err.get("loc", ())) or "__all__"
        out.setdefault(key, err.get("msg", ""))
    return out


class CarOut(BaseModel):
    id: str
    licensePlate: str
    manufacturer: str
    model: str
    label: str
    year: int
    category: str
    bodyType: str
    fuel: str
    transmission: str
    seats: int
    smallLuggage: int = 0
    largeLuggage: int = 0
    status: str
    tires: str
    vin: str
    engineNumber: str
    odometer: int = 0
    colors: List[str] = []
    images: List[str] = []
    dailyPrices: List[int] = []
    monthlyPrices: Optional[List[int]] = None
    description: Optional[str] = None
    serviceNotes: Optional[str] = None
    notes: Optional[str] = None
    knownDamages: Optional[str] = None
    firstRegistration: Optional[str] = None
    fleetJoinedAt: Optional[str] = None
    inspectionValidUntil: Optional[str] = None
    nextServiceAt: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
