# Admin-facing action outcomes. The dashboard is Hungarian-only.

MISSING_BOOKING_ID = "Hiányzik a foglalás azonosítója."
BOOKING_NOT_FOUND = "A foglalás nem található."
QUOTE_NOT_FOUND = "Az ajánlatkérés nem található."

BOOKING_ALREADY_REGISTERED = "A foglalás már rögzítve van."
BOOKING_NOT_REGISTERED = "A foglalás még nem rögzített státuszú."
BOOKING_REGISTERED = "A foglalást rögzítettük."
BOOKING_UNREGISTERED = "A rögzített státuszt visszaállítottuk."
STATUS_UPDATE_FAILED = "Nem sikerült módosítani a státuszt."

PRICING_SAVED = "Díjak elmentve."
PRICING_SAVE_FAILED = "Nem sikerült elmenteni a díjakat."

MISSING_SIGNER = "Add meg az aláíró nevét az e-mail küldése előtt."
BOOKING_NO_RECIPIENT = "Ehhez a foglaláshoz nincs megadható e-mail cím."
QUOTE_NO_RECIPIENT = "Ehhez az ajánlatkéréshez nincs e-mail cím megadva."
QUOTE_NO_CAR = "Nincs autó társítva ehhez az ajánlatkéréshez."
MAILER_NOT_CONFIGURED = (
    "Az e-mail küldéséhez hiányzik a konfiguráció "
    "(MAIL_HOST/PORT/USER/PASS vagy BOOKING_EMAIL_FROM/EMAIL_FROM)."
)
SEND_FAILED = "Az e-mail küldése közben hiba történt. Próbáld meg később."
FINALIZATION_SENT = "Foglalás véglegesítő e-mail elküldve és státusz frissítve."
FINALIZATION_STATUS_FAILED = "Az e-mail elküldve, de a foglalás státuszát nem sikerült frissíteni."
REQUEST_STATUS_FAILED = "Az e-mail elküldve, de a státuszt nem sikerült frissíteni az adatbázisban."

INVALID_CAR_FORM = "Hibás adatok, kérjük ellenőrizd az űrlapot."
CAR_CREATED = "Az autó sikeresen felvételre került."
CAR_CREATE_FAILED = "Nem sikerült elmenteni az autót. Próbáld meg később."
CAR_UPDATED = "Az autó adatai frissültek."
CAR_UPDATE_FAILED = "Nem sikerült módosítani az autót. Próbáld meg később."
CAR_DEACTIVATED = "Az autó inaktiválva lett."
CAR_DEACTIVATE_FAILED = "Nem sikerült inaktiválni az autót. Próbáld meg később."
CAR_ACTIVATED = "Az autó aktiválva lett."
CAR_ACTIVATE_FAILED = "Nem sikerült aktiválni az autót. Próbáld meg később."
CAR_DELETED = "Az autó törlésre került."
CAR_DELETE_FAILED = "Nem sikerült törölni az autót. Próbáld meg később."
CAR_NOT_FOUND = "Az autó nem található."

MISSING_NOTIFICATION_ID = "Hiányzik az értesítés azonosítója."
NOTIFICATION_UPDATE_FAILED = "Nem sikerült frissíteni az értesítést."
NOTIFICATIONS_UPDATE_FAILED = "Nem sikerült frissíteni az értesítéseket."

UPLOAD_NOT_CONFIGURED = "Hiányzó Supabase környezeti változók."
UPLOAD_NO_FILES = "Nem érkezett fájl a kérésben."
UPLOAD_FAILED = "Nem sikerült feltölteni a fájlokat. Próbáld újra később."
