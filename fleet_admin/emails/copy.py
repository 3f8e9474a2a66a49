"""Localized strings for customer-facing booking emails.

Locale codes follow the public site's URL prefixes (``cz``, ``se``, ``dk``
rather than the ISO ``cs``, ``sv``, ``da``).
"""
import math
from datetime import date, datetime, timezone

from fleet_admin.core.config import settings

SUPPORTED_LOCALES = ("en", "hu", "de", "ro", "fr", "es", "it", "sk", "cz", "se", "no", "dk", "pl")
FALLBACK_LOCALE = "en"

_LOCALE_ALIASES = {"cs": "cz", "sv": "se", "da": "dk", "nb": "no", "nn": "no"}


def normalize_locale(code: str | None, default: str | None = None) -> str:
    """Map a raw locale (``"HU"``, ``"de-AT"``, ``"sv_SE"``) onto a supported code."""
    fallback = (default or settings.DEFAULT_EMAIL_LOCALE or FALLBACK_LOCALE).lower()
    if fallback not in SUPPORTED_LOCALES:
        fallback = FALLBACK_LOCALE
    if not code or not isinstance(code, str):
        return fallback
    lowered = code.strip().lower()
    if lowered in SUPPORTED_LOCALES:
        return lowered
    primary = lowered.replace("_", "-").split("-", 1)[0]
    primary = _LOCALE_ALIASES.get(primary, primary)
    return primary if primary in SUPPORTED_LOCALES else fallback


# --- booking request (sent to a quote contact) -------------------------------

REQUEST_COPY = {
    "hu": {
        "subject": "Foglalás folytatása - Zodiac Rent a Car",
        "greeting": "Szia{name}!",
        "thank_you": "Köszönjük az ajánlatkérést a Zodiac Rent a Cartól.",
        "instructions": "A foglalás véglegesítéséhez kérjük töltsd ki az adataidat az alábbi linken.",
        "payment_note": "A fizetés készpénzzel vagy bankkártyával is lehetséges.",
        "cta": "Foglalás folytatása",
        "signature": "Üdvözlettel, Zodiac Rent a Car csapat",
        "success_message": "Foglaláskérés e-mail elküldve.",
    },
    "en": {
        "subject": "Complete your booking - Zodiac Rent a Car",
        "greeting": "Hi{name},",
        "thank_you": "Thank you for your enquiry with Zodiac Rent a Car.",
        "instructions": "To finalize your booking, please complete your details at the link below.",
        "payment_note": "Payment can be made in cash or by bank card.",
        "cta": "Continue booking",
        "signature": "Best regards, Zodiac Rent a Car team",
        "success_message": "Booking request email sent.",
    },
    "de": {
        "subject": "Buchung abschließen - Zodiac Rent a Car",
        "greeting": "Hallo{name},",
        "thank_you": "Vielen Dank für Ihre Anfrage bei Zodiac Rent a Car.",
        "instructions": "Um Ihre Buchung abzuschließen, füllen Sie bitte Ihre Daten unter folgendem Link aus.",
        "payment_note": "Die Zahlung ist bar oder mit Bankkarte möglich.",
        "cta": "Buchung fortsetzen",
        "signature": "Viele Grüße, Ihr Zodiac Rent a Car Team",
    },
    "ro": {
        "subject": "Finalizează rezervarea - Zodiac Rent a Car",
        "greeting": "Bună{name},",
        "thank_you": "Îți mulțumim pentru solicitarea trimisă către Zodiac Rent a Car.",
        "instructions": "Pentru a finaliza rezervarea, te rugăm să completezi datele la linkul de mai jos.",
        "payment_note": "Plata se poate face în numerar sau cu cardul bancar.",
        "cta": "Continuă rezervarea",
        "signature": "Cu stimă, Echipa Zodiac Rent a Car",
    },
    "fr": {
        "subject": "Finalisez votre réservation - Zodiac Rent a Car",
        "greeting": "Bonjour{name},",
        "thank_you": "Merci pour votre demande auprès de Zodiac Rent a Car.",
        "instructions": "Pour finaliser votre réservation, veuillez compléter vos informations via le lien ci-dessous.",
        "payment_note": "Le paiement peut se faire en espèces ou par carte bancaire.",
        "cta": "Continuer la réservation",
        "signature": "Cordialement, L'équipe Zodiac Rent a Car",
    },
    "es": {
        "subject": "Completa tu reserva - Zodiac Rent a Car",
        "greeting": "Hola{name},",
        "thank_you": "Gracias por tu solicitud en Zodiac Rent a Car.",
        "instructions": "Para finalizar la reserva, completa tus datos en el siguiente enlace.",
        "payment_note": "El pago puede realizarse en efectivo o con tarjeta bancaria.",
        "cta": "Continuar con la reserva",
        "signature": "Saludos, Equipo de Zodiac Rent a Car",
    },
    "it": {
        "subject": "Completa la tua prenotazione - Zodiac Rent a Car",
        "greeting": "Ciao{name},",
        "thank_you": "Grazie per la tua richiesta a Zodiac Rent a Car.",
        "instructions": "Per completare la prenotazione, inserisci i tuoi dati al link qui sotto.",
        "payment_note": "Il pagamento è possibile in contanti o con carta bancaria.",
        "cta": "Continua la prenotazione",
        "signature": "Un saluto, Il team di Zodiac Rent a Car",
    },
    "sk": {
        "subject": "Dokončite rezerváciu - Zodiac Rent a Car",
        "greeting": "Dobrý deň{name},",
        "thank_you": "Ďakujeme za dopyt v Zodiac Rent a Car.",
        "instructions": "Pre dokončenie rezervácie vyplňte svoje údaje na odkaze nižšie.",
        "payment_note": "Platiť je možné v hotovosti alebo bankovou kartou.",
        "cta": "Pokračovať v rezervácii",
        "signature": "S pozdravom, Tím Zodiac Rent a Car",
    },
    "cz": {
        "subject": "Dokončete rezervaci - Zodiac Rent a Car",
        "greeting": "Dobrý den{name},",
        "thank_you": "Děkujeme za poptávku u Zodiac Rent a Car.",
        "instructions": "Pro dokončení rezervace prosím vyplňte své údaje na odkazu níže.",
        "payment_note": "Platit lze v hotovosti nebo bankovní kartou.",
        "cta": "Pokračovat v rezervaci",
        "signature": "S pozdravem, Tým Zodiac Rent a Car",
    },
    "se": {
        "subject": "Slutför din bokning - Zodiac Rent a Car",
        "greeting": "Hej{name},",
        "thank_you": "Tack för din förfrågan hos Zodiac Rent a Car.",
        "instructions": "Fyll i dina uppgifter via länken nedan för att slutföra bokningen.",
        "payment_note": "Betalning kan ske kontant eller med bankkort.",
        "cta": "Fortsätt bokningen",
        "signature": "Vänliga hälsningar, Teamet på Zodiac Rent a Car",
    },
    "no": {
        "subject": "Fullfør bestillingen din - Zodiac Rent a Car",
        "greeting": "Hei{name},",
        "thank_you": "Takk for forespørselen hos Zodiac Rent a Car.",
        "instructions": "Fullfør bestillingen ved å fylle ut opplysningene dine via lenken under.",
        "payment_note": "Betaling kan skje kontant eller med bankkort.",
        "cta": "Fortsett bestillingen",
        "signature": "Vennlig hilsen, Teamet i Zodiac Rent a Car",
    },
    "dk": {
        "subject": "Gør din booking færdig - Zodiac Rent a Car",
        "greeting": "Hej{name},",
        "thank_you": "Tak for din forespørgsel hos Zodiac Rent a Car.",
        "instructions": "Færdiggør bookingen ved at udfylde dine oplysninger via linket nedenfor.",
        "payment_note": "Betaling kan ske kontant eller med betalingskort.",
        "cta": "Fortsæt bookingen",
        "signature": "Med venlig hilsen, Zodiac Rent a Car-teamet",
    },
    "pl": {
        "subject": "Dokończ rezerwację - Zodiac Rent a Car",
        "greeting": "Cześć{name},",
        "thank_you": "Dziękujemy za zapytanie w Zodiac Rent a Car.",
        "instructions": "Aby dokończyć rezerwację, uzupełnij swoje dane w poniższym linku.",
        "payment_note": "Płatność możliwa jest gotówką lub kartą płatniczą.",
        "cta": "Kontynuuj rezerwację",
        "signature": "Pozdrawiamy, Zespół Zodiac Rent a Car",
    },
}

DEFAULT_REQUEST_SUCCESS = "Foglaláskérés e-mail elküldve."


# --- labels and signature blocks shared by the offer and finalization mails --

STATIC_TEXTS = {
    "en": {
        "rental_fee_label": "Rental fee",
        "deposit_label": "Deposit",
        "insurance_label": "Full coverage insurance",
        "insurance_note": "If you choose full coverage, no deposit is required.",
        "fallback_link": "If the button above does not work, open this link:",
        "admin_title": "Rental Operations Advisor",
        "slogans": ("Freedom leads.", "Comfort follows."),
        "extras_note": "Selecting extras may incur additional costs.",
        "extras_label": "Other costs",
        "delivery_fee_label": "Delivery fee",
        "extras_fee_label": "Extras fee",
        "days_suffix": "days",
        "delivery_note": "You can request delivery to your preferred location (e.g. airport or hotel).",
        "car_images_label": "Car photos",
        "location_label": "Locations",
    },
    "hu": {
        "rental_fee_label": "Bérleti díj",
        "deposit_label": "Kaució",
        "insurance_label": "Teljes körű biztosítás",
        "insurance_note": "Ha teljes körű biztosítással szeretné az autót, nincs szükség kaucióra.",
        "fallback_link": "Ha a fenti gomb nem működik, nyisd meg ezt a linket:",
        "admin_title": "Autóbérlési tanácsadó",
        "slogans": ("A szabadság vezet.", "A kényelem elkísér."),
        "extras_note": "Az extrák kiválasztásakor további költségek merülhetnek fel.",
        "extras_label": "Egyéb költségek",
        "delivery_fee_label": "Kiszállítás díja",
        "extras_fee_label": "Extrák díja",
        "days_suffix": "napra",
        "delivery_note": "Kérheted az autó kiszállítását a választott helyszínre (pl. reptérre vagy szállásra).",
        "car_images_label": "Autó fotói",
        "location_label": "Helyszín",
    },
    "de": {
        "rental_fee_label": "Mietpreis",
        "deposit_label": "Kaution",
        "insurance_label": "Vollkaskoversicherung",
        "insurance_note": "Wenn Sie Vollkasko wählen, ist keine Kaution nötig.",
        "fallback_link": "Wenn die Schaltfläche nicht funktioniert, öffnen Sie diesen Link:",
        "admin_title": "Mietwagenberater",
        "slogans": ("Freiheit führt.", "Komfort begleitet."),
        "extras_note": "Bei der Auswahl von Extras können zusätzliche Kosten anfallen.",
        "extras_label": "Weitere Kosten",
        "delivery_fee_label": "Liefergebühr",
        "extras_fee_label": "Aufpreis für Extras",
        "days_suffix": "Tage",
        "delivery_note": "Du kannst das Auto an deinen Wunschort liefern lassen (z. B. Flughafen oder Unterkunft).",
        "car_images_label": "Fahrzeugfotos",
        "location_label": "Standorte",
    },
    "ro": {
        "rental_fee_label": "Taxă de închiriere",
        "deposit_label": "Depozit",
        "insurance_label": "Asigurare completă",
        "insurance_note": "Dacă alegeți asigurare completă, nu este necesară garanție.",
        "fallback_link": "Dacă butonul nu funcționează, deschideți acest link:",
        "admin_title": "Consilier operațiuni închirieri",
        "slogans": ("Libertatea te conduce.", "Confortul te însoțește."),
        "extras_note": "La selectarea extraopțiunilor pot apărea costuri suplimentare.",
        "extras_label": "Costuri suplimentare",
        "delivery_fee_label": "Taxă de livrare",
        "extras_fee_label": "Taxă pentru extraopțiuni",
        "days_suffix": "zile",
        "delivery_note": "Poți solicita livrarea mașinii la locația dorită (de ex. aeroport sau cazare).",
        "car_images_label": "Fotografii ale mașinii",
        "location_label": "Locații",
    },
    "fr": {
        "rental_fee_label": "Frais de location",
        "deposit_label": "Caution",
        "insurance_label": "Assurance tous risques",
        "insurance_note": "Si vous choisissez l'assurance complète, aucune caution n'est requise.",
        "fallback_link": "Si le bouton ne fonctionne pas, ouvrez ce lien :",
        "admin_title": "Conseiller opérations de location",
        "slogans": ("La liberté vous conduit.", "Le confort vous accompagne."),
        "extras_note": "Le choix des options peut entraîner des coûts supplémentaires.",
        "extras_label": "Autres coûts",
        "delivery_fee_label": "Frais de livraison",
        "extras_fee_label": "Frais des options",
        "days_suffix": "jours",
        "delivery_note": "Vous pouvez demander la livraison de la voiture à l'endroit de votre choix (ex. aéroport ou hébergement).",
        "car_images_label": "Photos du véhicule",
        "location_label": "Lieux",
    },
    "es": {
        "rental_fee_label": "Tarifa de alquiler",
        "deposit_label": "Depósito",
        "insurance_label": "Seguro a todo riesgo",
        "insurance_note": "Si eliges cobertura total, no se requiere depósito.",
        "fallback_link": "Si el botón no funciona, abre este enlace:",
        "admin_title": "Asesor de operaciones de alquiler",
        "slogans": ("La libertad te conduce.", "La comodidad te acompaña."),
        "extras_note": "Elegir extras puede generar costes adicionales.",
        "extras_label": "Costes adicionales",
        "delivery_fee_label": "Tarifa de entrega",
        "extras_fee_label": "Coste de extras",
        "days_suffix": "días",
        "delivery_note": "Puedes solicitar la entrega del coche en el lugar que prefieras (p. ej., aeropuerto o alojamiento).",
        "car_images_label": "Fotos del vehículo",
        "location_label": "Ubicaciones",
    },
    "it": {
        "rental_fee_label": "Tariffa di noleggio",
        "deposit_label": "Deposito",
        "insurance_label": "Assicurazione completa",
        "insurance_note": "Se scegli la copertura completa, non è richiesto deposito.",
        "fallback_link": "Se il pulsante non funziona, apri questo link:",
        "admin_title": "Consulente operazioni di noleggio",
        "slogans": ("La libertà ti guida.", "Il comfort ti accompagna."),
        "extras_note": "La scelta di extra può comportare costi aggiuntivi.",
        "extras_label": "Altri costi",
        "delivery_fee_label": "Costo consegna",
        "extras_fee_label": "Costo extra",
        "days_suffix": "giorni",
        "delivery_note": "Puoi richiedere la consegna dell'auto nel luogo che preferisci (es. aeroporto o alloggio).",
        "car_images_label": "Foto dell'auto",
        "location_label": "Sedi",
    },
    "sk": {
        "rental_fee_label": "Prenájomné",
        "deposit_label": "Kaucia",
        "insurance_label": "Komplexné poistenie",
        "insurance_note": "Ak zvolíte komplexné poistenie, kaucia nie je potrebná.",
        "fallback_link": "Ak tlačidlo nefunguje, otvor tento odkaz:",
        "admin_title": "Poradca pre prevádzku prenájmu",
        "slogans": ("Sloboda vedie.", "Komfort sprevádza."),
        "extras_note": "Výber extra služieb môže priniesť dodatočné náklady.",
        "extras_label": "Ďalšie náklady",
        "delivery_fee_label": "Poplatok za doručenie",
        "extras_fee_label": "Poplatok za extra služby",
        "days_suffix": "dní",
        "delivery_note": "Môžeš si vyžiadať doručenie auta na zvolené miesto (napr. letisko alebo ubytovanie).",
        "car_images_label": "Fotky vozidla",
        "location_label": "Pobočky",
    },
    "cz": {
        "rental_fee_label": "Nájemné",
        "deposit_label": "Kauce",
        "insurance_label": "Komplexní pojištění",
        "insurance_note": "Pokud zvolíte plné pojištění, kauce není potřeba.",
        "fallback_link": "Pokud tlačítko nefunguje, otevřete tento odkaz:",
        "admin_title": "Poradce pro provoz půjčoven",
        "slogans": ("Svoboda vede.", "Komfort provází."),
        "extras_note": "Výběr doplňků může znamenat další náklady.",
        "extras_label": "Další náklady",
        "delivery_fee_label": "Poplatek za doručení",
        "extras_fee_label": "Poplatek za doplňky",
        "days_suffix": "dní",
        "delivery_note": "Auto si můžete nechat doručit na vámi zvolené místo (např. letiště nebo ubytování).",
        "car_images_label": "Fotografie vozu",
        "location_label": "Pobočky",
    },
    "se": {
        "rental_fee_label": "Hyresavgift",
        "deposit_label": "Deposition",
        "insurance_label": "Heltäckande försäkring",
        "insurance_note": "Väljer du heltäckande försäkring behövs ingen deposition.",
        "fallback_link": "Om knappen inte fungerar, öppna denna länk:",
        "admin_title": "Rådgivare för uthyrningsverksamhet",
        "slogans": ("Friheten leder.", "Komforten följer med."),
        "extras_note": "Val av extra kan medföra ytterligare kostnader.",
        "extras_label": "Övriga kostnader",
        "delivery_fee_label": "Leveranskostnad",
        "extras_fee_label": "Kostnad för tillval",
        "days_suffix": "dagar",
        "delivery_note": "Du kan be om leverans till valfri plats (t.ex. flygplats eller boende).",
        "car_images_label": "Bilfoton",
        "location_label": "Platser",
    },
    "no": {
        "rental_fee_label": "Leiepris",
        "deposit_label": "Depositum",
        "insurance_label": "Full kaskoforsikring",
        "insurance_note": "Velger du full dekning, trengs ikke depositum.",
        "fallback_link": "Hvis knappen ikke virker, åpne denne lenken:",
        "admin_title": "Rådgiver for leieoperasjoner",
        "slogans": ("Frihet leder.", "Komfort følger med."),
        "extras_note": "Valg av ekstrautstyr kan medføre ekstra kostnader.",
        "extras_label": "Andre kostnader",
        "delivery_fee_label": "Leveringsgebyr",
        "extras_fee_label": "Kostnad for ekstrautstyr",
        "days_suffix": "dager",
        "delivery_note": "Du kan be om levering til ønsket sted (f.eks. flyplass eller overnatting).",
        "car_images_label": "Bilbilder",
        "location_label": "Steder",
    },
    "dk": {
        "rental_fee_label": "Lejepris",
        "deposit_label": "Depositum",
        "insurance_label": "Fuld kaskoforsikring",
        "insurance_note": "Hvis du vælger fuld dækning, er der ikke behov for depositum.",
        "fallback_link": "Hvis knappen ikke virker, åbne dette link:",
        "admin_title": "Rådgiver for udlejningsdrift",
        "slogans": ("Frihed leder.", "Komfort følger med."),
        "extras_note": "Valg af ekstraudstyr kan medføre ekstra omkostninger.",
        "extras_label": "Andre omkostninger",
        "delivery_fee_label": "Leveringsgebyr",
        "extras_fee_label": "Pris for ekstraudstyr",
        "days_suffix": "dage",
        "delivery_note": "Du kan bede om levering til det ønskede sted (f.eks. lufthavn eller overnatning).",
        "car_images_label": "Bilfotos",
        "location_label": "Steder",
    },
    "pl": {
        "rental_fee_label": "Opłata za wynajem",
        "deposit_label": "Kaucja",
        "insurance_label": "Pełne ubezpieczenie",
        "insurance_note": "Jeśli wybierzesz pełne ubezpieczenie, kaucja nie jest wymagana.",
        "fallback_link": "Jeśli przycisk nie działa, otwórz ten link:",
        "admin_title": "Doradca ds. operacji wynajmu",
        "slogans": ("Wolność prowadzi.", "Komfort towarzyszy."),
        "extras_note": "Wybranie dodatków może wiązać się z dodatkowymi kosztami.",
        "extras_label": "Inne koszty",
        "delivery_fee_label": "Opłata za dostawę",
        "extras_fee_label": "Opłata za dodatki",
        "days_suffix": "dni",
        "delivery_note": "Możesz poprosić o dostawę auta pod wskazany adres (np. lotnisko lub nocleg).",
        "car_images_label": "Zdjęcia samochodu",
        "location_label": "Lokalizacje",
    },
}


# --- booking finalization (sent to a booking contact, signed by an admin) ----

FINALIZATION_COPY = {
    "en": {
        "subject": "Your booking is ready - Zodiac Rent a Car",
        "intro": "Thank you for choosing Zodiac Rent a Car. We have reviewed your booking details.",
        "instructions": "Please check the summary below and confirm your booking with the button.",
        "retain_note": "Please keep this email, you will need the links below to manage your booking.",
        "manage_intro": "Need to change something? Use the links below:",
        "modify_cta": "Modify booking",
        "cancel_cta": "Cancel booking",
        "confirm_cta": "Confirm booking",
        "question_cta": "I have a question",
        "closing": "Best regards",
        "sections": {"fees": "Fees", "booking": "Booking details", "billing": "Billing", "delivery": "Delivery"},
        "labels": {
            "booking_code": "Booking ID", "car": "Car", "period": "Rental period",
            "rental_fee": "Rental fee", "insurance": "Insurance", "deposit": "Deposit",
            "delivery_fee": "Delivery fee", "extras_fee": "Extras fee", "extras_list": "Extras",
            "adults": "Adults", "children": "Children",
            "contact_name": "Contact name", "contact_email": "Contact email", "contact_phone": "Contact phone",
            "invoice_name": "Billing name", "invoice_email": "Billing email", "invoice_phone": "Billing phone",
            "invoice_address": "Billing address",
            "delivery_location": "Delivery location", "delivery_type": "Delivery type",
            "delivery_address": "Delivery address",
            "arrival_flight": "Arrival flight", "departure_flight": "Departure flight",
            "total": "Total",
        },
    },
    "hu": {
        "subject": "Foglalásod véglegesítése - Zodiac Rent a Car",
        "intro": "Köszönjük, hogy a Zodiac Rent a Cart választottad. Átnéztük a foglalásod adatait.",
        "instructions": "Kérjük ellenőrizd az alábbi összesítőt, és erősítsd meg a foglalást a gombbal.",
        "retain_note": "Kérjük őrizd meg ezt az e-mailt, az alábbi linkekkel kezelheted a foglalásodat.",
        "manage_intro": "Módosítanál valamit? Használd az alábbi linkeket:",
        "modify_cta": "Foglalás módosítása",
        "cancel_cta": "Foglalás lemondása",
        "confirm_cta": "Foglalás megerősítése",
        "question_cta": "Kérdésem van",
        "closing": "Üdvözlettel",
        "sections": {"fees": "Díjak", "booking": "Foglalás adatai", "billing": "Számlázás", "delivery": "Átadás"},
        "labels": {
            "booking_code": "Foglalás azonosító", "car": "Autó", "period": "Időszak",
            "rental_fee": "Bérleti díj", "insurance": "Biztosítás", "deposit": "Kaució",
            "delivery_fee": "Kiszállítás díja", "extras_fee": "Extrák díja", "extras_list": "Extrák",
            "adults": "Felnőttek", "children": "Gyerekek",
            "contact_name": "Kapcsolattartó neve", "contact_email": "Kapcsolattartó e-mail",
            "contact_phone": "Kapcsolattartó telefon",
            "invoice_name": "Számlázási név", "invoice_email": "Számlázási e-mail",
            "invoice_phone": "Számlázási telefon", "invoice_address": "Számlázási cím",
            "delivery_location": "Átadás helye", "delivery_type": "Átadás típusa",
            "delivery_address": "Átadás címe",
            "arrival_flight": "Érkező járat", "departure_flight": "Induló járat",
            "total": "Összesen",
        },
    },
    "de": {
        "subject": "Ihre Buchung ist bereit - Zodiac Rent a Car",
        "intro": "Vielen Dank, dass Sie sich für Zodiac Rent a Car entschieden haben. Wir haben Ihre Buchungsdaten geprüft.",
        "instructions": "Bitte prüfen Sie die Zusammenfassung unten und bestätigen Sie Ihre Buchung über die Schaltfläche.",
        "retain_note": "Bitte bewahren Sie diese E-Mail auf, mit den Links unten können Sie Ihre Buchung verwalten.",
        "manage_intro": "Möchten Sie etwas ändern? Nutzen Sie die folgenden Links:",
        "modify_cta": "Buchung ändern",
        "cancel_cta": "Buchung stornieren",
        "confirm_cta": "Buchung bestätigen",
        "question_cta": "Ich habe eine Frage",
        "closing": "Viele Grüße",
        "sections": {"fees": "Gebühren", "booking": "Buchungsdetails", "billing": "Rechnung", "delivery": "Übergabe"},
        "labels": {
            "booking_code": "Buchungsnummer", "car": "Fahrzeug", "period": "Mietzeitraum",
            "rental_fee": "Mietpreis", "insurance": "Versicherung", "deposit": "Kaution",
            "delivery_fee": "Liefergebühr", "extras_fee": "Aufpreis für Extras", "extras_list": "Extras",
            "adults": "Erwachsene", "children": "Kinder",
            "contact_name": "Kontaktname", "contact_email": "Kontakt-E-Mail", "contact_phone": "Kontakttelefon",
            "invoice_name": "Rechnungsname", "invoice_email": "Rechnungs-E-Mail", "invoice_phone": "Rechnungstelefon",
            "invoice_address": "Rechnungsadresse",
            "delivery_location": "Übergabeort", "delivery_type": "Übergabeart",
            "delivery_address": "Übergabeadresse",
            "arrival_flight": "Ankunftsflug", "departure_flight": "Abflug",
            "total": "Gesamt",
        },
    },
    "ro": {
        "subject": "Rezervarea ta este pregătită - Zodiac Rent a Car",
        "intro": "Îți mulțumim că ai ales Zodiac Rent a Car. Am verificat detaliile rezervării tale.",
        "instructions": "Te rugăm să verifici rezumatul de mai jos și să confirmi rezervarea cu butonul.",
        "retain_note": "Te rugăm să păstrezi acest e-mail, cu linkurile de mai jos îți poți gestiona rezervarea.",
        "manage_intro": "Vrei să modifici ceva? Folosește linkurile de mai jos:",
        "modify_cta": "Modifică rezervarea",
        "cancel_cta": "Anulează rezervarea",
        "confirm_cta": "Confirmă rezervarea",
        "question_cta": "Am o întrebare",
        "closing": "Cu stimă",
        "sections": {"fees": "Taxe", "booking": "Detaliile rezervării", "billing": "Facturare", "delivery": "Predare"},
        "labels": {
            "booking_code": "Cod rezervare", "car": "Mașină", "period": "Perioadă",
            "rental_fee": "Taxă de închiriere", "insurance": "Asigurare", "deposit": "Depozit",
            "delivery_fee": "Taxă de livrare", "extras_fee": "Taxă pentru extraopțiuni", "extras_list": "Extraopțiuni",
            "adults": "Adulți", "children": "Copii",
            "contact_name": "Nume contact", "contact_email": "E-mail contact", "contact_phone": "Telefon contact",
            "invoice_name": "Nume facturare", "invoice_email": "E-mail facturare", "invoice_phone": "Telefon facturare",
            "invoice_address": "Adresă facturare",
            "delivery_location": "Loc de predare", "delivery_type": "Tip predare",
            "delivery_address": "Adresă de predare",
            "arrival_flight": "Zbor de sosire", "departure_flight": "Zbor de plecare",
            "total": "Total",
        },
    },
    "fr": {
        "subject": "Votre réservation est prête - Zodiac Rent a Car",
        "intro": "Merci d'avoir choisi Zodiac Rent a Car. Nous avons vérifié les détails de votre réservation.",
        "instructions": "Veuillez vérifier le récapitulatif ci-dessous et confirmer votre réservation avec le bouton.",
        "retain_note": "Veuillez conserver cet e-mail, les liens ci-dessous vous permettent de gérer votre réservation.",
        "manage_intro": "Besoin de modifier quelque chose ? Utilisez les liens ci-dessous :",
        "modify_cta": "Modifier la réservation",
        "cancel_cta": "Annuler la réservation",
        "confirm_cta": "Confirmer la réservation",
        "question_cta": "J'ai une question",
        "closing": "Cordialement",
        "sections": {"fees": "Frais", "booking": "Détails de la réservation", "billing": "Facturation", "delivery": "Remise du véhicule"},
        "labels": {
            "booking_code": "Numéro de réservation", "car": "Véhicule", "period": "Période de location",
            "rental_fee": "Frais de location", "insurance": "Assurance", "deposit": "Caution",
            "delivery_fee": "Frais de livraison", "extras_fee": "Frais des options", "extras_list": "Options",
            "adults": "Adultes", "children": "Enfants",
            "contact_name": "Nom du contact", "contact_email": "E-mail du contact", "contact_phone": "Téléphone du contact",
            "invoice_name": "Nom de facturation", "invoice_email": "E-mail de facturation",
            "invoice_phone": "Téléphone de facturation", "invoice_address": "Adresse de facturation",
            "delivery_location": "Lieu de remise", "delivery_type": "Type de remise",
            "delivery_address": "Adresse de remise",
            "arrival_flight": "Vol d'arrivée", "departure_flight": "Vol de départ",
            "total": "Total",
        },
    },
    "es": {
        "subject": "Tu reserva está lista - Zodiac Rent a Car",
        "intro": "Gracias por elegir Zodiac Rent a Car. Hemos revisado los datos de tu reserva.",
        "instructions": "Revisa el resumen a continuación y confirma tu reserva con el botón.",
        "retain_note": "Guarda este correo, con los enlaces de abajo podrás gestionar tu reserva.",
        "manage_intro": "¿Necesitas cambiar algo? Usa los siguientes enlaces:",
        "modify_cta": "Modificar reserva",
        "cancel_cta": "Cancelar reserva",
        "confirm_cta": "Confirmar reserva",
        "question_cta": "Tengo una pregunta",
        "closing": "Saludos",
        "sections": {"fees": "Tarifas", "booking": "Datos de la reserva", "billing": "Facturación", "delivery": "Entrega"},
        "labels": {
            "booking_code": "Código de reserva", "car": "Coche", "period": "Periodo de alquiler",
            "rental_fee": "Tarifa de alquiler", "insurance": "Seguro", "deposit": "Depósito",
            "delivery_fee": "Tarifa de entrega", "extras_fee": "Coste de extras", "extras_list": "Extras",
            "adults": "Adultos", "children": "Niños",
            "contact_name": "Nombre de contacto", "contact_email": "Correo de contacto", "contact_phone": "Teléfono de contacto",
            "invoice_name": "Nombre de facturación", "invoice_email": "Correo de facturación",
            "invoice_phone": "Teléfono de facturación", "invoice_address": "Dirección de facturación",
            "delivery_location": "Lugar de entrega", "delivery_type": "Tipo de entrega",
            "delivery_address": "Dirección de entrega",
            "arrival_flight": "Vuelo de llegada", "departure_flight": "Vuelo de salida",
            "total": "Total",
        },
    },
    "it": {
        "subject": "La tua prenotazione è pronta - Zodiac Rent a Car",
        "intro": "Grazie per aver scelto Zodiac Rent a Car. Abbiamo verificato i dati della tua prenotazione.",
        "instructions": "Controlla il riepilogo qui sotto e conferma la prenotazione con il pulsante.",
        "retain_note": "Conserva questa e-mail, con i link qui sotto puoi gestire la tua prenotazione.",
        "manage_intro": "Devi cambiare qualcosa? Usa i link qui sotto:",
        "modify_cta": "Modifica prenotazione",
        "cancel_cta": "Annulla prenotazione",
        "confirm_cta": "Conferma prenotazione",
        "question_cta": "Ho una domanda",
        "closing": "Un saluto",
        "sections": {"fees": "Costi", "booking": "Dati della prenotazione", "billing": "Fatturazione", "delivery": "Consegna"},
        "labels": {
            "booking_code": "Codice prenotazione", "car": "Auto", "period": "Periodo di noleggio",
            "rental_fee": "Tariffa di noleggio", "insurance": "Assicurazione", "deposit": "Deposito",
            "delivery_fee": "Costo consegna", "extras_fee": "Costo extra", "extras_list": "Extra",
            "adults": "Adulti", "children": "Bambini",
            "contact_name": "Nome contatto", "contact_email": "E-mail contatto", "contact_phone": "Telefono contatto",
            "invoice_name": "Nome fatturazione", "invoice_email": "E-mail fatturazione",
            "invoice_phone": "Telefono fatturazione", "invoice_address": "Indirizzo fatturazione",
            "delivery_location": "Luogo di consegna", "delivery_type": "Tipo di consegna",
            "delivery_address": "Indirizzo di consegna",
            "arrival_flight": "Volo di arrivo", "departure_flight": "Volo di partenza",
            "total": "Totale",
        },
    },
    "sk": {
        "subject": "Vaša rezervácia je pripravená - Zodiac Rent a Car",
        "intro": "Ďakujeme, že ste si vybrali Zodiac Rent a Car. Skontrolovali sme údaje vašej rezervácie.",
        "instructions": "Skontrolujte prosím súhrn nižšie a potvrďte rezerváciu tlačidlom.",
        "retain_note": "Tento e-mail si prosím uschovajte, odkazmi nižšie môžete spravovať rezerváciu.",
        "manage_intro": "Potrebujete niečo zmeniť? Použite odkazy nižšie:",
        "modify_cta": "Upraviť rezerváciu",
        "cancel_cta": "Zrušiť rezerváciu",
        "confirm_cta": "Potvrdiť rezerváciu",
        "question_cta": "Mám otázku",
        "closing": "S pozdravom",
        "sections": {"fees": "Poplatky", "booking": "Údaje rezervácie", "billing": "Fakturácia", "delivery": "Odovzdanie"},
        "labels": {
            "booking_code": "Číslo rezervácie", "car": "Auto", "period": "Obdobie prenájmu",
            "rental_fee": "Prenájomné", "insurance": "Poistenie", "deposit": "Kaucia",
            "delivery_fee": "Poplatok za doručenie", "extras_fee": "Poplatok za extra služby", "extras_list": "Extra služby",
            "adults": "Dospelí", "children": "Deti",
            "contact_name": "Kontaktné meno", "contact_email": "Kontaktný e-mail", "contact_phone": "Kontaktný telefón",
            "invoice_name": "Fakturačné meno", "invoice_email": "Fakturačný e-mail",
            "invoice_phone": "Fakturačný telefón", "invoice_address": "Fakturačná adresa",
            "delivery_location": "Miesto odovzdania", "delivery_type": "Typ odovzdania",
            "delivery_address": "Adresa odovzdania",
            "arrival_flight": "Prílet", "departure_flight": "Odlet",
            "total": "Spolu",
        },
    },
    "cz": {
        "subject": "Vaše rezervace je připravena - Zodiac Rent a Car",
        "intro": "Děkujeme, že jste si vybrali Zodiac Rent a Car. Zkontrolovali jsme údaje vaší rezervace.",
        "instructions": "Zkontrolujte prosím souhrn níže a potvrďte rezervaci tlačítkem.",
        "retain_note": "Tento e-mail si prosím uschovejte, odkazy níže můžete spravovat rezervaci.",
        "manage_intro": "Potřebujete něco změnit? Použijte odkazy níže:",
        "modify_cta": "Upravit rezervaci",
        "cancel_cta": "Zrušit rezervaci",
        "confirm_cta": "Potvrdit rezervaci",
        "question_cta": "Mám dotaz",
        "closing": "S pozdravem",
        "sections": {"fees": "Poplatky", "booking": "Údaje rezervace", "billing": "Fakturace", "delivery": "Předání"},
        "labels": {
            "booking_code": "Číslo rezervace", "car": "Vůz", "period": "Období pronájmu",
            "rental_fee": "Nájemné", "insurance": "Pojištění", "deposit": "Kauce",
            "delivery_fee": "Poplatek za doručení", "extras_fee": "Poplatek za doplňky", "extras_list": "Doplňky",
            "adults": "Dospělí", "children": "Děti",
            "contact_name": "Kontaktní jméno", "contact_email": "Kontaktní e-mail", "contact_phone": "Kontaktní telefon",
            "invoice_name": "Fakturační jméno", "invoice_email": "Fakturační e-mail",
            "invoice_phone": "Fakturační telefon", "invoice_address": "Fakturační adresa",
            "delivery_location": "Místo předání", "delivery_type": "Typ předání",
            "delivery_address": "Adresa předání",
            "arrival_flight": "Přílet", "departure_flight": "Odlet",
            "total": "Celkem",
        },
    },
    "se": {
        "subject": "Din bokning är klar - Zodiac Rent a Car",
        "intro": "Tack för att du valde Zodiac Rent a Car. Vi har gått igenom dina bokningsuppgifter.",
        "instructions": "Kontrollera sammanfattningen nedan och bekräfta bokningen med knappen.",
        "retain_note": "Spara detta e-postmeddelande, med länkarna nedan kan du hantera din bokning.",
        "manage_intro": "Behöver du ändra något? Använd länkarna nedan:",
        "modify_cta": "Ändra bokning",
        "cancel_cta": "Avboka",
        "confirm_cta": "Bekräfta bokning",
        "question_cta": "Jag har en fråga",
        "closing": "Vänliga hälsningar",
        "sections": {"fees": "Avgifter", "booking": "Bokningsuppgifter", "billing": "Fakturering", "delivery": "Överlämning"},
        "labels": {
            "booking_code": "Bokningsnummer", "car": "Bil", "period": "Hyresperiod",
            "rental_fee": "Hyresavgift", "insurance": "Försäkring", "deposit": "Deposition",
            "delivery_fee": "Leveranskostnad", "extras_fee": "Kostnad för tillval", "extras_list": "Tillval",
            "adults": "Vuxna", "children": "Barn",
            "contact_name": "Kontaktnamn", "contact_email": "Kontakt-e-post", "contact_phone": "Kontakttelefon",
            "invoice_name": "Fakturanamn", "invoice_email": "Faktura-e-post", "invoice_phone": "Fakturatelefon",
            "invoice_address": "Fakturaadress",
            "delivery_location": "Överlämningsplats", "delivery_type": "Typ av överlämning",
            "delivery_address": "Överlämningsadress",
            "arrival_flight": "Ankomstflyg", "departure_flight": "Avgångsflyg",
            "total": "Totalt",
        },
    },
    "no": {
        "subject": "Bestillingen din er klar - Zodiac Rent a Car",
        "intro": "Takk for at du valgte Zodiac Rent a Car. Vi har gått gjennom bestillingsopplysningene dine.",
        "instructions": "Sjekk sammendraget under og bekreft bestillingen med knappen.",
        "retain_note": "Ta vare på denne e-posten, med lenkene under kan du administrere bestillingen.",
        "manage_intro": "Trenger du å endre noe? Bruk lenkene under:",
        "modify_cta": "Endre bestilling",
        "cancel_cta": "Avbestill",
        "confirm_cta": "Bekreft bestilling",
        "question_cta": "Jeg har et spørsmål",
        "closing": "Vennlig hilsen",
        "sections": {"fees": "Gebyrer", "booking": "Bestillingsdetaljer", "billing": "Fakturering", "delivery": "Overlevering"},
        "labels": {
            "booking_code": "Bestillingsnummer", "car": "Bil", "period": "Leieperiode",
            "rental_fee": "Leiepris", "insurance": "Forsikring", "deposit": "Depositum",
            "delivery_fee": "Leveringsgebyr", "extras_fee": "Kostnad for ekstrautstyr", "extras_list": "Ekstrautstyr",
            "adults": "Voksne", "children": "Barn",
            "contact_name": "Kontaktnavn", "contact_email": "Kontakt-e-post", "contact_phone": "Kontakttelefon",
            "invoice_name": "Fakturanavn", "invoice_email": "Faktura-e-post", "invoice_phone": "Fakturatelefon",
            "invoice_address": "Fakturaadresse",
            "delivery_location": "Overleveringssted", "delivery_type": "Type overlevering",
            "delivery_address": "Overleveringsadresse",
            "arrival_flight": "Ankomstfly", "departure_flight": "Avgangsfly",
            "total": "Totalt",
        },
    },
    "dk": {
        "subject": "Din booking er klar - Zodiac Rent a Car",
        "intro": "Tak fordi du valgte Zodiac Rent a Car. Vi har gennemgået dine bookingoplysninger.",
        "instructions": "Tjek venligst oversigten nedenfor og bekræft din booking med knappen.",
        "retain_note": "Gem venligst denne e-mail, med linkene nedenfor kan du administrere din booking.",
        "manage_intro": "Skal du ændre noget? Brug linkene nedenfor:",
        "modify_cta": "Ændr booking",
        "cancel_cta": "Annuller booking",
        "confirm_cta": "Bekræft booking",
        "question_cta": "Jeg har et spørgsmål",
        "closing": "Med venlig hilsen",
        "sections": {"fees": "Gebyrer", "booking": "Bookingoplysninger", "billing": "Fakturering", "delivery": "Udlevering"},
        "labels": {
            "booking_code": "Bookingnummer", "car": "Bil", "period": "Lejeperiode",
            "rental_fee": "Lejepris", "insurance": "Forsikring", "deposit": "Depositum",
            "delivery_fee": "Leveringsgebyr", "extras_fee": "Pris for ekstraudstyr", "extras_list": "Ekstraudstyr",
            "adults": "Voksne", "children": "Børn",
            "contact_name": "Kontaktnavn", "contact_email": "Kontakt-e-mail", "contact_phone": "Kontakttelefon",
            "invoice_name": "Fakturanavn", "invoice_email": "Faktura-e-mail", "invoice_phone": "Fakturatelefon",
            "invoice_address": "Fakturaadresse",
            "delivery_location": "Udleveringssted", "delivery_type": "Udleveringstype",
            "delivery_address": "Udleveringsadresse",
            "arrival_flight": "Ankomstfly", "departure_flight": "Afgangsfly",
            "total": "I alt",
        },
    },
    "pl": {
        "subject": "Twoja rezerwacja jest gotowa - Zodiac Rent a Car",
        "intro": "Dziękujemy za wybór Zodiac Rent a Car. Sprawdziliśmy dane Twojej rezerwacji.",
        "instructions": "Sprawdź poniższe podsumowanie i potwierdź rezerwację przyciskiem.",
        "retain_note": "Zachowaj tę wiadomość, za pomocą poniższych linków możesz zarządzać rezerwacją.",
        "manage_intro": "Chcesz coś zmienić? Skorzystaj z poniższych linków:",
        "modify_cta": "Zmień rezerwację",
        "cancel_cta": "Anuluj rezerwację",
        "confirm_cta": "Potwierdź rezerwację",
        "question_cta": "Mam pytanie",
        "closing": "Pozdrawiamy",
        "sections": {"fees": "Opłaty", "booking": "Dane rezerwacji", "billing": "Faktura", "delivery": "Przekazanie"},
        "labels": {
            "booking_code": "Numer rezerwacji", "car": "Samochód", "period": "Okres wynajmu",
            "rental_fee": "Opłata za wynajem", "insurance": "Ubezpieczenie", "deposit": "Kaucja",
            "delivery_fee": "Opłata za dostawę", "extras_fee": "Opłata za dodatki", "extras_list": "Dodatki",
            "adults": "Dorośli", "children": "Dzieci",
            "contact_name": "Imię i nazwisko", "contact_email": "E-mail kontaktowy", "contact_phone": "Telefon kontaktowy",
            "invoice_name": "Nazwa do faktury", "invoice_email": "E-mail do faktury",
            "invoice_phone": "Telefon do faktury", "invoice_address": "Adres do faktury",
            "delivery_location": "Miejsce przekazania", "delivery_type": "Rodzaj przekazania",
            "delivery_address": "Adres przekazania",
            "arrival_flight": "Lot przylotowy", "departure_flight": "Lot wylotowy",
            "total": "Razem",
        },
    },
}


# --- booking confirmation / fee summary (hu and en only) ---------------------

CONFIRMATION_COPY = {
    "hu": {
        "subject": "Foglalás megerősítése - Zodiac Rent a Car",
        "greeting": "Szia{name}!",
        "intro": "Az alábbiakban összegyűjtöttük az eddig ismert díjakat a foglalásodhoz.",
        "payment_note": "A fizetés készpénzzel vagy bankkártyával is lehetséges.",
        "outro": "Ha bármilyen kérdésed van, kérlek vedd fel velünk a kapcsolatot, hogy segítsünk a részletekben.",
        "pricing_heading": "Díjak összesítése",
        "rental_fee_label": "Foglalási díj",
        "insurance_label": "Biztosítás",
        "deposit_label": "Kaució",
        "extras_label": "Extrák díja",
        "booking_label": "Foglalás azonosító",
        "period_label": "Időszak",
        "car_label": "Autó",
        "success_message": "Számla-információs e-mail elküldve.",
    },
    "en": {
        "subject": "Booking confirmation - Zodiac Rent a Car",
        "greeting": "Hi{name},",
        "intro": "Here is a summary of the fees we currently have on file.",
        "payment_note": "Payment can be made in cash or by bank card.",
        "outro": "If you have any questions, feel free to reply so we can assist you further.",
        "pricing_heading": "Fee summary",
        "rental_fee_label": "Rental fee",
        "insurance_label": "Insurance",
        "deposit_label": "Deposit",
        "extras_label": "Extras fee",
        "booking_label": "Booking ID",
        "period_label": "Rental period",
        "car_label": "Car",
        "success_message": "Confirmation email sent.",
    },
}


def request_copy(locale: str) -> dict:
    return REQUEST_COPY.get(locale) or REQUEST_COPY[FALLBACK_LOCALE]


def static_texts(locale: str) -> dict:
    return STATIC_TEXTS.get(locale) or STATIC_TEXTS[FALLBACK_LOCALE]


def finalization_copy(locale: str) -> dict:
    return FINALIZATION_COPY.get(locale) or FINALIZATION_COPY[FALLBACK_LOCALE]


def confirmation_copy(locale: str) -> dict:
    return CONFIRMATION_COPY.get(locale) or CONFIRMATION_COPY[FALLBACK_LOCALE]


def greeting(template: str, name: str | None) -> str:
    name = (name or "").strip()
    return template.format(name=f" {name}" if name else "")


# --- dates ---------------------------------------------------------------------

_MONTHS = {
    "en": ("January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December"),
    "hu": ("január", "február", "március", "április", "május", "június", "július",
           "augusztus", "szeptember", "október", "november", "december"),
    "de": ("Januar", "Februar", "März", "April", "Mai", "Juni", "Juli",
           "August", "September", "Oktober", "November", "Dezember"),
    "ro": ("ianuarie", "februarie", "martie", "aprilie", "mai", "iunie", "iulie",
           "august", "septembrie", "octombrie", "noiembrie", "decembrie"),
    "fr": ("janvier", "février", "mars", "avril", "mai", "juin", "juillet",
           "août", "septembre", "octobre", "novembre", "décembre"),
    "es": ("enero", "febrero", "marzo", "abril", "mayo", "junio", "julio",
           "agosto", "septiembre", "octubre", "noviembre", "diciembre"),
    "it": ("gennaio", "febbraio", "marzo", "aprile", "maggio", "giugno", "luglio",
           "agosto", "settembre", "ottobre", "novembre", "dicembre"),
    # genitive forms, as used in a full date
    "sk": ("januára", "februára", "marca", "apríla", "mája", "júna", "júla",
           "augusta", "septembra", "októbra", "novembra", "decembra"),
    "cz": ("ledna", "února", "března", "dubna", "května", "června", "července",
           "srpna", "září", "října", "listopadu", "prosince"),
    "se": ("januari", "februari", "mars", "april", "maj", "juni", "juli",
           "augusti", "september", "oktober", "november", "december"),
    "no": ("januar", "februar", "mars", "april", "mai", "juni", "juli",
           "august", "september", "oktober", "november", "desember"),
    "dk": ("januar", "februar", "marts", "april", "maj", "juni", "juli",
           "august", "september", "oktober", "november", "december"),
    "pl": ("stycznia", "lutego", "marca", "kwietnia", "maja", "czerwca", "lipca",
           "sierpnia", "września", "października", "listopada", "grudnia"),
}

_DATE_PATTERNS = {
    "en": "{month} {day}, {year}",
    "hu": "{year}. {month} {day}.",
    "de": "{day}. {month} {year}",
    "es": "{day} de {month} de {year}",
    "sk": "{day}. {month} {year}",
    "cz": "{day}. {month} {year}",
    "no": "{day}. {month} {year}",
    "dk": "{day}. {month} {year}",
}
_DEFAULT_DATE_PATTERN = "{day} {month} {year}"

PERIOD_SEPARATOR = " → "


def parse_date(value) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_instant(value) -> datetime | None:
    if isinstance(value, datetime):
        return _as_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return _as_naive_utc(datetime.fromisoformat(raw))
    except ValueError:
        return None


def format_date(value, locale: str) -> str | None:
    """Long-form date in the given locale; unparseable strings come back as-is."""
    if value is None or value == "":
        return None
    parsed = parse_date(value)
    if parsed is None:
        return value if isinstance(value, str) else str(value)
    months = _MONTHS.get(locale, _MONTHS[FALLBACK_LOCALE])
    pattern = _DATE_PATTERNS.get(locale, _DEFAULT_DATE_PATTERN)
    return pattern.format(day=parsed.day, month=months[parsed.month - 1], year=parsed.year)


def format_period(start, end, locale: str) -> str | None:
    formatted_start = format_date(start, locale)
    formatted_end = format_date(end, locale)
    if formatted_start and formatted_end:
        return f"{formatted_start}{PERIOD_SEPARATOR}{formatted_end}"
    return formatted_start or formatted_end


def rental_days(start, end) -> int | None:
    """Whole days between two dates, at least 1; None if either is missing or end < start."""
    start_at = _parse_instant(start)
    end_at = _parse_instant(end)
    if start_at is None or end_at is None:
        return None
    seconds = (end_at - start_at).total_seconds()
    if seconds < 0:
        return None
    return max(1, math.floor(seconds / 86400 + 0.5))
