"""Build booking emails as block documents and serialize them.

Each email type is first assembled into an ``EmailDocument``: an ordered list of
blocks whose content is already decided (which fee rows exist, which sections
are shown). ``render_text`` and ``render_html`` only serialize those blocks, so
the two bodies always carry the same information.
"""
from dataclasses import dataclass, field
from html import escape
from urllib.parse import quote

from fleet_admin.core.config import settings
from fleet_admin.emails import copy as email_copy
from fleet_admin.services import fees

ADMIN_SIGNATURE = {
    "company": "ZODIACS Rent a Car",
    "phone": "+34 683 192 422",
    "email": "info@zodiacsrentacar.com",
    "website": "https://zodiacsrentacar.com",
    "locations": "Fuerteventura & Lanzarote",
}

BRAND = {
    "sky": "#8ecae6",
    "blue": "#219ebc",
    "navy": "#023047",
    "navy_light": "#234f63",
    "amber": "#ffb703",
    "orange": "#fb8500",
    "background": "#f7f9fb",
}

EMPTY = "—"
DEFAULT_SIGNER = "Zodiacs Rent a Car"


@dataclass
class Paragraph:
    text: str
    muted: bool = False


@dataclass
class Row:
    label: str
    value: str
    strong: bool = False


@dataclass
class Rows:
    rows: list[Row]
    title: str | None = None


@dataclass
class Link:
    label: str
    url: str


@dataclass
class Links:
    links: list[Link]
    intro: str | None = None


@dataclass
class Button:
    label: str
    url: str
    fallback: str | None = None  # "if the button does not work" line


@dataclass
class Images:
    label: str
    urls: list[str]


@dataclass
class Signature:
    lines: list[str]  # first line is emphasized
    slogans: list[str] = field(default_factory=list)


@dataclass
class EmailDocument:
    subject: str
    locale: str
    heading: str
    blocks: list = field(default_factory=list)
    logo_src: str | None = None


def _plain(value) -> str:
    if value is None:
        return EMPTY
    text = str(value).strip()
    return text or EMPTY


def _price(value: str | None) -> str:
    return fees.format_price(value) or EMPTY


def format_address(value: dict | None) -> str | None:
    if not value:
        return None
    parts = [
        value.get(key)
        for key in ("country", "postalCode", "city", "street", "streetType", "doorNumber")
    ]
    parts = [str(p).strip() for p in parts if p and str(p).strip()]
    return ", ".join(parts) if parts else None


def site_url(locale: str) -> str:
    return f"{settings.PUBLIC_SITE_BASE_URL.rstrip('/')}/{locale}"


def _signature_block(signer: str, locale: str, *, with_slogans: bool = True) -> Signature:
    texts = email_copy.static_texts(locale)
    return Signature(
        lines=[
            signer,
            texts["admin_title"],
            ADMIN_SIGNATURE["company"],
            f"Tel: {ADMIN_SIGNATURE['phone']}",
            f"Email: {ADMIN_SIGNATURE['email']}",
            f"Web: {site_url(locale)}",
            f"{texts['location_label']}: {ADMIN_SIGNATURE['locations']}",
        ],
        slogans=list(texts["slogans"]) if with_slogans else [],
    )


# --- booking request -------------------------------------------------------------

@dataclass
class BookingRequestInput:
    quote_id: str
    car_id: str
    name: str | None = None
    locale: str | None = None
    car_name: str | None = None
    rental_start: str | None = None
    rental_end: str | None = None
    pricing: dict = field(default_factory=dict)
    admin_name: str | None = None
    car_images: list[str] = field(default_factory=list)


def booking_link(locale: str, car_id: str, quote_id: str) -> str:
    return f"{site_url(locale)}/cars/{quote(car_id, safe='')}/rent?quoteId={quote(quote_id, safe='')}"


_OFFER_LABELS = {
    fees.KIND_RENTAL_FEE: "rental_fee_label",
    fees.KIND_DEPOSIT: "deposit_label",
    fees.KIND_INSURANCE: "insurance_label",
    fees.KIND_DELIVERY_FEE: "delivery_fee_label",
    fees.KIND_EXTRAS_FEE: "extras_fee_label",
}


def build_booking_request_document(data: BookingRequestInput, logo_src: str | None = None) -> EmailDocument:
    locale = email_copy.normalize_locale(data.locale)
    copy = email_copy.request_copy(locale)
    texts = email_copy.static_texts(locale)
    link = booking_link(locale, data.car_id, data.quote_id)

    doc = EmailDocument(subject=copy["subject"], locale=locale, heading=copy["subject"], logo_src=logo_src)
    doc.blocks.append(Paragraph(email_copy.greeting(copy["greeting"], data.name)))
    doc.blocks.append(Paragraph(copy["thank_you"]))
    doc.blocks.append(Paragraph(copy["instructions"]))
    doc.blocks.append(Paragraph(copy["payment_note"], muted=True))

    summary = []
    period = email_copy.format_period(data.rental_start, data.rental_end, locale)
    if period:
        days = email_copy.rental_days(data.rental_start, data.rental_end)
        summary.append(Row("", f"{period} ({days} {texts['days_suffix']})" if days else period, strong=True))
    car_label = (data.car_name or "").strip() or data.car_id
    if car_label:
        summary.append(Row("", car_label, strong=True))
    if summary:
        doc.blocks.append(Rows(summary))

    images = [url.strip() for url in data.car_images if isinstance(url, str) and url.strip()]
    if images:
        doc.blocks.append(Images(texts["car_images_label"], images))

    fee_rows = []
    for line in fees.offer_lines(data.pricing):
        if line.note:
            fee_rows.append(Row("", texts["insurance_note"]))
        fee_rows.append(Row(texts[_OFFER_LABELS[line.kind]], line.display))
    if fee_rows:
        doc.blocks.append(Rows(fee_rows))

    doc.blocks.append(Button(copy["cta"], link, fallback=texts["fallback_link"]))
    doc.blocks.append(Paragraph(texts["extras_note"], muted=True))
    doc.blocks.append(Paragraph(texts["delivery_note"], muted=True))
    doc.blocks.append(Paragraph(copy["signature"]))
    signer = (data.admin_name or "").strip() or DEFAULT_SIGNER
    doc.blocks.append(_signature_block(signer, locale))
    return doc


# --- booking confirmation (fee summary) ----------------------------------------

@dataclass
class ConfirmationInput:
    booking_code: str
    fees: fees.ResolvedFees
    name: str | None = None
    locale: str | None = None
    car_label: str | None = None
    rental_start: str | None = None
    rental_end: str | None = None


def build_confirmation_document(data: ConfirmationInput) -> EmailDocument:
    locale = email_copy.normalize_locale(data.locale)
    if locale not in email_copy.CONFIRMATION_COPY:
        locale = email_copy.FALLBACK_LOCALE
    copy = email_copy.confirmation_copy(locale)
    resolved = data.fees

    doc = EmailDocument(
        subject=f"{copy['subject']} ({data.booking_code})",
        locale=locale,
        heading=copy["subject"],
    )
    doc.blocks.append(Paragraph(email_copy.greeting(copy["greeting"], data.name)))
    doc.blocks.append(Paragraph(copy["intro"]))
    doc.blocks.append(Paragraph(copy["payment_note"], muted=True))
    doc.blocks.append(Rows(
        [
            Row(copy["booking_label"], data.booking_code),
            Row(copy["car_label"], _plain(data.car_label)),
            Row(copy["period_label"], _plain(email_copy.format_period(data.rental_start, data.rental_end, locale))),
            Row(copy["rental_fee_label"], _price(resolved.rental_fee)),
            Row(copy["insurance_label"], _price(resolved.insurance)),
            Row(copy["deposit_label"], _price(resolved.deposit)),
            Row(copy["extras_label"], _price(resolved.extras_fee)),
        ],
        title=copy["pricing_heading"],
    ))
    doc.blocks.append(Paragraph(copy["outro"]))
    doc.blocks.append(Signature([ADMIN_SIGNATURE["company"], ADMIN_SIGNATURE["phone"], ADMIN_SIGNATURE["email"]]))
    return doc


# --- booking finalization ---------------------------------------------------------

@dataclass
class FinalizationInput:
    booking_id: str
    booking_code: str
    car_id: str | None
    signer_name: str
    fees: fees.ResolvedFees
    locale: str | None = None
    car_label: str | None = None
    rental_start: str | None = None
    rental_end: str | None = None
    extras: list[str] = field(default_factory=list)
    adults: int | None = None
    children: int | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    invoice_name: str | None = None
    invoice_email: str | None = None
    invoice_phone: str | None = None
    invoice_address: str | None = None
    delivery_place_type: str | None = None
    delivery_location: str | None = None
    delivery_address: str | None = None
    arrival_flight: str | None = None
    departure_flight: str | None = None


def finalization_links(locale: str, booking_id: str, car_id: str | None) -> dict[str, str]:
    base = site_url(locale)
    rent_id = quote(booking_id, safe="")
    return {
        "thank_you": f"{base}/rent/thank-you?rentId={rent_id}",
        "contact": f"{base}/contact",
        "modify": f"{base}/cars/{quote(car_id or '', safe='')}/rent?rentId={rent_id}&action=modify",
        "cancel": f"{base}/rent/manage?action=cancel",
    }


_FINALIZATION_LABELS = {
    fees.KIND_RENTAL_FEE: "rental_fee",
    fees.KIND_INSURANCE: "insurance",
    fees.KIND_DEPOSIT: "deposit",
    fees.KIND_DELIVERY_FEE: "delivery_fee",
    fees.KIND_EXTRAS_FEE: "extras_fee",
    fees.KIND_TOTAL: "total",
}


def build_finalization_document(data: FinalizationInput, logo_src: str | None = None) -> EmailDocument:
    locale = email_copy.normalize_locale(data.locale)
    copy = email_copy.finalization_copy(locale)
    labels = copy["labels"]
    sections = copy["sections"]
    links = finalization_links(locale, data.booking_id, data.car_id)

    start = email_copy.format_date(data.rental_start, locale) or EMPTY
    end = email_copy.format_date(data.rental_end, locale) or EMPTY

    doc = EmailDocument(
        subject=f"{copy['subject']} - {data.booking_code}",
        locale=locale,
        heading=copy["subject"],
        logo_src=logo_src,
    )
    doc.blocks.append(Paragraph(copy["intro"]))
    doc.blocks.append(Paragraph(copy["instructions"]))
    doc.blocks.append(Paragraph(copy["retain_note"], muted=True))
    doc.blocks.append(Links(
        [Link(copy["modify_cta"], links["modify"]), Link(copy["cancel_cta"], links["cancel"])],
        intro=copy["manage_intro"],
    ))
    doc.blocks.append(Rows([
        Row(labels["booking_code"], data.booking_code, strong=True),
        Row(labels["car"], _plain(data.car_label), strong=True),
        Row(labels["period"], f"{start}{email_copy.PERIOD_SEPARATOR}{end}", strong=True),
    ]))

    fee_rows = [
        Row(labels[_FINALIZATION_LABELS[line.kind]], _price(line.amount), strong=line.kind == fees.KIND_TOTAL)
        for line in data.fees.lines()
    ]
    doc.blocks.append(Rows(fee_rows, title=sections["fees"]))

    doc.blocks.append(Rows(
        [
            Row(labels["extras_list"], ", ".join(data.extras) if data.extras else EMPTY),
            Row(labels["adults"], str(data.adults) if data.adults is not None else EMPTY),
            Row(labels["children"], str(data.children) if data.children is not None else EMPTY),
            Row(labels["contact_name"], _plain(data.contact_name)),
            Row(labels["contact_email"], _plain(data.contact_email)),
            Row(labels["contact_phone"], _plain(data.contact_phone)),
        ],
        title=sections["booking"],
    ))
    doc.blocks.append(Rows(
        [
            Row(labels["invoice_name"], _plain(data.invoice_name)),
            Row(labels["invoice_email"], _plain(data.invoice_email)),
            Row(labels["invoice_phone"], _plain(data.invoice_phone)),
            Row(labels["invoice_address"], _plain(data.invoice_address)),
        ],
        title=sections["billing"],
    ))
    doc.blocks.append(Rows(
        [
            Row(labels["delivery_location"], _plain(data.delivery_location)),
            Row(labels["delivery_type"], _plain(data.delivery_place_type)),
            Row(labels["delivery_address"], _plain(data.delivery_address)),
            Row(labels["arrival_flight"], _plain(data.arrival_flight)),
            Row(labels["departure_flight"], _plain(data.departure_flight)),
        ],
        title=sections["delivery"],
    ))
    doc.blocks.append(Button(copy["confirm_cta"], links["thank_you"]))
    doc.blocks.append(Button(copy["question_cta"], links["contact"]))
    doc.blocks.append(Paragraph(f"{copy['closing']},"))
    doc.blocks.append(_signature_block(data.signer_name, locale))
    return doc


# --- serializers -----------------------------------------------------------------

def _text_block(block) -> list[str]:
    if isinstance(block, Paragraph):
        return [block.text]
    if isinstance(block, Rows):
        lines = [block.title] if block.title else []
        for row in block.rows:
            lines.append(f"{row.label}: {row.value}" if row.label else row.value)
        return lines
    if isinstance(block, Links):
        lines = [block.intro] if block.intro else []
        lines.extend(f"{link.label}: {link.url}" for link in block.links)
        return lines
    if isinstance(block, Button):
        return [f"{block.label}: {block.url}"]
    if isinstance(block, Images):
        return [f"{block.label}:", *block.urls]
    if isinstance(block, Signature):
        lines = list(block.lines)
        if block.slogans:
            lines.append("")
            lines.extend(block.slogans)
        return lines
    raise TypeError(f"unknown email block {type(block).__name__}")


def render_text(doc: EmailDocument) -> str:
    chunks = ["\n".join(_text_block(block)) for block in doc.blocks]
    return "\n\n".join(chunk for chunk in chunks if chunk)


def _e(value) -> str:
    return escape(str(value), quote=True)


def _html_block(block) -> str:
    navy, navy_light = BRAND["navy"], BRAND["navy_light"]
    if isinstance(block, Paragraph):
        color = navy_light if block.muted else navy
        size = 13 if block.muted else 15
        return f'<p style="margin:0 0 12px;font-size:{size}px;line-height:1.6;color:{color};">{_e(block.text)}</p>'
    if isinstance(block, Rows):
        out = ['<div style="border:1px solid rgba(2,48,71,0.08);border-radius:16px;padding:16px 18px;margin:0 0 18px;">']
        if block.title:
            out.append(
                f'<p style="margin:0 0 10px;font-size:12px;letter-spacing:0.12em;text-transform:uppercase;'
                f'font-weight:700;color:{navy};">{_e(block.title)}</p>'
            )
        out.append('<table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="border-collapse:collapse;">')
        for row in block.rows:
            weight = 800 if row.strong else 600
            if row.label:
                out.append(
                    f'<tr><td style="padding:6px 0;width:40%;font-size:13px;font-weight:600;color:{navy_light};">{_e(row.label)}</td>'
                    f'<td style="padding:6px 0;font-size:14px;font-weight:{weight};color:{navy};">{_e(row.value)}</td></tr>'
                )
            else:
                out.append(
                    f'<tr><td colspan="2" style="padding:6px 0;font-size:14px;font-weight:{weight};color:{navy};">{_e(row.value)}</td></tr>'
                )
        out.append("</table></div>")
        return "".join(out)
    if isinstance(block, Links):
        out = ['<div style="margin:0 0 18px;">']
        if block.intro:
            out.append(f'<p style="margin:0 0 8px;font-size:14px;color:{navy_light};">{_e(block.intro)}</p>')
        out.extend(
            f'<a href="{_e(link.url)}" style="display:inline-block;margin:0 12px 8px 0;color:{BRAND["blue"]};'
            f'font-weight:700;text-decoration:underline;">{_e(link.label)}</a>'
            for link in block.links
        )
        out.append("</div>")
        return "".join(out)
    if isinstance(block, Button):
        out = [
            f'<div style="text-align:center;margin:0 0 18px;"><a href="{_e(block.url)}" '
            f'style="display:inline-block;padding:14px 28px;border-radius:999px;background:{BRAND["orange"]};'
            f'color:#ffffff;font-weight:700;text-decoration:none;">{_e(block.label)}</a></div>'
        ]
        if block.fallback:
            out.append(
                f'<p style="margin:0 0 18px;text-align:center;font-size:12px;color:{navy_light};">{_e(block.fallback)}<br>'
                f'<a href="{_e(block.url)}" style="color:{BRAND["blue"]};word-break:break-all;">{_e(block.url)}</a></p>'
            )
        return "".join(out)
    if isinstance(block, Images):
        cells = "".join(
            f'<td style="padding:4px;width:50%;"><img src="{_e(url)}" alt="{_e(block.label)}" width="260" '
            f'style="display:block;width:100%;border-radius:12px;"></td>'
            for url in block.urls
        )
        return (
            f'<p style="margin:0 0 8px;font-size:12px;text-transform:uppercase;font-weight:700;color:{navy};">{_e(block.label)}</p>'
            f'<table role="presentation" width="100%" cellpadding="0" cellspacing="0"><tr>{cells}</tr></table>'
        )
    if isinstance(block, Signature):
        first, *rest = block.lines or [""]
        out = [f'<div style="margin-top:10px;font-size:13px;line-height:1.5;color:{navy_light};text-align:right;">']
        out.append(f'<div style="font-weight:700;">{_e(first)}</div>')
        out.extend(f"<div>{_e(line)}</div>" for line in rest)
        out.extend(f'<div style="font-style:italic;">{_e(line)}</div>' for line in block.slogans)
        out.append("</div>")
        return "".join(out)
    raise TypeError(f"unknown email block {type(block).__name__}")


def render_html(doc: EmailDocument) -> str:
    logo = ""
    if doc.logo_src:
        logo = (
            f'<tr><td style="text-align:center;padding:24px 0 8px;">'
            f'<img src="{_e(doc.logo_src)}" alt="{_e(ADMIN_SIGNATURE["company"])}" width="160" style="display:inline-block;"></td></tr>'
        )
    body = "".join(_html_block(block) for block in doc.blocks)
    return (
        f'<!doctype html><html lang="{_e(doc.locale)}"><head><meta charset="utf-8"><title>{_e(doc.subject)}</title></head>'
        f'<body style="margin:0;padding:0;background:{BRAND["background"]};font-family:Arial,Helvetica,sans-serif;">'
        f'<table role="presentation" width="100%" cellpadding="0" cellspacing="0"><tr><td align="center">'
        f'<table role="presentation" width="600" cellpadding="0" cellspacing="0" '
        f'style="max-width:600px;background:#ffffff;border-radius:24px;margin:24px 0;">'
        f"{logo}"
        f'<tr><td style="padding:8px 32px 0;text-align:center;">'
        f'<h1 style="margin:0 0 18px;font-size:24px;color:{BRAND["navy"]};">{_e(doc.heading)}</h1></td></tr>'
        f'<tr><td style="padding:0 32px 32px;">{body}</td></tr>'
        f"</table></td></tr></table></body></html>"
    )
