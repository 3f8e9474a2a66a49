"""Fee normalization shared by every booking email and the pricing form.

Raw fee fields arrive as free-form strings typed by an admin ("300", "1200,50",
"250 €", "", "nem"). Nothing in this module raises: a value that cannot be
read simply does not contribute to the total.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

FEE_FIELDS = ("rentalFee", "deposit", "insurance", "deliveryFee", "extrasFee")

KIND_RENTAL_FEE = "rentalFee"
KIND_INSURANCE = "insurance"
KIND_DEPOSIT = "deposit"
KIND_DELIVERY_FEE = "deliveryFee"
KIND_EXTRAS_FEE = "extrasFee"
KIND_TOTAL = "total"

_DECLINED_INSURANCE = {"false", "no", "nem", "0"}
_NOT_NUMERIC = re.compile(r"[^\d,.\-]")
_FLOAT_PREFIX = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def sanitize_value(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def parse_amount(value: Any) -> float:
    """Read the leading number out of a price string; 0 when there is none.

    Only the first comma is treated as a decimal separator, so "1200,50" reads
    as 1200.5.
    """
    trimmed = sanitize_value(value)
    if not trimmed:
        return 0.0
    cleaned = _NOT_NUMERIC.sub("", trimmed).replace(",", ".", 1)
    match = _FLOAT_PREFIX.match(cleaned)
    if not match:
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def normalize_insurance_selection(value: Any) -> str | None:
    """None for unset or explicitly declined insurance, else the trimmed amount."""
    trimmed = sanitize_value(value)
    if not trimmed:
        return None
    if trimmed.lower() in _DECLINED_INSURANCE:
        return None
    return trimmed


def normalize_pricing(values: Mapping[str, Any] | None) -> dict[str, str] | None:
    """Keep the five fee fields that carry a value; None when all are empty."""
    if not values:
        return None
    out = {}
    for key in FEE_FIELDS:
        cleaned = sanitize_value(values.get(key))
        if cleaned is not None:
            out[key] = cleaned
    return out or None


def format_total(amount: float) -> str | None:
    if amount == 0:
        return None
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"


def format_price(value: str | None) -> str | None:
    trimmed = sanitize_value(value)
    return f"{trimmed} €" if trimmed else None


@dataclass(frozen=True)
class FeeLine:
    kind: str
    amount: str | None = None
    # set on an insurance line offered next to a deposit
    note: bool = False

    @property
    def display(self) -> str | None:
        return format_price(self.amount)


@dataclass(frozen=True)
class ResolvedFees:
    rental_fee: str | None = None
    insurance: str | None = None
    deposit: str | None = None
    delivery_fee: str | None = None
    extras_fee: str | None = None
    has_insurance: bool = False
    total: str | None = None
    # the deposit that insurance replaced, kept for audit
    waived_deposit: str | None = field(default=None, compare=False)

    def lines(self) -> list[FeeLine]:
        """Fee rows in display order.

        Rental, delivery and extras are always present (possibly without an
        amount). Insurance appears only when it applies, the deposit only when
        it applies and has a value, and the total only when it is non-zero.
        """
        out = [FeeLine(KIND_RENTAL_FEE, self.rental_fee)]
        if self.has_insurance:
            out.append(FeeLine(KIND_INSURANCE, self.insurance))
        if self.deposit:
            out.append(FeeLine(KIND_DEPOSIT, self.deposit))
        out.append(FeeLine(KIND_DELIVERY_FEE, self.delivery_fee))
        out.append(FeeLine(KIND_EXTRAS_FEE, self.extras_fee))
        if self.total:
            out.append(FeeLine(KIND_TOTAL, self.total))
        return out

    def as_pricing(self) -> dict[str, str | None]:
        return {
            "rentalFee": self.rental_fee,
            "insurance": self.insurance,
            "deposit": self.deposit,
            "deliveryFee": self.delivery_fee,
            "extrasFee": self.extras_fee,
            "totalFee": self.total,
        }


def _first_present(key: str, *sources: Mapping[str, Any] | None) -> Any:
    for source in sources:
        if source and source.get(key) is not None:
            return source.get(key)
    return None


def resolve_fees(
    request_data: Mapping[str, Any] | None,
    manual_pricing: Mapping[str, Any] | None,
    insurance_consent: bool | None = None,
) -> ResolvedFees:
    """Merge quote-time fees with fees typed on the booking and apply exclusivity.

    A field present on the quote's booking request snapshot wins over the same
    field on the booking's own pricing. An explicit consent flag overrides
    whatever the insurance field says; when insurance applies the deposit is
    dropped from both display and total.
    """
    normalized_insurance = normalize_insurance_selection(
        _first_present(KIND_INSURANCE, request_data, manual_pricing)
    )
    if insurance_consent is not None:
        has_insurance = bool(insurance_consent)
    else:
        has_insurance = normalized_insurance is not None

    insurance = normalized_insurance if has_insurance else None
    deposit_source = sanitize_value(_first_present(KIND_DEPOSIT, request_data, manual_pricing))
    deposit = None if has_insurance else deposit_source
    rental_fee = sanitize_value(_first_present(KIND_RENTAL_FEE, request_data, manual_pricing))
    delivery_fee = sanitize_value(_first_present(KIND_DELIVERY_FEE, request_data, manual_pricing))
    extras_fee = sanitize_value(_first_present(KIND_EXTRAS_FEE, request_data, manual_pricing))

    total = (
        parse_amount(rental_fee)
        + parse_amount(insurance)
        + parse_amount(deposit)
        + parse_amount(delivery_fee)
        + parse_amount(extras_fee)
    )
    return ResolvedFees(
        rental_fee=rental_fee,
        insurance=insurance,
        deposit=deposit,
        delivery_fee=delivery_fee,
        extras_fee=extras_fee,
        has_insurance=has_insurance,
        total=format_total(round(total, 2)),
        waived_deposit=deposit_source if has_insurance else None,
    )


def offer_lines(pricing: Mapping[str, Any] | None) -> list[FeeLine]:
    """Fee rows for an offer: deposit and insurance are alternatives, both listed.

    Only fields with a value are returned. The insurance line carries the
    "no deposit needed" note when a deposit is offered next to it.
    """
    pricing = pricing or {}
    rental_fee = sanitize_value(pricing.get(KIND_RENTAL_FEE))
    deposit = sanitize_value(pricing.get(KIND_DEPOSIT))
    insurance = sanitize_value(pricing.get(KIND_INSURANCE))
    delivery_fee = sanitize_value(pricing.get(KIND_DELIVERY_FEE))
    extras_fee = sanitize_value(pricing.get(KIND_EXTRAS_FEE))

    out = []
    if rental_fee:
        out.append(FeeLine(KIND_RENTAL_FEE, rental_fee))
    if deposit:
        out.append(FeeLine(KIND_DEPOSIT, deposit))
    if insurance:
        out.append(FeeLine(KIND_INSURANCE, insurance, note=bool(deposit)))
    if delivery_fee:
        out.append(FeeLine(KIND_DELIVERY_FEE, delivery_fee))
    if extras_fee:
        out.append(FeeLine(KIND_EXTRAS_FEE, extras_fee))
    return out
