import pytest

from fleet_admin.emails import copy as email_copy


@pytest.mark.parametrize("raw, expected", [
    ("HU", "hu"),
    ("hu", "hu"),
    ("de-AT", "de"),
    ("sv_SE", "se"),
    ("cs", "cz"),
    ("da-DK", "dk"),
    ("XX", "en"),
    ("", "en"),
    (None, "en"),
])
def test_normalize_locale(raw, expected):
    assert email_copy.normalize_locale(raw) == expected


def test_normalize_locale_explicit_default():
    assert email_copy.normalize_locale("xx", default="hu") == "hu"
    assert email_copy.normalize_locale("xx", default="zz") == "en"


@pytest.mark.parametrize("table", [
    email_copy.REQUEST_COPY,
    email_copy.STATIC_TEXTS,
    email_copy.FINALIZATION_COPY,
])
def test_every_supported_locale_has_copy(table):
    missing = [loc for loc in email_copy.SUPPORTED_LOCALES if loc not in table]
    assert missing == []


def test_finalization_labels_match_english_keys():
    keys = set(email_copy.FINALIZATION_COPY["en"]["labels"])
    for locale, copy in email_copy.FINALIZATION_COPY.items():
        assert set(copy["labels"]) == keys, locale


def test_unknown_locale_copy_falls_back_to_english():
    assert email_copy.confirmation_copy("de") is email_copy.CONFIRMATION_COPY["en"]
    assert email_copy.request_copy("xx") is email_copy.REQUEST_COPY["en"]


@pytest.mark.parametrize("locale, expected", [
    ("en", "March 5, 2025"),
    ("hu", "2025. március 5."),
    ("de", "5. März 2025"),
    ("es", "5 de marzo de 2025"),
    ("fr", "5 mars 2025"),
])
def test_format_date(locale, expected):
    assert email_copy.format_date("2025-03-05", locale) == expected


def test_format_date_keeps_unparseable_text():
    assert email_copy.format_date("next spring", "en") == "next spring"
    assert email_copy.format_date("", "en") is None


def test_format_period():
    assert email_copy.format_period("2025-03-01", "2025-03-04", "en") == "March 1, 2025 → March 4, 2025"
    assert email_copy.format_period("2025-03-01", None, "en") == "March 1, 2025"
    assert email_copy.format_period(None, None, "en") is None


def test_rental_days():
    assert email_copy.rental_days("2025-03-01", "2025-03-04") == 3
    assert email_copy.rental_days("2025-03-01", "2025-03-01") == 1
    assert email_copy.rental_days("2025-03-04", "2025-03-01") is None
    assert email_copy.rental_days(None, "2025-03-01") is None


def test_greeting_omits_blank_name():
    assert email_copy.greeting("Hi{name},", "Anna") == "Hi Anna,"
    assert email_copy.greeting("Hi{name},", "  ") == "Hi,"
