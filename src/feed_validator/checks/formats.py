"""Validators for formatted values: URLs, timezones, languages, currencies."""

import re
from urllib.parse import urlsplit

import pycountry
import pytz

TIMEZONES = set(pytz.all_timezones)
# ISO 639-1 and ISO 639-3 language codes, lower case
LANGS_639_1 = {
    lang.alpha_2 for lang in pycountry.languages if hasattr(lang, "alpha_2")
}
LANGS_639_3 = {lang.alpha_3 for lang in pycountry.languages}
CURRENCIES = {c.alpha_3 for c in pycountry.currencies}

LOCALE_SEPARATOR = re.compile(r"[-_]")


def valid_url(url: str) -> bool:
    """Return True if url is a fully qualified http or https URL."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def valid_timezone(timezone: str) -> bool:
    """Return True if timezone is an IANA timezone name, e.g. 'Europe/Paris'."""
    return timezone in TIMEZONES


def valid_language(lang: str) -> bool:
    """Return True if lang is an ISO 639 language code or a locale.

    Two letters are checked against ISO 639-1, three letters against
    ISO 639-3, and longer codes (e.g. 'fr-FR', 'en_US') by their primary
    language subtag.
    """
    lang = lang.strip().lower()
    if len(lang) == 2:  # noqa: PLR2004
        return lang in LANGS_639_1
    if len(lang) == 3:  # noqa: PLR2004
        return lang in LANGS_639_3
    if 4 <= len(lang) <= 11:  # noqa: PLR2004
        primary = LOCALE_SEPARATOR.split(lang, maxsplit=1)[0]
        return primary != lang and primary in LANGS_639_1 | LANGS_639_3
    return False


def valid_currency(code: str) -> bool:
    """Return True if code is an ISO 4217 currency code, e.g. 'EUR'."""
    return code in CURRENCIES
