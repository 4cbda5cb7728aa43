"""
Country display names and flag glyphs for the region/city slots.
"""

from functools import lru_cache
from typing import Mapping, Optional

from babel import Locale, UnknownLocaleError

# UN M.49 code for "World"; used when the platform reports no country
WORLDWIDE = "001"

_REGIONAL_INDICATOR_A = 0x1F1E6


@lru_cache(maxsize=16)
def _territory_names(locale: str) -> Mapping[str, str]:
    try:
        return Locale.parse(locale, sep="-" if "-" in locale else "_").territories
    except (UnknownLocaleError, ValueError):
        return Locale("en").territories


def country_name(code: Optional[str], locale: str = "en") -> str:
    """
    Resolve a 2-letter country code to its display name in `locale`.

    Falls back to the worldwide name when no code is given. Codes the
    locale data does not know resolve to themselves, so this never fails.

    Examples:
        >>> country_name("US")
        'United States'
        >>> country_name("JP")
        'Japan'
    """
    key = (code or WORLDWIDE).upper()
    return _territory_names(locale).get(key, key)


def flag(code: Optional[str]) -> str:
    """Regional-indicator flag for a 2-letter country code, "" otherwise"""
    if not code or len(code) != 2 or not code.isascii() or not code.isalpha():
        return ""
    return "".join(chr(_REGIONAL_INDICATOR_A + ord(char) - ord("A")) for char in code.upper())


def place_label(code: Optional[str], place: Optional[str], locale: str = "en") -> str:
    """
    Composite text for the region and city slots.

    The flag glyph, then the place and country name comma-joined with
    empty parts dropped:

        >>> place_label("JP", "Tokyo")
        '🇯🇵 Tokyo,Japan'
        >>> place_label("JP", None)
        '🇯🇵 Japan'
    """
    text = ",".join(part for part in (place, country_name(code, locale)) if part)
    return " ".join(part for part in (flag(code), text) if part)
