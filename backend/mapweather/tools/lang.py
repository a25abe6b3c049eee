from functools import lru_cache
from typing import Optional

from babel import Locale, UnknownLocaleError

from mapweather.config import settings


@lru_cache(maxsize=8)
def _locale(code: str) -> Optional[Locale]:
    try:
        return Locale.parse(code)
    except (UnknownLocaleError, ValueError):
        return None

def country_display_name(code: Optional[str], lang: Optional[str] = None) -> str:
    """
    Map a 2-letter country code ('DE', 'fr') to its localized region name
    ('Deutschland', 'Frankreich'). Falls back to the raw code.
    """
    raw = (code or "").strip()
    if not raw:
        return raw
    loc = _locale(lang or settings.DISPLAY_LANG)
    if loc is None:
        return raw
    return loc.territories.get(raw.upper(), raw)
