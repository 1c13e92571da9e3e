"""Locale negotiation and UI message catalogues."""

import json
import logging
import os
from functools import lru_cache
from typing import Dict, Optional

from route_weather.config import DEFAULT_LOCALE, LOCALES

logger = logging.getLogger(__name__)

MESSAGES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "messages")

# Language tags that share a catalogue with a supported locale
LOCALE_ALIASES = {
    "nb": "no",
    "nn": "no",
}


class UnknownLocaleError(Exception):
    """Raised for a locale without a message catalogue."""
    pass


def normalize_locale(tag: str) -> Optional[str]:
    """Map a language tag such as 'nb-NO' to a supported locale, if any."""
    primary = tag.strip().lower().replace("_", "-").split("-")[0]
    primary = LOCALE_ALIASES.get(primary, primary)
    return primary if primary in LOCALES else None


def negotiate_locale(accept_language: Optional[str]) -> str:
    """Pick the preferred supported locale from an Accept-Language header.

    Args:
        accept_language: Raw header value, e.g. "nb-NO,nb;q=0.9,en;q=0.8"

    Returns:
        Supported locale, DEFAULT_LOCALE if nothing matches
    """
    if not accept_language:
        return DEFAULT_LOCALE

    candidates = []
    for position, part in enumerate(accept_language.split(",")):
        tag, _, params = part.partition(";")
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        locale = normalize_locale(tag) if tag.strip() and tag.strip() != "*" else None
        if locale and quality > 0:
            candidates.append((-quality, position, locale))

    if not candidates:
        return DEFAULT_LOCALE
    return min(candidates)[2]


@lru_cache(maxsize=len(LOCALES))
def load_messages(locale: str) -> Dict:
    """Load the message catalogue for a locale.

    Raises:
        UnknownLocaleError: If the locale is not supported
    """
    if locale not in LOCALES:
        raise UnknownLocaleError(f"Unsupported locale: {locale}")

    path = os.path.join(MESSAGES_DIR, f"{locale}.json")
    logger.info(f"Loading messages for locale '{locale}'")
    with open(path, encoding="utf-8") as f:
        return json.load(f)
