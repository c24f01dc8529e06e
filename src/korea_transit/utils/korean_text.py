"""Korean text processing utilities."""

import re

STATION_SUFFIX = "역"
_STATION_SUFFIX_PATTERN = re.compile(rf"{STATION_SUFFIX}$")
_ARS_ID_PATTERN = re.compile(r"^\d{5}$")


def normalize_station_name(name: str) -> str:
    """Strip surrounding whitespace and a trailing station suffix.

    "강남역" and "강남" both normalize to "강남", so either spelling
    reaches the feed with the same query string.
    """
    return _STATION_SUFFIX_PATTERN.sub("", name.strip()).strip()


def is_ars_id(text: str) -> bool:
    """Check if text is a 5-digit bus stop number."""
    return bool(_ARS_ID_PATTERN.match(text))


def fold(text: str | None) -> str:
    """Case-fold text for comparisons, treating None as empty."""
    return (text or "").casefold()


def contains_text(haystack: str | None, needle: str) -> bool:
    """Case-insensitive substring test."""
    return fold(needle) in fold(haystack)


def starts_with_text(text: str | None, prefix: str) -> bool:
    """Case-insensitive prefix test."""
    return fold(text).startswith(fold(prefix))
