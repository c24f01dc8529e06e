"""Utility modules for korea-transit."""

from .korean_text import (
    contains_text,
    fold,
    is_ars_id,
    normalize_station_name,
    starts_with_text,
)

__all__ = [
    "contains_text",
    "fold",
    "is_ars_id",
    "normalize_station_name",
    "starts_with_text",
]
