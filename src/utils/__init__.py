"""Utilities package"""

from .date_utils import (
    is_empty_range,
    parse_iso_instant,
    resolve_date_range,
    to_iso_millis,
    utc_day_bounds,
)

__all__ = [
    "is_empty_range",
    "parse_iso_instant",
    "resolve_date_range",
    "to_iso_millis",
    "utc_day_bounds",
]
