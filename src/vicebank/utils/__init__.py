"""Utility functions for vicebank."""

from vicebank.utils.date_parser import (
    parse_entry_datetime,
    parse_zoned_datetime,
    try_parse_zoned_datetime,
    period_bounds,
)

__all__ = [
    "parse_entry_datetime",
    "parse_zoned_datetime",
    "try_parse_zoned_datetime",
    "period_bounds",
]
