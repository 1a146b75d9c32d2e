"""Recurrence frequency for tasks and task deposits."""

from enum import Enum

from vicebank.domain.errors import ValidationError


class Frequency(str, Enum):
    """How often a task can earn tokens."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


_ALIASES = {
    "day": Frequency.DAILY,
    "daily": Frequency.DAILY,
    "week": Frequency.WEEKLY,
    "weekly": Frequency.WEEKLY,
    "month": Frequency.MONTHLY,
    "monthly": Frequency.MONTHLY,
}


def is_frequency(value: object) -> bool:
    """Return True if value names a frequency (case-insensitive)."""
    return isinstance(value, str) and value.lower() in _ALIASES


def frequency_from_string(value: str) -> Frequency:
    """Convert a frequency name such as "daily" or "week" to a Frequency.

    Raises:
        ValidationError: If the name is not recognized
    """
    if not is_frequency(value):
        raise ValidationError(f"Invalid frequency: {value}")
    return _ALIASES[value.lower()]
