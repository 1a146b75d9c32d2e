"""Field checks for validating entity JSON."""

import math
from typing import Any, Callable, Mapping

from vicebank.domain.errors import ValidationError, invalid_json

FieldCheck = Callable[[Any], bool]


def is_record(value: Any) -> bool:
    """Return True for a JSON object."""
    return isinstance(value, dict)


def is_string(value: Any) -> bool:
    """Return True for a JSON string."""
    return isinstance(value, str)


def is_number(value: Any) -> bool:
    """Return True for a finite JSON number (booleans, NaN and infinities excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_optional_number(value: Any) -> bool:
    """Return True for a JSON number or null."""
    return value is None or is_number(value)


def failed_fields(data: Any, checks: Mapping[str, FieldCheck]) -> list[str]:
    """Return the names of fields that fail their check.

    Returns ``["root"]`` when ``data`` is not an object at all.
    """
    if not is_record(data):
        return ["root"]
    return [name for name, check in checks.items() if not check(data.get(name))]


def require_fields(data: Any, checks: Mapping[str, FieldCheck]) -> dict[str, Any]:
    """Validate ``data`` against ``checks`` and return it as a dict.

    Raises:
        ValidationError: Listing every failing field
    """
    errors = failed_fields(data, checks)
    if errors:
        raise ValidationError(invalid_json(errors))
    return data
