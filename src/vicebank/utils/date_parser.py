"""Date parsing utilities.

Ledger dates are zoned timestamps. Strings without an offset are read in
``America/Chicago``; strings with an offset keep their instant and are
converted to that zone, so every stored date carries the same zone.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union

from dateutil import parser as date_parser
from dateutil import tz
from dateutil.relativedelta import relativedelta

from vicebank.domain.frequency import Frequency

DEFAULT_TIMEZONE_NAME = "America/Chicago"
DEFAULT_TIMEZONE = tz.gettz(DEFAULT_TIMEZONE_NAME)


def parse_zoned_datetime(value: str, zone=DEFAULT_TIMEZONE) -> datetime:
    """Parse an ISO-8601 string into a timezone-aware datetime.

    Args:
        value: ISO-8601 date or date-time string
        zone: Zone applied to naive values and used for the result

    Returns:
        Aware datetime in ``zone``

    Raises:
        ValueError: If the string is not valid ISO-8601
    """
    if not isinstance(value, str):
        raise ValueError(f"Could not parse date {value!r}: not a string")

    try:
        parsed = date_parser.isoparse(value.strip())
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=zone)
    return parsed.astimezone(zone)


def try_parse_zoned_datetime(
    value: Union[str, datetime, None], zone=DEFAULT_TIMEZONE
) -> Optional[datetime]:
    """Parse a date filter, returning None when it is missing or invalid.

    Invalid filters are treated as absent rather than as errors.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=zone)
        return value
    try:
        return parse_zoned_datetime(value, zone)
    except ValueError:
        return None


def is_valid_datetime_string(value: object) -> bool:
    """Return True if value is a string holding a parseable ISO date-time."""
    return isinstance(value, str) and try_parse_zoned_datetime(value) is not None


def format_zoned_datetime(value: datetime) -> str:
    """Format a zoned datetime as ISO-8601 with milliseconds and offset.

    Sub-millisecond values keep full microsecond precision.
    """
    if value.microsecond % 1000:
        return value.isoformat(timespec="microseconds")
    return value.isoformat(timespec="milliseconds")


def parse_iso_date(value: str) -> date:
    """Parse a calendar date (YYYY-MM-DD).

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    if not isinstance(value, str):
        raise ValueError(f"Could not parse date {value!r}: not a string")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise ValueError(f"Could not parse date '{value}': {e}")


def is_valid_date_string(value: object) -> bool:
    """Return True if value is a string holding a YYYY-MM-DD date."""
    try:
        parse_iso_date(value)  # type: ignore[arg-type]
    except ValueError:
        return False
    return True


def period_bounds(moment: datetime, frequency: Frequency) -> tuple[datetime, datetime]:
    """Get the start and end of the period containing ``moment``.

    Days run midnight to midnight, weeks start on Monday and months on the
    first. The end is the last microsecond of the period, in the same zone
    as ``moment``.

    Args:
        moment: Aware datetime
        frequency: Period length

    Returns:
        Tuple of (start, end) for the period
    """
    start_of_day = moment.replace(hour=0, minute=0, second=0, microsecond=0)

    if frequency == Frequency.DAILY:
        start = start_of_day
        end = start + relativedelta(days=1)
    elif frequency == Frequency.WEEKLY:
        start = start_of_day - timedelta(days=start_of_day.weekday())
        end = start + relativedelta(weeks=1)
    elif frequency == Frequency.MONTHLY:
        start = start_of_day.replace(day=1)
        end = start + relativedelta(months=1)
    else:
        raise ValueError(f"Unknown frequency: '{frequency}'")

    return start, end - relativedelta(microseconds=1)


def parse_entry_datetime(value: Optional[str] = None, zone=DEFAULT_TIMEZONE) -> datetime:
    """Parse the date of a new ledger entry from a CLI argument.

    Supports "now", "today" (both the current time), "yesterday" (the
    current time one day earlier) and ISO dates or date-times. A missing
    value means now.

    Raises:
        ValueError: If date string cannot be parsed
    """
    now = datetime.now(zone)
    if value is None:
        return now

    keyword = value.strip().lower()
    if keyword in ("now", "today"):
        return now
    if keyword == "yesterday":
        return now - timedelta(days=1)

    return parse_zoned_datetime(value, zone)


def get_date_range(period: str) -> tuple[datetime, datetime]:
    """Get zoned start and end timestamps for a named period.

    Args:
        period: One of this-week, this-month, last-week, last-month

    Returns:
        Tuple of (start, end) covering the whole period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    now = datetime.now(DEFAULT_TIMEZONE)

    if period == "this-week":
        return period_bounds(now, Frequency.WEEKLY)
    elif period == "this-month":
        return period_bounds(now, Frequency.MONTHLY)
    elif period == "last-week":
        return period_bounds(now - relativedelta(weeks=1), Frequency.WEEKLY)
    elif period == "last-month":
        return period_bounds(now - relativedelta(months=1), Frequency.MONTHLY)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-week, this-month, last-week, last-month"
    )
