"""
Date helpers

Ticket dates come from phones, spreadsheets and Telegram messages in any
ISO-8601 shape (date-only, naive, with offset). Everything is normalized to
timezone-aware datetimes; naive values are taken as local time.
"""

from datetime import date, datetime, time, timezone
from typing import Union

from dateutil import parser as date_parser

DateLike = Union[str, date, datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Attach the local timezone to naive datetimes"""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def parse_datetime(value: DateLike) -> datetime:
    """
    Parse an ISO string, date or datetime into an aware datetime

    Raises:
        ValueError: If the string is not a recognisable date
    """
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return ensure_aware(datetime.combine(value, time.min))
    if isinstance(value, str):
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid date: {value!r}") from e
        return ensure_aware(parsed)
    raise ValueError(f"Unsupported date value: {value!r}")


def local_date(value: datetime) -> date:
    """Calendar day of a datetime in local time"""
    return ensure_aware(value).astimezone().date()


def to_local_date(value: DateLike) -> date:
    """Calendar day of any date-like value; plain dates pass through"""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, str) and len(value.strip()) == 10:
        # YYYY-MM-DD is a calendar day, no timezone shift
        return date.fromisoformat(value.strip())
    return local_date(parse_datetime(value))
