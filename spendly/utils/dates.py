"""Date helpers shared by the expense filters and stats.

All datetimes are stored as naive UTC.
"""
from datetime import date, datetime, time, timezone
from typing import Annotated, Optional

from pydantic import PlainSerializer

from spendly.core.errors import ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def as_utc(value: datetime) -> datetime:
    """Attach the UTC zone to a stored naive datetime for output."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Response field type: stored naive UTC, rendered with a UTC marker
UTCDateTime = Annotated[datetime, PlainSerializer(as_utc, return_type=datetime)]


def start_of_month(now: Optional[datetime] = None) -> datetime:
    now = now or utcnow()
    return datetime(now.year, now.month, 1)


def parse_date_bound(value: Optional[str], field: str, end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse an ISO 8601 date or datetime from a query parameter.

    A bare date (``2024-01-31``) means midnight, or the last microsecond of
    that day when ``end_of_day`` is set so that inclusive upper bounds cover
    the whole day.
    """
    if value is None or value.strip() == "":
        return None
    raw = value.strip()
    try:
        if len(raw) == 10:
            day = date.fromisoformat(raw)
            if end_of_day:
                return datetime.combine(day, time.max)
            return datetime.combine(day, time.min)
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        return to_naive_utc(datetime.fromisoformat(raw))
    except ValueError:
        raise ValidationError.for_field(field, f"{field} must be a valid ISO 8601 date")
