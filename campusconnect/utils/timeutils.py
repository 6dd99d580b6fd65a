# campusconnect/utils/timeutils.py
from datetime import date, datetime, time
from typing import Optional, Union

import pytz


def utcnow() -> datetime:
    return datetime.now(pytz.utc)


def isoformat(value: datetime) -> str:
    return value.astimezone(pytz.utc).isoformat()


def now_iso() -> str:
    return isoformat(utcnow())


def localize(value: datetime, timezone: str) -> datetime:
    """Attach the configured zone to a naive datetime; aware values pass through."""
    if value.tzinfo is not None:
        return value
    return pytz.timezone(timezone).localize(value)


def parse_datetime(value: Union[str, datetime, None], timezone: str = "UTC") -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return localize(value, timezone)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return localize(parsed, timezone)


def event_start(event_date: Union[str, date], event_time: str, timezone: str) -> Optional[datetime]:
    """Combine an event's ``YYYY-MM-DD`` date and ``HH:MM`` time in the campus zone."""
    try:
        if not isinstance(event_date, date):
            event_date = date.fromisoformat(str(event_date)[:10])
        hours, minutes = (int(part) for part in str(event_time).split(":")[:2])
        naive = datetime.combine(event_date, time(hours, minutes))
    except (TypeError, ValueError):
        return None
    return pytz.timezone(timezone).localize(naive)


def sort_key(value: Union[str, datetime, None]) -> datetime:
    """Key for ordering records by a stored timestamp; unparsable values sort first."""
    parsed = parse_datetime(value)
    return parsed or datetime.min.replace(tzinfo=pytz.utc)
