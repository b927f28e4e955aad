# File: inbox_blocks/models/common.py

from datetime import date, datetime, time, timedelta
from typing import Optional

import pytz


def parse_iso_datetime(date_str: Optional[str]) -> Optional[datetime]:
    """Robustly parse ISO date strings with 'Z' or offsets."""
    if not date_str:
        return None
    try:
        # 'Z' suffix is not accepted by fromisoformat before Python 3.11
        clean_str = date_str.replace('Z', '+00:00')
        return datetime.fromisoformat(clean_str)
    except ValueError:
        try:
            return datetime.strptime(date_str, "%Y-%m-%d")
        except ValueError:
            return None


def parse_hhmm(value: str) -> time:
    """Parse an "HH:MM" string into a time. Raises ValueError on bad input."""
    if isinstance(value, time):
        return value
    parts = str(value).strip().split(':')
    if len(parts) != 2:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    return time(int(parts[0]), int(parts[1]))


def localize(day: date, clock: time, tz: pytz.BaseTzInfo) -> datetime:
    """Combine a date and wall-clock time into an aware datetime in tz."""
    return tz.localize(datetime.combine(day, clock))


def format_range(start: datetime, end: datetime) -> str:
    """Format a time range as HH:MM-HH:MM."""
    return f"{start.strftime('%H:%M')}-{end.strftime('%H:%M')}"


def ceil_to_minute(moment: datetime) -> datetime:
    """Round up to the next whole minute; whole minutes are returned unchanged."""
    floored = moment.replace(second=0, microsecond=0)
    if floored == moment:
        return moment
    return floored + timedelta(minutes=1)
