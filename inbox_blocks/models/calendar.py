# File: inbox_blocks/models/calendar.py

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .enums import BlockFamily, ResponseStatus


@dataclass(frozen=True)
class ExternalEvent:
    """An event read from the calendar backend."""
    event_id: str
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    guest_count: int = 0
    response: ResponseStatus = ResponseStatus.ORGANIZER

    def __post_init__(self):
        """Validate event data."""
        if not self.all_day and self.end <= self.start:
            raise ValueError(f"Event end time must be after start time: {self.title}")
        if self.guest_count < 0:
            raise ValueError(f"Guest count cannot be negative: {self.title}")

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Check if this event overlaps the half-open range [start, end)."""
        return self.start < end and self.end > start


@dataclass(frozen=True)
class ManagedBlock:
    """A block materialized on the calendar by the engine."""
    event_id: str
    family: BlockFamily
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def same_range(self, start: datetime, end: datetime) -> bool:
        return self.start == start and self.end == end

    def starts_within_hour(self, hour_start: datetime) -> bool:
        """
        True if this block belongs to the hour beginning at hour_start.

        A block starting exactly on the next hour boundary still counts, since
        cascade shifting may have pushed it there.
        """
        hour_end = hour_start + timedelta(hours=1)
        return hour_start <= self.start <= hour_end


def block_from_event(event: ExternalEvent, family: Optional[BlockFamily]) -> Optional[ManagedBlock]:
    """Build a ManagedBlock view of a calendar event, or None if it is not one."""
    if family is None or event.all_day:
        return None
    return ManagedBlock(
        event_id=event.event_id,
        family=family,
        start=event.start,
        end=event.end,
    )
