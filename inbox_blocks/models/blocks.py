# File: inbox_blocks/models/blocks.py
"""
Block specifications and resolution results.

A block spec is one of two closed variants: AnchoredBlockSpec for the short
"message check" blocks and WindowedBlockSpec for the longer "message response"
blocks. Both validate their fields on construction.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Union

import pytz

from .common import localize
from .enums import BlockFamily


@dataclass(frozen=True)
class AnchoredBlockSpec:
    """A fixed-duration block tied to one hour, allowed to shift forward only."""
    tag: str
    anchor: time
    duration: timedelta

    family = BlockFamily.CHECK

    def __post_init__(self):
        if not self.tag:
            raise ValueError("Block spec tag cannot be empty")
        if self.duration <= timedelta(0):
            raise ValueError(f"Duration must be positive for {self.tag}")

    def anchor_on(self, day: date, tz: pytz.BaseTzInfo) -> datetime:
        return localize(day, self.anchor, tz)

    def hour_start_on(self, day: date, tz: pytz.BaseTzInfo) -> datetime:
        return localize(day, time(self.anchor.hour, 0), tz)


@dataclass(frozen=True)
class WindowedBlockSpec:
    """A longer block with a preferred default time and a reschedule window."""
    tag: str
    default: time
    window_start: time
    window_end: time
    duration: timedelta

    family = BlockFamily.RESPONSE

    def __post_init__(self):
        if not self.tag:
            raise ValueError("Block spec tag cannot be empty")
        if self.duration <= timedelta(0):
            raise ValueError(f"Duration must be positive for {self.tag}")
        if not (self.window_start <= self.default <= self.window_end):
            raise ValueError(
                f"Default time {self.default} must lie inside the window "
                f"{self.window_start}-{self.window_end} for {self.tag}"
            )
        window = (datetime.combine(date.min, self.window_end)
                  - datetime.combine(date.min, self.window_start))
        if window < self.duration:
            raise ValueError(f"Reschedule window is shorter than the block duration for {self.tag}")

    def default_on(self, day: date, tz: pytz.BaseTzInfo) -> datetime:
        return localize(day, self.default, tz)

    def window_on(self, day: date, tz: pytz.BaseTzInfo):
        """Return (window_start, window_end) as aware datetimes for day."""
        return localize(day, self.window_start, tz), localize(day, self.window_end, tz)


BlockSpec = Union[AnchoredBlockSpec, WindowedBlockSpec]


@dataclass(frozen=True)
class ResolvedPlacement:
    """Where a block should sit on a given day."""
    start: datetime
    end: datetime
    shortened: bool = False

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError("Placement end must be after start")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class TimeGap:
    """A free interval between obstructions."""
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start
