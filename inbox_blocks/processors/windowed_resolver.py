# File: inbox_blocks/processors/windowed_resolver.py
"""
Placement of the longer "message response" blocks.

Resolution tries, in this fixed order:
    1. the default time, if free
    2. the full-duration slot inside the window nearest the default
    3. the largest free gap in the window, shortened, if long enough
    4. nothing (skip the block for the day)
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

import pytz

from inbox_blocks.models import (
    EngineConfig,
    ExternalEvent,
    ManagedBlock,
    ResolvedPlacement,
    WindowedBlockSpec,
    ceil_to_minute,
    format_range,
)
from inbox_blocks.processors.interval_query import IntervalQuery, compute_gaps
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)


def find_nearest_slot(window_start: datetime, window_end: datetime, duration: timedelta,
                      anchor: datetime,
                      obstructions: Sequence[ExternalEvent]) -> Optional[ResolvedPlacement]:
    """
    Full-duration slot in the window whose start is closest to anchor.

    Candidates sit at the window start and right after each obstruction,
    wherever the following gap is long enough. A candidate may end at most
    one duration past the window end. Ties go to the earlier candidate.
    """
    candidates: List[datetime] = [
        gap.start
        for gap in compute_gaps(window_start, window_end, obstructions)
        if gap.duration >= duration
    ]

    best: Optional[datetime] = None
    for candidate in candidates:
        if candidate + duration > window_end + duration:
            continue
        if best is None or abs(candidate - anchor) < abs(best - anchor):
            best = candidate

    if best is None:
        return None
    return ResolvedPlacement(start=best, end=best + duration)


class WindowedBlockResolver:
    """Resolves WindowedBlockSpecs for one day at a time."""

    def __init__(self, query: IntervalQuery, config: EngineConfig, tz: pytz.BaseTzInfo):
        self.query = query
        self.config = config
        self.tz = tz

    def find_existing(self, spec: WindowedBlockSpec, day: date,
                      blocks: Sequence[ManagedBlock]) -> Optional[ManagedBlock]:
        """First response-family block starting inside the spec's window."""
        window_start, window_end = spec.window_on(day, self.tz)
        for block in sorted(blocks, key=lambda b: b.start):
            if block.family == spec.family and window_start <= block.start <= window_end:
                return block
        return None

    def is_still_valid(self, block: ManagedBlock) -> bool:
        return not self.query.has_conflict(block.start, block.end, exclude_id=block.event_id)

    def resolve(self, spec: WindowedBlockSpec, day: date,
                not_before: Optional[datetime] = None) -> Optional[ResolvedPlacement]:
        """
        Compute where the block should go, or None to skip it today.

        Args:
            spec: The windowed block to place
            day: Calendar date being resolved
            not_before: Earliest acceptable start (the current time when
                resolving today); the window is clipped to it,
                rounded up to a whole minute
        """
        window_start, window_end = spec.window_on(day, self.tz)
        if not_before is not None:
            not_before = ceil_to_minute(not_before)
            if not_before > window_start:
                window_start = not_before
        if window_start >= window_end:
            logger.debug(f"{spec.tag} on {day}: window already passed")
            return None

        default_start = spec.default_on(day, self.tz)
        default_end = default_start + spec.duration

        # 1. Default time always wins when it is free
        if default_start >= window_start and not self.query.has_conflict(default_start, default_end):
            return ResolvedPlacement(start=default_start, end=default_end)

        # 2. Nearest full-duration slot
        obstructions = self.query.conflicts_in(window_start, window_end)
        slot = find_nearest_slot(window_start, window_end, spec.duration, default_start, obstructions)
        if slot is not None:
            logger.info(
                f"{spec.tag} on {day}: default taken, moved to {format_range(slot.start, slot.end)}"
            )
            return slot

        # 3. Largest partial gap, if it meets the minimum
        gap = self.query.largest_gap(window_start, window_end)
        if gap is not None and gap.duration >= self.config.min_shortened_duration:
            logger.info(
                f"{spec.tag} on {day}: no full slot, shortened to {format_range(gap.start, gap.end)}"
            )
            return ResolvedPlacement(start=gap.start, end=gap.end, shortened=True)

        logger.info(f"{spec.tag} on {day}: no slot of at least "
                    f"{int(self.config.min_shortened_duration.total_seconds() // 60)} minutes, skipping")
        return None
