# File: inbox_blocks/processors/anchored_resolver.py
"""
Placement of the short, hour-anchored "message check" blocks.

A check block starts at its anchor if the anchor is free. Otherwise it is
pushed forward past whatever obstructs it, repeatedly, until it lands in a
free spot, runs past the end of the working day, or the shift cap is hit.
"""

from datetime import date, datetime
from typing import Optional, Sequence

import pytz

from inbox_blocks.models import (
    AnchoredBlockSpec,
    EngineConfig,
    ManagedBlock,
    ResolvedPlacement,
    format_range,
    localize,
)
from inbox_blocks.processors.interval_query import IntervalQuery
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)


class AnchoredBlockResolver:
    """Resolves AnchoredBlockSpecs for one day at a time."""

    def __init__(self, query: IntervalQuery, config: EngineConfig, tz: pytz.BaseTzInfo):
        self.query = query
        self.config = config
        self.tz = tz

    def find_existing(self, spec: AnchoredBlockSpec, day: date,
                      blocks: Sequence[ManagedBlock]) -> Optional[ManagedBlock]:
        """First block of the check family that belongs to the spec's anchor hour."""
        hour_start = spec.hour_start_on(day, self.tz)
        for block in sorted(blocks, key=lambda b: b.start):
            if block.family == spec.family and block.starts_within_hour(hour_start):
                return block
        return None

    def is_still_valid(self, block: ManagedBlock) -> bool:
        return not self.query.has_conflict(block.start, block.end, exclude_id=block.event_id)

    def resolve(self, spec: AnchoredBlockSpec, day: date,
                not_before: Optional[datetime] = None) -> Optional[ResolvedPlacement]:
        """
        Compute where the block should go, or None to skip it today.

        Args:
            spec: The anchored block to place
            day: Calendar date being resolved
            not_before: Earliest acceptable start (the current time when
                resolving today)
        """
        day_end = localize(day, self.config.working_hours.end, self.tz)
        start = spec.anchor_on(day, self.tz)
        end = start + spec.duration
        shifts = 0

        while True:
            if end > day_end:
                logger.info(
                    f"{spec.tag} on {day}: candidate {format_range(start, end)} "
                    f"runs past working day end, skipping"
                )
                return None

            conflicts = self.query.conflicts_in(start, end)
            if not conflicts:
                break

            if shifts >= self.config.max_cascade_shifts:
                logger.warning(
                    f"{spec.tag} on {day}: still blocked after {shifts} shifts "
                    f"(cap {self.config.max_cascade_shifts}), skipping"
                )
                return None

            # Shift forward to the latest end among the blocking events
            start = max(e.end for e in conflicts)
            end = start + spec.duration
            shifts += 1
            logger.debug(f"{spec.tag} on {day}: shift {shifts} to {format_range(start, end)}")

        if not_before is not None and start < not_before:
            logger.debug(f"{spec.tag} on {day}: {format_range(start, end)} already passed")
            return None

        return ResolvedPlacement(start=start, end=end)
