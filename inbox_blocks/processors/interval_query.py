# File: inbox_blocks/processors/interval_query.py
"""
Time-range queries over the obstructing events on the calendar.

Every call fetches events fresh through the supplied callable, so answers
reflect blocks created or deleted earlier in the same run.
"""

from datetime import datetime
from typing import Callable, List, Optional, Sequence

from inbox_blocks.models import ExternalEvent, TimeGap
from inbox_blocks.processors.conflict_classifier import is_obstruction

EventFetcher = Callable[[datetime, datetime], List[ExternalEvent]]


def compute_gaps(range_start: datetime, range_end: datetime,
                 obstructions: Sequence[ExternalEvent]) -> List[TimeGap]:
    """
    Free sub-intervals of [range_start, range_end) given start-sorted obstructions.

    Overlapping obstructions are merged by tracking the furthest end seen so
    far. Zero-length gaps are dropped.
    """
    gaps: List[TimeGap] = []
    cursor = range_start
    for event in obstructions:
        if event.start > cursor:
            gap_end = min(event.start, range_end)
            if gap_end > cursor:
                gaps.append(TimeGap(cursor, gap_end))
        cursor = max(cursor, event.end)
        if cursor >= range_end:
            break
    if cursor < range_end:
        gaps.append(TimeGap(cursor, range_end))
    return gaps


class IntervalQuery:
    """Obstruction and gap lookups for a time range."""

    def __init__(self, fetch_events: EventFetcher, block_titles: Sequence[str]):
        """
        Args:
            fetch_events: Backend call returning all events overlapping a range
            block_titles: Titles of managed blocks, never treated as obstructions
        """
        self._fetch = fetch_events
        self.block_titles = tuple(block_titles)

    def conflicts_in(self, range_start: datetime, range_end: datetime) -> List[ExternalEvent]:
        """Obstructions overlapping the range, sorted by start."""
        events = self._fetch(range_start, range_end)
        conflicts = [
            e for e in events
            if e.overlaps(range_start, range_end) and is_obstruction(e, self.block_titles)
        ]
        return sorted(conflicts, key=lambda e: (e.start, e.end))

    def has_conflict(self, range_start: datetime, range_end: datetime,
                     exclude_id: Optional[str] = None) -> bool:
        return any(
            e.event_id != exclude_id
            for e in self.conflicts_in(range_start, range_end)
        )

    def gaps_in(self, range_start: datetime, range_end: datetime) -> List[TimeGap]:
        return compute_gaps(range_start, range_end, self.conflicts_in(range_start, range_end))

    def largest_gap(self, range_start: datetime, range_end: datetime) -> Optional[TimeGap]:
        """The longest free gap in the range; the first one found wins ties."""
        best: Optional[TimeGap] = None
        for gap in self.gaps_in(range_start, range_end):
            if best is None or gap.duration > best.duration:
                best = gap
        return best
