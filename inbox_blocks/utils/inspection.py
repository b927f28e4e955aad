# File: inbox_blocks/utils/inspection.py
"""
Human-readable listings of blocks and events, for debugging. Read-only.
"""

import datetime
from typing import Dict, List, Sequence

from inbox_blocks.models import ExternalEvent, ManagedBlock, format_range
from inbox_blocks.processors.conflict_classifier import describe, is_obstruction


def format_block_listing(blocks_by_day: Dict[datetime.date, List[ManagedBlock]]) -> List[str]:
    """One header per day followed by its managed blocks in start order."""
    lines: List[str] = []
    total = 0
    for day in sorted(blocks_by_day):
        blocks = sorted(blocks_by_day[day], key=lambda b: b.start)
        lines.append(f"{day.strftime('%a %Y-%m-%d')} ({len(blocks)} blocks)")
        for block in blocks:
            minutes = int(block.duration.total_seconds() // 60)
            lines.append(
                f"  {format_range(block.start, block.end)}  {block.family.value:<9} "
                f"{minutes:>3}m  [{block.event_id}]"
            )
        total += len(blocks)
    lines.append(f"Total managed blocks: {total}")
    return lines


def format_event_listing(events_by_day: Dict[datetime.date, List[ExternalEvent]],
                         block_titles: Sequence[str]) -> List[str]:
    """Every event per day, annotated with its conflict classification."""
    lines: List[str] = []
    for day in sorted(events_by_day):
        events = sorted(events_by_day[day], key=lambda e: (not e.all_day, e.start))
        conflicts = sum(1 for e in events if is_obstruction(e, block_titles))
        lines.append(f"{day.strftime('%a %Y-%m-%d')} ({len(events)} events, {conflicts} conflicts)")
        for event in events:
            when = "all day    " if event.all_day else format_range(event.start, event.end)
            marker = "x" if is_obstruction(event, block_titles) else " "
            lines.append(f"  [{marker}] {when}  {event.title}  -- {describe(event, block_titles)}")
    return lines
