# File: inbox_blocks/core/day_orchestrator.py
"""
Resolves every block spec for one calendar day.
"""

import datetime
from typing import List, Optional

import pytz

from inbox_blocks.core.reconciler import BlockReconciler, DayState
from inbox_blocks.models import (
    EngineConfig,
    ExternalEvent,
    ManagedBlock,
    RunContext,
    block_from_event,
    localize,
)
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)

WEEKEND = (5, 6)  # Saturday, Sunday


class DayOrchestrator:
    """
    Applies the day-level skip rules, then resolves response blocks before
    check blocks so the longer, harder-to-place blocks claim slots first.
    """

    def __init__(self, backend, config: EngineConfig, tz: pytz.BaseTzInfo,
                 reconciler: Optional[BlockReconciler] = None):
        self.backend = backend
        self.config = config
        self.tz = tz
        self.reconciler = reconciler or BlockReconciler(backend, config, tz)

    def day_bounds(self, day: datetime.date):
        """Local midnight to the following local midnight."""
        start = localize(day, datetime.time.min, self.tz)
        end = localize(day + datetime.timedelta(days=1), datetime.time.min, self.tz)
        return start, end

    def skip_reason(self, day: datetime.date, events: List[ExternalEvent]) -> Optional[str]:
        """Why the day gets no blocks at all, or None if it should be processed."""
        if day.weekday() in WEEKEND:
            return "weekend"
        for event in events:
            if not event.all_day:
                continue
            title = event.title.lower()
            for keyword in self.config.out_of_office_keywords:
                if keyword in title:
                    return f"out of office ('{event.title}')"
        return None

    def managed_blocks(self, events: List[ExternalEvent]) -> List[ManagedBlock]:
        blocks = []
        for event in events:
            block = block_from_event(event, self.config.family_for_title(event.title))
            if block is not None:
                blocks.append(block)
        return sorted(blocks, key=lambda b: b.start)

    def process_day(self, day: datetime.date, ctx: RunContext) -> bool:
        """
        Reconcile all blocks for one day.

        Returns:
            True if the day was processed, False if it was skipped
        """
        day_start, day_end = self.day_bounds(day)
        events = self.backend.list_events(day_start, day_end)
        blocks = self.managed_blocks(events)

        reason = self.skip_reason(day, events)
        if reason:
            ctx.summary.days_skipped += 1
            logger.info(f"[{ctx.run_id}] {day}: skipping day, {reason}")
            if blocks:
                self.reconciler.remove_blocks(blocks, ctx, reason="skipped-day")
            return False

        logger.info(f"[{ctx.run_id}] {day}: {len(events)} events, {len(blocks)} existing blocks")
        state = DayState(day=day, blocks=blocks)

        for spec in self.config.windowed_specs:
            self.reconciler.reconcile(spec, state, ctx)
        for spec in self.config.anchored_specs:
            self.reconciler.reconcile(spec, state, ctx)

        self.reconciler.remove_orphans(state, ctx)
        ctx.summary.days_processed += 1
        return True
