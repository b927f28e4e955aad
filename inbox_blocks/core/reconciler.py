# File: inbox_blocks/core/reconciler.py
"""
Block reconciliation: compare the block a spec wants with what is on the
calendar and create, keep or delete accordingly.

The backend is any object providing list_events, create_block, delete_block
and enforce_properties (GoogleCalendarService in production, an in-memory
fake in tests).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Set

import pytz

from inbox_blocks.models import (
    AnchoredBlockSpec,
    BlockFamily,
    BlockSpec,
    EngineConfig,
    ManagedBlock,
    ResolvedPlacement,
    RunContext,
    format_range,
)
from inbox_blocks.processors.anchored_resolver import AnchoredBlockResolver
from inbox_blocks.processors.interval_query import IntervalQuery
from inbox_blocks.processors.windowed_resolver import WindowedBlockResolver
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class DayState:
    """Managed blocks observed on one day, and which specs have claimed them."""
    day: date
    blocks: List[ManagedBlock] = field(default_factory=list)
    claimed: Set[str] = field(default_factory=set)

    def unclaimed(self, family: Optional[BlockFamily] = None) -> List[ManagedBlock]:
        return [
            b for b in self.blocks
            if b.event_id not in self.claimed and (family is None or b.family == family)
        ]

    def claim(self, block: ManagedBlock) -> None:
        self.claimed.add(block.event_id)

    def add(self, block: ManagedBlock) -> None:
        self.blocks.append(block)
        self.claim(block)

    def remove(self, block: ManagedBlock) -> None:
        self.blocks = [b for b in self.blocks if b.event_id != block.event_id]
        self.claimed.discard(block.event_id)

    def find_exact(self, family: BlockFamily, placement: ResolvedPlacement,
                   claimed: bool) -> Optional[ManagedBlock]:
        for block in self.blocks:
            if (block.family == family
                    and (block.event_id in self.claimed) == claimed
                    and block.same_range(placement.start, placement.end)):
                return block
        return None


class BlockReconciler:
    """Drives create/keep/delete decisions for one spec on one day."""

    def __init__(self, backend, config: EngineConfig, tz: pytz.BaseTzInfo):
        self.backend = backend
        self.config = config
        query = IntervalQuery(backend.list_events, config.block_titles)
        self.anchored = AnchoredBlockResolver(query, config, tz)
        self.windowed = WindowedBlockResolver(query, config, tz)

    def _resolver_for(self, spec: BlockSpec):
        if isinstance(spec, AnchoredBlockSpec):
            return self.anchored
        return self.windowed

    def reconcile(self, spec: BlockSpec, state: DayState, ctx: RunContext) -> str:
        """
        Reconcile one spec for one day, isolating any failure.

        Returns:
            The outcome: 'kept', 'created', 'shortened', 'skipped' or 'error'
        """
        try:
            return self._reconcile(spec, state, ctx)
        except Exception as e:
            message = f"{state.day} {spec.tag}: {e}"
            logger.error(f"[{ctx.run_id}] Failed to reconcile {message}", exc_info=True)
            ctx.record_error(message)
            return 'error'

    def _reconcile(self, spec: BlockSpec, state: DayState, ctx: RunContext) -> str:
        resolver = self._resolver_for(spec)
        family = spec.family
        prefix = f"[{ctx.run_id}] {state.day} {spec.tag}"

        existing = resolver.find_existing(spec, state.day, state.unclaimed(family))
        if existing is not None:
            if existing.start < ctx.now:
                # Started blocks are left as they are, even if a meeting now overlaps
                state.claim(existing)
                ctx.record(family, 'kept')
                logger.debug(f"{prefix}: block {format_range(existing.start, existing.end)} already started, kept")
                return 'kept'

            if resolver.is_still_valid(existing):
                state.claim(existing)
                ctx.record(family, 'kept')
                logger.info(f"{prefix}: kept {format_range(existing.start, existing.end)}")
                self.backend.enforce_properties(existing.event_id)
                return 'kept'

            self.backend.delete_block(existing.event_id)
            state.remove(existing)
            ctx.record(family, 'deleted')
            logger.info(f"{prefix}: deleted conflicting {format_range(existing.start, existing.end)}")

        not_before = ctx.now if state.day == ctx.today else None
        placement = resolver.resolve(spec, state.day, not_before=not_before)
        if placement is None:
            ctx.record(family, 'skipped')
            logger.info(f"{prefix}: skipped")
            return 'skipped'

        if state.find_exact(family, placement, claimed=True) is not None:
            # Another spec's block already sits exactly here (cascaded onto the same slot)
            ctx.record(family, 'skipped')
            logger.info(f"{prefix}: {format_range(placement.start, placement.end)} already covered, skipped")
            return 'skipped'

        match = state.find_exact(family, placement, claimed=False)
        if match is not None:
            state.claim(match)
            ctx.record(family, 'kept')
            logger.info(f"{prefix}: kept {format_range(match.start, match.end)} (matches placement)")
            self.backend.enforce_properties(match.event_id)
            return 'kept'

        block = self.backend.create_block(family, placement.start, placement.end)
        state.add(block)
        ctx.record(family, 'created')
        if placement.shortened:
            ctx.record(family, 'shortened')
            logger.info(f"{prefix}: created shortened {format_range(block.start, block.end)}")
            return 'shortened'
        logger.info(f"{prefix}: created {format_range(block.start, block.end)}")
        return 'created'

    def remove_blocks(self, blocks: List[ManagedBlock], ctx: RunContext, reason: str) -> int:
        """
        Delete blocks that have not started yet, each in isolation.

        Returns:
            Number of blocks deleted
        """
        deleted = 0
        for block in blocks:
            if block.start < ctx.now:
                continue
            try:
                self.backend.delete_block(block.event_id)
            except Exception as e:
                message = f"{block.start.date()} delete {reason} block {block.event_id}: {e}"
                logger.error(f"[{ctx.run_id}] Failed to {message}", exc_info=True)
                ctx.record_error(message)
                continue
            deleted += 1
            ctx.record(block.family, 'deleted')
            logger.info(
                f"[{ctx.run_id}] {block.start.date()}: deleted {reason} {block.family.value} block "
                f"{format_range(block.start, block.end)}"
            )
        return deleted

    def remove_orphans(self, state: DayState, ctx: RunContext) -> int:
        """Delete blocks on the day that no spec claimed (duplicates, stale placements)."""
        orphans = state.unclaimed()
        deleted = self.remove_blocks(orphans, ctx, reason="orphaned")
        for block in orphans:
            state.remove(block)
        return deleted
