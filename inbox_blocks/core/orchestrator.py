# File: inbox_blocks/core/orchestrator.py
"""
Main orchestrator module for Inbox Blocks.
Walks the lookahead window and reconciles the blocks on each day.
"""

import datetime
from typing import Dict, List, Optional

import pytz

from inbox_blocks.auth.google_auth import get_calendar_service
from inbox_blocks.core.config_manager import Config
from inbox_blocks.core.day_orchestrator import DayOrchestrator
from inbox_blocks.models import (
    EngineConfig,
    ExternalEvent,
    ManagedBlock,
    RunContext,
    RunSummary,
)
from inbox_blocks.services.calendar_service import GoogleCalendarService
from inbox_blocks.utils.inspection import format_block_listing, format_event_listing
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)


def log_run_summary(summary: RunSummary, run_id: str = "-") -> None:
    """Emit the structured end-of-run summary."""
    log = logger.error if summary.fatal else logger.info
    log("=" * 60)
    log(f"Run {run_id} summary")
    for line in summary.format_report():
        log(line)
    log("=" * 60)


class Orchestrator:
    """
    Runs the block engine over the lookahead window.

    Each day is isolated: a failure on one day is logged and counted, and
    the next day is still attempted.
    """

    def __init__(self, backend, config: EngineConfig, tz: pytz.BaseTzInfo):
        """
        Args:
            backend: Calendar backend (see GoogleCalendarService)
            config: Engine configuration
            tz: Calendar owner's timezone
        """
        self.backend = backend
        self.config = config
        self.tz = tz
        self.day_orchestrator = DayOrchestrator(backend, config, tz)

    def _now(self, now: Optional[datetime.datetime]) -> datetime.datetime:
        return now.astimezone(self.tz) if now else datetime.datetime.now(self.tz)

    def lookahead(self, today: datetime.date) -> List[datetime.date]:
        return [today + datetime.timedelta(days=i) for i in range(self.config.lookahead_days)]

    def run(self, now: Optional[datetime.datetime] = None) -> RunSummary:
        """
        Reconcile every day in the lookahead window. Never raises.

        Args:
            now: Current time (defaults to the wall clock in the owner's timezone)

        Returns:
            RunSummary with per-family counts and errors
        """
        ctx = RunContext(now=self._now(now))
        logger.info("=" * 60)
        logger.info(
            f"Run {ctx.run_id}: reconciling {self.config.lookahead_days} days from {ctx.today}"
        )
        logger.info("=" * 60)

        try:
            for day in self.lookahead(ctx.today):
                try:
                    self.day_orchestrator.process_day(day, ctx)
                except Exception as e:
                    logger.error(f"[{ctx.run_id}] Failed to process {day}: {e}", exc_info=True)
                    ctx.record_error(f"{day}: {e}")
        finally:
            log_run_summary(ctx.summary, ctx.run_id)

        return ctx.summary

    def clear_all(self, now: Optional[datetime.datetime] = None) -> int:
        """
        Delete every managed block in the lookahead window.

        Returns:
            Number of blocks deleted
        """
        ctx = RunContext(now=self._now(now))
        logger.info(f"Run {ctx.run_id}: clearing managed blocks for {self.config.lookahead_days} days")

        deleted = 0
        for day, blocks in self._blocks_by_day(ctx.today).items():
            for block in blocks:
                try:
                    self.backend.delete_block(block.event_id)
                except Exception as e:
                    logger.error(f"Failed to delete block {block.event_id} on {day}: {e}", exc_info=True)
                    ctx.record_error(str(e))
                    continue
                deleted += 1
                ctx.record(block.family, 'deleted')

        logger.info(f"Deleted {deleted} managed blocks ({ctx.summary.errors} errors)")
        return deleted

    def _events_by_day(self, today: datetime.date) -> Dict[datetime.date, List[ExternalEvent]]:
        events_by_day = {}
        for day in self.lookahead(today):
            start, end = self.day_orchestrator.day_bounds(day)
            events_by_day[day] = self.backend.list_events(start, end)
        return events_by_day

    def _blocks_by_day(self, today: datetime.date) -> Dict[datetime.date, List[ManagedBlock]]:
        return {
            day: self.day_orchestrator.managed_blocks(events)
            for day, events in self._events_by_day(today).items()
        }

    def inspect_blocks(self, now: Optional[datetime.datetime] = None) -> List[str]:
        """Listing of the managed blocks currently on the calendar."""
        return format_block_listing(self._blocks_by_day(self._now(now).date()))

    def inspect_events(self, now: Optional[datetime.datetime] = None) -> List[str]:
        """Listing of all events with their conflict classification."""
        return format_event_listing(
            self._events_by_day(self._now(now).date()),
            self.config.block_titles,
        )


class OrchestratorFactory:
    """Factory for creating Orchestrator instances with dependency injection."""

    @staticmethod
    def create() -> Orchestrator:
        """
        Create a fully initialized Orchestrator backed by Google Calendar.

        Raises:
            ConfigError: If configuration is invalid
            ConnectionError: If authentication fails
        """
        logger.info("Creating Orchestrator via factory")

        tz = Config.timezone()
        config = Config.load_block_config()

        calendar_resource = get_calendar_service()
        if calendar_resource is None:
            raise ConnectionError(
                "Google authentication failed. Run 'python scripts/authenticate.py' first."
            )

        backend = GoogleCalendarService(calendar_resource, config, tz)
        return Orchestrator(backend, config, tz)
