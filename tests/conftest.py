# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides an in-memory calendar backend and reusable test data.
"""

import itertools
import pytest
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Set
import sys

import pytz

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from inbox_blocks.models import (
    AnchoredBlockSpec,
    BlockFamily,
    CalendarBackendError,
    EngineConfig,
    ExternalEvent,
    ManagedBlock,
    ResponseStatus,
    WindowedBlockSpec,
    WorkingHours,
)

TZ = pytz.timezone("Europe/London")
MONDAY = date(2024, 3, 4)
SATURDAY = date(2024, 3, 9)


def at(hour: int, minute: int = 0, day: date = MONDAY) -> datetime:
    """Aware datetime on the test day."""
    return TZ.localize(datetime.combine(day, time(hour, minute)))


# ==================== Fake Calendar Backend ====================

class FakeCalendar:
    """
    In-memory stand-in for GoogleCalendarService.

    Records every write so tests can assert on net create/delete operations.
    """

    def __init__(self, config: EngineConfig):
        self.config = config
        self.events: Dict[str, ExternalEvent] = {}
        self._ids = itertools.count(1)
        self.created: List[ManagedBlock] = []
        self.deleted: List[str] = []
        self.enforced: List[str] = []
        self.list_calls = 0
        self.fail_create_at: Set[datetime] = set()
        self.fail_list_on: Set[date] = set()

    # -- test helpers --

    def add_event(self, event: ExternalEvent) -> ExternalEvent:
        self.events[event.event_id] = event
        return event

    def add_meeting(self, start: datetime, end: datetime, title: str = "Meeting",
                    guests: int = 2, response: ResponseStatus = ResponseStatus.ACCEPTED) -> ExternalEvent:
        return self.add_event(ExternalEvent(
            event_id=f"evt{next(self._ids)}",
            title=title,
            start=start,
            end=end,
            guest_count=guests,
            response=response,
        ))

    def add_all_day(self, day: date, title: str) -> ExternalEvent:
        start = TZ.localize(datetime.combine(day, time.min))
        return self.add_event(ExternalEvent(
            event_id=f"evt{next(self._ids)}",
            title=title,
            start=start,
            end=start + timedelta(days=1),
            all_day=True,
        ))

    def add_block(self, family: BlockFamily, start: datetime, end: datetime) -> ManagedBlock:
        """Put a block on the calendar without counting it as a write."""
        event_id = f"blk{next(self._ids)}"
        self.events[event_id] = ExternalEvent(
            event_id=event_id,
            title=self.config.titles[family],
            start=start,
            end=end,
        )
        return ManagedBlock(event_id=event_id, family=family, start=start, end=end)

    def blocks(self, family: Optional[BlockFamily] = None) -> List[ManagedBlock]:
        result = []
        for event in self.events.values():
            event_family = self.config.family_for_title(event.title)
            if event_family is None or (family is not None and event_family != family):
                continue
            result.append(ManagedBlock(event.event_id, event_family, event.start, event.end))
        return sorted(result, key=lambda b: b.start)

    def reset_log(self) -> None:
        self.created.clear()
        self.deleted.clear()
        self.enforced.clear()

    # -- backend surface --

    def list_events(self, start: datetime, end: datetime) -> List[ExternalEvent]:
        self.list_calls += 1
        if start.date() in self.fail_list_on:
            raise CalendarBackendError("list events", "simulated outage")
        return sorted(
            (e for e in self.events.values() if e.start < end and e.end > start),
            key=lambda e: e.start,
        )

    def create_block(self, family: BlockFamily, start: datetime, end: datetime) -> ManagedBlock:
        if start in self.fail_create_at:
            raise CalendarBackendError("create block", "simulated 503")
        block = self.add_block(family, start, end)
        self.created.append(block)
        return block

    def delete_block(self, event_id: str) -> None:
        self.events.pop(event_id, None)
        self.deleted.append(event_id)

    def enforce_properties(self, event_id: str) -> None:
        if event_id not in self.events:
            raise CalendarBackendError("enforce properties", "not found", event_id)
        self.enforced.append(event_id)


# ==================== Configuration Fixtures ====================

@pytest.fixture
def tz():
    return TZ


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def saturday():
    return SATURDAY


@pytest.fixture
def at_time():
    """Factory for aware datetimes: at_time(9, 55) or at_time(9, 55, day=...)."""
    return at


@pytest.fixture
def post_lunch_spec():
    """Windowed spec from the reference scenarios: 12:45 default, 10:45-14:45 window."""
    return WindowedBlockSpec(
        tag="response@post-lunch",
        default=time(12, 45),
        window_start=time(10, 45),
        window_end=time(14, 45),
        duration=timedelta(minutes=45),
    )


@pytest.fixture
def check_spec():
    """Anchored spec for the 9 o'clock check, placed at 9:55."""
    return AnchoredBlockSpec(tag="check@9", anchor=time(9, 55), duration=timedelta(minutes=5))


@pytest.fixture
def engine_config(post_lunch_spec, check_spec):
    """Small engine configuration: one response block and two check blocks."""
    return EngineConfig(
        working_hours=WorkingHours(start=time(9, 0), end=time(17, 30)),
        lookahead_days=7,
        check_duration=timedelta(minutes=5),
        response_duration=timedelta(minutes=45),
        min_shortened_duration=timedelta(minutes=20),
        anchored_specs=[
            check_spec,
            AnchoredBlockSpec(tag="check@10", anchor=time(10, 55), duration=timedelta(minutes=5)),
        ],
        windowed_specs=[post_lunch_spec],
    )


@pytest.fixture
def default_config():
    """Engine configuration built entirely from the built-in defaults."""
    return EngineConfig.from_dict({})


@pytest.fixture
def calendar(engine_config):
    return FakeCalendar(engine_config)


@pytest.fixture
def make_calendar():
    """Factory for extra in-memory calendars: make_calendar(config)."""
    return FakeCalendar


@pytest.fixture
def monday_morning():
    """Run time before the working day starts, so all of Monday is in the future."""
    return at(7, 0)


# ==================== Pytest Markers ====================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
