# File: inbox_blocks/models/config.py
"""
Data models for Inbox Blocks configuration.
"""

from dataclasses import dataclass, field
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

from .blocks import AnchoredBlockSpec, WindowedBlockSpec
from .common import parse_hhmm
from .enums import BlockFamily
from .errors import ConfigError

DEFAULT_CHECK_HOURS = [9, 10, 11, 12, 13, 14, 15, 16]

DEFAULT_RESPONSE_BLOCKS = [
    {'name': 'morning', 'default': '09:15', 'window_start': '09:00', 'window_end': '10:30'},
    {'name': 'post-lunch', 'default': '12:45', 'window_start': '10:45', 'window_end': '14:45'},
    {'name': 'end-of-day', 'default': '16:00', 'window_start': '15:00', 'window_end': '17:30'},
]

DEFAULT_OUT_OF_OFFICE_KEYWORDS = [
    'out of office', 'ooo', 'annual leave', 'vacation', 'holiday', 'sick leave', 'day off',
]

DEFAULT_TITLES = {
    'check': 'Message Check',
    'response': 'Message Response',
}


@dataclass
class WorkingHours:
    """Bounds of the working day, as wall-clock times."""
    start: time = time(9, 0)
    end: time = time(17, 30)

    def __post_init__(self):
        if self.end <= self.start:
            raise ConfigError(f"Working day must end after it starts: {self.start}-{self.end}")


@dataclass
class EngineConfig:
    """Complete block configuration, loaded once per run."""
    working_hours: WorkingHours = field(default_factory=WorkingHours)
    lookahead_days: int = 7
    check_duration: timedelta = timedelta(minutes=5)
    response_duration: timedelta = timedelta(minutes=45)
    min_shortened_duration: timedelta = timedelta(minutes=20)
    anchored_specs: List[AnchoredBlockSpec] = field(default_factory=list)
    windowed_specs: List[WindowedBlockSpec] = field(default_factory=list)
    out_of_office_keywords: List[str] = field(
        default_factory=lambda: list(DEFAULT_OUT_OF_OFFICE_KEYWORDS)
    )
    titles: Dict[BlockFamily, str] = field(
        default_factory=lambda: {
            BlockFamily.CHECK: DEFAULT_TITLES['check'],
            BlockFamily.RESPONSE: DEFAULT_TITLES['response'],
        }
    )
    max_cascade_shifts: int = 10

    def __post_init__(self):
        if self.lookahead_days < 1:
            raise ConfigError("lookahead_days must be at least 1")
        if self.max_cascade_shifts < 0:
            raise ConfigError("max_cascade_shifts cannot be negative")
        if self.min_shortened_duration <= timedelta(0):
            raise ConfigError("Minimum shortened duration must be positive")
        if self.titles[BlockFamily.CHECK] == self.titles[BlockFamily.RESPONSE]:
            raise ConfigError("The two block families need distinct titles")
        tags = [s.tag for s in self.anchored_specs] + [s.tag for s in self.windowed_specs]
        duplicates = {t for t in tags if tags.count(t) > 1}
        if duplicates:
            raise ConfigError(f"Duplicate block tags: {sorted(duplicates)}")

        # Window matching is inclusive at both ends, so windows may not even touch
        ordered = sorted(self.windowed_specs, key=lambda s: s.window_start)
        for earlier, later in zip(ordered, ordered[1:]):
            if later.window_start <= earlier.window_end:
                raise ConfigError(
                    f"Reschedule windows of {earlier.tag} and {later.tag} overlap: "
                    f"{earlier.window_start}-{earlier.window_end} and "
                    f"{later.window_start}-{later.window_end}"
                )

    @property
    def block_titles(self) -> List[str]:
        return list(self.titles.values())

    def family_for_title(self, title: Optional[str]) -> Optional[BlockFamily]:
        """Return the block family a calendar title identifies, if any."""
        for family, family_title in self.titles.items():
            if title == family_title:
                return family
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EngineConfig':
        """Create EngineConfig from dictionary (e.g., loaded from JSON)."""
        try:
            hours = data.get('working_hours', {})
            working_hours = WorkingHours(
                start=parse_hhmm(hours.get('start', '09:00')),
                end=parse_hhmm(hours.get('end', '17:30')),
            )

            durations = data.get('durations', {})
            check_duration = timedelta(minutes=int(durations.get('check_minutes', 5)))
            response_duration = timedelta(minutes=int(durations.get('response_minutes', 45)))
            min_shortened = timedelta(minutes=int(durations.get('min_shortened_minutes', 20)))

            check_minute = int(data.get('check_minute', 55))
            anchored_specs = [
                AnchoredBlockSpec(
                    tag=f"check@{int(hour)}",
                    anchor=time(int(hour), check_minute),
                    duration=check_duration,
                )
                for hour in data.get('check_hours', DEFAULT_CHECK_HOURS)
            ]

            windowed_specs = [
                WindowedBlockSpec(
                    tag=f"response@{block['name']}",
                    default=parse_hhmm(block['default']),
                    window_start=parse_hhmm(block['window_start']),
                    window_end=parse_hhmm(block['window_end']),
                    duration=response_duration,
                )
                for block in data.get('response_blocks', DEFAULT_RESPONSE_BLOCKS)
            ]

            raw_titles = {**DEFAULT_TITLES, **data.get('titles', {})}
            titles = {
                BlockFamily.CHECK: str(raw_titles['check']),
                BlockFamily.RESPONSE: str(raw_titles['response']),
            }

            keywords = [
                str(k).lower() for k in data.get('out_of_office_keywords', DEFAULT_OUT_OF_OFFICE_KEYWORDS)
            ]

            return cls(
                working_hours=working_hours,
                lookahead_days=int(data.get('lookahead_days', 7)),
                check_duration=check_duration,
                response_duration=response_duration,
                min_shortened_duration=min_shortened,
                anchored_specs=anchored_specs,
                windowed_specs=windowed_specs,
                out_of_office_keywords=keywords,
                titles=titles,
                max_cascade_shifts=int(data.get('max_cascade_shifts', 10)),
            )
        except ConfigError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid block configuration: {e}") from e
