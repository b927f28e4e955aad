from .enums import ResponseStatus, BlockFamily
from .common import parse_iso_datetime, parse_hhmm, localize, format_range, ceil_to_minute
from .errors import InboxBlocksError, ConfigError, CalendarBackendError
from .calendar import ExternalEvent, ManagedBlock, block_from_event
from .blocks import (
    AnchoredBlockSpec,
    WindowedBlockSpec,
    BlockSpec,
    ResolvedPlacement,
    TimeGap,
)
from .config import EngineConfig, WorkingHours
from .stats import FamilyStats, RunSummary, RunContext

__all__ = [
    "ResponseStatus",
    "BlockFamily",
    "parse_iso_datetime",
    "parse_hhmm",
    "localize",
    "format_range",
    "ceil_to_minute",
    "InboxBlocksError",
    "ConfigError",
    "CalendarBackendError",
    "ExternalEvent",
    "ManagedBlock",
    "block_from_event",
    "AnchoredBlockSpec",
    "WindowedBlockSpec",
    "BlockSpec",
    "ResolvedPlacement",
    "TimeGap",
    "EngineConfig",
    "WorkingHours",
    "FamilyStats",
    "RunSummary",
    "RunContext",
]
