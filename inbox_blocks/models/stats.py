# File: inbox_blocks/models/stats.py
"""
Run-scoped context and outcome statistics.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List

from .enums import BlockFamily

OUTCOMES = ('created', 'kept', 'deleted', 'skipped', 'shortened')


@dataclass
class FamilyStats:
    """Outcome counters for one block family."""
    created: int = 0
    kept: int = 0
    deleted: int = 0
    skipped: int = 0
    shortened: int = 0

    def record(self, outcome: str) -> None:
        if outcome not in OUTCOMES:
            raise ValueError(f"Unknown outcome: {outcome}")
        setattr(self, outcome, getattr(self, outcome) + 1)

    def to_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in OUTCOMES}


@dataclass
class RunSummary:
    """End-of-run report."""
    families: Dict[BlockFamily, FamilyStats] = field(
        default_factory=lambda: {family: FamilyStats() for family in BlockFamily}
    )
    days_processed: int = 0
    days_skipped: int = 0
    errors: int = 0
    fatal: bool = False
    error_messages: List[str] = field(default_factory=list)

    def record(self, family: BlockFamily, outcome: str) -> None:
        self.families[family].record(outcome)

    def record_error(self, message: str) -> None:
        self.errors += 1
        self.error_messages.append(message)

    def total(self, outcome: str) -> int:
        return sum(getattr(stats, outcome) for stats in self.families.values())

    def as_dict(self) -> dict:
        return {
            'families': {family.value: stats.to_dict() for family, stats in self.families.items()},
            'days_processed': self.days_processed,
            'days_skipped': self.days_skipped,
            'errors': self.errors,
            'fatal': self.fatal,
        }

    def format_report(self) -> List[str]:
        """Render the summary as log lines."""
        lines = [
            f"Days processed: {self.days_processed}, skipped: {self.days_skipped}",
        ]
        for family, stats in self.families.items():
            counts = ", ".join(f"{name}={value}" for name, value in stats.to_dict().items())
            lines.append(f"  {family.value:<9} {counts}")
        lines.append(f"Errors: {self.errors}" + (" (FATAL)" if self.fatal else ""))
        return lines


@dataclass
class RunContext:
    """
    Everything one invocation needs to carry between resolution calls.

    Passed explicitly to the reconciler and orchestrators instead of living
    in module-level state.
    """
    now: datetime
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    summary: RunSummary = field(default_factory=RunSummary)

    @property
    def today(self) -> date:
        return self.now.date()

    def record(self, family: BlockFamily, outcome: str) -> None:
        self.summary.record(family, outcome)

    def record_error(self, message: str) -> None:
        self.summary.record_error(message)
