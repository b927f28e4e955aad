# File: inbox_blocks/models/errors.py
"""
Exception types raised by Inbox Blocks.
"""

from typing import Optional


class InboxBlocksError(Exception):
    """Base class for all application errors."""


class ConfigError(InboxBlocksError):
    """Raised when the block configuration is missing or invalid."""


class CalendarBackendError(InboxBlocksError):
    """A calendar backend call failed."""

    def __init__(self, operation: str, message: str, event_id: Optional[str] = None):
        self.operation = operation
        self.event_id = event_id
        target = f" ({event_id})" if event_id else ""
        super().__init__(f"{operation}{target} failed: {message}")
