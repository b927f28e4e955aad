# File: inbox_blocks/models/enums.py

from enum import Enum


class ResponseStatus(Enum):
    """The calendar owner's own attendance response for an event."""
    ACCEPTED = "accepted"
    DECLINED = "declined"
    TENTATIVE = "tentative"
    NEEDS_ACTION = "needsAction"
    ORGANIZER = "organizer"  # owner created it, no response required

    @classmethod
    def from_google(cls, raw: str) -> 'ResponseStatus':
        """Map a Google Calendar responseStatus string, defaulting to NEEDS_ACTION."""
        try:
            return cls(raw)
        except ValueError:
            return cls.NEEDS_ACTION


class BlockFamily(Enum):
    """The two families of managed blocks."""
    CHECK = "check"        # short, hour-anchored
    RESPONSE = "response"  # longer, reschedule window
