# File: inbox_blocks/processors/conflict_classifier.py
"""
Decides whether a calendar event obstructs block placement.
"""

from typing import Iterable

from inbox_blocks.models import ExternalEvent, ResponseStatus

ATTENDING_RESPONSES = frozenset({
    ResponseStatus.ACCEPTED,
    ResponseStatus.TENTATIVE,
    ResponseStatus.ORGANIZER,
})


def is_obstruction(event: ExternalEvent, block_titles: Iterable[str]) -> bool:
    """
    True if the owner is actually attending this event with other people.

    Managed blocks, all-day events and guestless placeholders never obstruct.
    Declined and unanswered invitations do not obstruct either.
    """
    if event.title in block_titles:
        return False
    if event.all_day:
        return False
    if event.guest_count < 1:
        return False
    return event.response in ATTENDING_RESPONSES


def describe(event: ExternalEvent, block_titles: Iterable[str]) -> str:
    """Short reason string explaining the classification, for inspection output."""
    if event.title in block_titles:
        return "managed block"
    if event.all_day:
        return "all-day"
    if event.guest_count < 1:
        return "no guests"
    if event.response in ATTENDING_RESPONSES:
        return f"CONFLICT ({event.response.value}, {event.guest_count} guests)"
    return f"not attending ({event.response.value})"
