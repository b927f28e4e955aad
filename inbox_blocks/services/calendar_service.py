# File: inbox_blocks/services/calendar_service.py

import datetime
from typing import Any, Dict, List, Optional

import pytz
from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from inbox_blocks.core.config_manager import Config
from inbox_blocks.models import (
    BlockFamily,
    CalendarBackendError,
    EngineConfig,
    ExternalEvent,
    ManagedBlock,
    ResponseStatus,
    parse_iso_datetime,
)
from inbox_blocks.utils.logger import setup_logger

logger = setup_logger(__name__)

# Deleting an event that is already gone is not a failure
GONE_STATUSES = (404, 410)


class GoogleCalendarService:
    """Calendar backend for the block engine, over the Google Calendar API."""

    def __init__(
        self,
        calendar_service: Resource,
        config: EngineConfig,
        tz: pytz.BaseTzInfo,
        calendar_id: str = Config.CALENDAR_ID,
    ):
        """
        Initialize calendar service.

        Args:
            calendar_service: Authenticated Google Calendar API resource
            config: Engine configuration (block titles)
            tz: Calendar owner's timezone
            calendar_id: Calendar to manage
        """
        self.service = calendar_service
        self.config = config
        self.tz = tz
        self.calendar_id = calendar_id
        self.generator_id = Config.GENERATOR_ID

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_events(self, start: datetime.datetime, end: datetime.datetime) -> List[ExternalEvent]:
        """
        Fetch all events, including all-day ones, overlapping [start, end).

        Raises:
            CalendarBackendError: If the API call fails
        """
        raw_events: List[Dict[str, Any]] = []
        page_token = None
        try:
            while True:
                events_result = self.service.events().list(
                    calendarId=self.calendar_id,
                    timeMin=start.isoformat(),
                    timeMax=end.isoformat(),
                    singleEvents=True,
                    orderBy='startTime',
                    pageToken=page_token,
                ).execute()
                raw_events.extend(events_result.get('items', []))
                page_token = events_result.get('nextPageToken')
                if not page_token:
                    break
        except HttpError as e:
            raise CalendarBackendError("list events", str(e)) from e

        typed_events = []
        for raw in raw_events:
            if raw.get('status') == 'cancelled':
                continue
            try:
                event = self._to_external_event(raw)
            except (KeyError, ValueError) as e:
                logger.warning(f"Could not parse event data for {raw.get('summary')}: {e}")
                continue
            if event is not None:
                typed_events.append(event)

        logger.debug(f"Fetched {len(typed_events)} events for {start.isoformat()} - {end.isoformat()}")
        return typed_events

    def _to_external_event(self, raw: Dict[str, Any]) -> Optional[ExternalEvent]:
        all_day = 'date' in raw['start'] and 'dateTime' not in raw['start']
        start_dt = self._parse_gc_time(raw['start'])
        end_dt = self._parse_gc_time(raw['end'])
        if not start_dt or not end_dt:
            logger.warning(f"No start or end time found for {raw.get('summary')}")
            return None

        guests = [
            a for a in raw.get('attendees', [])
            if not a.get('self', False) and not a.get('resource', False)
        ]

        return ExternalEvent(
            event_id=raw['id'],
            title=raw.get('summary', 'No Title'),
            start=start_dt,
            end=end_dt,
            all_day=all_day,
            guest_count=len(guests),
            response=self._own_response(raw),
        )

    @staticmethod
    def _own_response(raw: Dict[str, Any]) -> ResponseStatus:
        """The owner's response: organizers and events without a self attendee need none."""
        if raw.get('organizer', {}).get('self', False):
            return ResponseStatus.ORGANIZER
        for attendee in raw.get('attendees', []):
            if attendee.get('self', False):
                return ResponseStatus.from_google(attendee.get('responseStatus', 'needsAction'))
        return ResponseStatus.ORGANIZER

    def _parse_gc_time(self, time_info: Dict[str, str]) -> Optional[datetime.datetime]:
        """Helper to parse Google Calendar date/dateTime fields into aware datetimes."""
        if 'dateTime' in time_info:
            parsed = parse_iso_datetime(time_info['dateTime'])
            if parsed is None:
                return None
            if parsed.tzinfo is None:
                return self.tz.localize(parsed)
            return parsed.astimezone(self.tz)
        if 'date' in time_info:
            # All-day events start at local midnight
            date_obj = datetime.datetime.strptime(time_info['date'], "%Y-%m-%d").date()
            return self.tz.localize(datetime.datetime.combine(date_obj, datetime.time.min))
        return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _cosmetic_properties(self) -> Dict[str, Any]:
        """Fixed properties every managed block carries."""
        return {
            'visibility': Config.BLOCK_VISIBILITY,
            'transparency': Config.BLOCK_TRANSPARENCY,
            'colorId': Config.BLOCK_COLOR_ID,
            'reminders': {'useDefault': False, 'overrides': []},
        }

    def create_block(self, family: BlockFamily, start: datetime.datetime,
                     end: datetime.datetime) -> ManagedBlock:
        """
        Create a managed block.

        Raises:
            CalendarBackendError: If the API call fails
        """
        title = self.config.titles[family]
        event = {
            'summary': title,
            'start': {
                'dateTime': start.isoformat(),
                'timeZone': self.tz.zone,
            },
            'end': {
                'dateTime': end.isoformat(),
                'timeZone': self.tz.zone,
            },
            'extendedProperties': {
                'private': {
                    'sourceId': self.generator_id,
                    'blockFamily': family.value,
                }
            },
            **self._cosmetic_properties(),
        }

        try:
            created = self.service.events().insert(
                calendarId=self.calendar_id,
                body=event
            ).execute()
        except HttpError as e:
            raise CalendarBackendError("create block", str(e)) from e

        logger.debug(f"Created '{title}' {start.isoformat()} ({created.get('id')})")
        return ManagedBlock(event_id=created['id'], family=family, start=start, end=end)

    def delete_block(self, event_id: str) -> None:
        """
        Delete a managed block. An already-deleted block is not an error.

        Raises:
            CalendarBackendError: For any other API failure
        """
        try:
            self.service.events().delete(
                calendarId=self.calendar_id,
                eventId=event_id
            ).execute()
        except HttpError as e:
            if getattr(e.resp, 'status', None) in GONE_STATUSES:
                logger.info(f"Block {event_id} was already deleted")
                return
            raise CalendarBackendError("delete block", str(e), event_id) from e

    def enforce_properties(self, event_id: str) -> None:
        """
        Re-apply the fixed cosmetic properties without touching the time range.

        Raises:
            CalendarBackendError: If the API call fails
        """
        try:
            self.service.events().patch(
                calendarId=self.calendar_id,
                eventId=event_id,
                body=self._cosmetic_properties()
            ).execute()
        except HttpError as e:
            raise CalendarBackendError("enforce properties", str(e), event_id) from e
