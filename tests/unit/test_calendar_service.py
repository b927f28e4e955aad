# File: tests/unit/test_calendar_service.py
"""
Unit tests for the Google Calendar backend, with a mocked API resource.
"""

import pytest
from datetime import timedelta
from unittest.mock import Mock

from googleapiclient.errors import HttpError

from inbox_blocks.models import BlockFamily, CalendarBackendError, EngineConfig, ResponseStatus
from inbox_blocks.services.calendar_service import GoogleCalendarService


def _http_error(status, reason="Error"):
    return HttpError(Mock(status=status, reason=reason), b'')


@pytest.fixture
def api():
    return Mock()


@pytest.fixture
def service(api, tz):
    return GoogleCalendarService(api, EngineConfig.from_dict({}), tz, calendar_id="primary")


def _raw_event(event_id, summary, start, end, **extra):
    raw = {
        'id': event_id,
        'summary': summary,
        'start': {'dateTime': start},
        'end': {'dateTime': end},
    }
    raw.update(extra)
    return raw


@pytest.mark.unit
class TestListEvents:
    """Tests for reading and mapping events."""

    def test_maps_guests_and_response(self, service, api, at_time):
        api.events.return_value.list.return_value.execute.return_value = {
            'items': [
                _raw_event(
                    'm1', 'Design review',
                    '2024-03-04T11:00:00Z', '2024-03-04T12:00:00Z',
                    attendees=[
                        {'email': 'me@example.com', 'self': True, 'responseStatus': 'tentative'},
                        {'email': 'a@example.com'},
                        {'email': 'b@example.com'},
                        {'email': 'room@example.com', 'resource': True},
                    ],
                ),
            ]
        }

        events = service.list_events(at_time(9, 0), at_time(17, 0))

        assert len(events) == 1
        event = events[0]
        assert event.guest_count == 2
        assert event.response == ResponseStatus.TENTATIVE
        assert event.all_day is False
        assert event.end - event.start == timedelta(hours=1)
        assert event.start.tzinfo is not None

    def test_organizer_needs_no_response(self, service, api, at_time):
        api.events.return_value.list.return_value.execute.return_value = {
            'items': [
                _raw_event(
                    'm1', 'My meeting',
                    '2024-03-04T11:00:00Z', '2024-03-04T12:00:00Z',
                    organizer={'self': True},
                    attendees=[{'email': 'a@example.com'}],
                ),
            ]
        }

        event = service.list_events(at_time(9, 0), at_time(17, 0))[0]

        assert event.response == ResponseStatus.ORGANIZER
        assert event.guest_count == 1

    def test_all_day_and_cancelled(self, service, api, at_time):
        api.events.return_value.list.return_value.execute.return_value = {
            'items': [
                {'id': 'h1', 'summary': 'Annual Leave',
                 'start': {'date': '2024-03-04'}, 'end': {'date': '2024-03-05'}},
                dict(_raw_event('c1', 'Gone', '2024-03-04T11:00:00Z', '2024-03-04T12:00:00Z'),
                     status='cancelled'),
            ]
        }

        events = service.list_events(at_time(0, 0), at_time(23, 0))

        assert [e.event_id for e in events] == ['h1']
        assert events[0].all_day is True
        assert events[0].start == at_time(0, 0)

    def test_follows_page_tokens(self, service, api, at_time):
        execute = api.events.return_value.list.return_value.execute
        execute.side_effect = [
            {'items': [_raw_event('a', 'A', '2024-03-04T10:00:00Z', '2024-03-04T10:30:00Z')],
             'nextPageToken': 'page-2'},
            {'items': [_raw_event('b', 'B', '2024-03-04T11:00:00Z', '2024-03-04T11:30:00Z')]},
        ]

        events = service.list_events(at_time(9, 0), at_time(17, 0))

        assert [e.event_id for e in events] == ['a', 'b']
        tokens = [c.kwargs['pageToken'] for c in api.events.return_value.list.call_args_list]
        assert tokens == [None, 'page-2']

    def test_http_error_is_wrapped(self, service, api, at_time):
        api.events.return_value.list.return_value.execute.side_effect = _http_error(500)

        with pytest.raises(CalendarBackendError, match="list events"):
            service.list_events(at_time(9, 0), at_time(17, 0))


@pytest.mark.unit
class TestWrites:
    """Tests for creating, deleting and patching blocks."""

    def test_create_block_payload(self, service, api, at_time):
        api.events.return_value.insert.return_value.execute.return_value = {'id': 'new-1'}
        start = at_time(12, 45)

        block = service.create_block(BlockFamily.RESPONSE, start, start + timedelta(minutes=45))

        body = api.events.return_value.insert.call_args.kwargs['body']
        assert body['summary'] == 'Message Response'
        assert body['start']['timeZone'] == 'Europe/London'
        assert body['visibility'] == 'public'
        assert body['transparency'] == 'transparent'
        assert body['reminders'] == {'useDefault': False, 'overrides': []}
        assert body['extendedProperties']['private']['blockFamily'] == 'response'
        assert block.event_id == 'new-1'
        assert block.family == BlockFamily.RESPONSE

    def test_create_failure_is_wrapped(self, service, api, at_time):
        api.events.return_value.insert.return_value.execute.side_effect = _http_error(403)

        with pytest.raises(CalendarBackendError, match="create block"):
            service.create_block(BlockFamily.CHECK, at_time(9, 55), at_time(10, 0))

    @pytest.mark.parametrize("status", [404, 410])
    def test_delete_already_gone_is_ignored(self, service, api, status):
        api.events.return_value.delete.return_value.execute.side_effect = _http_error(status, "Gone")

        service.delete_block('b1')

    def test_delete_other_error_raises(self, service, api):
        api.events.return_value.delete.return_value.execute.side_effect = _http_error(500)

        with pytest.raises(CalendarBackendError) as exc_info:
            service.delete_block('b1')

        assert exc_info.value.event_id == 'b1'

    def test_enforce_properties_does_not_touch_times(self, service, api):
        service.enforce_properties('b1')

        body = api.events.return_value.patch.call_args.kwargs['body']
        assert 'start' not in body and 'end' not in body
        assert body['colorId'] == '8'
