# File: tests/unit/test_interval_query.py
"""
Unit tests for interval queries and gap computation.
"""

import pytest

from inbox_blocks.models import ResponseStatus
from inbox_blocks.processors.interval_query import IntervalQuery


@pytest.fixture
def query(calendar, engine_config):
    return IntervalQuery(calendar.list_events, engine_config.block_titles)


def _spans(gaps):
    return [(g.start.strftime("%H:%M"), g.end.strftime("%H:%M")) for g in gaps]


@pytest.mark.unit
class TestConflictsIn:
    """Tests for conflicts_in and has_conflict."""

    def test_sorted_and_filtered(self, query, calendar, at_time):
        later = calendar.add_meeting(at_time(13, 0), at_time(14, 0))
        earlier = calendar.add_meeting(at_time(11, 0), at_time(12, 0))
        calendar.add_meeting(at_time(12, 0), at_time(12, 30), response=ResponseStatus.DECLINED)
        calendar.add_meeting(at_time(12, 30), at_time(13, 0), guests=0)

        conflicts = query.conflicts_in(at_time(10, 0), at_time(15, 0))

        assert [e.event_id for e in conflicts] == [earlier.event_id, later.event_id]

    def test_touching_boundaries_do_not_overlap(self, query, calendar, at_time):
        calendar.add_meeting(at_time(11, 0), at_time(12, 0))

        assert query.has_conflict(at_time(12, 0), at_time(12, 45)) is False
        assert query.has_conflict(at_time(10, 15), at_time(11, 0)) is False
        assert query.has_conflict(at_time(11, 59), at_time(12, 30)) is True

    def test_exclude_id(self, query, calendar, at_time):
        meeting = calendar.add_meeting(at_time(11, 0), at_time(12, 0))

        assert query.has_conflict(at_time(11, 0), at_time(12, 0), exclude_id=meeting.event_id) is False

    def test_managed_blocks_are_ignored(self, query, calendar, at_time):
        from inbox_blocks.models import BlockFamily
        calendar.add_block(BlockFamily.RESPONSE, at_time(11, 0), at_time(11, 45))

        assert query.has_conflict(at_time(11, 0), at_time(11, 45)) is False

    def test_each_query_reads_fresh(self, query, calendar, at_time):
        assert query.has_conflict(at_time(11, 0), at_time(12, 0)) is False
        calendar.add_meeting(at_time(11, 0), at_time(12, 0))
        assert query.has_conflict(at_time(11, 0), at_time(12, 0)) is True


@pytest.mark.unit
class TestGapsIn:
    """Tests for gaps_in and largest_gap."""

    def test_reference_scenario_gaps(self, query, calendar, at_time):
        calendar.add_meeting(at_time(11, 0), at_time(12, 0))
        calendar.add_meeting(at_time(12, 30), at_time(14, 0))

        gaps = query.gaps_in(at_time(10, 45), at_time(14, 45))

        assert _spans(gaps) == [("10:45", "11:00"), ("12:00", "12:30"), ("14:00", "14:45")]

    def test_no_obstructions_is_one_gap(self, query, at_time):
        assert _spans(query.gaps_in(at_time(9, 0), at_time(10, 0))) == [("09:00", "10:00")]

    def test_zero_length_gaps_omitted(self, query, calendar, at_time):
        calendar.add_meeting(at_time(10, 0), at_time(11, 0))
        calendar.add_meeting(at_time(11, 0), at_time(12, 0))

        gaps = query.gaps_in(at_time(10, 0), at_time(12, 0))

        assert gaps == []

    def test_obstructions_extending_past_range_are_clipped(self, query, calendar, at_time):
        calendar.add_meeting(at_time(8, 0), at_time(9, 30))
        calendar.add_meeting(at_time(10, 30), at_time(12, 0))

        gaps = query.gaps_in(at_time(9, 0), at_time(11, 0))

        assert _spans(gaps) == [("09:30", "10:30")]

    def test_overlapping_obstructions_merge(self, query, calendar, at_time):
        calendar.add_meeting(at_time(10, 0), at_time(13, 0))
        calendar.add_meeting(at_time(11, 0), at_time(12, 0))
        calendar.add_meeting(at_time(13, 30), at_time(14, 0))

        gaps = query.gaps_in(at_time(9, 0), at_time(15, 0))

        assert _spans(gaps) == [("09:00", "10:00"), ("13:00", "13:30"), ("14:00", "15:00")]

    def test_largest_gap(self, query, calendar, at_time):
        calendar.add_meeting(at_time(11, 0), at_time(12, 0))
        calendar.add_meeting(at_time(12, 30), at_time(14, 30))

        gap = query.largest_gap(at_time(10, 45), at_time(14, 45))

        assert _spans([gap]) == [("12:00", "12:30")]

    def test_largest_gap_tie_goes_to_first(self, query, calendar, at_time):
        calendar.add_meeting(at_time(10, 30), at_time(11, 0))

        gap = query.largest_gap(at_time(10, 0), at_time(11, 30))

        assert _spans([gap]) == [("10:00", "10:30")]

    def test_one_fetch_per_call(self, query, calendar, at_time):
        before = calendar.list_calls
        query.gaps_in(at_time(9, 0), at_time(17, 0))
        assert calendar.list_calls == before + 1
