"""Tests for event deduplication."""

from datetime import timedelta

from peril_oracle.models.events import Peril, Severity
from peril_oracle.pipeline.dedup import deduplicate_events
from tests.conftest import START_DAY, make_event


def _day(offset: int):
    return START_DAY + timedelta(days=offset)


class TestDeduplicateEvents:
    def test_empty(self):
        assert deduplicate_events([]) == []

    def test_adjacent_same_severity_keeps_first(self):
        first = make_event(start_date=_day(0), peak_value=21.0)
        second = make_event(start_date=_day(1), peak_value=22.0)
        assert deduplicate_events([first, second]) == [first]

    def test_keeps_most_severe_of_overlap(self):
        medium = make_event(severity=Severity.MEDIUM, start_date=_day(0))
        extreme = make_event(severity=Severity.EXTREME, start_date=_day(1))
        assert deduplicate_events([medium, extreme]) == [extreme]

    def test_two_days_apart_is_not_overlap(self):
        a = make_event(start_date=_day(0))
        b = make_event(start_date=_day(2))
        assert deduplicate_events([a, b]) == [a, b]

    def test_same_day_is_overlap(self):
        a = make_event(start_date=_day(3), severity=Severity.HIGH)
        b = make_event(start_date=_day(3), severity=Severity.HIGH, peak_value=40.0)
        assert deduplicate_events([a, b]) == [a]

    def test_different_perils_never_collapse(self):
        flood = make_event(event_type=Peril.FLOOD, start_date=_day(0))
        wind = make_event(event_type=Peril.WIND, start_date=_day(0))
        assert deduplicate_events([flood, wind]) == [flood, wind]

    def test_output_ordered_by_severity(self):
        low = make_event(severity=Severity.LOW, start_date=_day(0))
        high = make_event(severity=Severity.HIGH, start_date=_day(10))
        extreme = make_event(severity=Severity.EXTREME, start_date=_day(20))
        assert deduplicate_events([low, high, extreme]) == [extreme, high, low]

    def test_only_accepted_events_block(self):
        """A dropped event does not shadow its own neighbours."""
        a = make_event(severity=Severity.HIGH, start_date=_day(0))
        b = make_event(severity=Severity.MEDIUM, start_date=_day(1))  # dropped by a
        c = make_event(severity=Severity.MEDIUM, start_date=_day(2))  # 2 days from a, survives
        assert deduplicate_events([a, b, c]) == [a, c]

    def test_input_not_mutated(self):
        events = [make_event(severity=Severity.LOW), make_event(severity=Severity.EXTREME, start_date=_day(5))]
        snapshot = list(events)
        deduplicate_events(events)
        assert events == snapshot
