"""Collapse overlapping detections of the same peril.

Sliding-window scorers report the same physical event once per window that
contains it. Among same-peril events whose start dates lie within
``OVERLAP_DAYS`` of each other only the most severe is kept.
"""

from peril_oracle.models.events import TriggerEvent

OVERLAP_DAYS = 2


def deduplicate_events(events: list[TriggerEvent]) -> list[TriggerEvent]:
    """Return the surviving events, most severe first.

    The sort is stable, so among equally severe events the one detected
    first wins.
    """
    ranked = sorted(events, key=lambda e: e.severity.rank, reverse=True)

    unique: list[TriggerEvent] = []
    for event in ranked:
        overlaps = any(
            kept.event_type == event.event_type
            and abs((kept.start_date - event.start_date).days) < OVERLAP_DAYS
            for kept in unique
        )
        if not overlaps:
            unique.append(event)
    return unique
