"""Trigger event model — a detected, time-bounded peril occurrence.

Events are created by the risk scorers and never mutated afterwards; the
deduplicator may drop them but does not edit them.
"""

import enum
from datetime import date

from pydantic import BaseModel, Field


class Peril(str, enum.Enum):
    DROUGHT = "drought"
    FLOOD = "flood"
    WIND = "wind"
    HAIL = "hail"


class Severity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.EXTREME: 4,
}

# Affected radius in meters, fixed per peril.
AFFECTED_AREA_M: dict[Peril, int] = {
    Peril.DROUGHT: 15000,
    Peril.FLOOD: 5000,
    Peril.WIND: 10000,
    Peril.HAIL: 3000,
}


class TriggerEvent(BaseModel):
    event_type: Peril
    severity: Severity
    start_date: date
    end_date: date
    duration: int = Field(ge=1, description="Length of the event in days")
    peak_value: float
    average_value: float
    affected_area: int = Field(description="Affected radius in meters")

    model_config = {"frozen": True}

    def __repr__(self) -> str:
        return (
            f"<TriggerEvent {self.event_type.value}/{self.severity.value} "
            f"{self.start_date}..{self.end_date} ({self.duration}d) peak={self.peak_value}>"
        )
