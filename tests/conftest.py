"""Shared test fixtures for the peril-oracle test suite.

The scorers, deduplicator, evaluator and snapshot are pure functions and are
tested directly on hand-built observation series. The async entry points are
driven through ``FakeObservationSource``, an in-memory stand-in for the
weather provider that can also simulate failing days and stations.
"""

from datetime import date, datetime, timedelta

import pytest

from peril_oracle.core.errors import ObservationSourceError
from peril_oracle.models.events import AFFECTED_AREA_M, Peril, Severity, TriggerEvent
from peril_oracle.models.observation import Observation, Station
from peril_oracle.models.policy import (
    CoverageType,
    DroughtThresholds,
    FloodThresholds,
    InsurancePolicy,
    PolicyThresholds,
    WindThresholds,
)


START_DAY = date(2025, 7, 1)


# ── Factory helpers ───────────────────────────────────────────────────────────


def make_observation(
    day: date = START_DAY,
    temperature: float | None = 22.0,
    humidity: float | None = 60.0,
    pressure: float | None = 1013.0,
    wind_speed: float | None = 3.0,
    wind_gust: float | None = 5.0,
    precipitation_rate: float | None = 0.0,
    precipitation_accumulated: float | None = None,
    timestamp: datetime | None = None,
) -> Observation:
    """Create an Observation with mild, uneventful defaults."""
    return Observation(
        day=day,
        timestamp=timestamp,
        temperature=temperature,
        humidity=humidity,
        pressure=pressure,
        wind_speed=wind_speed,
        wind_gust=wind_gust,
        precipitation_rate=precipitation_rate,
        precipitation_accumulated=precipitation_accumulated,
    )


def make_series(count: int, start: date = START_DAY, **fields) -> list[Observation]:
    """Create ``count`` consecutive daily observations sharing the same readings."""
    return [make_observation(day=start + timedelta(days=i), **fields) for i in range(count)]


def make_dry_series(count: int, start: date = START_DAY) -> list[Observation]:
    """Consecutive drought days: humidity 10%, 35°C, no rain."""
    return make_series(count, start, humidity=10.0, temperature=35.0, precipitation_rate=0.0)


def make_event(
    event_type: Peril = Peril.FLOOD,
    severity: Severity = Severity.MEDIUM,
    start_date: date = START_DAY,
    duration: int = 1,
    peak_value: float = 25.0,
    average_value: float | None = None,
) -> TriggerEvent:
    """Create a TriggerEvent for testing."""
    return TriggerEvent(
        event_type=event_type,
        severity=severity,
        start_date=start_date,
        end_date=start_date + timedelta(days=duration - 1),
        duration=duration,
        peak_value=peak_value,
        average_value=peak_value if average_value is None else average_value,
        affected_area=AFFECTED_AREA_M[event_type],
    )


def make_policy(
    policy_id: str = "POL-001",
    station_id: str = "ST001",
    coverage_type: CoverageType = CoverageType.FLOOD,
    coverage_amount: float = 10000.0,
    deductible: float = 10.0,
    drought_days: float = 14,
    precipitation_threshold: float = 20.0,
    wind_speed_threshold: float = 25.0,
    thresholds: PolicyThresholds | None = None,
    start_date: date = date(2025, 1, 1),
    end_date: date = date(2025, 12, 31),
) -> InsurancePolicy:
    """Create an InsurancePolicy with all three threshold blocks populated."""
    if thresholds is None:
        thresholds = PolicyThresholds(
            drought=DroughtThresholds(days=drought_days, humidity_threshold=30, temperature_threshold=35),
            flood=FloodThresholds(days=3, precipitation_threshold=precipitation_threshold, cumulative_threshold=100),
            wind=WindThresholds(occurrences=1, wind_speed_threshold=wind_speed_threshold, gust_threshold=35),
        )
    return InsurancePolicy(
        policy_id=policy_id,
        station_id=station_id,
        coverage_type=coverage_type,
        start_date=start_date,
        end_date=end_date,
        premium_paid=250.0,
        coverage_amount=coverage_amount,
        deductible=deductible,
        thresholds=thresholds,
    )


class FakeObservationSource:
    """In-memory ObservationSource.

    ``history`` maps a day to what the provider returns for it (one
    Observation or a list of readings). Days listed in ``failing_days`` raise
    ObservationSourceError; days absent from ``history`` raise a 404.
    """

    def __init__(
        self,
        history: dict[date, Observation | list[Observation]] | None = None,
        latest: dict[str, Observation] | None = None,
        stations: list[Station] | None = None,
        failing_days: set[date] | None = None,
    ):
        self.history = history or {}
        self.latest = latest or {}
        self.stations = stations or []
        self.failing_days = failing_days or set()
        self.requested_days: list[date] = []

    @classmethod
    def from_series(cls, series: list[Observation], **kwargs) -> "FakeObservationSource":
        return cls(history={obs.day: obs for obs in series}, **kwargs)

    async def get_latest_observation(self, station_id: str) -> Observation:
        if station_id not in self.latest:
            raise ObservationSourceError(404, f"Unknown station {station_id}")
        return self.latest[station_id]

    async def get_observations_for_date(self, station_id: str, day: date):
        self.requested_days.append(day)
        if day in self.failing_days:
            raise ObservationSourceError(503, f"Provider unavailable for {day}")
        if day not in self.history:
            raise ObservationSourceError(404, f"No data for {day}")
        return self.history[day]

    async def list_stations(self) -> list[Station]:
        return list(self.stations)


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def flood_policy() -> InsurancePolicy:
    """Flood cover: 20 mm/h trigger, 10% deductible, 10k coverage."""
    return make_policy()


@pytest.fixture
def analysis_date() -> date:
    """Exclusive end of a 30-day window starting at START_DAY."""
    return START_DAY + timedelta(days=30)

