"""Instantaneous risk models used by dashboards and automation alerts.

These are presentation signals derived from a single observation. They do not
decide payouts; that is the payout evaluator's job.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from peril_oracle.models.events import Severity

SnapshotPeril = Literal["flood", "wind", "drought"]


class RiskSnapshot(BaseModel):
    flood_risk: int = Field(ge=0, le=100)
    wind_risk: int = Field(ge=0, le=100)
    drought_risk: int = Field(ge=0, le=100)

    model_config = {"frozen": True}

    def by_peril(self) -> dict[str, int]:
        return {"flood": self.flood_risk, "wind": self.wind_risk, "drought": self.drought_risk}


class WeatherData(BaseModel):
    temperature: float | None = None
    precipitation_rate: float | None = None
    wind_speed: float | None = None
    wind_gust: float | None = None
    humidity: float | None = None
    pressure: float | None = None

    model_config = {"frozen": True}


class StationRiskReport(BaseModel):
    station_id: str
    timestamp: datetime | None
    risks: RiskSnapshot
    should_trigger_payout: dict[str, bool]
    weather_data: WeatherData

    model_config = {"frozen": True}


class Location(BaseModel):
    lat: float
    lon: float

    model_config = {"frozen": True}


class WeatherAlert(BaseModel):
    station_id: str
    alert_type: SnapshotPeril
    severity: Severity
    value: float | None
    threshold: float
    location: Location
    affected_radius: int
    should_trigger_payout: bool

    model_config = {"frozen": True}
