"""Insurance policy model.

A policy answers the question:
  "Does a <coverage_type> event at station <station_id> between <start_date>
   and <end_date> exceed these thresholds by more than <deductible> percent?"

Threshold blocks are optional so that a partially configured policy can be
loaded; the payout evaluator refuses to evaluate one that lacks the block its
coverage type needs.
"""

import enum
from datetime import date

from pydantic import BaseModel, Field


class CoverageType(str, enum.Enum):
    DROUGHT = "drought"
    FLOOD = "flood"
    WIND = "wind"
    HAIL = "hail"
    MULTI_PERIL = "multi_peril"


class DroughtThresholds(BaseModel):
    days: float
    humidity_threshold: float | None = None
    temperature_threshold: float | None = None

    model_config = {"frozen": True}


class FloodThresholds(BaseModel):
    days: float | None = None
    precipitation_threshold: float
    cumulative_threshold: float | None = None

    model_config = {"frozen": True}


class WindThresholds(BaseModel):
    occurrences: int | None = None
    wind_speed_threshold: float
    gust_threshold: float | None = None

    model_config = {"frozen": True}


class PolicyThresholds(BaseModel):
    drought: DroughtThresholds | None = None
    flood: FloodThresholds | None = None
    wind: WindThresholds | None = None

    model_config = {"frozen": True}


class InsurancePolicy(BaseModel):
    policy_id: str
    station_id: str
    coverage_type: CoverageType
    start_date: date
    end_date: date
    premium_paid: float = 0.0
    coverage_amount: float = Field(ge=0, description="Maximum payout in currency units")
    deductible: float = Field(ge=0, le=100, description="Payout-percentage floor, 0-100")
    thresholds: PolicyThresholds = Field(default_factory=PolicyThresholds)

    model_config = {"frozen": True}

    def is_active(self, on: date) -> bool:
        return self.start_date <= on <= self.end_date

    def __repr__(self) -> str:
        return (
            f"<InsurancePolicy {self.policy_id} | {self.coverage_type.value} "
            f"@ {self.station_id} {self.start_date}..{self.end_date}>"
        )
