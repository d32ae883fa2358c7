"""Analysis result models: risk scores, aggregate analysis, payout recommendation."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from peril_oracle.models.events import Peril, Severity, TriggerEvent


class ScorerResult(BaseModel):
    """Shared return shape of every per-peril risk scorer."""

    risk_score: int = Field(ge=0, le=100)
    events: list[TriggerEvent] = Field(default_factory=list)

    model_config = {"frozen": True}


class RiskScores(BaseModel):
    drought: int = Field(ge=0, le=100)
    flood: int = Field(ge=0, le=100)
    wind: int = Field(ge=0, le=100)
    hail: int = Field(ge=0, le=100)

    model_config = {"frozen": True}


class PayoutRecommendation(BaseModel):
    policy_id: str
    event_type: Peril
    severity: Severity
    payout_amount: float
    payout_percentage: float = Field(description="Percentage of coverage paid, net of deductible")
    justification: str
    evidence_data: list[TriggerEvent]
    evidence_hash: str

    model_config = {"frozen": True}


class WeatherAnalysis(BaseModel):
    station_id: str
    analysis_date: date
    period: str = Field(examples=["7d", "30d"])
    risk_scores: RiskScores
    trigger_events: list[TriggerEvent] = Field(default_factory=list)
    payout_recommendation: PayoutRecommendation | None = None

    model_config = {"frozen": True}

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
