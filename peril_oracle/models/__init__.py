from peril_oracle.models.analysis import (
    PayoutRecommendation,
    RiskScores,
    ScorerResult,
    WeatherAnalysis,
)
from peril_oracle.models.events import Peril, Severity, TriggerEvent
from peril_oracle.models.observation import Observation, Station
from peril_oracle.models.policy import (
    CoverageType,
    DroughtThresholds,
    FloodThresholds,
    InsurancePolicy,
    PolicyThresholds,
    WindThresholds,
)
from peril_oracle.models.snapshot import RiskSnapshot, StationRiskReport, WeatherAlert

__all__ = [
    "CoverageType",
    "DroughtThresholds",
    "FloodThresholds",
    "InsurancePolicy",
    "Observation",
    "PayoutRecommendation",
    "Peril",
    "PolicyThresholds",
    "RiskScores",
    "RiskSnapshot",
    "ScorerResult",
    "Severity",
    "Station",
    "StationRiskReport",
    "TriggerEvent",
    "WeatherAlert",
    "WeatherAnalysis",
    "WindThresholds",
]
