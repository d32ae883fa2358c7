"""Weather peril detection and parametric insurance payout evaluation."""

from peril_oracle.services.payout_evaluator import evaluate
from peril_oracle.services.risk_snapshot import snapshot
from peril_oracle.services.weather_analysis import analyze

__version__ = "0.1.0"

__all__ = ["analyze", "evaluate", "snapshot"]
