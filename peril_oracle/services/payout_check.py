"""Station payout check: evaluates every active policy on a station.

Intended to be run periodically by an automation job:
1. Analyze the station over the trailing window (once, shared by all policies).
2. Load the station's active policies from the repository.
3. Evaluate each policy and collect the payouts owed.

A misconfigured policy is logged and skipped so that the station's other
policies are still evaluated.
"""

import logging
from datetime import date

from peril_oracle.core.errors import InvalidPolicyConfigurationError
from peril_oracle.models.analysis import PayoutRecommendation
from peril_oracle.services.observation_source import ObservationSource
from peril_oracle.services.payout_evaluator import evaluate
from peril_oracle.services.policy_store import PolicyRepository
from peril_oracle.services.weather_analysis import analyze, utc_today

logger = logging.getLogger(__name__)

PAYOUT_CHECK_LOOKBACK_DAYS = 30


async def check_station_payouts(
    station_id: str,
    repository: PolicyRepository,
    source: ObservationSource,
    today: date | None = None,
    lookback_days: int = PAYOUT_CHECK_LOOKBACK_DAYS,
) -> list[PayoutRecommendation]:
    """Return the payout recommendations owed for ``station_id`` as of ``today``."""
    today = today or utc_today()

    policies = repository.list_active_for_station(station_id, today)
    if not policies:
        logger.info("No active policies for station %s on %s", station_id, today)
        return []

    analysis = await analyze(station_id, today, lookback_days, source=source)

    recommendations: list[PayoutRecommendation] = []
    for policy in policies:
        try:
            recommendation = evaluate(policy, analysis)
        except InvalidPolicyConfigurationError as exc:
            logger.error("Skipping policy %s: %s", policy.policy_id, exc.message)
            continue
        if recommendation is not None:
            recommendations.append(recommendation)

    logger.info(
        "Station %s: %d active policies, %d payouts owed",
        station_id, len(policies), len(recommendations),
    )
    return recommendations
