"""Payout evaluator — decides whether an analysis owes a policy a payout.

For each trigger event relevant to the policy's coverage, in the order the
analysis lists them:
1. Compare the event's measure against the policy threshold for its peril.
2. Convert the ratio to a payout percentage, capped at 100.
3. Pay out on the FIRST event that meets its threshold and clears the
   deductible; later events are not considered.

Hail has no payout rule. Hail events never qualify, and no threshold is
substituted for one.
"""

import logging
from typing import Any

from peril_oracle.core.errors import InvalidPolicyConfigurationError, UnsupportedCoverageError
from peril_oracle.core.hashing import compute_evidence_hash
from peril_oracle.models.analysis import PayoutRecommendation, WeatherAnalysis
from peril_oracle.models.events import Peril, TriggerEvent
from peril_oracle.models.policy import CoverageType, InsurancePolicy

logger = logging.getLogger(__name__)

MAX_PAYOUT_PERCENTAGE = 100.0

# Threshold block and divisor each coverage type needs.
_REQUIRED_THRESHOLDS: dict[Peril, tuple[str, str]] = {
    Peril.DROUGHT: ("drought", "days"),
    Peril.FLOOD: ("flood", "precipitation_threshold"),
    Peril.WIND: ("wind", "wind_speed_threshold"),
}


def _required_perils(coverage: CoverageType) -> list[Peril]:
    if coverage == CoverageType.MULTI_PERIL:
        return list(_REQUIRED_THRESHOLDS)
    peril = Peril(coverage.value)
    return [peril] if peril in _REQUIRED_THRESHOLDS else []


def validate_policy(policy: InsurancePolicy) -> None:
    """Raise InvalidPolicyConfigurationError unless the coverage's thresholds are usable."""
    for peril in _required_perils(policy.coverage_type):
        block_name, divisor = _REQUIRED_THRESHOLDS[peril]
        block = getattr(policy.thresholds, block_name)
        if block is None:
            raise InvalidPolicyConfigurationError(
                f"Policy {policy.policy_id} covers {peril.value} but has no {block_name} thresholds",
                policy_id=policy.policy_id,
                peril=peril.value,
            )
        value = getattr(block, divisor)
        if value is None or value <= 0:
            raise InvalidPolicyConfigurationError(
                f"Policy {policy.policy_id}: {block_name}.{divisor} must be positive, got {value}",
                policy_id=policy.policy_id,
                peril=peril.value,
                field=f"{block_name}.{divisor}",
            )


def _covers(policy: InsurancePolicy, event: TriggerEvent) -> bool:
    return (
        policy.coverage_type == CoverageType.MULTI_PERIL
        or event.event_type.value == policy.coverage_type.value
    )


def payout_ratio(event: TriggerEvent, policy: InsurancePolicy) -> tuple[bool, float]:
    """Return (meets_threshold, payout_percentage) for one event.

    Raises:
        UnsupportedCoverageError: The event's peril has no payout rule.
    """
    thresholds = policy.thresholds

    if event.event_type == Peril.DROUGHT:
        measure, limit = float(event.duration), thresholds.drought.days
    elif event.event_type == Peril.FLOOD:
        measure, limit = event.peak_value, thresholds.flood.precipitation_threshold
    elif event.event_type == Peril.WIND:
        measure, limit = event.peak_value, thresholds.wind.wind_speed_threshold
    else:
        raise UnsupportedCoverageError(
            f"No automated payout rule for {event.event_type.value} events",
            peril=event.event_type.value,
        )

    percentage = min((measure / limit) * 100, MAX_PAYOUT_PERCENTAGE)
    return measure >= limit, percentage


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(value)


def _justification(event: TriggerEvent) -> str:
    return (
        f"{event.event_type.value} event exceeded policy thresholds: "
        f"{event.duration} days duration, peak value {_format_number(event.peak_value)}"
    )


def _evidence_payload(
    policy: InsurancePolicy, event: TriggerEvent, analysis: WeatherAnalysis
) -> dict[str, Any]:
    return {
        "policy_id": policy.policy_id,
        "station_id": analysis.station_id,
        "analysis_date": analysis.analysis_date.isoformat(),
        "period": analysis.period,
        "events": [event.model_dump(mode="json")],
    }


def evaluate(policy: InsurancePolicy, analysis: WeatherAnalysis) -> PayoutRecommendation | None:
    """Return the payout owed to ``policy`` under ``analysis``, or None.

    Raises:
        InvalidPolicyConfigurationError: If the thresholds the policy's
            coverage needs are missing or non-positive.
    """
    validate_policy(policy)

    relevant = [e for e in analysis.trigger_events if _covers(policy, e)]
    if not relevant:
        return None

    for event in relevant:
        try:
            meets_threshold, percentage = payout_ratio(event, policy)
        except UnsupportedCoverageError as exc:
            logger.info("Policy %s: %s; event not payable", policy.policy_id, exc.message)
            continue

        if not meets_threshold or percentage <= policy.deductible:
            continue

        net_percentage = percentage - policy.deductible
        payout_amount = (policy.coverage_amount * net_percentage) / 100

        recommendation = PayoutRecommendation(
            policy_id=policy.policy_id,
            event_type=event.event_type,
            severity=event.severity,
            payout_amount=payout_amount,
            payout_percentage=net_percentage,
            justification=_justification(event),
            evidence_data=[event],
            evidence_hash=compute_evidence_hash(_evidence_payload(policy, event, analysis)),
        )
        logger.info(
            "Policy %s: payout %.2f (%.2f%%) for %s event starting %s",
            policy.policy_id,
            payout_amount,
            net_percentage,
            event.event_type.value,
            event.start_date,
        )
        return recommendation

    return None


def attach_recommendation(
    analysis: WeatherAnalysis, recommendation: PayoutRecommendation | None
) -> WeatherAnalysis:
    """Return a copy of ``analysis`` carrying the evaluator's decision."""
    return analysis.model_copy(update={"payout_recommendation": recommendation})
