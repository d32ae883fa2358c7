"""Instantaneous risk snapshot — scores a single observation, no history.

Feeds live dashboards and automation alerts. Scores are banded sums capped
at 100. A measurement the station did not report contributes nothing.

The ``should_trigger_payout`` flags derived here are presentation signals
for automation consumers. The authoritative payout decision is
``payout_evaluator.evaluate``.
"""

import logging

from peril_oracle.core.config import settings
from peril_oracle.core.errors import ObservationSourceError
from peril_oracle.models.events import Severity
from peril_oracle.models.observation import Observation
from peril_oracle.models.snapshot import (
    Location,
    RiskSnapshot,
    StationRiskReport,
    WeatherAlert,
    WeatherData,
)
from peril_oracle.services.observation_source import ObservationSource

logger = logging.getLogger(__name__)

# Nominal threshold and affected radius (m) per alert type.
_ALERT_PARAMS: dict[str, tuple[float, int]] = {
    "flood": (10.0, 5000),
    "wind": (15.0, 8000),
    "drought": (35.0, 15000),
}


def _clamp(risk: int) -> int:
    return max(0, min(risk, 100))


def _gt(value: float | None, limit: float) -> bool:
    return value is not None and value > limit


def _lt(value: float | None, limit: float) -> bool:
    return value is not None and value < limit


def _max_wind(obs: Observation) -> float | None:
    winds = [w for w in (obs.wind_speed, obs.wind_gust) if w is not None]
    return max(winds) if winds else None


def flood_risk(obs: Observation) -> int:
    risk = 0

    # Rainfall intensity
    if _gt(obs.precipitation_rate, 20):
        risk += 40
    elif _gt(obs.precipitation_rate, 10):
        risk += 30
    elif _gt(obs.precipitation_rate, 5):
        risk += 15

    # Saturated air
    if _gt(obs.humidity, 90):
        risk += 20
    elif _gt(obs.humidity, 80):
        risk += 10

    # Low pressure (storm systems)
    if _lt(obs.pressure, 1000):
        risk += 10
    elif _lt(obs.pressure, 1005):
        risk += 5

    return _clamp(risk)


def wind_risk(obs: Observation) -> int:
    risk = 0
    max_wind = _max_wind(obs)

    if _gt(max_wind, 25):
        risk += 40
    elif _gt(max_wind, 20):
        risk += 30
    elif _gt(max_wind, 15):
        risk += 20
    elif _gt(max_wind, 10):
        risk += 10

    if _lt(obs.pressure, 990):
        risk += 20
    elif _lt(obs.pressure, 1000):
        risk += 10

    return _clamp(risk)


def drought_risk(obs: Observation) -> int:
    risk = 0

    if _lt(obs.humidity, 20):
        risk += 30
    elif _lt(obs.humidity, 30):
        risk += 20
    elif _lt(obs.humidity, 40):
        risk += 10

    if _gt(obs.temperature, 40):
        risk += 25
    elif _gt(obs.temperature, 35):
        risk += 20
    elif _gt(obs.temperature, 30):
        risk += 10

    if obs.precipitation_rate == 0:
        risk += 20

    # Extreme heat on bone-dry air stacks on top of the bands above.
    if _lt(obs.humidity, 20) and _gt(obs.temperature, 40):
        risk += 25

    return _clamp(risk)


def snapshot(obs: Observation) -> RiskSnapshot:
    return RiskSnapshot(
        flood_risk=flood_risk(obs),
        wind_risk=wind_risk(obs),
        drought_risk=drought_risk(obs),
    )


def _weather_data(obs: Observation) -> WeatherData:
    return WeatherData(
        temperature=obs.temperature,
        precipitation_rate=obs.precipitation_rate,
        wind_speed=obs.wind_speed,
        wind_gust=obs.wind_gust,
        humidity=obs.humidity,
        pressure=obs.pressure,
    )


async def station_risk_report(station_id: str, source: ObservationSource) -> StationRiskReport:
    """Score a station's latest reading and flag perils at the payout signal level."""
    obs = await source.get_latest_observation(station_id)
    risks = snapshot(obs)

    return StationRiskReport(
        station_id=station_id,
        timestamp=obs.timestamp,
        risks=risks,
        should_trigger_payout={
            peril: score >= settings.payout_signal_threshold
            for peril, score in risks.by_peril().items()
        },
        weather_data=_weather_data(obs),
    )


def _alert_severity(score: int) -> Severity:
    if score >= 80:
        return Severity.EXTREME
    if score >= 70:
        return Severity.HIGH
    return Severity.MEDIUM


def _alert_value(peril: str, obs: Observation) -> float | None:
    if peril == "flood":
        return obs.precipitation_rate
    if peril == "wind":
        return _max_wind(obs)
    return obs.temperature


async def weather_alerts(
    source: ObservationSource,
    limit: int | None = None,
) -> list[WeatherAlert]:
    """Scan the station directory and raise an alert for every elevated peril.

    Stations whose latest reading cannot be fetched are skipped. A failure to
    list stations propagates.
    """
    if limit is None:
        limit = settings.alert_station_limit

    stations = await source.list_stations()
    alerts: list[WeatherAlert] = []

    for station in stations[:limit]:
        try:
            obs = await source.get_latest_observation(station.id)
        except ObservationSourceError as exc:
            logger.warning("Failed to get risk data for station %s: %s", station.id, exc)
            continue

        for peril, score in snapshot(obs).by_peril().items():
            if score < settings.alert_risk_threshold:
                continue
            threshold, radius = _ALERT_PARAMS[peril]
            severity = _alert_severity(score)
            alerts.append(
                WeatherAlert(
                    station_id=station.id,
                    alert_type=peril,
                    severity=severity,
                    value=_alert_value(peril, obs),
                    threshold=threshold,
                    location=Location(lat=station.latitude, lon=station.longitude),
                    affected_radius=radius,
                    should_trigger_payout=severity in (Severity.HIGH, Severity.EXTREME),
                )
            )

    logger.info("Scanned %d stations, %d alerts", min(len(stations), limit), len(alerts))
    return alerts
