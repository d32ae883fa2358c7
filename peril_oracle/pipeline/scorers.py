"""Per-peril risk scorers over a daily observation series.

Each scorer is a pure function ``series -> ScorerResult`` and is independent
of the others. Missing measurements read as 0. Missing days are simply absent
from the series and are skipped, not zero-filled: a gap neither breaks a
drought run nor dilutes a flood window.

Two behaviours are kept exactly as they are because payouts depend on them:
  - drought events store the run's *minimum* humidity in ``average_value``;
  - the wind score counts qualifying days and emitted events separately,
    although today both counters always agree.
"""

import logging
from typing import Callable

from peril_oracle.models.analysis import ScorerResult
from peril_oracle.models.events import AFFECTED_AREA_M, Peril, Severity, TriggerEvent
from peril_oracle.models.observation import Observation
from peril_oracle.pipeline.dedup import deduplicate_events

logger = logging.getLogger(__name__)

MAX_RISK = 100

# Drought: a dry day is hot, dry and rainless; a run of DROUGHT_MIN_DAYS or
# more is an event.
DRY_HUMIDITY_MAX = 40.0
DRY_TEMPERATURE_MIN = 30.0
DRY_PRECIP_RATE_MAX = 1.0
DROUGHT_MIN_DAYS = 7
DROUGHT_SEVERITY_DAYS = (7, 14, 21)
LOW_RAINFALL_MEAN = 1.0
LOW_RAINFALL_PENALTY = 30

# Flood: rolling window over consecutive entries.
FLOOD_WINDOW = 3
FLOOD_WINDOW_RAIN_MM = 50.0
FLOOD_DAILY_RATE = 20.0
FLOOD_EXTREME_RATE = 50.0
FLOOD_HIGH_RATE = 30.0
FLOOD_HIGH_WINDOW_RAIN_MM = 100.0
SEVERITY_POINTS: dict[Severity, int] = {
    Severity.LOW: 10,
    Severity.MEDIUM: 20,
    Severity.HIGH: 35,
    Severity.EXTREME: 50,
}

# Wind: any day whose peak wind exceeds 20 m/s (~72 km/h).
HIGH_WIND_MS = 20.0

# Hail proxy: sharp cooling with heavy rain.
HAIL_TEMP_DROP = 10.0
HAIL_PRECIP_RATE = 5.0


def _v(value: float | None) -> float:
    return value if value is not None else 0.0


def severity_for(value: float, thresholds: tuple[float, float, float]) -> Severity:
    """Classify ``value`` against three ascending thresholds."""
    low, mid, high = thresholds
    if value >= high:
        return Severity.EXTREME
    if value >= mid:
        return Severity.HIGH
    if value >= low:
        return Severity.MEDIUM
    return Severity.LOW


# ── Drought ───────────────────────────────────────────────────────────────────


def _is_dry_day(obs: Observation) -> bool:
    return (
        _v(obs.humidity) < DRY_HUMIDITY_MAX
        and _v(obs.temperature) > DRY_TEMPERATURE_MIN
        and _v(obs.precipitation_rate) < DRY_PRECIP_RATE_MAX
    )


def score_drought(series: list[Observation]) -> ScorerResult:
    """Detect sustained hot, dry runs of at least a week."""
    if not series:
        return ScorerResult(risk_score=0)

    events: list[TriggerEvent] = []
    run_length = 0
    run_start = None
    peak_temperature = 0.0
    min_humidity = 100.0
    total_rainfall = 0.0

    def _emit(end_day) -> None:
        events.append(
            TriggerEvent(
                event_type=Peril.DROUGHT,
                severity=severity_for(run_length, DROUGHT_SEVERITY_DAYS),
                start_date=run_start,
                end_date=end_day,
                duration=run_length,
                peak_value=peak_temperature,
                average_value=min_humidity,
                affected_area=AFFECTED_AREA_M[Peril.DROUGHT],
            )
        )

    for obs in series:
        total_rainfall += _v(obs.precipitation_rate)

        if _is_dry_day(obs):
            if run_length == 0:
                run_start = obs.day
            run_length += 1
            peak_temperature = max(peak_temperature, _v(obs.temperature))
            min_humidity = min(min_humidity, _v(obs.humidity))
            continue

        # The breaking day closes the event.
        if run_length >= DROUGHT_MIN_DAYS:
            _emit(obs.day)
        run_length = 0
        run_start = None
        peak_temperature = 0.0
        min_humidity = 100.0

    if run_length >= DROUGHT_MIN_DAYS:
        _emit(series[-1].day)

    mean_rainfall = total_rainfall / len(series)
    longest = max((e.duration for e in events), default=0)
    penalty = LOW_RAINFALL_PENALTY if mean_rainfall < LOW_RAINFALL_MEAN else 0
    risk = min(longest * 3 + penalty + len(events) * 10, MAX_RISK)
    return ScorerResult(risk_score=risk, events=events)


# ── Flood ─────────────────────────────────────────────────────────────────────


def _daily_rainfall(obs: Observation) -> float:
    # A zero accumulated total falls through to the instantaneous rate.
    return obs.precipitation_accumulated or obs.precipitation_rate or 0.0


def _flood_severity(max_rate: float, window_rain: float) -> Severity:
    if max_rate > FLOOD_EXTREME_RATE:
        return Severity.EXTREME
    if max_rate > FLOOD_HIGH_RATE or window_rain > FLOOD_HIGH_WINDOW_RAIN_MM:
        return Severity.HIGH
    return Severity.MEDIUM


def score_flood(series: list[Observation]) -> ScorerResult:
    """Detect heavy cumulative or intense rainfall over rolling 3-day windows."""
    detections: list[TriggerEvent] = []

    for end in range(FLOOD_WINDOW - 1, len(series)):
        window = series[end - FLOOD_WINDOW + 1 : end + 1]
        window_rain = sum(_daily_rainfall(obs) for obs in window)
        max_rate = max(0.0, *(_v(obs.precipitation_rate) for obs in window))

        if window_rain > FLOOD_WINDOW_RAIN_MM or max_rate > FLOOD_DAILY_RATE:
            detections.append(
                TriggerEvent(
                    event_type=Peril.FLOOD,
                    severity=_flood_severity(max_rate, window_rain),
                    start_date=window[0].day,
                    end_date=window[-1].day,
                    duration=FLOOD_WINDOW,
                    peak_value=max_rate,
                    average_value=window_rain / FLOOD_WINDOW,
                    affected_area=AFFECTED_AREA_M[Peril.FLOOD],
                )
            )

    events = deduplicate_events(detections)
    if len(events) != len(detections):
        logger.debug("Flood: %d window detections -> %d events", len(detections), len(events))

    risk = min(sum(SEVERITY_POINTS[e.severity] for e in events), MAX_RISK)
    return ScorerResult(risk_score=risk, events=events)


# ── Wind ──────────────────────────────────────────────────────────────────────


def _wind_severity(max_wind: float) -> Severity:
    if max_wind > 40:
        return Severity.EXTREME
    if max_wind > 30:
        return Severity.HIGH
    if max_wind > 25:
        return Severity.MEDIUM
    return Severity.LOW


def score_wind(series: list[Observation]) -> ScorerResult:
    """Flag every day whose sustained or gust wind exceeds 20 m/s."""
    events: list[TriggerEvent] = []
    high_wind_days = 0

    for obs in series:
        max_wind = max(_v(obs.wind_speed), _v(obs.wind_gust))
        if max_wind <= HIGH_WIND_MS:
            continue

        high_wind_days += 1
        events.append(
            TriggerEvent(
                event_type=Peril.WIND,
                severity=_wind_severity(max_wind),
                start_date=obs.day,
                end_date=obs.day,
                duration=1,
                peak_value=max_wind,
                average_value=max_wind,
                affected_area=AFFECTED_AREA_M[Peril.WIND],
            )
        )

    risk = min(high_wind_days * 5 + len(events) * 3, MAX_RISK)
    return ScorerResult(risk_score=risk, events=events)


# ── Hail ──────────────────────────────────────────────────────────────────────


def score_hail(series: list[Observation]) -> ScorerResult:
    """Proxy hail detection: a day-over-day temperature crash with heavy rain.

    No hail sensor data is available, so this is a heuristic only.
    """
    events: list[TriggerEvent] = []

    for prev, curr in zip(series, series[1:]):
        temp_drop = _v(prev.temperature) - _v(curr.temperature)
        precipitation = _v(curr.precipitation_rate)

        if temp_drop > HAIL_TEMP_DROP and precipitation > HAIL_PRECIP_RATE:
            events.append(
                TriggerEvent(
                    event_type=Peril.HAIL,
                    severity=Severity.MEDIUM,
                    start_date=curr.day,
                    end_date=curr.day,
                    duration=1,
                    peak_value=precipitation,
                    average_value=precipitation,
                    affected_area=AFFECTED_AREA_M[Peril.HAIL],
                )
            )

    return ScorerResult(risk_score=min(len(events) * 15, MAX_RISK), events=events)


SCORERS: dict[Peril, Callable[[list[Observation]], ScorerResult]] = {
    Peril.DROUGHT: score_drought,
    Peril.FLOOD: score_flood,
    Peril.WIND: score_wind,
    Peril.HAIL: score_hail,
}
