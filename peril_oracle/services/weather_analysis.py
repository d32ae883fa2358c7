"""Weather analysis aggregator — historical peril detection for one station.

This module:
1. Fetches one observation per day over the lookback window, concurrently.
2. Reassembles the days in chronological order, skipping any that failed.
3. Runs the four peril scorers over the series.
4. Returns a WeatherAnalysis without a payout decision; that is left to the
   payout evaluator.

Edge cases handled:
- A failed or empty day → skipped, analysis proceeds on the remaining days.
- Every day failed → DataUnavailableError.
- A day reported as several readings → reduced to one daily observation.
"""

import asyncio
import logging
from datetime import date, datetime, timedelta, timezone

from peril_oracle.core.config import settings
from peril_oracle.core.errors import DataUnavailableError, ObservationSourceError
from peril_oracle.models.analysis import RiskScores, WeatherAnalysis
from peril_oracle.models.events import Peril
from peril_oracle.models.observation import Observation, reduce_to_daily
from peril_oracle.pipeline.scorers import SCORERS
from peril_oracle.services.observation_source import ObservationSource

logger = logging.getLogger(__name__)


def utc_today() -> date:
    """Default analysis date for every entry point: the current UTC calendar day."""
    return datetime.now(timezone.utc).date()


def lookback_days_for(analysis_date: date, lookback_days: int) -> list[date]:
    """Calendar days in [analysis_date - lookback_days, analysis_date)."""
    start = analysis_date - timedelta(days=lookback_days)
    return [start + timedelta(days=i) for i in range(lookback_days)]


async def _fetch_day(
    source: ObservationSource,
    station_id: str,
    day: date,
    semaphore: asyncio.Semaphore,
) -> Observation | None:
    async with semaphore:
        try:
            result = await source.get_observations_for_date(station_id, day)
        except ObservationSourceError as exc:
            logger.warning("Skipping %s for %s: %s", day, station_id, exc)
            return None

    if isinstance(result, list):
        if not result:
            logger.warning("Skipping %s for %s: no readings", day, station_id)
            return None
        return reduce_to_daily(day, result)
    return result.model_copy(update={"day": day})


async def fetch_observation_series(
    source: ObservationSource,
    station_id: str,
    analysis_date: date,
    lookback_days: int,
) -> list[Observation]:
    """Fetch the lookback window day by day, oldest first.

    Failed days are absent from the result rather than zero-filled.
    """
    days = lookback_days_for(analysis_date, lookback_days)
    semaphore = asyncio.Semaphore(max(1, settings.fetch_concurrency))
    results = await asyncio.gather(
        *(_fetch_day(source, station_id, day, semaphore) for day in days)
    )
    series = [obs for obs in results if obs is not None]

    if len(series) < len(days):
        logger.warning(
            "Station %s: %d of %d days unavailable in window ending %s",
            station_id, len(days) - len(series), len(days), analysis_date,
        )
    return series


def analyze_series(
    station_id: str,
    analysis_date: date,
    lookback_days: int,
    series: list[Observation],
) -> WeatherAnalysis:
    """Score an already-fetched series. Pure; identical inputs give identical output."""
    results = {peril: scorer(series) for peril, scorer in SCORERS.items()}

    # No cross-peril deduplication; flood deduplicates itself.
    trigger_events = [event for peril in Peril for event in results[peril].events]

    return WeatherAnalysis(
        station_id=station_id,
        analysis_date=analysis_date,
        period=f"{lookback_days}d",
        risk_scores=RiskScores(
            drought=results[Peril.DROUGHT].risk_score,
            flood=results[Peril.FLOOD].risk_score,
            wind=results[Peril.WIND].risk_score,
            hail=results[Peril.HAIL].risk_score,
        ),
        trigger_events=trigger_events,
        payout_recommendation=None,
    )


async def analyze(
    station_id: str,
    analysis_date: date,
    lookback_days: int | None = None,
    *,
    source: ObservationSource,
) -> WeatherAnalysis:
    """Analyze a station's weather over the lookback window ending at ``analysis_date``.

    Args:
        station_id: Weather station identifier.
        analysis_date: Exclusive end of the window.
        lookback_days: Window length in days. Defaults to settings.default_lookback_days.
        source: Observation source to fetch from.

    Returns:
        A fresh WeatherAnalysis with ``payout_recommendation`` unset.

    Raises:
        ValueError: If lookback_days is not positive.
        DataUnavailableError: If no day in the window could be fetched.
    """
    if lookback_days is None:
        lookback_days = settings.default_lookback_days
    if lookback_days < 1:
        raise ValueError(f"lookback_days must be >= 1, got {lookback_days}")

    series = await fetch_observation_series(source, station_id, analysis_date, lookback_days)
    if not series:
        raise DataUnavailableError(
            f"No observations available for station {station_id} "
            f"in the {lookback_days} days before {analysis_date}",
            station_id=station_id,
            analysis_date=analysis_date.isoformat(),
            lookback_days=lookback_days,
        )

    analysis = analyze_series(station_id, analysis_date, lookback_days, series)

    logger.info(
        "Analyzed %s over %s (%d days): drought=%d flood=%d wind=%d hail=%d, %d events",
        station_id,
        analysis.period,
        len(series),
        analysis.risk_scores.drought,
        analysis.risk_scores.flood,
        analysis.risk_scores.wind,
        analysis.risk_scores.hail,
        len(analysis.trigger_events),
    )
    return analysis
