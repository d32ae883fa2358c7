"""Client for the WeatherXM Pro station data API.

WeatherXM publishes per-station observations from its network of community
weather stations. We use three endpoints:

  GET /stations                            station directory
  GET /stations/{id}/latest                most recent reading
  GET /stations/{id}/history?date=...      readings for one calendar day

Docs: https://pro.weatherxm.com/docs
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any

import httpx

from peril_oracle.core.config import settings
from peril_oracle.core.errors import ObservationSourceError
from peril_oracle.models.observation import Observation, Station

logger = logging.getLogger(__name__)

MEASUREMENT_FIELDS = (
    "temperature",
    "humidity",
    "pressure",
    "wind_speed",
    "wind_gust",
    "precipitation_rate",
    "precipitation_accumulated",
)


def _safe_float(val: Any) -> float | None:
    """Parse a float, returning None for missing or unparseable values."""
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, str) and not val.strip():
        return None
    try:
        return float(val)
    except (ValueError, TypeError):
        return None


def _parse_timestamp(val: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp as an aware UTC datetime. Naive values are taken as UTC."""
    if not isinstance(val, str) or not val:
        return None
    try:
        ts = datetime.fromisoformat(val.replace("Z", "+00:00"))
    except ValueError:
        return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def parse_observation(raw: dict[str, Any], day: date | None = None) -> Observation:
    """Build an Observation from one provider record.

    Records come either bare or wrapped as ``{"observation": {...}}``. The
    calendar day defaults to the reading's own timestamp.

    Raises:
        ObservationSourceError: The record carries no measurement at all, or
            no day can be determined for it.
    """
    obs = raw.get("observation") if isinstance(raw.get("observation"), dict) else raw
    timestamp = _parse_timestamp(obs.get("timestamp") or raw.get("timestamp"))

    if day is None:
        if timestamp is None:
            raise ObservationSourceError(200, "Observation has neither a date nor a timestamp")
        day = timestamp.date()

    measurements = {name: _safe_float(obs.get(name)) for name in MEASUREMENT_FIELDS}
    if all(value is None for value in measurements.values()):
        raise ObservationSourceError(200, f"Record for {day} carries no measurements")

    return Observation(day=day, timestamp=timestamp, **measurements)


def _parse_station(raw: dict[str, Any]) -> Station | None:
    station_id = raw.get("id") or raw.get("station_id")
    if not station_id:
        return None
    location = raw.get("location") if isinstance(raw.get("location"), dict) else raw
    lat = location.get("lat", location.get("latitude"))
    lon = location.get("lon", location.get("longitude"))
    return Station(
        id=str(station_id),
        name=raw.get("name") or raw.get("station_name") or f"Station {station_id}",
        latitude=_safe_float(lat) or 0.0,
        longitude=_safe_float(lon) or 0.0,
    )


class WeatherXMClient:
    """Async ``ObservationSource`` backed by the WeatherXM Pro REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.weatherxm_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.weatherxm_api_key
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Accept": "application/json", "X-API-KEY": self.api_key},
            transport=self._transport,
        )

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        try:
            async with self._client() as client:
                resp = await client.get(path, params=params)
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ObservationSourceError(0, f"Cannot reach WeatherXM at {self.base_url}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ObservationSourceError(0, f"WeatherXM request failed: {exc}") from exc

        if resp.status_code >= 400:
            raise ObservationSourceError(resp.status_code, resp.text[:200])
        try:
            return resp.json()
        except ValueError as exc:
            raise ObservationSourceError(resp.status_code, f"Undecodable response from {path}") from exc

    async def get_latest_observation(self, station_id: str) -> Observation:
        """GET /stations/{id}/latest: the station's most recent reading."""
        data = await self._get_json(f"/stations/{station_id}/latest")
        if not isinstance(data, dict):
            raise ObservationSourceError(200, f"Unexpected latest payload for {station_id}")
        return parse_observation(data)

    async def get_observations_for_date(
        self, station_id: str, day: date
    ) -> Observation | list[Observation]:
        """GET /stations/{id}/history: readings for one calendar day.

        Returns a single Observation when the provider sends one record, or a
        list when it sends the day's individual readings. Readings without any
        measurement are dropped from a list; a lone empty record raises.
        """
        data = await self._get_json(
            f"/stations/{station_id}/history", params={"date": day.isoformat()}
        )

        if isinstance(data, dict) and isinstance(data.get("data"), list):
            data = data["data"]

        if isinstance(data, list):
            readings = []
            for row in data:
                if not isinstance(row, dict):
                    continue
                try:
                    readings.append(parse_observation(row, day))
                except ObservationSourceError as exc:
                    logger.debug("Dropping reading for %s on %s: %s", station_id, day, exc.detail)
            logger.debug("Fetched %d readings for %s on %s", len(readings), station_id, day)
            return readings
        if isinstance(data, dict):
            return parse_observation(data, day)

        raise ObservationSourceError(200, f"Unexpected history payload for {station_id} on {day}")

    async def list_stations(self) -> list[Station]:
        """GET /stations: the station directory."""
        data = await self._get_json("/stations")
        if isinstance(data, dict):
            data = data.get("data") or data.get("stations") or []
        if not isinstance(data, list):
            raise ObservationSourceError(200, "Unexpected stations payload")

        stations = []
        for row in data:
            station = _parse_station(row) if isinstance(row, dict) else None
            if station is None:
                logger.warning("Skipping station record without an id: %r", row)
                continue
            stations.append(station)

        logger.info("Fetched %d stations from WeatherXM", len(stations))
        return stations
