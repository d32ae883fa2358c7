"""Observation models — raw station readings as supplied by the weather provider.

A provider may omit any measurement. Fields are therefore optional here, and
each consumer decides what an absent value means for it.
"""

from datetime import date, datetime, timezone

from pydantic import BaseModel


class Observation(BaseModel):
    """One day (or one instant) of measurements from a single station."""

    day: date
    timestamp: datetime | None = None

    temperature: float | None = None                # °C
    humidity: float | None = None                   # %, 0-100
    pressure: float | None = None                   # hPa
    wind_speed: float | None = None                 # m/s
    wind_gust: float | None = None                  # m/s
    precipitation_rate: float | None = None         # mm/h
    precipitation_accumulated: float | None = None  # mm

    model_config = {"frozen": True}

    def __repr__(self) -> str:
        return (
            f"<Observation {self.day} temp={self.temperature}C hum={self.humidity}% "
            f"wind={self.wind_speed}/{self.wind_gust}m/s rain={self.precipitation_rate}mm/h>"
        )


class Station(BaseModel):
    id: str
    name: str
    latitude: float = 0.0
    longitude: float = 0.0

    model_config = {"frozen": True}


def _as_utc(ts: datetime) -> datetime:
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


def _present(readings: list[Observation], field: str) -> list[float]:
    return [v for v in (getattr(r, field) for r in readings) if v is not None]


def reduce_to_daily(day: date, readings: list[Observation]) -> Observation:
    """Collapse several readings for one calendar day into a single observation.

    Temperature and wind take the daily peak, humidity the daily minimum,
    pressure the mean. Precipitation rate takes the peak; the accumulated
    total is monotonic through the day, so its maximum is the day's total.
    Naive timestamps are read as UTC.
    """
    if len(readings) == 1:
        return readings[0].model_copy(update={"day": day})

    def _max(field: str) -> float | None:
        vals = _present(readings, field)
        return max(vals) if vals else None

    humidity = _present(readings, "humidity")
    pressure = _present(readings, "pressure")
    timestamps = [_as_utc(r.timestamp) for r in readings if r.timestamp is not None]

    return Observation(
        day=day,
        timestamp=max(timestamps) if timestamps else None,
        temperature=_max("temperature"),
        humidity=min(humidity) if humidity else None,
        pressure=sum(pressure) / len(pressure) if pressure else None,
        wind_speed=_max("wind_speed"),
        wind_gust=_max("wind_gust"),
        precipitation_rate=_max("precipitation_rate"),
        precipitation_accumulated=_max("precipitation_accumulated"),
    )

