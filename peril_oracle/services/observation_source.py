"""The observation source contract consumed by the analysis layer.

Anything that can answer these calls can drive an analysis: the WeatherXM
client in production, a fixture-backed fake in tests. Every call either
returns real data or raises ``ObservationSourceError``; it never returns a
zeroed observation in place of a failure.
"""

from datetime import date
from typing import Protocol

from peril_oracle.models.observation import Observation, Station


class ObservationSource(Protocol):
    async def get_latest_observation(self, station_id: str) -> Observation:
        ...

    async def get_observations_for_date(
        self, station_id: str, day: date
    ) -> Observation | list[Observation]:
        ...

    async def list_stations(self) -> list[Station]:
        ...
