"""Shared fixtures for live integration tests.

These tests call the real WeatherXM Pro API. They are skipped unless
WEATHERXM_API_KEY is set. Run with: pytest tests/integration/ -v
"""

import os

import pytest

from peril_oracle.services.weatherxm_client import WeatherXMClient


LIVE_STATION_ID = os.getenv("WEATHERXM_TEST_STATION")


@pytest.fixture(scope="session")
def live_client() -> WeatherXMClient:
    api_key = os.getenv("WEATHERXM_API_KEY")
    if not api_key:
        pytest.skip("WEATHERXM_API_KEY not set")
    return WeatherXMClient(api_key=api_key)
