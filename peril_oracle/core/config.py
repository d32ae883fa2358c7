"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # WeatherXM Pro observation source
    weatherxm_base_url: str = "https://pro.weatherxm.com/api/v1"
    weatherxm_api_key: str = ""
    request_timeout_seconds: float = 30.0

    # Historical analysis
    default_lookback_days: int = 30
    fetch_concurrency: int = 5  # parallel day fetches per analysis

    # Snapshot / automation signals
    alert_risk_threshold: int = 60
    payout_signal_threshold: int = 80
    alert_station_limit: int = 10

    # Payout evidence
    evidence_hash_algorithm: str = "sha256"

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
