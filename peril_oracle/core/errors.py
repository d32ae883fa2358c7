"""Error taxonomy for analysis and payout evaluation.

Every error renders to the same structured payload:

    {
      "error": {
        "code": "DESCRIPTIVE_CODE",
        "message": "Human-readable explanation of what went wrong.",
        ...extra fields when relevant
      }
    }

All errors are scoped to a single call; nothing is retried automatically.
"""

from __future__ import annotations

from typing import Any


class PerilOracleError(Exception):
    """Base class for every error raised by the oracle."""

    code = "ERROR"

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message, **self.details}}


class DataUnavailableError(PerilOracleError):
    """No usable observations for the requested station and window."""

    code = "DATA_UNAVAILABLE"


class ObservationSourceError(DataUnavailableError):
    """A single call to the observation source failed.

    ``status`` is the HTTP status code, or 0 when the provider could not be reached.
    """

    code = "OBSERVATION_SOURCE_ERROR"

    def __init__(self, status: int, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(f"Observation source {status}: {detail}", status=status)


class InvalidPolicyConfigurationError(PerilOracleError):
    """Policy thresholds are missing or non-positive for its coverage type."""

    code = "INVALID_POLICY_CONFIGURATION"


class UnsupportedCoverageError(PerilOracleError):
    """The peril has no automated payout rule."""

    code = "UNSUPPORTED_COVERAGE"
