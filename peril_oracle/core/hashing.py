"""Deterministic serialization and hashing for payout evidence.

Payout recommendations carry a digest of the evidence they were decided on,
so a recommendation forwarded to a claims system can be checked against the
trigger events it cites.
"""

import hashlib
import json
from datetime import date, datetime
from typing import Any

from peril_oracle.core.config import settings


def canonical_json(data: Any) -> str:
    """Serialize with sorted keys and compact separators; dates as ISO strings."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=_json_default)


def _json_default(obj: Any) -> str:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def compute_evidence_hash(payload: dict[str, Any]) -> str:
    """Hex digest of ``payload``'s canonical JSON under ``settings.evidence_hash_algorithm``."""
    return hashlib.new(
        settings.evidence_hash_algorithm, canonical_json(payload).encode("utf-8")
    ).hexdigest()
