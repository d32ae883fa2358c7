"""Policy storage abstraction.

The analysis and evaluation code never touches storage; orchestration code
is handed a ``PolicyRepository``. ``InMemoryPolicyRepository`` backs tests and
the CLI. Swap in a database-backed implementation in production; the
interface stays the same.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol

from peril_oracle.models.policy import InsurancePolicy


class PolicyRepository(Protocol):
    def add(self, policy: InsurancePolicy) -> None:
        ...

    def get(self, policy_id: str) -> InsurancePolicy | None:
        ...

    def list_active_for_station(self, station_id: str, on: date) -> list[InsurancePolicy]:
        ...


class InMemoryPolicyRepository:
    def __init__(self, policies: Iterable[InsurancePolicy] = ()):
        self._policies: dict[str, InsurancePolicy] = {}
        for policy in policies:
            self.add(policy)

    def add(self, policy: InsurancePolicy) -> None:
        self._policies[policy.policy_id] = policy

    def get(self, policy_id: str) -> InsurancePolicy | None:
        return self._policies.get(policy_id)

    def list_active_for_station(self, station_id: str, on: date) -> list[InsurancePolicy]:
        """Return policies on this station whose cover period includes ``on``."""
        return [
            p for p in self._policies.values()
            if p.station_id == station_id and p.is_active(on)
        ]
