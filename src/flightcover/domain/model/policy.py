"""Policy records cached locally and the ledger-side views they are checked against."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Final

from .enums import PolicyStatus

UNKNOWN: Final[str] = "unknown"

_RECORD_KEYS: Final[dict[str, str]] = {
    "policy_id": "policyId",
    "flight_number": "flightNumber",
    "airline": "airline",
    "departure_time": "departureTime",
    "coverage_amount": "coverageAmount",
    "premium": "premium",
    "status": "status",
    "created_at": "createdAt",
}


def utcnow() -> datetime:
    return datetime.now(UTC)


def isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True, kw_only=True)
class PolicyRecord:
    """A policy the user believes they own, as kept in the local cache."""

    policy_id: str
    flight_number: str = UNKNOWN
    airline: str = UNKNOWN
    departure_time: str = UNKNOWN
    coverage_amount: str = UNKNOWN
    premium: str = UNKNOWN
    status: PolicyStatus = PolicyStatus.ACTIVE
    created_at: str = UNKNOWN

    @classmethod
    def placeholder(cls, policy_id: str, *, created_at: datetime | None = None) -> PolicyRecord:
        """Record for an identifier whose metadata is not known locally."""

        return cls(policy_id=policy_id, created_at=isoformat(created_at or utcnow()))

    @property
    def is_placeholder(self) -> bool:
        return self.flight_number == UNKNOWN and self.airline == UNKNOWN

    def with_status(self, status: PolicyStatus) -> PolicyRecord:
        return replace(self, status=status)

    def to_payload(self) -> dict[str, str]:
        return {
            _RECORD_KEYS[name]: str(getattr(self, name))
            for name in _RECORD_KEYS
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> PolicyRecord:
        """Parse the persisted camelCase shape; raises ``ValueError`` when unusable."""

        policy_id = payload.get("policyId")
        if not isinstance(policy_id, str) or not policy_id:
            raise ValueError("Persisted policy record has no policyId")
        values: dict[str, str] = {}
        for name, key in _RECORD_KEYS.items():
            if name in {"policy_id", "status"}:
                continue
            raw = payload.get(key, UNKNOWN)
            values[name] = UNKNOWN if raw is None else str(raw)
        raw_status = payload.get("status", PolicyStatus.ACTIVE)
        try:
            status = PolicyStatus(str(raw_status))
        except ValueError as exc:
            raise ValueError(f"Unknown policy status {raw_status!r} for {policy_id}") from exc
        return cls(policy_id=policy_id, status=status, **values)


@dataclass(frozen=True, slots=True)
class PoolSnapshot:
    """Point-in-time read of the shared insurance pool. Never persisted."""

    pool_id: str
    member_ids: tuple[str, ...] = ()
    balance_mist: int = 0

    def __contains__(self, policy_id: object) -> bool:
        return policy_id in self.member_ids


@dataclass(frozen=True, slots=True)
class LedgerObject:
    """Result of reading one object from the ledger."""

    object_id: str
    exists: bool
    type_tag: str | None = None
    fields: Mapping[str, object] = field(default_factory=dict["str", "object"])
    missing_reason: str | None = None

    @classmethod
    def missing(cls, object_id: str, *, reason: str | None = None) -> LedgerObject:
        return cls(object_id=object_id, exists=False, missing_reason=reason)
