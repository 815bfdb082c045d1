"""Translate Sui JSON-RPC payloads into domain values."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from flightcover.domain.errors import LedgerResponseError, SubmissionRejectedError
from flightcover.domain.model import ClaimStatus, LedgerObject, PoolSnapshot
from flightcover.domain.ports.transactions import ClaimOutcome, ExecutionResult

if TYPE_CHECKING:
    from .schema import ObjectResponse, TransactionBlockResponse


def parse_ledger_object(object_id: str, response: ObjectResponse) -> LedgerObject:
    if response.error is not None or response.data is None:
        reason = response.error.code if response.error is not None else "missing data"
        return LedgerObject.missing(object_id, reason=reason)
    data = response.data
    type_tag = data.type or (data.content.type if data.content is not None else None)
    fields = data.content.fields if data.content is not None else {}
    return LedgerObject(object_id=data.object_id, exists=True, type_tag=type_tag, fields=fields)


def parse_pool(
    pool_id: str,
    response: ObjectResponse,
    *,
    members_field: str,
    balance_field: str,
) -> PoolSnapshot:
    obj = parse_ledger_object(pool_id, response)
    if not obj.exists:
        raise LedgerResponseError(
            f"Insurance pool {pool_id} not found ({obj.missing_reason})",
            code=obj.missing_reason,
        )
    if members_field not in obj.fields:
        raise LedgerResponseError(f"Pool {pool_id} has no field {members_field!r}")
    members = _parse_members(obj.fields[members_field], pool_id=pool_id)
    balance = _parse_balance(obj.fields.get(balance_field, 0), pool_id=pool_id)
    return PoolSnapshot(pool_id=pool_id, member_ids=members, balance_mist=balance)


def _parse_members(raw: object, *, pool_id: str) -> tuple[str, ...]:
    if not isinstance(raw, list):
        raise LedgerResponseError(f"Pool {pool_id} member list is not an array")
    members: list[str] = []
    for entry in cast("list[object]", raw):
        if isinstance(entry, str):
            members.append(entry)
        elif isinstance(entry, Mapping) and isinstance(entry.get("id"), str):
            members.append(cast("str", entry["id"]))
        else:
            raise LedgerResponseError(f"Pool {pool_id} has an unreadable member entry: {entry!r}")
    return tuple(members)


def _parse_balance(raw: object, *, pool_id: str) -> int:
    # Balance<SUI> renders as a u64 string, older nodes nest it as {fields: {value}}
    value = raw
    if isinstance(value, Mapping):
        mapping = cast("Mapping[str, object]", value)
        inner = mapping.get("fields")
        if isinstance(inner, Mapping):
            mapping = cast("Mapping[str, object]", inner)
        value = mapping.get("value")
    try:
        balance = int(cast("str | int", value))
    except (TypeError, ValueError) as exc:
        raise LedgerResponseError(f"Pool {pool_id} balance is unreadable: {raw!r}") from exc
    if balance < 0:
        raise LedgerResponseError(f"Pool {pool_id} reports a negative balance")
    return balance


def parse_execution(
    response: TransactionBlockResponse,
    *,
    policy_created_event: str,
    claim_processed_event: str,
) -> ExecutionResult:
    effects = response.effects
    if effects is not None and effects.status.status == "failure":
        raise SubmissionRejectedError(
            effects.status.error or "Transaction failed without an error message",
            digest=response.digest,
        )

    created_policy_id: str | None = None
    claim: ClaimOutcome | None = None
    for event in response.events:
        payload = event.parsed_json or {}
        if event.type == policy_created_event:
            policy_id = payload.get("policy_id")
            if isinstance(policy_id, str) and policy_id:
                created_policy_id = policy_id
        elif event.type == claim_processed_event:
            claim = _parse_claim(payload)
    return ExecutionResult(digest=response.digest, created_policy_id=created_policy_id, claim=claim)


def _parse_claim(payload: Mapping[str, object]) -> ClaimOutcome:
    raw_status = str(payload.get("status", "")).upper()
    status = ClaimStatus.APPROVED if raw_status == ClaimStatus.APPROVED else ClaimStatus.REJECTED
    try:
        amount = int(cast("str | int", payload.get("amount", 0)))
    except (TypeError, ValueError):
        amount = 0
    return ClaimOutcome(status=status, payout_mist=amount if status is ClaimStatus.APPROVED else 0)
