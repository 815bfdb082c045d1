"""Locally persisted cache of the policies the user believes they own.

The cache lives in a single slot as a JSON array. Two shapes are accepted:

- current: an array of record objects (``{"policyId": ..., "status": ...}``)
- legacy: an array of bare identifier strings, written by early clients

Legacy entries are upgraded to placeholder records on load and the upgraded
array is written back before ``load`` returns, so the migration happens once.
Legacy strings that are not well-formed policy ids are dropped during the
upgrade; a placeholder built from them could not be read back.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, cast

from flightcover.domain.errors import CacheCorruptError
from flightcover.domain.model import PolicyRecord, is_well_formed_policy_id, utcnow

if TYPE_CHECKING:
    from flightcover.domain.model import PolicyStatus
    from flightcover.domain.ports.cache import CacheSlot

log = getLogger(__name__)


class RecordStore:
    """The only component allowed to mutate the local policy cache."""

    def __init__(
        self,
        slot: CacheSlot,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._slot = slot
        self._clock = clock

    def load(self) -> list[PolicyRecord]:
        raw = self._slot.read()
        if raw is None or not raw.strip():
            return []
        try:
            records, migrated, dropped = self._decode(raw)
        except CacheCorruptError:
            log.exception("Policy cache slot %r is corrupt; treating it as empty", self._slot.name)
            return []
        if migrated:
            log.info(
                "Upgraded %s legacy policy id(s) in slot %r to records",
                migrated,
                self._slot.name,
            )
        if migrated or dropped:
            self.save(records)
        return records

    def save(self, records: Iterable[PolicyRecord]) -> None:
        unique: dict[str, PolicyRecord] = {}
        for record in records:
            unique[record.policy_id] = record
        payload = json.dumps([record.to_payload() for record in unique.values()])
        self._slot.write(payload)

    def get(self, policy_id: str) -> PolicyRecord | None:
        for record in self.load():
            if record.policy_id == policy_id:
                return record
        return None

    def add(self, record: PolicyRecord) -> None:
        """Insert or replace ``record`` (used when a creation is confirmed)."""

        records = [existing for existing in self.load() if existing.policy_id != record.policy_id]
        records.append(record)
        self.save(records)

    def upsert_status(self, policy_id: str, status: PolicyStatus) -> None:
        """Change the status of an existing record; absent ids are left alone."""

        records = self.load()
        changed = False
        for index, record in enumerate(records):
            if record.policy_id == policy_id:
                records[index] = record.with_status(status)
                changed = True
        if not changed:
            log.debug("Ignoring status %s for unknown policy %s", status, policy_id)
            return
        self.save(records)

    def _decode(self, raw: str) -> tuple[list[PolicyRecord], int, int]:
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CacheCorruptError(f"Policy cache is not valid JSON: {exc}") from exc
        if not isinstance(document, list):
            raise CacheCorruptError(
                f"Policy cache must be a JSON array, got {type(document).__name__}"
            )

        records: dict[str, PolicyRecord] = {}
        migrated = 0
        dropped = 0
        for entry in cast("list[object]", document):
            if isinstance(entry, str):
                if not is_well_formed_policy_id(entry):
                    log.warning("Dropping malformed legacy policy id %r from the cache", entry)
                    dropped += 1
                    continue
                if entry in records:
                    continue
                records[entry] = PolicyRecord.placeholder(entry, created_at=self._clock())
                migrated += 1
            elif isinstance(entry, Mapping):
                try:
                    record = PolicyRecord.from_payload(cast("Mapping[str, object]", entry))
                except ValueError as exc:
                    raise CacheCorruptError(str(exc)) from exc
                records[record.policy_id] = record
            else:
                raise CacheCorruptError(
                    f"Unrecognised policy cache entry of type {type(entry).__name__}"
                )
        return list(records.values()), migrated, dropped
