from __future__ import annotations

import asyncio

from flightcover.domain.ports.transactions import (
    CleanupCorruptedArgs,
    ExecutionResult,
    OperationName,
    ProcessClaimArgs,
)
from flightcover.domain.submission import ActionSubmitter

from tests.helpers.ledger import RecordingExecutor, policy_id


def test_empty_cleanup_is_a_no_op() -> None:
    executor = RecordingExecutor()

    digest = asyncio.run(ActionSubmitter(executor).submit_cleanup([]))

    assert digest is None
    assert executor.operations == []


def test_cleanup_is_submitted_as_one_sorted_batch() -> None:
    executor = RecordingExecutor(results=[ExecutionResult(digest="cleanup-digest")])
    ids = [policy_id(3), policy_id(1), policy_id(3), policy_id(2)]

    digest = asyncio.run(ActionSubmitter(executor).submit_cleanup(ids))

    assert digest == "cleanup-digest"
    assert len(executor.operations) == 1
    operation = executor.operations[0]
    assert operation.name is OperationName.CLEANUP_CORRUPTED
    assert operation.arguments == CleanupCorruptedArgs(
        policy_ids=(policy_id(1), policy_id(2), policy_id(3))
    )


def test_process_claim_passes_policy_and_delay() -> None:
    executor = RecordingExecutor()

    asyncio.run(ActionSubmitter(executor).process_claim(policy_id(1), 1500))

    assert executor.operations[0].arguments == ProcessClaimArgs(
        policy_id=policy_id(1), delay_minutes=1500
    )
