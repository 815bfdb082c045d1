"""Error taxonomy shared by the domain services and the adapters.

Ledger errors are advisory inside existence checks (they fold into ``False``)
but keep their concrete type so operators can tell a missing object from a
flaky transport in the logs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .reconciliation.resolve import Resolution


class FlightCoverError(RuntimeError):
    """Base class for every error raised by flightcover."""


class LedgerError(FlightCoverError):
    """Raised when a ledger read cannot produce an answer."""


class MalformedIdentifierError(LedgerError):
    """The identifier failed the structural check and never reached the ledger."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Malformed policy identifier: {identifier!r}")
        self.identifier = identifier


class ObjectNotFoundError(LedgerError):
    """The ledger holds no live object under the identifier."""

    def __init__(self, identifier: str, *, code: str | None = None) -> None:
        detail = f" ({code})" if code else ""
        super().__init__(f"Object {identifier} not found on ledger{detail}")
        self.identifier = identifier
        self.code = code


class TypeMismatchError(LedgerError):
    """The object exists but is not a policy."""

    def __init__(self, identifier: str, *, expected: str, actual: str | None) -> None:
        super().__init__(f"Object {identifier} has type {actual!r}, expected {expected!r}")
        self.identifier = identifier
        self.expected = expected
        self.actual = actual


class TransportFailureError(LedgerError):
    """The ledger could not be reached after the retry budget was exhausted."""


class LedgerResponseError(LedgerError):
    """The ledger answered with an error or an unexpected payload."""

    def __init__(self, message: str, *, code: int | str | None = None) -> None:
        super().__init__(message)
        self.code = code


class SubmissionError(FlightCoverError):
    """Raised when a ledger-mutating operation fails."""


class SubmissionRejectedError(SubmissionError):
    """The ledger rejected a signed transaction; ``str(exc)`` is the ledger's message."""

    def __init__(self, message: str, *, digest: str | None = None) -> None:
        super().__init__(message)
        self.digest = digest


class CacheCorruptError(FlightCoverError):
    """The persisted policy cache has an unrecognised shape."""


class ReconciliationInProgressError(FlightCoverError):
    """Another reconciliation pass is already running against the record store."""


class ReconciliationAbortedError(FlightCoverError):
    """The pass was abandoned before its plan was applied."""


class PolicyInputError(ValueError):
    """Invalid user input for policy creation or funding."""


class ClaimError(FlightCoverError):
    """Base class for claim-path failures; carries the resolver's verdict."""

    def __init__(self, message: str, *, resolution: Resolution) -> None:
        super().__init__(message)
        self.resolution = resolution


class ClaimRejectedError(ClaimError):
    """No valid policy identifier could be found for the claim."""


class ClaimNeedsConfirmationError(ClaimError):
    """The resolver recommends a different identifier than the one supplied."""


class ClaimSubmissionError(ClaimError):
    """The claim transaction failed; the message explains the chosen identifier."""
