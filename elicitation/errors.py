"""
Elicitation failure types.

Timeouts and transport failures are logged the same way (success: false)
but stay distinguishable here and through ConfirmationRecord.error_kind.
"""

from typing import List, Optional

from shared.models import ErrorKind


class ElicitationError(Exception):
    """Base class for elicitation failures surfaced to tool callers."""

    error_kind: Optional[ErrorKind] = None

    def __init__(self, cause: str, elapsed_ms: int = 0):
        super().__init__(f"Elicitation failed: {cause}")
        self.cause = cause
        self.elapsed_ms = elapsed_ms


class ElicitationTimeoutError(ElicitationError):
    """The client did not answer within the request's timeout."""

    error_kind = ErrorKind.TIMEOUT


class ElicitationTransportError(ElicitationError):
    """The channel call itself failed (disconnect, protocol error, ...)."""

    error_kind = ErrorKind.TRANSPORT


class UntrustedReplyError(ElicitationError):
    """An accepted reply did not match the requested schema."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__(f"client returned incomplete data: {'; '.join(self.problems)}")
