"""
Elicitation Protocol Engine

Sends one elicitation request over a channel, bounds it by the request's
timeout, and records the completed transaction in the confirmation log.

TRANSACTION FLOW:

  1. Classify the request by its message (confirmation, rating, ...)
  2. Call the channel, waiting at most request.timeout_ms
  3. Success: log {success: true, response: <outcome>} and return the
     outcome unchanged, whatever the human chose
  4. Timeout or transport failure: log {success: false, response: cancel,
     error: <cause>} and raise ElicitationError; an outcome is never
     fabricated for a failed exchange
  5. Cancellation of the calling task: log {success: false, response: cancel,
     error: "Request cancelled"} and re-raise CancelledError

Exactly one record is written per send(). Retries are left to callers.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from history.writer import ConfirmationLogWriter
from shared.models import (
    ConfirmationRecord,
    ConfirmationType,
    ElicitationAction,
    ElicitationOutcome,
    ElicitationRequest,
    ErrorKind,
)

from .channel import ElicitationChannel
from .classifier import classify_message
from .errors import ElicitationError, ElicitationTimeoutError, ElicitationTransportError

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Request cancelled"


class ElicitationEngine:
    """Request/response protocol engine for a single channel."""

    def __init__(
        self,
        channel: ElicitationChannel,
        log_writer: ConfirmationLogWriter,
        classifier: Callable[[str], ConfirmationType] = classify_message,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.channel = channel
        self.log_writer = log_writer
        self._classify = classifier
        self._clock = clock

    def _elapsed_ms(self, started: float) -> int:
        return max(0, int(round((self._clock() - started) * 1000)))


    def _record(
        self,
        request: ElicitationRequest,
        confirmation_type: ConfirmationType,
        response: ElicitationOutcome,
        elapsed_ms: int,
        error: Optional[str] = None,
        error_kind: Optional[ErrorKind] = None,
    ) -> None:
        record = ConfirmationRecord(
            timestamp=datetime.now(timezone.utc),
            confirmation_type=confirmation_type,
            request=request,
            response=response,
            response_time_ms=elapsed_ms,
            success=error is None,
            error=error,
            error_kind=error_kind,
        )
        self.log_writer.append(record)

    async def send(self, request: ElicitationRequest) -> ElicitationOutcome:
        """Run one elicitation transaction. Raises ElicitationError on failure."""
        confirmation_type = self._classify(request.message)
        logger.debug(
            f"Sending {confirmation_type.value} elicitation "
            f"(timeout {request.timeout_ms}ms): {request.message[:80]!r}"
        )

        started = self._clock()
        try:
            outcome = await asyncio.wait_for(
                self.channel.call(request),
                timeout=request.timeout_ms / 1000,
            )
        except asyncio.CancelledError:
            self._fail(
                request,
                confirmation_type,
                CANCELLED_MESSAGE,
                ErrorKind.CANCELLED,
                self._elapsed_ms(started),
            )
            raise
        except (asyncio.TimeoutError, TimeoutError) as e:
            failure: ElicitationError = ElicitationTimeoutError(
                f"Request timed out after {request.timeout_ms}ms",
                elapsed_ms=self._elapsed_ms(started),
            )
            self._fail_with(request, confirmation_type, failure)
            raise failure from e
        except Exception as e:
            failure = ElicitationTransportError(
                str(e) or type(e).__name__,
                elapsed_ms=self._elapsed_ms(started),
            )
            self._fail_with(request, confirmation_type, failure)
            raise failure from e

        elapsed_ms = self._elapsed_ms(started)
        logger.debug(f"Elicitation resolved with {outcome.action.value} after {elapsed_ms}ms")
        self._record(request, confirmation_type, outcome, elapsed_ms)
        return outcome

    def _fail_with(
        self,
        request: ElicitationRequest,
        confirmation_type: ConfirmationType,
        failure: ElicitationError,
    ) -> None:
        self._fail(request, confirmation_type, failure.cause, failure.error_kind, failure.elapsed_ms)

    def _fail(
        self,
        request: ElicitationRequest,
        confirmation_type: ConfirmationType,
        cause: str,
        error_kind: Optional[ErrorKind],
        elapsed_ms: int,
    ) -> None:
        logger.debug(f"Elicitation failed after {elapsed_ms}ms: {cause}")
        self._record(
            request,
            confirmation_type,
            ElicitationOutcome(action=ElicitationAction.CANCEL),
            elapsed_ms,
            error=cause,
            error_kind=error_kind,
        )
