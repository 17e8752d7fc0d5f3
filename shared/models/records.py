"""
Pydantic Models for the Confirmation History Log

One ConfirmationRecord is written per completed elicitation transaction,
whether the client answered or the exchange failed. Records are immutable
once created and are stored one JSON object per line.

AUDIT PRINCIPLES:

  - success means "the channel call completed", not "the human accepted"
  - a failed exchange is always recorded as a cancel with no content
  - error is present if and only if success is false
  - error_kind tags the failure cause; older logs only carry the error text
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .elicitation import (
    CamelModel,
    ConfirmationType,
    ElicitationOutcome,
    ElicitationRequest,
)

# Marker carried by timeout error messages. Records written before error_kind
# existed are classified with it.
TIMEOUT_MARKER = "timed out"


class ErrorKind(str, Enum):
    """Why an elicitation exchange failed."""

    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    CANCELLED = "cancelled"


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so all comparisons are well defined."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ConfirmationRecord(CamelModel):
    """A single completed elicitation transaction."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    timestamp: datetime = Field(description="When the exchange resolved or failed.")
    confirmation_type: ConfirmationType
    request: ElicitationRequest
    response: ElicitationOutcome
    response_time_ms: int = Field(ge=0, description="Elapsed wall-clock milliseconds.")
    success: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @field_validator("timestamp")
    @classmethod
    def _aware_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _error_iff_failed(self) -> ConfirmationRecord:
        if self.success and self.error is not None:
            raise ValueError("a successful record cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("a failed record must carry an error")
        return self

    @property
    def timed_out(self) -> bool:
        """True when the exchange failed because the client never answered in time."""
        if self.error_kind is not None:
            return self.error_kind == ErrorKind.TIMEOUT
        return self.error is not None and TIMEOUT_MARKER in self.error.lower()

    def to_log_line(self) -> str:
        """Serialise as one newline-terminated JSON object."""
        return self.model_dump_json(by_alias=True, exclude_none=True) + "\n"
