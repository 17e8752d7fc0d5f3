"""
MCP Confirm Test Configuration

Shared pytest fixtures and configuration for all tests.
"""

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from history import ConfirmationHistory, ConfirmationLogWriter  # noqa: E402
from shared.models import (  # noqa: E402
    ConfirmationRecord,
    ConfirmationType,
    ElicitationAction,
    ElicitationOutcome,
    ElicitationRequest,
    ElicitationSchema,
    ErrorKind,
)


# =============================================================================
# Stub channels
# =============================================================================

class StaticChannel:
    """Answers every request with the same outcome and remembers the requests."""

    def __init__(self, outcome: ElicitationOutcome, delay: float = 0.0):
        self.outcome = outcome
        self.delay = delay
        self.requests: List[ElicitationRequest] = []

    async def call(self, request: ElicitationRequest) -> ElicitationOutcome:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.outcome


class FailingChannel:
    """Raises the given exception for every request."""

    def __init__(self, error: BaseException):
        self.error = error

    async def call(self, request: ElicitationRequest) -> ElicitationOutcome:
        raise self.error


class ScriptedChannel:
    """Answers each message after its own delay with its own outcome."""

    def __init__(self, script: Dict[str, tuple]):
        self.script = script

    async def call(self, request: ElicitationRequest) -> ElicitationOutcome:
        delay, outcome = self.script[request.message]
        await asyncio.sleep(delay)
        return outcome


def accept(**content) -> ElicitationOutcome:
    return ElicitationOutcome(action=ElicitationAction.ACCEPT, content=content)


# =============================================================================
# Fixtures: Log files
# =============================================================================

@pytest.fixture
def log_path(tmp_path):
    """Log path inside a directory that does not exist yet."""
    return tmp_path / ".mcp-data" / "confirmation_history.log"


@pytest.fixture
def log_writer(log_path):
    return ConfirmationLogWriter(log_path)


@pytest.fixture
def history(log_path):
    return ConfirmationHistory(log_path)


# =============================================================================
# Fixtures: Test Data
# =============================================================================

@pytest.fixture
def make_record():
    """Factory for ConfirmationRecords with sensible defaults."""

    def _make(
        timestamp: str = "2025-08-04T10:15:00Z",
        confirmation_type: ConfirmationType = ConfirmationType.CONFIRMATION,
        message: str = "Please confirm this action",
        action: ElicitationAction = ElicitationAction.ACCEPT,
        content: Optional[dict] = None,
        response_time_ms: int = 1000,
        success: bool = True,
        error: Optional[str] = None,
        error_kind: Optional[ErrorKind] = None,
    ) -> ConfirmationRecord:
        if action == ElicitationAction.ACCEPT and content is None:
            content = {"confirmed": True}
        return ConfirmationRecord(
            timestamp=datetime.fromisoformat(timestamp.replace("Z", "+00:00")),
            confirmation_type=confirmation_type,
            request=ElicitationRequest(
                message=message,
                requested_schema=ElicitationSchema(
                    properties={"confirmed": {"type": "boolean"}},
                    required=["confirmed"],
                ),
                timeout_ms=180000,
            ),
            response=ElicitationOutcome(action=action, content=content),
            response_time_ms=response_time_ms,
            success=success,
            error=error,
            error_kind=error_kind,
        )

    return _make


@pytest.fixture
def sample_records(make_record):
    """A small mixed history spanning two days."""
    return [
        make_record(
            timestamp="2025-08-04T10:15:00Z",
            confirmation_type=ConfirmationType.CONFIRMATION,
            message="Please confirm this action: delete the build cache",
            response_time_ms=1200,
        ),
        make_record(
            timestamp="2025-08-04T10:45:00Z",
            confirmation_type=ConfirmationType.RATING,
            message="Please rate this response",
            content={"rating": 9},
            response_time_ms=800,
        ),
        make_record(
            timestamp="2025-08-04T14:05:00Z",
            confirmation_type=ConfirmationType.RATING,
            message="Please rate my help with your task",
            action=ElicitationAction.CANCEL,
            response_time_ms=20000,
            success=False,
            error="Request timed out after 20000ms",
            error_kind=ErrorKind.TIMEOUT,
        ),
        make_record(
            timestamp="2025-08-05T09:00:00Z",
            confirmation_type=ConfirmationType.CLARIFICATION,
            message="I need to clarify your intent",
            action=ElicitationAction.DECLINE,
            response_time_ms=3000,
        ),
        make_record(
            timestamp="2025-08-05T18:30:00Z",
            confirmation_type=ConfirmationType.CUSTOM,
            message="Pick a deployment window",
            action=ElicitationAction.CANCEL,
            response_time_ms=50,
            success=False,
            error="Connection closed",
            error_kind=ErrorKind.TRANSPORT,
        ),
    ]


@pytest.fixture
def written_history(log_writer, history, sample_records):
    """ConfirmationHistory backed by a log containing sample_records."""
    for record in sample_records:
        assert log_writer.append(record)
    return history


def utc(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(timezone.utc)
