"""
MCP Confirm Shared Pydantic Models

Models are organized by purpose:

  - elicitation.py: requests, schemas and outcomes of a single elicitation
  - records.py: the append-only confirmation history record
  - history.py: search/analysis parameters and results

Usage:
    from shared.models import (
        ElicitationRequest, ElicitationOutcome,
        ConfirmationRecord, LogSearchParams,
    )
"""

# Elicitation exchange
from .elicitation import (
    STORED_RECORD_CONTEXT,
    CamelModel,
    ConfirmationType,
    ElicitationAction,
    ElicitationOutcome,
    ElicitationRequest,
    ElicitationSchema,
)

# Confirmation history
from .records import (
    TIMEOUT_MARKER,
    ConfirmationRecord,
    ErrorKind,
    ensure_utc,
)

# Search and analytics
from .history import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    DateRange,
    GroupBy,
    GroupStats,
    LogAnalysis,
    LogSearchParams,
    LogSearchResult,
    LogStats,
)

__all__ = [
    # Elicitation
    "STORED_RECORD_CONTEXT",
    "CamelModel",
    "ConfirmationType",
    "ElicitationAction",
    "ElicitationOutcome",
    "ElicitationRequest",
    "ElicitationSchema",
    # Records
    "TIMEOUT_MARKER",
    "ConfirmationRecord",
    "ErrorKind",
    "ensure_utc",
    # History
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "DateRange",
    "GroupBy",
    "GroupStats",
    "LogAnalysis",
    "LogSearchParams",
    "LogSearchResult",
    "LogStats",
]
