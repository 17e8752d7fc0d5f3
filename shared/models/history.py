"""
Pydantic Models for Confirmation History Search and Analysis

Inputs mirror the parameters of the search_logs and analyze_logs tools
(camelCase on the wire). Outputs are plain structured values; turning them
into human-readable text is the server's job.

PAGINATION RULES:

  - page is 1-based; values below 1 are clamped to 1
  - page_size defaults to 10 and is clamped to [1, 100]
  - a page past the last one is empty, not an error
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from .elicitation import CamelModel, ConfirmationType
from .records import ConfirmationRecord, ensure_utc

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class GroupBy(str, Enum):
    """Key selectors available to analyze_logs."""

    CONFIRMATION_TYPE = "confirmationType"
    SUCCESS = "success"
    HOUR = "hour"
    DAY = "day"


class DateRange(CamelModel):
    """Inclusive timestamp bounds; either side may be open."""

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None

    def contains(self, moment: datetime) -> bool:
        if self.start_date is not None and moment < self.start_date:
            return False
        if self.end_date is not None and moment > self.end_date:
            return False
        return True


class LogSearchParams(DateRange):
    """Filter and pagination parameters for a history search. All filters are ANDed."""

    keyword: Optional[str] = None
    confirmation_type: Optional[ConfirmationType] = None
    success: Optional[bool] = None
    timed_out: Optional[bool] = None
    min_response_time: Optional[float] = None
    max_response_time: Optional[float] = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @field_validator("page")
    @classmethod
    def _clamp_page(cls, value: int) -> int:
        return max(1, value)

    @field_validator("page_size")
    @classmethod
    def _clamp_page_size(cls, value: int) -> int:
        return min(max(1, value), MAX_PAGE_SIZE)


class LogSearchResult(CamelModel):
    """One page of matching records, most recent first."""

    entries: List[ConfirmationRecord] = Field(default_factory=list)
    total_count: int = 0
    current_page: int = 1
    total_pages: int = 0
    page_size: int = DEFAULT_PAGE_SIZE


class LogStats(CamelModel):
    """Summary statistics over a set of records. All zero for an empty set."""

    total_entries: int = 0
    successful_entries: int = 0
    failed_entries: int = 0
    timed_out_entries: int = 0
    avg_response_time_ms: float = 0.0
    min_response_time_ms: int = 0
    max_response_time_ms: int = 0

    def percentage(self, count: int) -> float:
        """Share of total_entries, rounded to one decimal place."""
        if self.total_entries == 0:
            return 0.0
        return round(count / self.total_entries * 100, 1)


class GroupStats(CamelModel):
    """Breakdown for one group of records."""

    key: str
    count: int
    success_rate: float = Field(description="Percentage, one decimal place.")
    avg_response_time_ms: float


class LogAnalysis(CamelModel):
    """Complete result of analyze_logs."""

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    group_by: GroupBy = GroupBy.CONFIRMATION_TYPE
    stats: LogStats = Field(default_factory=LogStats)
    groups: List[GroupStats] = Field(default_factory=list)
