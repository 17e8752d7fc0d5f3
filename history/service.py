"""
Confirmation History Service

Binds the pure search and analytics projections to a log file. The log is
re-read on every call so results always reflect records appended since.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from shared.models import (
    ConfirmationRecord,
    GroupBy,
    LogAnalysis,
    LogSearchParams,
    LogSearchResult,
)

from .analytics import analyze_records
from .reader import load_records
from .search import search_records

logger = logging.getLogger(__name__)


class ConfirmationHistory:
    """Read-only view over the confirmation history log."""

    def __init__(self, log_path: Union[str, Path]):
        self.log_path = Path(log_path)

    def records(self) -> List[ConfirmationRecord]:
        return load_records(self.log_path)

    def search(self, params: LogSearchParams) -> LogSearchResult:
        result = search_records(self.records(), params)
        logger.debug(
            f"Search matched {result.total_count} records "
            f"(page {result.current_page}/{result.total_pages})"
        )
        return result

    def analyze(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        group_by: GroupBy = GroupBy.CONFIRMATION_TYPE,
    ) -> LogAnalysis:
        return analyze_records(self.records(), start_date, end_date, group_by)
