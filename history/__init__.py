"""
MCP Confirm Confirmation History

Append-only confirmation log plus read-side projections:

  - writer.py: best-effort, serialized appends of ConfirmationRecord lines
  - reader.py: whole-log loading with a fail-fast parse policy
  - search.py: filter / sort / paginate (pure functions)
  - analytics.py: statistics and group-by breakdowns (pure functions)
  - service.py: ConfirmationHistory, the projections bound to a log file
"""

from .analytics import (
    GROUP_KEYS,
    analyze_records,
    calculate_stats,
    filter_by_date_range,
    group_records,
    summarize_groups,
)
from .reader import LogFormatError, load_records, parse_records
from .search import (
    build_predicates,
    filter_records,
    paginate,
    search_records,
    searchable_text,
    sort_records,
)
from .service import ConfirmationHistory
from .writer import ConfirmationLogWriter

__all__ = [
    "ConfirmationHistory",
    "ConfirmationLogWriter",
    "GROUP_KEYS",
    "LogFormatError",
    "analyze_records",
    "build_predicates",
    "calculate_stats",
    "filter_by_date_range",
    "filter_records",
    "group_records",
    "load_records",
    "paginate",
    "parse_records",
    "search_records",
    "searchable_text",
    "sort_records",
    "summarize_groups",
]
