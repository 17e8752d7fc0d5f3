"""
Confirmation History Analytics

Summary statistics and group-by breakdowns over confirmation records.

Analysis applies only an inclusive date range (not the full search filter
set), then computes overall statistics and per-group statistics. Groups are
only created for keys that occur, so no group ever divides by zero.

GROUP KEYS:

  - confirmationType: the recorded type value
  - success: "Success" / "Failed"
  - hour: "HH:00" of the timestamp in UTC (the offset the log is written in)
  - day: "YYYY-MM-DD" UTC calendar date
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from shared.models import (
    ConfirmationRecord,
    DateRange,
    GroupBy,
    GroupStats,
    LogAnalysis,
    LogStats,
)

GroupKey = Callable[[ConfirmationRecord], str]


def _utc(record: ConfirmationRecord) -> datetime:
    return record.timestamp.astimezone(timezone.utc)


GROUP_KEYS: Dict[GroupBy, GroupKey] = {
    GroupBy.CONFIRMATION_TYPE: lambda r: r.confirmation_type.value,
    GroupBy.SUCCESS: lambda r: "Success" if r.success else "Failed",
    GroupBy.HOUR: lambda r: f"{_utc(r).hour:02d}:00",
    GroupBy.DAY: lambda r: _utc(r).date().isoformat(),
}


def filter_by_date_range(
    records: Iterable[ConfirmationRecord],
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[ConfirmationRecord]:
    window = DateRange(start_date=start_date, end_date=end_date)
    return [r for r in records if window.contains(r.timestamp)]


def calculate_stats(records: Sequence[ConfirmationRecord]) -> LogStats:
    """Overall statistics; every field is zero for an empty sequence."""
    total = len(records)
    if total == 0:
        return LogStats()

    successful = sum(1 for r in records if r.success)
    times = [r.response_time_ms for r in records]

    return LogStats(
        total_entries=total,
        successful_entries=successful,
        failed_entries=total - successful,
        timed_out_entries=sum(1 for r in records if r.timed_out),
        avg_response_time_ms=sum(times) / total,
        min_response_time_ms=min(times),
        max_response_time_ms=max(times),
    )


def group_records(
    records: Iterable[ConfirmationRecord],
    group_by: GroupBy,
) -> Dict[str, List[ConfirmationRecord]]:
    key_of = GROUP_KEYS[group_by]
    groups: Dict[str, List[ConfirmationRecord]] = defaultdict(list)
    for record in records:
        groups[key_of(record)].append(record)
    return dict(groups)


def summarize_groups(groups: Dict[str, List[ConfirmationRecord]]) -> List[GroupStats]:
    """Per-group count, success rate and average response time, sorted by key."""
    summaries = []
    for key in sorted(groups):
        members = groups[key]
        count = len(members)
        if count == 0:
            continue
        successful = sum(1 for r in members if r.success)
        summaries.append(GroupStats(
            key=key,
            count=count,
            success_rate=round(successful / count * 100, 1),
            avg_response_time_ms=sum(r.response_time_ms for r in members) / count,
        ))
    return summaries


def analyze_records(
    records: Iterable[ConfirmationRecord],
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    group_by: GroupBy = GroupBy.CONFIRMATION_TYPE,
) -> LogAnalysis:
    """Date-range filter, then overall and grouped statistics."""
    selected = filter_by_date_range(records, start_date, end_date)

    return LogAnalysis(
        start_date=start_date,
        end_date=end_date,
        group_by=group_by,
        stats=calculate_stats(selected),
        groups=summarize_groups(group_records(selected, group_by)),
    )
