"""
Confirmation History Search

Pure read-side projections over a loaded record sequence: filter, sort and
paginate. Nothing here touches the filesystem, so every step can be tested
on in-memory records.

FILTERS (all optional, combined with AND):

  - keyword: case-insensitive substring of message + serialized response
  - confirmation_type: exact match
  - start_date / end_date: inclusive timestamp bounds
  - success: exact match
  - timed_out: derived from the record's failure cause
  - min_response_time / max_response_time: inclusive bounds

ORDERING:

  Most recent first. The sort is stable, so records with equal timestamps
  keep their log (completion) order.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable, List, Sequence

from shared.models import ConfirmationRecord, LogSearchParams, LogSearchResult

RecordPredicate = Callable[[ConfirmationRecord], bool]


def searchable_text(record: ConfirmationRecord) -> str:
    """Lowercased text the keyword filter matches against."""
    response = record.response.model_dump_json(by_alias=True, exclude_none=True)
    return f"{record.request.message} {response}".lower()


def build_predicates(params: LogSearchParams) -> List[RecordPredicate]:
    """One predicate per supplied filter; unsupplied filters add nothing."""
    predicates: List[RecordPredicate] = []

    if params.keyword:
        keyword = params.keyword.lower()
        predicates.append(lambda r: keyword in searchable_text(r))

    if params.confirmation_type is not None:
        wanted_type = params.confirmation_type
        predicates.append(lambda r: r.confirmation_type == wanted_type)

    if params.start_date is not None or params.end_date is not None:
        predicates.append(lambda r: params.contains(r.timestamp))

    if params.success is not None:
        wanted_success = params.success
        predicates.append(lambda r: r.success == wanted_success)

    if params.timed_out is not None:
        wanted_timeout = params.timed_out
        predicates.append(lambda r: r.timed_out == wanted_timeout)

    if params.min_response_time is not None:
        minimum = params.min_response_time
        predicates.append(lambda r: r.response_time_ms >= minimum)

    if params.max_response_time is not None:
        maximum = params.max_response_time
        predicates.append(lambda r: r.response_time_ms <= maximum)

    return predicates


def filter_records(
    records: Iterable[ConfirmationRecord],
    params: LogSearchParams,
) -> List[ConfirmationRecord]:
    predicates = build_predicates(params)
    return [r for r in records if all(p(r) for p in predicates)]


def sort_records(records: Iterable[ConfirmationRecord]) -> List[ConfirmationRecord]:
    """Most recent first; ties keep their original order."""
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


def paginate(
    records: Sequence[ConfirmationRecord],
    page: int,
    page_size: int,
) -> LogSearchResult:
    """Slice one page out of an already filtered and sorted sequence."""
    total_count = len(records)
    total_pages = math.ceil(total_count / page_size)
    start = (page - 1) * page_size

    return LogSearchResult(
        entries=list(records[start:start + page_size]),
        total_count=total_count,
        current_page=page,
        total_pages=total_pages,
        page_size=page_size,
    )


def search_records(
    records: Iterable[ConfirmationRecord],
    params: LogSearchParams,
) -> LogSearchResult:
    """Filter, sort and paginate in one step."""
    matching = sort_records(filter_records(records, params))
    return paginate(matching, params.page, params.page_size)
