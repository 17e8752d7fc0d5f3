"""
Human-readable summaries for the history tools.

search_logs and analyze_logs return text meant to be read by the agent and
relayed to the user, not raw records. Long messages are cut to a fixed
preview length and every search result ends with the same pagination footer.
"""

from datetime import datetime, timezone
from typing import Optional

from shared.models import ConfirmationRecord, GroupBy, LogAnalysis, LogSearchResult

MESSAGE_PREVIEW_LENGTH = 100

# Time buckets are computed in UTC
UTC_GROUPINGS = (GroupBy.HOUR, GroupBy.DAY)


def preview(message: str, limit: int = MESSAGE_PREVIEW_LENGTH) -> str:
    if len(message) <= limit:
        return message
    return message[:limit] + "..."


def _display_time(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_entry(record: ConfirmationRecord, position: int) -> str:
    status = "✅ Success" if record.success else "❌ Failed"
    lines = [
        f"**{position}.** {_display_time(record.timestamp)} [{record.confirmation_type.value}]",
        f"{status} - {record.response.action.value} ({record.response_time_ms}ms)",
        f"Message: {preview(record.request.message)}",
    ]
    if record.error:
        lines.append(f"Error: {record.error}")
    return "\n".join(lines)


def format_search_result(result: LogSearchResult) -> str:
    offset = (result.current_page - 1) * result.page_size
    if result.entries:
        entries_text = "\n\n".join(
            format_entry(record, offset + i)
            for i, record in enumerate(result.entries, start=1)
        )
    else:
        entries_text = "No matching confirmation records."

    footer = (
        "📊 **Search Results**\n"
        f"Total: {result.total_count} entries\n"
        f"Page: {result.current_page}/{result.total_pages}\n"
        f"Showing: {len(result.entries)} entries"
    )
    return f"🔍 **Confirmation Log Search Results**\n\n{entries_text}\n\n{footer}"


def _period_bound(moment: Optional[datetime], fallback: str) -> str:
    return moment.isoformat() if moment is not None else fallback


def format_analysis(analysis: LogAnalysis) -> str:
    stats = analysis.stats
    heading = analysis.group_by.value
    if analysis.group_by in UTC_GROUPINGS:
        heading += " (UTC)"

    if analysis.groups:
        breakdown = "\n".join(
            f"**{group.key}**: {group.count} entries "
            f"({group.success_rate:.1f}% success, avg: {group.avg_response_time_ms:.0f}ms)"
            for group in analysis.groups
        )
    else:
        breakdown = "No entries in this period."

    return (
        "📊 **Confirmation Log Analysis**\n\n"
        f"**Period**: {_period_bound(analysis.start_date, 'All time')} "
        f"to {_period_bound(analysis.end_date, 'Present')}\n\n"
        "**Overall Statistics**:\n"
        f"- Total confirmations: {stats.total_entries}\n"
        f"- Successful: {stats.successful_entries} ({stats.percentage(stats.successful_entries)}%)\n"
        f"- Failed: {stats.failed_entries} ({stats.percentage(stats.failed_entries)}%)\n"
        f"- Timed out: {stats.timed_out_entries} ({stats.percentage(stats.timed_out_entries)}%)\n\n"
        "**Response Times**:\n"
        f"- Average: {stats.avg_response_time_ms:.0f}ms\n"
        f"- Minimum: {stats.min_response_time_ms}ms\n"
        f"- Maximum: {stats.max_response_time_ms}ms\n\n"
        f"**Breakdown by {heading}**:\n"
        f"{breakdown}"
    )
