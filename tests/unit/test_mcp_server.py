"""
Unit Tests for the MCP Confirm Server

This module tests the tool layer:
1. Elicitation tools - reply text, failure labels, untrusted replies
2. search_logs - formatting, pagination footer, error reporting
3. analyze_logs - formatting, grouping, error reporting
4. Channel selection for the current tool call

Plus the end-to-end scenarios: a destructive confirm_action and a cancelled
elicitation through the simulated user.
"""

from unittest.mock import MagicMock

import pytest
from fastmcp.exceptions import ToolError

import mcp_server.server as server_module
from conftest import FailingChannel, StaticChannel, accept
from elicitation import (
    CRITICAL_ACTION_TIMEOUT_MS,
    ElicitationEngine,
    SessionChannel,
    SimulatedChannel,
)
from history import load_records
from mcp_server.formatting import MESSAGE_PREVIEW_LENGTH, format_entry, preview
from shared import ServerConfig
from shared.models import ConfirmationType, ElicitationAction, ElicitationOutcome

elicitation_tool_impl = server_module.elicitation_tool_impl
search_logs_impl = server_module.search_logs_impl
analyze_logs_impl = server_module.analyze_logs_impl


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def config(log_path):
    return ServerConfig(log_path=log_path, default_timeout_ms=180000)


def engine_for(channel, log_writer):
    return ElicitationEngine(channel, log_writer)


# =============================================================================
# End-to-end scenarios
# =============================================================================

class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_destructive_confirm_action(self, config, log_writer, log_path):
        channel = StaticChannel(accept(confirmed=True))

        reply = await elicitation_tool_impl(
            "confirm_action",
            {"action": "Clean up old releases", "impact": "This will delete 12 releases"},
            engine_for(channel, log_writer),
            config,
        )

        assert channel.requests[0].timeout_ms == CRITICAL_ACTION_TIMEOUT_MS
        assert "confirmed" in reply
        assert reply == "User confirmed the action."

        record = load_records(log_path)[0]
        assert record.confirmation_type == ConfirmationType.CONFIRMATION
        assert record.request.timeout_ms == 120000
        assert record.success is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["キャンセルしてもよいですか", "Should I cancel the build?"])
    async def test_cancelled_elicitation_is_logged_as_success(
        self, config, log_writer, log_path, message
    ):
        reply = await elicitation_tool_impl(
            "elicit_custom",
            {"message": message, "schema": {"type": "object", "properties": {}}},
            engine_for(SimulatedChannel(), log_writer),
            config,
        )

        assert reply == "User cancelled the custom elicitation."
        record = load_records(log_path)[0]
        assert record.success is True
        assert record.response.action == ElicitationAction.CANCEL
        assert record.error is None


# =============================================================================
# Elicitation tools
# =============================================================================

class TestElicitationReplies:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer,expected", [(True, "User answered: Yes"), (False, "User answered: No")])
    async def test_ask_yes_no(self, config, log_writer, answer, expected):
        engine = engine_for(StaticChannel(accept(answer=answer)), log_writer)
        assert await elicitation_tool_impl("ask_yes_no", {"question": "Go?"}, engine, config) == expected

    @pytest.mark.asyncio
    async def test_confirm_action_declined_with_note(self, config, log_writer):
        engine = engine_for(StaticChannel(accept(confirmed=False, note="Not on a Friday")), log_writer)
        reply = await elicitation_tool_impl("confirm_action", {"action": "Deploy"}, engine, config)
        assert reply == "User declined the action.\nNote: Not on a Friday"

    @pytest.mark.asyncio
    async def test_collect_rating(self, config, log_writer):
        engine = engine_for(StaticChannel(accept(rating=8.0, comment="Helpful")), log_writer)
        reply = await elicitation_tool_impl(
            "collect_rating", {"subject": "this response"}, engine, config
        )
        assert reply == "User rating for this response: 8/10\nComment: Helpful"

    @pytest.mark.asyncio
    async def test_clarify_intent_pretty_prints_content(self, config, log_writer):
        engine = engine_for(
            StaticChannel(accept(selected_option="staging", clarification="only the API")),
            log_writer,
        )
        reply = await elicitation_tool_impl(
            "clarify_intent",
            {"request_summary": "Deploy", "ambiguity": "Where?", "options": ["staging", "prod"]},
            engine,
            config,
        )
        assert reply.startswith("User clarification:\n{")
        assert '"selected_option": "staging"' in reply

    @pytest.mark.asyncio
    async def test_verify_understanding(self, config, log_writer):
        engine = engine_for(StaticChannel(accept(understanding_correct=True, proceed=True)), log_writer)
        reply = await elicitation_tool_impl(
            "verify_understanding", {"understanding": "CSV export"}, engine, config
        )
        assert reply.startswith("Understanding verification result:")
        assert '"proceed": true' in reply

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool,expected", [
        ("ask_yes_no", "User declined the question."),
        ("confirm_action", "User declined the confirmation request."),
        ("clarify_intent", "User declined the clarification request."),
        ("verify_understanding", "User declined the understanding verification."),
        ("collect_rating", "User declined the rating request."),
        ("elicit_custom", "User declined the custom elicitation."),
    ])
    async def test_declines(self, config, log_writer, tool, expected):
        engine = engine_for(StaticChannel(ElicitationOutcome(action="decline")), log_writer)
        assert await elicitation_tool_impl(tool, {}, engine, config) == expected

    @pytest.mark.asyncio
    async def test_malformed_arguments_still_complete(self, config, log_writer):
        channel = StaticChannel(accept(answer=True))
        reply = await elicitation_tool_impl(
            "ask_yes_no", {"question": 12345}, engine_for(channel, log_writer), config
        )
        assert reply == "User answered: Yes"
        assert channel.requests[0].message == "Please answer yes or no"

    @pytest.mark.asyncio
    async def test_default_timeout_comes_from_config(self, log_path, log_writer):
        channel = StaticChannel(accept(clarification="ok"))
        config = ServerConfig(log_path=log_path, default_timeout_ms=60000)
        await elicitation_tool_impl("clarify_intent", {}, engine_for(channel, log_writer), config)
        assert channel.requests[0].timeout_ms == 60000


class TestElicitationFailures:

    @pytest.mark.asyncio
    async def test_timeout_names_the_operation(self, log_path, log_writer):
        config = ServerConfig(log_path=log_path, default_timeout_ms=50)
        engine = engine_for(StaticChannel(accept(clarification="late"), delay=1.0), log_writer)

        with pytest.raises(ToolError) as exc_info:
            await elicitation_tool_impl("clarify_intent", {}, engine, config)

        assert str(exc_info.value) == (
            "Clarification request failed: Elicitation failed: Request timed out after 50ms"
        )
        assert load_records(log_path)[0].success is False

    @pytest.mark.asyncio
    async def test_transport_failure_is_not_a_decline(self, config, log_writer):
        engine = engine_for(FailingChannel(ConnectionError("pipe closed")), log_writer)

        with pytest.raises(ToolError) as exc_info:
            await elicitation_tool_impl("collect_rating", {"subject": "x"}, engine, config)

        assert str(exc_info.value) == "Rating collection failed: Elicitation failed: pipe closed"

    @pytest.mark.asyncio
    async def test_incomplete_accept_is_untrusted(self, config, log_writer, log_path):
        engine = engine_for(StaticChannel(accept()), log_writer)

        with pytest.raises(ToolError) as exc_info:
            await elicitation_tool_impl("ask_yes_no", {"question": "Go?"}, engine, config)

        assert "Elicitation request failed" in str(exc_info.value)
        assert "missing answer" in str(exc_info.value)
        # The exchange itself completed and is recorded as such
        assert load_records(log_path)[0].success is True

    @pytest.mark.asyncio
    async def test_wrongly_typed_accept_is_untrusted(self, config, log_writer):
        engine = engine_for(StaticChannel(accept(rating="ten")), log_writer)

        with pytest.raises(ToolError) as exc_info:
            await elicitation_tool_impl("collect_rating", {"subject": "x"}, engine, config)

        assert "rating must be a number" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unknown_tool(self, config, log_writer):
        engine = engine_for(SimulatedChannel(), log_writer)
        with pytest.raises(ValueError, match="Unknown tool"):
            await elicitation_tool_impl("ask_anything", {}, engine, config)


# =============================================================================
# search_logs
# =============================================================================

class TestSearchLogs:

    def test_lists_entries_with_footer(self, written_history):
        text = search_logs_impl({"pageSize": 2}, history=written_history)

        assert text.startswith("🔍 **Confirmation Log Search Results**")
        assert "**1.** 2025-08-05 18:30:00 UTC [custom]" in text
        assert "❌ Failed - cancel (50ms)" in text
        assert "Error: Connection closed" in text
        assert "**2.** 2025-08-05 09:00:00 UTC [clarification]" in text
        assert text.endswith("Total: 5 entries\nPage: 1/3\nShowing: 2 entries")

    def test_numbering_continues_across_pages(self, written_history):
        text = search_logs_impl({"page": 2, "pageSize": 2}, history=written_history)
        assert "**3.**" in text
        assert "**4.**" in text
        assert "**1.**" not in text

    def test_filters_use_wire_names(self, written_history):
        text = search_logs_impl(
            {"confirmationType": "rating", "success": True, "timedOut": None},
            history=written_history,
        )
        assert "Total: 1 entries" in text
        assert "✅ Success - accept (800ms)" in text

    def test_timed_out_filter(self, written_history):
        text = search_logs_impl({"timedOut": True}, history=written_history)
        assert "Error: Request timed out after 20000ms" in text
        assert "Total: 1 entries" in text

    def test_page_beyond_last(self, written_history):
        text = search_logs_impl({"page": 10}, history=written_history)
        assert "No matching confirmation records." in text
        assert "Page: 10/1" in text
        assert "Showing: 0 entries" in text

    def test_empty_log(self, history):
        text = search_logs_impl({}, history=history)
        assert "Total: 0 entries" in text

    def test_invalid_filter_is_reported(self, written_history):
        with pytest.raises(ToolError, match="^Log search failed:"):
            search_logs_impl({"confirmationType": "survey"}, history=written_history)

    def test_malformed_log_is_reported_not_partial(self, history, log_path, make_record):
        log_path.parent.mkdir(parents=True)
        log_path.write_text(make_record().to_log_line() + "garbage\n", encoding="utf-8")

        with pytest.raises(ToolError, match="Malformed record"):
            search_logs_impl({}, history=history)


class TestFormatting:

    def test_short_message_is_not_truncated(self):
        message = "x" * MESSAGE_PREVIEW_LENGTH
        assert preview(message) == message

    def test_long_message_is_truncated(self):
        message = "y" * (MESSAGE_PREVIEW_LENGTH + 1)
        assert preview(message) == "y" * MESSAGE_PREVIEW_LENGTH + "..."

    def test_entry_without_error_has_no_error_line(self, make_record):
        text = format_entry(make_record(message="z" * 300), 1)
        assert "Error:" not in text
        assert text.splitlines()[-1] == f"Message: {'z' * 100}..."


# =============================================================================
# analyze_logs
# =============================================================================

class TestAnalyzeLogs:

    def test_overall_statistics(self, written_history):
        text = analyze_logs_impl(history=written_history)

        assert text.startswith("📊 **Confirmation Log Analysis**")
        assert "**Period**: All time to Present" in text
        assert "- Total confirmations: 5" in text
        assert "- Successful: 3 (60.0%)" in text
        assert "- Failed: 2 (40.0%)" in text
        assert "- Timed out: 1 (20.0%)" in text
        assert "- Average: 5010ms" in text
        assert "- Minimum: 50ms" in text
        assert "- Maximum: 20000ms" in text
        assert "**Breakdown by confirmationType**:" in text
        assert "**rating**: 2 entries (50.0% success, avg: 10400ms)" in text

    def test_group_by_hour_with_date_range(self, written_history):
        text = analyze_logs_impl(
            start_date="2025-08-04T00:00:00Z",
            end_date="2025-08-04T23:59:59Z",
            group_by="hour",
            history=written_history,
        )
        assert "- Total confirmations: 3" in text
        assert "**Breakdown by hour (UTC)**:" in text
        assert "**10:00**: 2 entries (100.0% success, avg: 1000ms)" in text
        assert "**14:00**: 1 entries (0.0% success, avg: 20000ms)" in text
        assert "2025-08-04T00:00:00+00:00 to 2025-08-04T23:59:59+00:00" in text

    def test_day_breakdown_is_labelled_utc(self, written_history):
        text = analyze_logs_impl(group_by="day", history=written_history)
        assert "**Breakdown by day (UTC)**:" in text
        assert "**2025-08-04**: 3 entries" in text

    def test_hour_grouping_is_documented_as_utc(self):
        assert "UTC" in analyze_logs_impl.__doc__

    def test_empty_period(self, written_history):
        text = analyze_logs_impl(start_date="2030-01-01T00:00:00Z", history=written_history)
        assert "- Total confirmations: 0" in text
        assert "- Successful: 0 (0.0%)" in text
        assert "- Average: 0ms" in text
        assert "No entries in this period." in text

    def test_invalid_group_by(self, written_history):
        with pytest.raises(ToolError, match="^Log analysis failed:"):
            analyze_logs_impl(group_by="weekday", history=written_history)

    def test_invalid_date(self, written_history):
        with pytest.raises(ToolError, match="^Log analysis failed:"):
            analyze_logs_impl(start_date="last tuesday", history=written_history)


# =============================================================================
# Channel selection
# =============================================================================

class TestMakeChannel:

    def test_simulated_client(self, log_path):
        config = ServerConfig(log_path=log_path, simulate_client=True)
        assert isinstance(server_module.make_channel(MagicMock(), config), SimulatedChannel)

    def test_connected_client(self, log_path):
        ctx = MagicMock()
        channel = server_module.make_channel(ctx, ServerConfig(log_path=log_path))
        assert isinstance(channel, SessionChannel)
