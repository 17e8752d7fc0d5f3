"""
MCP Confirm Server

This is the Model Context Protocol server that lets an AI agent ask the
human structured questions through MCP elicitation, records every exchange
to an append-only confirmation log, and answers questions about that log.

TOOLS:
  1. ask_yes_no - Simple yes/no question
  2. confirm_action - Confirm a potentially impactful action
  3. clarify_intent - Resolve an ambiguous request
  4. verify_understanding - Check the agent's understanding
  5. collect_rating - Collect a 1-10 satisfaction rating
  6. elicit_custom - Ask with a caller-supplied schema
  7. search_logs - Filter and page through the confirmation history
  8. analyze_logs - Statistics over the confirmation history

Every tool has a plain *_impl function holding its logic, so it can be
exercised without a running MCP session.

Usage:
    # Run as MCP server (stdio)
    python -m mcp_server.server

    # Or import for testing
    from mcp_server.server import mcp
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv
from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError

from elicitation import (
    ElicitationChannel,
    ElicitationEngine,
    ElicitationError,
    SessionChannel,
    SimulatedChannel,
    get_tool,
    run_elicitation_tool,
)
from history import ConfirmationHistory, ConfirmationLogWriter
from shared import ServerConfig, configure_logging
from shared.models import DateRange, GroupBy, LogSearchParams

from .formatting import format_analysis, format_search_result

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Built once; components receive it explicitly
CONFIG = ServerConfig.from_env()

# Create FastMCP server
mcp = FastMCP(
    name="mcp-confirm",
    instructions=(
        "Confirmation server: ask the user yes/no questions, action confirmations, "
        "clarifications, understanding checks, ratings or custom structured questions, "
        "and search or analyze the history of those confirmations."
    ),
)

_log_writer: Optional[ConfirmationLogWriter] = None
_history: Optional[ConfirmationHistory] = None


def get_log_writer() -> ConfirmationLogWriter:
    """Shared log writer (singleton so all transactions serialize on one lock)."""
    global _log_writer
    if _log_writer is None:
        logger.info(f"Confirmation history log: {CONFIG.log_path}")
        _log_writer = ConfirmationLogWriter(CONFIG.log_path)
    return _log_writer


def get_history() -> ConfirmationHistory:
    global _history
    if _history is None:
        _history = ConfirmationHistory(CONFIG.log_path)
    return _history


def make_channel(ctx: Context, config: ServerConfig = CONFIG) -> ElicitationChannel:
    """Channel for the current tool call: the connected client, or the simulator."""
    if config.simulate_client:
        return SimulatedChannel()
    return SessionChannel(ctx.session, related_request_id=ctx.request_id)


def make_engine(ctx: Context) -> ElicitationEngine:
    return ElicitationEngine(make_channel(ctx), get_log_writer())


# =============================================================================
# Elicitation tools (1-6)
# =============================================================================

async def elicitation_tool_impl(
    name: str,
    arguments: Mapping[str, Any],
    engine: ElicitationEngine,
    config: ServerConfig = CONFIG,
) -> str:
    """
    Run one elicitation tool end to end.

    Failures surface as ToolError naming the operation, e.g.
    "Confirmation request failed: Elicitation failed: Request timed out after 120000ms".
    """
    tool = get_tool(name)
    try:
        return await run_elicitation_tool(name, arguments, engine, config.default_timeout_ms)
    except ElicitationError as e:
        logger.warning(f"{name} failed: {e}")
        raise ToolError(f"{tool.failure_label}: {e}") from e


@mcp.tool()
async def ask_yes_no(question: str, ctx: Context) -> str:
    """Ask a yes/no confirmation question to the user when the AI needs clarification or verification.

    Args:
        question: The yes/no confirmation question to ask the user.
    """
    return await elicitation_tool_impl("ask_yes_no", {"question": question}, make_engine(ctx))


@mcp.tool()
async def confirm_action(
    action: str,
    ctx: Context,
    impact: Optional[str] = None,
    details: Optional[str] = None,
) -> str:
    """Ask user to confirm an action before proceeding with potentially impactful operations.

    Destructive impacts (delete, remove) get a longer timeout so the user
    has time to read them.

    Args:
        action: Description of the action to be confirmed.
        impact: Potential impact or consequences of this action.
        details: Additional details about what will happen.
    """
    return await elicitation_tool_impl(
        "confirm_action",
        {"action": action, "impact": impact, "details": details},
        make_engine(ctx),
    )


@mcp.tool()
async def clarify_intent(
    request_summary: str,
    ambiguity: str,
    ctx: Context,
    options: Optional[List[Any]] = None,
) -> str:
    """Ask user to clarify their intent when the request is ambiguous or could be interpreted multiple ways.

    Args:
        request_summary: Summary of what the AI understood from the user's request.
        ambiguity: Description of what is unclear or ambiguous.
        options: Possible interpretations or options for the user to choose from.
    """
    return await elicitation_tool_impl(
        "clarify_intent",
        {"request_summary": request_summary, "ambiguity": ambiguity, "options": options},
        make_engine(ctx),
    )


@mcp.tool()
async def verify_understanding(
    understanding: str,
    ctx: Context,
    key_points: Optional[List[Any]] = None,
    next_steps: Optional[str] = None,
) -> str:
    """Verify that the AI correctly understood the user's requirements before proceeding.

    Args:
        understanding: AI's understanding of the user's request.
        key_points: Key points that the AI wants to confirm.
        next_steps: What the AI plans to do next if understanding is correct.
    """
    return await elicitation_tool_impl(
        "verify_understanding",
        {"understanding": understanding, "key_points": key_points, "next_steps": next_steps},
        make_engine(ctx),
    )


@mcp.tool()
async def collect_rating(
    subject: str,
    ctx: Context,
    description: Optional[str] = None,
) -> str:
    """Collect user satisfaction rating for AI's response or help quality.

    Args:
        subject: What to rate (e.g., 'this response', 'my help with your task').
        description: Additional context for the rating request.
    """
    return await elicitation_tool_impl(
        "collect_rating",
        {"subject": subject, "description": description},
        make_engine(ctx),
    )


@mcp.tool()
async def elicit_custom(message: str, schema: Dict[str, Any], ctx: Context) -> str:
    """Create a custom confirmation dialog with specific schema when standard tools don't fit.

    Args:
        message: Message to display to the user.
        schema: JSON schema defining the structure of information to collect
            (type "object" with flat string/number/integer/boolean properties).
    """
    return await elicitation_tool_impl(
        "elicit_custom",
        {"message": message, "schema": schema},
        make_engine(ctx),
    )


# =============================================================================
# Tool 7: search_logs
# =============================================================================

def search_logs_impl(
    arguments: Mapping[str, Any],
    history: Optional[ConfirmationHistory] = None,
) -> str:
    """
    Search the confirmation history.

    Args:
        arguments: Tool arguments using the wire names (keyword,
            confirmationType, startDate, endDate, success, timedOut,
            minResponseTime, maxResponseTime, page, pageSize). None values
            mean "no filter".

    Returns:
        Formatted page of results with the pagination footer.
    """
    history = history or get_history()
    try:
        params = LogSearchParams.model_validate(
            {key: value for key, value in arguments.items() if value is not None}
        )
        result = history.search(params)
    except (ValueError, OSError) as e:
        logger.warning(f"search_logs failed: {e}")
        raise ToolError(f"Log search failed: {e}") from e
    return format_search_result(result)


@mcp.tool()
def search_logs(
    keyword: Optional[str] = None,
    confirmationType: Optional[str] = None,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    success: Optional[bool] = None,
    timedOut: Optional[bool] = None,
    minResponseTime: Optional[float] = None,
    maxResponseTime: Optional[float] = None,
    page: int = 1,
    pageSize: int = 10,
) -> str:
    """Search confirmation history logs with various filters and pagination.

    Args:
        keyword: Search keyword in message content.
        confirmationType: Filter by confirmation type (confirmation, rating,
            clarification, verification, yes_no, custom).
        startDate: Start date filter (ISO 8601 format).
        endDate: End date filter (ISO 8601 format).
        success: Filter by success status.
        timedOut: Filter by timeout status.
        minResponseTime: Minimum response time in milliseconds.
        maxResponseTime: Maximum response time in milliseconds.
        page: Page number for pagination (1-based).
        pageSize: Number of entries per page (1-100).
    """
    return search_logs_impl({
        "keyword": keyword,
        "confirmationType": confirmationType,
        "startDate": startDate,
        "endDate": endDate,
        "success": success,
        "timedOut": timedOut,
        "minResponseTime": minResponseTime,
        "maxResponseTime": maxResponseTime,
        "page": page,
        "pageSize": pageSize,
    })


# =============================================================================
# Tool 8: analyze_logs
# =============================================================================

def analyze_logs_impl(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    group_by: str = GroupBy.CONFIRMATION_TYPE.value,
    history: Optional[ConfirmationHistory] = None,
) -> str:
    """
    Statistical analysis of the confirmation history.

    Args:
        start_date / end_date: Inclusive ISO 8601 bounds (optional).
        group_by: confirmationType | success | hour | day. hour and day
            buckets are UTC ("14:00" is 14:00-14:59 UTC).

    Returns:
        Formatted overall statistics and per-group breakdown.
    """
    history = history or get_history()
    try:
        window = DateRange(start_date=start_date or None, end_date=end_date or None)
        analysis = history.analyze(window.start_date, window.end_date, GroupBy(group_by))
    except (ValueError, OSError) as e:
        logger.warning(f"analyze_logs failed: {e}")
        raise ToolError(f"Log analysis failed: {e}") from e
    return format_analysis(analysis)


@mcp.tool()
def analyze_logs(
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    groupBy: str = GroupBy.CONFIRMATION_TYPE.value,
) -> str:
    """Perform statistical analysis on confirmation history logs.

    Args:
        startDate: Start date for analysis (ISO 8601 format).
        endDate: End date for analysis (ISO 8601 format).
        groupBy: Group analysis by field (confirmationType, success, hour, day).
            hour groups by UTC hour ("HH:00"); day groups by UTC date.
    """
    return analyze_logs_impl(startDate, endDate, groupBy)


# =============================================================================
# Main entry point
# =============================================================================

def main() -> None:
    configure_logging(CONFIG.debug)
    logger.info(
        f"Starting mcp-confirm (default timeout {CONFIG.default_timeout_ms}ms, "
        f"simulated client: {CONFIG.simulate_client})"
    )
    mcp.run()


if __name__ == "__main__":
    main()
