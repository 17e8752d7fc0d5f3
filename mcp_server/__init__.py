"""
MCP Confirm Server

This package provides the Model Context Protocol server exposing the
elicitation tools and the confirmation history tools.

Tools:
  1. ask_yes_no
  2. confirm_action
  3. clarify_intent
  4. verify_understanding
  5. collect_rating
  6. elicit_custom
  7. search_logs
  8. analyze_logs

Usage:
    # Run as MCP server
    python -m mcp_server.server

    # Or import for programmatic use
    from mcp_server import mcp, search_logs_impl, analyze_logs_impl
"""

from .server import (
    CONFIG,
    analyze_logs_impl,
    elicitation_tool_impl,
    main,
    mcp,
    search_logs_impl,
)

__all__ = [
    "CONFIG",
    "analyze_logs_impl",
    "elicitation_tool_impl",
    "main",
    "mcp",
    "search_logs_impl",
]
