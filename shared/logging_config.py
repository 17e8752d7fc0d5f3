"""
Logging setup for the MCP Confirm server.

Logs always go to STDERR: with the stdio transport, STDOUT carries the MCP
JSON-RPC stream and any stray output there corrupts the protocol.
"""

import logging
import sys


def configure_logging(debug: bool = False) -> None:
    """Configure root logging once for the server process."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
