"""
MCP Confirm shared infrastructure: configuration, logging and data models.
"""

from .config import (
    DEFAULT_LOG_PATH,
    DEFAULT_TIMEOUT_MS,
    MAX_TIMEOUT_MS,
    MIN_TIMEOUT_MS,
    ServerConfig,
    parse_timeout_ms,
)
from .logging_config import configure_logging

__all__ = [
    "DEFAULT_LOG_PATH",
    "DEFAULT_TIMEOUT_MS",
    "MAX_TIMEOUT_MS",
    "MIN_TIMEOUT_MS",
    "ServerConfig",
    "configure_logging",
    "parse_timeout_ms",
]
