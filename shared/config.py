"""
MCP Confirm Server Configuration

Configuration is read from the environment exactly once at startup and then
passed explicitly into the elicitation engine, the log writer and the history
reader. No other module reads environment variables.

ENVIRONMENT VARIABLES:

  - MCP_CONFIRM_LOG_PATH: confirmation history log location
  - MCP_CONFIRM_TIMEOUT_MS: default elicitation timeout (bounds-checked)
  - MCP_CONFIRM_DEBUG: "true" enables debug logging
  - MCP_CONFIRM_SIMULATE: "true" answers elicitations with a simulated user
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path(".mcp-data") / "confirmation_history.log"
DEFAULT_TIMEOUT_MS = 180_000  # 3 minutes
MIN_TIMEOUT_MS = 5_000
MAX_TIMEOUT_MS = 1_800_000  # 30 minutes

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


def parse_timeout_ms(raw: Optional[str], default: int = DEFAULT_TIMEOUT_MS) -> int:
    """
    Parse a timeout override, falling back to the default when invalid.

    Values that are not integers or fall outside
    [MIN_TIMEOUT_MS, MAX_TIMEOUT_MS] never fail startup.
    """
    if raw is None or not raw.strip():
        return default

    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring non-numeric MCP_CONFIRM_TIMEOUT_MS={raw!r}, using {default}ms")
        return default

    if value < MIN_TIMEOUT_MS or value > MAX_TIMEOUT_MS:
        logger.warning(
            f"MCP_CONFIRM_TIMEOUT_MS={value} is outside "
            f"[{MIN_TIMEOUT_MS}, {MAX_TIMEOUT_MS}], using {default}ms"
        )
        return default

    return value


@dataclass(frozen=True)
class ServerConfig:
    """Immutable server configuration built once at startup."""

    log_path: Path = field(default_factory=lambda: DEFAULT_LOG_PATH)
    default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    debug: bool = False
    simulate_client: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
        """Load configuration from environment variables."""
        env = os.environ if environ is None else environ

        log_path = env.get("MCP_CONFIRM_LOG_PATH") or str(DEFAULT_LOG_PATH)
        debug = (
            _env_flag(env.get("MCP_CONFIRM_DEBUG"))
            or env.get("NODE_ENV", "").lower() == "development"
        )

        return cls(
            log_path=Path(log_path),
            default_timeout_ms=parse_timeout_ms(env.get("MCP_CONFIRM_TIMEOUT_MS")),
            debug=debug,
            simulate_client=_env_flag(env.get("MCP_CONFIRM_SIMULATE")),
        )
