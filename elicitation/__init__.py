"""
MCP Confirm Elicitation

Everything between a tool call and the human's answer:

  - builders.py: per-tool prompt and schema construction
  - classifier.py: confirmation type inference from the message
  - timeouts.py: timeout selection policy
  - channel.py / simulator.py: ways of reaching the human
  - engine.py: the request/response protocol engine
  - replies.py / catalog.py: per-tool reply text and the tool registry
"""

from .builders import ElicitationPrompt, sanitize_schema
from .catalog import ELICITATION_TOOLS, ElicitationTool, get_tool, run_elicitation_tool
from .channel import ElicitationChannel, SessionChannel
from .classifier import CLASSIFICATION_RULES, classify_message, contains_any
from .engine import ElicitationEngine
from .errors import (
    ElicitationError,
    ElicitationTimeoutError,
    ElicitationTransportError,
    UntrustedReplyError,
)
from .simulator import SimulatedChannel, mock_content
from .timeouts import (
    CRITICAL_ACTION_TIMEOUT_MS,
    RATING_TIMEOUT_MS,
    WARNING_ACTION_TIMEOUT_MS,
    YES_NO_TIMEOUT_MS,
    timeout_for_impact,
)

__all__ = [
    "CLASSIFICATION_RULES",
    "CRITICAL_ACTION_TIMEOUT_MS",
    "ELICITATION_TOOLS",
    "ElicitationChannel",
    "ElicitationEngine",
    "ElicitationError",
    "ElicitationPrompt",
    "ElicitationTimeoutError",
    "ElicitationTool",
    "ElicitationTransportError",
    "RATING_TIMEOUT_MS",
    "SessionChannel",
    "SimulatedChannel",
    "UntrustedReplyError",
    "WARNING_ACTION_TIMEOUT_MS",
    "YES_NO_TIMEOUT_MS",
    "classify_message",
    "contains_any",
    "get_tool",
    "mock_content",
    "run_elicitation_tool",
    "sanitize_schema",
    "timeout_for_impact",
]
