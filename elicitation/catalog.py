"""
Elicitation tool catalog.

Each elicitation tool name maps to exactly one builder, one reply formatter
and the label used when the tool fails. run_elicitation_tool() is the single
path from raw tool arguments to the text returned to the agent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from shared.models import ElicitationOutcome

from . import builders, replies
from .builders import ElicitationPrompt
from .engine import ElicitationEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElicitationTool:
    """How one tool asks its question and reports the answer."""

    name: str
    build: Callable[[Mapping[str, Any]], ElicitationPrompt]
    format_reply: Callable[[ElicitationPrompt, ElicitationOutcome], str]
    failure_label: str


ELICITATION_TOOLS: Dict[str, ElicitationTool] = {
    tool.name: tool
    for tool in (
        ElicitationTool(
            name="ask_yes_no",
            build=builders.build_ask_yes_no,
            format_reply=replies.format_yes_no,
            failure_label="Elicitation request failed",
        ),
        ElicitationTool(
            name="confirm_action",
            build=builders.build_confirm_action,
            format_reply=replies.format_confirm_action,
            failure_label="Confirmation request failed",
        ),
        ElicitationTool(
            name="clarify_intent",
            build=builders.build_clarify_intent,
            format_reply=replies.format_clarify_intent,
            failure_label="Clarification request failed",
        ),
        ElicitationTool(
            name="verify_understanding",
            build=builders.build_verify_understanding,
            format_reply=replies.format_verify_understanding,
            failure_label="Understanding verification failed",
        ),
        ElicitationTool(
            name="collect_rating",
            build=builders.build_collect_rating,
            format_reply=replies.format_collect_rating,
            failure_label="Rating collection failed",
        ),
        ElicitationTool(
            name="elicit_custom",
            build=builders.build_elicit_custom,
            format_reply=replies.format_elicit_custom,
            failure_label="Custom elicitation failed",
        ),
    )
}


def get_tool(name: str) -> ElicitationTool:
    try:
        return ELICITATION_TOOLS[name]
    except KeyError:
        raise ValueError(f"Unknown tool: {name}") from None


async def run_elicitation_tool(
    name: str,
    arguments: Optional[Mapping[str, Any]],
    engine: ElicitationEngine,
    default_timeout_ms: int,
) -> str:
    """
    Build, send and format one elicitation.

    Raises ElicitationError when the exchange fails or the reply cannot be
    trusted; malformed arguments never raise.
    """
    tool = get_tool(name)
    args = arguments if isinstance(arguments, Mapping) else {}

    prompt = tool.build(args)
    request = prompt.to_request(default_timeout_ms)
    logger.info(f"{name}: sending elicitation (timeout {request.timeout_ms}ms)")

    outcome = await engine.send(request)
    return tool.format_reply(prompt, outcome)
