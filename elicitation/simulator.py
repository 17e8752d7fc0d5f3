"""
Simulated user for development and tests.

Answers elicitations without a client: messages mentioning cancel or
decline (in English or Japanese) are cancelled or declined, everything else
is accepted with plausible values generated from the requested schema.
"""

import logging
from typing import Any, Dict

from shared.models import (
    ElicitationAction,
    ElicitationOutcome,
    ElicitationRequest,
    ElicitationSchema,
)

logger = logging.getLogger(__name__)

CANCEL_KEYWORDS = ("cancel", "キャンセル")
DECLINE_KEYWORDS = ("decline", "拒否")


def mock_value(name: str, spec: Dict[str, Any]) -> Any:
    """A schema-conforming sample value for one field."""
    field_type = spec.get("type")

    if field_type == "string":
        allowed = spec.get("enum")
        if isinstance(allowed, list) and allowed:
            return allowed[0]
        if spec.get("format") == "email":
            return "user@example.com"
        if spec.get("format") == "date":
            return "2025-08-04"
        title = spec.get("title")
        return f"Mock {title if isinstance(title, str) else name}"

    if field_type in ("number", "integer"):
        minimum = spec.get("minimum")
        return minimum if isinstance(minimum, (int, float)) else 1

    if field_type == "boolean":
        return spec.get("default", True)

    return f"Mock value for {name}"


def mock_content(schema: ElicitationSchema) -> Dict[str, Any]:
    return {name: mock_value(name, spec) for name, spec in schema.properties.items()}


class SimulatedChannel:
    """Channel answered by a deterministic simulated user."""

    async def call(self, request: ElicitationRequest) -> ElicitationOutcome:
        message = request.message.lower()

        if any(k in message for k in CANCEL_KEYWORDS):
            logger.debug("Simulated user cancelled the request")
            return ElicitationOutcome(action=ElicitationAction.CANCEL)

        if any(k in message for k in DECLINE_KEYWORDS):
            logger.debug("Simulated user declined the request")
            return ElicitationOutcome(action=ElicitationAction.DECLINE)

        return ElicitationOutcome(
            action=ElicitationAction.ACCEPT,
            content=mock_content(request.requested_schema),
        )
