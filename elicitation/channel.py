"""
Elicitation channels.

A channel delivers one elicitation/create request to whoever answers it and
returns the reply. Timeouts are not the channel's concern: the engine bounds
every call and cancels it when the timeout expires.
"""

import logging
from typing import Any, Optional, Protocol

from shared.models import ElicitationOutcome, ElicitationRequest

logger = logging.getLogger(__name__)


class ElicitationChannel(Protocol):
    """Opaque request/response channel to the human."""

    async def call(self, request: ElicitationRequest) -> ElicitationOutcome:
        ...


class SessionChannel:
    """
    Sends elicitation/create to the connected MCP client.

    Wraps the MCP SDK ServerSession. Each request gets its own JSON-RPC id
    and response stream inside the session, so when the engine cancels a
    timed-out call the late reply has nowhere to land and is dropped rather
    than being delivered to another transaction.
    """

    def __init__(self, session: Any, related_request_id: Optional[Any] = None):
        self._session = session
        self._related_request_id = related_request_id

    async def call(self, request: ElicitationRequest) -> ElicitationOutcome:
        result = await self._session.elicit(
            message=request.message,
            requestedSchema=request.requested_schema.model_dump(exclude_none=True),
            related_request_id=self._related_request_id,
        )
        return ElicitationOutcome.model_validate(result.model_dump(exclude_none=True))
