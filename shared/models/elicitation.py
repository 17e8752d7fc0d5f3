"""
Pydantic Models for Elicitation Requests and Outcomes

An elicitation is a single request/response exchange in which the server
asks the human a schema-shaped question through the MCP client and receives
either structured data or a refusal.

WIRE FORMAT:

  Attributes are snake_case in Python and camelCase on the wire and in the
  confirmation log (requestedSchema, timeoutMs). Both spellings are accepted
  on input.

TRUST BOUNDARY:

  Whatever the client returns is untrusted input. An accepted outcome that
  omits a required field or carries a value of the wrong type must not be
  taken at face value; use ElicitationOutcome.problems() before relying on
  its content.

STORED RECORDS:

  Requests read back from the confirmation log are validated with
  STORED_RECORD_CONTEXT. Older logs omit timeoutMs for some tools and may
  name required fields that are not in properties; those invariants are
  enforced only when a request is built.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising attribute names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Validation context for records parsed from the confirmation log
STORED_RECORD_CONTEXT = {"stored_record": True}


def _is_stored_record(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("stored_record"))


class ElicitationAction(str, Enum):
    """What the human did with an elicitation."""

    ACCEPT = "accept"
    DECLINE = "decline"
    CANCEL = "cancel"


class ConfirmationType(str, Enum):
    """Coarse category inferred from the message, used for logging and analytics."""

    CONFIRMATION = "confirmation"
    RATING = "rating"
    CLARIFICATION = "clarification"
    VERIFICATION = "verification"
    YES_NO = "yes_no"
    CUSTOM = "custom"


class ElicitationSchema(BaseModel):
    """
    Declarative description of the reply fields.

    properties maps field name -> {type, title?, description?, enum?,
    format?, minimum?, maximum?, default?}. Field order is significant:
    clients present fields in insertion order.
    """

    type: str = Field(default="object", description="Always 'object'.")
    properties: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _required_fields_exist(self, info: ValidationInfo) -> ElicitationSchema:
        if _is_stored_record(info):
            return self
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(f"required fields not in properties: {', '.join(unknown)}")
        return self


class ElicitationRequest(CamelModel):
    """A request sent to the client as the params of elicitation/create."""

    message: str = Field(description="Text shown to the human.")
    requested_schema: ElicitationSchema = Field(default_factory=ElicitationSchema)
    timeout_ms: Optional[int] = Field(
        default=None, gt=0, description="How long to wait for the reply."
    )

    @model_validator(mode="after")
    def _timeout_present(self, info: ValidationInfo) -> ElicitationRequest:
        if self.timeout_ms is None and not _is_stored_record(info):
            raise ValueError("timeout_ms is required")
        return self

    @property
    def required_fields(self) -> List[str]:
        return list(self.requested_schema.required)


def _type_problem(name: str, spec: Dict[str, Any], value: Any) -> Optional[str]:
    # bool is a subclass of int, so numeric checks exclude it explicitly
    declared = spec.get("type")

    if declared == "boolean":
        if not isinstance(value, bool):
            return f"{name} must be a boolean"
    elif declared == "integer":
        if isinstance(value, bool) or not isinstance(value, int):
            return f"{name} must be an integer"
    elif declared == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"{name} must be a number"
    elif declared == "string":
        if not isinstance(value, str):
            return f"{name} must be a string"
        allowed = spec.get("enum")
        if isinstance(allowed, list) and allowed and value not in allowed:
            return f"{name} must be one of {allowed}"
        return None
    else:
        return None

    if declared in ("integer", "number"):
        minimum = spec.get("minimum")
        maximum = spec.get("maximum")
        if isinstance(minimum, (int, float)) and value < minimum:
            return f"{name} must be >= {minimum}"
        if isinstance(maximum, (int, float)) and value > maximum:
            return f"{name} must be <= {maximum}"
    return None


class ElicitationOutcome(CamelModel):
    """
    Normalised reply to an elicitation.

    content is only meaningful for accept; it is dropped for decline and
    cancel so a refused elicitation can never leak partial data.
    """

    action: ElicitationAction
    content: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def _content_only_on_accept(self) -> ElicitationOutcome:
        if self.action != ElicitationAction.ACCEPT:
            self.content = None
        return self

    @property
    def accepted(self) -> bool:
        return self.action == ElicitationAction.ACCEPT

    def missing_required(self, schema: ElicitationSchema) -> List[str]:
        """Required fields with no value in an accepted reply."""
        if not self.accepted:
            return []
        content = self.content or {}
        return [name for name in schema.required if content.get(name) is None]

    def problems(self, schema: ElicitationSchema) -> List[str]:
        """Everything about an accepted reply that does not match the schema."""
        if not self.accepted:
            return []

        issues = [f"missing {name}" for name in self.missing_required(schema)]
        for name, value in (self.content or {}).items():
            spec = schema.properties.get(name)
            if spec is None or value is None:
                continue
            problem = _type_problem(name, spec, value)
            if problem:
                issues.append(problem)
        return issues
