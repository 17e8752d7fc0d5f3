"""
Schema/Message Builders

One pure builder per elicitation tool. A builder turns raw tool arguments
into the prompt shown to the human and the schema of the expected reply.

ROBUSTNESS RULES:

  - Builders never raise. Missing or mistyped strings become documented
    placeholders, missing arrays become empty lists, array items are
    stringified.
  - When a bounded set of options is offered, the selection field comes
    before any free-text field so clients ask "which option" first.
  - Only yes/no, rating and action confirmations carry their own timeout;
    the others leave it to the configured default.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from shared.models import ElicitationRequest, ElicitationSchema

from .timeouts import RATING_TIMEOUT_MS, YES_NO_TIMEOUT_MS, timeout_for_impact

# Placeholders substituted for missing or invalid string arguments
YES_NO_PLACEHOLDER = "Please answer yes or no"
ACTION_PLACEHOLDER = "Unknown action"
REQUEST_PLACEHOLDER = "Unknown request"
AMBIGUITY_PLACEHOLDER = "Unknown ambiguity"
UNDERSTANDING_PLACEHOLDER = "Unknown understanding"
SUBJECT_PLACEHOLDER = "this item"
MESSAGE_PLACEHOLDER = "Please provide input"


@dataclass
class ElicitationPrompt:
    """Builder output: what to ask, how the reply is shaped, and how long to wait."""

    message: str
    schema: ElicitationSchema
    timeout_ms: Optional[int] = None
    # Coerced arguments, kept for formatting the reply
    arguments: Dict[str, Any] = field(default_factory=dict)

    def to_request(self, default_timeout_ms: int) -> ElicitationRequest:
        return ElicitationRequest(
            message=self.message,
            requested_schema=self.schema,
            timeout_ms=self.timeout_ms or default_timeout_ms,
        )


# =============================================================================
# Argument coercion
# =============================================================================

def coerce_text(args: Mapping[str, Any], key: str, placeholder: str) -> str:
    """Non-blank string argument, or the placeholder."""
    value = args.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return placeholder


def optional_text(args: Mapping[str, Any], key: str) -> Optional[str]:
    value = args.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def coerce_list(args: Mapping[str, Any], key: str) -> List[str]:
    """Array argument as a list of strings, or an empty list."""
    value = args.get(key)
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return []


def _numbered(items: List[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


# =============================================================================
# Builders
# =============================================================================

def build_ask_yes_no(args: Mapping[str, Any]) -> ElicitationPrompt:
    question = coerce_text(args, "question", YES_NO_PLACEHOLDER)
    schema = ElicitationSchema(
        properties={
            "answer": {
                "type": "boolean",
                "title": "Your Answer",
                "description": "Please select yes or no",
            },
        },
        required=["answer"],
    )
    return ElicitationPrompt(
        message=question,
        schema=schema,
        timeout_ms=YES_NO_TIMEOUT_MS,
        arguments={"question": question},
    )


def build_confirm_action(args: Mapping[str, Any]) -> ElicitationPrompt:
    action = coerce_text(args, "action", ACTION_PLACEHOLDER)
    impact = optional_text(args, "impact")
    details = optional_text(args, "details")

    message = f"Please confirm this action:\n\n**Action**: {action}"
    if impact:
        message += f"\n\n**Impact**: {impact}"
    if details:
        message += f"\n\n**Details**: {details}"
    message += "\n\nDo you want to proceed?"

    schema = ElicitationSchema(
        properties={
            "confirmed": {
                "type": "boolean",
                "title": "Confirm Action",
                "description": "Do you want to proceed with this action?",
            },
            "note": {
                "type": "string",
                "title": "Additional Note",
                "description": "Any additional instructions or concerns?",
            },
        },
        required=["confirmed"],
    )
    return ElicitationPrompt(
        message=message,
        schema=schema,
        timeout_ms=timeout_for_impact(impact),
        arguments={"action": action, "impact": impact, "details": details},
    )


def build_clarify_intent(args: Mapping[str, Any]) -> ElicitationPrompt:
    summary = coerce_text(args, "request_summary", REQUEST_PLACEHOLDER)
    ambiguity = coerce_text(args, "ambiguity", AMBIGUITY_PLACEHOLDER)
    options = coerce_list(args, "options")

    message = (
        "I need to clarify your intent:\n\n"
        f"**My understanding**: {summary}\n\n"
        f"**What's unclear**: {ambiguity}"
    )

    properties: Dict[str, Dict[str, Any]] = {}
    if options:
        message += f"\n\n**Options**:\n{_numbered(options)}"
        # Selection before free text
        properties["selected_option"] = {
            "type": "string",
            "title": "Select Option",
            "description": "Which option best matches your intent?",
            "enum": options,
        }
    properties["clarification"] = {
        "type": "string",
        "title": "Additional clarification",
        "description": "Please provide any additional details or explanation",
    }

    return ElicitationPrompt(
        message=message,
        schema=ElicitationSchema(properties=properties, required=["clarification"]),
        arguments={"request_summary": summary, "ambiguity": ambiguity, "options": options},
    )


def build_verify_understanding(args: Mapping[str, Any]) -> ElicitationPrompt:
    understanding = coerce_text(args, "understanding", UNDERSTANDING_PLACEHOLDER)
    key_points = coerce_list(args, "key_points")
    next_steps = optional_text(args, "next_steps")

    message = f"Please verify my understanding:\n\n**What I understood**: {understanding}"
    if key_points:
        message += f"\n\n**Key points to confirm**:\n{_numbered(key_points)}"
    if next_steps:
        message += f"\n\n**What I plan to do next**: {next_steps}"

    schema = ElicitationSchema(
        properties={
            "understanding_correct": {
                "type": "boolean",
                "title": "Understanding Correct",
                "description": "Is my understanding correct?",
            },
            "corrections": {
                "type": "string",
                "title": "Corrections",
                "description": "What should I correct or clarify?",
            },
            "proceed": {
                "type": "boolean",
                "title": "Proceed",
                "description": "Should I proceed with the planned next steps?",
            },
        },
        required=["understanding_correct"],
    )
    return ElicitationPrompt(
        message=message,
        schema=schema,
        arguments={
            "understanding": understanding,
            "key_points": key_points,
            "next_steps": next_steps,
        },
    )


def build_collect_rating(args: Mapping[str, Any]) -> ElicitationPrompt:
    subject = coerce_text(args, "subject", SUBJECT_PLACEHOLDER)
    description = optional_text(args, "description")

    schema = ElicitationSchema(
        properties={
            "rating": {
                "type": "number",
                "title": "Rating",
                "description": description or f"Rate {subject} from 1 to 10",
                "minimum": 1,
                "maximum": 10,
            },
            "comment": {
                "type": "string",
                "title": "Comment",
                "description": "Optional comment about your rating",
            },
        },
        required=["rating"],
    )
    return ElicitationPrompt(
        message=f"Please rate {subject}",
        schema=schema,
        timeout_ms=RATING_TIMEOUT_MS,
        arguments={"subject": subject, "description": description},
    )


def sanitize_schema(raw: Any) -> ElicitationSchema:
    """
    Caller-supplied schema reduced to something well formed.

    Non-object input yields an empty schema; property specs that are not
    objects are dropped, as are required names with no property.
    """
    if not isinstance(raw, Mapping):
        return ElicitationSchema()

    raw_properties = raw.get("properties")
    properties: Dict[str, Dict[str, Any]] = {}
    if isinstance(raw_properties, Mapping):
        for name, spec in raw_properties.items():
            if isinstance(spec, Mapping):
                properties[str(name)] = dict(spec)

    raw_required = raw.get("required")
    required: List[str] = []
    if isinstance(raw_required, (list, tuple)):
        required = [str(name) for name in raw_required if str(name) in properties]

    return ElicitationSchema(properties=properties, required=required)


def build_elicit_custom(args: Mapping[str, Any]) -> ElicitationPrompt:
    message = coerce_text(args, "message", MESSAGE_PLACEHOLDER)
    return ElicitationPrompt(
        message=message,
        schema=sanitize_schema(args.get("schema")),
        arguments={"message": message},
    )
