"""
Reply formatting for elicitation tools.

Turns an ElicitationOutcome into the text handed back to the agent. An
accepted reply that does not satisfy the requested schema is untrusted and
raises UntrustedReplyError instead of being summarised.
"""

import json
from typing import Any, Dict

from shared.models import ElicitationAction, ElicitationOutcome

from .builders import ElicitationPrompt
from .errors import UntrustedReplyError

PAST_TENSE = {
    ElicitationAction.ACCEPT: "accepted",
    ElicitationAction.DECLINE: "declined",
    ElicitationAction.CANCEL: "cancelled",
}


def refused(outcome: ElicitationOutcome, what: str) -> str:
    return f"User {PAST_TENSE[outcome.action]} the {what}."


def trusted_content(prompt: ElicitationPrompt, outcome: ElicitationOutcome) -> Dict[str, Any]:
    problems = outcome.problems(prompt.schema)
    if problems:
        raise UntrustedReplyError(problems)
    return outcome.content or {}


def _pretty(content: Dict[str, Any]) -> str:
    return json.dumps(content, indent=2, ensure_ascii=False)


def format_yes_no(prompt: ElicitationPrompt, outcome: ElicitationOutcome) -> str:
    if not outcome.accepted:
        return refused(outcome, "question")
    content = trusted_content(prompt, outcome)
    return f"User answered: {'Yes' if content['answer'] else 'No'}"


def format_confirm_action(prompt: ElicitationPrompt, outcome: ElicitationOutcome) -> str:
    if not outcome.accepted:
        return refused(outcome, "confirmation request")
    content = trusted_content(prompt, outcome)
    text = f"User {'confirmed' if content['confirmed'] else 'declined'} the action."
    if content.get("note"):
        text += f"\nNote: {content['note']}"
    return text


def format_clarify_intent(prompt: ElicitationPrompt, outcome: ElicitationOutcome) -> str:
    if not outcome.accepted:
        return refused(outcome, "clarification request")
    return f"User clarification:\n{_pretty(trusted_content(prompt, outcome))}"


def format_verify_understanding(prompt: ElicitationPrompt, outcome: ElicitationOutcome) -> str:
    if not outcome.accepted:
        return refused(outcome, "understanding verification")
    return f"Understanding verification result:\n{_pretty(trusted_content(prompt, outcome))}"


def format_collect_rating(prompt: ElicitationPrompt, outcome: ElicitationOutcome) -> str:
    if not outcome.accepted:
        return refused(outcome, "rating request")
    content = trusted_content(prompt, outcome)
    # 8.0 -> 8
    rating = content["rating"]
    if isinstance(rating, float) and rating.is_integer():
        rating = int(rating)
    text = f"User rating for {prompt.arguments['subject']}: {rating}/10"
    if content.get("comment"):
        text += f"\nComment: {content['comment']}"
    return text


def format_elicit_custom(prompt: ElicitationPrompt, outcome: ElicitationOutcome) -> str:
    if not outcome.accepted:
        return refused(outcome, "custom elicitation")
    return f"Custom elicitation completed:\n{_pretty(trusted_content(prompt, outcome))}"
