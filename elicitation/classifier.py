"""
Confirmation type classifier.

The category of an elicitation is inferred from its message with an ordered
rule list: the first rule whose predicate matches wins, and messages matching
none are CUSTOM. Matching is case-insensitive substring search; Japanese
keywords count for the same category as their English counterparts.
"""

from typing import Callable, List, Tuple

from shared.models import ConfirmationType

MessagePredicate = Callable[[str], bool]


def contains_any(*keywords: str) -> MessagePredicate:
    """Build a predicate matching lowercased messages containing any keyword."""
    lowered = tuple(k.lower() for k in keywords)

    def predicate(message: str) -> bool:
        return any(k in message for k in lowered)

    return predicate


# Order matters: "Please confirm the rate" is a confirmation.
CLASSIFICATION_RULES: List[Tuple[MessagePredicate, ConfirmationType]] = [
    (contains_any("confirm", "確認"), ConfirmationType.CONFIRMATION),
    (contains_any("rate", "評価"), ConfirmationType.RATING),
    (contains_any("clarify", "明確"), ConfirmationType.CLARIFICATION),
    (contains_any("verify", "検証"), ConfirmationType.VERIFICATION),
    (contains_any("yes/no", "はい/いいえ"), ConfirmationType.YES_NO),
]


def classify_message(
    message: str,
    rules: List[Tuple[MessagePredicate, ConfirmationType]] = CLASSIFICATION_RULES,
) -> ConfirmationType:
    """Return the confirmation type of the first matching rule."""
    lowered = message.lower()
    for predicate, confirmation_type in rules:
        if predicate(lowered):
            return confirmation_type
    return ConfirmationType.CUSTOM
