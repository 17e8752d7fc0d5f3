"""
Timeout selection policy.

Callers pick the timeout before a request reaches the engine:

  - simple yes/no questions and ratings use short fixed timeouts
  - action confirmations scale with the severity of their impact text
  - everything else uses the configured default (ServerConfig.default_timeout_ms)
"""

from typing import Optional

YES_NO_TIMEOUT_MS = 30_000
RATING_TIMEOUT_MS = 20_000
CRITICAL_ACTION_TIMEOUT_MS = 120_000
WARNING_ACTION_TIMEOUT_MS = 90_000

CRITICAL_IMPACT_KEYWORDS = ("delete", "remove", "削除", "破壊")
WARNING_IMPACT_KEYWORDS = ("warning", "警告")


def timeout_for_impact(impact: Optional[str]) -> Optional[int]:
    """
    Timeout for confirm_action given its impact description.

    Returns None when the impact carries no severity signal, meaning the
    configured default applies.
    """
    if not impact:
        return None

    lowered = impact.lower()
    if any(k in lowered for k in CRITICAL_IMPACT_KEYWORDS):
        return CRITICAL_ACTION_TIMEOUT_MS
    if any(k in lowered for k in WARNING_IMPACT_KEYWORDS):
        return WARNING_ACTION_TIMEOUT_MS
    return None
