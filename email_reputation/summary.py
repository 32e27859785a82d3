"""Summary tags derived from an EmailRep detail payload."""

from __future__ import annotations

from typing import Any


def _field(payload: dict[str, Any], key: str) -> Any:
    # EmailRep nests most flags under "details"; accept either placement.
    if payload.get(key):
        return payload[key]
    details = payload.get("details")
    if isinstance(details, dict):
        return details.get(key)
    return None


def _render(value: Any) -> str:
    # JSON booleans render the way the service sends them.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def summary_tags(payload: dict[str, Any]) -> list[str]:
    """Return the display tags, always in the same order.

    The malicious-activity and suspicious tags are always present, so the list
    holds between 2 and 4 entries.
    """
    tags = []

    reputation = payload.get("reputation")
    if reputation:
        tags.append(f"Reputation: {_render(reputation)}")

    if _field(payload, "malicious_activity"):
        tags.append("Malicious Activity: true")
    else:
        tags.append("Malicious Activity: false")

    suspicious = payload.get("suspicious")
    if suspicious:
        tags.append(f"Suspicious: {_render(suspicious)}")
    else:
        tags.append("Suspicious: false")

    last_seen = _field(payload, "last_seen")
    if last_seen:
        tags.append(f"Last Seen: {last_seen}")

    return tags
