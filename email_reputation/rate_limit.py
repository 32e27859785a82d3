"""Rate limit parsing helpers.

EmailRep reports remaining quota per window in `x-rate-limit-daily-remaining`
and `x-rate-limit-monthly-remaining`. Values are kept as the raw header strings
so callers see exactly what the service sent.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .models import RateLimitCounters

DAILY_REMAINING_HEADER = "x-rate-limit-daily-remaining"
MONTHLY_REMAINING_HEADER = "x-rate-limit-monthly-remaining"


def headers_to_dict(headers: Any) -> dict[str, str]:
    """Convert urllib headers (an email.message.Message) to a plain dict."""
    out: dict[str, str] = {}
    if headers is None:
        return out

    try:
        items = headers.items()
    except AttributeError:
        return out

    for k, v in items:
        if k is None:
            continue
        out[str(k)] = str(v)
    return out


def _header_map(headers: Mapping[str, str]) -> dict[str, str]:
    """Lowercase mapping for case-insensitive lookups."""
    return {str(k).lower(): str(v) for k, v in headers.items() if k is not None}


def _counter(ci: Mapping[str, str], name: str) -> str | None:
    value = ci.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_rate_limit_counters(headers: Mapping[str, str] | None) -> RateLimitCounters:
    """Extract remaining-quota counters; missing headers stay None."""
    if not headers:
        return RateLimitCounters()

    ci = _header_map(headers)
    return RateLimitCounters(
        daily_remaining=_counter(ci, DAILY_REMAINING_HEADER),
        monthly_remaining=_counter(ci, MONTHLY_REMAINING_HEADER),
    )
