"""Map raw lookup outcomes to the result shape returned to the host."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .models import (
    BatchResult,
    Hit,
    Identifier,
    LookupOutcome,
    LookupResult,
    Miss,
    RateLimited,
    ResultData,
    TransportFailure,
    UpstreamFailure,
)
from .summary import summary_tags


def _details(payload: dict[str, Any], hit: Hit) -> dict[str, Any]:
    details = dict(payload)
    details.update(hit.counters.to_details())
    return details


def assemble_one(identifier: Identifier, outcome: LookupOutcome) -> LookupResult:
    if isinstance(outcome, Miss):
        return LookupResult(identifier=identifier, data=None)

    if isinstance(outcome, Hit):
        if not outcome.payload:
            return LookupResult(identifier=identifier, data=None)
        # Only JSON objects carry fields; other bodies get the default tags.
        payload = outcome.payload if isinstance(outcome.payload, dict) else {}
        tags = summary_tags(payload)
        return LookupResult(
            identifier=identifier,
            data=ResultData(summary_tags=tags, details=_details(payload, outcome)),
        )

    if isinstance(outcome, RateLimited):
        error: dict[str, Any] = {"kind": "rate_limited", "detail": "Reached API Lookup Limit"}
        error.update(outcome.counters.to_details())
        return LookupResult(identifier=identifier, error=error)

    if isinstance(outcome, UpstreamFailure):
        error = {
            "kind": "upstream",
            "detail": "Unexpected Non 200 HTTP Status Code",
            "http_status": outcome.status,
            "body": outcome.body,
        }
        error.update(outcome.counters.to_details())
        return LookupResult(identifier=identifier, error=error)

    if isinstance(outcome, TransportFailure):
        return LookupResult(
            identifier=identifier,
            error={"kind": "transport", "detail": "Error in Request", "message": str(outcome.cause)},
        )

    raise TypeError(f"Unknown lookup outcome: {outcome!r}")


def assemble(outcomes: Iterable[tuple[Identifier, LookupOutcome]]) -> BatchResult:
    """Build the batch result, keeping the order of `outcomes`."""
    return BatchResult(results=[assemble_one(i, o) for i, o in outcomes])
