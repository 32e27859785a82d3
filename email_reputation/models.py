"""Models for email-reputation.

We keep the core library lightweight (no mandatory pydantic dependency).
These dataclasses define the output contract handed back to the host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union

from .errors import ConfigurationError

IdentifierKind = Literal["email", "domain"]

# Fixed, not user-configurable.
CONCURRENCY_LIMIT = 10


@dataclass(frozen=True)
class Identifier:
    """A value submitted for lookup."""

    kind: IdentifierKind
    value: str

    @property
    def domain(self) -> Optional[str]:
        if self.kind == "domain":
            return self.value or None

        # Malformed addresses (no '@' or more than one) carry no domain.
        tokens = self.value.split("@")
        if len(tokens) != 2 or not tokens[0] or not tokens[1]:
            return None
        return tokens[1]

    @classmethod
    def from_entity(cls, entity: dict[str, Any]) -> Identifier:
        """Build an identifier from a host entity.

        Accepts `{"value", "type"}` as well as the older `isEmail` / `isDomain`
        flag style.
        """
        value = entity.get("value")
        if not isinstance(value, str):
            raise ConfigurationError("entity value must be a string", field="entities")

        kind = str(entity.get("type") or "").lower()
        if not kind:
            if entity.get("isEmail"):
                kind = "email"
            elif entity.get("isDomain"):
                kind = "domain"
            else:
                kind = "email" if "@" in value else "domain"

        if kind not in ("email", "domain"):
            raise ConfigurationError(f"Unsupported entity type: {kind}", field="entities")

        return cls(kind=kind, value=value)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "type": self.kind}


@dataclass(frozen=True)
class LookupConfiguration:
    api_key: str
    blocklist: frozenset[str] = frozenset()
    domain_blocklist_regex: str = ""
    concurrency_limit: int = CONCURRENCY_LIMIT


@dataclass(frozen=True)
class RateLimitCounters:
    # Raw header values; None when the upstream omitted the header.
    daily_remaining: Optional[str] = None
    monthly_remaining: Optional[str] = None

    def to_details(self) -> dict[str, Optional[str]]:
        return {
            "dailyLookupsRemaining": self.daily_remaining,
            "monthlyLookupsRemaining": self.monthly_remaining,
        }


# Lookup outcomes: exactly one per accepted identifier.


@dataclass(frozen=True)
class Hit:
    payload: Any
    counters: RateLimitCounters = field(default_factory=RateLimitCounters)


@dataclass(frozen=True)
class Miss:
    counters: RateLimitCounters = field(default_factory=RateLimitCounters)


@dataclass(frozen=True)
class RateLimited:
    counters: RateLimitCounters = field(default_factory=RateLimitCounters)


@dataclass(frozen=True)
class TransportFailure:
    cause: BaseException


@dataclass(frozen=True)
class UpstreamFailure:
    status: int
    body: str
    counters: RateLimitCounters = field(default_factory=RateLimitCounters)


LookupOutcome = Union[Hit, Miss, RateLimited, TransportFailure, UpstreamFailure]


@dataclass(frozen=True)
class ResultData:
    summary_tags: list[str]
    details: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"summary": list(self.summary_tags), "details": dict(self.details)}


@dataclass(frozen=True)
class LookupResult:
    identifier: Identifier
    data: Optional[ResultData] = None
    # Set for identifiers whose lookup did not complete normally
    # (rate limited, or a failure isolated to this identifier).
    error: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "entity": self.identifier.to_dict(),
            "data": self.data.to_dict() if self.data else None,
        }
        if self.error is not None:
            out["error"] = dict(self.error)
        return out


@dataclass(frozen=True)
class BatchResult:
    results: list[LookupResult]

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)

    @property
    def errors(self) -> list[LookupResult]:
        return [r for r in self.results if r.error is not None]

    @property
    def rate_limited(self) -> list[LookupResult]:
        return [r for r in self.results if r.error and r.error.get("kind") == "rate_limited"]

    def to_list(self) -> list[dict[str, Any]]:
        return [r.to_dict() for r in self.results]
