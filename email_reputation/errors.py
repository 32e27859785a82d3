"""Error taxonomy.

Configuration errors are raised before any network activity. Batch errors are
only raised when the scheduler runs in fail-fast mode; otherwise the same
conditions are reported per identifier on the result entries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .models import RateLimitCounters


class EmailRepError(Exception):
    """Base class for all email-reputation errors."""

    detail = "Email reputation lookup failed"

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.detail, "message": str(self)}


class ConfigurationError(EmailRepError):
    detail = "Invalid configuration"

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["key"] = self.field
        return out


class BatchLookupError(EmailRepError):
    """A lookup outcome that aborted the whole batch."""

    def __init__(self, identifier: str, message: str):
        super().__init__(f"{identifier}: {message}")
        self.identifier = identifier

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["entity"] = self.identifier
        return out


class TransportError(BatchLookupError):
    detail = "Error in Request"

    def __init__(self, identifier: str, cause: BaseException):
        super().__init__(identifier, str(cause) or type(cause).__name__)
        self.cause = cause


class UpstreamError(BatchLookupError):
    detail = "Unexpected Non 200 HTTP Status Code"

    def __init__(self, identifier: str, status: int, body: str):
        super().__init__(identifier, f"HTTP {status}")
        self.status = status
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["http_status"] = self.status
        out["body"] = self.body
        return out


class RateLimitError(BatchLookupError):
    detail = "Reached API Lookup Limit"

    def __init__(self, identifier: str, counters: RateLimitCounters):
        super().__init__(identifier, "rate limited")
        self.counters = counters

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out.update(self.counters.to_details())
        return out
