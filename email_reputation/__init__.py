"""Email Reputation - batch EmailRep lookups with suppression rules."""

from .errors import (
    BatchLookupError,
    ConfigurationError,
    EmailRepError,
    RateLimitError,
    TransportError,
    UpstreamError,
)
from .integration import EmailRepIntegration, initialize, lookup, validate_options
from .models import Identifier, LookupConfiguration
from .summary import summary_tags

__version__ = "1.0.0"
__all__ = [
    "EmailRepIntegration",
    "initialize",
    "lookup",
    "validate_options",
    "summary_tags",
    "Identifier",
    "LookupConfiguration",
    "EmailRepError",
    "ConfigurationError",
    "BatchLookupError",
    "TransportError",
    "UpstreamError",
    "RateLimitError",
]
