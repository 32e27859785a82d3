"""Per-call option parsing and validation.

Hosts hand us option maps either as plain values or wrapped as
`{"value": ...}` (the shape used when validating user-edited options).
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .errors import ConfigurationError
from .models import LookupConfiguration

INTEGRATION_INFO: dict[str, Any] = {
    "name": "Email Rep",
    "acronym": "ER",
    "description": "Free Email Reputation Service",
    "entity_types": ["email", "domain"],
    "options": [
        {
            "key": "apiKey",
            "name": "API Key",
            "description": "EmailRep API key",
            "default": "",
            "type": "password",
            "user_can_edit": True,
            "admin_only": False,
        },
        {
            "key": "blocklist",
            "name": "Ignored Entities",
            "description": "Comma delimited list of email addresses that will never be looked up",
            "default": "",
            "type": "text",
            "user_can_edit": False,
            "admin_only": False,
        },
        {
            "key": "domainBlocklistRegex",
            "name": "Ignored Domain Regex",
            "description": "Email addresses whose domain matches this regex will never be looked up",
            "default": "",
            "type": "text",
            "user_can_edit": False,
            "admin_only": False,
        },
    ],
}


def _unwrap(options: Mapping[str, Any], key: str, default: Any = None) -> Any:
    value = options.get(key, default)
    if isinstance(value, Mapping):
        return value.get("value", default)
    return value


def parse_blocklist(raw: Any) -> frozenset[str]:
    """Parse a comma-delimited string (or list) into lowercase entries."""
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        items: Iterable[Any] = raw.split(",")
    elif isinstance(raw, Iterable):
        items = raw
    else:
        raise ConfigurationError("blocklist must be a string or a list", field="blocklist")

    return frozenset(s for s in (str(i).strip().lower() for i in items) if s)


def load_configuration(options: Mapping[str, Any]) -> LookupConfiguration:
    """Build a LookupConfiguration, raising ConfigurationError on bad input.

    The regex itself is compiled later by the pattern cache; here we only
    check its type.
    """
    api_key = _unwrap(options, "apiKey")
    if not isinstance(api_key, str) or not api_key:
        raise ConfigurationError("You must provide a valid API key", field="apiKey")

    regex = _unwrap(options, "domainBlocklistRegex", "") or ""
    if not isinstance(regex, str):
        raise ConfigurationError(
            "domainBlocklistRegex must be a string", field="domainBlocklistRegex"
        )

    return LookupConfiguration(
        api_key=api_key,
        blocklist=parse_blocklist(_unwrap(options, "blocklist")),
        domain_blocklist_regex=regex,
    )


def validate_options(options: Mapping[str, Any]) -> list[dict[str, str]]:
    """Return one `{"key", "message"}` entry per invalid option."""
    errors: list[dict[str, str]] = []

    api_key = _unwrap(options, "apiKey")
    if not isinstance(api_key, str) or not api_key:
        errors.append({"key": "apiKey", "message": "You must provide a valid API key"})

    try:
        parse_blocklist(_unwrap(options, "blocklist"))
    except ConfigurationError as e:
        errors.append({"key": "blocklist", "message": str(e)})

    regex = _unwrap(options, "domainBlocklistRegex", "") or ""
    if not isinstance(regex, str):
        errors.append({"key": "domainBlocklistRegex", "message": "Must be a string"})
    elif regex:
        try:
            re.compile(regex, re.IGNORECASE)
        except re.error as e:
            errors.append(
                {"key": "domainBlocklistRegex", "message": f"Invalid regular expression: {e}"}
            )

    return errors
