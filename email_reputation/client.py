"""
EmailRep - email address reputation service
Requires API key
https://emailrep.io/
"""

from __future__ import annotations

import json
import logging
import ssl
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional

from .models import (
    CONCURRENCY_LIMIT,
    Hit,
    Identifier,
    LookupOutcome,
    Miss,
    RateLimited,
    TransportFailure,
    UpstreamFailure,
)
from .rate_limit import headers_to_dict, parse_rate_limit_counters
from .settings import RequestSettings

logger = logging.getLogger(__name__)

USER_AGENT = "email-reputation/1.0"


def build_ssl_context(settings: RequestSettings) -> Optional[ssl.SSLContext]:
    """Return an SSL context carrying client cert / CA material, if any is set."""
    if not (settings.cert or settings.ca):
        return None

    ctx = ssl.create_default_context(cafile=settings.ca)
    if settings.cert:
        ctx.load_cert_chain(settings.cert, keyfile=settings.key, password=settings.passphrase)
    return ctx


def build_opener(settings: RequestSettings) -> urllib.request.OpenerDirector:
    handlers: list[urllib.request.BaseHandler] = []

    ctx = build_ssl_context(settings)
    if ctx is not None:
        handlers.append(urllib.request.HTTPSHandler(context=ctx))

    if settings.proxy:
        handlers.append(
            urllib.request.ProxyHandler({"http": settings.proxy, "https": settings.proxy})
        )

    return urllib.request.build_opener(*handlers)


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _is_miss(body: Any) -> bool:
    return isinstance(body, list) and len(body) == 0


class ReputationClient:
    """One GET per identifier; classifies the HTTP outcome. No retries.

    Safe to call from several threads at once.
    """

    name = "emailrep"

    # Concurrency limit across a batch; enforced by the scheduler.
    max_concurrency = CONCURRENCY_LIMIT

    def __init__(
        self,
        settings: Optional[RequestSettings] = None,
        *,
        opener: Optional[urllib.request.OpenerDirector] = None,
        logger: logging.Logger = logger,
    ):
        self.settings = settings or RequestSettings()
        self._opener = opener or build_opener(self.settings)
        self._logger = logger

    def url_for(self, identifier: Identifier) -> str:
        encoded = urllib.parse.quote(identifier.value, safe="@")
        return f"{self.settings.base_url}/{encoded}?summary=true"

    def lookup(self, identifier: Identifier, api_key: str) -> LookupOutcome:
        url = self.url_for(identifier)
        req = urllib.request.Request(url, method="GET")
        req.add_header("Content-Type", "application/json")
        req.add_header("User-Agent", USER_AGENT)
        req.add_header("Key", api_key)

        self._logger.debug("Request URI", extra={"uri": url})

        try:
            with self._opener.open(req, timeout=self.settings.timeout) as response:
                counters = parse_rate_limit_counters(headers_to_dict(response.headers))
                raw = _decode(response.read())
                status = getattr(response, "status", None) or response.getcode()

        except urllib.error.HTTPError as e:
            counters = parse_rate_limit_counters(headers_to_dict(e.headers))
            body = _decode(e.read() or b"")
            if e.code == 429:
                self._logger.warning(
                    "Reached API Lookup Limit",
                    extra={
                        "identifier": identifier.value,
                        "daily_remaining": counters.daily_remaining,
                        "monthly_remaining": counters.monthly_remaining,
                    },
                )
                return RateLimited(counters)
            return UpstreamFailure(status=e.code, body=body, counters=counters)

        except (urllib.error.URLError, OSError) as e:
            # No response received (DNS, refused connection, TLS, timeout).
            return TransportFailure(cause=e)

        if status != 200:
            # Non-error 2xx/3xx codes urllib did not raise for.
            return UpstreamFailure(status=int(status), body=raw, counters=counters)

        try:
            body = json.loads(raw) if raw.strip() else None
        except json.JSONDecodeError:
            return UpstreamFailure(status=200, body=raw, counters=counters)

        if _is_miss(body):
            return Miss(counters)
        if body is not None and not isinstance(body, dict):
            # Lookups answer with a JSON object; anything else is not a usable payload.
            return UpstreamFailure(status=200, body=raw, counters=counters)
        return Hit(payload=body, counters=counters)
