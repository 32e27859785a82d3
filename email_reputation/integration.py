"""Email reputation lookup - host-facing entry points.

`initialize()` is called once at process start, `lookup()` once per batch of
entities. Options are re-read on every call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from . import config
from .assembler import assemble
from .client import ReputationClient
from .models import BatchResult, Identifier
from .scheduler import BatchScheduler
from .settings import RequestSettings, default_logger
from .suppression import SuppressionFilter


class EmailRepIntegration:
    """Filters, schedules and assembles one batch at a time.

    Owns the suppression filter (and with it the compiled-pattern cache), so
    the cache lives exactly as long as the integration instance.
    """

    def __init__(
        self,
        settings: Optional[RequestSettings] = None,
        *,
        logger: Optional[logging.Logger] = None,
        client: Optional[ReputationClient] = None,
    ):
        self.settings = settings or RequestSettings()
        self.logger = logger or default_logger(self.settings)
        self.client = client or ReputationClient(self.settings, logger=self.logger)
        self.suppression = SuppressionFilter(logger=self.logger)
        self.scheduler = BatchScheduler(
            self.client,
            concurrency_limit=self.client.max_concurrency,
            fail_fast=self.settings.fail_fast,
            logger=self.logger,
        )

    def lookup_identifiers(
        self, identifiers: Iterable[Identifier], options: Mapping[str, Any]
    ) -> BatchResult:
        lookup_config = config.load_configuration(options)
        accepted = self.suppression.accepted(identifiers, lookup_config)

        outcomes = self.scheduler.run(accepted, lookup_config.api_key)
        result = assemble(outcomes)

        self.logger.debug(
            "Lookup Results",
            extra={"accepted": len(accepted), "results": len(result), "errors": len(result.errors)},
        )
        return result

    def lookup(
        self, entities: Iterable[Mapping[str, Any]], options: Mapping[str, Any]
    ) -> list[dict[str, Any]]:
        """Look up host entities and return JSON-ready result dicts.

        Raises ConfigurationError for bad options or entities, and a
        BatchLookupError subclass when running in fail-fast mode.
        """
        identifiers = [Identifier.from_entity(dict(e)) for e in entities]
        return self.lookup_identifiers(identifiers, options).to_list()

    def validate_options(self, options: Mapping[str, Any]) -> list[dict[str, str]]:
        return config.validate_options(options)


_integration: Optional[EmailRepIntegration] = None


def initialize(
    logger: Optional[logging.Logger] = None, settings: Optional[RequestSettings] = None
) -> EmailRepIntegration:
    """Build the process-wide integration (TLS material and proxy are read here)."""
    global _integration
    _integration = EmailRepIntegration(settings or RequestSettings.from_env(), logger=logger)
    return _integration


def get_integration() -> EmailRepIntegration:
    if _integration is None:
        return initialize()
    return _integration


def lookup(entities: Iterable[Mapping[str, Any]], options: Mapping[str, Any]) -> list[dict[str, Any]]:
    return get_integration().lookup(entities, options)


def validate_options(options: Mapping[str, Any]) -> list[dict[str, str]]:
    return config.validate_options(options)
