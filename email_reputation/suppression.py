"""Suppression (blocklist) filtering.

An identifier is suppressed when it is on the exact-match blocklist, or when
its domain matches the configured domain regex. Suppressed identifiers are
never looked up and produce no result entry.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .models import Identifier, LookupConfiguration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledPattern:
    source: str
    regex: Optional[re.Pattern[str]] = None


class PatternCache:
    """Holds the last compiled domain pattern.

    Readers grab the current immutable state without locking; writers compile
    and swap under a lock, so a batch never sees a half-updated pattern.
    """

    def __init__(self, logger: logging.Logger = logger):
        self._state = CompiledPattern(source="")
        self._lock = threading.Lock()
        self._logger = logger
        self.compilations = 0

    @property
    def current(self) -> CompiledPattern:
        return self._state

    def ensure_compiled(self, pattern: str) -> Optional[re.Pattern[str]]:
        state = self._state
        if pattern == state.source:
            return state.regex

        with self._lock:
            # Another writer may have swapped in the same pattern meanwhile.
            state = self._state
            if pattern == state.source:
                return state.regex

            if not pattern:
                self._logger.debug("Removing Domain Blocklist Regex Filtering")
                self._state = CompiledPattern(source="")
                return None

            try:
                regex = re.compile(pattern, re.IGNORECASE)
            except re.error as e:
                raise ConfigurationError(
                    f"Invalid domain blocklist regex {pattern!r}: {e}",
                    field="domainBlocklistRegex",
                ) from e

            self._logger.debug(
                "Modifying Domain Blocklist Regex",
                extra={"domain_blocklist_regex": pattern},
            )
            self._state = CompiledPattern(source=pattern, regex=regex)
            self.compilations += 1
            return regex


class SuppressionFilter:
    def __init__(self, cache: Optional[PatternCache] = None, logger: logging.Logger = logger):
        self._logger = logger
        self.cache = cache if cache is not None else PatternCache(logger)

    def should_suppress(
        self,
        identifier: Identifier,
        config: LookupConfiguration,
        pattern: Optional[re.Pattern[str]],
    ) -> bool:
        if identifier.value.lower() in config.blocklist:
            self._logger.debug(
                "Blocked BlockListed Entity Lookup",
                extra={"identifier": identifier.value, "reason": "blocklist"},
            )
            return True

        domain = identifier.domain
        if pattern is not None and domain is not None and pattern.search(domain):
            self._logger.debug(
                "Blocked BlockListed Domain Lookup",
                extra={"identifier": identifier.value, "reason": "domain_regex"},
            )
            return True

        return False

    def accepted(
        self, identifiers: Iterable[Identifier], config: LookupConfiguration
    ) -> list[Identifier]:
        """Return the identifiers that should be looked up, in input order.

        The pattern is resolved once so the whole batch uses a single version.
        """
        pattern = self.cache.ensure_compiled(config.domain_blocklist_regex)
        return [i for i in identifiers if not self.should_suppress(i, config, pattern)]
