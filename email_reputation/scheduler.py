"""Bounded-concurrency batch runner."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Optional

from .client import ReputationClient
from .errors import BatchLookupError, RateLimitError, TransportError, UpstreamError
from .models import (
    CONCURRENCY_LIMIT,
    Identifier,
    LookupOutcome,
    RateLimited,
    TransportFailure,
    UpstreamFailure,
)

logger = logging.getLogger(__name__)


def fatal_error(identifier: Identifier, outcome: LookupOutcome) -> Optional[BatchLookupError]:
    """Return the batch error an outcome maps to in fail-fast mode, if any."""
    if isinstance(outcome, TransportFailure):
        return TransportError(identifier.value, outcome.cause)
    if isinstance(outcome, UpstreamFailure):
        return UpstreamError(identifier.value, outcome.status, outcome.body)
    if isinstance(outcome, RateLimited):
        return RateLimitError(identifier.value, outcome.counters)
    return None


class BatchScheduler:
    """Run lookups with at most `concurrency_limit` requests in flight.

    With fail_fast=False every outcome is returned and failures stay attached
    to their identifier. With fail_fast=True the first transport, upstream or
    rate-limit outcome aborts the batch: nothing new is dispatched, in-flight
    lookups drain and are discarded, and the matching error is raised.
    """

    def __init__(
        self,
        client: ReputationClient,
        *,
        concurrency_limit: int = CONCURRENCY_LIMIT,
        fail_fast: bool = False,
        logger: logging.Logger = logger,
    ):
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be >= 1")
        self.client = client
        self.concurrency_limit = concurrency_limit
        self.fail_fast = fail_fast
        self._logger = logger

    def run(
        self, identifiers: Sequence[Identifier], api_key: str
    ) -> list[tuple[Identifier, LookupOutcome]]:
        """Return (identifier, outcome) pairs in input order."""
        if not identifiers:
            return []

        outcomes: dict[int, LookupOutcome] = {}
        fatal: Optional[BatchLookupError] = None

        with ThreadPoolExecutor(max_workers=self.concurrency_limit) as executor:
            pending: set[Future[LookupOutcome]] = set()
            meta: dict[Future[LookupOutcome], int] = {}

            def collect(done: set[Future[LookupOutcome]]) -> Optional[BatchLookupError]:
                latched = None
                for d in done:
                    idx = meta.pop(d)
                    outcome = d.result()
                    outcomes[idx] = outcome
                    if self.fail_fast and latched is None:
                        latched = fatal_error(identifiers[idx], outcome)
                return latched

            for idx, identifier in enumerate(identifiers):
                if len(pending) >= self.concurrency_limit:
                    done, pending = wait(pending, return_when=FIRST_COMPLETED)
                    fatal = collect(done)
                    if fatal is not None:
                        break

                fut = executor.submit(self.client.lookup, identifier, api_key)
                pending.add(fut)
                meta[fut] = idx

            # Drain whatever is still in flight; after a fatal outcome the
            # results are discarded.
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                latched = collect(done)
                if fatal is None:
                    fatal = latched

        if fatal is not None:
            self._logger.error(
                "Aborting lookup batch",
                extra={"identifier": fatal.identifier, "detail": fatal.detail},
            )
            raise fatal

        return [(identifier, outcomes[idx]) for idx, identifier in enumerate(identifiers)]
