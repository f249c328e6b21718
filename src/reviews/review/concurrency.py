"""Retry-on-conflict for commands that read-modify-write a Review.

Repositories check the aggregate version on save; a concurrent write to the
same review surfaces as ExpectedVersionError. The whole command (load,
compute, save) is re-run against fresh state a bounded number of times.
"""

import os

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

DEFAULT_CONFLICT_RETRIES = 3


def conflict_retries() -> int:
    return max(1, int(os.environ.get("VOTE_CONFLICT_RETRIES", DEFAULT_CONFLICT_RETRIES)))


def process_with_retry(command, attempts: int | None = None):
    """Process `command` synchronously, re-running it on version conflicts.

    Re-raises ExpectedVersionError once `attempts` are exhausted.
    """
    attempts = attempts or conflict_retries()
    for attempt in range(1, attempts + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError:
            if attempt == attempts:
                logger.warning(
                    "Giving up after concurrent modification",
                    command=type(command).__name__,
                    attempts=attempts,
                )
                raise
            logger.info(
                "Concurrent modification detected, retrying",
                command=type(command).__name__,
                attempt=attempt,
            )
