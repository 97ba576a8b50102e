"""Retry helper for optimistic read-modify-write cycles."""

import logging
from collections.abc import Callable
from typing import TypeVar

from fitness_tracker.domain.errors import ConflictRetryable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_conflict(operation: Callable[[], T], attempts: int = 3) -> T:
    """Run an operation, re-running it from a fresh read on version conflicts.

    The operation must perform its own load, so each attempt starts from the
    latest stored record. The last conflict is re-raised once attempts run out.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except ConflictRetryable as exc:
            if attempt == attempts:
                logger.warning(
                    "Giving up on %s %s after %d attempts",
                    exc.entity,
                    exc.entity_id,
                    attempts,
                )
                raise
            logger.warning(
                "Conflict on %s %s, retrying (attempt %d of %d)",
                exc.entity,
                exc.entity_id,
                attempt,
                attempts,
            )
    raise AssertionError("unreachable")
