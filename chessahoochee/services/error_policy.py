"""What bindings do with storage failures."""

from __future__ import annotations

import enum
import logging

from chessahoochee.db.partitions import StoreError
from chessahoochee.settings import get_io_error_policy

logger = logging.getLogger(__name__)


class IoErrorPolicy(enum.Enum):
    # Log and keep the last known in-memory state.
    LOG = "log"
    # Log, then surface the error from ``settled()``.
    RAISE = "raise"

    @classmethod
    def from_settings(cls) -> IoErrorPolicy:
        value = get_io_error_policy()
        try:
            return cls(value)
        except ValueError:
            logger.warning("unknown io_error_policy %r, falling back to %r", value, cls.LOG.value)
            return cls.LOG

    def handle(self, error: StoreError, context: str) -> StoreError | None:
        """Report ``error``; return it when it should be surfaced to the caller."""
        logger.warning("%s: %s", context, error, exc_info=error)
        if self is IoErrorPolicy.RAISE:
            return error
        return None
