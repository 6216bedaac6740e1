# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Cooperative cancellation signal shared by analysis tasks."""

import logging

logger = logging.getLogger(__name__)


class CancellationToken:
    """Signal that pending analysis work should stop.

    The token is only polled; in-flight engine evaluation is never interrupted.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation of not-yet-started work."""
        if not self._cancelled:
            logger.debug("Cancellation requested")
        self._cancelled = True
