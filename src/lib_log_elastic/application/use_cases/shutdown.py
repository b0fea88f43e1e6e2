"""Shutdown orchestration for an open logger.

Purpose
-------
Provide a unified close routine that writes what is left in the cache, stops
the timer, and releases the backend session.
"""

from __future__ import annotations

import logging
from typing import Callable

from lib_log_elastic.application.ports.storage import StorageClientPort
from lib_log_elastic.application.ports.timer import TimerPort

logger = logging.getLogger(__name__)


def create_shutdown(
    *,
    final_flush: Callable[[], int],
    timer: TimerPort | None,
    storage: StorageClientPort | None,
    clear_state: Callable[[], None],
) -> Callable[[], None]:
    """Return a callable performing the shutdown sequence.

    The final flush is attempted once. Its failure never stops the teardown;
    the error is raised after the session is closed and the state cleared.
    """

    def shutdown() -> None:
        """Flush once, stop the timer, close the session, clear the state."""
        failure: Exception | None = None
        try:
            final_flush()
        except Exception as exc:
            logger.warning("Final flush failed during close; records remain in the cache", exc_info=exc)
            failure = exc
        try:
            if timer is not None:
                timer.stop()
            if storage is not None:
                storage.close()
        finally:
            clear_state()
        if failure is not None:
            raise failure

    return shutdown


__all__ = ["create_shutdown"]
