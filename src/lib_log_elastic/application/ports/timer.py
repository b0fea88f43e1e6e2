"""Port describing the periodic flush timer."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TimerPort(Protocol):
    """Invoke a tick callback at a fixed interval until stopped."""

    @property
    def is_active(self) -> bool:
        """Return ``True`` while the timer is scheduled."""

    def start(self) -> None:
        """Start ticking."""

    def stop(self) -> None:
        """Cancel future ticks; a tick already running may finish."""

    def trigger(self) -> None:
        """Request an early tick without waiting for the interval."""


__all__ = ["TimerPort"]
