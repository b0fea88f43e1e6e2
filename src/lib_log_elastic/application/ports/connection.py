"""Ports for connection resolution and discovery."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_elastic.domain.connection import ConnectionTarget


@runtime_checkable
class DiscoveryPort(Protocol):
    """Look up a connection URI registered under a discovery key."""

    def resolve(self, correlation_id: str | None, key: str) -> str | None:
        """Return the URI registered for ``key`` or ``None``."""


@runtime_checkable
class ConnectionResolverPort(Protocol):
    """Resolve the backend endpoint when the logger opens."""

    def resolve(self, correlation_id: str | None) -> ConnectionTarget | None:
        """Return the endpoint, or ``None`` when nothing is configured."""


__all__ = ["ConnectionResolverPort", "DiscoveryPort"]
