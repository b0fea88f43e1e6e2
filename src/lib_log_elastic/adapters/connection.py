"""Connection resolution from configuration with optional discovery.

Purpose
-------
Produce the :class:`ConnectionTarget` used when the logger opens.

Contents
--------
* :class:`ConfigConnectionResolver` - implementation of
  :class:`ConnectionResolverPort` backed by :class:`ConnectionSettings`.
* :class:`StaticDiscovery` - mapping-backed :class:`DiscoveryPort`.

System Role
-----------
Consulted once per ``open``. Precedence: ``connection.uri`` first, then the
URI registered under ``connection.discovery_key``, then
``connection.protocol``/``host``/``port``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from lib_log_elastic.application.ports.connection import ConnectionResolverPort, DiscoveryPort
from lib_log_elastic.config import ConnectionSettings
from lib_log_elastic.domain.connection import ConnectionTarget
from lib_log_elastic.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_PROTOCOLS = frozenset({"http", "https"})


class StaticDiscovery(DiscoveryPort):
    """Serve discovery lookups from a fixed mapping.

    Examples
    --------
    >>> StaticDiscovery({"es": "http://es:9200"}).resolve(None, "es")
    'http://es:9200'
    """

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries = dict(entries or {})

    def register(self, key: str, uri: str) -> None:
        self._entries[key] = uri

    def resolve(self, correlation_id: str | None, key: str) -> str | None:
        return self._entries.get(key)


class ConfigConnectionResolver(ConnectionResolverPort):
    """Resolve the backend endpoint from configured settings.

    Examples
    --------
    >>> resolver = ConfigConnectionResolver(ConnectionSettings(host="localhost"))
    >>> resolver.resolve(None).uri
    'http://localhost:9200'
    >>> ConfigConnectionResolver(ConnectionSettings()).resolve(None) is None
    True
    """

    def __init__(self, settings: ConnectionSettings, discovery: DiscoveryPort | None = None) -> None:
        self._settings = settings
        self._discovery = discovery

    def resolve(self, correlation_id: str | None) -> ConnectionTarget | None:
        """Return the configured endpoint or ``None`` when nothing is set.

        Raises
        ------
        ConfigurationError
            ``WRONG_PROTOCOL`` for schemes other than http/https and
            ``WRONG_CONNECTION`` for URIs that cannot be parsed.
        """

        settings = self._settings
        target: ConnectionTarget | None = None
        if settings.uri:
            target = self._parse_uri(correlation_id, settings.uri)
        elif settings.discovery_key and self._discovery is not None:
            discovered = self._discovery.resolve(correlation_id, settings.discovery_key)
            if discovered:
                logger.debug("Resolved connection via discovery key %s", settings.discovery_key)
                target = self._parse_uri(correlation_id, discovered)
        if target is None and settings.host:
            target = ConnectionTarget(settings.protocol, settings.host, settings.port)
        if target is None:
            return None

        if target.protocol not in SUPPORTED_PROTOCOLS:
            raise ConfigurationError(
                correlation_id,
                "WRONG_PROTOCOL",
                f"Protocol is not supported by Elasticsearch connection: {target.protocol}",
                details={"protocol": target.protocol},
            )
        return target

    @staticmethod
    def _parse_uri(correlation_id: str | None, uri: str) -> ConnectionTarget:
        try:
            return ConnectionTarget.from_uri(uri)
        except ValueError as exc:
            raise ConfigurationError(
                correlation_id,
                "WRONG_CONNECTION",
                f"Connection uri is invalid: {uri}",
                details={"uri": uri},
            ) from exc


__all__ = ["ConfigConnectionResolver", "SUPPORTED_PROTOCOLS", "StaticDiscovery"]
