"""Resolved endpoint of the storage backend."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

DEFAULT_PORT = 9200

#: Ports implied by an explicit scheme when the URI names none.
SCHEME_PORTS = {"http": 80, "https": 443}


@dataclass(slots=True, frozen=True)
class ConnectionTarget:
    """Scheme, host and port of an Elasticsearch node.

    Examples
    --------
    >>> ConnectionTarget("http", "localhost", 9200).uri
    'http://localhost:9200'
    >>> ConnectionTarget.from_uri("https://es.example:9243/").port
    9243
    >>> ConnectionTarget.from_uri("https://es.example").uri
    'https://es.example:443'
    >>> ConnectionTarget.from_uri("http://[::1]:9200").uri
    'http://[::1]:9200'
    """

    protocol: str
    host: str
    port: int = DEFAULT_PORT
    path: str = ""

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("connection host must not be empty")
        object.__setattr__(self, "protocol", self.protocol.lower())

    @property
    def uri(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.protocol}://{host}:{self.port}{self.path}"

    @classmethod
    def from_uri(cls, uri: str) -> "ConnectionTarget":
        """Parse a full URI.

        A bare ``host[:port]`` defaults to ``http`` and port 9200. An explicit
        scheme without a port uses that scheme's standard port.
        """

        text = uri.strip()
        explicit_scheme = "://" in text
        if not explicit_scheme:
            text = f"http://{text}"
        parts = urlsplit(text)
        if not parts.hostname:
            raise ValueError(f"connection uri has no host: {uri!r}")
        protocol = (parts.scheme or "http").lower()
        port = parts.port
        if port is None:
            port = SCHEME_PORTS.get(protocol, DEFAULT_PORT) if explicit_scheme else DEFAULT_PORT
        return cls(
            protocol=protocol,
            host=parts.hostname,
            port=port,
            path=parts.path.rstrip("/"),
        )


__all__ = ["ConnectionTarget", "DEFAULT_PORT", "SCHEME_PORTS"]
