"""Descriptor-based factory for Elasticsearch logging components.

Purpose
-------
Let container-style hosts create loggers from a five-part component
descriptor (``group:type:kind:name:version``) instead of importing the class.

Contents
--------
* :class:`Descriptor` - component locator with ``*`` wildcards.
* :class:`DefaultElasticSearchFactory` - creates :class:`ElasticSearchLogger`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from lib_log_elastic.elastic_logger import ElasticSearchLogger

WILDCARD = "*"


@dataclass(slots=True, frozen=True)
class Descriptor:
    """Five-part component locator.

    Examples
    --------
    >>> Descriptor.parse("pip-services:logger:elasticsearch:default:1.0").kind
    'elasticsearch'
    >>> Descriptor("pip-services", "logger", "elasticsearch", "*", "1.0").match(
    ...     Descriptor("pip-services", "logger", "elasticsearch", "default", "1.0"))
    True
    """

    group: str
    type: str
    kind: str
    name: str
    version: str

    @classmethod
    def parse(cls, text: str) -> "Descriptor":
        parts = text.split(":")
        if len(parts) != 5:
            raise ValueError(f"Descriptor must have 5 parts separated by ':': {text!r}")
        return cls(*parts)

    def match(self, other: "Descriptor") -> bool:
        """Return ``True`` when every non-wildcard part equals ``other``'s."""

        return all(
            mine == WILDCARD or theirs == WILDCARD or mine == theirs
            for mine, theirs in zip(self._parts(), other._parts())
        )

    def _parts(self) -> tuple[str, ...]:
        return (self.group, self.type, self.kind, self.name, self.version)

    def __str__(self) -> str:
        return ":".join(self._parts())


class DefaultElasticSearchFactory:
    """Create Elasticsearch components by their descriptors.

    Examples
    --------
    >>> factory = DefaultElasticSearchFactory()
    >>> factory.can_create(Descriptor("pip-services", "logger", "elasticsearch", "default", "1.0"))
    True
    >>> factory.can_create(Descriptor("pip-services", "logger", "console", "default", "1.0"))
    False
    """

    descriptor = Descriptor("pip-services", "factory", "elasticsearch", "default", "1.0")
    logger_descriptor = Descriptor("pip-services", "logger", "elasticsearch", WILDCARD, "1.0")

    def __init__(self) -> None:
        self._registrations: list[tuple[Descriptor, Callable[[], Any]]] = []
        self.register(self.logger_descriptor, ElasticSearchLogger)

    def register(self, locator: Descriptor, builder: Callable[[], Any]) -> None:
        self._registrations.append((locator, builder))

    def can_create(self, locator: Descriptor | str) -> bool:
        return self._find(locator) is not None

    def create(self, locator: Descriptor | str) -> Any:
        """Return a new component for ``locator``.

        Raises
        ------
        LookupError
            When no registration matches.
        """

        builder = self._find(locator)
        if builder is None:
            raise LookupError(f"Cannot create component for {locator}")
        return builder()

    def _find(self, locator: Descriptor | str) -> Callable[[], Any] | None:
        wanted = Descriptor.parse(locator) if isinstance(locator, str) else locator
        for registered, builder in self._registrations:
            if registered.match(wanted):
                return builder
        return None


__all__ = ["DefaultElasticSearchFactory", "Descriptor"]
