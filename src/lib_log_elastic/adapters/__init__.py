"""Adapter implementations bridging the ports to concrete infrastructure.

Purpose
-------
Collect the outward-facing pieces (Elasticsearch client, timer thread, Rich
console, system clock) in one namespace for the composition code.
"""

from __future__ import annotations

from .clock import SystemClock, UuidProvider
from .connection import ConfigConnectionResolver, StaticDiscovery
from .console import RichConsoleAdapter
from .elasticsearch import ElasticsearchStorageAdapter
from .memory import InMemoryStorageAdapter
from .timer import PeriodicTimer

__all__ = [
    "ConfigConnectionResolver",
    "ElasticsearchStorageAdapter",
    "InMemoryStorageAdapter",
    "PeriodicTimer",
    "RichConsoleAdapter",
    "StaticDiscovery",
    "SystemClock",
    "UuidProvider",
]
