"""Ports (protocols) the application layer depends on."""

from __future__ import annotations

from .connection import ConnectionResolverPort, DiscoveryPort
from .console import ConsolePort
from .storage import BulkDocument, BulkResponse, StorageClientPort
from .time import ClockPort, IdProvider
from .timer import TimerPort

__all__ = [
    "BulkDocument",
    "BulkResponse",
    "ClockPort",
    "ConnectionResolverPort",
    "ConsolePort",
    "DiscoveryPort",
    "IdProvider",
    "StorageClientPort",
    "TimerPort",
]
