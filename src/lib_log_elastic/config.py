"""Configuration parsing and ``.env`` integration.

Purpose
-------
Turn the flat, dotted-key configuration mapping accepted by
:meth:`lib_log_elastic.ElasticSearchLogger.configure` into validated, frozen
settings objects, and let ``LOG_ELASTIC_*`` environment variables (optionally
sourced from a ``.env`` file) override them.

Contents
--------
* :class:`ConnectionSettings` / :class:`LoggerSettings` - resolved values.
* :func:`build_settings` - merge defaults, mapping and environment.
* :func:`enable_dotenv` / :func:`should_use_dotenv` - opt-in ``.env`` loading.

System Role
-----------
Shared by the logger, the runtime façade and the CLI so every entry point
applies the same precedence: environment > explicit mapping > current
settings > defaults.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from lib_log_elastic.domain.index_naming import DatePattern, IndexDescriptor, IndexRotation
from lib_log_elastic.domain.levels import LogLevel

logger = logging.getLogger(__name__)

ENV_PREFIX = "LOG_ELASTIC_"
DOTENV_ENV_VAR = "LOG_ELASTIC_USE_DOTENV"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

#: Keys that may also be written with an ``options.`` prefix.
_OPTION_KEYS = frozenset(
    {
        "interval",
        "max_cache_size",
        "index",
        "date_format",
        "daily",
        "reconnect",
        "timeout",
        "max_retries",
        "index_message",
    }
)

#: Environment suffix -> canonical configuration key.
_ENV_KEYS: Mapping[str, str] = {
    "LEVEL": "level",
    "SOURCE": "source",
    "DISCOVERY_KEY": "connection.discovery_key",
    "PROTOCOL": "connection.protocol",
    "HOST": "connection.host",
    "PORT": "connection.port",
    "URI": "connection.uri",
    "INTERVAL": "interval",
    "MAX_CACHE_SIZE": "max_cache_size",
    "INDEX": "index",
    "DATE_FORMAT": "date_format",
    "DAILY": "daily",
    "RECONNECT": "reconnect",
    "TIMEOUT": "timeout",
    "MAX_RETRIES": "max_retries",
    "INDEX_MESSAGE": "index_message",
}


@dataclass(slots=True, frozen=True)
class ConnectionSettings:
    """Connection parameters as configured, before resolution."""

    discovery_key: str | None = None
    protocol: str = "http"
    host: str | None = None
    port: int = 9200
    uri: str | None = None

    @property
    def configured(self) -> bool:
        """Return ``True`` when any way of reaching a node was configured."""

        return bool(self.uri or self.host or self.discovery_key)


@dataclass(slots=True, frozen=True)
class LoggerSettings:
    """Validated logger configuration.

    Time values are kept in milliseconds, the unit used by the configuration
    keys; the ``*_seconds`` helpers convert for the timer and the client.
    """

    level: LogLevel = LogLevel.INFO
    source: str | None = None
    connection: ConnectionSettings = field(default_factory=ConnectionSettings)
    interval: int = 10000
    max_cache_size: int = 100
    index: str = "log"
    date_format: str = "yyyyMMdd"
    daily: bool = False
    reconnect: int = 60000
    timeout: int = 30000
    max_retries: int = 3
    index_message: bool = False

    @property
    def interval_seconds(self) -> float:
        return self.interval / 1000

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000

    @property
    def reconnect_seconds(self) -> float:
        return self.reconnect / 1000

    def index_descriptor(self) -> IndexDescriptor:
        """Return the index descriptor described by these settings.

        Examples
        --------
        >>> LoggerSettings(index="app", daily=True).index_descriptor().rotates
        True
        """

        rotation = IndexRotation(DatePattern(self.date_format)) if self.daily else None
        return IndexDescriptor(self.index, rotation)


def _canonical_key(key: str) -> str:
    """Strip the ``options.`` alias so both spellings land on one key."""

    text = key.strip()
    if text.startswith("options."):
        candidate = text[len("options.") :]
        if candidate in _OPTION_KEYS:
            return candidate
    return text


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")


def _parse_int(key: str, value: Any, *, minimum: int = 1, maximum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        number = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc
    if number < minimum:
        raise ValueError(f"{key} must be >= {minimum}, got {number}")
    if maximum is not None and number > maximum:
        raise ValueError(f"{key} must be <= {maximum}, got {number}")
    return number


def _parse_text(key: str, value: Any, *, allow_empty: bool = True) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        if allow_empty:
            return None
        raise ValueError(f"{key} must not be empty")
    return text


def _parse_level(key: str, value: Any) -> LogLevel:
    try:
        return LogLevel.coerce(value)
    except ValueError as exc:
        raise ValueError(f"{key}: {exc}") from exc


def _parse_date_format(key: str, value: Any) -> str:
    text = _parse_text(key, value, allow_empty=False)
    if text is None:
        raise ValueError(f"{key} must not be empty")
    try:
        DatePattern(text)
    except ValueError as exc:
        raise ValueError(f"{key}: {exc}") from exc
    return text


def _environment_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect non-empty ``LOG_ELASTIC_*`` values keyed by configuration key."""

    overrides: dict[str, str] = {}
    for suffix, key in _ENV_KEYS.items():
        raw = environ.get(f"{ENV_PREFIX}{suffix}")
        if raw is not None and raw.strip():
            overrides[key] = raw
    return overrides


def build_settings(
    config: Mapping[str, Any] | None = None,
    *,
    base: LoggerSettings | None = None,
    environ: Mapping[str, str] | None = None,
) -> LoggerSettings:
    """Merge ``config`` and environment overrides onto ``base``.

    Parameters
    ----------
    config:
        Flat mapping of dotted keys (``connection.host``, ``options.interval``
        ...). Unknown keys are ignored.
    base:
        Settings supplying values for keys absent from ``config``. Defaults to
        :class:`LoggerSettings` defaults.
    environ:
        Environment consulted for ``LOG_ELASTIC_*`` overrides. Defaults to
        :data:`os.environ`.

    Raises
    ------
    ValueError
        When a value cannot be parsed; the message names the offending key.

    Examples
    --------
    >>> settings = build_settings({"connection.host": "es", "options.daily": "true"}, environ={})
    >>> settings.connection.host, settings.daily
    ('es', True)
    >>> build_settings({"options.interval": "0"}, environ={})
    Traceback (most recent call last):
    ...
    ValueError: interval must be >= 1, got 0
    """

    settings = base or LoggerSettings()
    merged: dict[str, Any] = {}
    for key, value in (config or {}).items():
        merged[_canonical_key(key)] = value
    merged.update(_environment_overrides(os.environ if environ is None else environ))

    connection = settings.connection
    connection_changes: dict[str, Any] = {}
    if "connection.discovery_key" in merged:
        connection_changes["discovery_key"] = _parse_text("connection.discovery_key", merged["connection.discovery_key"])
    if "connection.protocol" in merged:
        protocol = _parse_text("connection.protocol", merged["connection.protocol"], allow_empty=False)
        connection_changes["protocol"] = (protocol or "http").lower()
    if "connection.host" in merged:
        connection_changes["host"] = _parse_text("connection.host", merged["connection.host"])
    if "connection.port" in merged:
        connection_changes["port"] = _parse_int("connection.port", merged["connection.port"], maximum=65535)
    if "connection.uri" in merged:
        connection_changes["uri"] = _parse_text("connection.uri", merged["connection.uri"])
    if connection_changes:
        connection = replace(connection, **connection_changes)

    changes: dict[str, Any] = {"connection": connection}
    if "level" in merged:
        changes["level"] = _parse_level("level", merged["level"])
    if "source" in merged:
        changes["source"] = _parse_text("source", merged["source"])
    for key in ("interval", "max_cache_size", "reconnect", "timeout"):
        if key in merged:
            changes[key] = _parse_int(key, merged[key])
    if "max_retries" in merged:
        changes["max_retries"] = _parse_int("max_retries", merged["max_retries"], minimum=0)
    if "index" in merged:
        changes["index"] = _parse_text("index", merged["index"], allow_empty=False)
    if "date_format" in merged:
        changes["date_format"] = _parse_date_format("date_format", merged["date_format"])
    for key in ("daily", "index_message"):
        if key in merged:
            changes[key] = _parse_bool(key, merged[key])

    return replace(settings, **changes)


_DOTENV_LOADED_PATH: Path | None = None
_DOTENV_ATTEMPTED = False


def _find_dotenv_upwards(start: Path) -> Path | None:
    directory = start if start.is_dir() else start.parent
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / ".env"
        if candidate.is_file():
            return candidate
    return None


def enable_dotenv(*, search_path: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` file into :data:`os.environ`.

    Existing environment variables keep precedence. The lookup runs once per
    process; later calls return the path loaded by the first one.

    Parameters
    ----------
    search_path:
        Directory to start the upward search from. Defaults to the current
        working directory.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, or ``None`` when none was found.
    """

    global _DOTENV_LOADED_PATH, _DOTENV_ATTEMPTED
    if _DOTENV_ATTEMPTED:
        return _DOTENV_LOADED_PATH
    _DOTENV_ATTEMPTED = True

    if search_path is not None:
        found = _find_dotenv_upwards(search_path.resolve())
    else:
        located = find_dotenv(usecwd=True)
        found = Path(located) if located else None

    if found is None:
        logger.debug("No .env file found")
        return None

    load_dotenv(found, override=False)
    _DOTENV_LOADED_PATH = found.resolve()
    logger.debug("Loaded environment from %s", _DOTENV_LOADED_PATH)
    return _DOTENV_LOADED_PATH


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is requested.

    An explicit CLI flag wins; otherwise the ``LOG_ELASTIC_USE_DOTENV`` value
    decides.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        env_value = os.environ.get(DOTENV_ENV_VAR)
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUE_VALUES


def _reset_dotenv_state_for_testing() -> None:
    """Forget earlier :func:`enable_dotenv` calls."""

    global _DOTENV_LOADED_PATH, _DOTENV_ATTEMPTED
    _DOTENV_LOADED_PATH = None
    _DOTENV_ATTEMPTED = False


__all__ = [
    "ConnectionSettings",
    "DOTENV_ENV_VAR",
    "ENV_PREFIX",
    "LoggerSettings",
    "build_settings",
    "enable_dotenv",
    "should_use_dotenv",
]
