from __future__ import annotations

import pytest

from lib_log_elastic.config import ConnectionSettings, LoggerSettings, build_settings
from lib_log_elastic.domain.levels import LogLevel


def test_defaults_match_the_documented_values() -> None:
    settings = build_settings(environ={})

    assert settings == LoggerSettings()
    assert settings.level is LogLevel.INFO
    assert settings.interval_seconds == 10.0
    assert settings.max_cache_size == 100
    assert settings.index == "log"
    assert settings.date_format == "yyyyMMdd"
    assert settings.daily is False
    assert settings.connection == ConnectionSettings()
    assert settings.connection.configured is False


def test_options_prefix_and_bare_keys_are_equivalent() -> None:
    prefixed = build_settings({"options.interval": "2500", "options.daily": "yes"}, environ={})
    bare = build_settings({"interval": 2500, "daily": True}, environ={})

    assert prefixed == bare
    assert prefixed.interval_seconds == 2.5


def test_connection_keys_build_connection_settings() -> None:
    settings = build_settings(
        {"connection.protocol": "HTTPS", "connection.host": "es", "connection.port": "9243"},
        environ={},
    )

    assert settings.connection == ConnectionSettings(protocol="https", host="es", port=9243)
    assert settings.connection.configured is True


def test_environment_overrides_the_mapping() -> None:
    environ = {"LOG_ELASTIC_HOST": "from-env", "LOG_ELASTIC_DAILY": "1", "LOG_ELASTIC_LEVEL": "debug"}

    settings = build_settings({"connection.host": "from-config", "options.daily": False}, environ=environ)

    assert settings.connection.host == "from-env"
    assert settings.daily is True
    assert settings.level is LogLevel.DEBUG


def test_blank_environment_values_are_ignored() -> None:
    settings = build_settings({"options.index": "app"}, environ={"LOG_ELASTIC_INDEX": "  "})

    assert settings.index == "app"


def test_base_settings_supply_missing_keys() -> None:
    base = build_settings({"source": "svc", "options.max_cache_size": 5}, environ={})

    settings = build_settings({"options.index": "audit"}, base=base, environ={})

    assert (settings.source, settings.max_cache_size, settings.index) == ("svc", 5, "audit")


def test_unknown_keys_are_ignored() -> None:
    assert build_settings({"options.unknown": 1, "credential.user": "x"}, environ={}) == LoggerSettings()


def test_index_descriptor_reflects_rotation() -> None:
    descriptor = build_settings({"options.index": "app", "options.daily": True}, environ={}).index_descriptor()

    assert descriptor.rotates is True
    assert descriptor.base_name == "app"


@pytest.mark.parametrize(
    ("config", "message"),
    [
        ({"options.interval": 0}, "interval must be >= 1"),
        ({"options.max_cache_size": "many"}, "max_cache_size must be an integer"),
        ({"options.daily": "perhaps"}, "daily must be a boolean"),
        ({"connection.port": 70000}, "connection.port must be <= 65535"),
        ({"options.date_format": "yyyyQQ"}, "date_format"),
        ({"options.date_format": "   "}, "date_format must not be empty"),
        ({"options.index": ""}, "index must not be empty"),
        ({"level": "verbose"}, "level"),
        ({"options.max_retries": -1}, "max_retries must be >= 0"),
    ],
)
def test_invalid_values_name_the_offending_key(config: dict[str, object], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        build_settings(config, environ={})


def test_zero_retries_is_allowed() -> None:
    assert build_settings({"options.max_retries": 0}, environ={}).max_retries == 0
