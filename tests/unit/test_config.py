"""Tests for settings loading."""

import pytest

from fabtcg_bot.core.config import (
    DEFAULT_FABDB_ENDPOINT,
    DEFAULT_HTTP_ADDR,
    MetricsSettings,
    Settings,
    load_settings,
    parse_admin_ids,
    parse_bool,
    parse_http_addr,
)
from fabtcg_bot.core.errors import ConfigurationError


class TestParseBool:
    """Tests for parse_bool."""

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", " yes ", "on"])
    def test_true_values(self, value: str) -> None:
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "No", "off"])
    def test_false_values(self, value: str) -> None:
        assert parse_bool(value) is False

    def test_invalid_value(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_bool("maybe")


class TestParseAdminIds:
    """Tests for parse_admin_ids."""

    def test_repeated_and_comma_separated(self) -> None:
        assert parse_admin_ids(["1,2", "3", " 4 , 5 "]) == (1, 2, 3, 4, 5)

    def test_empty_values_are_skipped(self) -> None:
        assert parse_admin_ids([""]) == ()
        assert parse_admin_ids(["1,,2,"]) == (1, 2)

    def test_non_numeric_id(self) -> None:
        with pytest.raises(ConfigurationError, match="invalid telegram admin id"):
            parse_admin_ids(["12,abc"])


class TestParseHttpAddr:
    """Tests for parse_http_addr."""

    def test_host_and_port(self) -> None:
        assert parse_http_addr("127.0.0.1:9090") == ("127.0.0.1", 9090)

    def test_empty_host_listens_everywhere(self) -> None:
        assert parse_http_addr(":8080") == ("0.0.0.0", 8080)

    def test_ipv6_host(self) -> None:
        assert parse_http_addr("[::1]:8080") == ("::1", 8080)

    @pytest.mark.parametrize("addr", ["8080", "localhost:http", "localhost:70000"])
    def test_invalid_address(self, addr: str) -> None:
        with pytest.raises(ConfigurationError):
            parse_http_addr(addr)


class TestSettings:
    """Tests for Settings validation."""

    def test_defaults(self) -> None:
        settings = Settings(token="123:abc")

        assert settings.admins == ()
        assert settings.http_addr == DEFAULT_HTTP_ADDR
        assert settings.http_host == "0.0.0.0"
        assert settings.http_port == 8080
        assert settings.log_level == "info"
        assert settings.fabdb_endpoint == DEFAULT_FABDB_ENDPOINT
        assert settings.metrics == MetricsSettings()

    def test_token_is_required(self) -> None:
        with pytest.raises(ConfigurationError, match="telegram token is required"):
            Settings(token="")

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ConfigurationError):
            Settings(token="123:abc", log_level="verbose")

    def test_invalid_http_addr(self) -> None:
        with pytest.raises(ConfigurationError):
            Settings(token="123:abc", http_addr="nope")


class TestLoadSettings:
    """Tests for load_settings."""

    def test_from_environment(self) -> None:
        env = {
            "TELEGRAM_TOKEN": "123:abc",
            "TELEGRAM_ADMINS": "42,7",
            "HTTP_ADDR": ":9000",
            "LOG_LEVEL": "DEBUG",
            "METRICS_ENABLED": "false",
            "METRICS_PREFIX": "mybot",
            "METRICS_PROFILE": "0",
            "METRICS_RUNTIME": "no",
            "FABDB_ENDPOINT": "http://localhost:9001",
        }

        settings = load_settings([], env)

        assert settings.token == "123:abc"
        assert settings.admins == (42, 7)
        assert settings.http_port == 9000
        assert settings.log_level == "debug"
        assert settings.fabdb_endpoint == "http://localhost:9001"
        assert settings.metrics == MetricsSettings(
            enabled=False, prefix="mybot", profile=False, runtime=False
        )

    def test_flags_override_environment(self) -> None:
        env = {"TELEGRAM_TOKEN": "from-env", "LOG_LEVEL": "error", "TELEGRAM_ADMINS": "1"}

        settings = load_settings(
            [
                "--telegram.token", "from-flag",
                "--log.level", "warn",
                "--telegram.admin", "5",
                "--telegram.admin", "6",
                "--metrics.prefix", "flagged",
                "--http.addr", "127.0.0.1:8081",
            ],
            env,
        )

        assert settings.token == "from-flag"
        assert settings.log_level == "warn"
        assert settings.admins == (5, 6)
        assert settings.metrics.prefix == "flagged"
        assert settings.http_host == "127.0.0.1"

    def test_defaults_with_only_token(self) -> None:
        settings = load_settings(["--telegram.token", "123:abc"], {})

        assert settings.admins == ()
        assert settings.http_addr == DEFAULT_HTTP_ADDR
        assert settings.metrics.enabled is True
        assert settings.metrics.profile is True
        assert settings.metrics.runtime is True

    def test_missing_token(self) -> None:
        with pytest.raises(ConfigurationError):
            load_settings([], {})

    def test_invalid_boolean_in_environment(self) -> None:
        with pytest.raises(ConfigurationError):
            load_settings([], {"TELEGRAM_TOKEN": "x", "METRICS_ENABLED": "sometimes"})

    def test_invalid_log_level_flag_exits(self) -> None:
        """argparse rejects an unknown level before settings are built."""
        with pytest.raises(SystemExit):
            load_settings(["--log.level", "trace"], {"TELEGRAM_TOKEN": "x"})
