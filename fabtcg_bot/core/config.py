"""Runtime settings read from the environment and command-line flags.

Flags override environment variables, which override the defaults below.
Settings are validated once, when they are built.
"""

import argparse
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from os import environ

from fabtcg_bot.core.errors import ConfigurationError
from fabtcg_bot.core.logging import LOG_LEVELS

DEFAULT_HTTP_ADDR = "0.0.0.0:8080"
DEFAULT_FABDB_ENDPOINT = "https://api.fabdb.net"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def parse_bool(value: str) -> bool:
    """Parse a boolean flag or environment value.

    Raises:
        ConfigurationError: If the value is not a recognised boolean.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"invalid boolean value: {value!r}")


def parse_admin_ids(values: Sequence[str]) -> tuple[int, ...]:
    """Parse admin ids given as repeated flags and/or comma separated lists."""
    ids: list[int] = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                ids.append(int(part))
            except ValueError as ex:
                raise ConfigurationError(f"invalid telegram admin id: {part!r}") from ex
    return tuple(ids)


def parse_http_addr(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host (``":8080"``) listens on all interfaces.
    """
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ConfigurationError(f"invalid http address: {addr!r}")
    try:
        port_number = int(port)
    except ValueError as ex:
        raise ConfigurationError(f"invalid http port in address: {addr!r}") from ex
    if not 0 <= port_number <= 65535:
        raise ConfigurationError(f"http port out of range: {port_number}")
    return host.strip("[]") or "0.0.0.0", port_number


@dataclass(frozen=True)
class MetricsSettings:
    """Metrics and profiling switches."""

    enabled: bool = True
    prefix: str = ""
    profile: bool = True
    runtime: bool = True


@dataclass(frozen=True)
class Settings:
    """Validated process settings.

    Attributes:
        token: Telegram bot token.
        admins: Ids on the allowlist. Empty means everyone may use the bot.
        http_addr: ``host:port`` the metrics/health server listens on.
        log_level: One of error, warn, info, debug.
        fabdb_endpoint: Base URL of the FaB DB API.
        metrics: Metrics and profiling switches.
    """

    token: str
    admins: tuple[int, ...] = ()
    http_addr: str = DEFAULT_HTTP_ADDR
    log_level: str = "info"
    fabdb_endpoint: str = DEFAULT_FABDB_ENDPOINT
    metrics: MetricsSettings = field(default_factory=MetricsSettings)

    def __post_init__(self) -> None:
        if not self.token:
            raise ConfigurationError(
                "telegram token is required (--telegram.token or TELEGRAM_TOKEN)"
            )
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"invalid log level: {self.log_level!r}")
        parse_http_addr(self.http_addr)

    @property
    def http_host(self) -> str:
        return parse_http_addr(self.http_addr)[0]

    @property
    def http_port(self) -> int:
        return parse_http_addr(self.http_addr)[1]


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser. Unset flags stay None."""
    parser = argparse.ArgumentParser(
        prog="fabtcg-bot",
        description="Telegram bot for Flesh and Blood TCG card lookups.",
    )
    parser.add_argument(
        "--http.addr", dest="http_addr",
        help=f"The address the metrics are exposed on (default {DEFAULT_HTTP_ADDR})",
    )
    parser.add_argument(
        "--log.level", dest="log_level", choices=["error", "warn", "info", "debug"],
        help="The log level to use for filtering logs (default info)",
    )
    parser.add_argument(
        "--telegram.token", dest="token",
        help="The token used to connect with Telegram",
    )
    parser.add_argument(
        "--telegram.admin", dest="admins", action="append",
        help="The ID of a Telegram admin, may be repeated",
    )
    parser.add_argument(
        "--fabdb.endpoint", dest="fabdb_endpoint",
        help=f"Base URL of the FaB DB API (default {DEFAULT_FABDB_ENDPOINT})",
    )
    parser.add_argument("--metrics.enabled", dest="metrics_enabled", help="Enable bot metrics")
    parser.add_argument("--metrics.prefix", dest="metrics_prefix", help="Set metrics prefix")
    parser.add_argument("--metrics.profile", dest="metrics_profile", help="Enable profiling endpoints")
    parser.add_argument("--metrics.runtime", dest="metrics_runtime", help="Enable runtime metrics")
    return parser


def load_settings(
    argv: Sequence[str] | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Build settings from flags and environment variables.

    Args:
        argv: Command-line arguments, without the program name.
        env: Environment mapping. Defaults to ``os.environ``.

    Raises:
        ConfigurationError: If a value is missing or malformed.
    """
    if env is None:
        env = environ
    args = build_parser().parse_args(argv)

    def pick(flag: str | None, name: str, default: str) -> str:
        if flag is not None:
            return flag
        return env.get(name, default)

    admin_values = args.admins if args.admins else [env.get("TELEGRAM_ADMINS", "")]

    metrics = MetricsSettings(
        enabled=parse_bool(pick(args.metrics_enabled, "METRICS_ENABLED", "true")),
        prefix=pick(args.metrics_prefix, "METRICS_PREFIX", ""),
        profile=parse_bool(pick(args.metrics_profile, "METRICS_PROFILE", "true")),
        runtime=parse_bool(pick(args.metrics_runtime, "METRICS_RUNTIME", "true")),
    )

    return Settings(
        token=pick(args.token, "TELEGRAM_TOKEN", ""),
        admins=parse_admin_ids(admin_values),
        http_addr=pick(args.http_addr, "HTTP_ADDR", DEFAULT_HTTP_ADDR),
        log_level=pick(args.log_level, "LOG_LEVEL", "info").lower(),
        fabdb_endpoint=pick(args.fabdb_endpoint, "FABDB_ENDPOINT", DEFAULT_FABDB_ENDPOINT),
        metrics=metrics,
    )
