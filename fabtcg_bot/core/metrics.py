"""Prometheus metrics backend.

Implements the BotMetrics protocol with three counter families:

    <namespace>_telegram_commands_total{command}
    <namespace>_telegram_events_incoming_total{type}
    <namespace>_telegram_events_outgoing_total{type}

Each PrometheusMetrics instance owns its own CollectorRegistry unless one is
passed in, so tests can build as many as they like.

Example:
    metrics = PrometheusMetrics(MetricsOptions(prefix="mybot"))
    metrics.inc_incoming("message")
    body = metrics.render()
"""

from dataclasses import dataclass

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

NAMESPACE = "fabtcgbot"
TELEGRAM_SUBSYSTEM = "telegram"


@dataclass
class MetricsOptions:
    """Options for initializing metrics collection.

    Attributes:
        enabled: Expose metrics on the HTTP server.
        prefix: Namespace for all metric names. Defaults to "fabtcgbot".
        enable_profile: Expose runtime introspection under /debug/pprof/.
        enable_runtime_metrics: Also collect process, platform and GC metrics.
        registry: Registry to register with. A new one is created if None.
    """

    enabled: bool = True
    prefix: str = ""
    enable_profile: bool = False
    enable_runtime_metrics: bool = True
    registry: CollectorRegistry | None = None


class PrometheusMetrics:
    """Prometheus implementation of the BotMetrics protocol."""

    def __init__(self, options: MetricsOptions | None = None) -> None:
        self.options = options or MetricsOptions()

        namespace = NAMESPACE
        if self.options.prefix:
            namespace = self.options.prefix.removesuffix(".")

        self.registry = self.options.registry or CollectorRegistry()

        self._commands = Counter(
            "commands_total",
            "Total number of command requests.",
            ["command"],
            namespace=namespace,
            subsystem=TELEGRAM_SUBSYSTEM,
            registry=self.registry,
        )
        self._events_incoming = Counter(
            "events_incoming_total",
            "Total number of incoming messages.",
            ["type"],
            namespace=namespace,
            subsystem=TELEGRAM_SUBSYSTEM,
            registry=self.registry,
        )
        self._events_outgoing = Counter(
            "events_outgoing_total",
            "Total number of outgoing messages.",
            ["type"],
            namespace=namespace,
            subsystem=TELEGRAM_SUBSYSTEM,
            registry=self.registry,
        )

        if self.options.enable_runtime_metrics:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)
            GCCollector(registry=self.registry)

    def inc_command(self, command: str) -> None:
        self._commands.labels(command=command).inc()

    def inc_incoming(self, event_type: str) -> None:
        self._events_incoming.labels(type=event_type).inc()

    def inc_outgoing(self, event_type: str) -> None:
        self._events_outgoing.labels(type=event_type).inc()

    def render(self) -> bytes:
        """Render the registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST
