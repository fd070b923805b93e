"""Entry point for the Telegram bot.

Runs the bot and the metrics/health server side by side. When either of
them stops, or SIGINT/SIGTERM arrives, both are shut down.

Exit codes:
    0  clean shutdown
    1  an actor failed
    2  the bot could not be constructed
"""

import asyncio
import signal
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from os import getenv

from fabtcg_bot import __version__
from fabtcg_bot.clients.telegram import FabTCGBot, create_bot
from fabtcg_bot.core.config import Settings, load_settings
from fabtcg_bot.core.errors import ConfigurationError
from fabtcg_bot.core.health import HealthServer
from fabtcg_bot.core.logging import configure_logging, get_logger
from fabtcg_bot.core.metrics import MetricsOptions, PrometheusMetrics
from fabtcg_bot.core.run_group import RunGroup
from fabtcg_bot.providers import FabDBClient

logger = get_logger(__name__)

# Source revision this build was made from (set by the container build)
REVISION = getenv("APP_REVISION", "")
START_TIME = datetime.now(UTC)


def metrics_options(settings: Settings) -> MetricsOptions:
    return MetricsOptions(
        enabled=settings.metrics.enabled,
        prefix=settings.metrics.prefix,
        enable_profile=settings.metrics.profile,
        enable_runtime_metrics=settings.metrics.runtime,
    )


def add_signal_actor(group: RunGroup) -> None:
    """Add an actor that returns on SIGINT or SIGTERM."""
    loop = asyncio.get_running_loop()
    received = asyncio.Event()
    signals = (signal.SIGINT, signal.SIGTERM)

    async def wait_for_signal() -> None:
        for sig in signals:
            loop.add_signal_handler(sig, received.set)
        try:
            await received.wait()
            logger.info("shutdown_signal_received")
        finally:
            for sig in signals:
                loop.remove_signal_handler(sig)

    group.add(wait_for_signal, lambda err: received.set(), name="signals")


async def serve(settings: Settings, bot: FabTCGBot, metrics: PrometheusMetrics) -> int:
    """Run the bot, the HTTP server and the signal watcher until one stops."""
    group = RunGroup()

    async def run_bot() -> None:
        logger.info(
            "starting_fabtcg_bot",
            version=__version__,
            revision=REVISION,
            python_version=sys.version.split()[0],
        )
        await bot.run()

    group.add(run_bot, lambda err: bot.stop(), name="telegram")

    server = HealthServer(metrics, host=settings.http_host, port=settings.http_port)

    async def run_server() -> None:
        logger.info("starting_webserver", addr=settings.http_addr)
        await server.serve()

    group.add(run_server, lambda err: server.stop(), name="webserver")

    add_signal_actor(group)

    error = await group.run()
    if error is not None:
        logger.error("fabtcg_bot_failed", error=str(error))
        return 1
    return 0


async def main(argv: Sequence[str] | None = None) -> int:
    """Load settings, build the bot and serve until shutdown."""
    try:
        settings = load_settings(argv)
    except ConfigurationError as ex:
        configure_logging()
        logger.error("invalid_configuration", error=str(ex))
        return 2

    configure_logging(log_level=settings.log_level)

    metrics = PrometheusMetrics(metrics_options(settings))

    async with FabDBClient(settings.fabdb_endpoint) as cards:
        try:
            bot = create_bot(
                cards,
                settings.token,
                metrics,
                allowlist=settings.admins,
                start_time=START_TIME,
                revision=REVISION,
            )
        except Exception as ex:
            logger.error("failed_to_initialize_telegram_bot", error=str(ex))
            return 2

        return await serve(settings, bot, metrics)


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
