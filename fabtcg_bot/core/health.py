"""Metrics and health HTTP server.

Serves the Prometheus metrics endpoint, two liveness endpoints for container
orchestration and, optionally, a small runtime introspection subtree.

Routes:
    /metrics, /metrics/   Prometheus exposition (when metrics are enabled)
    /health, /healthz     Always 200
    /debug/pprof/...      Runtime introspection (when profiling is enabled)

Anything else is a 404.

Example:
    from fabtcg_bot.core.health import HealthServer

    server = HealthServer(metrics, host="0.0.0.0", port=8080)
    await server.serve()  # until server.stop() or cancellation
"""

import asyncio
import io
import sys
import threading
import traceback

from aiohttp import web

from fabtcg_bot.core.logging import get_logger
from fabtcg_bot.core.metrics import PrometheusMetrics

logger = get_logger(__name__)

METRICS_PATH = "/metrics"
PPROF_PATH = "/debug/pprof"


class HealthServer:
    """HTTP server for metrics and health endpoints."""

    def __init__(
        self,
        metrics: PrometheusMetrics,
        host: str = "0.0.0.0",
        port: int = 8080,
    ) -> None:
        """Initialize the server.

        Args:
            metrics: Metrics backend; its options decide which routes exist.
            host: Host to bind to.
            port: Port to listen on.
        """
        self._metrics = metrics
        self._host = host
        self._port = port
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None
        self._stopped = asyncio.Event()

    async def _handle_health(self, request: web.Request) -> web.Response:
        """Handle /health and /healthz - always healthy while serving."""
        return web.Response(status=200)

    async def _handle_metrics(self, request: web.Request) -> web.Response:
        """Handle /metrics - Prometheus text exposition."""
        return web.Response(
            body=self._metrics.render(),
            headers={"Content-Type": self._metrics.content_type},
        )

    async def _handle_pprof_index(self, request: web.Request) -> web.Response:
        lines = [
            f"{PPROF_PATH}/cmdline - command line of this process",
            f"{PPROF_PATH}/tasks - stack of every asyncio task",
            f"{PPROF_PATH}/threads - stack of every thread",
        ]
        return web.Response(text="\n".join(lines) + "\n")

    async def _handle_pprof_cmdline(self, request: web.Request) -> web.Response:
        return web.Response(text="\x00".join(sys.argv))

    async def _handle_pprof_tasks(self, request: web.Request) -> web.Response:
        buf = io.StringIO()
        for task in asyncio.all_tasks():
            task.print_stack(file=buf)
            buf.write("\n")
        return web.Response(text=buf.getvalue())

    async def _handle_pprof_threads(self, request: web.Request) -> web.Response:
        names = {t.ident: t.name for t in threading.enumerate()}
        sections = []
        for ident, frame in sys._current_frames().items():
            frames = "".join(traceback.format_stack(frame))
            sections.append(f"thread {names.get(ident, ident)}:\n{frames}")
        return web.Response(text="\n".join(sections))

    def build_app(self) -> web.Application:
        """Build the aiohttp application with all enabled routes."""
        options = self._metrics.options
        app = web.Application()
        app.router.add_get("/health", self._handle_health)
        app.router.add_get("/healthz", self._handle_health)

        if options.enabled:
            app.router.add_get(METRICS_PATH, self._handle_metrics)
            app.router.add_get(f"{METRICS_PATH}/", self._handle_metrics)

        if options.enable_profile:
            app.router.add_get(f"{PPROF_PATH}/", self._handle_pprof_index)
            app.router.add_get(f"{PPROF_PATH}/cmdline", self._handle_pprof_cmdline)
            app.router.add_get(f"{PPROF_PATH}/tasks", self._handle_pprof_tasks)
            app.router.add_get(f"{PPROF_PATH}/threads", self._handle_pprof_threads)

        return app

    async def start(self) -> None:
        """Start listening."""
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self._host, self._port)
        await self._site.start()

        logger.info("webserver_started", host=self._host, port=self._port)

    async def serve(self) -> None:
        """Start listening and block until ``stop`` is called.

        The server is cleaned up on return, including on cancellation.
        """
        self._stopped.clear()
        try:
            await self.start()
            await self._stopped.wait()
        finally:
            await self.cleanup()

    def stop(self) -> None:
        """Make a running ``serve`` return."""
        self._stopped.set()

    async def cleanup(self) -> None:
        """Stop the server and release the listening socket."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            logger.info("webserver_stopped")
