"""Tests for the metrics and health HTTP server."""

import asyncio
from unittest.mock import patch

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from fabtcg_bot.core.health import HealthServer
from fabtcg_bot.core.metrics import MetricsOptions, PrometheusMetrics


def make_server(**options) -> HealthServer:
    options.setdefault("enable_runtime_metrics", False)
    return HealthServer(PrometheusMetrics(MetricsOptions(**options)), host="127.0.0.1", port=0)


class TestRoutes:
    """Tests for the routes served by HealthServer."""

    @pytest.mark.parametrize("path", ["/health", "/healthz"])
    async def test_health_is_ok(self, path: str) -> None:
        server = make_server()

        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.get(path)
            assert response.status == 200

    @pytest.mark.parametrize("path", ["/metrics", "/metrics/"])
    async def test_metrics_exposition(self, path: str) -> None:
        metrics = PrometheusMetrics(MetricsOptions(enable_runtime_metrics=False))
        metrics.inc_command("/start")
        server = HealthServer(metrics)

        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.get(path)
            body = await response.text()

            assert response.status == 200
            assert response.headers["Content-Type"].startswith("text/plain")
            assert 'fabtcgbot_telegram_commands_total{command="/start"} 1.0' in body

    @pytest.mark.parametrize("path", ["/", "/stats", "/debug/pprof/"])
    async def test_unknown_path_is_not_found(self, path: str) -> None:
        server = make_server()

        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.get(path)
            assert response.status == 404

    async def test_metrics_disabled(self) -> None:
        """Disabled metrics remove the route but keep health checks."""
        server = make_server(enabled=False)

        async with TestClient(TestServer(server.build_app())) as client:
            assert (await client.get("/metrics")).status == 404
            assert (await client.get("/health")).status == 200


class TestProfileRoutes:
    """Tests for the runtime introspection subtree."""

    async def test_index_lists_endpoints(self) -> None:
        server = make_server(enable_profile=True)

        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.get("/debug/pprof/")
            body = await response.text()

            assert response.status == 200
            assert "/debug/pprof/tasks" in body
            assert "/debug/pprof/threads" in body

    async def test_tasks_dump_includes_running_tasks(self) -> None:
        server = make_server(enable_profile=True)
        sleeper = asyncio.create_task(asyncio.sleep(10), name="sleeper")

        try:
            async with TestClient(TestServer(server.build_app())) as client:
                response = await client.get("/debug/pprof/tasks")
                body = await response.text()

                assert response.status == 200
                assert "sleeper" in body
        finally:
            sleeper.cancel()

    async def test_threads_dump_includes_main_thread(self) -> None:
        server = make_server(enable_profile=True)

        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.get("/debug/pprof/threads")
            body = await response.text()

            assert response.status == 200
            assert "MainThread" in body

    async def test_cmdline(self) -> None:
        server = make_server(enable_profile=True)

        async with TestClient(TestServer(server.build_app())) as client:
            response = await client.get("/debug/pprof/cmdline")
            assert response.status == 200


class TestLifecycle:
    """Tests for serve/stop."""

    async def test_serve_returns_after_stop(self) -> None:
        server = make_server()
        task = asyncio.create_task(server.serve())
        await asyncio.sleep(0.05)

        assert not task.done()
        server.stop()
        await asyncio.wait_for(task, timeout=2.0)

        assert server._runner is None

    async def test_serve_cleans_up_when_bind_fails(self) -> None:
        """A listener that cannot bind must not leave the runner set up."""
        server = make_server()

        with patch.object(
            web.TCPSite,
            "start",
            side_effect=OSError("address already in use"),
        ):
            with pytest.raises(OSError):
                await server.serve()

        assert server._runner is None

    async def test_serve_cleans_up_on_cancel(self) -> None:
        server = make_server()
        task = asyncio.create_task(server.serve())
        await asyncio.sleep(0.05)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert server._runner is None
