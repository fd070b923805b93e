"""Tests for the process entry point."""

import asyncio
from unittest.mock import patch

import main
from fabtcg_bot.clients.telegram.bot import FabTCGBot
from fabtcg_bot.core.config import MetricsSettings, Settings
from fabtcg_bot.core.metrics import MetricsOptions, PrometheusMetrics
from tests.mocks import MockCardSource, MockMetrics, MockTransport


def make_settings(**kwargs) -> Settings:
    kwargs.setdefault("http_addr", "127.0.0.1:0")
    return Settings(token="123:abc", **kwargs)


class FailingTransport(MockTransport):
    """Transport whose receive loop dies immediately."""

    async def start(self) -> None:
        raise ConnectionError("telegram unreachable")


class TestMetricsOptions:
    """Tests for settings to metrics options mapping."""

    def test_maps_every_switch(self) -> None:
        settings = make_settings(
            metrics=MetricsSettings(enabled=False, prefix="mybot", profile=False, runtime=True)
        )

        options = main.metrics_options(settings)

        assert options == MetricsOptions(
            enabled=False,
            prefix="mybot",
            enable_profile=False,
            enable_runtime_metrics=True,
        )


class TestServe:
    """Tests for the actor group wiring."""

    async def test_clean_shutdown_returns_zero(self, cards: MockCardSource) -> None:
        transport = MockTransport()
        bot = FabTCGBot(cards, transport, MockMetrics())
        metrics = PrometheusMetrics(MetricsOptions(enable_runtime_metrics=False))

        task = asyncio.create_task(main.serve(make_settings(), bot, metrics))
        await asyncio.wait_for(transport.started.wait(), timeout=1.0)
        await bot.stop()

        assert await asyncio.wait_for(task, timeout=2.0) == 0

    async def test_failing_bot_returns_one(self, cards: MockCardSource) -> None:
        bot = FabTCGBot(cards, FailingTransport(), MockMetrics())
        metrics = PrometheusMetrics(MetricsOptions(enable_runtime_metrics=False))

        code = await asyncio.wait_for(main.serve(make_settings(), bot, metrics), timeout=2.0)

        assert code == 1


class TestMain:
    """Tests for main."""

    async def test_missing_token_exits_with_two(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            assert await main.main([]) == 2

    async def test_bot_construction_failure_exits_with_two(self) -> None:
        with patch("main.create_bot", side_effect=ValueError("invalid token")):
            code = await main.main(["--telegram.token", "123:abc", "--http.addr", "127.0.0.1:0"])

        assert code == 2

    async def test_serves_with_loaded_settings(self) -> None:
        with (
            patch("main.create_bot") as create_bot,
            patch("main.serve", return_value=0) as serve,
        ):
            code = await main.main(
                ["--telegram.token", "123:abc", "--telegram.admin", "42", "--metrics.runtime", "false"]
            )

        assert code == 0
        assert create_bot.call_args.args[1] == "123:abc"
        assert create_bot.call_args.kwargs["allowlist"] == (42,)
        settings = serve.call_args.args[0]
        assert settings.admins == (42,)
