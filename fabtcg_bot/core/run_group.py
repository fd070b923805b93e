"""Run a group of long-lived actors and stop all of them when one stops.

Each actor is a pair of an ``execute`` coroutine function and an
``interrupt`` callable. ``RunGroup.run`` starts every execute concurrently,
waits for the first one to return or raise, then calls every interrupt with
that error (or None) and waits for the remaining actors to finish.

Example:
    group = RunGroup()
    group.add(server.serve, lambda err: server.stop())
    group.add(wait_for_signal, lambda err: stop_event.set())
    error = await group.run()
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fabtcg_bot.core.logging import get_logger

logger = get_logger(__name__)

Execute = Callable[[], Awaitable[None]]
Interrupt = Callable[[BaseException | None], Awaitable[None] | None]


@dataclass
class _Actor:
    name: str
    execute: Execute
    interrupt: Interrupt


class RunGroup:
    """A set of actors that live and die together."""

    def __init__(self) -> None:
        self._actors: list[_Actor] = []

    def add(self, execute: Execute, interrupt: Interrupt, name: str | None = None) -> None:
        """Add an actor.

        Args:
            execute: Coroutine function running the actor until it is done.
            interrupt: Called with the first error of the group (or None)
                to make ``execute`` return. May be sync or async.
            name: Name used for the task and in log records.
        """
        self._actors.append(_Actor(name or f"actor-{len(self._actors)}", execute, interrupt))

    def __len__(self) -> int:
        return len(self._actors)

    async def run(self) -> BaseException | None:
        """Run all actors until the first one returns.

        Returns:
            The exception raised by the first actor to finish, or None if it
            returned normally. Errors of actors finishing later are logged.
        """
        if not self._actors:
            return None

        tasks = {
            asyncio.create_task(actor.execute(), name=actor.name): actor
            for actor in self._actors
        }

        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        first = next(iter(done))
        error = None if first.cancelled() else first.exception()
        logger.info("actor_finished", actor=tasks[first].name, error=str(error) if error else None)

        for actor in tasks.values():
            try:
                result = actor.interrupt(error)
                if inspect.isawaitable(result):
                    await result
            except Exception as ex:
                logger.warning("actor_interrupt_failed", actor=actor.name, error=str(ex))

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for task, result in zip(tasks, results, strict=True):
            if task is first or not isinstance(result, BaseException):
                continue
            if isinstance(result, asyncio.CancelledError):
                continue
            logger.warning("actor_failed", actor=tasks[task].name, error=str(result))

        return error
