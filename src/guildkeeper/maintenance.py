"""
Common utilities for background maintenance tasks.

Periodic jobs (the auto-kick sweep) are scheduled through :func:`startup` and
cancelled on shutdown through :func:`shutdown` rather than each job carrying
its own loop. :class:`OneShot` guards startup work against repeated ready
events.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class OneShot:
    """
    Claim token for actions that must run at most once per process.

    discord.py may fire ``on_ready`` again after a reconnect; whichever caller
    wins :meth:`claim` does the work and every later caller backs off.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._claimed = False
        self._lock = threading.Lock()

    def claim(self) -> bool:
        with self._lock:
            if self._claimed:
                return False
            self._claimed = True
            return True

    @property
    def claimed(self) -> bool:
        return self._claimed


async def startup(
    task_fn: Callable[[], Awaitable[None]],
    interval: float,
    *,
    run_immediately: bool = False,
    name: str | None = None,
) -> asyncio.Task:
    """
    Schedule ``task_fn`` to run every ``interval`` seconds until cancelled.

    The first run is delayed by one interval unless ``run_immediately`` is set.
    Exceptions raised by a cycle are logged and the loop keeps going.

    Returns the created :class:`asyncio.Task` handle.
    """

    label = name or getattr(task_fn, "__qualname__", "maintenance")

    async def _periodic() -> None:
        if not run_immediately:
            await asyncio.sleep(interval)
        while True:
            try:
                await task_fn()
            except Exception:
                logger.exception("Maintenance cycle %s failed", label)
            await asyncio.sleep(interval)

    return asyncio.create_task(_periodic(), name=label)


async def shutdown(task: asyncio.Task | None) -> None:
    """Cancel a task started with :func:`startup`; ``None`` is ignored."""

    if not task:
        return

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


__all__ = ["OneShot", "startup", "shutdown"]
