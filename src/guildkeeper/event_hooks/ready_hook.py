"""Startup work triggered by the ready event."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Set

import discord

logger = logging.getLogger(__name__)

_background: Set[asyncio.Task] = set()


def _log_result(task: asyncio.Task) -> None:
    _background.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Background task %s failed", task.get_name(), exc_info=(type(exc), exc, exc.__traceback__))


def spawn(coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
    task = asyncio.create_task(coro, name=name)
    _background.add(task)
    task.add_done_callback(_log_result)
    return task


async def handle(client: discord.Client) -> None:
    """Kick off cache warmups and the auto-kick loop.

    Each of these claims a one-shot token, so a second ready event after a
    reconnect only logs the login line.
    """

    logger.info("Logged in as %s (ID: %s)", client.user.name, client.user.id)

    services = client.services
    spawn(services.member_warmup.run(client), "member-cache-warmup")
    spawn(services.message_warmup.run(client), "message-cache-warmup")
    await services.auto_kick.start(client)
