"""
Timeout-bounded, filtered subscriptions to gateway events.

A collector registers a listener on the bot (``Bot.add_listener``) and queues
every event that passes its filters. Consumers either take the first match
with :meth:`InteractionCollector.first` or iterate :meth:`stream` until the
deadline passes or :meth:`close` is called. Closing always unregisters the
listener.

    async with InteractionCollector(bot, custom_ids={"confirm"}, timeout=60) as c:
        interaction = await c.first()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Callable, Collection

import discord

logger = logging.getLogger(__name__)

_CLOSED = object()


def custom_id_of(interaction: Any) -> str | None:
    data = getattr(interaction, "data", None) or {}
    return data.get("custom_id")


class InteractionCollector:
    """Collect events named ``event`` (``on_<event>``) that match the filters.

    ``custom_ids`` only applies to interaction events. ``check`` receives the
    event's positional arguments; a check that raises counts as a non-match.
    Multi-argument events (``reaction_add``) are delivered as tuples.
    """

    def __init__(
        self,
        bot: Any,
        *,
        custom_ids: Collection[str] | None = None,
        check: Callable[..., bool] | None = None,
        event: str = "interaction",
        timeout: float | None = None,
    ) -> None:
        self._bot = bot
        self._custom_ids = frozenset(custom_ids) if custom_ids is not None else None
        self._check = check
        self._event = event
        self._timeout = timeout
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._deadline: float | None = None
        self._opened = False
        self._closed = False
        self._timed_out = False

    @property
    def event_name(self) -> str:
        return f"on_{self._event}"

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> "InteractionCollector":
        if self._opened:
            return self
        self._opened = True
        if self._timeout is not None:
            self._deadline = asyncio.get_running_loop().time() + self._timeout
        self._bot.add_listener(self._on_event, self.event_name)
        return self

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._opened:
            self._bot.remove_listener(self._on_event, self.event_name)
        self._queue.put_nowait(_CLOSED)

    async def __aenter__(self) -> "InteractionCollector":
        return self.open()

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    def _matches(self, *args: Any) -> bool:
        if self._custom_ids is not None:
            if not args or custom_id_of(args[0]) not in self._custom_ids:
                return False
        if self._check is None:
            return True
        try:
            return bool(self._check(*args))
        except Exception:
            logger.exception("Collector check for %s raised; treating as non-match", self.event_name)
            return False

    async def _on_event(self, *args: Any) -> None:
        if self._closed or not self._matches(*args):
            return
        self._queue.put_nowait(args[0] if len(args) == 1 else args)

    def _remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return self._deadline - asyncio.get_running_loop().time()

    async def stream(self) -> AsyncIterator[Any]:
        """Yield matching events until the deadline passes or the collector closes."""

        self.open()
        try:
            while True:
                remaining = self._remaining()
                if remaining is not None and remaining <= 0:
                    self._timed_out = True
                    return
                try:
                    item = await asyncio.wait_for(self._queue.get(), remaining)
                except asyncio.TimeoutError:
                    self._timed_out = True
                    return
                if item is _CLOSED:
                    return
                yield item
        finally:
            self.close()

    async def first(self) -> Any | None:
        """Return the first matching event, or ``None`` on timeout or close."""

        stream = self.stream()
        try:
            async for item in stream:
                return item
            return None
        finally:
            await stream.aclose()


def component_check(user_id: int) -> Callable[[discord.Interaction], bool]:
    """Accept only component interactions by ``user_id``."""

    def _check(interaction: discord.Interaction) -> bool:
        return interaction.type == discord.InteractionType.component and interaction.user.id == user_id

    return _check


def modal_check(user_id: int) -> Callable[[discord.Interaction], bool]:
    def _check(interaction: discord.Interaction) -> bool:
        return interaction.type == discord.InteractionType.modal_submit and interaction.user.id == user_id

    return _check


__all__ = ["InteractionCollector", "component_check", "modal_check", "custom_id_of"]
