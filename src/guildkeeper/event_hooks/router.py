"""Fan-out of gateway events to the feature handlers subscribed to them."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Any]]


class EventKind(Enum):
    READY = "ready"
    MESSAGE_CREATE = "message"
    MESSAGE_UPDATE = "raw_message_edit"
    MESSAGE_DELETE = "raw_message_delete"
    INTERACTION_CREATE = "interaction"
    THREAD_CREATE = "thread_create"
    MEMBER_ADD = "member_join"
    MEMBER_UPDATE = "member_update"
    MEMBER_REMOVE = "raw_member_remove"


class EventRouter:
    """
    Map each :class:`EventKind` to an ordered list of handlers.

    Handlers for one event run concurrently. A handler that raises is logged
    and does not affect the others.
    """

    def __init__(self) -> None:
        self._handlers: Dict[EventKind, List[Handler]] = defaultdict(list)

    def subscribe(self, kind: EventKind, handler: Handler) -> Handler:
        self._handlers[kind].append(handler)
        return handler

    def on(self, kind: EventKind) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`subscribe`."""

        def _decorator(handler: Handler) -> Handler:
            return self.subscribe(kind, handler)

        return _decorator

    def handlers(self, kind: EventKind) -> List[Handler]:
        return list(self._handlers.get(kind, ()))

    async def dispatch(self, kind: EventKind, *args: Any) -> None:
        handlers = self.handlers(kind)
        if not handlers:
            return

        results = await asyncio.gather(*(h(*args) for h in handlers), return_exceptions=True)
        for handler, result in zip(handlers, results):
            if isinstance(result, BaseException) and not isinstance(result, asyncio.CancelledError):
                logger.error(
                    "Handler %s failed for %s",
                    getattr(handler, "__qualname__", handler),
                    kind.name,
                    exc_info=(type(result), result, result.__traceback__),
                )


__all__ = ["EventKind", "EventRouter", "Handler"]
