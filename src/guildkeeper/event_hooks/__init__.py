"""
Gateway event handlers.

Each ``*_hook`` module exposes plain ``handle*`` coroutines taking the bot
first. :func:`default_router` subscribes all of them to an
:class:`~guildkeeper.event_hooks.router.EventRouter`; the bot forwards its
``on_*`` events to that router.
"""

from __future__ import annotations

from . import interaction_hook, member_hook, message_hook, message_log_hook, ready_hook, thread_hook
from .router import EventKind, EventRouter


def register_hooks(router: EventRouter) -> EventRouter:
    router.subscribe(EventKind.READY, ready_hook.handle)
    router.subscribe(EventKind.MESSAGE_CREATE, message_hook.handle)
    router.subscribe(EventKind.MESSAGE_UPDATE, message_log_hook.handle_edit)
    router.subscribe(EventKind.MESSAGE_DELETE, message_log_hook.handle_delete)
    router.subscribe(EventKind.INTERACTION_CREATE, interaction_hook.handle)
    router.subscribe(EventKind.THREAD_CREATE, thread_hook.handle)
    router.subscribe(EventKind.MEMBER_ADD, member_hook.handle_join)
    router.subscribe(EventKind.MEMBER_UPDATE, member_hook.handle_update)
    router.subscribe(EventKind.MEMBER_REMOVE, member_hook.handle_remove)
    return router


def default_router() -> EventRouter:
    return register_hooks(EventRouter())


__all__ = ["EventKind", "EventRouter", "default_router", "register_hooks"]
