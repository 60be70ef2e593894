"""
Process-wide state shared by cogs, event hooks and background tasks.

Everything stateful is created once in :func:`build_services` and handed to
the bot, which exposes it as ``bot.services``. Nothing in the package keeps
module-level singletons.
"""

from __future__ import annotations

from dataclasses import dataclass

from .auth import AuthService
from .auto_kick import AutoKickScheduler
from .config import ConfigStore
from .event_hooks import default_router
from .event_hooks.router import EventRouter
from .invites import RoleBalancer
from .memory.cache import CacheStore, CachedMember, CachedMessage
from .memory.cache.warmup import MemberCacheWarmup, MessageCacheWarmup
from .memory.roles import RoleCountLedger


@dataclass
class Services:
    config: ConfigStore
    messages: CacheStore[CachedMessage]
    members: CacheStore[CachedMember]
    role_counts: RoleCountLedger
    router: EventRouter
    auth: AuthService
    balancer: RoleBalancer
    message_warmup: MessageCacheWarmup
    member_warmup: MemberCacheWarmup
    auto_kick: AutoKickScheduler


def build_services(config: ConfigStore, router: EventRouter | None = None) -> Services:
    messages: CacheStore[CachedMessage] = CacheStore("messages")
    members: CacheStore[CachedMember] = CacheStore("members")
    role_counts = RoleCountLedger()
    if router is None:
        router = default_router()
    return Services(
        config=config,
        messages=messages,
        members=members,
        role_counts=role_counts,
        router=router,
        auth=AuthService(config),
        balancer=RoleBalancer(members, role_counts, config),
        message_warmup=MessageCacheWarmup(messages, config),
        member_warmup=MemberCacheWarmup(members),
        auto_kick=AutoKickScheduler(config),
    )


__all__ = ["Services", "build_services"]
