"""
In-memory message and member caches.

Modules
=======

``snapshots``
    Frozen dataclasses (:class:`CachedMessage`, :class:`CachedMember`) copied
    from discord.py models when they are observed.
``store``
    :class:`CacheStore`, the concurrent ``container -> item`` map holding
    those snapshots with per-container locking.
``warmup``
    One-shot startup hydration of the message store from channel and thread
    history, and of the member store from guild rosters.
``lookup``
    Message resolution helpers that try the live client cache, the store and
    finally a REST fetch.
"""

from .snapshots import CachedAttachment, CachedMember, CachedMessage, CachedReference, ReferenceKind
from .store import CacheStore

__all__ = [
    "CacheStore",
    "CachedAttachment",
    "CachedMember",
    "CachedMessage",
    "CachedReference",
    "ReferenceKind",
]
