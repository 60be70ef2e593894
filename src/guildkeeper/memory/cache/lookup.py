"""Resolve messages from the live client cache, then the store, then REST."""

from __future__ import annotations

import logging
from typing import Any

import discord

from .snapshots import CachedMessage
from .store import CacheStore

logger = logging.getLogger(__name__)


def get_cached_message(
    bot: Any, store: CacheStore[CachedMessage], channel_id: int, message_id: int
) -> CachedMessage | None:
    """Return a snapshot from discord.py's message cache or the store; never fetches."""

    live = discord.utils.get(bot.cached_messages, id=message_id)
    if live is not None:
        return CachedMessage.from_message(live)
    return store.get(channel_id, message_id)


async def get_message(
    bot: Any, store: CacheStore[CachedMessage], channel_id: int, message_id: int
) -> CachedMessage | None:
    """Like :func:`get_cached_message` but falls back to fetching the message."""

    cached = get_cached_message(bot, store, channel_id, message_id)
    if cached is not None:
        return cached

    try:
        message = await bot.get_partial_messageable(channel_id).fetch_message(message_id)
    except discord.NotFound:
        return None
    except discord.HTTPException:
        logger.exception("Failed to fetch message %s in channel %s", message_id, channel_id)
        return None
    return CachedMessage.from_message(message)


__all__ = ["get_cached_message", "get_message"]
