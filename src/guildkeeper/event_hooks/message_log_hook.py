"""
Post edit and delete notices to the message log channel.

Raw events are used so that messages which discord.py never saw (older than
the live cache) are still logged, as long as the message store has them.
"""

from __future__ import annotations

import logging

import discord

from guildkeeper.memory.cache import CachedMessage
from guildkeeper.memory.cache.lookup import get_cached_message
from guildkeeper.message_log import build_delete_embed, build_edit_embed
from guildkeeper.utils import send_log

logger = logging.getLogger(__name__)


def _should_log(client: discord.Client, guild_id: int | None) -> bool:
    cfg = client.services.config.current
    return bool(cfg.message_logging.CHANNEL_ID) and guild_id is not None


async def handle_edit(client: discord.Client, payload: discord.RawMessageUpdateEvent) -> None:
    if not _should_log(client, payload.guild_id):
        return

    services = client.services
    before = payload.cached_message
    old = (
        CachedMessage.from_message(before)
        if before is not None
        else services.messages.get(payload.channel_id, payload.message_id)
    )
    if old is None:
        logger.error("Edited message %s is not cached; cannot log the previous version", payload.message_id)
        return

    try:
        fetched = await client.get_partial_messageable(payload.channel_id).fetch_message(payload.message_id)
    except discord.HTTPException as exc:
        logger.error("Failed to fetch edited message %s: %s", payload.message_id, exc)
        return

    if client.user is not None and fetched.author.id == client.user.id:
        return

    new = CachedMessage.from_message(fetched)
    if new.content == old.content:
        return

    services.messages.insert(new)
    await send_log(client, services.config.current.message_logging.CHANNEL_ID, embed=build_edit_embed(old, new))


async def handle_delete(client: discord.Client, payload: discord.RawMessageDeleteEvent) -> None:
    if not _should_log(client, payload.guild_id):
        return

    services = client.services
    if payload.cached_message is not None:
        message = CachedMessage.from_message(payload.cached_message)
    else:
        message = get_cached_message(client, services.messages, payload.channel_id, payload.message_id)
    services.messages.remove(payload.channel_id, payload.message_id)

    if message is None:
        logger.info("Deleted message %s was not cached; nothing to log", payload.message_id)
        return

    bot_user = client.user
    if bot_user is not None and message.author_id == bot_user.id:
        return

    await send_log(client, services.config.current.message_logging.CHANNEL_ID, embed=build_delete_embed(message))
