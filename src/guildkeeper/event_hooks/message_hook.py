"""Handle incoming Discord messages."""

from __future__ import annotations

import logging

import discord

from guildkeeper.memory.cache import CachedMessage

logger = logging.getLogger(__name__)


async def handle(client: discord.Client, message: discord.Message) -> None:
    # DMs and ephemeral follow-ups carry no guild context.
    if message.guild is None or getattr(getattr(message, "flags", None), "ephemeral", False):
        return

    services = client.services
    cache_cfg = services.config.current.message_cache
    parent_id = getattr(message.channel, "parent_id", None)
    if cache_cfg.is_target(message.guild.id, message.channel.id, parent_id):
        services.messages.insert(CachedMessage.from_message(message))

    outcome = await services.auth.handle_message(client, message)
    if outcome is not None:
        logger.info("Auth channel message %s from %s: %s", message.id, message.author.id, outcome.value)
