"""New threads: role auto-invite and configured startup messages."""

from __future__ import annotations

import logging

import discord

from guildkeeper.invites import invite_thread_by_roles
from guildkeeper.utils import await_initial_message

logger = logging.getLogger(__name__)


async def handle(client: discord.Client, thread: discord.Thread) -> None:
    cfg = client.services.config.current
    if not await await_initial_message(client, thread, cfg.thread_auto_invite.INITIAL_MESSAGE_TIMEOUT):
        return

    if thread.type != discord.ChannelType.private_thread:
        if await invite_thread_by_roles(thread, cfg.thread_auto_invite.ROLE_IDS):
            logger.info("Auto-invited roles to thread %s (%s)", thread.name, thread.id)

    for text in cfg.thread_channel_startup.messages_for(thread.parent_id):
        try:
            await thread.send(text)
        except discord.HTTPException as exc:
            logger.error("Failed to post startup message in thread %s: %s", thread.id, exc)
