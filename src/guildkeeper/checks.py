"""``app_commands`` checks that read the live configuration."""

from __future__ import annotations

import discord
from discord import app_commands

from .errors import HasNoRole, NotBotOwner, NotInThread


def has_authed_role():
    """Require the configured authentication role."""

    async def predicate(interaction: discord.Interaction) -> bool:
        role_id = interaction.client.services.config.current.auth.ROLE_ID
        roles = getattr(interaction.user, "roles", None) or []
        if not any(role.id == role_id for role in roles):
            raise HasNoRole(role_id)
        return True

    return app_commands.check(predicate)


def is_in_public_thread():
    async def predicate(interaction: discord.Interaction) -> bool:
        channel = interaction.channel
        if not isinstance(channel, discord.Thread) or channel.type != discord.ChannelType.public_thread:
            raise NotInThread()
        return True

    return app_commands.check(predicate)


def is_bot_owner():
    async def predicate(interaction: discord.Interaction) -> bool:
        if interaction.user.id not in interaction.client.services.config.current.bot.OWNERS:
            raise NotBotOwner()
        return True

    return app_commands.check(predicate)


__all__ = ["has_authed_role", "is_in_public_thread", "is_bot_owner"]
