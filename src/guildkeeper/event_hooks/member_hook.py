"""Keep the member store current and react to display-role changes."""

from __future__ import annotations

import logging

import discord

from guildkeeper.memory.cache import CachedMember

logger = logging.getLogger(__name__)


async def handle_join(client: discord.Client, member: discord.Member) -> None:
    client.services.members.insert(CachedMember.from_member(member))


async def handle_remove(client: discord.Client, payload: discord.RawMemberRemoveEvent) -> None:
    client.services.members.remove(payload.guild_id, payload.user.id)


async def handle_update(client: discord.Client, before: discord.Member, after: discord.Member) -> None:
    """
    Grant or revoke an invitation role when the display role toggles.

    The previous state comes from the member store rather than ``before``,
    which discord.py can only supply for members it had cached.
    """

    services = client.services
    old = services.members.get(after.guild.id, after.id)
    services.members.insert(CachedMember.from_member(after))
    if old is None:
        logger.error("Member update for %s with no cached previous state", after.id)
        return

    display_role_id = services.config.current.thread_auto_invite.DISPLAY_ROLE_ID
    if not display_role_id:
        return

    had_role = old.has_role(display_role_id)
    has_role = any(role.id == display_role_id for role in after.roles)

    if has_role and not had_role:
        await services.balancer.role_added(after)
    elif had_role and not has_role:
        await services.balancer.role_removed(after, old.role_ids)
