"""
Thread auto-invite: rotating invitation roles and the mention trick.

Members who opt in (they hold the display role) are spread over several
invitation roles so that a single role mention never exceeds Discord's
thread member limit. :class:`RoleBalancer` picks the least-filled role in
priority order using the :class:`~guildkeeper.memory.roles.RoleCountLedger`.

Inviting a role to a thread works by posting a placeholder message, editing
it to mention the roles (edits add mentioned members without notifying them)
and deleting it again.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import discord

from .config import ConfigStore
from .memory.cache import CacheStore, CachedMember
from .memory.roles import RoleCountLedger

logger = logging.getLogger(__name__)

INVITE_PLACEHOLDER = "スレッド自動招待用メッセージ"


class RoleBalancer:
    def __init__(
        self,
        members: CacheStore[CachedMember],
        ledger: RoleCountLedger,
        config: ConfigStore,
    ) -> None:
        self._members = members
        self._ledger = ledger
        self._config = config

    @property
    def ledger(self) -> RoleCountLedger:
        return self._ledger

    def find_role(self, guild_id: int) -> int | None:
        """
        Return the first managed role whose count is below the threshold.

        The ledger is seeded from the cached roster of ``guild_id`` the first
        time it is consulted. ``None`` means every role is full.
        """

        if self._ledger.is_empty():
            self._ledger.initialize(self._members.get_all(guild_id))

        cfg = self._config.current.thread_auto_invite
        for role_id in cfg.ROLE_IDS:
            if self._ledger.get(role_id) < cfg.MIN_MEMBER_COUNT:
                return role_id
        return None

    async def role_added(self, member: discord.Member) -> int | None:
        """Give ``member`` an invitation role; returns the role id granted."""

        role_id = self.find_role(member.guild.id)
        if role_id is None:
            logger.error(
                "No invitation role below %d members", self._config.current.thread_auto_invite.MIN_MEMBER_COUNT
            )
            return None

        try:
            await member.add_roles(discord.Object(id=role_id), reason="Thread auto-invite opt-in")
        except discord.HTTPException as exc:
            logger.error("Failed to add role %s to member %s: %s", role_id, member.id, exc)
            return None

        self._ledger.increment(role_id)
        logger.info("Added invitation role %s to %s", role_id, member)
        return role_id

    async def role_removed(self, member: discord.Member, held_role_ids: Iterable[int]) -> int | None:
        """
        Take one invitation role away from ``member``.

        Roles are tried in priority order and only the first successful
        removal is counted.
        """

        held = set(held_role_ids)
        for role_id in self._config.current.thread_auto_invite.ROLE_IDS:
            if role_id not in held:
                continue
            try:
                await member.remove_roles(discord.Object(id=role_id), reason="Thread auto-invite opt-out")
            except discord.HTTPException as exc:
                logger.error("Failed to remove role %s from member %s: %s", role_id, member.id, exc)
                continue
            self._ledger.decrement(role_id)
            logger.info("Removed invitation role %s from %s", role_id, member)
            return role_id
        return None


async def invite_thread_by_roles(channel: Any, role_ids: Iterable[int]) -> bool:
    """Pull every member of ``role_ids`` into ``channel`` without pinging them."""

    role_ids = list(role_ids)
    if not role_ids:
        return False

    try:
        message = await channel.send(INVITE_PLACEHOLDER, allowed_mentions=discord.AllowedMentions.none())
    except discord.HTTPException as exc:
        logger.error("Failed to send invite placeholder to %s: %s", channel.id, exc)
        return False

    try:
        await message.edit(
            content=" ".join(f"<@&{role_id}>" for role_id in role_ids),
            allowed_mentions=discord.AllowedMentions(roles=True),
        )
    except discord.HTTPException as exc:
        logger.error("Failed to edit invite message in %s: %s", channel.id, exc)

    try:
        await message.delete()
    except discord.HTTPException as exc:
        logger.warning("Failed to delete invite message in %s: %s", channel.id, exc)
    return True


__all__ = ["INVITE_PLACEHOLDER", "RoleBalancer", "invite_thread_by_roles"]
