from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from guildkeeper.checks import has_authed_role, is_in_public_thread
from guildkeeper.invites import invite_thread_by_roles

from .. import register_cog

logger = logging.getLogger(__name__)


@register_cog
class Invite(commands.Cog):
    """Thread invitations via the managed role pool."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    async def _resolve(self, guild: discord.Guild, user_id: int) -> discord.Member | None:
        member = guild.get_member(user_id)
        if member is not None:
            return member
        try:
            return await guild.fetch_member(user_id)
        except discord.HTTPException:
            logger.warning("Member %s of guild %s could not be fetched", user_id, guild.id)
            return None

    @app_commands.command(name="invite_thread", description="招待用ロールを持ったメンバーをこのスレッドに招待します。")
    @app_commands.guild_only()
    @has_authed_role()
    @is_in_public_thread()
    @app_commands.checks.cooldown(1, 86400.0, key=lambda i: i.channel_id)
    async def invite_thread(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer(ephemeral=True)
        role_ids = self.bot.services.config.current.thread_auto_invite.ROLE_IDS
        await invite_thread_by_roles(interaction.channel, role_ids)
        await interaction.followup.send("スレッドに招待しました。", ephemeral=True)

    @app_commands.command(name="add_invite_role", description="表示用ロールを持ったメンバーに招待用ロールを付与します。")
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_roles=True)
    async def add_invite_role(self, interaction: discord.Interaction) -> None:
        services = self.bot.services
        cfg = services.config.current.thread_auto_invite
        guild = interaction.guild
        await interaction.response.defer(thinking=True)

        granted = 0
        for cached in services.members.get_all(guild.id):
            holds_managed = any(cached.has_role(r) for r in cfg.ROLE_IDS)
            wants_role = cached.has_role(cfg.DISPLAY_ROLE_ID)
            if not holds_managed and not wants_role:
                continue
            member = await self._resolve(guild, cached.user_id)
            if member is None:
                continue
            if holds_managed:
                await services.balancer.role_removed(member, cached.role_ids)
            if wants_role and await services.balancer.role_added(member) is not None:
                granted += 1

        await interaction.followup.send(f"{granted} 人に招待用ロールを付与しました。")

    @app_commands.command(name="remove_invite_role", description="招待用ロールを持ったメンバーから招待用ロールを削除します。")
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_roles=True)
    async def remove_invite_role(self, interaction: discord.Interaction) -> None:
        services = self.bot.services
        cfg = services.config.current.thread_auto_invite
        guild = interaction.guild
        await interaction.response.defer(thinking=True)

        removed = 0
        for cached in services.members.get_all(guild.id):
            if not any(cached.has_role(r) for r in cfg.ROLE_IDS):
                continue
            member = await self._resolve(guild, cached.user_id)
            if member is None:
                continue
            if await services.balancer.role_removed(member, cached.role_ids) is not None:
                removed += 1

        await interaction.followup.send(f"{removed} 人から招待用ロールを削除しました。")
