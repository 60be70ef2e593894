from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from guildkeeper.checks import has_authed_role
from guildkeeper.errors import NotChannelOwner
from guildkeeper.interactions import InteractionCollector
from guildkeeper.memory.cache.lookup import get_message
from guildkeeper.utils import parse_message_reference

from .. import register_cog

logger = logging.getLogger(__name__)

PIN_NOTICE_TIMEOUT = 5.0


@register_cog
class Pin(commands.Cog):
    """Let thread owners pin and unpin messages in their own threads."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.ctx_menu = app_commands.ContextMenu(name="ピン留め", callback=self.pin_context)
        self.bot.tree.add_command(self.ctx_menu)

    async def cog_unload(self) -> None:
        self.bot.tree.remove_command(self.ctx_menu.name, type=self.ctx_menu.type)

    async def can_pin(self, user_id: int, channel: discord.abc.GuildChannel | discord.Thread) -> bool:
        if getattr(channel, "owner_id", None) == user_id:
            return True

        cfg = self.bot.services.config.current
        if cfg.pin.CHANNELS.get(channel.id) == user_id:
            return True

        # A question post's starter message shares the thread id and mentions the asker.
        forum_id = cfg.question.FORUM_ID
        if forum_id and getattr(channel, "parent_id", None) == forum_id:
            starter = await get_message(self.bot, self.bot.services.messages, channel.id, channel.id)
            return starter is not None and user_id in starter.mention_ids
        return False

    async def toggle_pin(self, interaction: discord.Interaction, message: discord.Message) -> None:
        if not await self.can_pin(interaction.user.id, interaction.channel):
            raise NotChannelOwner()

        await interaction.response.defer(ephemeral=True)
        bot_id = self.bot.user.id
        notice = InteractionCollector(
            self.bot,
            event="message",
            check=lambda m: m.channel.id == message.channel.id
            and m.author.id == bot_id
            and m.type == discord.MessageType.pins_add,
            timeout=PIN_NOTICE_TIMEOUT,
        ).open()
        try:
            if message.pinned:
                await message.unpin()
                notice.close()
                await interaction.followup.send("ピン留めを解除しました。", ephemeral=True)
                return

            await message.pin()
            await interaction.followup.send("ピン留めしました。", ephemeral=True)
            system_message = await notice.first()
        finally:
            notice.close()

        if system_message is not None:
            try:
                await system_message.delete()
            except discord.HTTPException as exc:
                logger.warning("Could not delete pin notice %s: %s", system_message.id, exc)

    @app_commands.command(name="pin", description="スレッド主限定でメッセージをピン留めします。")
    @app_commands.describe(message="ピン留めするメッセージ (リンクかID)")
    @app_commands.guild_only()
    @has_authed_role()
    @app_commands.checks.bot_has_permissions(manage_messages=True)
    async def pin(self, interaction: discord.Interaction, message: str) -> None:
        try:
            channel_id, message_id = parse_message_reference(message)
        except ValueError:
            await interaction.response.send_message("メッセージのリンクかIDを指定してください。", ephemeral=True)
            return

        channel = interaction.channel
        if channel_id is not None and channel_id != channel.id:
            await interaction.response.send_message("このチャンネルのメッセージを指定してください。", ephemeral=True)
            return

        try:
            target = await channel.fetch_message(message_id)
        except discord.NotFound:
            await interaction.response.send_message("メッセージが見つかりません。", ephemeral=True)
            return

        await self.toggle_pin(interaction, target)

    @app_commands.guild_only()
    @has_authed_role()
    @app_commands.checks.bot_has_permissions(manage_messages=True)
    async def pin_context(self, interaction: discord.Interaction, message: discord.Message) -> None:
        await self.toggle_pin(interaction, message)
