from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from guildkeeper.checks import is_bot_owner
from guildkeeper.config import ConfigLoadError

from .. import register_cog

logger = logging.getLogger(__name__)


@register_cog
class Admin(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="reload_config", description="コンフィグを再読み込みします。")
    @app_commands.dm_only()
    @is_bot_owner()
    async def reload_config(self, interaction: discord.Interaction) -> None:
        """Re-read config.toml and swap it in for every component at once."""

        store = self.bot.services.config
        try:
            config = store.reload()
        except ConfigLoadError as exc:
            logger.error("Config reload requested by %s failed: %s", interaction.user.id, exc)
            await interaction.response.send_message(f"コンフィグの読み込みに失敗しました。\n```\n{exc}\n```", ephemeral=True)
            return

        missing = config.missing()
        text = "コンフィグを再読み込みしました。"
        if missing:
            text += f"\n未設定の項目: {', '.join(missing)}"
        await interaction.response.send_message(text, ephemeral=True)
