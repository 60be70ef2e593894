from __future__ import annotations

from typing import List

import discord
from discord import app_commands
from discord.ext import commands

from guildkeeper.auth import build_keyword_button_view

from .. import register_cog


def _keyword_cooldown(interaction: discord.Interaction) -> app_commands.Cooldown | None:
    per = interaction.client.services.config.current.auth.COOLDOWN_SECONDS
    return app_commands.Cooldown(1, per) if per > 0 else None


@register_cog
class Auth(commands.Cog):
    """Keyword authentication."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="keyword", description="合言葉を入力してください。")
    @app_commands.describe(keyword="合言葉")
    @app_commands.guild_only()
    @app_commands.checks.dynamic_cooldown(_keyword_cooldown, key=lambda i: (i.guild_id, i.user.id))
    @app_commands.checks.bot_has_permissions(manage_roles=True)
    async def keyword(self, interaction: discord.Interaction, keyword: str) -> None:
        await self.bot.services.auth.answer_keyword(self.bot, interaction, keyword)

    @keyword.autocomplete("keyword")
    async def keyword_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> List[app_commands.Choice[str]]:
        return [app_commands.Choice(name=k, value=k) for k in self.bot.services.auth.suggestions(current)]

    @app_commands.command(name="create_keyword_button", description="合言葉入力ボタンをこのチャンネルに設置します。")
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_guild=True)
    async def create_keyword_button(self, interaction: discord.Interaction) -> None:
        """Post the persistent "enter keyword" button in the current channel."""

        await interaction.channel.send(
            "下のボタンから合言葉を入力してください。", view=build_keyword_button_view()
        )
        await interaction.response.send_message("ボタンを設置しました。", ephemeral=True)
