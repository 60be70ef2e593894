from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from guildkeeper.checks import has_authed_role
from guildkeeper.question import QuestionWorkflow

from .. import register_cog

logger = logging.getLogger(__name__)


@register_cog
class Question(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    async def _forum(self) -> discord.ForumChannel | None:
        forum_id = self.bot.services.config.current.question.FORUM_ID
        channel = self.bot.get_channel(forum_id)
        if channel is None and forum_id:
            try:
                channel = await self.bot.fetch_channel(forum_id)
            except discord.HTTPException:
                logger.exception("Failed to fetch question forum %s", forum_id)
                return None
        return channel if isinstance(channel, discord.ForumChannel) else None

    @app_commands.command(name="question", description="Modに関する質問を行うためのフォーラムを作成します。")
    @app_commands.guild_only()
    @has_authed_role()
    @app_commands.checks.cooldown(1, 60.0, key=lambda i: (i.guild_id, i.user.id))
    @app_commands.checks.bot_has_permissions(create_public_threads=True)
    async def question(self, interaction: discord.Interaction) -> None:
        """Walk the user through the question form and post it to the forum."""

        forum = await self._forum()
        if forum is None:
            await interaction.response.send_message("質問フォーラムが見つかりません。", ephemeral=True)
            return

        cfg = self.bot.services.config.current.question
        workflow = QuestionWorkflow(
            self.bot,
            interaction,
            forum,
            exclude_tags=cfg.EXCLUDE_TAGS,
            timeout=cfg.TIMEOUT_SECONDS,
        )
        state = await workflow.run()
        logger.info("Question session %s ended in state %s", interaction.id, state.name)
