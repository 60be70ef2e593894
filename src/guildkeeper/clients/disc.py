"""Discord bot bootstrap utilities."""

from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands as discord_commands

from guildkeeper import commands as gk_commands
from guildkeeper.config import ConfigStore
from guildkeeper.errors import on_app_command_error
from guildkeeper.event_hooks import EventKind
from guildkeeper.services import Services, build_services

logger = logging.getLogger(__name__)


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.members = True
    intents.message_content = True
    return intents


class GKCommandTree(app_commands.CommandTree):
    async def on_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError) -> None:
        await on_app_command_error(interaction, error)


class GKBot(discord_commands.Bot):
    """Discord client that forwards gateway events to the service router."""

    def __init__(self, services: Services) -> None:
        cfg = services.config.current.bot
        super().__init__(
            command_prefix=discord_commands.when_mentioned,
            intents=build_intents(),
            tree_cls=GKCommandTree,
            max_messages=cfg.MAX_LIVE_MESSAGES,
            owner_ids=set(cfg.OWNERS) or None,
            application_id=cfg.APPLICATION_ID or None,
        )
        self.services = services

    async def setup_hook(self) -> None:
        """Register slash commands and synchronise with Discord."""

        await gk_commands.setup(self)

        try:
            synced = await self.tree.sync()
            logger.info("Synced %d application command(s)", len(synced))
        except discord.HTTPException:
            logger.exception("Failed to sync application commands")

    async def close(self) -> None:
        await self.services.auto_kick.stop()
        await super().close()

    # --- gateway events ---------------------------------------------------- #

    async def on_ready(self) -> None:
        await self.services.router.dispatch(EventKind.READY, self)

    async def on_message(self, message: discord.Message) -> None:
        await self.services.router.dispatch(EventKind.MESSAGE_CREATE, self, message)

    async def on_raw_message_edit(self, payload: discord.RawMessageUpdateEvent) -> None:
        await self.services.router.dispatch(EventKind.MESSAGE_UPDATE, self, payload)

    async def on_raw_message_delete(self, payload: discord.RawMessageDeleteEvent) -> None:
        await self.services.router.dispatch(EventKind.MESSAGE_DELETE, self, payload)

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        await self.services.router.dispatch(EventKind.INTERACTION_CREATE, self, interaction)

    async def on_thread_create(self, thread: discord.Thread) -> None:
        await self.services.router.dispatch(EventKind.THREAD_CREATE, self, thread)

    async def on_member_join(self, member: discord.Member) -> None:
        await self.services.router.dispatch(EventKind.MEMBER_ADD, self, member)

    async def on_member_update(self, before: discord.Member, after: discord.Member) -> None:
        await self.services.router.dispatch(EventKind.MEMBER_UPDATE, self, before, after)

    async def on_raw_member_remove(self, payload: discord.RawMemberRemoveEvent) -> None:
        await self.services.router.dispatch(EventKind.MEMBER_REMOVE, self, payload)


def create_bot(config: ConfigStore) -> GKBot:
    return GKBot(build_services(config))


def run(config: ConfigStore) -> int:
    """Start the Discord bot; returns a process exit code."""

    token = config.current.bot.TOKEN
    if not token:
        logger.error("No bot token configured. Cannot run client.")
        return 1

    bot = create_bot(config)
    try:
        # Logging is already configured by guildkeeper.config.
        bot.run(token, log_handler=None)
    except discord.LoginFailure as exc:
        logger.error("Login failed: %s", exc)
        return 1
    return 0
