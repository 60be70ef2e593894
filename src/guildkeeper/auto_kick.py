"""
Periodic removal of members who never authenticated.

Once per interval the configured guild's roster is walked; any human member
without the auth role whose join time is older than the grace period is sent
the configured DM (best effort) and kicked. Each outcome, successful or not,
is posted to the auth log channel with the member's id.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
from dataclasses import dataclass
from typing import Any, List

import discord

from . import maintenance
from .config import ConfigStore
from .maintenance import OneShot
from .utils import send_log

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KickOutcome:
    user_id: int
    display_name: str
    kicked: bool
    dm_sent: bool
    error: str | None = None

    def log_line(self) -> str:
        if not self.kicked:
            return f"{self.display_name} (`{self.user_id}`) のキックに失敗しました。\n```\n{self.error}\n```"
        line = f"{self.display_name} (`{self.user_id}`) をキックしました。"
        if not self.dm_sent:
            line += "DMの送信に失敗しました。"
        return line


def is_eligible(member: Any, now: datetime.datetime, auth_role_id: int, grace: datetime.timedelta) -> bool:
    """Return ``True`` when ``member`` should be kicked at ``now``."""

    if member.bot:
        return False
    if any(role.id == auth_role_id for role in member.roles):
        return False
    if member.joined_at is None:
        return False
    return now - member.joined_at >= grace


class AutoKickScheduler:
    def __init__(self, config: ConfigStore) -> None:
        self._config = config
        self._once = OneShot("auto-kick")
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self, bot: Any) -> asyncio.Task | None:
        """Start the sweep loop; later calls are ignored."""

        cfg = self._config.current.auto_kick
        if not cfg.ENABLED or not cfg.GUILD_ID:
            logger.info("Auto-kick disabled or no guild configured")
            return None
        if not self._once.claim():
            return self._task

        async def _cycle() -> None:
            await self.run_once(bot)

        self._task = await maintenance.startup(
            _cycle, cfg.INTERVAL_SECONDS, run_immediately=True, name="auto-kick"
        )
        logger.info("Auto-kick loop started (every %.0fs)", cfg.INTERVAL_SECONDS)
        return self._task

    async def stop(self) -> None:
        await maintenance.shutdown(self._task)
        self._task = None

    async def run_once(self, bot: Any) -> List[KickOutcome]:
        guild_id = self._config.current.auto_kick.GUILD_ID
        guild = bot.get_guild(guild_id)
        if guild is None:
            logger.warning("Auto-kick guild %s is not available", guild_id)
            return []
        return await self.sweep(bot, guild)

    async def sweep(self, bot: Any, guild: Any, now: datetime.datetime | None = None) -> List[KickOutcome]:
        cfg = self._config.current
        now = now or discord.utils.utcnow()
        grace = datetime.timedelta(hours=cfg.auto_kick.GRACE_PERIOD_HOURS)
        outcomes: List[KickOutcome] = []

        async for member in guild.fetch_members(limit=None):
            if not is_eligible(member, now, cfg.auth.ROLE_ID, grace):
                continue
            outcome = await self._kick(member, cfg.auto_kick.KICK_MESSAGE)
            outcomes.append(outcome)
            await send_log(bot, cfg.auth.LOG_CHANNEL_ID, content=outcome.log_line())

        if outcomes:
            logger.info("Auto-kick sweep of guild %s handled %d member(s)", guild.id, len(outcomes))
        return outcomes

    async def _kick(self, member: Any, kick_message: str) -> KickOutcome:
        # The DM has to go out first; once kicked there is no shared guild to DM through.
        dm_sent = True
        try:
            await member.send(kick_message)
        except discord.HTTPException as exc:
            dm_sent = False
            logger.info("Could not DM %s before kick: %s", member.id, exc)

        try:
            await member.kick(reason="Authentication not completed within the grace period")
        except discord.HTTPException as exc:
            logger.error("Failed to kick %s: %s", member.id, exc)
            return KickOutcome(member.id, member.display_name, kicked=False, dm_sent=dm_sent, error=str(exc))

        logger.info("Kicked unauthenticated member %s (%s)", member, member.id)
        return KickOutcome(member.id, member.display_name, kicked=True, dm_sent=dm_sent)


__all__ = ["AutoKickScheduler", "KickOutcome", "is_eligible"]
