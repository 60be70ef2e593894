"""
Startup hydration of the message and member stores.

:class:`MessageCacheWarmup` walks every readable channel and thread of the
configured guilds once per process and bulk-loads recent history into the
message store. :class:`MemberCacheWarmup` does the same for guild rosters.
Both are claimed through a :class:`~guildkeeper.maintenance.OneShot`, so a
repeated ready event is a no-op.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, List

import discord

from guildkeeper.config import ConfigStore
from guildkeeper.maintenance import OneShot

from .snapshots import CachedMember, CachedMessage
from .store import CacheStore

logger = logging.getLogger(__name__)


async def fetch_archived_threads(
    channel: Any, page_size: int = 100, max_retries: int = 3
) -> List[discord.Thread]:
    """
    Collect every archived public thread of ``channel``.

    Pages are requested ``before`` the archive timestamp of the last thread
    seen. A failing page is retried up to ``max_retries`` times; after that the
    enumeration stops and whatever was gathered so far is returned.
    """

    threads: List[discord.Thread] = []
    cursor = None
    while True:
        page: List[discord.Thread] | None = None
        for attempt in range(1, max_retries + 1):
            try:
                page = [t async for t in channel.archived_threads(limit=page_size, before=cursor)]
                break
            except discord.HTTPException as exc:
                logger.warning(
                    "Archived thread page for channel %s failed (attempt %d/%d): %s",
                    channel.id,
                    attempt,
                    max_retries,
                    exc,
                )
        if page is None:
            return threads

        threads.extend(page)
        if len(page) < page_size:
            return threads

        cursor = getattr(page[-1], "archive_timestamp", None)
        if cursor is None:
            return threads


class MessageCacheWarmup:
    """One-shot bulk load of recent channel history into the message store."""

    def __init__(self, store: CacheStore[CachedMessage], config: ConfigStore) -> None:
        self._store = store
        self._config = config
        self._once = OneShot("message-cache-warmup")

    async def run(self, bot: Any) -> int:
        """Warm the store; returns the number of messages cached."""

        if not self._once.claim():
            logger.debug("Message cache warmup already claimed; skipping")
            return 0

        cfg = self._config.current.message_cache
        if cfg.DISABLED:
            logger.info("Message cache disabled; skipping warmup")
            return 0

        total = 0
        for guild_id in cfg.TARGET_GUILD_IDS:
            total += await self._warm_guild(bot, guild_id)
        logger.info("Message cache warmup finished: %d messages cached", total)
        return total

    async def _warm_guild(self, bot: Any, guild_id: int) -> int:
        cfg = self._config.current.message_cache
        guild = bot.get_guild(guild_id)
        if guild is None:
            logger.warning("Target guild %s is not available; skipping warmup", guild_id)
            return 0

        me = guild.me
        if me is None:
            try:
                me = await guild.fetch_member(bot.user.id)
            except discord.HTTPException:
                logger.exception("Could not resolve bot member in guild %s", guild_id)
                return 0

        semaphore = asyncio.Semaphore(max(cfg.CONCURRENCY, 1))

        async def _bounded(channel: Any) -> int:
            async with semaphore:
                return await self._cache_channel(channel, me)

        tasks = [asyncio.create_task(_bounded(ch)) async for ch in self._iter_channels(guild)]
        if not tasks:
            return 0

        counts = await asyncio.gather(*tasks, return_exceptions=True)
        total = 0
        for count in counts:
            if isinstance(count, BaseException):
                logger.error("Channel warmup failed in guild %s: %r", guild_id, count)
                continue
            total += count
        return total

    async def _iter_channels(self, guild: Any) -> AsyncIterator[Any]:
        """Yield active threads, then each channel followed by its archived threads."""

        cfg = self._config.current.message_cache
        for thread in guild.threads:
            yield thread

        try:
            channels = await guild.fetch_channels()
        except discord.HTTPException:
            logger.exception("Failed to list channels for guild %s", guild.id)
            return

        for channel in channels:
            yield channel
            if hasattr(channel, "archived_threads"):
                archived = await fetch_archived_threads(
                    channel, cfg.ARCHIVE_PAGE_SIZE, cfg.ARCHIVE_MAX_RETRIES
                )
                for thread in archived:
                    yield thread

    async def _cache_channel(self, channel: Any, me: Any) -> int:
        cfg = self._config.current.message_cache
        if not hasattr(channel, "history"):
            return 0

        ignored = cfg.IGNORE_CHANNEL_IDS
        if channel.id in ignored or getattr(channel, "parent_id", None) in ignored:
            return 0

        if not channel.permissions_for(me).read_message_history:
            return 0

        messages: List[CachedMessage] = []
        try:
            async for message in channel.history(limit=cfg.LIMIT):
                messages.append(CachedMessage.from_message(message))
        except discord.HTTPException as exc:
            logger.warning("History fetch for channel %s stopped early: %s", channel.id, exc)

        count = self._store.extend(messages)
        logger.info("Cached %d messages for channel %s (%s)", count, getattr(channel, "name", "?"), channel.id)
        return count


class MemberCacheWarmup:
    """One-shot load of every guild roster into the member store."""

    def __init__(self, store: CacheStore[CachedMember]) -> None:
        self._store = store
        self._once = OneShot("member-cache-warmup")

    async def run(self, bot: Any) -> int:
        if not self._once.claim():
            logger.debug("Member cache warmup already claimed; skipping")
            return 0

        total = 0
        for guild in bot.guilds:
            try:
                members = [CachedMember.from_member(m) async for m in guild.fetch_members(limit=None)]
            except discord.HTTPException:
                logger.exception("Failed to fetch members for guild %s", guild.id)
                continue
            total += self._store.extend(members)
            logger.info("Cached %d members for guild %s", len(members), guild.id)
        return total


__all__ = ["MessageCacheWarmup", "MemberCacheWarmup", "fetch_archived_threads"]
