import asyncio
import datetime
from types import SimpleNamespace

import discord

from guildkeeper.memory.cache import CacheStore
from guildkeeper.memory.cache.warmup import MemberCacheWarmup, MessageCacheWarmup, fetch_archived_threads


def _http_error():
    return discord.HTTPException(SimpleNamespace(status=500, reason="boom"), "failed")


def _message(channel_id, message_id):
    return SimpleNamespace(
        id=message_id,
        channel=SimpleNamespace(id=channel_id),
        guild=SimpleNamespace(id=1),
        author=SimpleNamespace(id=5, name="alice", display_name="Alice", display_avatar=None),
        content=f"message {message_id}",
        created_at=None,
        edited_at=None,
        pinned=False,
        mentions=[],
        attachments=[],
        reference=None,
        poll=None,
    )


class FakeTextChannel:
    def __init__(self, cid, *, messages=0, readable=True, parent_id=None, archived=None):
        self.id = cid
        self.name = f"channel-{cid}"
        self.parent_id = parent_id
        self._messages = [_message(cid, cid * 1000 + i) for i in range(messages)]
        self._readable = readable
        self._archived = archived or []
        self.history_calls = 0

    def permissions_for(self, member):
        return SimpleNamespace(read_message_history=self._readable)

    def history(self, *, limit=None):
        self.history_calls += 1

        async def gen():
            for m in self._messages[:limit]:
                yield m

        return gen()

    def archived_threads(self, *, limit=None, before=None):
        async def gen():
            for t in self._archived:
                yield t

        return gen()


class PagedChannel:
    """Archived threads served in pages, with scripted failures."""

    def __init__(self, pages, failures=None):
        self.id = 77
        self.pages = pages
        self.failures = dict(failures or {})
        self.calls = []

    def archived_threads(self, *, limit=None, before=None):
        index = len({c for c in self.calls})
        self.calls.append(before)
        page_no = min(index, len(self.pages) - 1)

        async def gen():
            if self.failures.get(page_no, 0) > 0:
                self.failures[page_no] -= 1
                raise _http_error()
            for t in self.pages[page_no]:
                yield t

        return gen()


def _thread(ts):
    return SimpleNamespace(id=ts, archive_timestamp=datetime.datetime(2024, 1, 1) + datetime.timedelta(days=ts))


def test_archived_threads_paginate_until_short_page():
    pages = [[_thread(3), _thread(2)], [_thread(1)]]
    channel = PagedChannel(pages)

    threads = asyncio.run(fetch_archived_threads(channel, page_size=2))

    assert [t.id for t in threads] == [3, 2, 1]
    assert channel.calls[0] is None
    assert channel.calls[1] == pages[0][-1].archive_timestamp


def test_archived_threads_retry_then_give_up_with_partial_result():
    pages = [[_thread(3), _thread(2)], [_thread(1)]]
    channel = PagedChannel(pages, failures={1: 99})

    threads = asyncio.run(fetch_archived_threads(channel, page_size=2, max_retries=3))

    assert [t.id for t in threads] == [3, 2]
    # one successful first page, then three failed attempts at the second
    assert len(channel.calls) == 4


def test_archived_threads_recover_after_transient_failure():
    pages = [[_thread(3)]]
    channel = PagedChannel(pages, failures={0: 2})

    threads = asyncio.run(fetch_archived_threads(channel, page_size=2, max_retries=3))

    assert [t.id for t in threads] == [3]


def _guild(channels, threads=()):
    async def fetch_channels():
        return channels

    return SimpleNamespace(id=1, me=SimpleNamespace(id=999), threads=list(threads), fetch_channels=fetch_channels)


def test_warmup_caches_readable_channels_once(make_config, bot_cls):
    config = make_config(
        {"message_cache": {"target_guild_ids": [1], "ignore_channel_ids": [20], "limit": 3}}
    )
    readable = FakeTextChannel(10, messages=5)
    ignored = FakeTextChannel(20, messages=5)
    ignored_child = FakeTextChannel(21, messages=5, parent_id=20)
    hidden = FakeTextChannel(30, messages=5, readable=False)
    category = SimpleNamespace(id=40)
    active_thread = FakeTextChannel(50, messages=2, parent_id=10)

    bot = bot_cls()
    bot.guilds = [_guild([readable, ignored, hidden, category], threads=[active_thread, ignored_child])]
    store = CacheStore()
    warmup = MessageCacheWarmup(store, config)

    async def run_twice():
        first = await warmup.run(bot)
        second = await warmup.run(bot)
        return first, second

    first, second = asyncio.run(run_twice())

    assert first == 3 + 2
    assert second == 0
    assert readable.history_calls == 1
    assert ignored.history_calls == 0
    assert ignored_child.history_calls == 0
    assert hidden.history_calls == 0
    assert len(store.get_all(10)) == 3
    assert len(store.get_all(50)) == 2


def test_warmup_includes_archived_threads(make_config, bot_cls):
    config = make_config({"message_cache": {"target_guild_ids": [1]}})
    archived = FakeTextChannel(11, messages=1, parent_id=10)
    archived.archive_timestamp = None
    parent = FakeTextChannel(10, messages=1, archived=[archived])

    bot = bot_cls()
    bot.guilds = [_guild([parent])]
    store = CacheStore()

    total = asyncio.run(MessageCacheWarmup(store, config).run(bot))

    assert total == 2
    assert store.get(11, 11000) is not None


def test_disabled_warmup_does_nothing(make_config, bot_cls):
    config = make_config({"message_cache": {"disabled": True, "target_guild_ids": [1]}})
    channel = FakeTextChannel(10, messages=1)
    bot = bot_cls()
    bot.guilds = [_guild([channel])]

    assert asyncio.run(MessageCacheWarmup(CacheStore(), config).run(bot)) == 0
    assert channel.history_calls == 0


def test_member_warmup_loads_every_guild_once(bot_cls):
    def member(uid, guild_id):
        return SimpleNamespace(
            id=uid,
            name=f"user{uid}",
            display_name=f"User {uid}",
            bot=False,
            roles=[SimpleNamespace(id=100)],
            joined_at=None,
            guild=SimpleNamespace(id=guild_id),
        )

    def guild(gid, members):
        def fetch_members(limit=None):
            async def gen():
                for m in members:
                    yield m

            return gen()

        return SimpleNamespace(id=gid, fetch_members=fetch_members)

    bot = bot_cls()
    bot.guilds = [guild(1, [member(1, 1), member(2, 1)]), guild(2, [member(3, 2)])]
    store = CacheStore()
    warmup = MemberCacheWarmup(store)

    async def run_twice():
        return await warmup.run(bot), await warmup.run(bot)

    assert asyncio.run(run_twice()) == (3, 0)
    assert store.get(1, 2).has_role(100)
    assert store.get(2, 3) is not None


class SlowChannel(FakeTextChannel):
    """History that yields control so overlapping fetches can be counted."""

    def __init__(self, cid, tracker):
        super().__init__(cid, messages=1)
        self.tracker = tracker

    def history(self, *, limit=None):
        inner = super().history(limit=limit)
        tracker = self.tracker

        async def gen():
            tracker["active"] += 1
            tracker["peak"] = max(tracker["peak"], tracker["active"])
            try:
                await asyncio.sleep(0.01)
                async for m in inner:
                    yield m
            finally:
                tracker["active"] -= 1

        return gen()


def test_warmup_parallelism_is_bounded_and_runs_once_under_concurrent_ready(make_config, bot_cls):
    config = make_config({"message_cache": {"target_guild_ids": [1], "concurrency": 10}})
    tracker = {"active": 0, "peak": 0}
    channels = [SlowChannel(100 + i, tracker) for i in range(40)]
    bot = bot_cls()
    bot.guilds = [_guild(channels)]
    store = CacheStore()
    warmup = MessageCacheWarmup(store, config)

    async def concurrent_ready():
        return await asyncio.gather(warmup.run(bot), warmup.run(bot))

    results = asyncio.run(concurrent_ready())

    assert sorted(results) == [0, 40]
    assert 1 < tracker["peak"] <= 10
    assert all(ch.history_calls == 1 for ch in channels)
    assert len(store) == 40
