import asyncio
from types import SimpleNamespace

import discord

from guildkeeper.interactions import InteractionCollector, component_check


def _interaction(custom_id, user_id=1, kind=discord.InteractionType.component):
    return SimpleNamespace(data={"custom_id": custom_id}, user=SimpleNamespace(id=user_id), type=kind)


def test_first_returns_first_matching_event(fake_bot):
    async def scenario():
        collector = InteractionCollector(fake_bot, custom_ids={"yes", "no"}, timeout=5).open()
        await fake_bot.dispatch("interaction", _interaction("other"))
        await fake_bot.dispatch("interaction", _interaction("no"))
        await fake_bot.dispatch("interaction", _interaction("yes"))
        return await collector.first()

    result = asyncio.run(scenario())

    assert result.data["custom_id"] == "no"
    assert fake_bot.listener_count("on_interaction") == 0


def test_first_times_out_with_none_and_unregisters(fake_bot):
    async def scenario():
        collector = InteractionCollector(fake_bot, custom_ids={"yes"}, timeout=0.05)
        async with collector:
            assert fake_bot.listener_count("on_interaction") == 1
            value = await collector.first()
        return value, collector

    value, collector = asyncio.run(scenario())

    assert value is None
    assert collector.timed_out
    assert fake_bot.listener_count("on_interaction") == 0


def test_stream_ends_on_close(fake_bot):
    async def scenario():
        collector = InteractionCollector(fake_bot, check=component_check(1), timeout=5).open()
        seen = []

        async def consume():
            async for interaction in collector.stream():
                seen.append(interaction.data["custom_id"])

        task = asyncio.create_task(consume())
        await fake_bot.dispatch("interaction", _interaction("a"))
        await fake_bot.dispatch("interaction", _interaction("b", user_id=2))
        await fake_bot.dispatch("interaction", _interaction("c", kind=discord.InteractionType.modal_submit))
        await fake_bot.dispatch("interaction", _interaction("d"))
        await asyncio.sleep(0)
        collector.close()
        await asyncio.wait_for(task, 1)
        return seen, collector

    seen, collector = asyncio.run(scenario())

    assert seen == ["a", "d"]
    assert not collector.timed_out


def test_raising_check_counts_as_non_match(fake_bot):
    def check(interaction):
        if interaction.data["custom_id"] == "bad":
            raise RuntimeError("broken predicate")
        return True

    async def scenario():
        collector = InteractionCollector(fake_bot, check=check, timeout=1).open()
        await fake_bot.dispatch("interaction", _interaction("bad"))
        await fake_bot.dispatch("interaction", _interaction("good"))
        return await collector.first()

    assert asyncio.run(scenario()).data["custom_id"] == "good"


def test_message_events_use_their_own_listener(fake_bot):
    async def scenario():
        collector = InteractionCollector(
            fake_bot, event="message", check=lambda m: m.content == "ping", timeout=1
        ).open()
        assert fake_bot.listener_count("on_message") == 1
        await fake_bot.dispatch("message", SimpleNamespace(content="pong"))
        await fake_bot.dispatch("message", SimpleNamespace(content="ping"))
        return await collector.first()

    assert asyncio.run(scenario()).content == "ping"
