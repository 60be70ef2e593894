import asyncio
from types import SimpleNamespace

import discord

from guildkeeper.event_hooks import thread_hook
from guildkeeper.invites import INVITE_PLACEHOLDER
from guildkeeper.services import build_services


class FakeMessage:
    def __init__(self, log, content):
        self.log = log
        self.content = content

    async def edit(self, content=None, **kwargs):
        self.log.append(("edit", content))

    async def delete(self):
        self.log.append(("delete", self.content))


class FakeThread:
    def __init__(self, kind=discord.ChannelType.public_thread, parent_id=20):
        self.id = 900
        self.name = "help"
        self.type = kind
        self.parent = SimpleNamespace(id=parent_id)
        self.parent_id = parent_id
        self.log = []

    async def send(self, content=None, **kwargs):
        self.log.append(("send", content))
        return FakeMessage(self.log, content)


def _bot(make_config, bot_cls):
    config = make_config(
        {
            "thread_auto_invite": {"role_ids": [101, 102]},
            "thread_channel_startup": {"threads": [{"channel_id": 20, "startup_message": "ようこそ"}]},
        }
    )
    return bot_cls(services=build_services(config))


def test_public_thread_gets_invite_then_startup_message(make_config, bot_cls):
    thread = FakeThread()

    asyncio.run(thread_hook.handle(_bot(make_config, bot_cls), thread))

    assert thread.log == [
        ("send", INVITE_PLACEHOLDER),
        ("edit", "<@&101> <@&102>"),
        ("delete", INVITE_PLACEHOLDER),
        ("send", "ようこそ"),
    ]


def test_private_thread_skips_invite(make_config, bot_cls):
    thread = FakeThread(kind=discord.ChannelType.private_thread, parent_id=21)

    asyncio.run(thread_hook.handle(_bot(make_config, bot_cls), thread))

    assert thread.log == []
