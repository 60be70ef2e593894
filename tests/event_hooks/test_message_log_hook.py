import asyncio
from types import SimpleNamespace

from guildkeeper.event_hooks import message_log_hook
from guildkeeper.memory.cache import CachedMessage
from guildkeeper.message_log import DELETE_COLOR, EDIT_COLOR
from guildkeeper.services import build_services

LOG_CHANNEL = 700


def _bot(make_config, bot_cls):
    bot = bot_cls(services=build_services(make_config({"message_logging": {"channel_id": LOG_CHANNEL}})))
    bot.services.messages.insert(
        CachedMessage(channel_id=5, message_id=6, guild_id=1, author_id=3, author_name="poster", content="old line")
    )
    return bot


def _payload(**kwargs):
    defaults = dict(guild_id=1, channel_id=5, message_id=6, cached_message=None)
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class EditableChannel:
    def __init__(self, message):
        self.id = 5
        self.message = message

    async def fetch_message(self, message_id):
        return self.message


def _fetched(content, author_id=3):
    return SimpleNamespace(
        id=6,
        channel=SimpleNamespace(id=5),
        guild=SimpleNamespace(id=1),
        author=SimpleNamespace(id=author_id, display_name="poster"),
        content=content,
    )


def test_delete_logs_cached_message_and_evicts(make_config, bot_cls):
    bot = _bot(make_config, bot_cls)

    asyncio.run(message_log_hook.handle_delete(bot, _payload()))

    (sent,) = bot.get_partial_messageable(LOG_CHANNEL).sent
    assert sent.embed.colour.value == DELETE_COLOR
    assert any(field.value == "old line" for field in sent.embed.fields)
    assert bot.services.messages.get(5, 6) is None


def test_delete_of_unknown_message_is_not_logged(make_config, bot_cls):
    bot = _bot(make_config, bot_cls)

    asyncio.run(message_log_hook.handle_delete(bot, _payload(message_id=99)))

    assert LOG_CHANNEL not in bot.channels


def test_edit_logs_diff_and_refreshes_store(make_config, bot_cls):
    bot = _bot(make_config, bot_cls)
    bot.channels[5] = EditableChannel(_fetched("new line"))

    asyncio.run(message_log_hook.handle_edit(bot, _payload()))

    (sent,) = bot.get_partial_messageable(LOG_CHANNEL).sent
    assert sent.embed.colour.value == EDIT_COLOR
    diff = next(field.value for field in sent.embed.fields if field.name == "差分")
    assert "- old line" in diff and "+ new line" in diff
    assert bot.services.messages.get(5, 6).content == "new line"


def test_edit_by_the_bot_itself_is_ignored(make_config, bot_cls):
    bot = _bot(make_config, bot_cls)
    bot.channels[5] = EditableChannel(_fetched("new line", author_id=bot.user.id))

    asyncio.run(message_log_hook.handle_edit(bot, _payload()))

    assert LOG_CHANNEL not in bot.channels


def test_logging_disabled_without_channel(make_config, bot_cls):
    bot = bot_cls(services=build_services(make_config({})))

    asyncio.run(message_log_hook.handle_delete(bot, _payload()))

    assert bot.channels == {}
