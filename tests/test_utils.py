import asyncio

import pytest

from guildkeeper.utils import create_diff_lines_text, format_duration, parse_message_reference, send_log, truncate


@pytest.mark.parametrize(
    "seconds, expected",
    [(3900, "1時間 5分"), (59.2, "1分"), (45, "45秒"), (90061, "1日 1時間"), (0, "0秒")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_diff_marks_removed_and_added_lines():
    diff = create_diff_lines_text("a\nb\nc", "a\nB\nc\nd")

    assert diff.splitlines() == ["a", "- b", "+ B", "c", "+ d"]


def test_truncate():
    assert truncate("abc", 5) == "abc"
    assert truncate("abcdef", 5) == "abcd…"


def test_parse_message_reference():
    assert parse_message_reference(" 123 ") == (None, 123)
    assert parse_message_reference("https://discord.com/channels/1/22/333") == (22, 333)
    assert parse_message_reference("https://ptb.discord.com/channels/@me/22/333") == (22, 333)
    with pytest.raises(ValueError):
        parse_message_reference("https://example.com/channels/1/2/3")


def test_send_log_skips_unset_channel(fake_bot):
    assert asyncio.run(send_log(fake_bot, 0, content="x")) is None
    assert fake_bot.channels == {}


def test_send_log_swallows_http_errors(fake_bot, fake_channel_cls):
    fake_bot.channels[10] = fake_channel_cls(10, fail=True)

    assert asyncio.run(send_log(fake_bot, 10, content="x")) is None


def test_send_log_disables_mentions(fake_bot):
    message = asyncio.run(send_log(fake_bot, 10, content="<@1>"))

    assert message.content == "<@1>"
    assert message.allowed_mentions.everyone is False
