"""Small helpers shared by commands, hooks and background jobs."""

from __future__ import annotations

import asyncio
import difflib
import logging
import math
import re
from typing import Any, List, Tuple

import discord

logger = logging.getLogger(__name__)

# Log posts and user-facing replies never ping anyone.
SAFE_MENTIONS = discord.AllowedMentions.none()

_DURATION_UNITS: Tuple[Tuple[int, str], ...] = (
    (86400, "日"),
    (3600, "時間"),
    (60, "分"),
    (1, "秒"),
)

_MESSAGE_LINK = re.compile(
    r"^https?://(?:(?:ptb|canary)\.)?discord(?:app)?\.com/channels/"
    r"(?P<guild>\d+|@me)/(?P<channel>\d+)/(?P<message>\d+)/?$"
)


def format_duration(seconds: float, max_units: int = 2) -> str:
    """
    Render a remaining time such as a cooldown, e.g. ``3900`` -> ``1時間 5分``.

    Only the ``max_units`` largest non-zero units are shown. Fractions of a
    second round up.
    """

    remaining = math.ceil(seconds)
    if remaining <= 0:
        return "0秒"

    parts: List[str] = []
    for size, label in _DURATION_UNITS:
        value, remaining = divmod(remaining, size)
        if value:
            parts.append(f"{value}{label}")
        if len(parts) >= max_units:
            break
    return " ".join(parts)


def create_diff_lines_text(before: str, after: str) -> str:
    """
    Return a line diff of two message bodies.

    Removed lines are prefixed with ``- ``, added lines with ``+ ``, and
    unchanged lines are emitted as-is.
    """

    old_lines = before.splitlines()
    new_lines = after.splitlines()
    out: List[str] = []
    matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            out.extend(old_lines[i1:i2])
            continue
        if tag in ("replace", "delete"):
            out.extend(f"- {line}" for line in old_lines[i1:i2])
        if tag in ("replace", "insert"):
            out.extend(f"+ {line}" for line in new_lines[j1:j2])
    return "\n".join(out)


def truncate(text: str, limit: int = 1024) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def parse_message_reference(raw: str) -> Tuple[int | None, int]:
    """
    Parse a message id or message link into ``(channel_id, message_id)``.

    Plain ids yield ``channel_id=None``. Raises :class:`ValueError` on input
    that is neither.
    """

    raw = raw.strip()
    if raw.isdigit():
        return None, int(raw)
    match = _MESSAGE_LINK.match(raw)
    if match is None:
        raise ValueError(f"not a message id or link: {raw!r}")
    return int(match.group("channel")), int(match.group("message"))


async def send_log(bot: Any, channel_id: int, **kwargs: Any) -> discord.Message | None:
    """
    Post to a log channel on a best-effort basis.

    A missing channel or a failed send is logged and ``None`` is returned; log
    delivery never interrupts the caller.
    """

    if not channel_id:
        return None

    kwargs.setdefault("allowed_mentions", SAFE_MENTIONS)
    channel = bot.get_channel(channel_id)
    if channel is None:
        channel = bot.get_partial_messageable(channel_id)
    try:
        return await channel.send(**kwargs)
    except discord.HTTPException:
        logger.exception("Failed to send log message to channel %s", channel_id)
        return None


async def await_initial_message(bot: Any, thread: Any, timeout: float) -> bool:
    """
    Wait until a new thread's starter message exists.

    Forum posts are created together with their first message, but the thread
    create event may arrive before it. Non-forum threads proceed immediately.
    Returns ``False`` if nothing shows up within ``timeout`` seconds.
    """

    parent = getattr(thread, "parent", None)
    if not isinstance(parent, discord.ForumChannel):
        return True

    if getattr(thread, "starter_message", None) is not None:
        return True

    def _check(message: discord.Message) -> bool:
        return message.channel.id == thread.id

    try:
        await bot.wait_for("message", check=_check, timeout=timeout)
    except asyncio.TimeoutError:
        logger.info("No initial message in thread %s after %.0fs; skipping", thread.id, timeout)
        return False
    return True


__all__ = [
    "SAFE_MENTIONS",
    "format_duration",
    "create_diff_lines_text",
    "truncate",
    "parse_message_reference",
    "send_log",
    "await_initial_message",
]
