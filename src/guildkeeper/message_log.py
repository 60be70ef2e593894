"""Embeds posted to the message log channel on edits and deletes."""

from __future__ import annotations

import discord

from .memory.cache import CachedMessage, ReferenceKind
from .utils import create_diff_lines_text, truncate

EDIT_COLOR = 0xFF8800
DELETE_COLOR = 0xF00000


def _base_embed(message: CachedMessage, title: str, color: int) -> discord.Embed:
    embed = discord.Embed(title=title, color=color, timestamp=discord.utils.utcnow())
    embed.set_author(name=message.author_name, icon_url=message.author_avatar_url)
    embed.add_field(name="メンバー", value=f"<@{message.author_id}>", inline=True)
    embed.add_field(name="メッセージ", value=message.jump_url, inline=True)
    if message.created_at is not None:
        embed.add_field(name="送信日時", value=discord.utils.format_dt(message.created_at), inline=True)

    if message.reference is not None:
        label = "転送元" if message.reference.kind is ReferenceKind.FORWARD else "返信先"
        embed.add_field(name=label, value=message.reference.jump_url, inline=False)

    if message.poll is not None:
        answers = "\n".join(f"- {answer.text}" for answer in message.poll.answers)
        embed.add_field(
            name="投票",
            value=truncate(f"{message.poll.question or ''}\n{answers}".strip() or "-"),
            inline=False,
        )
    return embed


def _attachment_field(embed: discord.Embed, message: CachedMessage) -> None:
    if message.attachments:
        listing = "\n".join(f"[{a.filename}]({a.url})" for a in message.attachments)
        embed.add_field(name="添付ファイル", value=truncate(listing), inline=False)


def build_edit_embed(before: CachedMessage, after: CachedMessage) -> discord.Embed:
    embed = _base_embed(after, "メッセージ編集", EDIT_COLOR)
    diff = create_diff_lines_text(before.content, after.content)
    embed.add_field(name="差分", value=f"```diff\n{truncate(diff, 1000)}\n```" if diff else "-", inline=False)
    _attachment_field(embed, after)
    return embed


def build_delete_embed(message: CachedMessage) -> discord.Embed:
    embed = _base_embed(message, "メッセージ削除", DELETE_COLOR)
    embed.add_field(name="内容", value=truncate(message.content) if message.content else "-", inline=False)
    _attachment_field(embed, message)
    return embed


__all__ = ["DELETE_COLOR", "EDIT_COLOR", "build_delete_embed", "build_edit_embed"]
