"""
Immutable snapshots stored by :class:`~guildkeeper.memory.cache.store.CacheStore`.

discord.py models keep references back into the live connection state and are
mutated in place as gateway updates arrive. The cache therefore never stores
them directly: :meth:`CachedMessage.from_message` and
:meth:`CachedMember.from_member` copy the fields the bot needs into frozen
dataclasses at observation time. Every snapshot exposes ``cache_key`` as the
``(container_id, item_id)`` pair the store indexes on.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Tuple

import discord

_DEFAULT_AVATAR_URL = "https://cdn.discordapp.com/embed/avatars/0.png"


class ReferenceKind(Enum):
    REPLY = "reply"
    FORWARD = "forward"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CachedAttachment:
    filename: str
    url: str


@dataclass(frozen=True)
class CachedReference:
    kind: ReferenceKind
    channel_id: int
    guild_id: int | None
    message_id: int | None

    @property
    def jump_url(self) -> str:
        guild = self.guild_id if self.guild_id is not None else "@me"
        return f"https://discord.com/channels/{guild}/{self.channel_id}/{self.message_id or 0}"

    @classmethod
    def from_reference(cls, ref: Any) -> "CachedReference":
        ref_type = getattr(ref, "type", None)
        name = getattr(ref_type, "name", "default")
        if name == "default":
            kind = ReferenceKind.REPLY
        elif name == "forward":
            kind = ReferenceKind.FORWARD
        else:
            kind = ReferenceKind.UNKNOWN
        return cls(
            kind=kind,
            channel_id=ref.channel_id,
            guild_id=getattr(ref, "guild_id", None),
            message_id=getattr(ref, "message_id", None),
        )


@dataclass(frozen=True)
class CachedPollAnswer:
    text: str | None
    vote_count: int | None


@dataclass(frozen=True)
class CachedPoll:
    question: str | None
    answers: Tuple[CachedPollAnswer, ...]
    expires_at: datetime.datetime | None

    @classmethod
    def from_poll(cls, poll: Any) -> "CachedPoll":
        question = getattr(poll, "question", None)
        # Poll.question is a str on current discord.py releases, PollMedia on older ones.
        if question is not None and not isinstance(question, str):
            question = getattr(question, "text", None)
        answers = tuple(
            CachedPollAnswer(
                text=getattr(answer, "text", None),
                vote_count=getattr(answer, "vote_count", None),
            )
            for answer in getattr(poll, "answers", []) or []
        )
        return cls(
            question=question,
            answers=answers,
            expires_at=getattr(poll, "expires_at", None),
        )


@dataclass(frozen=True)
class CachedMessage:
    """Point-in-time copy of a :class:`discord.Message`."""

    channel_id: int
    message_id: int
    guild_id: int | None
    author_id: int
    author_name: str
    content: str
    created_at: datetime.datetime | None = None
    edited_at: datetime.datetime | None = None
    author_avatar_url: str = _DEFAULT_AVATAR_URL
    pinned: bool = False
    mention_ids: Tuple[int, ...] = ()
    attachments: Tuple[CachedAttachment, ...] = ()
    reference: CachedReference | None = None
    poll: CachedPoll | None = None

    @property
    def cache_key(self) -> tuple[int, int]:
        return self.channel_id, self.message_id

    @property
    def jump_url(self) -> str:
        guild = self.guild_id if self.guild_id is not None else "@me"
        return f"https://discord.com/channels/{guild}/{self.channel_id}/{self.message_id}"

    @classmethod
    def from_message(cls, message: discord.Message) -> "CachedMessage":
        author = message.author
        avatar = getattr(author, "display_avatar", None)
        guild = getattr(message, "guild", None)
        reference = getattr(message, "reference", None)
        poll = getattr(message, "poll", None)
        return cls(
            channel_id=message.channel.id,
            message_id=message.id,
            guild_id=guild.id if guild is not None else None,
            author_id=author.id,
            author_name=getattr(author, "display_name", None) or getattr(author, "name", ""),
            content=message.content or "",
            created_at=getattr(message, "created_at", None),
            edited_at=getattr(message, "edited_at", None),
            author_avatar_url=getattr(avatar, "url", None) or _DEFAULT_AVATAR_URL,
            pinned=bool(getattr(message, "pinned", False)),
            mention_ids=tuple(u.id for u in getattr(message, "mentions", []) or []),
            attachments=tuple(
                CachedAttachment(filename=a.filename, url=a.url)
                for a in getattr(message, "attachments", []) or []
            ),
            reference=CachedReference.from_reference(reference) if reference is not None else None,
            poll=CachedPoll.from_poll(poll) if poll is not None else None,
        )


@dataclass(frozen=True)
class CachedMember:
    """Point-in-time copy of a :class:`discord.Member`."""

    guild_id: int
    user_id: int
    name: str
    display_name: str
    bot: bool = False
    role_ids: frozenset[int] = field(default_factory=frozenset)
    joined_at: datetime.datetime | None = None

    @property
    def cache_key(self) -> tuple[int, int]:
        return self.guild_id, self.user_id

    def has_role(self, role_id: int) -> bool:
        return role_id in self.role_ids

    @classmethod
    def from_member(cls, member: discord.Member) -> "CachedMember":
        return cls(
            guild_id=member.guild.id,
            user_id=member.id,
            name=member.name,
            display_name=getattr(member, "display_name", None) or member.name,
            bot=bool(getattr(member, "bot", False)),
            role_ids=frozenset(r.id for r in getattr(member, "roles", []) or []),
            joined_at=getattr(member, "joined_at", None),
        )


__all__ = [
    "CachedAttachment",
    "CachedMember",
    "CachedMessage",
    "CachedPoll",
    "CachedPollAnswer",
    "CachedReference",
    "ReferenceKind",
]
