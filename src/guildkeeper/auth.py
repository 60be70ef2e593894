"""
Authentication role grants.

Three entry points share :meth:`AuthService.grant_auth_role`: the
``/keyword`` command, the persistent "enter keyword" button and plain
messages in the auth channel that match the trigger pattern. Every grant and
every failed grant is reported to the auth log channel. Failures are not
retried.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List

import discord
from discord.ext import commands

from .config import ConfigStore
from .utils import send_log

logger = logging.getLogger(__name__)

AUTH_BUTTON_ID = "auth_keyword_button"
AUTH_MODAL_ID = "auth_keyword_modal"
AUTH_MODAL_FIELD = "keyword"

GRANTED_REPLY = (
    "合言葉を確認しました。\n"
    "チャンネルが表示されない場合、アプリの再起動や再読み込み(Ctrl + R)をお試しください。"
)
WRONG_KEYWORD_REPLY = "合言葉が間違っています。"
ALREADY_REPLY = "すでにロールを持っています。"
FAILED_REPLY = "ロールの付与に失敗しました。時間をおいて再度お試しください。"


class GrantOutcome(Enum):
    GRANTED = "granted"
    ALREADY = "already"
    FAILED = "failed"


def reply_for(outcome: GrantOutcome) -> str:
    return {
        GrantOutcome.GRANTED: GRANTED_REPLY,
        GrantOutcome.ALREADY: ALREADY_REPLY,
        GrantOutcome.FAILED: FAILED_REPLY,
    }[outcome]


class AuthService:
    def __init__(self, config: ConfigStore) -> None:
        self._config = config
        self._button_cooldown: commands.CooldownMapping | None = None
        self._button_cooldown_per: float | None = None

    def keyword_matches(self, keyword: str) -> bool:
        return self._config.current.auth.TRIGGER_REGEX.search(keyword) is not None

    def suggestions(self, partial: str) -> List[str]:
        """Decoy keywords offered by autocomplete (Discord shows at most 25)."""

        return [k for k in self._config.current.auth.DUMMY_KEYWORDS if k.startswith(partial)][:25]

    def button_retry_after(self, interaction: discord.Interaction) -> float | None:
        """Consume one use of the keyword button; returns seconds left if on cooldown."""

        per = self._config.current.auth.COOLDOWN_SECONDS
        if self._button_cooldown is None or self._button_cooldown_per != per:
            self._button_cooldown = commands.CooldownMapping(commands.Cooldown(1, per), lambda i: i.user.id)
            self._button_cooldown_per = per
        bucket = self._button_cooldown.get_bucket(interaction)
        return bucket.update_rate_limit() if bucket is not None else None

    async def grant_auth_role(self, bot: Any, member: discord.Member) -> GrantOutcome:
        cfg = self._config.current.auth
        if any(role.id == cfg.ROLE_ID for role in member.roles):
            logger.info("%s already has the auth role", member)
            return GrantOutcome.ALREADY

        try:
            await member.add_roles(discord.Object(id=cfg.ROLE_ID), reason="Authenticated by keyword")
        except discord.HTTPException as exc:
            logger.error("Failed to add auth role to %s: %s", member.id, exc)
            await send_log(
                bot,
                cfg.LOG_CHANNEL_ID,
                content=f"{member.mention} にロールを追加できませんでした。\n```\n{exc}\n```",
            )
            return GrantOutcome.FAILED

        logger.info("Granted auth role to %s (%s)", member, member.id)
        await send_log(bot, cfg.LOG_CHANNEL_ID, content=f"{member.mention} にロールを追加しました。")
        return GrantOutcome.GRANTED

    async def handle_message(self, bot: Any, message: discord.Message) -> GrantOutcome | None:
        """Grant the role for a matching message in the auth channel and react to it."""

        cfg = self._config.current.auth
        if message.author.bot or message.channel.id != cfg.CHANNEL_ID:
            return None
        # Webhook authors are plain users and cannot hold roles.
        if not hasattr(message.author, "roles") or not self.keyword_matches(message.content):
            return None

        outcome = await self.grant_auth_role(bot, message.author)
        if outcome is GrantOutcome.GRANTED:
            try:
                await message.add_reaction(cfg.AUTHENTICATED_REACTION)
            except discord.HTTPException as exc:
                logger.warning("Could not react to auth message %s: %s", message.id, exc)
        return outcome

    async def answer_keyword(self, bot: Any, interaction: discord.Interaction, keyword: str) -> GrantOutcome | None:
        """Shared body of ``/keyword`` and the keyword modal; replies ephemerally."""

        if not self.keyword_matches(keyword):
            await interaction.response.send_message(WRONG_KEYWORD_REPLY, ephemeral=True)
            return None

        member = interaction.user
        if not isinstance(member, discord.Member):
            await interaction.response.send_message("このコマンドはサーバー内でのみ使用できます。", ephemeral=True)
            return None

        await interaction.response.defer(ephemeral=True, thinking=True)
        outcome = await self.grant_auth_role(bot, member)
        await interaction.followup.send(reply_for(outcome), ephemeral=True)
        return outcome


def build_keyword_modal() -> discord.ui.Modal:
    modal = discord.ui.Modal(title="合言葉の入力", custom_id=AUTH_MODAL_ID)
    modal.add_item(
        discord.ui.TextInput(
            label="合言葉",
            custom_id=AUTH_MODAL_FIELD,
            placeholder="合言葉を入力してください",
            max_length=100,
        )
    )
    return modal


def build_keyword_button_view() -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(
        discord.ui.Button(custom_id=AUTH_BUTTON_ID, label="合言葉を入力", style=discord.ButtonStyle.primary)
    )
    return view


__all__ = [
    "AUTH_BUTTON_ID",
    "AUTH_MODAL_FIELD",
    "AUTH_MODAL_ID",
    "AuthService",
    "GrantOutcome",
    "build_keyword_button_view",
    "build_keyword_modal",
    "reply_for",
]
