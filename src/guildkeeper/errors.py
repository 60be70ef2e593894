"""
Exception types and the application-command error handler.

Authorization failures are ``app_commands.CheckFailure`` subclasses so the
command tree routes them here; the user gets a short ephemeral explanation and
nothing is logged above INFO. Anything unexpected is logged with its traceback
and answered with a generic reply.
"""

from __future__ import annotations

import logging

import discord
from discord import app_commands

from .utils import format_duration

logger = logging.getLogger(__name__)


class HasNoRole(app_commands.CheckFailure):
    def __init__(self, role_id: int) -> None:
        self.role_id = role_id
        super().__init__("このコマンドを使用するには認証が必要です。")


class NotInThread(app_commands.CheckFailure):
    def __init__(self) -> None:
        super().__init__("このコマンドは公開スレッド内でのみ使用できます。")


class NotChannelOwner(app_commands.CheckFailure):
    def __init__(self) -> None:
        super().__init__("この操作はスレッドの作成者のみが行えます。")


class NotBotOwner(app_commands.CheckFailure):
    def __init__(self) -> None:
        super().__init__("このコマンドはBotの管理者のみが使用できます。")


class MessageReferenceError(ValueError):
    """Raised when a user-supplied message id or link cannot be resolved."""


async def reply_ephemeral(interaction: discord.Interaction, content: str) -> None:
    """Answer ``interaction`` ephemerally whether or not it was already answered."""

    try:
        if interaction.response.is_done():
            await interaction.followup.send(content, ephemeral=True)
        else:
            await interaction.response.send_message(content, ephemeral=True)
    except discord.HTTPException:
        logger.exception("Failed to send error reply for interaction %s", interaction.id)


def describe_error(error: app_commands.AppCommandError) -> str | None:
    """Map a command error to a user-facing message; ``None`` means unexpected."""

    if isinstance(error, app_commands.CommandOnCooldown):
        return f"このコマンドはクールダウン中です。{format_duration(error.retry_after)}後に再度お試しください。"
    if isinstance(error, app_commands.BotMissingPermissions):
        perms = ", ".join(error.missing_permissions)
        return f"Botに必要な権限がありません: {perms}"
    if isinstance(error, HasNoRole):
        return "このコマンドを使用するには認証が必要です。"
    if isinstance(error, app_commands.NoPrivateMessage):
        return "このコマンドはDMでは使用できません。"
    if isinstance(error, app_commands.CheckFailure):
        return str(error) or "このコマンドを実行する権限がありません。"
    return None


async def on_app_command_error(
    interaction: discord.Interaction, error: app_commands.AppCommandError
) -> None:
    message = describe_error(error)
    command = interaction.command.qualified_name if interaction.command else "unknown"
    if message is None:
        original = getattr(error, "original", error)
        logger.error(
            "Unhandled error in command %s", command, exc_info=(type(original), original, original.__traceback__)
        )
        message = "コマンドの実行中にエラーが発生しました。"
    else:
        logger.info("Command %s rejected for user %s: %s", command, interaction.user.id, error)
    await reply_ephemeral(interaction, message)


__all__ = [
    "HasNoRole",
    "NotInThread",
    "NotChannelOwner",
    "NotBotOwner",
    "MessageReferenceError",
    "describe_error",
    "on_app_command_error",
    "reply_ephemeral",
]
