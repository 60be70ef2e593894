"""The "mark solved" button on question posts."""

from __future__ import annotations

import logging
from typing import Any

import discord

from guildkeeper.interactions import InteractionCollector, custom_id_of

from .views import QUESTION_CLOSE_PREFIX, build_confirm_view

logger = logging.getLogger(__name__)

CONFIRM_TIMEOUT = 60.0


def asker_from_custom_id(custom_id: str | None) -> int | None:
    """Return the asker id encoded in a close button id, or ``None`` if it is not one."""

    if not custom_id or not custom_id.startswith(f"{QUESTION_CLOSE_PREFIX}:"):
        return None
    try:
        return int(custom_id.split(":", 1)[1])
    except ValueError:
        return None


async def handle_close_request(
    bot: Any, interaction: discord.Interaction, solved_tag_id: int, *, timeout: float = CONFIRM_TIMEOUT
) -> bool:
    """
    Run the confirm dialog for a close button click.

    Returns ``True`` when the solved tag was applied.
    """

    asker_id = asker_from_custom_id(custom_id_of(interaction))
    if asker_id is None:
        return False

    if asker_id != interaction.user.id:
        await interaction.response.send_message("質問者のみが解決済みにできます。", ephemeral=True)
        return False

    thread = interaction.channel
    if getattr(thread, "applied_tags", None) is None:
        logger.error("Close button used outside a thread (channel %s)", interaction.channel_id)
        return False

    if any(tag.id == solved_tag_id for tag in thread.applied_tags):
        await interaction.response.send_message("既に解決済みです。", ephemeral=True)
        return False

    confirm_id = f"close_question_confirm:{interaction.id}"
    cancel_id = f"close_question_cancel:{interaction.id}"
    await interaction.response.send_message(
        "本当に質問を終了しますか？", view=build_confirm_view(confirm_id, cancel_id), ephemeral=True
    )

    async with InteractionCollector(bot, custom_ids={confirm_id, cancel_id}, timeout=timeout) as collector:
        answer = await collector.first()

    confirmed = answer is not None and custom_id_of(answer) == confirm_id
    if answer is not None:
        try:
            await answer.response.defer()
        except discord.HTTPException:
            logger.warning("Could not acknowledge close confirmation %s", answer.id)

    text = "キャンセルしました。"
    if confirmed:
        solved = thread.parent.get_tag(solved_tag_id) if thread.parent is not None else None
        if solved is None:
            solved = discord.Object(id=solved_tag_id)
        try:
            await thread.edit(applied_tags=[*thread.applied_tags, solved])
        except discord.HTTPException as exc:
            logger.error("Failed to apply solved tag to thread %s: %s", thread.id, exc)
            confirmed = False
            text = "解決済みタグを付けられませんでした。タグの数を減らしてから再度お試しください。"
        else:
            logger.info("Question thread %s marked solved by %s", thread.id, interaction.user.id)
            text = "質問を解決済みにしました。"

    await interaction.edit_original_response(content=text, view=None)
    return confirmed


__all__ = ["CONFIRM_TIMEOUT", "asker_from_custom_id", "handle_close_request"]
