"""Component and modal interactions that outlive any single command call."""

from __future__ import annotations

import logging

import discord

from guildkeeper.auth import AUTH_BUTTON_ID, AUTH_MODAL_FIELD, AUTH_MODAL_ID, build_keyword_modal
from guildkeeper.interactions import custom_id_of
from guildkeeper.question import QUESTION_CLOSE_PREFIX, handle_close_request
from guildkeeper.question.forms import extract_modal_values
from guildkeeper.utils import format_duration

logger = logging.getLogger(__name__)


async def handle(client: discord.Client, interaction: discord.Interaction) -> None:
    custom_id = custom_id_of(interaction)
    if custom_id is None:
        return

    services = client.services
    if interaction.type == discord.InteractionType.component:
        if custom_id.startswith(f"{QUESTION_CLOSE_PREFIX}:"):
            await handle_close_request(client, interaction, services.config.current.question.SOLVED_TAG)
        elif custom_id == AUTH_BUTTON_ID:
            retry_after = services.auth.button_retry_after(interaction)
            if retry_after:
                await interaction.response.send_message(
                    f"クールダウン中です。{format_duration(retry_after)}後に再度お試しください。", ephemeral=True
                )
                return
            await interaction.response.send_modal(build_keyword_modal())
    elif interaction.type == discord.InteractionType.modal_submit and custom_id == AUTH_MODAL_ID:
        keyword = extract_modal_values(interaction.data).get(AUTH_MODAL_FIELD, "")
        await services.auth.answer_keyword(client, interaction, keyword)
