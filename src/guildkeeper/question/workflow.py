"""
The ``/question`` session: gather inputs, confirm, post to the forum.

A session moves through :class:`WorkflowState`::

    AWAITING_INPUTS --inputted--> AWAITING_SUBMIT --submitted--> FINALIZED
           \\__________________________\\__________ TIMED_OUT / CANCELLED

Two listener tasks feed the shared :class:`QuestionDraft`: one consumes
component clicks on the ephemeral form, the other consumes the modal
submissions those clicks open. The session itself only waits on the draft's
signals and the deadline.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Collection

import discord

from guildkeeper.interactions import InteractionCollector, component_check, custom_id_of, modal_check

from .draft import QuestionDraft
from .forms import BasicQuestionData, DetailedQuestionData, compose_post, parse_form
from .views import CONFIRM, PROMPT, CustomIds, build_close_view, build_form_view, tag_options

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3600.0


class WorkflowState(Enum):
    AWAITING_INPUTS = "awaiting_inputs"
    AWAITING_SUBMIT = "awaiting_submit"
    FINALIZED = "finalized"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class QuestionWorkflow:
    def __init__(
        self,
        bot: Any,
        interaction: discord.Interaction,
        forum: discord.ForumChannel,
        *,
        exclude_tags: Collection[int] = (),
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.bot = bot
        self.interaction = interaction
        self.forum = forum
        self.exclude_tags = frozenset(exclude_tags)
        self.timeout = timeout
        self.custom_ids = CustomIds.for_interaction(interaction.id)
        self.draft = QuestionDraft()
        self.state = WorkflowState.AWAITING_INPUTS
        self.thread: discord.Thread | None = None
        self._deleted = False

    # ------------------------------------------------------------------ #
    # Session
    # ------------------------------------------------------------------ #

    async def run(self) -> WorkflowState:
        options = tag_options(self.forum.available_tags, self.exclude_tags)
        if not options:
            logger.warning("Question forum %s has no selectable tags", self.forum.id)
            await self.interaction.response.send_message("質問フォーラムに選択できるタグがありません。", ephemeral=True)
            self.state = WorkflowState.CANCELLED
            return self.state

        await self.interaction.response.send_message(
            PROMPT,
            view=build_form_view(self.custom_ids, options, submit_enabled=False),
            ephemeral=True,
        )

        user_id = self.interaction.user.id
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        components = InteractionCollector(
            self.bot, custom_ids=self.custom_ids.all(), check=component_check(user_id), timeout=self.timeout
        ).open()
        modals = InteractionCollector(
            self.bot, custom_ids=self.custom_ids.modals(), check=modal_check(user_id), timeout=self.timeout
        ).open()
        component_task = asyncio.create_task(self._handle_components(components))
        modal_task = asyncio.create_task(self._handle_modals(modals))

        try:
            if not await self._wait_for(self.draft.inputted, component_task, deadline):
                return await self._time_out()

            self.state = WorkflowState.AWAITING_SUBMIT
            snapshot = await self.draft.snapshot()
            await self.interaction.edit_original_response(
                content=f"{PROMPT}\n{CONFIRM}",
                view=build_form_view(
                    self.custom_ids,
                    tag_options(self.forum.available_tags, self.exclude_tags, snapshot.tag_ids),
                    submit_enabled=True,
                ),
            )

            if not await self._wait_for(self.draft.submitted, component_task, deadline):
                return await self._time_out()
            modals.close()

            self.thread = await self._create_post()
            self.state = WorkflowState.FINALIZED
            await self.interaction.edit_original_response(
                content=f"質問フォーラムを開始しました。\n{self.thread.mention}", view=None
            )
            logger.info("Question post %s created for user %s", self.thread.id, user_id)
            return self.state
        except asyncio.CancelledError:
            self.state = WorkflowState.CANCELLED
            raise
        finally:
            components.close()
            modals.close()
            for task in (component_task, modal_task):
                task.cancel()
            await asyncio.gather(component_task, modal_task, return_exceptions=True)

    async def _wait_for(self, signal: asyncio.Event, watcher: asyncio.Task, deadline: float) -> bool:
        """Wait for ``signal`` until the deadline or until ``watcher`` stops listening."""

        if signal.is_set():
            return True
        waiter = asyncio.create_task(signal.wait())
        try:
            remaining = max(deadline - asyncio.get_running_loop().time(), 0)
            await asyncio.wait({waiter, watcher}, timeout=remaining, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
        return signal.is_set()

    async def _time_out(self) -> WorkflowState:
        self.state = WorkflowState.TIMED_OUT
        logger.info("Question session %s timed out", self.interaction.id)
        if not self._deleted:
            self._deleted = True
            try:
                await self.interaction.delete_original_response()
            except discord.HTTPException as exc:
                logger.warning("Could not delete expired question form %s: %s", self.interaction.id, exc)
        return self.state

    async def _create_post(self) -> discord.Thread:
        snapshot = await self.draft.snapshot()
        applied = [tag for tag in self.forum.available_tags if tag.id in snapshot.tag_ids]
        created = await self.forum.create_thread(
            name=snapshot.basic.title,
            content=compose_post(snapshot.basic, snapshot.detailed, self.interaction.user.mention),
            applied_tags=applied,
            view=build_close_view(self.interaction.user.id),
        )
        return created.thread

    # ------------------------------------------------------------------ #
    # Listener tasks
    # ------------------------------------------------------------------ #

    async def _handle_components(self, collector: InteractionCollector) -> None:
        ids = self.custom_ids
        async for interaction in collector.stream():
            custom_id = custom_id_of(interaction)
            try:
                if custom_id == ids.basic:
                    current = (await self.draft.snapshot()).basic
                    await interaction.response.send_modal(BasicQuestionData.to_modal(ids.basic, current))
                elif custom_id == ids.detailed:
                    current = (await self.draft.snapshot()).detailed or DetailedQuestionData.example()
                    await interaction.response.send_modal(DetailedQuestionData.to_modal(ids.detailed, current))
                elif custom_id == ids.select_tag:
                    values = (interaction.data or {}).get("values", [])
                    await self.draft.set_tags(int(value) for value in values)
                    await interaction.response.defer()
                elif custom_id == ids.submit:
                    await self.draft.submit()
                    await interaction.response.defer()
            except discord.HTTPException:
                logger.exception("Failed to answer question form interaction %s", custom_id)

            if self.draft.submitted.is_set():
                return
            await self.draft.enable_button()

    async def _handle_modals(self, collector: InteractionCollector) -> None:
        ids = self.custom_ids
        async for interaction in collector.stream():
            custom_id = custom_id_of(interaction)
            stored = True
            if custom_id == ids.basic:
                stored = await self.draft.set_basic(parse_form(BasicQuestionData, interaction.data))
            elif custom_id == ids.detailed:
                stored = await self.draft.set_detailed(parse_form(DetailedQuestionData, interaction.data))
            if not stored:
                logger.info("Ignoring %s submitted after the question was sent", custom_id)

            try:
                await interaction.response.defer()
            except discord.HTTPException:
                logger.exception("Failed to acknowledge question modal %s", custom_id)

            await self.draft.enable_button()


__all__ = ["DEFAULT_TIMEOUT", "QuestionWorkflow", "WorkflowState"]
