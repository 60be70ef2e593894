"""Component layouts for the question form and the posted question."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Iterable, List, Tuple

import discord

# Discord caps select menus at 25 options.
MAX_SELECT_OPTIONS = 25

QUESTION_CLOSE_PREFIX = "close_question_forum"

PROMPT = (
    "ボタンをクリックしてすべての情報を入力してください。\n"
    "セレクトボックスからタグを設定してください。\n"
    "また、再度ボタンをクリックすると入力内容を編集することができます。"
)
CONFIRM = (
    "情報が入力されました、内容を確認し問題なければ「質問を送信」ボタンをクリックしてください。\n"
    "### この機能で作成されるフォームは編集出来ません、間違いが無いように気をつけてください。"
)


@dataclass(frozen=True)
class CustomIds:
    """Component ids of one question form, scoped by the invoking interaction id."""

    basic: str
    detailed: str
    select_tag: str
    submit: str

    @classmethod
    def for_interaction(cls, interaction_id: int) -> "CustomIds":
        return cls(
            basic=f"open_basic_question_modal:{interaction_id}",
            detailed=f"open_detailed_question_modal:{interaction_id}",
            select_tag=f"question_select_tag:{interaction_id}",
            submit=f"question_submit:{interaction_id}",
        )

    def all(self) -> Tuple[str, ...]:
        return (self.basic, self.detailed, self.select_tag, self.submit)

    def modals(self) -> Tuple[str, ...]:
        return (self.basic, self.detailed)


def tag_options(
    available: Iterable[discord.ForumTag],
    exclude: Collection[int],
    selected: Collection[int] = (),
) -> List[discord.SelectOption]:
    options = [
        discord.SelectOption(
            label=tag.name,
            value=str(tag.id),
            emoji=tag.emoji,
            default=tag.id in selected,
        )
        for tag in available
        if tag.id not in exclude
    ]
    return options[:MAX_SELECT_OPTIONS]


def build_form_view(
    custom_ids: CustomIds,
    options: List[discord.SelectOption],
    *,
    submit_enabled: bool,
) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(
        discord.ui.Select(
            custom_id=custom_ids.select_tag,
            placeholder="タグを選択してください",
            min_values=1,
            max_values=len(options),
            options=options,
            row=0,
        )
    )
    view.add_item(
        discord.ui.Button(
            custom_id=custom_ids.basic, label="質問の基本情報を入力", style=discord.ButtonStyle.primary, row=1
        )
    )
    view.add_item(
        discord.ui.Button(
            custom_id=custom_ids.detailed, label="質問の詳細情報を入力", style=discord.ButtonStyle.primary, row=1
        )
    )
    view.add_item(
        discord.ui.Button(
            custom_id=custom_ids.submit,
            label="質問を送信",
            style=discord.ButtonStyle.success,
            disabled=not submit_enabled,
            row=1,
        )
    )
    return view


def build_close_view(asker_id: int) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(
        discord.ui.Button(
            custom_id=f"{QUESTION_CLOSE_PREFIX}:{asker_id}",
            label="質問を解決済みにする",
            style=discord.ButtonStyle.danger,
        )
    )
    return view


def build_confirm_view(confirm_id: str, cancel_id: str) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(custom_id=confirm_id, label="はい", emoji="✅", style=discord.ButtonStyle.danger))
    view.add_item(discord.ui.Button(custom_id=cancel_id, label="いいえ", emoji="❎", style=discord.ButtonStyle.success))
    return view


__all__ = [
    "CONFIRM",
    "CustomIds",
    "MAX_SELECT_OPTIONS",
    "PROMPT",
    "QUESTION_CLOSE_PREFIX",
    "build_close_view",
    "build_confirm_view",
    "build_form_view",
    "tag_options",
]
