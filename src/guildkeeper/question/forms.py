"""
Question form records and their modal representations.

Each record declares its fields once (:class:`FieldSpec`); the same
declaration drives the modal's text inputs and the length checks applied when
a submission is parsed back.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, Iterator, Mapping, Tuple, Type, TypeVar

import discord

logger = logging.getLogger(__name__)

F = TypeVar("F", bound="_Form")


class FormParseError(ValueError):
    """A modal submission is missing a field or a value is out of bounds."""


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    placeholder: str
    min_length: int
    max_length: int
    paragraph: bool = False

    def text_input(self, default: str | None) -> discord.ui.TextInput:
        return discord.ui.TextInput(
            label=self.label,
            custom_id=self.name,
            placeholder=self.placeholder,
            default=default,
            min_length=self.min_length,
            max_length=self.max_length,
            required=True,
            style=discord.TextStyle.paragraph if self.paragraph else discord.TextStyle.short,
        )

    def validate(self, value: str | None) -> str:
        if value is None:
            raise FormParseError(f"missing field {self.name!r}")
        if not self.min_length <= len(value) <= self.max_length:
            raise FormParseError(
                f"field {self.name!r} must be {self.min_length}-{self.max_length} characters, got {len(value)}"
            )
        return value


def _iter_components(node: Any) -> Iterator[Mapping[str, Any]]:
    if isinstance(node, Mapping):
        if "custom_id" in node and "value" in node:
            yield node
        for key in ("components", "component"):
            child = node.get(key)
            if child is not None:
                yield from _iter_components(child)
    elif isinstance(node, (list, tuple)):
        for child in node:
            yield from _iter_components(child)


def extract_modal_values(data: Mapping[str, Any] | None) -> Dict[str, str]:
    """Flatten a modal submission payload into ``{custom_id: value}``."""

    return {c["custom_id"]: c["value"] for c in _iter_components((data or {}).get("components", []))}


class _Form:
    FIELDS: ClassVar[Tuple[FieldSpec, ...]] = ()
    MODAL_TITLE: ClassVar[str] = ""

    @classmethod
    def parse(cls: Type[F], values: Mapping[str, str]) -> F:
        return cls(**{spec.name: spec.validate(values.get(spec.name)) for spec in cls.FIELDS})

    @classmethod
    def to_modal(cls, custom_id: str, current: "_Form | None" = None) -> discord.ui.Modal:
        """Build a modal pre-filled with ``current`` (if any)."""

        modal = discord.ui.Modal(title=cls.MODAL_TITLE, custom_id=custom_id)
        prefill = asdict(current) if current is not None else {}
        for spec in cls.FIELDS:
            modal.add_item(spec.text_input(prefill.get(spec.name)))
        return modal


@dataclass(frozen=True)
class BasicQuestionData(_Form):
    title: str
    mc_version: str
    loader: str
    loader_version: str

    MODAL_TITLE: ClassVar[str] = "質問の基本情報"
    FIELDS: ClassVar[Tuple[FieldSpec, ...]] = (
        FieldSpec("title", "質問のタイトル (質問内容を要約してください)", "質問のタイトルを入力してください", 10, 100),
        FieldSpec("mc_version", "Minecraftのバージョン", "Minecraftのバージョンを入力してください", 3, 20),
        FieldSpec(
            "loader",
            "Modローダー (Forge, Fabric, NeoForge, Quilt, その他)",
            "使用しているModローダーを入力してください",
            3,
            20,
        ),
        FieldSpec("loader_version", "Modローダーのバージョン", "Modローダーのバージョンを入力してください", 3, 20),
    )

    def render(self) -> str:
        return (
            "### 基本情報\n"
            f"- Minecraftバージョン: {self.mc_version}\n"
            f"- Modローダー: {self.loader}\n"
            f"- Modローダーバージョン: {self.loader_version}"
        )


@dataclass(frozen=True)
class DetailedQuestionData(_Form):
    content: str
    content2: str
    content3: str

    MODAL_TITLE: ClassVar[str] = "質問の詳細情報"
    FIELDS: ClassVar[Tuple[FieldSpec, ...]] = (
        FieldSpec("content", "質問の内容", "質問の内容を入力してください", 20, 1000, paragraph=True),
        FieldSpec("content2", "問題解決の達成基準", "問題解決の達成基準を入力してください", 20, 1000, paragraph=True),
        FieldSpec(
            "content3",
            "試したこと・調べたこと",
            "質問を行う前に試したことや調べたことを入力してください",
            20,
            1000,
            paragraph=True,
        ),
    )

    @classmethod
    def example(cls) -> "DetailedQuestionData":
        """Example text shown the first time the detailed form is opened."""

        return cls(
            content="例: クラッシュした, 変な挙動をする, Modの扱い方がわからない",
            content2="例: クラッシュから抜け出したい, このような挙動にしたい, このModでこのようなことがしたい",
            content3=(
                "例: ○○というサイトに掲載されていた対処法を試した\n"
                "推奨: mclo.gs にて変換したクラッシュレポート、latest.logのリンクを貼る"
            ),
        )

    def render(self) -> str:
        return (
            "### 質問内容\n"
            f"- 質問内容:\n{self.content}\n"
            f"- 問題解決の達成基準:\n{self.content2}\n"
            f"- 試したこと・調べたこと:\n{self.content3}"
        )


def parse_form(form_cls: Type[F], data: Mapping[str, Any] | None) -> F | None:
    """Parse a modal payload, logging and returning ``None`` when it is invalid."""

    values = extract_modal_values(data)
    try:
        return form_cls.parse(values)
    except FormParseError as exc:
        logger.error("Failed to parse %s submission: %s (%r)", form_cls.__name__, exc, values)
        return None


def compose_post(basic: BasicQuestionData, detailed: DetailedQuestionData, asker_mention: str) -> str:
    return f"{basic.render()}\n{detailed.render()}\n\n質問者: {asker_mention}"


__all__ = [
    "BasicQuestionData",
    "DetailedQuestionData",
    "FieldSpec",
    "FormParseError",
    "compose_post",
    "extract_modal_values",
    "parse_form",
]
