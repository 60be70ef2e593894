"""Shared, lock-guarded state of one question session."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Iterable, Tuple

from .forms import BasicQuestionData, DetailedQuestionData


@dataclass(frozen=True)
class DraftSnapshot:
    basic: BasicQuestionData | None
    detailed: DetailedQuestionData | None
    tag_ids: Tuple[int, ...]

    @property
    def complete(self) -> bool:
        return self.basic is not None and self.detailed is not None and bool(self.tag_ids)


class QuestionDraft:
    """
    Inputs gathered so far plus the two milestone signals.

    ``inputted`` is set the first time every input is present and stays set
    even if an input is later invalidated. ``submitted`` is set once by
    :meth:`submit`; from then on the inputs are frozen and late writes are
    dropped.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._basic: BasicQuestionData | None = None
        self._detailed: DetailedQuestionData | None = None
        self._tag_ids: Tuple[int, ...] = ()
        self.inputted = asyncio.Event()
        self.submitted = asyncio.Event()

    async def set_basic(self, value: BasicQuestionData | None) -> bool:
        async with self._lock:
            if self.submitted.is_set():
                return False
            self._basic = value
            return True

    async def set_detailed(self, value: DetailedQuestionData | None) -> bool:
        async with self._lock:
            if self.submitted.is_set():
                return False
            self._detailed = value
            return True

    async def set_tags(self, tag_ids: Iterable[int]) -> bool:
        tag_ids = tuple(tag_ids)
        async with self._lock:
            if self.submitted.is_set():
                return False
            self._tag_ids = tag_ids
            return True

    async def submit(self) -> bool:
        """Freeze a complete draft and signal ``submitted``; ``False`` if incomplete."""

        async with self._lock:
            if self.submitted.is_set():
                return True
            if self._basic is None or self._detailed is None or not self._tag_ids:
                return False
            self.submitted.set()
            return True

    async def snapshot(self) -> DraftSnapshot:
        async with self._lock:
            return DraftSnapshot(self._basic, self._detailed, self._tag_ids)

    async def is_complete(self) -> bool:
        return (await self.snapshot()).complete

    async def enable_button(self) -> bool:
        """Signal ``inputted`` if every input is present; ``True`` only for the first signal."""

        if self.inputted.is_set():
            return False
        async with self._lock:
            ready = self._basic is not None and self._detailed is not None and bool(self._tag_ids)
            if ready and not self.inputted.is_set():
                self.inputted.set()
                return True
        return False


__all__ = ["DraftSnapshot", "QuestionDraft"]
