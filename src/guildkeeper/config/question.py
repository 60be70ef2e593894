import os
from typing import List

from .core import _ids


class Question:
    def __init__(self, config: dict | None = None) -> None:
        question_cfg = (config or {}).get("question", {})
        self.FORUM_ID: int = int(question_cfg.get("forum_id", os.getenv("QUESTION_FORUM_ID", "0")))
        self.EXCLUDE_TAGS: List[int] = _ids(question_cfg.get("exclude_tags"), "QUESTION_EXCLUDE_TAGS")
        self.SOLVED_TAG: int = int(question_cfg.get("solved_tag", os.getenv("QUESTION_SOLVED_TAG", "0")))
        self.TIMEOUT_SECONDS: float = float(
            question_cfg.get("timeout_seconds", os.getenv("QUESTION_TIMEOUT_SECONDS", "3600"))
        )
