import os
import re
from typing import List


def _split_words(raw: str) -> List[str]:
    return [token.strip() for token in raw.split(",") if token.strip()]


class Auth:
    def __init__(self, config: dict | None = None) -> None:
        auth_cfg = (config or {}).get("auth", {})
        self.CHANNEL_ID: int = int(auth_cfg.get("channel_id", os.getenv("AUTH_CHANNEL_ID", "0")))
        self.LOG_CHANNEL_ID: int = int(auth_cfg.get("log_channel_id", os.getenv("AUTH_LOG_CHANNEL_ID", "0")))
        self.ROLE_ID: int = int(auth_cfg.get("role_id", os.getenv("AUTH_ROLE_ID", "0")))
        self.AUTHENTICATED_REACTION: str = str(
            auth_cfg.get("authenticated_reaction", os.getenv("AUTH_REACTION", "✅"))
        )
        # An empty pattern would accept every keyword, so fall back to one that matches nothing.
        pattern = str(auth_cfg.get("trigger_regex", os.getenv("AUTH_TRIGGER_REGEX", ""))) or r"(?!)"
        self.TRIGGER_REGEX: re.Pattern[str] = re.compile(pattern)
        dummy = auth_cfg.get("dummy_keywords")
        self.DUMMY_KEYWORDS: List[str] = (
            [str(k) for k in dummy] if dummy is not None else _split_words(os.getenv("AUTH_DUMMY_KEYWORDS", ""))
        )
        self.COOLDOWN_SECONDS: float = float(
            auth_cfg.get("cooldown_seconds", os.getenv("AUTH_COOLDOWN_SECONDS", "60"))
        )

    def missing(self) -> List[str]:
        required = [
            ("auth.log_channel_id", self.LOG_CHANNEL_ID),
            ("auth.role_id", self.ROLE_ID),
        ]
        return [name for name, val in required if not val]
