import os
from typing import List

from .core import _ids


class MessageCache:
    def __init__(self, config: dict | None = None) -> None:
        cache_cfg = (config or {}).get("message_cache", {})
        disabled_raw = cache_cfg.get("disabled", os.getenv("MESSAGE_CACHE_DISABLED", "0"))
        self.DISABLED: bool = str(disabled_raw).lower() in ("1", "true", "yes")
        self.TARGET_GUILD_IDS: List[int] = _ids(cache_cfg.get("target_guild_ids"), "MESSAGE_CACHE_GUILD_IDS")
        self.IGNORE_CHANNEL_IDS: List[int] = _ids(
            cache_cfg.get("ignore_channel_ids"), "MESSAGE_CACHE_IGNORE_CHANNEL_IDS"
        )
        self.LIMIT: int = int(cache_cfg.get("limit", os.getenv("MESSAGE_CACHE_LIMIT", "100")))
        self.CONCURRENCY: int = int(cache_cfg.get("concurrency", os.getenv("MESSAGE_CACHE_CONCURRENCY", "10")))
        self.ARCHIVE_PAGE_SIZE: int = int(
            cache_cfg.get("archive_page_size", os.getenv("MESSAGE_CACHE_ARCHIVE_PAGE_SIZE", "100"))
        )
        self.ARCHIVE_MAX_RETRIES: int = int(
            cache_cfg.get("archive_max_retries", os.getenv("MESSAGE_CACHE_ARCHIVE_MAX_RETRIES", "3"))
        )

    def is_target(self, guild_id: int | None, channel_id: int, parent_id: int | None = None) -> bool:
        """Return ``True`` when a message in this channel belongs in the message store."""

        if self.DISABLED or guild_id not in self.TARGET_GUILD_IDS:
            return False
        return channel_id not in self.IGNORE_CHANNEL_IDS and parent_id not in self.IGNORE_CHANNEL_IDS
