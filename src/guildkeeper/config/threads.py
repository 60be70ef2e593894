import os
from dataclasses import dataclass
from typing import List

from .core import _ids


class ThreadAutoInvite:
    def __init__(self, config: dict | None = None) -> None:
        invite_cfg = (config or {}).get("thread_auto_invite", {})
        # Priority order matters: the balancer fills roles front to back.
        self.ROLE_IDS: List[int] = _ids(invite_cfg.get("role_ids"), "THREAD_INVITE_ROLE_IDS")
        self.DISPLAY_ROLE_ID: int = int(
            invite_cfg.get("display_role_id", os.getenv("THREAD_INVITE_DISPLAY_ROLE_ID", "0"))
        )
        self.MIN_MEMBER_COUNT: int = int(
            invite_cfg.get("min_member_count", os.getenv("THREAD_INVITE_MIN_MEMBER_COUNT", "90"))
        )
        self.INITIAL_MESSAGE_TIMEOUT: float = float(
            invite_cfg.get("initial_message_timeout", os.getenv("THREAD_INITIAL_MESSAGE_TIMEOUT", "10"))
        )


@dataclass(frozen=True)
class StartupThread:
    channel_id: int
    startup_message: str


class ThreadChannelStartup:
    def __init__(self, config: dict | None = None) -> None:
        startup_cfg = (config or {}).get("thread_channel_startup", {})
        self.THREADS: List[StartupThread] = [
            StartupThread(int(entry["channel_id"]), str(entry["startup_message"]))
            for entry in startup_cfg.get("threads", [])
        ]

    def messages_for(self, parent_id: int | None) -> List[str]:
        return [t.startup_message for t in self.THREADS if t.channel_id == parent_id]
