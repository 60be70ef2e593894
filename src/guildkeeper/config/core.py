import os
from typing import List


def _split_ids(raw: str) -> List[int]:
    return [int(cid.strip()) for cid in raw.split(",") if cid.strip()]


def _ids(value, env_name: str) -> List[int]:
    if value:
        return [int(v) for v in value]
    return _split_ids(os.getenv(env_name, ""))


class Bot:
    def __init__(self, config: dict | None = None) -> None:
        bot_cfg = (config or {}).get("bot", {})

        token_env = str(bot_cfg.get("token_env", "DISCORD_TOKEN"))
        self.TOKEN: str | None = bot_cfg.get("token") or os.getenv(token_env)
        self.APPLICATION_ID: int = int(bot_cfg.get("application_id") or os.getenv("APPLICATION_ID", "0"))
        self.OWNERS: List[int] = _ids(bot_cfg.get("owners"), "BOT_OWNERS")
        self.MAX_LIVE_MESSAGES: int = int(
            bot_cfg.get("max_live_messages", os.getenv("MAX_LIVE_MESSAGES", "100000"))
        )

    def missing(self) -> List[str]:
        required = [
            ("bot.token", self.TOKEN),
            ("bot.application_id", self.APPLICATION_ID),
        ]
        return [name for name, val in required if not val]
