import os

_DEFAULT_KICK_MESSAGE = (
    "一定期間内に認証が完了しなかったため、サーバーからキックされました。"
    "再度参加して認証を行ってください。"
)


class AutoKick:
    def __init__(self, config: dict | None = None) -> None:
        kick_cfg = (config or {}).get("auto_kick", {})
        self.GUILD_ID: int = int(kick_cfg.get("guild_id", os.getenv("AUTO_KICK_GUILD_ID", "0")))
        self.GRACE_PERIOD_HOURS: float = float(
            kick_cfg.get("grace_period_hours", os.getenv("AUTO_KICK_GRACE_PERIOD_HOURS", "72"))
        )
        self.KICK_MESSAGE: str = str(kick_cfg.get("kick_message", os.getenv("AUTO_KICK_MESSAGE", _DEFAULT_KICK_MESSAGE)))
        self.INTERVAL_SECONDS: float = float(
            kick_cfg.get("interval_seconds", os.getenv("AUTO_KICK_INTERVAL_SECONDS", "3600"))
        )
        enable_raw = kick_cfg.get("enabled", os.getenv("AUTO_KICK_ENABLED", "1"))
        self.ENABLED: bool = str(enable_raw).lower() in ("1", "true", "yes")
