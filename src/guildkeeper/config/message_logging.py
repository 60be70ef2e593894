import os


class MessageLogging:
    def __init__(self, config: dict | None = None) -> None:
        log_cfg = (config or {}).get("message_logging", {})
        self.CHANNEL_ID: int = int(log_cfg.get("channel_id", os.getenv("MESSAGE_LOG_CHANNEL_ID", "0")))
