from typing import Dict


class Pin:
    def __init__(self, config: dict | None = None) -> None:
        pin_cfg = (config or {}).get("pin", {})
        # TOML keys are always strings; normalise to channel id -> owner user id.
        channels = pin_cfg.get("channels", {}) or {}
        self.CHANNELS: Dict[int, int] = {int(cid): int(uid) for cid, uid in channels.items()}
