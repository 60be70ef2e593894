"""Application configuration"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from .loader import DEFAULT_CONFIG_PATH, ConfigLoadError, load_raw_config
from .core import Bot
from .auth import Auth
from .auto_kick import AutoKick
from .cache import MessageCache
from .message_logging import MessageLogging
from .question import Question
from .pin import Pin
from .threads import StartupThread, ThreadAutoInvite, ThreadChannelStartup

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=logging.INFO)
logging.getLogger("discord.http").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


class Config:
    """One immutable snapshot of every configuration section."""

    def __init__(self, raw: dict | None = None) -> None:
        raw = raw or {}
        self.bot = Bot(raw)
        self.auth = Auth(raw)
        self.auto_kick = AutoKick(raw)
        self.message_logging = MessageLogging(raw)
        self.message_cache = MessageCache(raw)
        self.question = Question(raw)
        self.pin = Pin(raw)
        self.thread_auto_invite = ThreadAutoInvite(raw)
        self.thread_channel_startup = ThreadChannelStartup(raw)

    def missing(self) -> List[str]:
        """Return the names of required settings that are unset."""

        return self.bot.missing() + self.auth.missing()


class ConfigStore:
    """
    Holder for the current :class:`Config` snapshot.

    Components read :attr:`current` each time they need a setting instead of
    caching sections, so :meth:`reload` takes effect everywhere at once. The
    swap is a single reference assignment; readers never observe a partially
    built snapshot.
    """

    def __init__(self, config: Config, path: str | Path | None = None) -> None:
        self._current = config
        self._path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        self._reload_lock = threading.Lock()

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> "ConfigStore":
        return cls(Config(load_raw_config(path)), path)

    @property
    def current(self) -> Config:
        return self._current

    @property
    def path(self) -> Path:
        return self._path

    def reload(self) -> Config:
        """Re-read the config file and replace the snapshot.

        Raises :class:`ConfigLoadError` (keeping the old snapshot) when the
        file cannot be parsed.
        """

        with self._reload_lock:
            config = Config(load_raw_config(self._path))
            self._current = config
        logger.info("Reloaded configuration from %s", self._path)
        return config


__all__ = [
    "Config",
    "ConfigStore",
    "ConfigLoadError",
    "StartupThread",
    "load_raw_config",
    "DEFAULT_CONFIG_PATH",
]
