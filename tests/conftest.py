import os
import sys
import warnings
from collections import defaultdict
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add src/ to sys.path so tests run without an editable install
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

os.environ.setdefault("DISCORD_TOKEN", "test-token")
os.environ.setdefault("APPLICATION_ID", "1")

# Silence deprecation warnings surfaced from third-party dependencies during tests
warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


def pytest_configure(config):
    warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


class FakeChannel:
    """Messageable that records what was sent to it."""

    def __init__(self, cid, *, fail=False):
        self.id = cid
        self.sent = []
        self.fail = fail

    async def send(self, content=None, **kwargs):
        import discord

        if self.fail:
            raise discord.HTTPException(SimpleNamespace(status=500, reason="boom"), "send failed")
        message = SimpleNamespace(id=len(self.sent) + 1, content=content, **kwargs)
        self.sent.append(message)
        return message


class FakeBot:
    """Just enough of ``commands.Bot`` for collectors, hooks and services."""

    def __init__(self, services=None, user_id=999):
        self.user = SimpleNamespace(id=user_id, name="guildkeeper")
        self.services = services
        self.listeners = defaultdict(list)
        self.cached_messages = []
        self.channels = {}
        self.guilds = []

    def add_listener(self, func, name):
        self.listeners[name].append(func)

    def remove_listener(self, func, name):
        if func in self.listeners[name]:
            self.listeners[name].remove(func)

    def listener_count(self, name):
        return len(self.listeners.get(name, []))

    async def dispatch(self, event, *args):
        for func in list(self.listeners.get(f"on_{event}", [])):
            await func(*args)

    def get_channel(self, cid):
        return self.channels.get(cid)

    def get_partial_messageable(self, cid):
        return self.channels.setdefault(cid, FakeChannel(cid))

    def get_guild(self, gid):
        return next((g for g in self.guilds if g.id == gid), None)


@pytest.fixture
def make_config():
    from guildkeeper.config import Config, ConfigStore

    def _make(raw=None):
        return ConfigStore(Config(raw or {}))

    return _make


@pytest.fixture
def fake_bot():
    return FakeBot()


@pytest.fixture
def fake_channel_cls():
    return FakeChannel


@pytest.fixture
def bot_cls():
    return FakeBot
