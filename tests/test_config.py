import pytest

from guildkeeper.config import Config, ConfigLoadError, ConfigStore, load_raw_config
from guildkeeper.config.auth import Auth


def test_missing_file_loads_as_empty(tmp_path):
    assert load_raw_config(tmp_path / "absent.toml") == {}


def test_invalid_toml_raises(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("auth = [unterminated", encoding="utf-8")

    with pytest.raises(ConfigLoadError):
        load_raw_config(path)


def test_env_fallback_and_file_precedence(monkeypatch):
    monkeypatch.setenv("AUTH_ROLE_ID", "42")

    assert Auth({}).ROLE_ID == 42
    assert Auth({"auth": {"role_id": 7}}).ROLE_ID == 7


def test_empty_trigger_pattern_matches_nothing(monkeypatch):
    monkeypatch.delenv("AUTH_TRIGGER_REGEX", raising=False)

    assert Auth({}).TRIGGER_REGEX.search("anything") is None


def test_sections_parse_toml_shapes():
    config = Config(
        {
            "pin": {"channels": {"123": 456}},
            "message_cache": {"target_guild_ids": [1], "ignore_channel_ids": [9]},
            "thread_channel_startup": {"threads": [{"channel_id": 20, "startup_message": "hi"}]},
        }
    )

    assert config.pin.CHANNELS == {123: 456}
    assert config.message_cache.is_target(1, 5)
    assert not config.message_cache.is_target(1, 9)
    assert not config.message_cache.is_target(1, 5, parent_id=9)
    assert not config.message_cache.is_target(2, 5)
    assert config.thread_channel_startup.messages_for(20) == ["hi"]
    assert config.thread_channel_startup.messages_for(21) == []


def test_reload_swaps_snapshot_and_keeps_old_on_error(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[question]\nforum_id = 1\n", encoding="utf-8")
    store = ConfigStore.from_file(path)
    first = store.current

    path.write_text("[question]\nforum_id = 2\n", encoding="utf-8")
    store.reload()
    assert first.question.FORUM_ID == 1
    assert store.current.question.FORUM_ID == 2

    path.write_text("[question\n", encoding="utf-8")
    with pytest.raises(ConfigLoadError):
        store.reload()
    assert store.current.question.FORUM_ID == 2


def test_missing_reports_required_settings(monkeypatch):
    for name in ("DISCORD_TOKEN", "APPLICATION_ID", "AUTH_ROLE_ID", "AUTH_LOG_CHANNEL_ID"):
        monkeypatch.delenv(name, raising=False)

    assert set(Config({}).missing()) == {"bot.token", "bot.application_id", "auth.log_channel_id", "auth.role_id"}
