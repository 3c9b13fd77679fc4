import json

import pytest

from botlauncher.config import LauncherConfig, load_launcher_config


def _write_cfg(tmp_path, data):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps(data), encoding="utf-8")
    return p


def test_defaults_match_raffle_bot_host():
    rc = load_launcher_config(environ={})
    assert rc.repo_dir == "/root/telegram-raffle-bot/"
    assert rc.bot_config == "/root/telegram-raffle-bot/config.yaml"
    assert rc.extra_path == "/root/.cargo/bin"
    assert rc.child_env == {"RUST_LOG": "telegram-raffle-bot"}
    assert rc.run_argv() == ["cargo", "run", "--release", "--", "-c", "/root/telegram-raffle-bot/config.yaml"]
    assert rc.pull_command == ["git", "pull"]
    assert rc.bot_name == "telegram-raffle-bot"
    assert not rc.notify_enabled


def test_file_values_override_defaults(tmp_path):
    cfg = _write_cfg(tmp_path, {
        "repo_dir": "/srv/bot",
        "bot_config": "/srv/bot/prod.yaml",
        "child_env": {"RUST_LOG": "debug"},
        "pull_command": ["git", "pull", "--ff-only"],
        "skip_pull": "yes",
    })
    rc = load_launcher_config(str(cfg), environ={})
    assert rc.repo_dir == "/srv/bot"
    assert rc.child_env == {"RUST_LOG": "debug"}
    assert rc.pull_command == ["git", "pull", "--ff-only"]
    assert rc.skip_pull is True
    assert rc.run_argv()[-2:] == ["-c", "/srv/bot/prod.yaml"]


def test_env_overrides_file(tmp_path):
    cfg = _write_cfg(tmp_path, {"repo_dir": "/srv/bot", "log_level": "debug"})
    rc = load_launcher_config(environ={
        "BOTLAUNCHER_CONFIG": str(cfg),
        "BOTLAUNCHER_REPO_DIR": "/opt/bot",
        "TELEGRAM_BOT_TOKEN": "tg",
        "TELEGRAM_CHAT_ID": "42",
    })
    assert rc.repo_dir == "/opt/bot"
    assert rc.log_level == "DEBUG"
    assert rc.notify_enabled


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_launcher_config(str(tmp_path / "absent.json"), environ={})


def test_invalid_json_raises_value_error(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_launcher_config(str(p), environ={})


def test_run_command_must_be_string_list(tmp_path):
    cfg = _write_cfg(tmp_path, {"run_command": "cargo run"})
    with pytest.raises(ValueError):
        load_launcher_config(str(cfg), environ={})


def test_with_overrides_ignores_none():
    rc = LauncherConfig().with_overrides(repo_dir="/x", bot_config=None)
    assert rc.repo_dir == "/x"
    assert rc.bot_config == "/root/telegram-raffle-bot/config.yaml"


def test_bool_is_not_a_path(tmp_path):
    cfg = _write_cfg(tmp_path, {"repo_dir": True})
    with pytest.raises(ValueError):
        load_launcher_config(str(cfg), environ={})
