import subprocess

import pytest

from botlauncher import cli


@pytest.fixture(autouse=True)
def _env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PATH", "/usr/bin")
    for name in ("BOTLAUNCHER_CONFIG", "BOTLAUNCHER_REPO_DIR", "BOTLAUNCHER_BOT_CONFIG",
                 "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID", "BOTLAUNCHER_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli, "setup_logging", lambda *a, **kw: None)


def _no_subprocess(*args, **kwargs):
    raise AssertionError(f"unexpected subprocess call: {args}")


def test_missing_launcher_config_exits_2(tmp_path):
    assert cli.main(["--config", str(tmp_path / "absent.json")]) == 2


def test_missing_repo_dir_exits_2_without_subprocess(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", _no_subprocess)
    assert cli.main(["--repo-dir", str(tmp_path / "nope")]) == 2


def test_dry_run_exits_0_without_subprocess(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", _no_subprocess)
    repo = tmp_path / "repo"
    repo.mkdir()
    assert cli.main(["--repo-dir", str(repo), "--bot-config", str(repo / "c.yaml"), "--dry-run"]) == 0


def test_parser_flags():
    args = cli.build_parser().parse_args(["--skip-pull", "--log-level", "debug"])
    assert args.skip_pull
    assert args.log_level == "debug"
    assert not args.dry_run


def test_empty_repo_dir_exits_2(monkeypatch):
    monkeypatch.setattr(subprocess, "run", _no_subprocess)
    assert cli.main(["--repo-dir", "", "--dry-run"]) == 2
