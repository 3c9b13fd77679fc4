import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional


DEFAULT_REPO_DIR = "/root/telegram-raffle-bot/"
DEFAULT_BOT_CONFIG = "/root/telegram-raffle-bot/config.yaml"
DEFAULT_EXTRA_PATH = "/root/.cargo/bin"


def _default_child_env() -> Dict[str, str]:
    return {"RUST_LOG": "telegram-raffle-bot"}


def _default_pull_command() -> List[str]:
    return ["git", "pull"]


def _default_run_command() -> List[str]:
    return ["cargo", "run", "--release", "--"]


@dataclass(frozen=True)
class LauncherConfig:
    repo_dir: str = DEFAULT_REPO_DIR
    bot_config: str = DEFAULT_BOT_CONFIG
    extra_path: str = DEFAULT_EXTRA_PATH
    child_env: Dict[str, str] = field(default_factory=_default_child_env)
    pull_command: List[str] = field(default_factory=_default_pull_command)
    run_command: List[str] = field(default_factory=_default_run_command)
    config_flag: str = "-c"
    skip_pull: bool = False
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    telegram_api_base: str = "https://api.telegram.org"
    log_level: str = "INFO"
    log_file: str = ""

    @property
    def bot_name(self) -> str:
        return Path(self.repo_dir).name or str(self.repo_dir)

    @property
    def notify_enabled(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)

    def run_argv(self) -> List[str]:
        return list(self.run_command) + [self.config_flag, self.bot_config]

    def with_overrides(self, **changes: Any) -> "LauncherConfig":
        """Copy with the non-None keyword values applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _str(data: Dict[str, Any], key: str, default: str) -> str:
    val = data.get(key, default)
    if val is None:
        return default
    if isinstance(val, bool) or not isinstance(val, (str, int, float)):
        raise ValueError(f"Config key {key} must be a string, got {type(val).__name__}")
    return str(val).strip()


def _bool(data: Dict[str, Any], key: str, default: bool) -> bool:
    val = data.get(key, default)
    if isinstance(val, str):
        return val.strip().lower() in {"1", "true", "yes", "on"}
    return bool(val)


def _argv(data: Dict[str, Any], key: str, default: List[str]) -> List[str]:
    val = data.get(key)
    if val is None:
        return list(default)
    if not isinstance(val, list) or not val or not all(isinstance(x, str) for x in val):
        raise ValueError(f"Config key {key} must be a non-empty list of strings")
    return list(val)


def _env_map(data: Dict[str, Any], key: str, default: Dict[str, str]) -> Dict[str, str]:
    val = data.get(key)
    if val is None:
        return dict(default)
    if not isinstance(val, dict):
        raise ValueError(f"Config key {key} must be an object of name -> value")
    return {str(k): str(v) for k, v in val.items()}


def _env_overrides(environ: Dict[str, str]) -> Dict[str, Any]:
    mapping = {
        "BOTLAUNCHER_REPO_DIR": "repo_dir",
        "BOTLAUNCHER_BOT_CONFIG": "bot_config",
        "BOTLAUNCHER_EXTRA_PATH": "extra_path",
        "BOTLAUNCHER_LOG_LEVEL": "log_level",
        "BOTLAUNCHER_LOG_FILE": "log_file",
        "TELEGRAM_BOT_TOKEN": "telegram_bot_token",
        "TELEGRAM_CHAT_ID": "telegram_chat_id",
    }
    out: Dict[str, Any] = {}
    for env_name, key in mapping.items():
        val = str(environ.get(env_name, "")).strip()
        if val:
            out[key] = val
    return out


def load_launcher_config(path: Optional[str] = None,
                         environ: Optional[Dict[str, str]] = None) -> LauncherConfig:
    """Build the launcher config from defaults, an optional JSON file and env.

    Precedence: environment > file > built-in defaults. An explicitly named file
    (argument or BOTLAUNCHER_CONFIG) must exist; with neither, defaults apply.
    """
    env = dict(os.environ if environ is None else environ)
    raw_path = path or env.get("BOTLAUNCHER_CONFIG", "")

    data: Dict[str, Any] = {}
    if raw_path:
        cfg_path = Path(raw_path).expanduser().resolve()
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        try:
            loaded = json.loads(cfg_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {cfg_path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {cfg_path} must hold a JSON object")
        data = loaded

    data.update(_env_overrides(env))

    repo_dir = _str(data, "repo_dir", DEFAULT_REPO_DIR)
    if not repo_dir:
        raise ValueError("repo_dir must not be empty")

    return LauncherConfig(
        repo_dir=repo_dir,
        bot_config=_str(data, "bot_config", DEFAULT_BOT_CONFIG),
        extra_path=_str(data, "extra_path", DEFAULT_EXTRA_PATH),
        child_env=_env_map(data, "child_env", _default_child_env()),
        pull_command=_argv(data, "pull_command", _default_pull_command()),
        run_command=_argv(data, "run_command", _default_run_command()),
        config_flag=_str(data, "config_flag", "-c") or "-c",
        skip_pull=_bool(data, "skip_pull", False),
        telegram_bot_token=_str(data, "telegram_bot_token", ""),
        telegram_chat_id=_str(data, "telegram_chat_id", ""),
        telegram_api_base=_str(data, "telegram_api_base", "https://api.telegram.org").rstrip("/"),
        log_level=_str(data, "log_level", "INFO").upper() or "INFO",
        log_file=_str(data, "log_file", ""),
    )
