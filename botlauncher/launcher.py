"""Refresh the bot checkout and run it in the foreground.

Steps, strictly in order, each one gating the next:
- append the extra directory to PATH;
- chdir into the repository;
- pull the latest revision;
- run the bot with its config flag and logging env, wait, return its status.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, MutableMapping, Optional

from botlauncher.config import LauncherConfig
from botlauncher.notify import notify_failure
from botlauncher.vcs import (
    COMMAND_NOT_EXECUTABLE,
    COMMAND_NOT_FOUND,
    Runner,
    current_revision,
    normalize_exit_code,
    pull,
)

log = logging.getLogger(__name__)

INTERRUPTED = 130


class LauncherError(RuntimeError):
    """Base error for launch steps; carries the process exit code to use."""

    default_exit_code = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = self.default_exit_code if exit_code is None else int(exit_code)


class DirectoryNotFound(LauncherError):
    """Repository directory is missing or not a directory."""

    default_exit_code = 2


class SyncError(LauncherError):
    """Pull failed: network, merge conflict, detached HEAD, missing git."""


class RunError(LauncherError):
    """The bot executable could not be started at all."""

    default_exit_code = COMMAND_NOT_FOUND


def extend_search_path(extra: str, environ: MutableMapping[str, str]) -> str:
    """Append ``extra`` to PATH in ``environ`` and return the new value."""
    current = environ.get("PATH", "")
    if not extra:
        return current
    parts = current.split(os.pathsep) if current else []
    if extra not in parts:
        parts.append(extra)
    value = os.pathsep.join(parts)
    environ["PATH"] = value
    return value


class Launcher:
    def __init__(self, cfg: LauncherConfig, runner: Runner = subprocess.run,
                 environ: Optional[MutableMapping[str, str]] = None):
        self.cfg = cfg
        self._runner = runner
        self._environ = os.environ if environ is None else environ

    def extend_search_path(self) -> str:
        value = extend_search_path(self.cfg.extra_path, self._environ)
        log.debug(f"PATH={value}")
        return value

    def enter_repo(self) -> Path:
        if not str(self.cfg.repo_dir).strip():
            raise DirectoryNotFound("Repository directory is empty")
        repo_dir = Path(self.cfg.repo_dir).expanduser()
        try:
            os.chdir(repo_dir)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise DirectoryNotFound(f"Repository directory not found: {repo_dir}") from e
        except PermissionError as e:
            raise LauncherError(f"Cannot enter repository directory: {repo_dir}", exit_code=2) from e
        return Path.cwd()

    def pull(self, repo_dir: Path) -> None:
        env = dict(self._environ)
        code = pull(repo_dir, self.cfg.pull_command, runner=self._runner, env=env)
        if code != 0:
            raise SyncError(f"Pull failed with exit code {code}", exit_code=code)
        rev = current_revision(repo_dir, env=env)
        if rev:
            log.info(f"Checkout is at {rev}")

    def child_environment(self) -> Dict[str, str]:
        env = dict(self._environ)
        env.update(self.cfg.child_env)
        return env

    def run(self, repo_dir: Path) -> int:
        argv = self.cfg.run_argv()
        if not Path(self.cfg.bot_config).expanduser().exists():
            log.warning(f"Bot config does not exist (passing it anyway): {self.cfg.bot_config}")
        log.info(f"Starting bot: {' '.join(argv)}")
        try:
            res = self._runner(argv, cwd=str(repo_dir), env=self.child_environment())
        except FileNotFoundError as e:
            raise RunError(f"Run command not found: {argv[0]}", exit_code=COMMAND_NOT_FOUND) from e
        except PermissionError as e:
            raise RunError(f"Run command not executable: {argv[0]}", exit_code=COMMAND_NOT_EXECUTABLE) from e
        except OSError as e:
            raise RunError(f"Cannot execute {argv[0]}: {e}", exit_code=COMMAND_NOT_EXECUTABLE) from e
        code = normalize_exit_code(int(res.returncode))
        log.info(f"Bot exited with status {code}")
        return code

    def launch(self, dry_run: bool = False) -> int:
        """Run every step in order and return the bot's exit code.

        Raises a LauncherError subclass when a step before the bot fails;
        nothing after the failing step is attempted.
        """
        self.extend_search_path()
        repo_dir = self.enter_repo()
        if dry_run:
            if not self.cfg.skip_pull:
                log.info(f"DRY-RUN: would pull with {' '.join(self.cfg.pull_command)}")
            parts = [f"{k}={v}" for k, v in self.cfg.child_env.items()] + self.cfg.run_argv()
            log.info(f"DRY-RUN: would run {' '.join(parts)}")
            return 0
        if self.cfg.skip_pull:
            log.info("Skipping pull")
        else:
            self.pull(repo_dir)
        return self.run(repo_dir)


def launch_or_exit_code(cfg: LauncherConfig, runner: Runner = subprocess.run,
                        environ: Optional[MutableMapping[str, str]] = None,
                        dry_run: bool = False) -> int:
    """Launch and fold every outcome into an exit code, notifying on failure."""
    launcher = Launcher(cfg, runner=runner, environ=environ)
    try:
        code = launcher.launch(dry_run=dry_run)
    except KeyboardInterrupt:
        log.info("Interrupted")
        return INTERRUPTED
    except LauncherError as e:
        log.error(str(e))
        notify_failure(cfg, str(e))
        return e.exit_code
    if code not in (0, INTERRUPTED):
        notify_failure(cfg, f"bot exited with status {code}")
    return code
