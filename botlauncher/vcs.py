"""Version-control helpers: pull the checkout, read its current revision."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

log = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]

COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


def pull(repo_dir: Path, command: Sequence[str], runner: Runner = subprocess.run,
         env: Optional[Dict[str, str]] = None) -> int:
    """Run the pull command in ``repo_dir`` and return its exit code.

    Output goes straight to the inherited stdout/stderr so merge conflicts and
    network errors are visible on the console. A missing executable yields 127,
    one that can't be executed 126, and a kill by signal N yields 128 + N.
    """
    argv: List[str] = list(command)
    log.info(f"Pulling latest revision: {' '.join(argv)} (cwd={repo_dir})")
    try:
        res = runner(argv, cwd=str(repo_dir), env=env)
    except FileNotFoundError:
        log.error(f"Pull command not found: {argv[0]}")
        return COMMAND_NOT_FOUND
    except OSError as e:
        log.error(f"Pull command not executable: {argv[0]}: {e}")
        return COMMAND_NOT_EXECUTABLE
    return normalize_exit_code(int(res.returncode))


def normalize_exit_code(returncode: int) -> int:
    # Killed by signal N shows up as -N; report it the way sh does.
    if returncode < 0:
        return 128 + (-returncode)
    return returncode


def current_revision(repo_dir: Path, env: Optional[Dict[str, str]] = None, timeout: int = 10) -> str:
    """Short HEAD sha of ``repo_dir``, or "" when it can't be determined."""
    try:
        res = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=str(repo_dir),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError):
        log.debug(f"Failed to read revision of {repo_dir}", exc_info=True)
        return ""
    if res.returncode != 0:
        return ""
    return res.stdout.strip()
