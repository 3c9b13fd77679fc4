from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    level: str = "INFO",
    *,
    log_file: str = "",
    log_file_max_bytes: int = 1_000_000,
    log_file_backup_count: int = 3,
) -> None:
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    fmt = logging.Formatter(LOG_FORMAT)
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    handler.setFormatter(fmt)
    handlers: list[logging.Handler] = [handler]

    if log_file:
        try:
            p = Path(log_file).expanduser()
            p.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                p,
                maxBytes=int(log_file_max_bytes),
                backupCount=int(log_file_backup_count),
                encoding="utf-8",
            )
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(fmt)
            handlers.append(fh)
        except OSError as e:
            # Console logging still works; the launch must not fail over a log file.
            sys.stderr.write(f"botlauncher: WARNING: failed to open log file {log_file!r}: {e}\n")

    root.handlers[:] = handlers
