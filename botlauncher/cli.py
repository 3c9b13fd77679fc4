from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from botlauncher.config import load_launcher_config
from botlauncher.launcher import launch_or_exit_code
from botlauncher.logging_utils import setup_logging

log = logging.getLogger(__name__)

CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="botlauncher",
        description="Pull the latest bot revision and run it in the foreground.",
    )
    p.add_argument("--config", help="launcher JSON config (default: $BOTLAUNCHER_CONFIG or built-in defaults)")
    p.add_argument("--repo-dir", help="bot repository checkout")
    p.add_argument("--bot-config", help="config file passed to the bot as -c <path>")
    p.add_argument("--skip-pull", action="store_true", help="run the current checkout without pulling")
    p.add_argument("--dry-run", action="store_true", help="print the commands instead of running them")
    p.add_argument("--log-level", help="console log level (DEBUG, INFO, WARNING, ...)")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_launcher_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        setup_logging(args.log_level or "INFO")
        log.error(f"Cannot load launcher config: {e}")
        return CONFIG_ERROR

    cfg = cfg.with_overrides(
        repo_dir=args.repo_dir,
        bot_config=args.bot_config,
        skip_pull=True if args.skip_pull else None,
        log_level=args.log_level.upper() if args.log_level else None,
    )
    setup_logging(cfg.log_level, log_file=cfg.log_file)
    return launch_or_exit_code(cfg, dry_run=args.dry_run)
