"""Startup shim for the bot host.

Loads the launcher config ($BOTLAUNCHER_CONFIG or defaults), pulls the bot
checkout and runs it, exiting with the bot's status.
"""

import sys

from botlauncher.config import load_launcher_config
from botlauncher.launcher import launch_or_exit_code
from botlauncher.logging_utils import setup_logging


cfg = load_launcher_config()
setup_logging(cfg.log_level, log_file=cfg.log_file)
sys.exit(launch_or_exit_code(cfg))
