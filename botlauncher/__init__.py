"""botlauncher: pull the latest bot revision and run it in the foreground."""

__version__ = "0.1.0"
