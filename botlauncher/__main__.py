import sys

from botlauncher.cli import main

sys.exit(main())
