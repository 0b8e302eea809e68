"""
Life Tracker — Entry Point.

`python main.py serve` starts the cloud sync API; see src/cli.py for the
other commands.
"""

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from src.cli import main

if __name__ == "__main__":
    main()
