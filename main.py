#!/usr/bin/env python

"""
Work Timer - Main Entry Point

Opens the saved workspace, reports anything that could not be loaded, and
prints the statistics summary. A UI embeds WorkTimer the same way.

Usage:
    python main.py

Requirements:
    - Python 3.10+
    - See pyproject.toml for dependencies
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from worktimer.infra.config import get_settings
from worktimer.infra.logging_setup import setup_logging
from worktimer.services import WorkTimer

logger = logging.getLogger("worktimer.main")


async def run() -> int:
    settings = get_settings()
    setup_logging(log_dir=settings.get_log_dir(), console_level=settings.preferences.log_level.upper())

    timer = await WorkTimer.open(settings)
    try:
        for warning in timer.load_warnings:
            print(f"Warning: {warning}")
        print(timer.summary_report())
    finally:
        await timer.close()
    return 0


def main():
    """Main entry point"""
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())
