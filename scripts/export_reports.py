"""
Script to export CSV reports from the saved workspace.

Usage:
    python export_reports.py                 # all tasks
    python export_reports.py --folder NAME   # one folder
    python export_reports.py --each-task     # one file per task
"""

import sys
import asyncio
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from worktimer.infra.config import get_settings
from worktimer.services import WorkTimer


async def main():
    args = sys.argv[1:]
    if args and args[0] not in ("--folder", "--each-task"):
        print("Usage: python export_reports.py [--folder NAME | --each-task]")
        sys.exit(1)
    if args[:1] == ["--folder"] and len(args) < 2:
        print("Error: --folder needs a folder name")
        sys.exit(1)

    settings = get_settings()
    timer = await WorkTimer.open(settings)
    try:
        for warning in timer.load_warnings:
            print(f"Warning: {warning}")

        if not args:
            results = [timer.export_all()]
        elif args[0] == "--folder":
            results = [timer.export_folder(args[1])]
        else:
            results = [await timer.export_task(task.id) for task in timer.store.all()]

        failed = False
        for result in results:
            if result.success:
                print(f"Report saved to: {Path(result.value).absolute()}")
            else:
                failed = True
                print(f"Error: {result.message}")
        if failed:
            sys.exit(1)
    finally:
        await timer.close()


if __name__ == "__main__":
    asyncio.run(main())
