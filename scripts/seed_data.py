"""
Data Seeder for Work Timer.
Populates the workspace with realistic data for testing and demo purposes.
"""

import asyncio
import sys
import random
from datetime import datetime, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from worktimer.infra.config import get_settings
from worktimer.services import WorkTimer


class SimulatedClock:
    """Clock the seeder moves forward by hand, so durations are generated instantly"""

    def __init__(self):
        self.now = datetime.now() - timedelta(days=7)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int):
        self.now += timedelta(seconds=seconds)


async def reset_database(settings):
    """Delete the existing database file to ensure a fresh seed"""
    db_path = settings.data_dir / 'worktimer.db'
    if db_path.exists():
        print(f"Removing existing database at: {db_path}")
        try:
            db_path.unlink()
            print("Database removed.")
        except PermissionError:
            print("ERROR: Could not remove database. It might be in use.")
            sys.exit(1)
    else:
        print(f"No existing database found at: {db_path}")


async def seed():
    settings = get_settings()
    await reset_database(settings)
    print("Starting data seeding...")

    clock = SimulatedClock()
    timer = await WorkTimer.open(settings, clock=clock)

    layout = {
        "Client Work": ["Write report", "Review contract", "Status call"],
        "Internal": ["Expense claims", "Team sync"],
        "Learning": ["Read docs", "Course module"],
    }

    try:
        for folder, descriptions in layout.items():
            await timer.create_folder(folder)
            for description in descriptions:
                result = await timer.create_task(description, folder=folder)
                task_id = result.value
                print(f"Creating task: {description} ({folder})")

                # A few work sessions per task
                await timer.start_task(task_id)
                for _ in range(random.randint(1, 3)):
                    clock.advance(random.randint(15, 120) * 60)
                    await timer.pause_task(task_id)
                    clock.advance(random.randint(5, 60) * 60)
                    await timer.resume_task(task_id)
                clock.advance(random.randint(10, 45) * 60)

                if random.random() > 0.5:
                    await timer.toggle_task_complete(task_id)
                else:
                    await timer.pause_task(task_id)

        await timer.create_task("Inbox zero", folder=None)
        print("Seeding complete.")
        print(timer.summary_report())
    finally:
        await timer.close()


if __name__ == "__main__":
    asyncio.run(seed())
