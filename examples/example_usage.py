"""Example: drive the lifecycle sweeps by hand, without Flask or the scheduler.

Useful after restoring a database dump, to bring event statuses and
attendance verdicts up to date in one go.
"""

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from src.event_attendance.event_attendance.container import build_container


def main():
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    changed = container.lifecycle_service.sweep_statuses()
    finalized = container.lifecycle_service.sweep_finalization()
    print(f"status transitions: {changed}, events finalized: {finalized}")


if __name__ == "__main__":
    main()
