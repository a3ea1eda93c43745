"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the month/payment rules live in services.
"""

import importlib

from reading_room.container import build_container
from reading_room.settings import get_settings_module


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)
    try:
        svc = container.student_service
        svc.upsert(seat="A1", name="Demo Student", mobile="9876543210")
        svc.record_payment("A1", svc.current_month(), 500)
        for entry in svc.get_history("A1"):
            print(entry.to_dict())
    finally:
        container.close()


if __name__ == "__main__":
    main()
