"""Example: use the service layer directly (no Flask).

Prints the per-subject leave summary and one attendance percentage for a user.
"""

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from leave_tracker.container import build_container


def main(user_id: int = 1, total_classes: int = 40):
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    data = container.leave_service.dashboard(user_id=user_id)
    for s in data.summary:
        print(f"{s.subject}: {s.count} leave(s), {s.duty_leave_count} duty")

    if data.subjects:
        attendance = container.leave_service.attendance_for_subject(
            user_id=user_id, subject_id=data.subjects[0].subject_id, total_classes=total_classes
        )
        print(f"{attendance.subject.name}: {attendance.result.display}")


if __name__ == "__main__":
    main()
