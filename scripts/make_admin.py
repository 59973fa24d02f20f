"""Promote an existing account to admin.

Usage: python scripts/make_admin.py <username>
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from leave_tracker.container import build_container
from leave_tracker.core.exceptions import ValidationError


def main(argv: list[str]) -> None:
    if len(argv) != 1:
        raise SystemExit("Usage: python scripts/make_admin.py <username>")

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))
    try:
        user_id = container.user_service.make_admin(argv[0])
    except ValidationError as e:
        raise SystemExit(f"Error: {e}")
    print(f"OK: {argv[0]} (id={user_id}) is now an admin")


if __name__ == "__main__":
    main(sys.argv[1:])
