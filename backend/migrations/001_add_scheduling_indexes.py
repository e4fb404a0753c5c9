from __future__ import annotations

"""Add DB indexes to speed up booking checks and finder endpoints.

Safe to run multiple times (uses IF NOT EXISTS). Tables themselves are created
by the startup bootstrap (AUTO_CREATE_SCHEMA).

Run:
  python -m migrations.001_add_scheduling_indexes --yes

Or:
  python backend/migrations/001_add_scheduling_indexes.py --yes
"""

import argparse
import sys
from pathlib import Path

# Allow running this script from any working directory.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import text

from core.database import ENGINE


STATEMENTS = [
    # Room finders (status filter, minimum capacity)
    "CREATE INDEX IF NOT EXISTS idx_rooms_status ON rooms (status);",
    "CREATE INDEX IF NOT EXISTS idx_rooms_capacity ON rooms (capacity);",

    # Course finders (label substring, minimum credits/hours)
    "CREATE INDEX IF NOT EXISTS idx_courses_label_lower ON courses (lower(label));",
    "CREATE INDEX IF NOT EXISTS idx_courses_credits ON courses (credits);",
    "CREATE INDEX IF NOT EXISTS idx_courses_hours ON courses (hours);",

    # Login lookups are case-insensitive.
    "CREATE UNIQUE INDEX IF NOT EXISTS ux_personnel_login_lower ON personnel (lower(login));",
    "CREATE INDEX IF NOT EXISTS idx_personnel_role ON personnel (role);",

    # Reference checks before deleting rooms/courses/personnel
    "CREATE INDEX IF NOT EXISTS idx_course_sessions_room_start ON course_sessions (room_code, start);",
    "CREATE INDEX IF NOT EXISTS idx_course_sessions_status ON course_sessions (status);",
    "CREATE INDEX IF NOT EXISTS idx_assignments_personnel ON assignments (personnel_code);",
]


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--yes", action="store_true", help="Actually apply changes")
    args = parser.parse_args()

    if not args.yes:
        print("Dry run. Re-run with --yes to apply.")
        for s in STATEMENTS:
            print("---")
            print(s.strip())
        return

    with ENGINE.begin() as conn:
        for s in STATEMENTS:
            conn.execute(text(s))

    print(f"OK: created/verified {len(STATEMENTS)} indexes.")


if __name__ == "__main__":
    main()
