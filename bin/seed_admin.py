# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the first admin user without the setup endpoint.

Run once after the initial migration:
    python bin/seed_admin.py

The script reads FIRST_ADMIN_USERNAME and FIRST_ADMIN_PASSWORD from
etc/app.conf (or the environment).  After the row is inserted those values
are no longer used by the application.

Deactivate an account (there is no delete):
    python bin/seed_admin.py --deactivate USERNAME
"""

import argparse
import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/seed_admin.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from core.audit import record_event                    # noqa: E402
from core.config import settings                       # noqa: E402
from core.credentials import create_admin_user, deactivate  # noqa: E402
from core.errors import Conflict, ValidationError      # noqa: E402
from database import SessionLocal                      # noqa: E402


def seed(db) -> int:
    username = settings.first_admin_username
    password = settings.first_admin_password
    if not username or not password:
        print("[seed_admin] FIRST_ADMIN_USERNAME or FIRST_ADMIN_PASSWORD not set in etc/app.conf – nothing to do.")
        return 0

    try:
        user = create_admin_user(db, username, password)
    except Conflict:
        print(f"[seed_admin] Admin '{username}' already exists – skipping.")
        return 0
    except ValidationError as exc:
        print(f"[seed_admin] {exc.message}")
        return 1

    record_event(db, "admin_user_created", {"username": user.username}, ip_address="cli", user_agent="seed_admin")
    print(f"[seed_admin] Admin '{user.username}' created successfully.")
    return 0


def deactivate_user(db, username: str) -> int:
    if not deactivate(db, username):
        print(f"[seed_admin] No admin named '{username}'.")
        return 1
    record_event(db, "admin_user_deactivated", {"username": username}, ip_address="cli", user_agent="seed_admin")
    print(f"[seed_admin] Admin '{username}' deactivated.")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create or deactivate admin accounts.")
    parser.add_argument("--deactivate", metavar="USERNAME", help="deactivate this admin instead of seeding")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        if args.deactivate:
            return deactivate_user(db, args.deactivate)
        return seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
