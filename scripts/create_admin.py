from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from boardinghouse.core.exceptions import ConflictError, ValidationError
from boardinghouse.core.startup import bootstrap
from boardinghouse.models import UserRole
from boardinghouse.services.user_service import UserService


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a staff account for the boarding house backend.")
    parser.add_argument("username", help="Login name (stored lower-case).")
    parser.add_argument("--full-name", default="", help="Display name (defaults to the username).")
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.ADMIN.value,
        help="Account role (default: ADMIN).",
    )
    parser.add_argument("--password", help="Password; prompted for when omitted.")
    args = parser.parse_args()

    bootstrap()
    password = args.password or getpass.getpass("Password: ")
    with UserService() as service:
        try:
            user = service.create_user(
                username=args.username,
                password=password,
                full_name=args.full_name,
                role=UserRole(args.role),
            )
        except (ConflictError, ValidationError) as exc:
            raise SystemExit(f"Could not create user: {exc.message}") from exc
    print(f"Created {user.role.value} account '{user.username}' (id={user.id}).")


if __name__ == "__main__":
    main()
