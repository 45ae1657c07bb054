"""Create demo accounts.

Usage:
    python -m scripts.seed_users [--database-url URL] [--password PASSWORD]

Creates two managers and two employees reporting to the first manager.
Accounts that already exist are left untouched.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from timesheet_tracker.config import get_settings
from timesheet_tracker.database import create_engine, create_session_factory, init_db
from timesheet_tracker.exceptions import ValidationError
from timesheet_tracker.models import Role
from timesheet_tracker.services.auth_service import AuthService

logger = logging.getLogger("seed_users")

MANAGERS = [
    ("manager@company.com", "Sarah Manager"),
    ("manager2@company.com", "Mike Manager"),
]
EMPLOYEES = [
    ("employee1@company.com", "Bob Employee"),
    ("employee2@company.com", "Alice Employee"),
]


async def seed(database_url: str, password: str) -> None:
    """Create the demo users in the target database."""
    settings = get_settings()
    engine = create_engine(database_url)
    try:
        await init_db(engine)
        factory = create_session_factory(engine)

        async with factory() as session:
            service = AuthService(session, settings)

            manager_ids: list[int] = []
            for email, name in MANAGERS:
                existing = await service.get_by_email(email)
                if existing is None:
                    result = await service.register(email, password, name, Role.MANAGER)
                    existing = result.user
                    print(f"Created manager  {email}")
                manager_ids.append(existing.id)

            for email, name in EMPLOYEES:
                try:
                    await service.register(
                        email, password, name, Role.EMPLOYEE, manager_id=manager_ids[0]
                    )
                    print(f"Created employee {email}")
                except ValidationError as e:
                    print(f"Skipped {email}: {e}")
    finally:
        await engine.dispose()

    print(f"\nAll demo accounts use the password: {password}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create demo timesheet users")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Database URL (default: DATABASE_URL from the environment)",
    )
    parser.add_argument("--password", default="password123")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    database_url = args.database_url or get_settings().database_url
    asyncio.run(seed(database_url, args.password))


if __name__ == "__main__":
    main()
