#!/usr/bin/env python
"""
Seed the access-control tables for development.

    python scripts/seed.py              # permissions, system roles, super admin
    python scripts/seed.py --scenario demo
"""

import argparse
import asyncio
import sys


# Add src to path for imports
sys.path.insert(0, "src")

from remiwire.core.database import async_session_factory
from remiwire.core.errors import AppException
from remiwire.core.permissions.seed import seed_defaults
from remiwire.modules.permissions.repos import PermissionRepository
from remiwire.modules.roles.repos import RoleRepository
from remiwire.modules.staff.repos import StaffRepository
from remiwire.modules.staff.schemas import StaffCreate
from remiwire.modules.staff.services import StaffService


DEMO_PASSWORD = "Demo!Passw0rd"

DEMO_STAFF = [
    {"first_name": "Maya", "last_name": "Rahman", "role": "Manager", "department": "Operations"},
    {"first_name": "Omar", "last_name": "Haddad", "role": "Agent", "department": "Counter"},
    {"first_name": "Lena", "last_name": "Park", "role": "Agent", "department": "Counter"},
    {"first_name": "Ivo", "last_name": "Novak", "role": "Support", "department": "Customer Care"},
]


async def seed_default() -> None:
    """Create the default permissions, system roles and super admin."""
    async with async_session_factory() as session:
        result = await seed_defaults(session)
        await session.commit()

    print(f"Permissions created: {len(result.permissions_created)}")
    print(f"Roles created: {', '.join(result.roles_created) or 'none'}")
    if result.super_admin:
        state = "created" if result.super_admin_created else "already exists"
        print(f"Super admin {state}: {result.super_admin.email} ({result.super_admin.id})")


async def seed_demo() -> None:
    """Create default data plus a few staff members on each role."""
    await seed_default()

    async with async_session_factory() as session:
        service = StaffService(
            StaffRepository(session),
            RoleRepository(session),
            PermissionRepository(session),
        )

        for data in DEMO_STAFF:
            email = f"{data['first_name']}.{data['last_name']}@remiwire.dev".lower()
            if await service.repo.get_by_email(email):
                print(f"Staff already exists: {email}")
                continue

            try:
                staff = await service.register(
                    StaffCreate(email=email, password=DEMO_PASSWORD, **data)
                )
            except AppException as e:
                print(f"Skipped {email}: {e.message}")
                continue
            print(f"Created staff: {staff.email} ({staff.role_label})")

        await session.commit()


async def main(scenario: str) -> None:
    """Run the seeding based on scenario."""
    if scenario == "default":
        await seed_default()
    elif scenario == "demo":
        await seed_demo()
    else:
        print(f"Unknown scenario: {scenario}")
        sys.exit(1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the access-control tables")
    parser.add_argument(
        "--scenario",
        choices=["default", "demo"],
        default="default",
        help="Seed scenario to run",
    )
    args = parser.parse_args()
    asyncio.run(main(args.scenario))
