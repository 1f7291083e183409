"""
Command line entry points: serving the API and bootstrapping admin accounts.
"""

import argparse
import asyncio
import os
import sys
from getpass import getpass
from typing import List, Optional, Sequence

from sqlalchemy import select

from .config import get_settings
from .database import create_database_engine, create_session_factory, create_tables
from .models.admin import Admin, AdminRole
from .services.admin_service import AdminService
from .utils.exceptions import DuplicateKeyError

MIN_PASSWORD_LENGTH = 8


def serve() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "padmasambhava_trips.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )


async def create_admin_account(
    name: str,
    email: str,
    password: str,
    role: AdminRole = AdminRole.SUPER_ADMIN,
    database_url: Optional[str] = None,
) -> Admin:
    """Create the tables if needed and insert one admin account."""
    engine = create_database_engine(database_url)
    try:
        await create_tables(engine)
        async with create_session_factory(engine)() as session:
            return await AdminService(session).create_admin(name, email, password, role)
    finally:
        await engine.dispose()


async def list_admin_accounts(database_url: Optional[str] = None) -> List[Admin]:
    engine = create_database_engine(database_url)
    try:
        async with create_session_factory(engine)() as session:
            result = await session.execute(select(Admin).order_by(Admin.created_at))
            return list(result.scalars().all())
    finally:
        await engine.dispose()


def _prompt(label: str) -> str:
    value = input(f"{label}: ").strip()
    if not value:
        raise SystemExit(f"{label} is required")
    return value


def _read_password() -> str:
    # ADMIN_PASSWORD allows non-interactive provisioning
    password = os.environ.get("ADMIN_PASSWORD")
    if password:
        return password

    password = getpass("Password: ")
    if password != getpass("Confirm password: "):
        raise SystemExit("Passwords do not match")
    return password


def create_admin(argv: Optional[Sequence[str]] = None) -> int:
    """Create an admin account, prompting for anything not given on the command line."""
    parser = argparse.ArgumentParser(
        prog="padmasambhava-create-admin",
        description="Create an admin account for the booking console.",
    )
    parser.add_argument("command", nargs="?", choices=["create", "list"], default="create")
    parser.add_argument("--name")
    parser.add_argument("--email")
    parser.add_argument(
        "--role",
        choices=[role.value for role in AdminRole],
        default=AdminRole.SUPER_ADMIN.value,
    )
    args = parser.parse_args(argv)

    if args.command == "list":
        admins = asyncio.run(list_admin_accounts())
        if not admins:
            print("No admin accounts found.")
        for admin in admins:
            state = "active" if admin.is_active else "inactive"
            print(f"{admin.email}\t{admin.name}\t{admin.role.value}\t{state}")
        return 0

    name = args.name or _prompt("Name")
    email = args.email or _prompt("Email")
    password = _read_password()
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters", file=sys.stderr)
        return 1

    try:
        admin = asyncio.run(create_admin_account(name, email, password, AdminRole(args.role)))
    except DuplicateKeyError as e:
        print(e.message, file=sys.stderr)
        return 1

    print(f"Admin created: {admin.email} ({admin.role.value}) id={admin.id}")
    return 0


def create_admin_main() -> None:
    sys.exit(create_admin())
