#!/usr/bin/env python3
"""
User Management CLI

Command-line tool for managing BizLedger accounts from the server terminal.
Use this when you need to reset passwords or manage users without the web UI.

Usage:
    python user_cli.py create-user <username> <email> <password>
    python user_cli.py reset-password <username> <new_password>
    python user_cli.py list-users
    python user_cli.py activate <username>
    python user_cli.py deactivate <username>

Add --test before the command to operate on the test database.
"""
import sys
import argparse
import asyncio
from pathlib import Path

# Add project root to path (file is in root)
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import set_test_mode
from backend.app.db.session import get_async_engine
from backend.app.schemas.account import ACRegisterItem
from backend.app.services.account_service import AccountService, AccountError


async def run_account_command(command) -> bool:
    """
    Run `command(service)` in its own session and commit it.

    Account errors are printed and rolled back; returns False in that case.
    """
    engine = get_async_engine()
    try:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            try:
                await command(AccountService(session))
            except AccountError as e:
                await session.rollback()
                print(f"❌ {e}")
                return False
            await session.commit()
    finally:
        await engine.dispose()
    return True


async def cmd_create_user(username: str, email: str, password: str) -> bool:
    """Create a new active user."""
    try:
        item = ACRegisterItem(username=username, email=email, password=password)
    except ValidationError as e:
        for err in e.errors():
            print(f"❌ {'.'.join(str(p) for p in err['loc'])}: {err['msg']}")
        return False

    async def create(service: AccountService):
        user = await service.register(item)
        print(f"✅ User '{user.username}' created with ID {user.id}")

    return await run_account_command(create)


async def cmd_reset_password(username: str, new_password: str) -> bool:
    """Reset a user's password."""
    async def reset(service: AccountService):
        await service.reset_password(username, new_password)
        print(f"✅ Password reset for user '{username}'")

    return await run_account_command(reset)


async def cmd_list_users() -> bool:
    """List all users."""
    async def show(service: AccountService):
        users = await service.list()
        if not users:
            print("No users found")
            return

        print(f"\n{'ID':<5} {'Username':<20} {'Email':<30} {'Active':<8}")
        print("-" * 65)
        for user in users:
            active = "✅" if user.is_active else "❌"
            print(f"{user.id:<5} {user.username:<20} {user.email:<30} {active:<8}")
        print(f"\nTotal: {len(users)} user(s)")

    return await run_account_command(show)


async def cmd_set_user_active(username: str, active: bool) -> bool:
    """Activate or deactivate a user."""
    async def toggle(service: AccountService):
        await service.set_active(username, active)
        print(f"✅ User '{username}' {'activated' if active else 'deactivated'}")

    return await run_account_command(toggle)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="BizLedger User Management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python user_cli.py create-user alice alice@example.com s3cretpass
  python user_cli.py reset-password alice newpassword123
  python user_cli.py list-users
  python user_cli.py deactivate alice
  python user_cli.py activate alice
        """
        )
    parser.add_argument("--test", action="store_true", help="Use the test database")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # create-user
    create_parser = subparsers.add_parser("create-user", help="Create user")
    create_parser.add_argument("username", help="Username")
    create_parser.add_argument("email", help="Email address")
    create_parser.add_argument("password", help="Password")

    # reset-password
    reset_parser = subparsers.add_parser("reset-password", help="Reset user password")
    reset_parser.add_argument("username", help="Username")
    reset_parser.add_argument("new_password", help="New password")

    # list-users
    subparsers.add_parser("list-users", help="List all users")

    # deactivate
    deact_parser = subparsers.add_parser("deactivate", help="Deactivate user")
    deact_parser.add_argument("username", help="Username")

    # activate
    act_parser = subparsers.add_parser("activate", help="Activate user")
    act_parser.add_argument("username", help="Username")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.test:
        set_test_mode(True)

    if args.command == "create-user":
        ok = asyncio.run(cmd_create_user(args.username, args.email, args.password))
    elif args.command == "reset-password":
        ok = asyncio.run(cmd_reset_password(args.username, args.new_password))
    elif args.command == "list-users":
        ok = asyncio.run(cmd_list_users())
    elif args.command == "deactivate":
        ok = asyncio.run(cmd_set_user_active(args.username, False))
    else:
        ok = asyncio.run(cmd_set_user_active(args.username, True))

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
