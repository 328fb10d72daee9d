"""Create an administrator account.

Usage:
  python scripts/create_admin.py --email ops@endevera.com --first-name Ops --last-name Team

A temporary password is generated and printed unless --password is given.
"""

import argparse
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from app.auth.dependencies import get_password_manager
from app.auth.password import generate_temp_password
from app.core.config import get_settings
from app.core.database import async_session_maker, close_db, init_db
from app.core.errors import AlreadyExistsError
from app.models.user import UserRole
from app.repositories.user_repository import UserRepository


async def create_admin(email: str, first_name: str, last_name: str, password: str) -> int:
    await init_db()
    passwords = get_password_manager(get_settings())
    try:
        async with async_session_maker() as session:
            user = await UserRepository(session).create(
                email=email,
                password_hash=passwords.hash(password),
                first_name=first_name,
                last_name=last_name,
                role=UserRole.ADMIN,
            )
            return user.id
    finally:
        await close_db()


def main() -> None:
    ap = argparse.ArgumentParser(description="Create an Endevera administrator")
    ap.add_argument("--email", required=True)
    ap.add_argument("--first-name", default="Endevera")
    ap.add_argument("--last-name", default="Administrator")
    ap.add_argument("--password", default=None, help="Defaults to a generated password")
    args = ap.parse_args()

    password = args.password or generate_temp_password()

    try:
        user_id = asyncio.run(create_admin(args.email, args.first_name, args.last_name, password))
    except AlreadyExistsError:
        print(f"Error: an account for {args.email} already exists.", file=sys.stderr)
        sys.exit(1)

    print("Created administrator:")
    print(f"   Id:       {user_id}")
    print(f"   Email:    {args.email.lower()}")
    if not args.password:
        print(f"   Password: {password}")
        print("   Change this password after first login.")


if __name__ == "__main__":
    main()
