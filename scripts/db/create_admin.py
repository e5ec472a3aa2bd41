"""
Create an admin user.

Usage:
    python scripts/db/create_admin.py --email admin@example.com [--password secret] [--name Admin]

Skips creation when an admin with the email already exists.
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from dotenv import load_dotenv
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from contact_distributor.core.db import initialize_database, close_engine, AdminUserRepository
from contact_distributor.core.security import hash_password


async def create_admin(email: str, password: str, name: str) -> int:
    await initialize_database()
    try:
        existing = await AdminUserRepository.get_by_email(email)
        if existing:
            print(f"⚠️ Admin already exists with this email: {email}")
            return 0

        await AdminUserRepository.create_admin(
            email=email,
            password_hash=hash_password(password),
            name=name
        )
        print(f"✅ Admin user created: {email}")
        return 0
    finally:
        await close_engine()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    parser.add_argument("--name", default="Admin")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Admin password: ")
    if not password:
        print("❌ Password must not be empty")
        return 1

    return asyncio.run(create_admin(args.email, password, args.name))


if __name__ == "__main__":
    sys.exit(main())
