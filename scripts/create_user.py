"""Create an account directly in MongoDB.

Usage:
  python scripts/create_user.py --email admin@college.edu --password '...' \
      --role academic --sub-role administrative --name 'Ada Admin'
  python scripts/create_user.py --email s1@college.edu --password '...' \
      --role student --first-name Sam --last-name Student

NOTE: meant for bootstrapping the first administrator and for local/dev.
"""

import argparse
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from college_portal.core.database import client, db
from college_portal.core.database_setup import ensure_indexes
from college_portal.crud import students as students_crud
from college_portal.crud import users as users_crud
from college_portal.services.auth import hash_password


async def create(args) -> dict:
    await ensure_indexes(db)
    if await users_crud.email_taken(db, args.email):
        raise SystemExit(f"User with email {args.email} already exists")

    user = await users_crud.create_user(
        db,
        email=args.email,
        password_hash=hash_password(args.password),
        role=args.role,
        sub_role=args.sub_role,
        name=args.name,
    )
    if args.role == "student":
        await students_crud.create_profile(
            db,
            user_id=user["_id"],
            first_name=args.first_name,
            last_name=args.last_name,
        )
    return user


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--role", choices=["academic", "student"], required=True)
    ap.add_argument("--sub-role", choices=["faculty", "administrative"])
    ap.add_argument("--name")
    ap.add_argument("--first-name")
    ap.add_argument("--last-name")
    args = ap.parse_args()

    if args.role == "academic" and not (args.sub_role and args.name):
        ap.error("--sub-role and --name are required for academic accounts")
    if args.role == "student" and not (args.first_name and args.last_name):
        ap.error("--first-name and --last-name are required for students")

    try:
        user = asyncio.run(create(args))
    finally:
        client.close()

    print("Created user:")
    print({k: v for k, v in user.items() if k != "passwordHash"})


if __name__ == "__main__":
    main()
