#!/usr/bin/env python3
"""
Create the default admin user for local/dev.
Password is set via env or a default for dev only.
"""
from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


async def seed_users() -> None:
    from jelovnik.core.security import hash_password
    from jelovnik.db import db_transaction
    from jelovnik.models.user import User, UserRole
    from jelovnik.repositories.user_repo import UserRepository

    email = os.environ.get("SEED_ADMIN_EMAIL", "admin@alikebaba.hr")
    password = os.environ.get("SEED_ADMIN_PASSWORD", "admin123")
    async with db_transaction() as session:
        user = await UserRepository(session).get_by_email(email)
        if user is None:
            session.add(User(email=email, hashed_password=hash_password(password), role=UserRole.ADMIN))
        else:
            user.hashed_password = hash_password(password)
    print(f"Admin user seeded ({email}).")


def main() -> None:
    asyncio.run(seed_users())


if __name__ == "__main__":
    main()
