#!/usr/bin/env python3
"""
Provision a user and print a bearer token for it.

    python -m scripts.create_user someone@example.com --minutes 120
"""
import argparse
import asyncio
import logging

from app.core.config import settings
from app.core.logging import configure_logging
from app.core.security import create_access_token
from app.db.session import Database
from app.repositories.user_repo import get_or_create_user

logger = logging.getLogger(__name__)


async def main(email: str, minutes: int | None) -> None:
    database = Database.from_settings(settings)
    await database.connect()
    try:
        async with database.sessionmaker() as db:
            user = await get_or_create_user(db, email)
        logger.info("User %s has id %s", user.email, user.id)
        print(create_access_token(user.id, expires_minutes=minutes))
    finally:
        await database.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("email")
    parser.add_argument("--minutes", type=int, default=None, help="token lifetime override")
    args = parser.parse_args()
    configure_logging()
    asyncio.run(main(args.email, args.minutes))
