"""
Admin Bootstrap
Creates the first approved admin account so role management can start
"""

import asyncio
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db import session as db_session
from cmdb.db.users_repository import get_user_repository
from cmdb.models.user_model import User
from cmdb.utils.auth import ADMIN_ROLE
from cmdb.utils.security import BCRYPT_MAX_PASSWORD_BYTES, hash_password

load_dotenv()
logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_EMAIL = "admin@example.com"


async def create_admin(
    db: AsyncSession, username: str, email: str, password: str
) -> Optional[User]:
    """
    Insert an approved user holding the admin role

    Returns:
        The new user, or None when the email is already registered
    """
    users = get_user_repository(db)
    if await users.get_by_email(email) is not None:
        return None

    password_hash = await asyncio.to_thread(hash_password, password)
    user = await users.create(
        username=username,
        email=email,
        password_hash=password_hash,
        approved=True,
    )
    # Commits the user and the role row together
    await users.set_roles(user.id, [ADMIN_ROLE])
    return user


async def bootstrap_admin(username: str, email: str, password: str) -> bool:
    """Ensure the schema exists, then create the admin; False if it already existed"""
    await db_session.init_db()
    try:
        async with db_session.SessionLocal() as db:
            user = await create_admin(db, username, email, password)
    finally:
        await db_session.close_db()

    if user is None:
        logger.info(f"User {email} already exists, skipping creation")
        return False

    logger.info(f"Admin user created: {user.id} ({email})")
    return True


def main() -> None:
    """Console entry point: reads ADMIN_USERNAME, ADMIN_EMAIL and ADMIN_PASSWORD"""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    username = os.getenv("ADMIN_USERNAME") or DEFAULT_ADMIN_USERNAME
    email = os.getenv("ADMIN_EMAIL") or DEFAULT_ADMIN_EMAIL
    password = os.getenv("ADMIN_PASSWORD", "")

    if not password:
        logger.error("ADMIN_PASSWORD environment variable is required")
        sys.exit(1)
    if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        logger.error(f"ADMIN_PASSWORD must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        sys.exit(1)
    if not os.getenv("DATABASE_URL"):
        logger.error("DATABASE_URL environment variable is required")
        sys.exit(1)

    asyncio.run(bootstrap_admin(username, email, password))


if __name__ == "__main__":
    main()
