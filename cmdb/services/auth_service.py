"""
Authentication Service - signup, password login and session identity
"""

import asyncio
import logging
import os
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.users_repository import get_user_repository
from cmdb.models.user_model import User
from cmdb.utils.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    PendingApprovalError,
)
from cmdb.utils.security import create_jwt_token, hash_password, verify_password

load_dotenv()
logger = logging.getLogger(__name__)

# Stands in for a missing user so unknown emails cost one bcrypt check too
_DUMMY_PASSWORD_HASH = "$2b$12$C6UzMDM.H6dfI/f/IKcEeO5Q7S3u0Mb0G5mC3JtH1l7rV8rV1w3W2"


class AuthService:
    """Service for handling authentication operations"""

    def __init__(self):
        self.auto_approve = (
            os.getenv("SIGNUP_AUTO_APPROVE", "true").strip().lower() != "false"
        )
        if not self.auto_approve:
            logger.info("New accounts require admin approval before login")

    async def signup(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> Tuple[User, Optional[str]]:
        """
        Register a new account

        Args:
            db: Database session
            email: Unique login email
            password: Plain password, hashed with bcrypt
            username: Display handle, defaults to the email

        Returns:
            (user, token); token is None when the account awaits approval

        Raises:
            ConflictError: If the email is already registered
        """
        users = get_user_repository(db)

        if await users.get_by_email(email) is not None:
            raise ConflictError("Email already registered")

        password_hash = await asyncio.to_thread(hash_password, password)

        # A concurrent signup for the same email loses on the unique index
        user = await users.create(
            username=username or email,
            email=email,
            password_hash=password_hash,
            approved=False,
        )
        if self.auto_approve:
            await users.update_profile(user.id, approved=True)
        await db.commit()

        user = await users.get_existing(user.id)
        logger.info(f"Created new user: {user.id}")

        if not user.approved:
            return user, None
        return user, create_jwt_token(user.id, user.email)

    async def login(
        self, db: AsyncSession, email: str, password: str
    ) -> Tuple[User, str, List[str]]:
        """
        Verify credentials and issue a token

        Raises:
            InvalidCredentialsError: unknown email or wrong password
            PendingApprovalError: correct password, account not approved
        """
        users = get_user_repository(db)
        user = await users.get_by_email(email)

        password_hash = user.password_hash if user else _DUMMY_PASSWORD_HASH
        password_ok = await asyncio.to_thread(verify_password, password, password_hash)

        if user is None or not password_ok:
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError()

        if not user.approved:
            logger.info(f"Login refused for unapproved user {user.id}")
            raise PendingApprovalError()

        roles = await users.get_roles(user.id)
        token = create_jwt_token(user.id, user.email)

        logger.info(f"User logged in: {user.id}")
        return user, token, roles

    async def get_me(self, db: AsyncSession, user_id: str) -> Tuple[User, List[str]]:
        """
        Load the caller's own profile

        Raises:
            NotFoundError: the token outlived the account
        """
        users = get_user_repository(db)
        user = await users.get_existing(user_id)
        roles = await users.get_roles(user_id)
        return user, roles


auth_service = AuthService()
