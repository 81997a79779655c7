"""
User Service - account listing, profile updates, approval and roles
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.users_repository import get_user_repository
from cmdb.models.user_model import User
from cmdb.utils.auth import Identity
from cmdb.utils.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)


class UserService:
    """Service for user administration"""

    async def list_users(self, db: AsyncSession) -> List[Tuple[User, List[str]]]:
        """All users, newest first, each with its role names"""
        users = get_user_repository(db)
        result = []
        for user in await users.list_users():
            result.append((user, await users.get_roles(user.id)))
        return result

    async def get_user(
        self, db: AsyncSession, identity: Identity, user_id: str
    ) -> Tuple[User, List[str]]:
        """
        Raises:
            PermissionDeniedError: caller is neither the user nor an admin
            NotFoundError: unknown user
        """
        self._ensure_self_or_admin(identity, user_id)
        users = get_user_repository(db)
        user = await users.get_existing(user_id)
        return user, await users.get_roles(user_id)

    async def update_user(
        self,
        db: AsyncSession,
        identity: Identity,
        user_id: str,
        display_name: Optional[str] = None,
        approved: Optional[bool] = None,
    ) -> User:
        """
        Partial profile update; only admins may change approval

        Raises:
            PermissionDeniedError: not self/admin, or non-admin sent approved
            NotFoundError: unknown user
        """
        self._ensure_self_or_admin(identity, user_id)
        if approved is not None and not identity.is_admin:
            raise PermissionDeniedError("Only admins can change approval")

        users = get_user_repository(db)
        await users.update_profile(user_id, display_name=display_name, approved=approved)
        await db.commit()

        logger.info(f"User {user_id} updated by {identity.user_id}")
        return await users.get_existing(user_id)

    async def approve_user(self, db: AsyncSession, user_id: str) -> User:
        users = get_user_repository(db)
        await users.update_profile(user_id, approved=True)
        await db.commit()

        logger.info(f"User {user_id} approved")
        return await users.get_existing(user_id)

    async def set_roles(
        self, db: AsyncSession, user_id: str, roles: List[str]
    ) -> List[str]:
        """Replace the user's role set atomically and return it"""
        users = get_user_repository(db)
        await users.get_existing(user_id)

        # Duplicates collapse, order of first appearance kept
        unique_roles = list(dict.fromkeys(roles))
        await users.set_roles(user_id, unique_roles)

        logger.info(f"Roles for user {user_id} set to {unique_roles}")
        return await users.get_roles(user_id)

    @staticmethod
    def _ensure_self_or_admin(identity: Identity, user_id: str) -> None:
        if identity.user_id != user_id and not identity.is_admin:
            raise PermissionDeniedError()


user_service = UserService()
