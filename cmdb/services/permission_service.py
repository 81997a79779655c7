"""
Permission Service - per-server grants for non-admin users
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.permissions_repository import get_permission_repository
from cmdb.db.servers_repository import get_server_repository
from cmdb.db.users_repository import get_user_repository
from cmdb.models.permission_model import UserServerPermission

logger = logging.getLogger(__name__)


class PermissionService:
    """Service for grant operations"""

    async def list_permissions(self, db: AsyncSession) -> List[UserServerPermission]:
        return await get_permission_repository(db).list_permissions()

    async def create_permission(
        self, db: AsyncSession, user_id: str, server_id: str
    ) -> UserServerPermission:
        """
        Grant user_id read access to server_id

        Repeated grants for the same pair are stored as separate rows.

        Raises:
            NotFoundError: unknown user or server
        """
        await get_user_repository(db).get_existing(user_id)
        await get_server_repository(db).get_existing(server_id)

        permission = await get_permission_repository(db).create(
            user_id=user_id, server_id=server_id
        )
        await db.commit()
        logger.info(f"Granted user {user_id} access to server {server_id}")
        return permission

    async def delete_permission(self, db: AsyncSession, permission_id: str) -> None:
        await get_permission_repository(db).delete_by_id(permission_id)
        await db.commit()
        logger.info(f"Permission deleted: {permission_id}")


permission_service = PermissionService()
