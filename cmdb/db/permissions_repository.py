"""
Repository Pattern for Database Operations
Provides clean data access layer
"""

from typing import List

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.base_repository import BaseRepository, storage_errors
from cmdb.models.permission_model import UserServerPermission


class PermissionRepository(BaseRepository[UserServerPermission]):
    """Repository for per-server grants"""

    entity_name = "Permission"

    async def list_permissions(self) -> List[UserServerPermission]:
        """All grants, newest first"""
        return await self.get_all(UserServerPermission.created_at.desc())

    async def has_access(self, user_id: str, server_id: str) -> bool:
        """True when at least one grant exists for the pair"""
        async with storage_errors(self.db, "check permission"):
            result = await self.db.execute(
                select(
                    exists().where(
                        UserServerPermission.user_id == user_id,
                        UserServerPermission.server_id == server_id,
                    )
                )
            )
            return bool(result.scalar())


def get_permission_repository(db: AsyncSession) -> PermissionRepository:
    """Get PermissionRepository instance"""
    return PermissionRepository(UserServerPermission, db)
