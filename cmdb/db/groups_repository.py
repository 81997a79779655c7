"""
Repository Pattern for Database Operations
Provides clean data access layer
"""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.base_repository import BaseRepository
from cmdb.models.group_model import ServerGroup


class GroupRepository(BaseRepository[ServerGroup]):
    """Repository for Server Group operations"""

    entity_name = "Group"

    async def list_groups(self) -> List[ServerGroup]:
        return await self.get_all(ServerGroup.name)


def get_group_repository(db: AsyncSession) -> GroupRepository:
    """Get GroupRepository instance"""
    return GroupRepository(ServerGroup, db)
