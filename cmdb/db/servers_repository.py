"""
Repository Pattern for Database Operations
Provides clean data access layer
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.base_repository import BaseRepository, storage_errors
from cmdb.models.permission_model import UserServerPermission
from cmdb.models.server_model import Server


class ServerRepository(BaseRepository[Server]):
    """Repository for Server operations"""

    entity_name = "Server"

    async def list_for_user(self, user_id: str, is_admin: bool) -> List[Server]:
        """All servers for admins, otherwise only the granted ones, by hostname"""
        query = select(Server)
        if not is_admin:
            # Duplicate grants for one pair are allowed, so filter with IN
            granted = select(UserServerPermission.server_id).where(
                UserServerPermission.user_id == user_id
            )
            query = query.where(Server.id.in_(granted))

        async with storage_errors(self.db, "list servers"):
            result = await self.db.execute(query.order_by(Server.hostname))
            return list(result.scalars().all())


def get_server_repository(db: AsyncSession) -> ServerRepository:
    """Get ServerRepository instance"""
    return ServerRepository(Server, db)
