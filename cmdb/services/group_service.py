"""
Group Service - logical collections of servers
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.groups_repository import get_group_repository
from cmdb.models.group_model import ServerGroup
from cmdb.schemas.group_schemas import GroupCreate, GroupUpdate

logger = logging.getLogger(__name__)


class GroupService:
    """Service for server group operations"""

    async def list_groups(self, db: AsyncSession) -> List[ServerGroup]:
        return await get_group_repository(db).list_groups()

    async def get_group(self, db: AsyncSession, group_id: str) -> ServerGroup:
        return await get_group_repository(db).get_existing(group_id)

    async def create_group(self, db: AsyncSession, data: GroupCreate) -> ServerGroup:
        group = await get_group_repository(db).create(**data.model_dump())
        await db.commit()
        logger.info(f"Group created: {group.id} ({group.name})")
        return group

    async def update_group(
        self, db: AsyncSession, group_id: str, data: GroupUpdate
    ) -> ServerGroup:
        groups = get_group_repository(db)
        group = await groups.get_existing(group_id)
        group = await groups.update(group, **data.model_dump())
        await db.commit()
        logger.info(f"Group updated: {group_id}")
        return group

    async def delete_group(self, db: AsyncSession, group_id: str) -> None:
        await get_group_repository(db).delete_by_id(group_id)
        await db.commit()
        logger.info(f"Group deleted: {group_id}")


group_service = GroupService()
