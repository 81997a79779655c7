"""
Repository Pattern for Database Operations
Provides clean data access layer
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.base_repository import BaseRepository, storage_errors
from cmdb.models.api_key_model import APIKey
from cmdb.utils.exceptions import NotFoundError


class APIKeyRepository(BaseRepository[APIKey]):
    """Repository for API Key operations"""

    entity_name = "API key"

    async def get_by_key_hash(self, key_hash: str) -> Optional[APIKey]:
        """Get API key by hash"""
        async with storage_errors(self.db, "load api key"):
            result = await self.db.execute(
                select(APIKey).where(APIKey.key_hash == key_hash)
            )
            return result.scalar_one_or_none()

    async def list_keys(self) -> List[APIKey]:
        """All keys, newest first"""
        return await self.get_all(APIKey.created_at.desc())

    async def set_active(self, key_id: str, active: bool) -> None:
        async with storage_errors(self.db, "update api key"):
            result = await self.db.execute(
                update(APIKey)
                .where(APIKey.id == key_id)
                .values(is_active=active)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise NotFoundError("API key not found")

    async def touch(self, key_id: str, used_at: datetime) -> None:
        """Record a successful use"""
        async with storage_errors(self.db, "touch api key"):
            await self.db.execute(
                update(APIKey)
                .where(APIKey.id == key_id)
                .values(last_used_at=used_at)
                .execution_options(synchronize_session=False)
            )


def get_api_key_repository(db: AsyncSession) -> APIKeyRepository:
    """Get APIKeyRepository instance"""
    return APIKeyRepository(APIKey, db)
