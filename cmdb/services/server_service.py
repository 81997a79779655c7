"""
Server Service - inventory of managed hosts
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.servers_repository import get_server_repository
from cmdb.models.server_model import Server
from cmdb.schemas.server_schemas import ServerCreate, ServerUpdate
from cmdb.utils.auth import Identity, ensure_server_access

logger = logging.getLogger(__name__)


class ServerService:
    """Service for server operations"""

    async def list_servers(self, db: AsyncSession, identity: Identity) -> List[Server]:
        return await get_server_repository(db).list_for_user(
            identity.user_id, identity.is_admin
        )

    async def get_server(
        self, db: AsyncSession, identity: Identity, server_id: str
    ) -> Server:
        """
        The grant is checked first, so non-admins get 403 for unknown ids too

        Raises:
            PermissionDeniedError: non-admin without a grant
            NotFoundError: unknown server
        """
        await ensure_server_access(db, identity, server_id)
        return await get_server_repository(db).get_existing(server_id)

    async def create_server(self, db: AsyncSession, data: ServerCreate) -> Server:
        server = await get_server_repository(db).create(**data.model_dump())
        await db.commit()
        logger.info(f"Server created: {server.id} ({server.hostname})")
        return server

    async def update_server(
        self, db: AsyncSession, server_id: str, data: ServerUpdate
    ) -> Server:
        """Replace every mutable field with the supplied values"""
        servers = get_server_repository(db)
        server = await servers.get_existing(server_id)
        server = await servers.update(server, **data.model_dump())
        await db.commit()
        logger.info(f"Server updated: {server_id}")
        return server

    async def delete_server(self, db: AsyncSession, server_id: str) -> None:
        await get_server_repository(db).delete_by_id(server_id)
        await db.commit()
        logger.info(f"Server deleted: {server_id}")


server_service = ServerService()
