"""
Repository Pattern for Database Operations
Provides clean data access layer
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.base_repository import BaseRepository, storage_errors
from cmdb.models.permission_model import UserServerPermission
from cmdb.models.ssl_certificate_model import SSLCertificate


class SSLCertificateRepository(BaseRepository[SSLCertificate]):
    """Repository for SSL Certificate operations"""

    entity_name = "Certificate"

    async def list_for_user(self, user_id: str, is_admin: bool) -> List[SSLCertificate]:
        """
        All certificates for admins, otherwise those on granted servers.

        Ordered by expiry, soonest first.
        """
        query = select(SSLCertificate)
        if not is_admin:
            granted = select(UserServerPermission.server_id).where(
                UserServerPermission.user_id == user_id
            )
            query = query.where(SSLCertificate.server_id.in_(granted))

        async with storage_errors(self.db, "list certificates"):
            result = await self.db.execute(
                query.order_by(SSLCertificate.expires_at.asc())
            )
            return list(result.scalars().all())

    async def list_all(self) -> List[SSLCertificate]:
        return await self.get_all(SSLCertificate.expires_at.asc())


def get_ssl_repository(db: AsyncSession) -> SSLCertificateRepository:
    """Get SSLCertificateRepository instance"""
    return SSLCertificateRepository(SSLCertificate, db)
