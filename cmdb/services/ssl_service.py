"""
SSL Certificate Service - certificate inventory
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.servers_repository import get_server_repository
from cmdb.db.ssl_repository import get_ssl_repository
from cmdb.models.ssl_certificate_model import SSLCertificate
from cmdb.schemas.ssl_schemas import SSLCertificateCreate, SSLCertificateUpdate
from cmdb.utils.auth import Identity, ensure_server_access
from cmdb.utils.exceptions import NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


class SSLCertificateService:
    """Service for certificate operations"""

    async def list_certificates(
        self, db: AsyncSession, identity: Identity
    ) -> List[SSLCertificate]:
        return await get_ssl_repository(db).list_for_user(
            identity.user_id, identity.is_admin
        )

    async def get_certificate(
        self, db: AsyncSession, identity: Identity, certificate_id: str
    ) -> SSLCertificate:
        """
        Non-admins get 403 for unknown ids, same as for ungranted ones

        Raises:
            NotFoundError: unknown certificate (admins only)
            PermissionDeniedError: no grant on the certificate's server
        """
        certificate = await get_ssl_repository(db).get_by_id(certificate_id)
        if certificate is None:
            if not identity.is_admin:
                raise PermissionDeniedError()
            raise NotFoundError("Certificate not found")
        await ensure_server_access(db, identity, certificate.server_id)
        return certificate

    async def create_certificate(
        self, db: AsyncSession, data: SSLCertificateCreate
    ) -> SSLCertificate:
        await get_server_repository(db).get_existing(data.server_id)
        certificate = await get_ssl_repository(db).create(**data.model_dump())
        await db.commit()
        logger.info(f"Certificate created: {certificate.id} ({certificate.domain})")
        return certificate

    async def update_certificate(
        self, db: AsyncSession, certificate_id: str, data: SSLCertificateUpdate
    ) -> SSLCertificate:
        certificates = get_ssl_repository(db)
        certificate = await certificates.get_existing(certificate_id)
        if data.server_id != certificate.server_id:
            await get_server_repository(db).get_existing(data.server_id)
        certificate = await certificates.update(certificate, **data.model_dump())
        await db.commit()
        logger.info(f"Certificate updated: {certificate_id}")
        return certificate

    async def delete_certificate(self, db: AsyncSession, certificate_id: str) -> None:
        await get_ssl_repository(db).delete_by_id(certificate_id)
        await db.commit()
        logger.info(f"Certificate deleted: {certificate_id}")


ssl_service = SSLCertificateService()
