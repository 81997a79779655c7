"""
API Key Service - Business Logic for API Key Management
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.api_keys_repository import get_api_key_repository
from cmdb.schemas.api_keys_schemas import APIKeyCreateResponse, APIKeyInfo
from cmdb.utils.datetime_utils import ensure_utc, utcnow
from cmdb.utils.exceptions import InvalidAPIKeyError, StorageError
from cmdb.utils.security import (
    api_key_matches,
    api_key_prefix,
    generate_api_key,
    hash_api_key,
)

logger = logging.getLogger(__name__)


class APIKeyService:
    """Service for API key operations"""

    async def create_api_key(
        self,
        db: AsyncSession,
        created_by: str,
        name: str,
        expires_at: Optional[datetime] = None,
    ) -> APIKeyCreateResponse:
        """
        Create a new API key

        Args:
            db: Database session
            created_by: ID of the admin creating the key
            name: Key name
            expires_at: Optional expiry instant

        Returns:
            APIKeyCreateResponse carrying the raw key; it is never shown again

        Raises:
            StorageError: If the key cannot be stored
        """
        api_key = generate_api_key()

        record = await get_api_key_repository(db).create(
            name=name,
            key_hash=hash_api_key(api_key),
            key_prefix=api_key_prefix(api_key),
            created_by=created_by,
            expires_at=ensure_utc(expires_at),
            is_active=True,
        )
        await db.commit()

        logger.info(f"API key {record.id} created by {created_by}: {name}")
        return APIKeyCreateResponse(
            key=api_key,
            key_prefix=record.key_prefix,
            record=APIKeyInfo.model_validate(record),
        )

    async def list_api_keys(self, db: AsyncSession) -> List[APIKeyInfo]:
        """All keys, newest first, without hashes"""
        records = await get_api_key_repository(db).list_keys()
        return [APIKeyInfo.model_validate(record) for record in records]

    async def set_status(self, db: AsyncSession, key_id: str, active: bool) -> None:
        """
        Raises:
            NotFoundError: If no key has this id
        """
        await get_api_key_repository(db).set_active(key_id, active)
        await db.commit()
        logger.info(f"API key {key_id} set active={active}")

    async def delete_api_key(self, db: AsyncSession, key_id: str) -> None:
        await get_api_key_repository(db).delete_by_id(key_id)
        await db.commit()
        logger.info(f"API key deleted: {key_id}")

    async def verify_api_key(
        self, db: AsyncSession, api_key: Optional[str]
    ) -> APIKeyInfo:
        """
        Authenticate a presented key

        Missing, unknown, inactive and expired keys all raise the same
        InvalidAPIKeyError. A successful check stamps last_used_at; failing
        to write that stamp is logged and does not fail the check.

        Raises:
            InvalidAPIKeyError: If the key is not usable
            StorageError: If the lookup itself fails
        """
        if not api_key:
            raise InvalidAPIKeyError()

        keys = get_api_key_repository(db)
        key_hash = hash_api_key(api_key)
        record = await keys.get_by_key_hash(key_hash)

        if record is None or not api_key_matches(api_key, record.key_hash):
            raise InvalidAPIKeyError()

        now = utcnow()
        expires_at = ensure_utc(record.expires_at)
        if not record.is_active or (expires_at is not None and expires_at <= now):
            logger.warning(f"Rejected unusable API key {record.key_prefix}")
            raise InvalidAPIKeyError()

        info = APIKeyInfo.model_validate(record)

        try:
            await keys.touch(record.id, now)
            await db.commit()
        except (StorageError, SQLAlchemyError) as e:
            await db.rollback()
            logger.warning(f"Failed to update last_used_at for key {record.id}: {e}")

        logger.debug(f"API key {record.key_prefix} verified")
        return info


api_key_service = APIKeyService()
