"""
API Key Management Routes (admin only)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.session import get_db
from cmdb.routes.docs.api_key_routes_docs import (
    api_key_status_responses,
    create_api_key_responses,
    delete_api_key_responses,
    list_api_keys_responses,
)
from cmdb.schemas.api_keys_schemas import (
    APIKeyCreate,
    APIKeyCreateResponse,
    APIKeyDeleteRequest,
    APIKeyInfo,
    APIKeyStatusRequest,
)
from cmdb.services.api_keys_service import api_key_service
from cmdb.utils.auth import Identity, require_admin
from cmdb.utils.exceptions import NotFoundError
from cmdb.utils.responses import error_response, success_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[APIKeyInfo], responses=list_api_keys_responses)
async def list_api_keys(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    All API keys, newest first
    Returns key metadata (NOT the actual keys or their hashes)
    """
    try:
        return await api_key_service.list_api_keys(db=db)
    except Exception as e:
        logger.error(f"Failed to list API keys: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch API keys",
        )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=APIKeyCreateResponse,
    responses=create_api_key_responses,
)
async def create_api_key(
    request: APIKeyCreate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new API key for the ingest endpoint

    The raw key is in the response exactly once; store it now.
    Omit `expires_at` for a key that never expires.
    """
    try:
        result = await api_key_service.create_api_key(
            db=db,
            created_by=identity.user_id,
            name=request.name,
            expires_at=request.expires_at,
        )
        return success_response(status_code=status.HTTP_201_CREATED, data=result)
    except Exception as e:
        logger.error(
            f"Failed to create API key for user {identity.user_id}: {str(e)}",
            exc_info=True,
        )
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to create API key",
        )


@router.post("/status", responses=api_key_status_responses)
async def set_api_key_status(
    request: APIKeyStatusRequest,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Activate or deactivate a key"""
    try:
        await api_key_service.set_status(db=db, key_id=request.id, active=request.active)
        return {"message": "updated"}
    except NotFoundError:
        return error_response(
            status_code=status.HTTP_404_NOT_FOUND, message="API key not found"
        )
    except Exception as e:
        logger.error(f"Failed to update API key {request.id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to update API key",
        )


@router.post("/delete", responses=delete_api_key_responses)
async def delete_api_key(
    request: APIKeyDeleteRequest,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        await api_key_service.delete_api_key(db=db, key_id=request.id)
        return {"message": "deleted"}
    except NotFoundError:
        return error_response(
            status_code=status.HTTP_404_NOT_FOUND, message="API key not found"
        )
    except Exception as e:
        logger.error(f"Failed to delete API key {request.id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to delete API key",
        )
