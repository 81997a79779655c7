"""
Server Permission (grant) Routes
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.session import get_db
from cmdb.schemas.permission_schemas import PermissionCreate, PermissionResponse
from cmdb.services.permission_service import permission_service
from cmdb.utils.auth import Identity, require_admin
from cmdb.utils.exceptions import NotFoundError
from cmdb.utils.responses import error_response, success_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[PermissionResponse])
async def list_permissions(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All grants, newest first"""
    try:
        return await permission_service.list_permissions(db=db)
    except Exception as e:
        logger.error(f"Failed to list permissions: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch permissions",
        )


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=PermissionResponse
)
async def create_permission(
    request: PermissionCreate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Grant a user read access to a server"""
    try:
        permission = await permission_service.create_permission(
            db=db, user_id=request.user_id, server_id=request.server_id
        )
        return success_response(
            status_code=status.HTTP_201_CREATED,
            data=PermissionResponse.model_validate(permission),
        )
    except NotFoundError as e:
        return error_response(status_code=status.HTTP_404_NOT_FOUND, message=str(e))
    except Exception as e:
        logger.error(f"Failed to create permission: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to create permission",
        )


@router.delete("/{permission_id}")
async def delete_permission(
    permission_id: str,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        await permission_service.delete_permission(db=db, permission_id=permission_id)
        return {"message": "Permission deleted successfully"}
    except NotFoundError:
        return error_response(
            status_code=status.HTTP_404_NOT_FOUND, message="Permission not found"
        )
    except Exception as e:
        logger.error(
            f"Failed to delete permission {permission_id}: {str(e)}", exc_info=True
        )
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to delete permission",
        )
