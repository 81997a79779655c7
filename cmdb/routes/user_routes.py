"""
User Administration Routes
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.session import get_db
from cmdb.schemas.user_schemas import (
    RolesUpdate,
    UserDetailResponse,
    UserResponse,
    UserUpdate,
    UserWithRoles,
)
from cmdb.services.user_service import user_service
from cmdb.utils.auth import Identity, get_identity, require_admin
from cmdb.utils.exceptions import NotFoundError, PermissionDeniedError
from cmdb.utils.responses import error_response

logger = logging.getLogger(__name__)
router = APIRouter()


def _not_found():
    return error_response(status_code=status.HTTP_404_NOT_FOUND, message="User not found")


@router.get("", response_model=List[UserWithRoles])
async def list_users(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All users, newest first, each with its roles"""
    try:
        rows = await user_service.list_users(db=db)
        return [
            UserWithRoles(**UserResponse.model_validate(user).model_dump(), roles=roles)
            for user, roles in rows
        ]
    except Exception as e:
        logger.error(f"Failed to list users: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch users",
        )


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """A user and their roles; callers may read themselves, admins anyone"""
    try:
        user, roles = await user_service.get_user(db=db, identity=identity, user_id=user_id)
        return UserDetailResponse(user=UserResponse.model_validate(user), roles=roles)
    except PermissionDeniedError as e:
        return error_response(status_code=status.HTTP_403_FORBIDDEN, message=str(e))
    except NotFoundError:
        return _not_found()
    except Exception as e:
        logger.error(f"Failed to fetch user {user_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch user",
        )


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    request: UserUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """
    Partial update of display_name and approved

    Omitted fields keep their value. Only admins may send `approved`.
    """
    try:
        user = await user_service.update_user(
            db=db,
            identity=identity,
            user_id=user_id,
            display_name=request.display_name,
            approved=request.approved,
        )
        return UserResponse.model_validate(user)
    except PermissionDeniedError as e:
        logger.warning(f"User {identity.user_id} denied update of {user_id}")
        return error_response(status_code=status.HTTP_403_FORBIDDEN, message=str(e))
    except NotFoundError:
        return _not_found()
    except Exception as e:
        logger.error(f"Failed to update user {user_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to update user",
        )


@router.post("/{user_id}/approve", response_model=UserResponse)
async def approve_user(
    user_id: str,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        user = await user_service.approve_user(db=db, user_id=user_id)
        return UserResponse.model_validate(user)
    except NotFoundError:
        return _not_found()
    except Exception as e:
        logger.error(f"Failed to approve user {user_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to approve user",
        )


@router.post("/{user_id}/roles")
async def set_user_roles(
    user_id: str,
    request: RolesUpdate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Replace the user's whole role set"""
    try:
        roles = await user_service.set_roles(db=db, user_id=user_id, roles=request.roles)
        return {"user_id": user_id, "roles": roles}
    except NotFoundError:
        return _not_found()
    except Exception as e:
        logger.error(f"Failed to set roles for {user_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to update roles",
        )
