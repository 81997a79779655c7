"""
Server Group Routes
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.session import get_db
from cmdb.schemas.group_schemas import GroupCreate, GroupResponse, GroupUpdate
from cmdb.services.group_service import group_service
from cmdb.utils.auth import Identity, get_current_user_id, require_admin
from cmdb.utils.exceptions import NotFoundError
from cmdb.utils.responses import error_response, success_response

logger = logging.getLogger(__name__)
router = APIRouter()


def _not_found():
    return error_response(
        status_code=status.HTTP_404_NOT_FOUND, message="Group not found"
    )


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """All groups ordered by name"""
    try:
        return await group_service.list_groups(db=db)
    except Exception as e:
        logger.error(f"Failed to list groups: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch groups",
        )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=GroupResponse)
async def create_group(
    request: GroupCreate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        group = await group_service.create_group(db=db, data=request)
        return success_response(
            status_code=status.HTTP_201_CREATED,
            data=GroupResponse.model_validate(group),
        )
    except Exception as e:
        logger.error(f"Failed to create group: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to create group",
        )


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await group_service.get_group(db=db, group_id=group_id)
    except NotFoundError:
        return _not_found()
    except Exception as e:
        logger.error(f"Failed to fetch group {group_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch group",
        )


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    request: GroupUpdate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await group_service.update_group(db=db, group_id=group_id, data=request)
    except NotFoundError:
        return _not_found()
    except Exception as e:
        logger.error(f"Failed to update group {group_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to update group",
        )


@router.delete("/{group_id}")
async def delete_group(
    group_id: str,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Servers in the group are kept and lose their group_id"""
    try:
        await group_service.delete_group(db=db, group_id=group_id)
        return {"message": "Group deleted successfully"}
    except NotFoundError:
        return _not_found()
    except Exception as e:
        logger.error(f"Failed to delete group {group_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to delete group",
        )
