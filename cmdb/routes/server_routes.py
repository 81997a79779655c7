"""
Server Inventory Routes
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.session import get_db
from cmdb.schemas.server_schemas import ServerCreate, ServerResponse, ServerUpdate
from cmdb.services.server_service import server_service
from cmdb.utils.auth import Identity, get_identity, require_admin
from cmdb.utils.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from cmdb.utils.responses import error_response, success_response

logger = logging.getLogger(__name__)
router = APIRouter()


def _not_found():
    return error_response(
        status_code=status.HTTP_404_NOT_FOUND, message="Server not found"
    )


@router.get("", response_model=List[ServerResponse])
async def list_servers(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Every server for admins, granted servers for everyone else"""
    try:
        return await server_service.list_servers(db=db, identity=identity)
    except Exception as e:
        logger.error(f"Failed to list servers: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch servers",
        )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ServerResponse)
async def create_server(
    request: ServerCreate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Register a server

    Defaults: ssh_port 22, status "unknown", no tags.
    """
    try:
        server = await server_service.create_server(db=db, data=request)
        return success_response(
            status_code=status.HTTP_201_CREATED,
            data=ServerResponse.model_validate(server),
        )
    except ConflictError as e:
        logger.warning(f"Server creation rejected: {str(e)}")
        return error_response(
            status_code=status.HTTP_400_BAD_REQUEST, message="Invalid group_id"
        )
    except Exception as e:
        logger.error(f"Failed to create server: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to create server",
        )


@router.get("/{server_id}", response_model=ServerResponse)
async def get_server(
    server_id: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await server_service.get_server(
            db=db, identity=identity, server_id=server_id
        )
    except NotFoundError:
        return _not_found()
    except PermissionDeniedError as e:
        return error_response(status_code=status.HTTP_403_FORBIDDEN, message=str(e))
    except Exception as e:
        logger.error(f"Failed to fetch server {server_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch server",
        )


@router.put("/{server_id}", response_model=ServerResponse)
async def update_server(
    server_id: str,
    request: ServerUpdate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Full replacement: fields left out fall back to their defaults"""
    try:
        return await server_service.update_server(
            db=db, server_id=server_id, data=request
        )
    except NotFoundError:
        return _not_found()
    except ConflictError as e:
        logger.warning(f"Server update rejected: {str(e)}")
        return error_response(
            status_code=status.HTTP_400_BAD_REQUEST, message="Invalid group_id"
        )
    except Exception as e:
        logger.error(f"Failed to update server {server_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to update server",
        )


@router.delete("/{server_id}")
async def delete_server(
    server_id: str,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        await server_service.delete_server(db=db, server_id=server_id)
        return {"message": "Server deleted successfully"}
    except NotFoundError:
        return _not_found()
    except Exception as e:
        logger.error(f"Failed to delete server {server_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to delete server",
        )
