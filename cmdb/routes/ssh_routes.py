"""
SSH Terminal WebSocket Route
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.servers_repository import get_server_repository
from cmdb.db.session import get_db
from cmdb.services.ssh_bridge_service import SSHBridge
from cmdb.utils.auth import ensure_server_access, resolve_identity, user_id_from_token
from cmdb.utils.exceptions import InvalidTokenError, PermissionDeniedError

logger = logging.getLogger(__name__)
router = APIRouter()

DENIAL_RESPONSE_EXTENSION = "websocket.http.response"


async def deny(websocket: WebSocket, status_code: int, message: str) -> None:
    """
    Refuse the handshake before accepting it.

    Sends a real HTTP response when the server supports the denial response
    extension; otherwise closes with 1008, which the server reports as 403.
    """
    logger.warning(
        f"SSH WebSocket denied ({status_code}) for {websocket.url.path}: {message}"
    )
    if DENIAL_RESPONSE_EXTENSION in websocket.scope.get("extensions", {}):
        await websocket.send_denial_response(
            JSONResponse(status_code=status_code, content={"error": message})
        )
    else:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)


@router.websocket("/ssh/{server_id}")
async def ssh_terminal(
    websocket: WebSocket,
    server_id: str,
    token: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Interactive shell on a managed server

    Authorization is checked once, at the handshake. A grant revoked later
    does not end a running session.
    """
    try:
        user_id = user_id_from_token(token)
    except InvalidTokenError:
        message = "Invalid token" if token else "Token required"
        await deny(websocket, status.HTTP_401_UNAUTHORIZED, message)
        return

    # Grant before lookup: non-admins cannot probe for server ids
    try:
        identity = await resolve_identity(db, user_id)
        await ensure_server_access(db, identity, server_id)
    except PermissionDeniedError as e:
        await deny(websocket, status.HTTP_403_FORBIDDEN, str(e))
        return

    server = await get_server_repository(db).get_by_id(server_id)
    if server is None:
        await deny(websocket, status.HTTP_404_NOT_FOUND, "Server not found")
        return

    # The session lives for hours; give its connection back to the pool
    await db.close()

    await websocket.accept()
    logger.info(f"User {user_id} opened SSH terminal on server {server_id}")
    await SSHBridge(websocket, server).run()
