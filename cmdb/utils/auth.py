"""
Authentication Dependencies for FastAPI
JWT bearer tokens with Swagger UI integration, role and grant checks
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.permissions_repository import get_permission_repository
from cmdb.db.session import get_db
from cmdb.db.users_repository import get_user_repository
from cmdb.utils.exceptions import InvalidTokenError, PermissionDeniedError
from cmdb.utils.security import decode_jwt_token

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

bearer_scheme = HTTPBearer(
    auto_error=False,
    scheme_name="JWT Bearer Token",
    description="Enter the token returned by /api/auth/login",
)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as seen by the authorization checks"""

    user_id: str
    is_admin: bool


def user_id_from_token(token: Optional[str]) -> str:
    """
    Verify a bearer token and return the user id it carries.

    Raises:
        InvalidTokenError: missing or failing verification
    """
    if not token:
        raise InvalidTokenError()
    return decode_jwt_token(token)["user_id"]


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Resolve the caller from the Authorization header and pin it on request.state"""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = user_id_from_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning(f"Rejected bearer token on {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user_id = user_id
    logger.debug(f"Authenticated user {user_id} via JWT")
    return user_id


async def resolve_identity(db: AsyncSession, user_id: str) -> Identity:
    is_admin = await get_user_repository(db).has_role(user_id, ADMIN_ROLE)
    return Identity(user_id=user_id, is_admin=is_admin)


async def get_identity(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    return await resolve_identity(db, user_id)


async def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    """Dependency gating admin-only routes"""
    if not identity.is_admin:
        logger.warning(f"User {identity.user_id} denied admin access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return identity


async def ensure_server_access(
    db: AsyncSession, identity: Identity, server_id: str
) -> None:
    """
    Admins see every server; everyone else needs at least one grant.

    Raises:
        PermissionDeniedError: no grant for the pair
    """
    if identity.is_admin:
        return
    if not await get_permission_repository(db).has_access(identity.user_id, server_id):
        raise PermissionDeniedError()
