"""
Authentication Routes - email/password signup and login
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.session import get_db
from cmdb.routes.docs.auth_routes_docs import (
    login_responses,
    me_responses,
    signup_responses,
)
from cmdb.schemas.auth_schemas import (
    AuthResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    PendingSignupResponse,
    SignupRequest,
)
from cmdb.schemas.user_schemas import UserResponse
from cmdb.services.auth_service import auth_service
from cmdb.utils.auth import get_current_user_id
from cmdb.utils.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PendingApprovalError,
)
from cmdb.utils.responses import error_response, success_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED, responses=signup_responses)
async def signup(request: SignupRequest, db: AsyncSession = Depends(get_db)):
    """
    Register a new account

    `username` defaults to the email. Unless SIGNUP_AUTO_APPROVE=false the
    account is approved right away and a token is returned.
    """
    try:
        user, token = await auth_service.signup(
            db=db,
            email=request.email,
            password=request.password,
            username=request.username,
        )
    except ConflictError as e:
        logger.warning(f"Signup rejected: {str(e)}")
        return error_response(
            status_code=status.HTTP_409_CONFLICT,
            message="Email already registered",
        )
    except Exception as e:
        logger.error(f"Failed to create user: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to create user",
        )

    if token is None:
        body = PendingSignupResponse(
            user=UserResponse.model_validate(user),
            message="Your account is pending approval",
        )
    else:
        body = AuthResponse(user=UserResponse.model_validate(user), token=token)
    return success_response(status_code=status.HTTP_201_CREATED, data=body)


@router.post("/login", response_model=LoginResponse, responses=login_responses)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """
    Exchange email and password for a JWT token

    **Response:**
    ```json
    {
        "user": {"id": "...", "email": "ops@example.com", ...},
        "token": "eyJhbGciOiJIUzI1NiIs...",
        "roles": ["admin"]
    }
    ```
    """
    try:
        user, token, roles = await auth_service.login(
            db=db, email=request.email, password=request.password
        )
        return LoginResponse(
            user=UserResponse.model_validate(user), token=token, roles=roles
        )
    except InvalidCredentialsError as e:
        return error_response(
            status_code=status.HTTP_401_UNAUTHORIZED, message=str(e)
        )
    except PendingApprovalError as e:
        return error_response(status_code=status.HTTP_403_FORBIDDEN, message=str(e))
    except Exception as e:
        logger.error(f"Login failed: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to log in",
        )


@router.get("/me", response_model=MeResponse, responses=me_responses)
async def get_me(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Profile and roles of the token holder"""
    try:
        user, roles = await auth_service.get_me(db=db, user_id=user_id)
        return MeResponse(user=UserResponse.model_validate(user), roles=roles)
    except NotFoundError:
        return error_response(
            status_code=status.HTTP_404_NOT_FOUND, message="User not found"
        )
    except Exception as e:
        logger.error(f"Failed to load user {user_id}: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch user",
        )


@router.post("/logout")
async def logout(user_id: str = Depends(get_current_user_id)):
    """
    Tokens are stateless; the client discards its copy.
    """
    logger.info(f"User {user_id} logged out")
    return {"message": "Logged out successfully"}
