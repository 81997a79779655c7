"""
Authentication Schemas
"""

from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field

from cmdb.schemas.user_schemas import UserResponse
from cmdb.utils.security import BCRYPT_MAX_PASSWORD_BYTES


def _check_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
    return value


Password = Annotated[str, Field(min_length=1), AfterValidator(_check_password_length)]


class SignupRequest(BaseModel):
    """Account registration"""

    email: str = Field(..., min_length=1)
    password: Password
    username: Optional[str] = Field(
        default=None, description="Defaults to the email address"
    )


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: Password


class AuthResponse(BaseModel):
    """Signup / login result"""

    user: UserResponse
    token: str = Field(..., description="JWT bearer token, valid for 24 hours")


class LoginResponse(AuthResponse):
    roles: List[str]


class PendingSignupResponse(BaseModel):
    """Signup result when accounts need admin approval"""

    user: UserResponse
    message: str


class MeResponse(BaseModel):
    user: UserResponse
    roles: List[str]
