"""
User Schemas

password_hash is never part of any response model.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    display_name: Optional[str] = None
    approved: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserWithRoles(UserResponse):
    roles: List[str] = Field(default_factory=list)


class UserDetailResponse(BaseModel):
    user: UserResponse
    roles: List[str]


class UserUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged"""

    display_name: Optional[str] = None
    approved: Optional[bool] = None


class RolesUpdate(BaseModel):
    roles: List[str]
