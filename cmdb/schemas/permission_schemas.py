"""
Server Permission Schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PermissionCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    server_id: str = Field(..., min_length=1)


class PermissionResponse(PermissionCreate):
    id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
