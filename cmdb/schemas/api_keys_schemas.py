"""
Pydantic Schemas for Request/Response Validation
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class APIKeyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    expires_at: Optional[datetime] = Field(
        default=None, description="Omit for a key that never expires"
    )


class APIKeyInfo(BaseModel):
    """Information about an API key (without the actual key value or its hash)"""

    id: str
    name: str
    key_prefix: str = Field(..., description="First 12 characters of the key")
    created_by: str
    is_active: bool
    expires_at: Optional[datetime] = None
    last_used_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class APIKeyCreateResponse(BaseModel):
    """The raw key is only ever returned here"""

    key: str
    key_prefix: str
    record: APIKeyInfo


class APIKeyStatusRequest(BaseModel):
    id: str = Field(..., min_length=1)
    active: bool


class APIKeyDeleteRequest(BaseModel):
    id: str = Field(..., min_length=1)
