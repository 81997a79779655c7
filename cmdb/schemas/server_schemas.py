"""
Server Schemas
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServerBase(BaseModel):
    hostname: str = Field(..., min_length=1)
    ip_address: str = Field(..., min_length=1)
    ssh_port: int = Field(default=22, ge=1, le=65535)
    ssh_username: Optional[str] = None
    ssh_key_path: Optional[str] = None
    prometheus_url: Optional[str] = None
    status: str = "unknown"
    group_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class ServerCreate(ServerBase):
    pass


class ServerUpdate(ServerBase):
    """Full replacement of the mutable fields"""

    pass


class ServerResponse(ServerBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
