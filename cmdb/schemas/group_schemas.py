"""
Server Group Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cmdb.models.group_model import DEFAULT_GROUP_COLOR


class GroupBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    color: str = DEFAULT_GROUP_COLOR


class GroupCreate(GroupBase):
    pass


class GroupUpdate(GroupBase):
    pass


class GroupResponse(GroupBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
