"""
Server Group Model
"""

import uuid

from sqlalchemy import Column, DateTime, String, Text

from cmdb.db.session import Base
from cmdb.utils.datetime_utils import utcnow

DEFAULT_GROUP_COLOR = "#06b6d4"


class ServerGroup(Base):
    __tablename__ = "server_groups"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(32), nullable=False, default=DEFAULT_GROUP_COLOR)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
