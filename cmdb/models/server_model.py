"""
Server Model
"""

import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String

from cmdb.db.session import Base
from cmdb.utils.datetime_utils import utcnow


class Server(Base):
    __tablename__ = "servers"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    hostname = Column(String, nullable=False, index=True)
    ip_address = Column(String(45), nullable=False)
    ssh_port = Column(Integer, nullable=False, default=22)
    ssh_username = Column(String, nullable=True)
    ssh_key_path = Column(String, nullable=True)
    prometheus_url = Column(String, nullable=True)
    status = Column(String(32), nullable=False, default="unknown")
    group_id = Column(
        String, ForeignKey("server_groups.id", ondelete="SET NULL"), nullable=True
    )
    # Ordered list of free-form labels
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
