"""
User Server Permission Model

A grant letting one user read one server. The (user_id, server_id) pair is
not unique.
"""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String

from cmdb.db.session import Base
from cmdb.utils.datetime_utils import utcnow


class UserServerPermission(Base):
    __tablename__ = "user_server_permissions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    server_id = Column(
        String,
        ForeignKey("servers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
