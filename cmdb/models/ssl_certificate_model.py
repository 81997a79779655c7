"""
SSL Certificate Model
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String

from cmdb.db.session import Base
from cmdb.utils.datetime_utils import utcnow


class SSLCertificate(Base):
    __tablename__ = "ssl_certificates"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    server_id = Column(
        String,
        ForeignKey("servers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    domain = Column(String, nullable=False)
    issuer = Column(String, nullable=True)
    issued_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String(32), nullable=False, default="active")
    auto_renew = Column(Boolean, nullable=False, default=False)
    last_checked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
