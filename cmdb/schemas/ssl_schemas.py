"""
SSL Certificate Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SSLCertificateBase(BaseModel):
    server_id: str = Field(..., min_length=1)
    domain: str = Field(..., min_length=1)
    issuer: Optional[str] = None
    issued_at: datetime
    expires_at: datetime
    status: str = "active"
    auto_renew: bool = False
    last_checked_at: Optional[datetime] = None


class SSLCertificateCreate(SSLCertificateBase):
    pass


class SSLCertificateUpdate(SSLCertificateBase):
    pass


class SSLCertificateResponse(SSLCertificateBase):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
