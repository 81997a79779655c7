"""
Alertmanager v1 payload schemas
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class AlertmanagerAlert(BaseModel):
    """One element of the array POSTed to /api/v1/alerts"""

    labels: Dict[str, str]
    annotations: Dict[str, str]
    startsAt: datetime
    endsAt: Optional[datetime] = None


class SendAlertsRequest(BaseModel):
    alertmanager_url: Optional[str] = Field(
        default=None,
        description="Alertmanager base URL; falls back to ALERTMANAGER_URL",
    )


class SendAlertsResponse(BaseModel):
    message: str
    sent: int
    alerts: List[AlertmanagerAlert] = Field(default_factory=list)
