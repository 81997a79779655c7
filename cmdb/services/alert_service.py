"""
Alert Service - SSL certificate expiry alerts for Prometheus Alertmanager
"""

import logging
import os
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import httpx
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.ssl_repository import get_ssl_repository
from cmdb.models.ssl_certificate_model import SSLCertificate
from cmdb.schemas.alert_schemas import AlertmanagerAlert
from cmdb.utils.datetime_utils import ensure_utc, utcnow
from cmdb.utils.exceptions import AlertDeliveryError

load_dotenv()
logger = logging.getLogger(__name__)

ALERTMANAGER_URL = os.getenv("ALERTMANAGER_URL", "")
ALERTMANAGER_TIMEOUT_SECONDS = 30.0

ALERT_NAME = "SSLCertificateExpiring"
CRITICAL_WITHIN_DAYS = 7
WARNING_WITHIN_DAYS = 30

SECONDS_PER_DAY = 86400


def days_until(expires_at: datetime, now: datetime) -> int:
    """Whole days left, truncated toward zero"""
    return int((ensure_utc(expires_at) - now).total_seconds() / SECONDS_PER_DAY)


def classify_expiry(days: int) -> Optional[str]:
    """Severity for a certificate `days` away from expiry, None when healthy"""
    if days <= CRITICAL_WITHIN_DAYS:
        return "critical"
    if days <= WARNING_WITHIN_DAYS:
        return "warning"
    return None


def expiry_summary(domain: str, days: int) -> str:
    if days < 0:
        return f"SSL certificate for {domain} has EXPIRED"
    return f"SSL certificate for {domain} expires in {days} days"


def build_expiry_alerts(
    certificates: Iterable[SSLCertificate], now: datetime
) -> List[AlertmanagerAlert]:
    """
    Translate certificate state at `now` into an Alertmanager batch.

    Input order is kept. Certificates more than 30 days from expiry are
    skipped. endsAt is left unset so Alertmanager applies its resolve timeout.
    """
    alerts = []
    for cert in certificates:
        days = days_until(cert.expires_at, now)
        severity = classify_expiry(days)
        if severity is None:
            continue

        issuer = cert.issuer or ""
        expires_at = ensure_utc(cert.expires_at)
        alerts.append(
            AlertmanagerAlert(
                labels={
                    "alertname": ALERT_NAME,
                    "severity": severity,
                    "domain": cert.domain,
                    "issuer": issuer,
                    "server_id": cert.server_id,
                },
                annotations={
                    "summary": expiry_summary(cert.domain, days),
                    "description": (
                        f"Certificate issued by {issuer} expires at "
                        f"{expires_at.strftime('%Y-%m-%d %H:%M:%S')}"
                    ),
                },
                startsAt=now,
            )
        )
    return alerts


class AlertService:
    """Service for publishing certificate alerts to Alertmanager"""

    def __init__(self):
        self.default_url = ALERTMANAGER_URL
        self.timeout = ALERTMANAGER_TIMEOUT_SECONDS

    def resolve_url(self, alertmanager_url: Optional[str]) -> str:
        """
        Pick the receiver: request value first, then ALERTMANAGER_URL

        Raises:
            ValueError: If neither is set
        """
        url = (alertmanager_url or self.default_url or "").strip()
        if not url:
            raise ValueError("alertmanager_url is required")
        return url.rstrip("/")

    async def post_alerts(self, url: str, alerts: List[AlertmanagerAlert]) -> None:
        """
        POST one batch to <url>/api/v1/alerts

        Raises:
            AlertDeliveryError: transport failure or non-200 answer
        """
        payload = [
            alert.model_dump(mode="json", exclude_none=True) for alert in alerts
        ]

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{url}/api/v1/alerts",
                    json=payload,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach Alertmanager at {url}: {str(e)}")
            raise AlertDeliveryError(f"Failed to send alerts: {str(e)}")

        if response.status_code != 200:
            logger.error(f"Alertmanager at {url} returned {response.status_code}")
            raise AlertDeliveryError(
                f"Alertmanager returned status: {response.status_code}",
                status_code=response.status_code,
            )

    async def send_expiry_alerts(
        self, db: AsyncSession, alertmanager_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build the expiry batch over every certificate and deliver it

        Returns:
            Response body with message, sent count and (when sent) the alerts

        Raises:
            ValueError: If no receiver URL is configured
            AlertDeliveryError: If delivery fails; nothing is retried
        """
        url = self.resolve_url(alertmanager_url)

        certificates = await get_ssl_repository(db).list_all()
        alerts = build_expiry_alerts(certificates, utcnow())

        if not alerts:
            logger.info("No expiring certificates, nothing sent")
            return {"message": "No expiring certificates found", "sent": 0}

        await self.post_alerts(url, alerts)

        logger.info(f"Sent {len(alerts)} certificate alerts to {url}")
        return {
            "message": "Alerts sent successfully",
            "sent": len(alerts),
            "alerts": [
                alert.model_dump(mode="json", exclude_none=True) for alert in alerts
            ],
        }


alert_service = AlertService()
