"""
Metrics Service - Prometheus text exposition of certificate expiry
"""

from datetime import datetime
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.ssl_repository import get_ssl_repository
from cmdb.models.ssl_certificate_model import SSLCertificate
from cmdb.utils.datetime_utils import ensure_utc, utcnow

PROMETHEUS_CONTENT_TYPE = "text/plain; version=0.0.4"

SECONDS_PER_DAY = 86400


def escape_label_value(value: str) -> str:
    """Escape backslash, double quote and newline per the exposition format"""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def render_ssl_metrics(certificates: Iterable[SSLCertificate], now: datetime) -> str:
    """Render both gauges for every certificate, expired ones as negative days"""
    certificates = list(certificates)
    lines = [
        "# HELP ssl_certificate_expiry_days Days until SSL certificate expires",
        "# TYPE ssl_certificate_expiry_days gauge",
    ]

    for cert in certificates:
        days = (ensure_utc(cert.expires_at) - now).total_seconds() / SECONDS_PER_DAY
        lines.append(
            "ssl_certificate_expiry_days{"
            f'domain="{escape_label_value(cert.domain)}",'
            f'issuer="{escape_label_value(cert.issuer or "")}",'
            f'server_id="{escape_label_value(cert.server_id)}"'
            f"}} {days:.2f}"
        )

    lines.extend(
        [
            "",
            "# HELP ssl_certificate_auto_renew SSL certificate auto-renew status "
            "(1=enabled, 0=disabled)",
            "# TYPE ssl_certificate_auto_renew gauge",
        ]
    )

    for cert in certificates:
        lines.append(
            "ssl_certificate_auto_renew{"
            f'domain="{escape_label_value(cert.domain)}",'
            f'server_id="{escape_label_value(cert.server_id)}"'
            f"}} {1 if cert.auto_renew else 0}"
        )

    return "\n".join(lines) + "\n"


class MetricsService:
    """Service for the /metrics scrape endpoint"""

    async def ssl_metrics(self, db: AsyncSession) -> str:
        certificates = await get_ssl_repository(db).list_all()
        return render_ssl_metrics(certificates, utcnow())


metrics_service = MetricsService()
