"""
Prometheus Scrape Route
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.session import get_db
from cmdb.services.metrics_service import PROMETHEUS_CONTENT_TYPE, metrics_service
from cmdb.utils.responses import error_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/metrics", response_class=Response)
async def prometheus_metrics(db: AsyncSession = Depends(get_db)):
    """SSL certificate gauges in Prometheus text format (no authentication)"""
    try:
        body = await metrics_service.ssl_metrics(db=db)
    except Exception as e:
        logger.error(f"Failed to render metrics: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch certificates",
        )
    return Response(content=body, media_type=PROMETHEUS_CONTENT_TYPE)
