"""
Metric Ingest Route - authenticated by API key
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.session import get_db
from cmdb.services.api_keys_service import api_key_service
from cmdb.utils.exceptions import InvalidAPIKeyError
from cmdb.utils.responses import error_response

logger = logging.getLogger(__name__)
router = APIRouter()

api_key_scheme = APIKeyHeader(
    name="X-API-Key",
    auto_error=False,
    scheme_name="API Key",
    description="Enter your API key (format: cmdb_...)",
)


@router.post("/metrics")
async def ingest_metrics(
    request: Request,
    api_key: Optional[str] = Depends(api_key_scheme),
    db: AsyncSession = Depends(get_db),
):
    """
    Accept a JSON metrics document from an agent

    The key is checked before the body is read. The payload is parsed and
    then discarded.
    """
    try:
        key = await api_key_service.verify_api_key(db=db, api_key=api_key)
    except InvalidAPIKeyError as e:
        return error_response(status_code=status.HTTP_401_UNAUTHORIZED, message=str(e))
    except Exception as e:
        logger.error(f"API key verification failed: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to verify API key",
        )

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    if not isinstance(payload, dict):
        logger.warning(f"Rejected non-object ingest payload from key {key.key_prefix}")
        return error_response(
            status_code=status.HTTP_400_BAD_REQUEST, message="Invalid request body"
        )

    logger.info(f"Received metrics from key {key.key_prefix}")
    return {"status": "received"}
