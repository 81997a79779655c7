"""
SSL Certificate Routes and Alertmanager publishing
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.session import get_db
from cmdb.schemas.alert_schemas import SendAlertsRequest
from cmdb.schemas.ssl_schemas import (
    SSLCertificateCreate,
    SSLCertificateResponse,
    SSLCertificateUpdate,
)
from cmdb.services.alert_service import alert_service
from cmdb.services.ssl_service import ssl_service
from cmdb.utils.auth import Identity, get_identity, require_admin
from cmdb.utils.exceptions import AlertDeliveryError, NotFoundError, PermissionDeniedError
from cmdb.utils.responses import error_response, success_response

logger = logging.getLogger(__name__)
router = APIRouter()


def _not_found(message: str = "Certificate not found"):
    return error_response(status_code=status.HTTP_404_NOT_FOUND, message=message)


@router.get("", response_model=List[SSLCertificateResponse])
async def list_certificates(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Certificates on visible servers, soonest expiry first"""
    try:
        return await ssl_service.list_certificates(db=db, identity=identity)
    except Exception as e:
        logger.error(f"Failed to list certificates: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch certificates",
        )


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=SSLCertificateResponse
)
async def create_certificate(
    request: SSLCertificateCreate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        certificate = await ssl_service.create_certificate(db=db, data=request)
        return success_response(
            status_code=status.HTTP_201_CREATED,
            data=SSLCertificateResponse.model_validate(certificate),
        )
    except NotFoundError as e:
        return _not_found(str(e))
    except Exception as e:
        logger.error(f"Failed to create certificate: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to create certificate",
        )


@router.post("/send-alerts")
async def send_alerts(
    request: Optional[SendAlertsRequest] = None,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Push expiry alerts for every certificate to Alertmanager

    Certificates within 7 days of expiry (or expired) are critical, within
    30 days warning. The receiver is `alertmanager_url` from the body or the
    ALERTMANAGER_URL environment variable.
    """
    url = request.alertmanager_url if request else None
    try:
        return await alert_service.send_expiry_alerts(db=db, alertmanager_url=url)
    except ValueError as e:
        return error_response(status_code=status.HTTP_400_BAD_REQUEST, message=str(e))
    except AlertDeliveryError as e:
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, message=str(e)
        )
    except Exception as e:
        logger.error(f"Failed to send alerts: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch certificates",
        )


@router.get("/{certificate_id}", response_model=SSLCertificateResponse)
async def get_certificate(
    certificate_id: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await ssl_service.get_certificate(
            db=db, identity=identity, certificate_id=certificate_id
        )
    except NotFoundError:
        return _not_found()
    except PermissionDeniedError as e:
        return error_response(status_code=status.HTTP_403_FORBIDDEN, message=str(e))
    except Exception as e:
        logger.error(
            f"Failed to fetch certificate {certificate_id}: {str(e)}", exc_info=True
        )
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to fetch certificate",
        )


@router.put("/{certificate_id}", response_model=SSLCertificateResponse)
async def update_certificate(
    certificate_id: str,
    request: SSLCertificateUpdate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await ssl_service.update_certificate(
            db=db, certificate_id=certificate_id, data=request
        )
    except NotFoundError as e:
        return _not_found(str(e))
    except Exception as e:
        logger.error(
            f"Failed to update certificate {certificate_id}: {str(e)}", exc_info=True
        )
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to update certificate",
        )


@router.delete("/{certificate_id}")
async def delete_certificate(
    certificate_id: str,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        await ssl_service.delete_certificate(db=db, certificate_id=certificate_id)
        return {"message": "Certificate deleted successfully"}
    except NotFoundError:
        return _not_found()
    except Exception as e:
        logger.error(
            f"Failed to delete certificate {certificate_id}: {str(e)}", exc_info=True
        )
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Failed to delete certificate",
        )
