import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.errors import AuthError
from app.schemas.notification import (
    NotificationResult,
    SendNotificationRequest,
)
from app.services.notification import notification_service

router = APIRouter()

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)
bearer = HTTPBearer(auto_error=False)


async def verify_api_key(
    header_key: Annotated[str | None, Depends(api_key_header)],
    bearer_creds: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
) -> None:
    api_key = header_key or (bearer_creds.credentials.strip() if bearer_creds else None)
    if not api_key or not secrets.compare_digest(
        api_key.encode("utf-8"), settings.API_KEY.encode("utf-8")
    ):
        logger.warning("Rejected notification request with an invalid API key")
        raise AuthError()


@router.options("/send-notification", include_in_schema=False)
async def send_notification_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/send-notification",
    response_model=NotificationResult,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_api_key)],
)
async def send_notification(
    notification_request: Annotated[SendNotificationRequest, Body(...)],
):
    return await notification_service.send_notification(notification_request)
