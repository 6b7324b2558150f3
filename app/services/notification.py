import logging

from app.core.errors import DispatchError, NotificationError, ValidationError
from app.schemas.notification import (
    AudienceType,
    DispatchSummary,
    MulticastResult,
    NotificationContent,
    SendNotificationRequest,
    SendNotificationResponse,
)
from app.services.dispatcher import FanOutDispatcher, fan_out_dispatcher
from app.services.messaging import MessagingService, messaging_service
from app.utils.payload import build_notification_content

logger = logging.getLogger(__name__)


class NotificationService:
    _instance: "NotificationService" = None

    def __init__(
        self,
        messaging_service: MessagingService = messaging_service,
        dispatcher: FanOutDispatcher = fan_out_dispatcher,
    ):
        if NotificationService._instance is not None:
            raise Exception("This class is a singleton!")
        self.messaging_service = messaging_service
        self.dispatcher = dispatcher

    @classmethod
    def get_instance(cls) -> "NotificationService":
        if NotificationService._instance is None:
            NotificationService._instance = cls()
        return NotificationService._instance

    async def send_notification(
        self, request: SendNotificationRequest
    ) -> SendNotificationResponse | DispatchSummary:
        audience = request.audience
        if audience is None:
            raise ValidationError("token, tokens, topic or all is required")

        await self.messaging_service.ensure_initialized()
        content = build_notification_content(request.title, request.body, request.data)

        if audience is AudienceType.ALL:
            return await self.dispatcher.broadcast(content)

        try:
            response = await self._send_direct(audience, request, content)
        except NotificationError:
            raise
        except Exception as e:
            logger.error(f"Error sending notification to {audience.value}: {e}")
            raise DispatchError(str(e)) from e

        return SendNotificationResponse(audience=audience, response=response)

    async def _send_direct(
        self,
        audience: AudienceType,
        request: SendNotificationRequest,
        content: NotificationContent,
    ) -> str | MulticastResult:
        if audience is AudienceType.TOPIC:
            return await self.messaging_service.send_to_topic(request.topic, content)
        if audience is AudienceType.TOKENS:
            batch = await self.messaging_service.send_multicast(request.tokens, content)
            return MulticastResult(
                success_count=batch.success_count, failure_count=batch.failure_count
            )
        return await self.messaging_service.send_to_token(request.token, content)


notification_service = NotificationService.get_instance()
