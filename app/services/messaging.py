import asyncio
import base64
import json
import logging
from collections.abc import Callable
from datetime import timedelta
from enum import Enum

import firebase_admin
from firebase_admin import App, credentials, messaging

from app.core.config import settings
from app.core.errors import CollaboratorInitError
from app.schemas.notification import NotificationContent

logger = logging.getLogger(__name__)


class InitState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


def load_service_account() -> dict:
    """
    Read the Firebase service account from settings.
    Sources are tried in order: base64 JSON, raw JSON, path to a key file.
    """
    try:
        if settings.FIREBASE_SERVICE_ACCOUNT_B64:
            decoded = base64.b64decode(settings.FIREBASE_SERVICE_ACCOUNT_B64).decode("utf-8")
            account, source = json.loads(decoded), "B64"
        elif settings.FIREBASE_SERVICE_ACCOUNT:
            account, source = json.loads(settings.FIREBASE_SERVICE_ACCOUNT), "RAW"
        elif settings.FIREBASE_CREDENTIALS_PATH:
            with open(settings.FIREBASE_CREDENTIALS_PATH, encoding="utf-8") as fh:
                account, source = json.load(fh), "FILE"
        else:
            raise CollaboratorInitError(
                "Firebase service account not found: set FIREBASE_SERVICE_ACCOUNT_B64, "
                "FIREBASE_SERVICE_ACCOUNT or FIREBASE_CREDENTIALS_PATH"
            )
    except (ValueError, OSError) as e:
        raise CollaboratorInitError(f"Invalid Firebase service account: {e}") from e

    logger.info(f"Service account ({source}) loaded, project_id: {account.get('project_id')}")
    return account


def initialize_firebase_app() -> App:
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    account = load_service_account()
    try:
        app = firebase_admin.initialize_app(credentials.Certificate(account))
    except ValueError as e:
        raise CollaboratorInitError(f"Invalid Firebase credentials: {e}") from e
    logger.info("Firebase Admin initialized")
    return app


class FirebaseAppHandle:
    """
    Initialize-once handle for the Firebase app.

    Callers that arrive while an attempt is in flight await that same attempt.
    A failed attempt is reported to all of its waiters and the next call starts
    a new one. Once ready, the app is reused for the life of the process.
    """

    def __init__(self, initializer: Callable[[], App] = initialize_firebase_app):
        self._initializer = initializer
        self._state = InitState.UNINITIALIZED
        self._app: App | None = None
        self._pending: asyncio.Future | None = None

    @property
    def state(self) -> InitState:
        return self._state

    async def get_app(self) -> App:
        if self._state is InitState.READY:
            return self._app
        if self._pending is None:
            self._state = InitState.INITIALIZING
            self._pending = asyncio.ensure_future(self._initialize())
        return await asyncio.shield(self._pending)

    async def _initialize(self) -> App:
        try:
            app = await asyncio.to_thread(self._initializer)
        except CollaboratorInitError as e:
            self._fail(e)
            raise
        except Exception as e:
            self._fail(e)
            raise CollaboratorInitError(str(e)) from e
        finally:
            self._pending = None

        self._app = app
        self._state = InitState.READY
        return app

    def _fail(self, error: Exception) -> None:
        self._state = InitState.FAILED
        logger.error(f"Firebase initialization error: {error}")


def _android_config() -> messaging.AndroidConfig:
    return messaging.AndroidConfig(
        priority="high",
        ttl=timedelta(seconds=settings.NOTIFICATION_TTL_SECONDS),
        notification=messaging.AndroidNotification(
            channel_id=settings.ANDROID_CHANNEL_ID,
            priority="high",
            default_sound=True,
            default_vibrate_timings=True,
        ),
    )


def _apns_config(content: NotificationContent) -> messaging.APNSConfig:
    return messaging.APNSConfig(
        headers={"apns-priority": "10", "apns-push-type": "alert"},
        payload=messaging.APNSPayload(
            aps=messaging.Aps(
                alert=messaging.ApsAlert(title=content.title, body=content.body),
                sound="default",
                badge=1,
                content_available=True,
            )
        ),
    )


def build_message(
    content: NotificationContent, *, token: str | None = None, topic: str | None = None
) -> messaging.Message:
    return messaging.Message(
        notification=messaging.Notification(title=content.title, body=content.body),
        data=content.data,
        android=_android_config(),
        apns=_apns_config(content),
        token=token,
        topic=topic,
    )


def build_multicast_message(
    content: NotificationContent, tokens: list[str]
) -> messaging.MulticastMessage:
    return messaging.MulticastMessage(
        tokens=tokens,
        notification=messaging.Notification(title=content.title, body=content.body),
        data=content.data,
        android=_android_config(),
        apns=_apns_config(content),
    )


class MessagingService:
    _instance: "MessagingService" = None

    def __init__(self, app_handle: FirebaseAppHandle | None = None):
        if MessagingService._instance is not None:
            raise Exception("This class is a singleton!")
        self.app_handle = app_handle or FirebaseAppHandle()

    @classmethod
    def get_instance(cls) -> "MessagingService":
        if MessagingService._instance is None:
            MessagingService._instance = cls()
        return MessagingService._instance

    async def ensure_initialized(self) -> App:
        return await self.app_handle.get_app()

    async def send_to_token(self, token: str, content: NotificationContent) -> str:
        app = await self.ensure_initialized()
        message_id = await asyncio.to_thread(
            messaging.send, build_message(content, token=token), app=app
        )
        logger.info(f"Single notification sent: {message_id}")
        return message_id

    async def send_to_topic(self, topic: str, content: NotificationContent) -> str:
        app = await self.ensure_initialized()
        message_id = await asyncio.to_thread(
            messaging.send, build_message(content, topic=topic), app=app
        )
        logger.info(f"Topic notification sent to '{topic}': {message_id}")
        return message_id

    async def send_multicast(
        self, tokens: list[str], content: NotificationContent
    ) -> messaging.BatchResponse:
        app = await self.ensure_initialized()
        response = await asyncio.to_thread(
            messaging.send_each_for_multicast,
            build_multicast_message(content, tokens),
            app=app,
        )
        for i, result in enumerate(response.responses):
            if not result.success:
                logger.warning(f"Notification to token #{i} failed: {result.exception}")
        logger.info(
            f"Multicast sent to {len(tokens)} tokens: "
            f"{response.success_count} succeeded, {response.failure_count} failed"
        )
        return response


messaging_service = MessagingService.get_instance()
