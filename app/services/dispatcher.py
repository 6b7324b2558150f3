import logging
from collections.abc import Iterable, Iterator
from typing import Protocol

from app.core.config import settings
from app.core.errors import DirectoryError, DispatchError
from app.models.recipient import recipient_model
from app.schemas.notification import (
    AudienceType,
    BatchResult,
    DispatchSummary,
    NotificationContent,
)
from app.schemas.recipient import Recipient, is_valid_token
from app.services.messaging import messaging_service

logger = logging.getLogger(__name__)


class RecipientDirectory(Protocol):
    async def list_recipients(self) -> list[Recipient]: ...


class BulkSender(Protocol):
    async def send_multicast(self, tokens: list[str], content: NotificationContent): ...


def unique_tokens(recipients: Iterable[Recipient]) -> list[str]:
    """Valid tokens of the given records, deduplicated, in first-seen order."""
    return list(dict.fromkeys(r.token for r in recipients if is_valid_token(r.token)))


def chunked(tokens: list[str], size: int) -> Iterator[tuple[int, list[str]]]:
    for start in range(0, len(tokens), size):
        yield start, tokens[start : start + size]


class FanOutDispatcher:
    _instance: "FanOutDispatcher" = None

    def __init__(
        self,
        directory: RecipientDirectory = recipient_model,
        sender: BulkSender = messaging_service,
        batch_size: int = settings.FCM_BATCH_SIZE,
    ):
        self.directory = directory
        self.sender = sender
        self.batch_size = batch_size

    @classmethod
    def get_instance(cls) -> "FanOutDispatcher":
        if FanOutDispatcher._instance is None:
            FanOutDispatcher._instance = cls()
        return FanOutDispatcher._instance

    async def broadcast(self, content: NotificationContent) -> DispatchSummary:
        try:
            recipients = await self.directory.list_recipients()
        except Exception as e:
            logger.error(f"Error loading recipients: {e}")
            raise DirectoryError(str(e)) from e

        tokens = unique_tokens(recipients)
        if not tokens:
            logger.info("Broadcast skipped: no recipient has a valid token")
            return DispatchSummary(
                success=False,
                error="No tokens",
                message="No recipient has a registered push token",
            )

        batches: list[BatchResult] = []
        for start, batch in chunked(tokens, self.batch_size):
            try:
                response = await self.sender.send_multicast(batch, content)
            except Exception as e:
                logger.error(
                    f"Batch at offset {start} failed after {len(batches)} completed batches: {e}"
                )
                raise DispatchError(str(e)) from e

            logger.info(
                f"Batch {start}-{start + len(batch) - 1}: "
                f"{response.success_count} succeeded, {response.failure_count} failed"
            )
            batches.append(
                BatchResult(
                    index=start,
                    size=len(batch),
                    success_count=response.success_count,
                    failure_count=response.failure_count,
                )
            )

        return DispatchSummary(
            success=True,
            message="Notification sent",
            audience=AudienceType.ALL,
            total_tokens=len(tokens),
            success_count=sum(b.success_count for b in batches),
            failure_count=sum(b.failure_count for b in batches),
            batches=batches,
        )


fan_out_dispatcher = FanOutDispatcher.get_instance()
