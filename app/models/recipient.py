import logging
from typing import TYPE_CHECKING

from app.core.config import settings
from app.database.mongodb import db
from app.schemas.recipient import Recipient

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection

logger = logging.getLogger(__name__)


class RecipientModel:
    _instance: "RecipientModel" = None

    def __init__(self, token_field: str = settings.RECIPIENT_TOKEN_FIELD):
        if RecipientModel._instance is not None:
            raise Exception("This class is a singleton!")
        self.collection: AsyncIOMotorCollection = db[settings.RECIPIENT_COLLECTION]
        self.token_field = token_field

    @classmethod
    def get_instance(cls) -> "RecipientModel":
        if RecipientModel._instance is None:
            RecipientModel._instance = cls()
        return RecipientModel._instance

    async def list_recipients(self) -> list[Recipient]:
        docs = await self.collection.find({}, {self.token_field: 1}).to_list(length=None)
        logger.info(f"Loaded {len(docs)} recipient records from '{self.collection.name}'")
        return [self._to_recipient(doc) for doc in docs]

    def _to_recipient(self, doc: dict) -> Recipient:
        return Recipient(id=doc["_id"], token=doc.get(self.token_field))


recipient_model = RecipientModel.get_instance()
