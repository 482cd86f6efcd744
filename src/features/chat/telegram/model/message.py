from typing import Optional

from pydantic import Field

from features.chat.telegram.model.attachment.document import Document
from features.chat.telegram.model.attachment.photo_size import PhotoSize
from features.chat.telegram.model.chat import Chat
from features.chat.telegram.model.telegram_object import TelegramObject
from features.chat.telegram.model.user import User


class Message(TelegramObject):
    """https://core.telegram.org/bots/api#message"""
    message_id: int
    chat: Chat
    date: int
    text: str | None = None
    from_user: User | None = Field(None, alias = "from")
    reply_to_message: Optional["Message"] = None
    photo: tuple[PhotoSize, ...] | None = None  # ascending by resolution
    document: Document | None = None
    caption: str | None = None
    edit_date: int | None = None

    def has_photo(self) -> bool:
        return bool(self.photo)

    def has_document(self) -> bool:
        return self.document is not None

    def best_photo(self) -> PhotoSize | None:
        if not self.photo:
            return None
        return self.photo[-1]


Message.model_rebuild()
