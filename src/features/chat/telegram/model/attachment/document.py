from features.chat.telegram.model.attachment.photo_size import PhotoSize
from features.chat.telegram.model.telegram_object import TelegramObject


class Document(TelegramObject):
    """https://core.telegram.org/bots/api#document"""
    file_id: str
    file_unique_id: str
    thumbnail: PhotoSize | None = None
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None
