from pydantic import Field

from features.chat.telegram.model.message import Message
from features.chat.telegram.model.telegram_object import TelegramObject
from features.chat.telegram.model.user import User


class CallbackQuery(TelegramObject):
    """https://core.telegram.org/bots/api#callbackquery"""
    id: str
    from_user: User = Field(alias = "from")
    data: str | None = None  # up to 64 bytes, not enforced here
    message: Message | None = None
    inline_message_id: str | None = None
    chat_instance: str | None = None
    game_short_name: str | None = None
