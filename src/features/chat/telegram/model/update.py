from enum import Enum

from features.chat.telegram.model.callback_query import CallbackQuery
from features.chat.telegram.model.message import Message
from features.chat.telegram.model.telegram_object import TelegramObject


class UpdateKind(Enum):
    """
    Payload kinds an update can carry, in chat resolution priority order.

    Each value is also the name of the corresponding field on ``Update``. New kinds are
    added by appending a member here and a matching optional field on the model; handlers
    that query the existing kinds keep working unchanged.
    """
    message = "message"
    edited_message = "edited_message"
    callback_query = "callback_query"


class Update(TelegramObject):
    """https://core.telegram.org/bots/api#update"""
    update_id: int
    message: Message | None = None
    edited_message: Message | None = None
    callback_query: CallbackQuery | None = None

    @property
    def kind(self) -> UpdateKind | None:
        """The populated payload kind, or None for updates this model does not know how to read."""
        for kind in UpdateKind:
            if getattr(self, kind.value) is not None:
                return kind
        return None

    def is_message(self) -> bool:
        return self.message is not None

    def is_edited_message(self) -> bool:
        return self.edited_message is not None

    def is_callback_query(self) -> bool:
        return self.callback_query is not None

    @property
    def effective_message(self) -> Message | None:
        if self.message:
            return self.message
        if self.edited_message:
            return self.edited_message
        if self.callback_query:
            return self.callback_query.message
        return None

    @property
    def chat_id(self) -> int | None:
        message = self.effective_message
        return message.chat.id if message else None
