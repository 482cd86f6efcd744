from features.chat.telegram.model.telegram_object import TelegramObject


class Chat(TelegramObject):
    """https://core.telegram.org/bots/api#chat"""
    id: int
    type: str
    title: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    is_forum: bool | None = None
    is_direct_messages: bool | None = None

    @property
    def is_private(self) -> bool:
        return self.type == "private"
