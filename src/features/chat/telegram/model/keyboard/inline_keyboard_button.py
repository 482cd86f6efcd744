from pydantic import BaseModel, ConfigDict


class InlineKeyboardButton(BaseModel):
    """https://core.telegram.org/bots/api#inlinekeyboardbutton"""
    model_config = ConfigDict(frozen = True)

    text: str
    callback_data: str | None = None
    url: str | None = None
    switch_inline_query: str | None = None
    switch_inline_query_current_chat: str | None = None
    pay: bool | None = None

    @classmethod
    def callback_button(cls, text: str, callback_data: str) -> "InlineKeyboardButton":
        return cls(text = text, callback_data = callback_data)

    @classmethod
    def url_button(cls, text: str, url: str) -> "InlineKeyboardButton":
        return cls(text = text, url = url)

    def to_api_dict(self) -> dict:
        return self.model_dump(exclude_none = True)
