from pydantic import BaseModel, ConfigDict

from features.chat.telegram.model.keyboard.inline_keyboard_button import InlineKeyboardButton


class InlineKeyboardMarkup(BaseModel):
    """https://core.telegram.org/bots/api#inlinekeyboardmarkup"""
    model_config = ConfigDict(frozen = True)

    inline_keyboard: tuple[tuple[InlineKeyboardButton, ...], ...]

    @classmethod
    def single_row(cls, *buttons: InlineKeyboardButton) -> "InlineKeyboardMarkup":
        return cls(inline_keyboard = (buttons,))

    @classmethod
    def column(cls, *buttons: InlineKeyboardButton) -> "InlineKeyboardMarkup":
        return cls(inline_keyboard = tuple((button,) for button in buttons))

    def to_api_dict(self) -> dict:
        return {
            "inline_keyboard": [[button.to_api_dict() for button in row] for row in self.inline_keyboard],
        }
