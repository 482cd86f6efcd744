from pydantic import BaseModel, ConfigDict

from features.chat.telegram.model.keyboard.keyboard_button import KeyboardButton


class ReplyKeyboardMarkup(BaseModel):
    """https://core.telegram.org/bots/api#replykeyboardmarkup"""
    model_config = ConfigDict(frozen = True)

    keyboard: tuple[tuple[KeyboardButton, ...], ...]
    resize_keyboard: bool | None = True
    one_time_keyboard: bool | None = None
    input_field_placeholder: str | None = None
    selective: bool | None = None
    is_persistent: bool | None = None

    @classmethod
    def single_row(cls, *buttons: KeyboardButton) -> "ReplyKeyboardMarkup":
        return cls(keyboard = (buttons,))

    @classmethod
    def column(cls, *buttons: KeyboardButton) -> "ReplyKeyboardMarkup":
        return cls(keyboard = tuple((button,) for button in buttons))

    @classmethod
    def one_time(cls, keyboard: list[list[KeyboardButton]]) -> "ReplyKeyboardMarkup":
        return cls(keyboard = tuple(tuple(row) for row in keyboard), one_time_keyboard = True)

    def to_api_dict(self) -> dict:
        data = self.model_dump(exclude_none = True, exclude = {"keyboard"})
        data["keyboard"] = [[button.to_api_dict() for button in row] for row in self.keyboard]
        return data
