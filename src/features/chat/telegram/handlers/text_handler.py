import re
from enum import Enum

from features.chat.telegram.handlers.update_handler import HandlerAction, UpdateHandler
from features.chat.telegram.model.update import Update


class TextHandler(UpdateHandler):
    """Claims text messages: any of them, one exact text, or the ones a regular expression finds a match in."""

    class Mode(Enum):
        any = "any"
        exact = "exact"
        regex = "regex"

    __mode: Mode
    __text: str | None
    __pattern: re.Pattern | None

    def __init__(
        self,
        mode: Mode = Mode.any,
        text: str | None = None,
        action: HandlerAction | None = None,
        name: str | None = None,
        flags: int = 0,
    ):
        super().__init__(action, name)
        if mode != TextHandler.Mode.any and text is None:
            raise ValueError(f"Text handler in '{mode.value}' mode needs a text or a pattern")
        self.__mode = mode
        self.__text = text
        self.__pattern = re.compile(text, flags) if mode == TextHandler.Mode.regex else None

    @property
    def mode(self) -> Mode:
        return self.__mode

    def describe(self) -> str:
        if self.__mode == TextHandler.Mode.any:
            return "TextHandler(any)"
        return f"TextHandler({self.__mode.value}: {self.__text})"

    def supports(self, update: Update) -> bool:
        text = self.__message_text(update)
        if text is None:
            return False
        match self.__mode:
            case TextHandler.Mode.any:
                return True
            case TextHandler.Mode.exact:
                return text == self.__text
            case TextHandler.Mode.regex:
                return self.__pattern.search(text) is not None
        return False

    def match(self, update: Update) -> re.Match | None:
        """Regex captures for the update's text; always None outside of regex mode."""
        text = self.__message_text(update)
        if self.__pattern is None or text is None:
            return None
        return self.__pattern.search(text)

    @staticmethod
    def __message_text(update: Update) -> str | None:
        if not update.message:
            return None
        return update.message.text
