from abc import ABC, abstractmethod
from typing import Callable

from features.chat.telegram.model.update import Update
from features.chat.telegram.sdk.telegram_bot_api import TelegramBotAPI

HandlerAction = Callable[[Update, TelegramBotAPI], None]


class UpdateHandler(ABC):
    """
    Claims updates through `supports` and processes the claimed ones in `handle`.

    `supports` must be a pure predicate: it is evaluated from scratch for every update and
    may be called without `handle` following it. Concrete handlers either receive an
    `action` callable or override `handle`.
    """

    _action: HandlerAction | None
    _name: str | None

    def __init__(self, action: HandlerAction | None = None, name: str | None = None):
        self._action = action
        self._name = name

    @property
    def name(self) -> str:
        return self._name or self.describe()

    def describe(self) -> str:
        return type(self).__name__

    @abstractmethod
    def supports(self, update: Update) -> bool:
        raise NotImplementedError()

    def handle(self, update: Update, bot_api: TelegramBotAPI):
        if self._action is None:
            raise NotImplementedError(f"Handler '{self.name}' has no action")
        self._action(update, bot_api)

    def __repr__(self) -> str:
        return f"<{self.name}>"
