from features.chat.telegram.handlers.update_handler import HandlerAction, UpdateHandler
from features.chat.telegram.model.update import Update
from util import log


class CommandHandler(UpdateHandler):
    """
    Claims messages whose text is a bot command, like `/start`, `/start foo bar` or `/start@my_bot`.

    When `bot_username` is given, a tagged command only matches if the tag names this bot.
    """

    __command: str
    __bot_username: str | None

    def __init__(
        self,
        command: str,
        action: HandlerAction | None = None,
        bot_username: str | None = None,
        name: str | None = None,
    ):
        super().__init__(action, name)
        command = command.strip()
        if not command:
            raise ValueError("Command cannot be blank")
        self.__command = command if command.startswith("/") else f"/{command}"
        self.__bot_username = bot_username.lstrip("@").lower() if bot_username else None

    @property
    def command(self) -> str:
        return self.__command

    def describe(self) -> str:
        return f"CommandHandler({self.__command})"

    def supports(self, update: Update) -> bool:
        text = self.__text(update)
        if text is None:
            return False
        if text == self.__command or text.startswith(f"{self.__command} "):
            return True
        if not text.startswith(f"{self.__command}@"):
            return False
        if not self.__bot_username:
            return True
        # bot is sometimes tagged like this: /start@my_bot
        bot_tag = text.split(" ", 1)[0][len(self.__command) + 1:]
        if bot_tag.lower() != self.__bot_username:
            log.t(f"Command '{self.__command}' is tagged for another bot: '{bot_tag}'")
            return False
        return True

    def arguments(self, update: Update) -> list[str]:
        return self.arguments_string(update).split()

    def arguments_string(self, update: Update) -> str:
        text = self.__text(update) or ""
        parts = text.split(" ", 1)
        return parts[1].strip() if len(parts) > 1 else ""

    @staticmethod
    def __text(update: Update) -> str | None:
        if not update.message or update.message.text is None:
            return None
        return update.message.text
