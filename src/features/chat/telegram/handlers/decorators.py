from typing import Callable

from features.chat.telegram.handlers.callback_query_handler import CallbackQueryHandler
from features.chat.telegram.handlers.command_handler import CommandHandler
from features.chat.telegram.handlers.text_handler import TextHandler
from features.chat.telegram.handlers.update_handler import HandlerAction


def on_command(command: str, bot_username: str | None = None) -> Callable[[HandlerAction], CommandHandler]:
    def decorator(action: HandlerAction) -> CommandHandler:
        return CommandHandler(command, action, bot_username = bot_username, name = action.__name__)

    return decorator


def on_text(text: str) -> Callable[[HandlerAction], TextHandler]:
    def decorator(action: HandlerAction) -> TextHandler:
        return TextHandler(TextHandler.Mode.exact, text, action, name = action.__name__)

    return decorator


def on_regex(pattern: str, flags: int = 0) -> Callable[[HandlerAction], TextHandler]:
    def decorator(action: HandlerAction) -> TextHandler:
        return TextHandler(TextHandler.Mode.regex, pattern, action, name = action.__name__, flags = flags)

    return decorator


def on_any_text(action: HandlerAction) -> TextHandler:
    return TextHandler(TextHandler.Mode.any, action = action, name = action.__name__)


def on_callback_query(data: str, prefix_match: bool = False) -> Callable[[HandlerAction], CallbackQueryHandler]:
    def decorator(action: HandlerAction) -> CallbackQueryHandler:
        return CallbackQueryHandler(data, action, prefix_match = prefix_match, name = action.__name__)

    return decorator
