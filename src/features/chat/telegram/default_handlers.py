from features.chat.telegram.handlers.callback_query_handler import CallbackQueryHandler
from features.chat.telegram.handlers.command_handler import CommandHandler
from features.chat.telegram.handlers.text_handler import TextHandler
from features.chat.telegram.handlers.update_handler import UpdateHandler
from features.chat.telegram.model.keyboard.inline_keyboard_button import InlineKeyboardButton
from features.chat.telegram.model.keyboard.inline_keyboard_markup import InlineKeyboardMarkup
from features.chat.telegram.model.update import Update
from features.chat.telegram.sdk.telegram_bot_api import TelegramBotAPI
from util import log

MENU_PREFIX = "menu:"
MENU_PAGES = {
    "about": "I route every update to the first handler that claims it.",
    "help": "Send /start for the menu, or any text and I'll repeat it.",
}
HELP_TEXT = "Available commands:\n/start - show the menu\n/help - show this message"


class MenuCallbackHandler(CallbackQueryHandler):
    """Answers `menu:<page>` button presses by swapping the menu message's text."""

    def __init__(self):
        super().__init__(MENU_PREFIX, prefix_match = True, name = "menu")

    def handle(self, update: Update, bot_api: TelegramBotAPI):
        query = update.callback_query
        page = self.payload(update)
        text = MENU_PAGES.get(page)
        if text is None:
            log.d(f"Unknown menu page '{page}'")
            bot_api.answer_callback_query(query.id, text = "This button is no longer available")
            return
        bot_api.answer_callback_query(query.id)
        if query.message:
            bot_api.edit_message_text(
                text,
                chat_id = query.message.chat.id,
                message_id = query.message.message_id,
                reply_markup = menu_keyboard(),
            )


def menu_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup.single_row(
        *[InlineKeyboardButton.callback_button(page.capitalize(), f"{MENU_PREFIX}{page}") for page in MENU_PAGES],
    )


def build_default_handlers(bot_username: str | None = None) -> list[UpdateHandler]:
    """The stock handler set, in routing order. The echo catch-all stays last so commands win."""
    return [
        CommandHandler("/start", __greet, bot_username = bot_username, name = "start"),
        CommandHandler("/help", __send_help, bot_username = bot_username, name = "help"),
        MenuCallbackHandler(),
        TextHandler(TextHandler.Mode.any, action = __echo, name = "echo"),
    ]


def __greet(update: Update, bot_api: TelegramBotAPI):
    message = update.message
    name = message.from_user.first_name if message.from_user else "there"
    bot_api.send_text_message(message.chat.id, f"Hi {name}! Pick a page:", reply_markup = menu_keyboard())


def __send_help(update: Update, bot_api: TelegramBotAPI):
    bot_api.send_text_message(update.message.chat.id, HELP_TEXT)


def __echo(update: Update, bot_api: TelegramBotAPI):
    message = update.message
    bot_api.send_text_message(message.chat.id, message.text, reply_to_message_id = message.message_id)
